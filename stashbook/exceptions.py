"""Application exceptions"""


class StashbookError(Exception):
    """Base exception for the application"""


class InvalidRoleError(StashbookError, ValueError):
    """A role value outside the known role set"""


class InvalidStatusError(StashbookError, ValueError):
    """A user status value outside the known status set"""


class ScheduleError(StashbookError, ValueError):
    """Loan terms cannot produce a repayment schedule"""
