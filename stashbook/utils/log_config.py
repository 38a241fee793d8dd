"""Structured JSON logging"""
import logging
import sys
from datetime import datetime
from pythonjsonlogger import jsonlogger


class ServiceJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding timestamp, level and service name"""

    def __init__(self, *args, service='stashbook', **kwargs):
        super().__init__(*args, **kwargs)
        self.service = service

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record['timestamp'] = datetime.utcnow().isoformat()
        log_record['level'] = record.levelname
        log_record['service'] = self.service


def setup_logging(app):
    """Send application and library logs to stdout as JSON"""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ServiceJsonFormatter(
        '%(timestamp)s %(level)s %(name)s %(message)s',
        service=app.config.get('SERVICE_NAME', 'stashbook')
    ))

    # app.logger is the 'stashbook' logger, parent of every module logger
    app.logger.handlers.clear()
    app.logger.addHandler(handler)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))
    app.logger.propagate = False
