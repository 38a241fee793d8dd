"""Database models for Stashbook"""
import json
from datetime import datetime
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from stashbook import db, login_manager
from stashbook.utils.access import Principal, Role, UserStatus, coerce_role
from stashbook.utils.finance import derive_status, money_str

# Loan lifecycle
LOAN_STATUSES = ('PENDING', 'ACTIVE', 'CLOSED', 'DEFAULTED')

# Ledger entry kinds
TRANSACTION_TYPES = ('DISBURSEMENT', 'REPAYMENT')

# Audit trail vocabularies
ENTITY_TYPES = ('USER', 'LOAN', 'REPAYMENT', 'STASH', 'OTHER')
ACTION_TYPES = ('CREATE', 'READ', 'UPDATE', 'DELETE', 'LOGIN', 'LOGOUT')


@login_manager.user_loader
def load_user(user_id):
    user = db.session.get(User, int(user_id))
    # Deactivated accounts lose their session on the next request
    if user is None or not user.is_active:
        return None
    return user


def _iso(value):
    return value.isoformat() if value else None


def _money(value):
    return money_str(value) if value is not None else None


# User and Authentication Models
class User(UserMixin, db.Model):
    """Application user"""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    first_name = db.Column(db.String(100))
    last_name = db.Column(db.String(100))
    role = db.Column(db.String(20), nullable=False, default=Role.USER.value)  # USER, ADMIN, SUPERADMIN
    status = db.Column(db.String(20), nullable=False, default=UserStatus.PENDING.value)  # PENDING, ACTIVE, DEACTIVATED
    verified = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    activities = db.relationship('ActivityLog', backref='user', lazy='dynamic', cascade='all, delete-orphan')

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def is_active(self):
        """Only approved accounts may hold a session"""
        return self.status == UserStatus.ACTIVE.value

    @property
    def principal(self):
        """The request actor for access checks; role is None when unrecognised"""
        return Principal(id=self.id, role=coerce_role(self.role))

    @property
    def full_name(self):
        return ' '.join(part for part in (self.first_name, self.last_name) if part) or self.email

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'role': self.role,
            'status': self.status,
            'verified': bool(self.verified),
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
        }

    def __repr__(self):
        return f'<User {self.email}>'


# Capital contribution models
class Owner(db.Model):
    """Contributor to the lending pool"""
    __tablename__ = 'owners'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    contact_info = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    stashes = db.relationship('Stash', backref='owner', lazy='dynamic', cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'contactInfo': self.contact_info,
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
        }

    def __repr__(self):
        return f'<Owner {self.name}>'


class Stash(db.Model):
    """Monthly contribution into the lending pool"""
    __tablename__ = 'stashes'

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('owners.id'), nullable=False, index=True)
    month = db.Column(db.Date, nullable=False, index=True)
    amount = db.Column(db.Numeric(15, 2), nullable=False)
    remarks = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'ownerId': self.owner_id,
            'owner': {'id': self.owner.id, 'name': self.owner.name} if self.owner else None,
            'month': _iso(self.month),
            'amount': _money(self.amount),
            'remarks': self.remarks,
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
        }

    def __repr__(self):
        return f'<Stash {self.id}>'


# Lending models
class Borrower(db.Model):
    """Borrower receiving loans from the pool"""
    __tablename__ = 'borrowers'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False, index=True)
    contact_info = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    loans = db.relationship('Loan', backref='borrower', lazy='dynamic')

    def to_dict(self, include_loans=False):
        data = {
            'id': self.id,
            'name': self.name,
            'contactInfo': self.contact_info,
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
        }
        if include_loans:
            data['loans'] = [
                {'id': loan.id, 'principal': _money(loan.principal), 'status': loan.status}
                for loan in self.loans
            ]
        return data

    def __repr__(self):
        return f'<Borrower {self.name}>'


class Loan(db.Model):
    """Principal lent to a borrower"""
    __tablename__ = 'loans'

    id = db.Column(db.Integer, primary_key=True)
    borrower_id = db.Column(db.Integer, db.ForeignKey('borrowers.id'), nullable=False, index=True)
    principal = db.Column(db.Numeric(15, 2), nullable=False)
    interest_rate = db.Column(db.Numeric(5, 2), nullable=False)  # Percentage over the whole term
    start_date = db.Column(db.Date, nullable=False)
    maturity_date = db.Column(db.Date)
    status = db.Column(db.String(20), nullable=False, default='ACTIVE')  # PENDING, ACTIVE, CLOSED, DEFAULTED
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    repayments = db.relationship('Repayment', backref='loan', lazy='dynamic',
                                 cascade='all, delete-orphan', order_by='Repayment.due_date')
    transactions = db.relationship('Transaction', backref='loan', lazy='dynamic',
                                   cascade='all, delete-orphan', order_by='Transaction.date.desc()')

    def reference(self):
        return {
            'id': self.id,
            'principal': _money(self.principal),
            'borrower': {'id': self.borrower.id, 'name': self.borrower.name} if self.borrower else None,
        }

    def to_dict(self, include_children=False, now=None):
        data = {
            'id': self.id,
            'borrowerId': self.borrower_id,
            'borrower': {'id': self.borrower.id, 'name': self.borrower.name} if self.borrower else None,
            'principal': _money(self.principal),
            'interestRate': _money(self.interest_rate),
            'startDate': _iso(self.start_date),
            'maturityDate': _iso(self.maturity_date),
            'status': self.status,
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
        }
        if include_children:
            data['repayments'] = [r.to_dict(include_loan=False, now=now) for r in self.repayments]
            data['transactions'] = [t.to_dict(include_loan=False) for t in self.transactions]
        return data

    def __repr__(self):
        return f'<Loan {self.id}>'


class Repayment(db.Model):
    """Scheduled installment against a loan

    The status is never stored: it is derived from the due date, payment
    date and the clock every time it is read.
    """
    __tablename__ = 'repayments'

    id = db.Column(db.Integer, primary_key=True)
    loan_id = db.Column(db.Integer, db.ForeignKey('loans.id'), nullable=False, index=True)
    due_date = db.Column(db.Date, nullable=False, index=True)
    amount_due = db.Column(db.Numeric(15, 2), nullable=False)
    amount_paid = db.Column(db.Numeric(15, 2))
    payment_date = db.Column(db.Date)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def status_at(self, now=None):
        return derive_status(self.due_date, self.payment_date, now=now)

    @property
    def status(self):
        return self.status_at()

    def to_dict(self, include_loan=True, now=None):
        data = {
            'id': self.id,
            'loanId': self.loan_id,
            'dueDate': _iso(self.due_date),
            'amountDue': _money(self.amount_due),
            'amountPaid': _money(self.amount_paid),
            'paymentDate': _iso(self.payment_date),
            'status': self.status_at(now).value,
        }
        if include_loan and self.loan:
            data['loan'] = self.loan.reference()
        return data

    def __repr__(self):
        return f'<Repayment {self.id}>'


class Transaction(db.Model):
    """Money movement on a loan"""
    __tablename__ = 'transactions'

    id = db.Column(db.Integer, primary_key=True)
    loan_id = db.Column(db.Integer, db.ForeignKey('loans.id'), nullable=False, index=True)
    transaction_type = db.Column(db.String(20), nullable=False)  # DISBURSEMENT, REPAYMENT
    amount = db.Column(db.Numeric(15, 2), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self, include_loan=True):
        data = {
            'id': self.id,
            'loanId': self.loan_id,
            'transactionType': self.transaction_type,
            'amount': _money(self.amount),
            'date': _iso(self.date),
            'createdAt': _iso(self.created_at),
        }
        if include_loan and self.loan:
            data['loan'] = self.loan.reference()
        return data

    def __repr__(self):
        return f'<Transaction {self.id}>'


# Activity Log Model
class ActivityLog(db.Model):
    """Activity log for audit trail"""
    __tablename__ = 'activity_logs'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), index=True)
    entity_type = db.Column(db.String(20), nullable=False, index=True)  # USER, LOAN, REPAYMENT, STASH, OTHER
    entity_id = db.Column(db.Integer)
    action_type = db.Column(db.String(20), nullable=False, index=True)  # CREATE, READ, UPDATE, DELETE, LOGIN, LOGOUT
    old_value = db.Column(db.Text)  # JSON
    new_value = db.Column(db.Text)  # JSON
    description = db.Column(db.Text, nullable=False)
    ip_address = db.Column(db.String(50))
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    @staticmethod
    def _load(value):
        if value is None:
            return None
        try:
            return json.loads(value)
        except (TypeError, ValueError):
            return value

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'user': {
                'id': self.user.id,
                'firstName': self.user.first_name,
                'lastName': self.user.last_name,
                'email': self.user.email,
            } if self.user else None,
            'entityType': self.entity_type,
            'entityId': self.entity_id,
            'actionType': self.action_type,
            'oldValue': self._load(self.old_value),
            'newValue': self._load(self.new_value),
            'description': self.description,
            'ipAddress': self.ip_address,
            'timestamp': _iso(self.timestamp),
        }

    def __repr__(self):
        return f'<ActivityLog {self.action_type} {self.entity_type}>'
