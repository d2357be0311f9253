"""Membership and fee payments."""
from datetime import datetime
from dojo_manager import db
from dojo_manager.models.base import BaseModel

PAYMENT_TYPES = ('monthly', 'quarterly', 'annual', 'grading', 'gear', 'other')
PAYMENT_METHODS = ('cash', 'card', 'bank_transfer', 'other')
PAYMENT_STATUSES = ('pending', 'completed', 'failed', 'refunded')

class Payment(BaseModel):
    """Payment model."""

    __tablename__ = 'payments'

    member_id = db.Column(db.Integer, db.ForeignKey('members.id'), nullable=False, index=True)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    payment_type = db.Column(db.String(20), nullable=False)
    payment_method = db.Column(db.String(20), nullable=True)
    status = db.Column(db.String(20), nullable=False, default='pending')
    payment_date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    due_date = db.Column(db.Date, nullable=True)
    paid_date = db.Column(db.Date, nullable=True)
    description = db.Column(db.Text, nullable=True)

    member = db.relationship('Member', backref=db.backref('payments', lazy='dynamic'))

    def to_dict(self):
        data = super().to_dict()
        data['amount'] = float(self.amount) if self.amount is not None else None
        data['first_name'] = self.member.first_name if self.member else None
        data['last_name'] = self.member.last_name if self.member else None
        return data
