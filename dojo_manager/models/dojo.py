"""Dojo (training location) model."""
from dojo_manager import db
from dojo_manager.models.base import BaseModel

class Dojo(BaseModel):
    """A physical training location."""

    __tablename__ = 'dojos'

    name = db.Column(db.String(255), nullable=False)
    address = db.Column(db.String(500), nullable=True)
    phone = db.Column(db.String(50), nullable=True)
    email = db.Column(db.String(255), nullable=True)
    primary_instructor_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    active = db.Column(db.Boolean, default=True, nullable=False)

    primary_instructor = db.relationship('User')

    def __repr__(self):
        return f'<Dojo {self.name}>'
