"""Base model class with common functionality."""
from datetime import date, datetime, time
from enum import Enum
from typing import Dict, Any
from dojo_manager import db
from dojo_manager.utils.exceptions import NotFound

def serialize_value(value: Any) -> Any:
    """Convert column values into JSON friendly primitives."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return value

class BaseModel(db.Model):
    """Base model class with common fields and methods."""

    __abstract__ = True

    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def save(self) -> 'BaseModel':
        """Save instance to database."""
        db.session.add(self)
        db.session.commit()
        return self

    def update(self, **kwargs) -> 'BaseModel':
        """Update instance with provided data."""
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)

        self.updated_at = datetime.utcnow()
        db.session.commit()
        return self

    def to_dict(self, exclude: list = None) -> Dict[str, Any]:
        """Convert instance to dictionary."""
        exclude = exclude or []
        result = {}

        for column in self.__table__.columns:
            key = column.name
            if key not in exclude:
                result[key] = serialize_value(getattr(self, key))

        return result

    @classmethod
    def get_by_id(cls, id: int) -> 'BaseModel':
        """Get instance by ID."""
        return db.session.get(cls, id)

    @classmethod
    def get_or_404(cls, id: int) -> 'BaseModel':
        """Get instance by ID or raise a not-found error."""
        instance = db.session.get(cls, id)
        if instance is None:
            raise NotFound(f"{cls.__name__} not found")
        return instance

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.id}>'
