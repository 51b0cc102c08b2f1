from sqlalchemy import JSON, Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from .base import Base
from .types import Amount


class TotemEvent(Base):
    """Notification record written in the same transaction as its mutation."""

    __tablename__ = "totem_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_type = Column(String(50), index=True, nullable=False)
    ticker = Column(String(10), index=True, nullable=True)
    actor = Column(String(42), index=True, nullable=True)
    counterparty = Column(String(42), nullable=True)
    mod = Column(String(42), nullable=True)
    amount = Column(Amount, nullable=True)
    payment = Column(Amount, nullable=True)
    memo = Column(Text, nullable=True)
    data = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=func.now())

    def to_dict(self):
        """Convert model to dictionary"""
        return {
            "id": self.id,
            "event_type": self.event_type,
            "ticker": self.ticker,
            "actor": self.actor,
            "counterparty": self.counterparty,
            "mod": self.mod,
            "amount": str(self.amount) if self.amount is not None else None,
            "payment": str(self.payment) if self.payment is not None else None,
            "memo": self.memo,
            "data": self.data,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
