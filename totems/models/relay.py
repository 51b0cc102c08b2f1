from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.sql import func

from .base import Base


class Relay(Base):
    __tablename__ = "relays"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ticker = Column(String(10), index=True, nullable=False)
    address = Column(String(42), index=True, nullable=False)
    standard = Column(String(64), nullable=False)
    created_at = Column(DateTime, default=func.now())

    __table_args__ = (
        UniqueConstraint("ticker", "standard"),
        UniqueConstraint("ticker", "address"),
    )

    def to_dict(self):
        return {"relay": self.address, "standard": self.standard}
