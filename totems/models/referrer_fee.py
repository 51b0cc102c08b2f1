from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func

from .base import Base
from .types import Amount


class ReferrerFee(Base):
    __tablename__ = "referrer_fees"

    referrer = Column(String(42), primary_key=True)
    fee = Column(Amount, nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())
