from sqlalchemy import BigInteger, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from .base import Base


class TotemStats(Base):
    __tablename__ = "totem_stats"

    ticker = Column(String(10), primary_key=True)
    mints = Column(BigInteger, nullable=False, default=0)
    burns = Column(BigInteger, nullable=False, default=0)
    transfers = Column(BigInteger, nullable=False, default=0)
    holders = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())
