from sqlalchemy import Boolean, Column, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.sql import func

from .base import Base


class License(Base):
    __tablename__ = "licenses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ticker = Column(String(10), index=True, nullable=False)
    address = Column(String(42), index=True, nullable=False)
    granted_by = Column(String(20), nullable=False, comment="creation, proxy or relay")
    created_at = Column(DateTime, default=func.now())

    __table_args__ = (UniqueConstraint("ticker", "address"),)


class TotemMinter(Base):
    __tablename__ = "totem_minters"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ticker = Column(String(10), index=True, nullable=False)
    address = Column(String(42), index=True, nullable=False)
    is_unlimited = Column(Boolean, nullable=False, default=False)

    __table_args__ = (UniqueConstraint("ticker", "address"),)
