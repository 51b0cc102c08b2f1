from sqlalchemy import Boolean, Column, Integer, String, UniqueConstraint

from .base import Base


class TotemMod(Base):
    """One entry of a totem's per-hook mod list, fixed at creation."""

    __tablename__ = "totem_mods"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ticker = Column(String(10), index=True, nullable=False)
    hook = Column(Integer, nullable=False)
    position = Column(Integer, nullable=False)
    address = Column(String(42), index=True, nullable=False)
    capabilities = Column(Integer, nullable=False, default=0, comment="Hook bitmask reported by the market")
    requires_setup = Column(Boolean, nullable=False, default=False)

    __table_args__ = (UniqueConstraint("ticker", "hook", "position"),)
