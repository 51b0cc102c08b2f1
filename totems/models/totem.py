from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import validates

from .base import Base
from .types import Amount


class Totem(Base):
    __tablename__ = "totems"

    ticker = Column(String(10), primary_key=True)
    ticker_key = Column(String(66), unique=True, nullable=False)
    list_index = Column(Integer, unique=True, index=True, nullable=False, comment="Position in the enumeration list")
    creator = Column(String(42), index=True, nullable=False)
    name = Column(String(64), nullable=False)
    description = Column(Text, nullable=False, default="")
    image = Column(Text, nullable=False)
    website = Column(Text, nullable=False, default="")
    decimals = Column(Integer, nullable=False, default=18)
    seed = Column(String(66), nullable=False)
    supply = Column(Amount, nullable=False, default=0)
    max_supply = Column(
        Amount,
        nullable=False,
        default=0,
        comment="Allocated at creation plus everything emitted by unlimited minters",
    )
    is_active = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    @validates("supply", "max_supply")
    def validate_amount(self, key, value):
        if value is not None and value < 0:
            raise ValueError(f"{key} cannot be negative")
        return value

    def __repr__(self):
        return f"Totem(ticker='{self.ticker}', creator='{self.creator}', supply={self.supply})"

    def to_dict(self):
        """Convert model to dictionary"""
        return {
            "ticker": self.ticker,
            "ticker_key": self.ticker_key,
            "list_index": self.list_index,
            "creator": self.creator,
            "name": self.name,
            "description": self.description,
            "image": self.image,
            "website": self.website,
            "decimals": self.decimals,
            "seed": self.seed,
            "supply": str(self.supply),
            "max_supply": str(self.max_supply),
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
