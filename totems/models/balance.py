from sqlalchemy import Column, Integer, String, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import Session
from .base import Base
from .types import Amount
from totems.utils.amounts import add_amounts, subtract_amounts, compare_amounts


class Balance(Base):
    __tablename__ = "balances"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ticker = Column(String(10), index=True, nullable=False)
    address = Column(String(42), index=True, nullable=False)
    balance = Column(Amount, nullable=False, default=0)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    __table_args__ = (UniqueConstraint("ticker", "address"),)

    @classmethod
    def get(cls, session: Session, ticker: str, address: str) -> "Balance":
        return session.query(cls).filter_by(ticker=ticker, address=address).first()

    @classmethod
    def get_or_create(cls, session: Session, ticker: str, address: str) -> "Balance":
        balance = cls.get(session, ticker, address)
        if not balance:
            balance = cls(ticker=ticker, address=address, balance=0)
            session.add(balance)
            session.flush()
        return balance

    def add_amount(self, amount: int) -> None:
        self.balance = add_amounts(self.balance, amount)

    def subtract_amount(self, amount: int) -> bool:
        if compare_amounts(self.balance, amount) < 0:
            return False
        self.balance = subtract_amounts(self.balance, amount)
        return True
