"""
Balance ledger.

Every balance write updates the holder count and, for mints and burns, the
totem supply in the same step, so the sum of balances always equals supply.
"""

import structlog
from sqlalchemy.orm import Session

from totems.models.balance import Balance
from totems.models.stats import TotemStats
from totems.models.totem import Totem
from totems.utils.amounts import to_amount
from totems.utils.exceptions import InsufficientBalance, TotemNotFound


class Ledger:
    def __init__(self, db: Session):
        self.db = db
        self.logger = structlog.get_logger()

    def get_totem(self, ticker: str) -> Totem:
        totem = self.db.get(Totem, ticker)
        if totem is None:
            raise TotemNotFound(ticker)
        return totem

    def get_stats(self, ticker: str) -> TotemStats:
        stats = self.db.get(TotemStats, ticker)
        if stats is None:
            stats = TotemStats(ticker=ticker, mints=0, burns=0, transfers=0, holders=0)
            self.db.add(stats)
            self.db.flush()
        return stats

    def get_balance(self, ticker: str, account: str) -> int:
        balance = Balance.get(self.db, ticker, account)
        return balance.balance if balance else 0

    def credit(self, ticker: str, account: str, amount: int, mint: bool = True) -> int:
        """Add to a balance. With mint=True the supply grows by the same amount."""
        amount = to_amount(amount)
        totem = self.get_totem(ticker)
        stats = self.get_stats(ticker)
        balance = Balance.get_or_create(self.db, ticker, account)

        previous = balance.balance
        balance.add_amount(amount)

        if previous == 0 and balance.balance > 0:
            stats.holders += 1
        if mint:
            totem.supply = totem.supply + amount

        self.logger.debug(
            "Balance credited",
            ticker=ticker,
            account=account,
            amount=str(amount),
            new_balance=str(balance.balance),
        )
        return balance.balance

    def debit(self, ticker: str, account: str, amount: int, burn: bool = True) -> int:
        """Remove from a balance. With burn=True the supply shrinks by the same amount."""
        amount = to_amount(amount)
        totem = self.get_totem(ticker)
        stats = self.get_stats(ticker)
        balance = Balance.get(self.db, ticker, account)

        available = balance.balance if balance else 0
        if amount > available:
            raise InsufficientBalance(required=amount, available=available)
        if balance is None:
            return 0

        previous = balance.balance
        balance.subtract_amount(amount)

        if previous > 0 and balance.balance == 0:
            stats.holders -= 1
        if burn:
            totem.supply = totem.supply - amount

        self.logger.debug(
            "Balance debited",
            ticker=ticker,
            account=account,
            amount=str(amount),
            new_balance=str(balance.balance),
        )
        return balance.balance

    def transfer_balance(self, ticker: str, from_address: str, to_address: str, amount: int) -> None:
        amount = to_amount(amount)

        if from_address == to_address:
            available = self.get_balance(ticker, from_address)
            if amount > available:
                raise InsufficientBalance(required=amount, available=available)
            return

        self.debit(ticker, from_address, amount, burn=False)
        self.credit(ticker, to_address, amount, mint=False)

    def emit(self, ticker: str, account: str, amount: int) -> int:
        """Credit new supply from nothing and raise the supply ceiling with it"""
        amount = to_amount(amount)
        new_balance = self.credit(ticker, account, amount, mint=True)
        totem = self.get_totem(ticker)
        totem.max_supply = totem.max_supply + amount
        return new_balance
