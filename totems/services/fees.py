"""
Creation fees.

A creation costs the referrer's base fee plus the market price of every
distinct mod the totem lists. Of the base fee, a fixed part is burned and
the rest goes to the referrer, or to the treasury without one. Paying more
than required is accepted and the excess is refunded.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

import structlog
from sqlalchemy.orm import Session

from totems.config import settings
from totems.models.referrer_fee import ReferrerFee
from totems.mods.base_mod import ModMarket
from totems.services.event_log import EventLog
from totems.utils.addresses import ZERO_ADDRESS, is_zero_address
from totems.utils.amounts import to_amount
from totems.utils.exceptions import InsufficientFee, ReferrerFeeTooLow


@dataclass(frozen=True)
class FeeQuote:
    base_fee: int
    mods_fee: int
    burned_fee: int

    @property
    def required(self) -> int:
        return self.base_fee + self.mods_fee


@dataclass(frozen=True)
class FeeSettlement:
    required: int
    provided: int
    refund: int
    burned: int
    referrer: str
    referrer_payout: int
    mods_fee: int


class FeeSchedule:
    def __init__(
        self,
        db: Session,
        market: Optional[ModMarket],
        events: EventLog,
        min_base_fee: Optional[int] = None,
        burned_fee: Optional[int] = None,
        treasury: Optional[str] = None,
    ):
        self.db = db
        self.market = market
        self.events = events
        self.min_base_fee = settings.MIN_BASE_FEE if min_base_fee is None else min_base_fee
        self.burned_fee = settings.BURNED_FEE if burned_fee is None else burned_fee
        self.treasury = treasury or settings.TREASURY_ADDRESS
        self.logger = structlog.get_logger()

    def get_fee(self, referrer: Optional[str]) -> int:
        if is_zero_address(referrer):
            return self.min_base_fee
        record = self.db.get(ReferrerFee, referrer)
        return record.fee if record else self.min_base_fee

    def set_referrer_fee(self, referrer: str, fee: int) -> None:
        fee = to_amount(fee)
        if fee < self.min_base_fee:
            raise ReferrerFeeTooLow(fee, self.min_base_fee)

        record = self.db.get(ReferrerFee, referrer)
        if record is None:
            self.db.add(ReferrerFee(referrer=referrer, fee=fee))
        else:
            record.fee = fee
        self.db.flush()
        self.events.emit(EventLog.REFERRER_FEE_SET, actor=referrer, amount=fee)

    def quote(self, referrer: Optional[str], mods: Iterable[str]) -> FeeQuote:
        unique_mods = list(dict.fromkeys(mods))
        return FeeQuote(
            base_fee=self.get_fee(referrer),
            mods_fee=self.market.get_mods_fee(unique_mods) if unique_mods else 0,
            burned_fee=self.burned_fee,
        )

    def settle(self, quote: FeeQuote, referrer: Optional[str], provided: int) -> FeeSettlement:
        provided = to_amount(provided)
        if provided < quote.required:
            raise InsufficientFee(required=quote.required, provided=provided)

        burned = min(quote.burned_fee, quote.base_fee)
        payee = self.treasury if is_zero_address(referrer) else referrer

        settlement = FeeSettlement(
            required=quote.required,
            provided=provided,
            refund=provided - quote.required,
            burned=burned,
            referrer=payee or ZERO_ADDRESS,
            referrer_payout=quote.base_fee - burned,
            mods_fee=quote.mods_fee,
        )

        self.logger.info(
            "Creation fee settled",
            required=str(settlement.required),
            refund=str(settlement.refund),
            burned=str(settlement.burned),
            referrer=settlement.referrer,
            referrer_payout=str(settlement.referrer_payout),
            mods_fee=str(settlement.mods_fee),
        )
        return settlement
