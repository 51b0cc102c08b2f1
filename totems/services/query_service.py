from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy import func
from sqlalchemy.orm import Session

from totems.config import settings
from totems.models.balance import Balance
from totems.models.license import License, TotemMinter
from totems.models.relay import Relay
from totems.models.stats import TotemStats
from totems.models.totem import Totem
from totems.models.totem_mod import TotemMod
from totems.mods.contracts import Hook, hooks_from_mask
from totems.services.cache_service import CacheService
from totems.services.event_log import EventLog
from totems.services.fees import FeeSchedule
from totems.utils.addresses import is_zero_address, normalize_address
from totems.utils.exceptions import InvalidCursor, TotemNotFound
from totems.utils.ticker import normalize


class TotemQueryService:
    """Read-only views over registry state for the HTTP API"""

    def __init__(self, db: Session, cache: Optional[CacheService] = None, fees: Optional[FeeSchedule] = None):
        self.db = db
        self.cache = cache
        self.fees = fees or FeeSchedule(db, None, EventLog(db))
        self.logger = structlog.get_logger()

    def _cached(self, prefix: str, ticker: str, loader):
        if self.cache is None:
            return loader()

        key = self.cache.generate_key(prefix, ticker)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        value = loader()
        self.cache.set(key, value)
        return value

    def _get_totem(self, ticker: str) -> Totem:
        totem = self.db.get(Totem, ticker)
        if totem is None:
            raise TotemNotFound(ticker)
        return totem

    def _mods(self, ticker: str) -> Dict[str, List[Dict[str, Any]]]:
        mods = {hook.name.lower(): [] for hook in Hook}
        entries = (
            self.db.query(TotemMod)
            .filter_by(ticker=ticker)
            .order_by(TotemMod.hook, TotemMod.position)
            .all()
        )
        for entry in entries:
            mods[Hook(entry.hook).name.lower()].append(
                {
                    "address": entry.address,
                    "hooks": [hook.name.lower() for hook in hooks_from_mask(entry.capabilities)],
                    "requires_setup": entry.requires_setup,
                }
            )
        return mods

    def _totem_info(self, totem: Totem) -> Dict[str, Any]:
        info = totem.to_dict()
        stats = self.db.get(TotemStats, totem.ticker)
        info["holders"] = stats.holders if stats else 0
        info["mods"] = self._mods(totem.ticker)
        return info

    def get_totem_info(self, ticker: str) -> Dict[str, Any]:
        ticker = normalize(ticker).symbol
        return self._cached("totem", ticker, lambda: self._totem_info(self._get_totem(ticker)))

    def list_totems(self, cursor: int = 0, per_page: int = None) -> Dict[str, Any]:
        per_page = min(per_page or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
        total = self.db.query(func.count(Totem.ticker)).scalar()
        if cursor < 0 or cursor > total:
            raise InvalidCursor(cursor, total)

        rows = (
            self.db.query(Totem)
            .filter(Totem.list_index >= cursor)
            .order_by(Totem.list_index)
            .limit(per_page)
            .all()
        )
        next_cursor = cursor + len(rows)
        return {
            "items": [self._totem_info(totem) for totem in rows],
            "total": total,
            "next_cursor": next_cursor,
            "has_more": next_cursor < total,
        }

    def get_stats(self, ticker: str) -> Dict[str, Any]:
        ticker = normalize(ticker).symbol

        def load():
            totem = self._get_totem(ticker)
            stats = self.db.get(TotemStats, ticker)
            return {
                "ticker": ticker,
                "mints": stats.mints if stats else 0,
                "burns": stats.burns if stats else 0,
                "transfers": stats.transfers if stats else 0,
                "holders": stats.holders if stats else 0,
                "supply": str(totem.supply),
                "max_supply": str(totem.max_supply),
            }

        return self._cached("stats", ticker, load)

    def get_holders(self, ticker: str, skip: int = 0, limit: int = 100) -> Dict[str, Any]:
        ticker = normalize(ticker).symbol
        self._get_totem(ticker)

        query = self.db.query(Balance).filter(Balance.ticker == ticker).filter(Balance.balance != 0)
        total = query.count()
        rows = query.order_by(Balance.address).offset(skip).limit(limit).all()
        return {
            "items": [{"ticker": ticker, "address": row.address, "balance": str(row.balance)} for row in rows],
            "total": total,
        }

    def get_balance(self, ticker: str, address: str) -> Dict[str, Any]:
        ticker = normalize(ticker).symbol
        address = normalize_address(address)
        balance = Balance.get(self.db, ticker, address)
        return {"ticker": ticker, "address": address, "balance": str(balance.balance if balance else 0)}

    def get_relays(self, ticker: str) -> List[Dict[str, Any]]:
        ticker = normalize(ticker).symbol

        def load():
            self._get_totem(ticker)
            rows = self.db.query(Relay).filter_by(ticker=ticker).order_by(Relay.id).all()
            return [row.to_dict() for row in rows]

        return self._cached("relays", ticker, load)

    def get_licenses(self, ticker: str) -> List[Dict[str, Any]]:
        ticker = normalize(ticker).symbol
        self._get_totem(ticker)

        minters = {m.address: m for m in self.db.query(TotemMinter).filter_by(ticker=ticker).all()}
        rows = self.db.query(License).filter_by(ticker=ticker).order_by(License.id).all()
        return [
            {
                "address": row.address,
                "granted_by": row.granted_by,
                "is_minter": row.address in minters,
                "is_unlimited": row.address in minters and minters[row.address].is_unlimited,
            }
            for row in rows
        ]

    def get_events(self, ticker: str, limit: int = 100, event_type: Optional[str] = None) -> List[Dict[str, Any]]:
        ticker = normalize(ticker).symbol
        self._get_totem(ticker)
        return [event.to_dict() for event in EventLog(self.db).recent(ticker, limit, event_type)]

    def get_fee(self, referrer: Optional[str] = None) -> Dict[str, Any]:
        fee = self.fees.get_fee(None if is_zero_address(referrer) else normalize_address(referrer))
        burned = min(self.fees.burned_fee, fee)
        return {"referrer": referrer, "fee": str(fee), "burned_fee": str(burned)}
