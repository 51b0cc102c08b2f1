from typing import List, Optional

import structlog
from sqlalchemy.orm import Session

from totems.models.license import License, TotemMinter
from totems.models.totem import Totem
from totems.services.event_log import EventLog
from totems.utils.exceptions import CantSetLicense, Unauthorized


class LicenseManager:
    """Per-ticker mod authorization and minter declarations."""

    def __init__(self, db: Session, events: EventLog, proxy_mod: Optional[str] = None):
        self.db = db
        self.events = events
        self.proxy_mod = proxy_mod
        self.logger = structlog.get_logger()

    def grant(self, ticker: str, extension: str, granted_by: str = "creation") -> bool:
        """Set the license bit. Returns False when it was already set."""
        if self.is_licensed(ticker, extension):
            return False

        self.db.add(License(ticker=ticker, address=extension, granted_by=granted_by))
        self.db.flush()
        self.events.emit(EventLog.LICENSE_GRANTED, ticker=ticker, mod=extension, data={"granted_by": granted_by})
        return True

    def grant_from_proxy(self, caller: str, ticker: str, extension: str) -> bool:
        if self.proxy_mod is None or caller != self.proxy_mod:
            raise Unauthorized(caller, "set_license_from_proxy")
        if self.db.get(Totem, ticker) is None:
            raise CantSetLicense(ticker)
        return self.grant(ticker, extension, granted_by="proxy")

    def is_licensed(self, ticker: str, extension: str) -> bool:
        return self.db.query(License).filter_by(ticker=ticker, address=extension).first() is not None

    def require_licensed(self, ticker: str, extension: str) -> None:
        if not self.is_licensed(ticker, extension):
            raise Unauthorized(extension, f"unlicensed for {ticker}")

    def list_licenses(self, ticker: str) -> List[License]:
        return self.db.query(License).filter_by(ticker=ticker).order_by(License.id).all()

    def declare_minter(self, ticker: str, extension: str, unlimited: bool) -> TotemMinter:
        minter = self.get_minter(ticker, extension)
        if minter is None:
            minter = TotemMinter(ticker=ticker, address=extension, is_unlimited=unlimited)
            self.db.add(minter)
        else:
            minter.is_unlimited = minter.is_unlimited or unlimited
        self.db.flush()
        return minter

    def get_minter(self, ticker: str, extension: str) -> Optional[TotemMinter]:
        return self.db.query(TotemMinter).filter_by(ticker=ticker, address=extension).first()

    def is_unlimited_minter(self, ticker: str, extension: str) -> bool:
        minter = self.get_minter(ticker, extension)
        return minter is not None and minter.is_unlimited
