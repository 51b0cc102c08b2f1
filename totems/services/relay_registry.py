from dataclasses import dataclass
from typing import List, Optional

import structlog
from sqlalchemy.orm import Session

from totems.models.relay import Relay
from totems.models.totem import Totem
from totems.mods.directory import ContractDirectory
from totems.services.event_log import EventLog
from totems.services.license_manager import LicenseManager
from totems.utils.addresses import is_zero_address, normalize_address
from totems.utils.exceptions import (
    InvalidAddress,
    RelayAlreadyExists,
    RelayNotFound,
    TotemNotFound,
    Unauthorized,
)


@dataclass(frozen=True)
class RelayInfo:
    relay: str
    standard: str


class RelayRegistry:
    def __init__(self, db: Session, licenses: LicenseManager, events: EventLog, directory: ContractDirectory):
        self.db = db
        self.licenses = licenses
        self.events = events
        self.directory = directory
        self.logger = structlog.get_logger()

    def _require_creator(self, caller: str, ticker: str, action: str) -> Totem:
        totem = self.db.get(Totem, ticker)
        if totem is None:
            raise TotemNotFound(ticker)
        if caller != totem.creator:
            raise Unauthorized(caller, action)
        return totem

    def _authorize(self, ticker: str, relay: str, standard: str) -> Relay:
        occupied = (
            self.db.query(Relay)
            .filter(Relay.ticker == ticker)
            .filter((Relay.standard == standard) | (Relay.address == relay))
            .first()
        )
        if occupied is not None:
            raise RelayAlreadyExists(ticker, relay, standard)

        record = Relay(ticker=ticker, address=relay, standard=standard)
        self.db.add(record)
        self.db.flush()
        self.events.emit(EventLog.RELAY_AUTHORIZED, ticker=ticker, counterparty=relay, data={"standard": standard})
        return record

    def create_relay(self, caller: str, ticker: str, factory: str, standard: str) -> str:
        self._require_creator(caller, ticker, "create_relay")

        relay_factory = self.directory.resolve_factory(factory)
        relay = normalize_address(relay_factory.create_relay(ticker))
        if is_zero_address(relay):
            raise InvalidAddress(relay, "Relay factory returned the zero address")

        self._authorize(ticker, relay, standard)
        self.licenses.grant(ticker, relay, granted_by="relay")

        self.logger.info("Relay created", ticker=ticker, relay=relay, factory=factory, standard=standard)
        return relay

    def add_relay(self, caller: str, ticker: str, relay: str, standard: str) -> None:
        self._require_creator(caller, ticker, "add_relay")
        if is_zero_address(relay):
            raise InvalidAddress(relay, "Relay cannot be zero address")
        self._authorize(ticker, relay, standard)

    def remove_relay(self, caller: str, ticker: str, relay: str) -> None:
        self._require_creator(caller, ticker, "remove_relay")

        record = self.db.query(Relay).filter_by(ticker=ticker, address=relay).first()
        if record is None:
            raise RelayNotFound(ticker, relay)

        self.db.delete(record)
        self.db.flush()
        self.events.emit(
            EventLog.RELAY_REVOKED, ticker=ticker, counterparty=relay, data={"standard": record.standard}
        )

    def is_relay(self, ticker: str, address: str) -> bool:
        return self.db.query(Relay).filter_by(ticker=ticker, address=address).first() is not None

    def get_relays(self, ticker: str) -> List[RelayInfo]:
        records = self.db.query(Relay).filter_by(ticker=ticker).order_by(Relay.id).all()
        return [RelayInfo(relay=r.address, standard=r.standard) for r in records]

    def get_relay_of_standard(self, ticker: str, standard: str) -> Optional[str]:
        record = self.db.query(Relay).filter_by(ticker=ticker, standard=standard).first()
        return record.address if record else None
