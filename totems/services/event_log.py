from typing import Any, Dict, Optional

import structlog
from sqlalchemy.orm import Session

from totems.models.event import TotemEvent


class EventLog:
    TOTEM_CREATED = "TotemCreated"
    TOTEM_MINTED = "TotemMinted"
    TOTEM_BURNED = "TotemBurned"
    TOTEM_TRANSFERRED = "TotemTransferred"
    OWNERSHIP_TRANSFERRED = "TotemOwnershipTransferred"
    RELAY_AUTHORIZED = "RelayAuthorized"
    RELAY_REVOKED = "RelayRevoked"
    LICENSE_GRANTED = "LicenseGranted"
    REFERRER_FEE_SET = "ReferrerFeeSet"

    def __init__(self, db: Session):
        self.db = db
        self.logger = structlog.get_logger()

    def emit(
        self,
        event_type: str,
        ticker: Optional[str] = None,
        actor: Optional[str] = None,
        counterparty: Optional[str] = None,
        mod: Optional[str] = None,
        amount: Optional[int] = None,
        payment: Optional[int] = None,
        memo: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> TotemEvent:
        event = TotemEvent(
            event_type=event_type,
            ticker=ticker,
            actor=actor,
            counterparty=counterparty,
            mod=mod,
            amount=amount,
            payment=payment,
            memo=memo,
            data=data,
        )
        self.db.add(event)

        self.logger.info(
            event_type,
            ticker=ticker,
            actor=actor,
            counterparty=counterparty,
            mod=mod,
            amount=str(amount) if amount is not None else None,
        )
        return event

    def recent(self, ticker: str, limit: int = 100, event_type: Optional[str] = None):
        query = self.db.query(TotemEvent).filter_by(ticker=ticker)
        if event_type:
            query = query.filter_by(event_type=event_type)
        return query.order_by(TotemEvent.id.desc()).limit(limit).all()
