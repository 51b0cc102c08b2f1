from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
import structlog

from totems.api.models import (
    EventItem,
    FeeInfo,
    HolderBalance,
    HolderList,
    LicenseItem,
    RelayItem,
    TickerBytes,
    TotemInfo,
    TotemList,
    TotemStats,
)
from totems.config import settings
from totems.database.connection import get_db
from totems.services.cache_service import CacheService
from totems.services.query_service import TotemQueryService
from totems.utils.ticker import normalize

logger = structlog.get_logger()

router = APIRouter(prefix="/v1/totems")


def get_cache_service() -> Optional[CacheService]:
    if not settings.CACHE_ENABLED:
        return None
    return CacheService()


def get_query_service(
    db: Session = Depends(get_db),
    cache: Optional[CacheService] = Depends(get_cache_service),
):
    return TotemQueryService(db, cache)


@router.get("", response_model=TotemList)
async def list_totems(
    cursor: int = Query(0, ge=0, description="Index into creation order to start from"),
    per_page: int = Query(None, ge=1, description="Maximum totems to return"),
    query_service: TotemQueryService = Depends(get_query_service),
):
    result = query_service.list_totems(cursor, per_page)
    return TotemList(**result)


@router.get("/fee", response_model=FeeInfo)
async def get_fee(
    referrer: Optional[str] = Query(None, description="Referrer address"),
    query_service: TotemQueryService = Depends(get_query_service),
):
    return FeeInfo(**query_service.get_fee(referrer))


@router.get("/{ticker}", response_model=TotemInfo)
async def get_totem(ticker: str, query_service: TotemQueryService = Depends(get_query_service)):
    return TotemInfo(**query_service.get_totem_info(ticker))


@router.get("/{ticker}/stats", response_model=TotemStats)
async def get_totem_stats(ticker: str, query_service: TotemQueryService = Depends(get_query_service)):
    return TotemStats(**query_service.get_stats(ticker))


@router.get("/{ticker}/bytes", response_model=TickerBytes)
async def get_ticker_bytes(ticker: str):
    key = normalize(ticker)
    return TickerBytes(ticker=key.symbol, key=key.hex)


@router.get("/{ticker}/holders", response_model=HolderList)
async def get_totem_holders(
    ticker: str,
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum records to return"),
    query_service: TotemQueryService = Depends(get_query_service),
):
    return HolderList(**query_service.get_holders(ticker, skip, limit))


@router.get("/{ticker}/balances/{address}", response_model=HolderBalance)
async def get_balance(ticker: str, address: str, query_service: TotemQueryService = Depends(get_query_service)):
    return HolderBalance(**query_service.get_balance(ticker, address))


@router.get("/{ticker}/relays", response_model=List[RelayItem])
async def get_relays(ticker: str, query_service: TotemQueryService = Depends(get_query_service)):
    return [RelayItem(**item) for item in query_service.get_relays(ticker)]


@router.get("/{ticker}/licenses", response_model=List[LicenseItem])
async def get_licenses(ticker: str, query_service: TotemQueryService = Depends(get_query_service)):
    return [LicenseItem(**item) for item in query_service.get_licenses(ticker)]


@router.get("/{ticker}/events", response_model=List[EventItem])
async def get_events(
    ticker: str,
    event_type: Optional[str] = Query(None, description="Filter by event type"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum records to return"),
    query_service: TotemQueryService = Depends(get_query_service),
):
    return [EventItem(**item) for item in query_service.get_events(ticker, limit, event_type)]
