from pydantic import BaseModel, Field, field_serializer
from typing import Any, Dict, List, Optional


class OrmConfig(BaseModel):
    class Config:
        from_attributes = True


class ModEntry(BaseModel):
    address: str = Field(description="Mod address")
    hooks: List[str] = Field(default_factory=list, description="Hooks the mod declared on the market")
    requires_setup: bool = Field(default=False, description="Whether the mod declared required setup actions")


class TotemMods(BaseModel):
    created: List[ModEntry] = Field(default_factory=list)
    mint: List[ModEntry] = Field(default_factory=list)
    burn: List[ModEntry] = Field(default_factory=list)
    transfer: List[ModEntry] = Field(default_factory=list)
    transfer_ownership: List[ModEntry] = Field(default_factory=list)


class TotemInfo(OrmConfig):
    ticker: str = Field(description="Canonical uppercase ticker")
    ticker_key: str = Field(description="32-byte ticker key, hex encoded")
    list_index: int = Field(description="Position in creation order")
    creator: str = Field(description="Current owner of the totem")
    name: str
    description: str = ""
    image: str
    website: str = ""
    decimals: int
    seed: str
    supply: int = Field(description="Circulating supply")
    max_supply: int = Field(description="Supply ceiling")
    holders: int = Field(default=0, description="Current number of holders")
    is_active: bool
    created_at: Optional[str] = None
    mods: TotemMods = Field(default_factory=TotemMods)

    @field_serializer("supply", "max_supply")
    def serialize_amount_to_str(self, v: int, _info):
        return str(v) if v is not None else None


class TotemList(BaseModel):
    items: List[TotemInfo]
    total: int
    next_cursor: int
    has_more: bool


class TotemStats(BaseModel):
    ticker: str
    mints: int
    burns: int
    transfers: int
    holders: int
    supply: int
    max_supply: int

    @field_serializer("supply", "max_supply")
    def serialize_amount_to_str(self, v: int, _info):
        return str(v) if v is not None else None


class HolderBalance(BaseModel):
    ticker: str
    address: str
    balance: int

    @field_serializer("balance")
    def serialize_balance_to_str(self, v: int, _info):
        return str(v) if v is not None else None


class HolderList(BaseModel):
    items: List[HolderBalance]
    total: int


class RelayItem(BaseModel):
    relay: str
    standard: str


class LicenseItem(BaseModel):
    address: str
    granted_by: str
    is_minter: bool = False
    is_unlimited: bool = False


class EventItem(BaseModel):
    id: int
    event_type: str
    ticker: Optional[str] = None
    actor: Optional[str] = None
    counterparty: Optional[str] = None
    mod: Optional[str] = None
    amount: Optional[str] = None
    payment: Optional[str] = None
    memo: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    created_at: Optional[str] = None


class TickerBytes(BaseModel):
    ticker: str
    key: str = Field(description="32-byte ticker key, hex encoded")


class FeeInfo(BaseModel):
    referrer: Optional[str] = None
    fee: int
    burned_fee: int

    @field_serializer("fee", "burned_fee")
    def serialize_fee_to_str(self, v: int, _info):
        return str(v) if v is not None else None


class ErrorResponse(BaseModel):
    error_code: str
    message: str
