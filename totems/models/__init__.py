from .base import Base
from .balance import Balance
from .event import TotemEvent
from .license import License, TotemMinter
from .referrer_fee import ReferrerFee
from .relay import Relay
from .stats import TotemStats
from .totem import Totem
from .totem_mod import TotemMod

__all__ = [
    "Base",
    "Balance",
    "TotemEvent",
    "License",
    "TotemMinter",
    "ReferrerFee",
    "Relay",
    "TotemStats",
    "Totem",
    "TotemMod",
]
