from abc import ABC, abstractmethod
from typing import Iterable
import structlog

from .contracts import (
    BurnEvent,
    CreatedEvent,
    MintEvent,
    MintRequest,
    ModInfo,
    TransferEvent,
    TransferOwnershipEvent,
)
from totems.utils.addresses import normalize_address
from totems.utils.exceptions import ModNotMinter


class BaseMod(ABC):
    """
    The Behavior Contract for all mods.
    A mod implementation MUST inherit from this class. Hook callbacks run
    after the ledger mutation and may read the registry; raising aborts the
    whole call.
    """

    def __init__(self, address: str):
        self.address = normalize_address(address)
        self.logger = structlog.get_logger()

    def on_created(self, event: CreatedEvent) -> None:
        pass

    def on_mint(self, event: MintEvent) -> None:
        pass

    def on_burn(self, event: BurnEvent) -> None:
        pass

    def on_transfer(self, event: TransferEvent) -> None:
        pass

    def on_transfer_ownership(self, event: TransferOwnershipEvent) -> None:
        pass

    def mint(self, request: MintRequest) -> int:
        """
        Decide how much of a mint request is granted.
        The registry moves the returned amount itself.
        """
        raise ModNotMinter(self.address, request.ticker)

    def is_setup_for(self, ticker: str) -> bool:
        return True


class ModMarket(ABC):
    """Catalog of published mods and their publishing prices."""

    @abstractmethod
    def get_mod(self, address: str) -> ModInfo:
        """Return the published info for a mod, raising ModNotFound otherwise"""
        pass

    @abstractmethod
    def get_mods_fee(self, addresses: Iterable[str]) -> int:
        """Total price of using the given mods"""
        pass


class RelayFactory(ABC):
    def __init__(self, address: str):
        self.address = normalize_address(address)
        self.logger = structlog.get_logger()

    @abstractmethod
    def create_relay(self, ticker: str) -> str:
        """Deploy a relay for the ticker and return its address"""
        pass
