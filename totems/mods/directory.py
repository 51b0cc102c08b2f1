from typing import Any, Dict, List, Optional
import structlog

from .base_mod import BaseMod, RelayFactory
from totems.utils.addresses import normalize_address
from totems.utils.exceptions import InvalidAddress, ModNotFound


class ContractDirectory:
    """Address book of the live contract handles the registry may call."""

    def __init__(self):
        self._contracts: Dict[str, Any] = {}
        self.logger = structlog.get_logger()

    def register(self, contract: Any, address: str = None):
        """Register a contract handle under its address"""
        resolved = normalize_address(address or getattr(contract, "address", None))
        self._contracts[resolved] = contract
        self.logger.info("Registered contract", address=resolved, class_name=type(contract).__name__)
        return resolved

    def get(self, address: str) -> Optional[Any]:
        return self._contracts.get(normalize_address(address))

    def has(self, address: str) -> bool:
        return normalize_address(address) in self._contracts

    def resolve_mod(self, address: str) -> BaseMod:
        contract = self.get(address)
        if not isinstance(contract, BaseMod):
            raise ModNotFound(address)
        return contract

    def resolve_factory(self, address: str) -> RelayFactory:
        contract = self.get(address)
        if not isinstance(contract, RelayFactory):
            raise InvalidAddress(address, "No relay factory registered")
        return contract

    def list_addresses(self) -> List[str]:
        """List all registered addresses"""
        return list(self._contracts.keys())
