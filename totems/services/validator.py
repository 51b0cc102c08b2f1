"""
Creation request validation.

Everything here runs before the registry writes anything, so a rejected
creation leaves no trace.
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence

import structlog

from totems.config import settings
from totems.mods.base_mod import ModMarket
from totems.mods.contracts import ModInfo, supports_hook
from totems.records import Allocation, TotemDetails, TotemMods
from totems.utils.addresses import is_zero_address, normalize_address
from totems.utils.amounts import is_valid_amount
from totems.utils.exceptions import (
    DescriptionTooLong,
    EmptyImage,
    InvalidAllocation,
    InvalidAmount,
    InvalidDecimals,
    InvalidSeed,
    ModDoesntSupportHook,
    ModMustSupportUnlimitedMinting,
    ModNotMinter,
    NameTooLong,
    NameTooShort,
    TooManyAllocations,
    TooManyMods,
    ZeroSupply,
)

SEED_LENGTH = 32


@dataclass(frozen=True)
class ValidatedAllocation:
    recipient: str
    amount: int
    label: str
    is_minter: bool
    is_unlimited: bool


class TotemValidator:
    def __init__(self, market: ModMarket):
        self.market = market
        self.logger = structlog.get_logger()

    def validate_details(self, details: TotemDetails) -> bytes:
        """Check display metadata and return the decoded seed"""
        name_length = len(details.name or "")
        if name_length < settings.NAME_MIN_LENGTH:
            raise NameTooShort(name_length, settings.NAME_MIN_LENGTH)
        if name_length > settings.NAME_MAX_LENGTH:
            raise NameTooLong(name_length, settings.NAME_MAX_LENGTH)

        description_length = len(details.description or "")
        if description_length > settings.DESCRIPTION_MAX_LENGTH:
            raise DescriptionTooLong(description_length, settings.DESCRIPTION_MAX_LENGTH)

        if not details.image:
            raise EmptyImage()

        if not isinstance(details.decimals, int) or not 0 <= details.decimals <= 255:
            raise InvalidDecimals(details.decimals)

        return self.decode_seed(details.seed)

    def decode_seed(self, seed) -> bytes:
        if isinstance(seed, str):
            try:
                seed = bytes.fromhex(seed[2:] if seed.startswith("0x") else seed)
            except ValueError:
                raise InvalidSeed("Seed is not valid hex")

        if not isinstance(seed, (bytes, bytearray)) or len(seed) != SEED_LENGTH:
            raise InvalidSeed(f"Seed must be {SEED_LENGTH} bytes")
        if not any(seed):
            raise InvalidSeed("Seed cannot be zero")
        return bytes(seed)

    def validate_limits(self, allocations: Sequence[Allocation], mods: TotemMods) -> None:
        if len(allocations) > settings.MAX_ALLOCATIONS:
            raise TooManyAllocations(len(allocations), settings.MAX_ALLOCATIONS)

        total_mods = mods.total()
        if total_mods > settings.MAX_MODS:
            raise TooManyMods(total_mods, settings.MAX_MODS)

    def validate_mods(self, mods: TotemMods) -> Dict[str, ModInfo]:
        """Resolve every listed mod on the market and check it supports its list's hook"""
        infos: Dict[str, ModInfo] = {}
        for hook, addresses in mods.items():
            for address in addresses:
                if address not in infos:
                    infos[address] = self.market.get_mod(address)
                if not supports_hook(infos[address].capabilities, hook):
                    raise ModDoesntSupportHook(address, hook.name)
        return infos

    def validate_allocations(self, ticker: str, allocations: Sequence[Allocation]) -> List[ValidatedAllocation]:
        validated = []
        total = 0
        has_unlimited = False

        for index, allocation in enumerate(allocations):
            if is_zero_address(allocation.recipient):
                raise InvalidAllocation(index, "Recipient cannot be zero address")
            if not is_valid_amount(allocation.amount) or isinstance(allocation.amount, str):
                raise InvalidAmount(allocation.amount)

            recipient = normalize_address(allocation.recipient)
            amount = int(allocation.amount)
            unlimited = False

            if allocation.is_minter:
                mod_info = self.market.get_mod(recipient)
                if not mod_info.is_minter:
                    raise ModNotMinter(recipient, ticker)
                if amount == 0:
                    if not mod_info.needs_unlimited:
                        raise ModMustSupportUnlimitedMinting(recipient)
                    unlimited = True
            elif amount == 0:
                raise InvalidAllocation(index, "Amount cannot be zero")

            has_unlimited = has_unlimited or unlimited
            total += amount
            validated.append(
                ValidatedAllocation(
                    recipient=recipient,
                    amount=amount,
                    label=allocation.label,
                    is_minter=allocation.is_minter,
                    is_unlimited=unlimited,
                )
            )

        if total == 0 and not has_unlimited:
            raise ZeroSupply(ticker)

        return validated

    def normalize_mods(self, mods: TotemMods) -> TotemMods:
        """Normalize every address in the five lists"""
        normalized = {}
        for hook, addresses in mods.items():
            normalized[hook.name.lower()] = [normalize_address(address) for address in addresses]
        return TotemMods(**normalized)
