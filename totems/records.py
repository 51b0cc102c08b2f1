from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple, Union

from totems.mods.contracts import Hook


@dataclass(frozen=True)
class TotemDetails:
    ticker: str
    name: str
    image: str
    seed: Union[bytes, str]
    description: str = ""
    website: str = ""
    decimals: int = 18


@dataclass(frozen=True)
class Allocation:
    recipient: str
    amount: int
    label: str = ""
    is_minter: bool = False


@dataclass
class TotemMods:
    created: List[str] = field(default_factory=list)
    mint: List[str] = field(default_factory=list)
    burn: List[str] = field(default_factory=list)
    transfer: List[str] = field(default_factory=list)
    transfer_ownership: List[str] = field(default_factory=list)

    def for_hook(self, hook: Hook) -> List[str]:
        return {
            Hook.CREATED: self.created,
            Hook.MINT: self.mint,
            Hook.BURN: self.burn,
            Hook.TRANSFER: self.transfer,
            Hook.TRANSFER_OWNERSHIP: self.transfer_ownership,
        }[hook]

    def items(self) -> Iterator[Tuple[Hook, List[str]]]:
        for hook in Hook:
            yield hook, self.for_hook(hook)

    def total(self) -> int:
        return sum(len(mods) for _, mods in self.items())

    def unique_addresses(self) -> List[str]:
        seen: Dict[str, None] = {}
        for _, mods in self.items():
            for mod in mods:
                seen.setdefault(mod, None)
        return list(seen)


@dataclass(frozen=True)
class TotemRecord:
    ticker: str
    creator: str
    details: TotemDetails
    supply: int
    max_supply: int
    mods: TotemMods
    is_active: bool
    list_index: int


@dataclass(frozen=True)
class TotemStatsView:
    ticker: str
    mints: int
    burns: int
    transfers: int
    holders: int
    supply: int


@dataclass(frozen=True)
class TotemPage:
    totems: List[TotemRecord]
    next_cursor: int
    has_more: bool


@dataclass(frozen=True)
class CreationReceipt:
    ticker: str
    required_fee: int
    provided: int
    refund: int
    burned_fee: int
    referrer: str
    referrer_payout: int
    mods_fee: int
    created_hooks: int = 0
    unlimited_minters: Tuple[str, ...] = ()
