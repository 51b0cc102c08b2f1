from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, Tuple


class Hook(IntEnum):
    CREATED = 0
    MINT = 1
    BURN = 2
    TRANSFER = 3
    TRANSFER_OWNERSHIP = 4


# Callback invoked on a mod for each hook kind
HOOK_HANDLERS = {
    Hook.CREATED: "on_created",
    Hook.MINT: "on_mint",
    Hook.BURN: "on_burn",
    Hook.TRANSFER: "on_transfer",
    Hook.TRANSFER_OWNERSHIP: "on_transfer_ownership",
}


def hook_mask(hooks: Iterable[Hook]) -> int:
    mask = 0
    for hook in hooks:
        mask |= 1 << int(hook)
    return mask


def supports_hook(mask: int, hook: Hook) -> bool:
    return bool(mask & (1 << int(hook)))


def hooks_from_mask(mask: int) -> Tuple[Hook, ...]:
    return tuple(hook for hook in Hook if supports_hook(mask, hook))


@dataclass(frozen=True)
class ModInfo:
    """What the market knows about a published mod."""

    address: str
    hooks: Tuple[Hook, ...] = ()
    is_minter: bool = False
    needs_unlimited: bool = False
    seller: str = None
    price: int = 0
    required_actions: Tuple[str, ...] = ()

    @property
    def capabilities(self) -> int:
        return hook_mask(self.hooks)

    @property
    def requires_setup(self) -> bool:
        return len(self.required_actions) > 0


@dataclass(frozen=True)
class CreatedEvent:
    ticker: str
    creator: str


@dataclass(frozen=True)
class MintEvent:
    ticker: str
    minter: str
    mod: str
    amount: int
    payment: int = 0
    memo: str = ""


@dataclass(frozen=True)
class BurnEvent:
    ticker: str
    owner: str
    amount: int
    memo: str = ""


@dataclass(frozen=True)
class TransferEvent:
    ticker: str
    from_address: str
    to_address: str
    amount: int
    memo: str = ""


@dataclass(frozen=True)
class TransferOwnershipEvent:
    ticker: str
    previous_owner: str
    new_owner: str


@dataclass(frozen=True)
class MintRequest:
    ticker: str
    minter: str
    amount: int
    memo: str = ""
    payment: int = 0
    unlimited: bool = False
    metadata: dict = field(default_factory=dict)
