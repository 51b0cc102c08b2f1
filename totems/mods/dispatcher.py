"""
Mod hook dispatch.

Each totem carries five ordered mod lists fixed at creation. For a hook
kind the dispatcher walks the matching list in creation order, checks the
capability bitmask stored for the entry, resolves the live handle and calls
the callback named in HOOK_HANDLERS. Any exception propagates to the
registry, which rolls the whole call back.
"""

from typing import Optional, Sequence

import structlog

from .base_mod import BaseMod, ModMarket
from .contracts import HOOK_HANDLERS, Hook, MintRequest, ModInfo, supports_hook
from .directory import ContractDirectory
from totems.models.totem_mod import TotemMod
from totems.utils.amounts import is_valid_amount
from totems.utils.exceptions import (
    InvalidAmount,
    ModDoesntSupportHook,
    ModMustSupportUnlimitedMinting,
    ModNotMinter,
    ModNotSetup,
)


class ModHookDispatcher:
    def __init__(self, directory: ContractDirectory, market: ModMarket, proxy_mod: Optional[str] = None):
        self.directory = directory
        self.market = market
        self.proxy_mod = proxy_mod
        self.logger = structlog.get_logger()

    def require_hook_support(self, mod_info: ModInfo, hook: Hook) -> None:
        if not supports_hook(mod_info.capabilities, hook):
            raise ModDoesntSupportHook(mod_info.address, hook.name)

    def require_setup(self, handle: BaseMod, ticker: str) -> None:
        if not handle.is_setup_for(ticker):
            raise ModNotSetup(handle.address, ticker)

    def dispatch(self, hook: Hook, entries: Sequence[TotemMod], event) -> int:
        """Fire one hook on every mod in a totem's list. Returns the number of calls made."""
        handler_name = HOOK_HANDLERS[hook]
        calls = 0

        for entry in entries:
            if hook == Hook.CREATED and self.proxy_mod and entry.address == self.proxy_mod:
                continue

            if not supports_hook(entry.capabilities, hook):
                raise ModDoesntSupportHook(entry.address, hook.name)

            handle = self.directory.resolve_mod(entry.address)

            # Setup happens per ticker after creation
            if entry.requires_setup and hook != Hook.CREATED:
                self.require_setup(handle, event.ticker)

            getattr(handle, handler_name)(event)
            calls += 1

            self.logger.debug("Hook dispatched", hook=hook.name, mod=entry.address, ticker=event.ticker)

        return calls

    def require_minter(self, mod: str, unlimited: bool) -> ModInfo:
        mod_info = self.market.get_mod(mod)
        if not mod_info.is_minter:
            raise ModNotMinter(mod)
        if unlimited and not mod_info.needs_unlimited:
            raise ModMustSupportUnlimitedMinting(mod)
        return mod_info

    def request_mint(self, mod_info: ModInfo, request: MintRequest) -> int:
        """Ask a minter mod how much of a request it grants"""
        handle = self.directory.resolve_mod(mod_info.address)
        if mod_info.requires_setup:
            self.require_setup(handle, request.ticker)

        granted = handle.mint(request)
        if not is_valid_amount(granted) or isinstance(granted, str):
            raise InvalidAmount(granted)

        self.logger.debug(
            "Mint granted",
            mod=mod_info.address,
            ticker=request.ticker,
            requested=request.amount,
            granted=int(granted),
        )
        return int(granted)
