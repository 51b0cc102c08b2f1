"""
Totem registry.

One long-lived registry owns every table. Each mutating entry point holds
the non-reentrant guard and runs as one database transaction: the ledger
mutation, notification rows and hook dispatch all happen before commit,
and any exception rolls the whole call back.
"""

from contextlib import contextmanager
from typing import List, Optional, Sequence

import structlog
from sqlalchemy import func
from sqlalchemy.orm import Session

from totems.config import settings
from totems.models.stats import TotemStats
from totems.models.totem import Totem
from totems.models.totem_mod import TotemMod
from totems.mods.base_mod import ModMarket
from totems.mods.contracts import (
    BurnEvent,
    CreatedEvent,
    Hook,
    MintEvent,
    MintRequest,
    TransferEvent,
    TransferOwnershipEvent,
)
from totems.mods.directory import ContractDirectory
from totems.mods.dispatcher import ModHookDispatcher
from totems.records import (
    Allocation,
    CreationReceipt,
    TotemDetails,
    TotemMods,
    TotemPage,
    TotemRecord,
    TotemStatsView,
)
from totems.services.cache_service import totem_cache_keys
from totems.services.event_log import EventLog
from totems.services.fees import FeeSchedule
from totems.services.guard import NonReentrantGuard
from totems.services.ledger import Ledger
from totems.services.license_manager import LicenseManager
from totems.services.relay_registry import RelayInfo, RelayRegistry
from totems.services.validator import TotemValidator
from totems.utils.addresses import ZERO_ADDRESS, is_zero_address, normalize_address
from totems.utils.amounts import to_amount
from totems.utils.exceptions import (
    CannotTransferToUnlimitedMinter,
    InvalidAddress,
    InvalidCursor,
    ModNotMinter,
    TotemAlreadyExists,
    TotemNotActive,
    TotemNotFound,
    Unauthorized,
)
from totems.utils.logging import log_operation
from totems.utils.ticker import normalize, ticker_to_bytes


class TotemRegistry:
    def __init__(
        self,
        db: Session,
        market: ModMarket,
        directory: ContractDirectory,
        proxy_mod: Optional[str] = None,
        cache=None,
        min_base_fee: Optional[int] = None,
        burned_fee: Optional[int] = None,
        treasury: Optional[str] = None,
    ):
        proxy_mod = proxy_mod or settings.PROXY_MOD_ADDRESS
        self.db = db
        self.market = market
        self.directory = directory
        self.proxy_mod = normalize_address(proxy_mod) if proxy_mod else None
        self.cache = cache
        self.logger = structlog.get_logger()

        self.guard = NonReentrantGuard()
        self.events = EventLog(db)
        self.ledger = Ledger(db)
        self.licenses = LicenseManager(db, self.events, self.proxy_mod)
        self.relays = RelayRegistry(db, self.licenses, self.events, directory)
        self.fees = FeeSchedule(db, market, self.events, min_base_fee, burned_fee, treasury)
        self.validator = TotemValidator(market)
        self.dispatcher = ModHookDispatcher(directory, market, self.proxy_mod)

        self._touched = set()

    @contextmanager
    def _mutation(self, operation: str):
        with self.guard.hold(operation):
            try:
                yield
                self.db.commit()
            except Exception as e:
                self.db.rollback()
                self._touched.clear()
                self.logger.warning(
                    "Registry call reverted",
                    operation=operation,
                    error_code=getattr(e, "error_code", None),
                    error=str(e),
                )
                raise

        self._invalidate_cache()

    def _invalidate_cache(self):
        touched, self._touched = self._touched, set()
        if self.cache is None:
            return
        for ticker in touched:
            for key in totem_cache_keys(self.cache, ticker):
                self.cache.delete(key)

    def _require_active(self, ticker: str) -> Totem:
        totem = self.db.get(Totem, ticker)
        if totem is None:
            raise TotemNotFound(ticker)
        if not totem.is_active:
            raise TotemNotActive(ticker)
        return totem

    def _require_owner_or_relay(self, caller: str, ticker: str, owner: str, action: str) -> None:
        if caller != owner and not self.relays.is_relay(ticker, caller):
            raise Unauthorized(caller, action)

    def _mod_entries(self, ticker: str, hook: Hook) -> List[TotemMod]:
        return (
            self.db.query(TotemMod)
            .filter_by(ticker=ticker, hook=int(hook))
            .order_by(TotemMod.position)
            .all()
        )

    def _to_record(self, totem: Totem) -> TotemRecord:
        mods = TotemMods()
        entries = (
            self.db.query(TotemMod)
            .filter_by(ticker=totem.ticker)
            .order_by(TotemMod.hook, TotemMod.position)
            .all()
        )
        for entry in entries:
            mods.for_hook(Hook(entry.hook)).append(entry.address)

        details = TotemDetails(
            ticker=totem.ticker,
            name=totem.name,
            image=totem.image,
            seed=totem.seed,
            description=totem.description,
            website=totem.website,
            decimals=totem.decimals,
        )
        return TotemRecord(
            ticker=totem.ticker,
            creator=totem.creator,
            details=details,
            supply=totem.supply,
            max_supply=totem.max_supply,
            mods=mods,
            is_active=totem.is_active,
            list_index=totem.list_index,
        )

    # Mutations

    def create(
        self,
        caller: str,
        details: TotemDetails,
        allocations: Sequence[Allocation],
        mods: Optional[TotemMods] = None,
        referrer: Optional[str] = None,
        value: int = 0,
    ) -> CreationReceipt:
        caller = normalize_address(caller)
        referrer = normalize_address(referrer) if referrer else ZERO_ADDRESS
        mods = mods or TotemMods()

        with self._mutation("create"):
            key = normalize(details.ticker)
            ticker = key.symbol
            if self.db.get(Totem, ticker) is not None:
                raise TotemAlreadyExists(ticker)

            seed = self.validator.validate_details(details)
            self.validator.validate_limits(allocations, mods)
            mods = self.validator.normalize_mods(mods)
            mod_infos = self.validator.validate_mods(mods)

            quote = self.fees.quote(referrer, mods.unique_addresses())
            settlement = self.fees.settle(quote, referrer, value)

            validated = self.validator.validate_allocations(ticker, allocations)

            totem = Totem(
                ticker=ticker,
                ticker_key=key.hex,
                list_index=self.db.query(func.count(Totem.ticker)).scalar(),
                creator=caller,
                name=details.name,
                description=details.description or "",
                image=details.image,
                website=details.website or "",
                decimals=details.decimals,
                seed="0x" + seed.hex(),
                supply=0,
                max_supply=0,
                is_active=False,
            )
            self.db.add(totem)
            self.db.add(TotemStats(ticker=ticker, mints=0, burns=0, transfers=0, holders=0))

            for hook, addresses in mods.items():
                for position, address in enumerate(addresses):
                    mod_info = mod_infos[address]
                    self.db.add(
                        TotemMod(
                            ticker=ticker,
                            hook=int(hook),
                            position=position,
                            address=address,
                            capabilities=mod_info.capabilities,
                            requires_setup=mod_info.requires_setup,
                        )
                    )
            self.db.flush()

            stats = self.ledger.get_stats(ticker)
            unlimited_minters = []
            for allocation in validated:
                if allocation.is_minter:
                    self.licenses.declare_minter(ticker, allocation.recipient, allocation.is_unlimited)
                    self.licenses.grant(ticker, allocation.recipient)
                    if allocation.is_unlimited:
                        unlimited_minters.append(allocation.recipient)
                if allocation.amount > 0:
                    self.ledger.credit(ticker, allocation.recipient, allocation.amount)
                    stats.mints += 1
            totem.max_supply = totem.supply

            for address in mods.unique_addresses():
                self.licenses.grant(ticker, address)
            self.db.flush()

            self.events.emit(
                EventLog.TOTEM_CREATED,
                ticker=ticker,
                actor=caller,
                counterparty=referrer,
                amount=totem.supply,
                payment=settlement.provided,
                data={
                    "required_fee": str(settlement.required),
                    "refund": str(settlement.refund),
                    "burned_fee": str(settlement.burned),
                    "referrer_payout": str(settlement.referrer_payout),
                    "mods_fee": str(settlement.mods_fee),
                },
            )

            created_hooks = self.dispatcher.dispatch(
                Hook.CREATED,
                self._mod_entries(ticker, Hook.CREATED),
                CreatedEvent(ticker=ticker, creator=caller),
            )

            totem.is_active = True
            self._touched.add(ticker)

            receipt = CreationReceipt(
                ticker=ticker,
                required_fee=settlement.required,
                provided=settlement.provided,
                refund=settlement.refund,
                burned_fee=settlement.burned,
                referrer=settlement.referrer,
                referrer_payout=settlement.referrer_payout,
                mods_fee=settlement.mods_fee,
                created_hooks=created_hooks,
                unlimited_minters=tuple(unlimited_minters),
            )

        log_operation("Totem created", ticker=ticker, creator=caller, supply=str(totem.supply))
        return receipt

    def mint(
        self,
        caller: str,
        mod: str,
        minter: str,
        ticker: str,
        amount: int,
        memo: str = "",
        payment: int = 0,
    ) -> int:
        caller = normalize_address(caller)
        mod = normalize_address(mod)
        minter = normalize_address(minter)

        with self._mutation("mint"):
            ticker = normalize(ticker).symbol
            self._require_active(ticker)
            self._require_owner_or_relay(caller, ticker, minter, "mint")
            if self.licenses.is_unlimited_minter(ticker, minter):
                raise CannotTransferToUnlimitedMinter(ticker, minter)

            declaration = self.licenses.get_minter(ticker, mod)
            if declaration is None:
                raise ModNotMinter(mod, ticker)
            self.licenses.require_licensed(ticker, mod)
            mod_info = self.dispatcher.require_minter(mod, declaration.is_unlimited)

            requested = to_amount(amount)
            payment = to_amount(payment)
            minted = self.dispatcher.request_mint(
                mod_info,
                MintRequest(
                    ticker=ticker,
                    minter=minter,
                    amount=requested,
                    memo=memo,
                    payment=payment,
                    unlimited=declaration.is_unlimited,
                ),
            )

            if declaration.is_unlimited:
                self.ledger.emit(ticker, minter, minted)
            else:
                self.ledger.transfer_balance(ticker, mod, minter, minted)
            self.ledger.get_stats(ticker).mints += 1
            self.db.flush()

            self.events.emit(
                EventLog.TOTEM_MINTED,
                ticker=ticker,
                actor=minter,
                mod=mod,
                amount=minted,
                payment=payment,
                memo=memo,
            )
            self.dispatcher.dispatch(
                Hook.MINT,
                self._mod_entries(ticker, Hook.MINT),
                MintEvent(ticker=ticker, minter=minter, mod=mod, amount=minted, payment=payment, memo=memo),
            )
            self._touched.add(ticker)

        log_operation("Totem minted", ticker=ticker, level="DEBUG", mod=mod, minter=minter, amount=str(minted))
        return minted

    def burn(self, caller: str, ticker: str, owner: str, amount: int, memo: str = "") -> None:
        caller = normalize_address(caller)
        owner = normalize_address(owner)

        with self._mutation("burn"):
            ticker = normalize(ticker).symbol
            self._require_active(ticker)
            self._require_owner_or_relay(caller, ticker, owner, "burn")

            amount = to_amount(amount)
            self.ledger.debit(ticker, owner, amount)
            self.ledger.get_stats(ticker).burns += 1
            self.db.flush()

            self.events.emit(EventLog.TOTEM_BURNED, ticker=ticker, actor=owner, amount=amount, memo=memo)
            self.dispatcher.dispatch(
                Hook.BURN,
                self._mod_entries(ticker, Hook.BURN),
                BurnEvent(ticker=ticker, owner=owner, amount=amount, memo=memo),
            )
            self._touched.add(ticker)

    def transfer(
        self,
        caller: str,
        ticker: str,
        from_address: str,
        to_address: str,
        amount: int,
        memo: str = "",
    ) -> None:
        caller = normalize_address(caller)
        from_address = normalize_address(from_address)
        to_address = normalize_address(to_address)

        with self._mutation("transfer"):
            ticker = normalize(ticker).symbol
            self._require_active(ticker)
            self._require_owner_or_relay(caller, ticker, from_address, "transfer")

            if to_address == ZERO_ADDRESS:
                raise InvalidAddress(to_address, "Recipient cannot be zero address")
            if self.licenses.is_unlimited_minter(ticker, to_address):
                raise CannotTransferToUnlimitedMinter(ticker, to_address)

            amount = to_amount(amount)
            if self.licenses.is_unlimited_minter(ticker, from_address):
                self.ledger.emit(ticker, to_address, amount)
            else:
                self.ledger.transfer_balance(ticker, from_address, to_address, amount)
            self.ledger.get_stats(ticker).transfers += 1
            self.db.flush()

            self.events.emit(
                EventLog.TOTEM_TRANSFERRED,
                ticker=ticker,
                actor=from_address,
                counterparty=to_address,
                amount=amount,
                memo=memo,
            )
            self.dispatcher.dispatch(
                Hook.TRANSFER,
                self._mod_entries(ticker, Hook.TRANSFER),
                TransferEvent(
                    ticker=ticker,
                    from_address=from_address,
                    to_address=to_address,
                    amount=amount,
                    memo=memo,
                ),
            )
            self._touched.add(ticker)

    def transfer_ownership(self, caller: str, ticker: str, new_owner: str) -> None:
        caller = normalize_address(caller)

        with self._mutation("transfer_ownership"):
            ticker = normalize(ticker).symbol
            totem = self._require_active(ticker)
            if caller != totem.creator:
                raise Unauthorized(caller, "transfer_ownership")
            if is_zero_address(new_owner):
                raise InvalidAddress(new_owner, "New owner cannot be zero address")

            new_owner = normalize_address(new_owner)
            previous_owner = totem.creator
            totem.creator = new_owner
            self.db.flush()

            self.events.emit(
                EventLog.OWNERSHIP_TRANSFERRED,
                ticker=ticker,
                actor=previous_owner,
                counterparty=new_owner,
            )
            self.dispatcher.dispatch(
                Hook.TRANSFER_OWNERSHIP,
                self._mod_entries(ticker, Hook.TRANSFER_OWNERSHIP),
                TransferOwnershipEvent(ticker=ticker, previous_owner=previous_owner, new_owner=new_owner),
            )
            self._touched.add(ticker)

    def create_relay(self, caller: str, ticker: str, factory: str, standard: str) -> str:
        caller = normalize_address(caller)
        factory = normalize_address(factory)

        with self._mutation("create_relay"):
            ticker = normalize(ticker).symbol
            relay = self.relays.create_relay(caller, ticker, factory, standard)
            self._touched.add(ticker)

        return relay

    def add_relay(self, caller: str, ticker: str, relay: str, standard: str) -> None:
        caller = normalize_address(caller)
        relay = normalize_address(relay)

        with self._mutation("add_relay"):
            ticker = normalize(ticker).symbol
            self.relays.add_relay(caller, ticker, relay, standard)
            self._touched.add(ticker)

    def remove_relay(self, caller: str, ticker: str, relay: str) -> None:
        caller = normalize_address(caller)
        relay = normalize_address(relay)

        with self._mutation("remove_relay"):
            ticker = normalize(ticker).symbol
            self.relays.remove_relay(caller, ticker, relay)
            self._touched.add(ticker)

    def set_license_from_proxy(self, caller: str, ticker: str, mod: str) -> bool:
        caller = normalize_address(caller)
        mod = normalize_address(mod)

        with self._mutation("set_license_from_proxy"):
            ticker = normalize(ticker).symbol
            granted = self.licenses.grant_from_proxy(caller, ticker, mod)
            self._touched.add(ticker)

        return granted

    def set_referrer_fee(self, caller: str, fee: int) -> None:
        caller = normalize_address(caller)

        with self._mutation("set_referrer_fee"):
            self.fees.set_referrer_fee(caller, fee)

    # Reads

    def get_fee(self, referrer: Optional[str] = None) -> int:
        return self.fees.get_fee(normalize_address(referrer) if referrer else None)

    def get_totem(self, ticker: str) -> TotemRecord:
        ticker = normalize(ticker).symbol
        totem = self.db.get(Totem, ticker)
        if totem is None:
            raise TotemNotFound(ticker)
        return self._to_record(totem)

    def get_totems(self, tickers: Sequence[str]) -> List[TotemRecord]:
        """Look up several totems in request order. Any miss fails the whole lookup."""
        return [self.get_totem(ticker) for ticker in tickers]

    def list_totems(self, per_page: int, cursor: int = 0) -> TotemPage:
        total = self.db.query(func.count(Totem.ticker)).scalar()
        if cursor < 0 or cursor > total:
            raise InvalidCursor(cursor, total)

        per_page = max(per_page, 0)
        rows = []
        if per_page:
            rows = (
                self.db.query(Totem)
                .filter(Totem.list_index >= cursor)
                .order_by(Totem.list_index)
                .limit(per_page)
                .all()
            )

        next_cursor = cursor + len(rows)
        return TotemPage(
            totems=[self._to_record(totem) for totem in rows],
            next_cursor=next_cursor,
            has_more=next_cursor < total,
        )

    def get_balance(self, ticker: str, account: str) -> int:
        return self.ledger.get_balance(normalize(ticker).symbol, normalize_address(account))

    def get_stats(self, ticker: str) -> TotemStatsView:
        ticker = normalize(ticker).symbol
        totem = self.ledger.get_totem(ticker)
        stats = self.db.get(TotemStats, ticker)
        return TotemStatsView(
            ticker=ticker,
            mints=stats.mints if stats else 0,
            burns=stats.burns if stats else 0,
            transfers=stats.transfers if stats else 0,
            holders=stats.holders if stats else 0,
            supply=totem.supply,
        )

    def get_relays(self, ticker: str) -> List[RelayInfo]:
        return self.relays.get_relays(normalize(ticker).symbol)

    def get_relay_of_standard(self, ticker: str, standard: str) -> Optional[str]:
        return self.relays.get_relay_of_standard(normalize(ticker).symbol, standard)

    def is_licensed(self, ticker: str, mod: str) -> bool:
        return self.licenses.is_licensed(normalize(ticker).symbol, normalize_address(mod))

    def ticker_to_bytes(self, ticker: str) -> bytes:
        return ticker_to_bytes(ticker)
