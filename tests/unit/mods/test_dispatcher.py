import pytest

from totems.models.totem_mod import TotemMod
from totems.mods.base_mod import BaseMod
from totems.mods.contracts import (
    CreatedEvent,
    Hook,
    MintRequest,
    ModInfo,
    TransferEvent,
    hook_mask,
    hooks_from_mask,
)
from totems.mods.directory import ContractDirectory
from totems.mods.dispatcher import ModHookDispatcher
from totems.utils.exceptions import (
    InvalidAddress,
    InvalidAmount,
    ModDoesntSupportHook,
    ModMustSupportUnlimitedMinting,
    ModNotFound,
    ModNotMinter,
    ModNotSetup,
)

from conftest import PROXY, RecordingMod, address

FIRST = address(1)
SECOND = address(2)
TICKER = "HOOK"


def entry(mod, hook, position=0, hooks=tuple(Hook), requires_setup=False):
    return TotemMod(
        ticker=TICKER,
        hook=int(hook),
        position=position,
        address=mod,
        capabilities=hook_mask(hooks),
        requires_setup=requires_setup,
    )


def transfer_event():
    return TransferEvent(ticker=TICKER, from_address=FIRST, to_address=SECOND, amount=5)


class TestHookMask:
    def test_mask_round_trip(self):
        mask = hook_mask([Hook.MINT, Hook.TRANSFER])
        assert mask == 0b1010
        assert hooks_from_mask(mask) == (Hook.MINT, Hook.TRANSFER)

    def test_empty_mask(self):
        assert hooks_from_mask(0) == ()


class TestContractDirectory:
    def test_register_normalizes_address(self, directory):
        checksummed = "0xAbCdEf" + "0" * 34
        mod = RecordingMod(checksummed)
        resolved = directory.register(mod, checksummed)
        assert resolved == checksummed.lower()
        assert directory.has(checksummed.lower())
        assert directory.resolve_mod(checksummed) is mod

    def test_resolve_unknown_mod(self, directory):
        with pytest.raises(ModNotFound):
            directory.resolve_mod(FIRST)

    def test_resolve_non_mod_handle(self, directory):
        directory.register(object(), FIRST)
        with pytest.raises(ModNotFound):
            directory.resolve_mod(FIRST)

    def test_resolve_missing_factory(self, directory):
        directory.register(RecordingMod(FIRST))
        with pytest.raises(InvalidAddress):
            directory.resolve_factory(FIRST)


class TestModHookDispatcher:
    @pytest.fixture
    def mods(self, directory):
        first, second = RecordingMod(FIRST), RecordingMod(SECOND)
        directory.register(first)
        directory.register(second)
        return first, second

    @pytest.fixture
    def dispatcher(self, directory, market):
        return ModHookDispatcher(directory, market, proxy_mod=PROXY)

    def test_dispatch_in_list_order(self, dispatcher, mods):
        order = []
        for mod in mods:
            mod.on_transfer = lambda event, mod=mod: order.append(mod.address)

        calls = dispatcher.dispatch(
            Hook.TRANSFER,
            [entry(SECOND, Hook.TRANSFER, 0), entry(FIRST, Hook.TRANSFER, 1)],
            transfer_event(),
        )

        assert calls == 2
        assert order == [SECOND, FIRST]

    def test_same_mod_listed_twice_is_called_twice(self, dispatcher, mods):
        first, _ = mods
        dispatcher.dispatch(
            Hook.TRANSFER,
            [entry(FIRST, Hook.TRANSFER, 0), entry(FIRST, Hook.TRANSFER, 1)],
            transfer_event(),
        )
        assert len(first.hooks("transfer")) == 2

    def test_empty_list(self, dispatcher):
        assert dispatcher.dispatch(Hook.BURN, [], transfer_event()) == 0

    def test_capability_mismatch(self, dispatcher, mods):
        with pytest.raises(ModDoesntSupportHook) as exc_info:
            dispatcher.dispatch(
                Hook.TRANSFER,
                [entry(FIRST, Hook.TRANSFER, hooks=(Hook.MINT,))],
                transfer_event(),
            )
        assert exc_info.value.mod == FIRST
        assert mods[0].calls == []

    def test_hook_failure_propagates(self, dispatcher, mods):
        mods[0].fail_on.add("transfer")
        with pytest.raises(RuntimeError):
            dispatcher.dispatch(
                Hook.TRANSFER,
                [entry(FIRST, Hook.TRANSFER, 0), entry(SECOND, Hook.TRANSFER, 1)],
                transfer_event(),
            )
        assert mods[1].calls == []

    def test_created_skips_proxy(self, dispatcher, directory, mods):
        proxy = RecordingMod(PROXY)
        directory.register(proxy)

        calls = dispatcher.dispatch(
            Hook.CREATED,
            [entry(PROXY, Hook.CREATED, 0), entry(FIRST, Hook.CREATED, 1)],
            CreatedEvent(ticker=TICKER, creator=SECOND),
        )

        assert calls == 1
        assert proxy.calls == []
        assert len(mods[0].hooks("created")) == 1

    def test_proxy_receives_other_hooks(self, dispatcher, directory):
        proxy = RecordingMod(PROXY)
        directory.register(proxy)
        dispatcher.dispatch(Hook.TRANSFER, [entry(PROXY, Hook.TRANSFER)], transfer_event())
        assert len(proxy.hooks("transfer")) == 1

    def test_setup_required_outside_created(self, dispatcher, mods):
        with pytest.raises(ModNotSetup):
            dispatcher.dispatch(
                Hook.TRANSFER,
                [entry(FIRST, Hook.TRANSFER, requires_setup=True)],
                transfer_event(),
            )

        mods[0].setup_tickers.add(TICKER)
        assert dispatcher.dispatch(
            Hook.TRANSFER,
            [entry(FIRST, Hook.TRANSFER, requires_setup=True)],
            transfer_event(),
        ) == 1

    def test_created_ignores_setup(self, dispatcher, mods):
        calls = dispatcher.dispatch(
            Hook.CREATED,
            [entry(FIRST, Hook.CREATED, requires_setup=True)],
            CreatedEvent(ticker=TICKER, creator=SECOND),
        )
        assert calls == 1

    def test_unregistered_handle(self, dispatcher):
        with pytest.raises(ModNotFound):
            dispatcher.dispatch(Hook.TRANSFER, [entry(address(99), Hook.TRANSFER)], transfer_event())


class TestMinting:
    @pytest.fixture
    def dispatcher(self, directory, market):
        return ModHookDispatcher(directory, market)

    def test_require_minter(self, dispatcher, publish_mod):
        publish_mod(FIRST, is_minter=False)
        publish_mod(SECOND, is_minter=True)

        with pytest.raises(ModNotMinter):
            dispatcher.require_minter(FIRST, unlimited=False)
        with pytest.raises(ModMustSupportUnlimitedMinting):
            dispatcher.require_minter(SECOND, unlimited=True)
        assert dispatcher.require_minter(SECOND, unlimited=False).is_minter

    def test_request_mint_returns_grant(self, dispatcher, publish_mod):
        mod = publish_mod(FIRST, is_minter=True)
        mod.grant = 7

        granted = dispatcher.request_mint(
            ModInfo(address=FIRST, is_minter=True),
            MintRequest(ticker=TICKER, minter=SECOND, amount=10),
        )

        assert granted == 7
        assert mod.hooks("mint_request")[0].amount == 10

    @pytest.mark.parametrize("grant", [-1, "10", 1.5, None])
    def test_request_mint_rejects_bad_grant(self, dispatcher, publish_mod, grant):
        mod = publish_mod(FIRST, is_minter=True)
        mod.grant = grant
        if grant is None:
            mod.mint = lambda request: None

        with pytest.raises(InvalidAmount):
            dispatcher.request_mint(
                ModInfo(address=FIRST, is_minter=True),
                MintRequest(ticker=TICKER, minter=SECOND, amount=10),
            )

    def test_request_mint_requires_setup(self, dispatcher, publish_mod):
        mod = publish_mod(FIRST, is_minter=True, required_actions=("configure",))
        info = ModInfo(address=FIRST, is_minter=True, required_actions=("configure",))
        request = MintRequest(ticker=TICKER, minter=SECOND, amount=1)

        with pytest.raises(ModNotSetup):
            dispatcher.request_mint(info, request)

        mod.setup_tickers.add(TICKER)
        assert dispatcher.request_mint(info, request) == 1

    def test_default_mod_is_not_minter(self, dispatcher, directory):
        class PlainMod(BaseMod):
            pass

        directory.register(PlainMod(FIRST))
        with pytest.raises(ModNotMinter):
            dispatcher.request_mint(
                ModInfo(address=FIRST, is_minter=True),
                MintRequest(ticker=TICKER, minter=SECOND, amount=1),
            )
