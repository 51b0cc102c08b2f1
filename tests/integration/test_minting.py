import pytest

from totems.models import TotemEvent
from totems.records import Allocation, TotemMods
from totems.utils.exceptions import (
    CannotTransferToUnlimitedMinter,
    InsufficientBalance,
    ModNotMinter,
    ModNotSetup,
    TotemNotFound,
    Unauthorized,
)

from conftest import CREATOR, address

ALICE = address(0xA11CE)
MINTER = address(0x11)
UNLIMITED = address(0x12)


@pytest.fixture
def minter(publish_mod):
    return publish_mod(MINTER, is_minter=True)


@pytest.fixture
def unlimited(publish_mod):
    return publish_mod(UNLIMITED, is_minter=True, needs_unlimited=True)


@pytest.fixture
def totem(make_totem, minter, unlimited):
    make_totem(
        "MINT",
        allocations=[
            Allocation(recipient=CREATOR, amount=100),
            Allocation(recipient=MINTER, amount=1000, is_minter=True),
            Allocation(recipient=UNLIMITED, amount=0, is_minter=True),
        ],
    )
    return "MINT"


class TestLimitedMinter:
    def test_mint_moves_from_minter_balance(self, registry, totem, minter):
        minted = registry.mint(ALICE, MINTER, ALICE, totem, 300, memo="hello", payment=7)

        assert minted == 300
        assert registry.get_balance(totem, ALICE) == 300
        assert registry.get_balance(totem, MINTER) == 700
        stats = registry.get_stats(totem)
        assert stats.supply == 1100
        assert stats.mints == 3

        request = minter.hooks("mint_request")[0]
        assert request.minter == ALICE
        assert request.amount == 300
        assert request.payment == 7
        assert request.memo == "hello"
        assert not request.unlimited

    def test_granted_amount_is_reported(self, registry, totem, minter):
        minter.grant = 25
        assert registry.mint(ALICE, MINTER, ALICE, totem, 300) == 25
        assert registry.get_balance(totem, ALICE) == 25

    def test_mint_beyond_minter_balance(self, registry, totem):
        with pytest.raises(InsufficientBalance):
            registry.mint(ALICE, MINTER, ALICE, totem, 1001)
        assert registry.get_balance(totem, MINTER) == 1000

    def test_mint_event_is_recorded(self, registry, totem, db_session):
        registry.mint(ALICE, MINTER, ALICE, totem, 10, payment=3)
        event = db_session.query(TotemEvent).filter_by(ticker=totem, event_type="TotemMinted").one()
        assert event.actor == ALICE
        assert event.mod == MINTER
        assert event.amount == 10
        assert event.payment == 3


class TestUnlimitedMinter:
    def test_unlimited_mint_emits_supply(self, registry, totem, unlimited):
        minted = registry.mint(ALICE, UNLIMITED, ALICE, totem, 5000)

        assert minted == 5000
        assert registry.get_balance(totem, ALICE) == 5000
        assert registry.get_balance(totem, UNLIMITED) == 0
        record = registry.get_totem(totem)
        assert record.supply == 6100
        assert record.max_supply == 6100
        assert unlimited.hooks("mint_request")[0].unlimited


class TestMintRejections:
    def test_mod_without_minter_allocation(self, registry, totem, publish_mod):
        other = publish_mod(address(0x13), is_minter=True)
        with pytest.raises(ModNotMinter):
            registry.mint(ALICE, other.address, ALICE, totem, 1)

    def test_caller_must_be_minter_or_relay(self, registry, totem):
        with pytest.raises(Unauthorized):
            registry.mint(CREATOR, MINTER, ALICE, totem, 1)

    def test_unknown_totem(self, registry, totem):
        with pytest.raises(TotemNotFound):
            registry.mint(ALICE, MINTER, ALICE, "NOPE", 1)

    def test_cannot_mint_into_unlimited_minter(self, registry, totem):
        with pytest.raises(CannotTransferToUnlimitedMinter):
            registry.mint(UNLIMITED, MINTER, UNLIMITED, totem, 100)

        assert registry.get_balance(totem, UNLIMITED) == 0
        assert registry.get_balance(totem, MINTER) == 1000
        assert registry.get_stats(totem).mints == 2

        registry.transfer(UNLIMITED, totem, UNLIMITED, ALICE, 100)
        assert registry.get_balance(totem, UNLIMITED) == 0
        assert registry.get_totem(totem).supply == 1200

    def test_setup_required(self, registry, make_totem, publish_mod):
        mod = publish_mod(address(0x14), is_minter=True, required_actions=("configure",))
        make_totem(
            "SETUP",
            allocations=[Allocation(recipient=mod.address, amount=10, is_minter=True)],
        )

        with pytest.raises(ModNotSetup):
            registry.mint(ALICE, mod.address, ALICE, "SETUP", 1)

        mod.setup_tickers.add("SETUP")
        assert registry.mint(ALICE, mod.address, ALICE, "SETUP", 1) == 1


class TestMintHooks:
    def test_mint_hooks_fire_after_ledger_update(self, registry, make_totem, publish_mod, minter):
        observer = publish_mod(address(0x20))
        seen = []
        observer.on_mint = lambda event: seen.append((event, registry.get_balance("OBS", ALICE)))

        make_totem(
            "OBS",
            allocations=[Allocation(recipient=MINTER, amount=50, is_minter=True)],
            mods=TotemMods(mint=[observer.address]),
        )
        registry.mint(ALICE, MINTER, ALICE, "OBS", 20, memo="m")

        event, balance_during_hook = seen[0]
        assert balance_during_hook == 20
        assert event.minter == ALICE
        assert event.mod == MINTER
        assert event.amount == 20
        assert event.memo == "m"

    def test_failing_mint_hook_reverts(self, registry, make_totem, publish_mod, minter):
        observer = publish_mod(address(0x20))
        observer.fail_on.add("mint")

        make_totem(
            "REV",
            allocations=[Allocation(recipient=MINTER, amount=50, is_minter=True)],
            mods=TotemMods(mint=[observer.address]),
        )

        with pytest.raises(RuntimeError):
            registry.mint(ALICE, MINTER, ALICE, "REV", 20)

        assert registry.get_balance("REV", ALICE) == 0
        assert registry.get_balance("REV", MINTER) == 50
        assert registry.get_stats("REV").mints == 1
