import pytest

from totems.models import Balance, Totem, TotemStats
from totems.services.ledger import Ledger
from totems.utils.exceptions import InsufficientBalance, InvalidAmount, TotemNotFound

ALICE = "0x" + "a" * 40
BOB = "0x" + "b" * 40


class TestLedger:
    @pytest.fixture
    def ledger(self, db_session):
        db_session.add(
            Totem(
                ticker="LEDG",
                ticker_key="0x" + "00" * 32,
                list_index=0,
                creator=ALICE,
                name="Ledger",
                image="img",
                seed="0x" + "01" * 32,
                supply=0,
                max_supply=0,
                is_active=True,
            )
        )
        db_session.add(TotemStats(ticker="LEDG", mints=0, burns=0, transfers=0, holders=0))
        db_session.commit()
        return Ledger(db_session)

    def _sum_balances(self, db_session):
        return sum(b.balance for b in db_session.query(Balance).filter_by(ticker="LEDG").all())

    def test_credit_mints_supply_and_holder(self, ledger, db_session):
        ledger.credit("LEDG", ALICE, 100)

        assert ledger.get_balance("LEDG", ALICE) == 100
        assert ledger.get_totem("LEDG").supply == 100
        assert ledger.get_stats("LEDG").holders == 1
        assert self._sum_balances(db_session) == 100

    def test_second_credit_keeps_holder_count(self, ledger):
        ledger.credit("LEDG", ALICE, 100)
        ledger.credit("LEDG", ALICE, 5)
        assert ledger.get_stats("LEDG").holders == 1

    def test_zero_credit_does_not_create_holder(self, ledger):
        ledger.credit("LEDG", ALICE, 0)
        assert ledger.get_stats("LEDG").holders == 0

    def test_debit_to_zero_removes_holder(self, ledger):
        ledger.credit("LEDG", ALICE, 100)
        ledger.debit("LEDG", ALICE, 100)

        assert ledger.get_balance("LEDG", ALICE) == 0
        assert ledger.get_stats("LEDG").holders == 0
        assert ledger.get_totem("LEDG").supply == 0

    def test_debit_more_than_balance_fails(self, ledger):
        ledger.credit("LEDG", ALICE, 10)

        with pytest.raises(InsufficientBalance) as exc_info:
            ledger.debit("LEDG", ALICE, 11)

        assert exc_info.value.required == 11
        assert exc_info.value.available == 10
        assert ledger.get_balance("LEDG", ALICE) == 10
        assert ledger.get_totem("LEDG").supply == 10

    def test_debit_unknown_account_fails(self, ledger):
        with pytest.raises(InsufficientBalance) as exc_info:
            ledger.debit("LEDG", BOB, 1)
        assert exc_info.value.available == 0

    def test_negative_amount_rejected(self, ledger):
        with pytest.raises(InvalidAmount):
            ledger.credit("LEDG", ALICE, -1)

    def test_transfer_is_supply_neutral(self, ledger, db_session):
        ledger.credit("LEDG", ALICE, 100)
        ledger.transfer_balance("LEDG", ALICE, BOB, 40)

        assert ledger.get_balance("LEDG", ALICE) == 60
        assert ledger.get_balance("LEDG", BOB) == 40
        assert ledger.get_totem("LEDG").supply == 100
        assert ledger.get_stats("LEDG").holders == 2
        assert self._sum_balances(db_session) == 100

    def test_full_transfer_moves_holder(self, ledger):
        ledger.credit("LEDG", ALICE, 100)
        ledger.transfer_balance("LEDG", ALICE, BOB, 100)
        assert ledger.get_stats("LEDG").holders == 1

    def test_self_transfer_leaves_balance(self, ledger):
        ledger.credit("LEDG", ALICE, 100)
        ledger.transfer_balance("LEDG", ALICE, ALICE, 100)

        assert ledger.get_balance("LEDG", ALICE) == 100
        assert ledger.get_stats("LEDG").holders == 1

    def test_self_transfer_checks_balance(self, ledger):
        ledger.credit("LEDG", ALICE, 5)
        with pytest.raises(InsufficientBalance):
            ledger.transfer_balance("LEDG", ALICE, ALICE, 6)

    def test_transfer_failure_leaves_both_sides(self, ledger):
        ledger.credit("LEDG", ALICE, 5)
        with pytest.raises(InsufficientBalance):
            ledger.transfer_balance("LEDG", ALICE, BOB, 6)

        assert ledger.get_balance("LEDG", ALICE) == 5
        assert ledger.get_balance("LEDG", BOB) == 0

    def test_emit_raises_supply_ceiling(self, ledger):
        ledger.emit("LEDG", ALICE, 70)

        totem = ledger.get_totem("LEDG")
        assert totem.supply == 70
        assert totem.max_supply == 70

    def test_unknown_ticker(self, ledger):
        with pytest.raises(TotemNotFound):
            ledger.credit("NOPE", ALICE, 1)

    def test_amounts_survive_a_round_trip(self, ledger, db_session):
        big = 10**60
        ledger.credit("LEDG", ALICE, big)
        db_session.commit()
        db_session.expire_all()
        assert ledger.get_balance("LEDG", ALICE) == big
