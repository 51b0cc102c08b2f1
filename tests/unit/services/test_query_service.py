from unittest.mock import MagicMock

import pytest

from totems.services.query_service import TotemQueryService
from totems.utils.exceptions import TotemNotFound


class TestTotemQueryService:
    @pytest.fixture
    def cache(self):
        cache = MagicMock()
        cache.generate_key.side_effect = lambda prefix, *args: f"{prefix}:{'_'.join(args)}"
        cache.get.return_value = None
        return cache

    def test_cache_hit_skips_database(self, db_session, cache):
        cache.get.return_value = {"ticker": "HIT"}
        service = TotemQueryService(db_session, cache)

        assert service.get_totem_info("hit") == {"ticker": "HIT"}
        cache.get.assert_called_once_with("totem:HIT")
        cache.set.assert_not_called()

    def test_cache_miss_populates(self, db_session, cache, make_totem):
        make_totem("MISS")
        service = TotemQueryService(db_session, cache)

        stats = service.get_stats("MISS")

        assert stats["supply"] == "1000"
        cache.set.assert_called_once_with("stats:MISS", stats)

    def test_missing_totem_is_not_cached(self, db_session, cache):
        service = TotemQueryService(db_session, cache)
        with pytest.raises(TotemNotFound):
            service.get_totem_info("NOPE")
        cache.set.assert_not_called()

    def test_registry_mutation_invalidates(self, db_session, cache, make_totem, registry):
        make_totem("INV")
        registry.cache = cache

        registry.burn("0x" + "c" * 40, "INV", "0x" + "c" * 40, 1)

        deleted = {call.args[0] for call in cache.delete.call_args_list}
        assert deleted == {"totem:INV", "stats:INV", "relays:INV"}

    def test_failed_mutation_keeps_cache(self, db_session, cache, make_totem, registry):
        make_totem("KEEP")
        registry.cache = cache

        with pytest.raises(Exception):
            registry.burn("0x" + "c" * 40, "KEEP", "0x" + "c" * 40, 10 ** 9)

        cache.delete.assert_not_called()

    def test_page_size_is_capped(self, db_session):
        service = TotemQueryService(db_session)
        page = service.list_totems(0, 10 ** 6)
        assert page["items"] == []
        assert page["total"] == 0

    def test_fee_follows_fee_schedule(self, db_session, registry):
        registry.fees.min_base_fee = 1000
        registry.fees.burned_fee = 300
        registry.set_referrer_fee("0x" + "a" * 40, 5000)
        service = TotemQueryService(db_session, fees=registry.fees)

        assert service.get_fee() == {"referrer": None, "fee": "1000", "burned_fee": "300"}
        assert service.get_fee("0x" + "a" * 40)["fee"] == str(registry.get_fee("0x" + "a" * 40))
