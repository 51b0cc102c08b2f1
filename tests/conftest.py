import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("CACHE_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from totems.api.main import app
from totems.api.routers.totems import get_cache_service
from totems.database.connection import get_db
from totems.models import Base
from totems.mods.base_mod import BaseMod, ModMarket, RelayFactory
from totems.mods.contracts import Hook, ModInfo
from totems.mods.directory import ContractDirectory
from totems.records import Allocation, TotemDetails, TotemMods
from totems.services.registry import TotemRegistry
from totems.utils.addresses import normalize_address
from totems.utils.exceptions import ModNotFound

TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

MIN_BASE_FEE = 500000000000000
BURNED_FEE = 100000000000000
CREATOR = "0x" + "c" * 40
PROXY = "0x" + "9" * 40
SEED = bytes(range(1, 33))


def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db
app.dependency_overrides[get_cache_service] = lambda: None


def address(n: int) -> str:
    return "0x" + format(n, "040x")


class InMemoryModMarket(ModMarket):
    def __init__(self):
        self.mods = {}

    def publish(self, info: ModInfo):
        self.mods[normalize_address(info.address)] = info

    def get_mod(self, address: str) -> ModInfo:
        info = self.mods.get(normalize_address(address))
        if info is None:
            raise ModNotFound(address)
        return info

    def get_mods_fee(self, addresses) -> int:
        return sum(self.get_mod(a).price for a in addresses)


class RecordingMod(BaseMod):
    """Records every hook call; raises on the hooks listed in fail_on."""

    def __init__(self, address: str, fail_on=()):
        super().__init__(address)
        self.calls = []
        self.fail_on = set(fail_on)
        self.setup_tickers = set()
        self.grant = None

    def _record(self, hook: str, event):
        if hook in self.fail_on:
            raise RuntimeError(f"{hook} rejected")
        self.calls.append((hook, event))

    def on_created(self, event):
        self._record("created", event)

    def on_mint(self, event):
        self._record("mint", event)

    def on_burn(self, event):
        self._record("burn", event)

    def on_transfer(self, event):
        self._record("transfer", event)

    def on_transfer_ownership(self, event):
        self._record("transfer_ownership", event)

    def mint(self, request):
        self.calls.append(("mint_request", request))
        return request.amount if self.grant is None else self.grant

    def is_setup_for(self, ticker: str) -> bool:
        return ticker in self.setup_tickers

    def hooks(self, name: str):
        return [event for hook, event in self.calls if hook == name]


class StubRelay:
    def __init__(self, registry, address: str):
        self.registry = registry
        self.address = address

    def transfer(self, ticker, from_address, to_address, amount, memo=""):
        self.registry.transfer(self.address, ticker, from_address, to_address, amount, memo)

    def burn(self, ticker, owner, amount, memo=""):
        self.registry.burn(self.address, ticker, owner, amount, memo)

    def balance_of(self, ticker, account):
        return self.registry.get_balance(ticker, account)


class StubRelayFactory(RelayFactory):
    def __init__(self, address: str, directory: ContractDirectory):
        super().__init__(address)
        self.directory = directory
        self.registry = None
        self.created = []

    def create_relay(self, ticker: str) -> str:
        self.registry.get_totem(ticker)
        relay = StubRelay(self.registry, address(0xBEEF0000 + len(self.created)))
        self.directory.register(relay)
        self.created.append(relay)
        return relay.address


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    import logging
    import structlog

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.dev.ConsoleRenderer(),
    )

    root_logger = logging.getLogger()
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def market():
    return InMemoryModMarket()


@pytest.fixture
def directory():
    return ContractDirectory()


@pytest.fixture
def registry(db_session, market, directory):
    return TotemRegistry(
        db_session,
        market,
        directory,
        proxy_mod=PROXY,
        min_base_fee=MIN_BASE_FEE,
        burned_fee=BURNED_FEE,
    )


@pytest.fixture
def creator():
    return CREATOR


@pytest.fixture
def publish_mod(market, directory):
    """Register a mod handle and publish it on the market"""

    def _publish(
        mod,
        hooks=tuple(Hook),
        is_minter=False,
        needs_unlimited=False,
        price=0,
        required_actions=(),
        seller=None,
    ):
        if isinstance(mod, str):
            mod = RecordingMod(mod)
        directory.register(mod)
        market.publish(
            ModInfo(
                address=mod.address,
                hooks=tuple(hooks),
                is_minter=is_minter,
                needs_unlimited=needs_unlimited,
                seller=seller,
                price=price,
                required_actions=tuple(required_actions),
            )
        )
        return mod

    return _publish


@pytest.fixture
def relay_factory(registry, directory):
    factory = StubRelayFactory(address(0xFAC7), directory)
    factory.registry = registry
    directory.register(factory)
    return factory


@pytest.fixture
def make_totem(registry):
    """Create a totem with sensible defaults"""

    def _make(
        ticker="TEST",
        allocations=None,
        mods=None,
        creator=CREATOR,
        value=MIN_BASE_FEE,
        referrer=None,
        **details,
    ):
        if allocations is None:
            allocations = [Allocation(recipient=creator, amount=1000)]
        fields = {"name": f"{ticker} Totem", "image": "https://totems.test/img.png", "seed": SEED}
        fields.update(details)
        return registry.create(
            creator,
            TotemDetails(ticker=ticker, **fields),
            allocations,
            mods or TotemMods(),
            referrer=referrer,
            value=value,
        )

    return _make
