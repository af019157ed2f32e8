import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401  registers mappers on Base.metadata
from app.database import Base
from app.services.aggregation_coordinator import AggregationCoordinator
from app.services.typed_reveal import TypedRevealEmitter
from fakes import FakeAdapter, FakeCache, record


@pytest.fixture
def paris_records():
    """The same place as three sources describe it."""
    return {
        "tripadvisor": [
            record("Paris", "France", "TripAdvisor", rating=4.5, type=["urban"],
                   highlights=["Eiffel Tower", "Louvre Museum"]),
        ],
        "lonelyplanet": [
            record("paris", "FRANCE", "Lonely Planet", rating=4.8, reviews=1200,
                   type=["cultural"], highlights=["Louvre Museum", "Montmartre"],
                   priceRange="€150-300/night",
                   weather={"summer": "Warm (20-25°C)", "winter": "Cold (5-10°C)"}),
            record("Lyon", "France", "Lonely Planet", rating=4.4),
        ],
        "booking": [
            record("Paris ", "France", "Booking.com", reviews=800, type=["urban", "romantic"]),
        ],
    }


@pytest.fixture
def fake_coordinator(paris_records):
    adapters = [FakeAdapter(provider, records) for provider, records in paris_records.items()]
    return AggregationCoordinator(adapters=adapters, timeout=1.0)


@pytest.fixture
def failing_coordinator():
    adapters = [
        FakeAdapter("tripadvisor", error=RuntimeError("scraper down")),
        FakeAdapter("lonelyplanet"),
        FakeAdapter("booking", error=ValueError("bad html")),
    ]
    return AggregationCoordinator(adapters=adapters, timeout=1.0)


@pytest.fixture
def fake_cache():
    return FakeCache()


@pytest.fixture
def instant_emitter():
    return TypedRevealEmitter(tick_ms=0)


@pytest.fixture
async def db_session():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        yield session

    await engine.dispose()
