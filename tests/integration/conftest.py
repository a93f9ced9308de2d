"""
Integration fixtures: the sample data seeded into a file-backed SQLite database.
"""
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from grocery_analytics.database.models import (
    Base,
    Category,
    Favorite,
    Order,
    OrderItem,
    Product,
    User,
)


def _without_join(rows):
    return [{key: value for key, value in row.items() if key != "product"} for row in rows]


@pytest.fixture
def database_file(tmp_path):
    return tmp_path / "analytics.db"


@pytest.fixture
async def session_factory(
    database_file,
    sample_categories,
    sample_products,
    sample_users,
    sample_orders,
    sample_order_items,
    sample_favorites,
):
    engine = create_async_engine(f"sqlite+aiosqlite:///{database_file}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False)
    favorites = _without_join(sample_favorites)
    # the dangling favorite has lost its product row
    favorites[-1]["product_id"] = None

    async with factory() as session:
        session.add_all(Category(**row) for row in sample_categories)
        session.add_all(Product(**row) for row in sample_products)
        session.add_all(User(**row) for row in sample_users)
        session.add_all(Order(**row) for row in sample_orders)
        session.add_all(
            OrderItem(id=f"i{index}", **row)
            for index, row in enumerate(_without_join(sample_order_items), start=1)
        )
        session.add_all(Favorite(**row) for row in favorites)
        await session.commit()

    yield factory
    await engine.dispose()


@pytest.fixture
def seeded_database_url(session_factory, database_file):
    return f"sqlite+aiosqlite:///{database_file}"
