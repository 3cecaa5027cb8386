import httpx
import pytest
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.core.security import create_access_token
from storefront.db.base import Base
from storefront.db.models import Category, Product
from storefront.db.session import get_db
from storefront.main import app


DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine():
    engine = create_async_engine(DATABASE_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def catalog(db_session):
    veg = Category(name="Vegetables & Fruits", slug="veg-fruits", image_url="https://img.test/veg.png")
    dairy = Category(name="Dairy & Breakfast", slug="dairy", image_url="https://img.test/dairy.png")
    db_session.add_all([veg, dairy])
    await db_session.flush()

    tomato = Product(
        name="Fresh Tomato",
        description="Locally grown tomatoes",
        price=40,
        image_url="https://img.test/tomato.png",
        category_id=veg.id,
        stock=100
    )
    milk = Product(
        name="Amul Milk",
        description="Fresh milk 500ml",
        price=30,
        image_url="https://img.test/milk.png",
        category_id=dairy.id,
        stock=50
    )
    onion = Product(
        name="Red Onion",
        description="1kg pack",
        price=25,
        image_url="https://img.test/onion.png",
        category_id=veg.id,
        stock=0
    )
    db_session.add_all([tomato, milk, onion])
    await db_session.commit()

    return {"veg": veg, "dairy": dairy, "tomato": tomato, "milk": milk, "onion": onion}


@pytest.fixture
def asgi_transport(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield httpx.ASGITransport(app=app)
    app.dependency_overrides.clear()


@pytest.fixture
async def api_client(asgi_transport):
    async with httpx.AsyncClient(transport=asgi_transport, base_url="http://test") as client:
        yield client


def make_token(subject_id: str = "u1", **claims) -> str:
    return create_access_token({"sub": subject_id, **claims})


def auth_headers(subject_id: str = "u1") -> dict:
    return {"Authorization": f"Bearer {make_token(subject_id)}"}
