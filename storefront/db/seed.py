"""
Demo catalog for development databases.
"""
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from storefront.db.models import Category, Product

logger = logging.getLogger(__name__)


async def seed_catalog(db: AsyncSession) -> bool:
    """Insert the demo categories and products if the catalog is empty. Returns True if it seeded."""
    result = await db.execute(select(func.count(Category.id)))
    if result.scalar():
        return False

    logger.info("Seeding demo catalog")

    veg = Category(name="Vegetables & Fruits", slug="veg-fruits", image_url="https://placehold.co/100x100?text=Veg")
    dairy = Category(name="Dairy & Breakfast", slug="dairy", image_url="https://placehold.co/100x100?text=Dairy")
    db.add_all([veg, dairy])
    await db.flush()

    db.add_all([
        Product(
            name="Fresh Tomato",
            description="Locally grown tomatoes",
            price=40,
            image_url="https://placehold.co/200x200?text=Tomato",
            category_id=veg.id,
            stock=100,
        ),
        Product(
            name="Amul Milk",
            description="Fresh milk 500ml",
            price=30,
            image_url="https://placehold.co/200x200?text=Milk",
            category_id=dairy.id,
            stock=50,
        ),
    ])
    await db.commit()
    return True
