from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from storefront.db.models import Category, Product


async def list_products(
    db: AsyncSession,
    category_id: Optional[int] = None,
    search: Optional[str] = None
) -> List[Product]:
    query = select(Product)

    if category_id is not None:
        query = query.where(Product.category_id == category_id)

    if search:
        query = query.where(Product.name.icontains(search, autoescape=True))

    result = await db.execute(query.order_by(Product.name, Product.id))
    return list(result.scalars().all())


async def get_product(db: AsyncSession, product_id: int) -> Optional[Product]:
    return await db.get(Product, product_id)


async def list_categories(db: AsyncSession) -> List[Category]:
    result = await db.execute(
        select(Category).order_by(Category.name)
    )
    return list(result.scalars().all())


async def get_category(db: AsyncSession, category_id: int) -> Optional[Category]:
    return await db.get(Category, category_id)
