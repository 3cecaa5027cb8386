from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.db.session import get_db
from storefront.schemas.product import ProductResponse
from storefront.services import catalog

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=List[ProductResponse])
async def list_products(
    category_id: Optional[int] = Query(None, alias="categoryId"),
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db)
):
    """List products, optionally filtered by category and name."""
    return await catalog.list_products(db, category_id, search)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    db: AsyncSession = Depends(get_db)
):
    product = await catalog.get_product(db, product_id)

    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    return product
