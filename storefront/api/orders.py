from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.dependencies import get_current_subject
from storefront.core.errors import ForbiddenError, InvalidOrderError, NotFoundError, PersistenceError
from storefront.db.session import get_db
from storefront.schemas.auth import Subject
from storefront.schemas.order import OrderCreate, OrderItemResponse, OrderResponse
from storefront.services import order as order_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/orders", tags=["orders"])


def _lookup_error(e: Exception) -> HTTPException:
    if isinstance(e, ForbiddenError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    order_data: OrderCreate,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a pending order. Line prices and the total come from the catalog,
    never from the request.
    """
    try:
        return await order_service.create_order(db, subject.id, order_data)
    except InvalidOrderError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except PersistenceError:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create order")


@router.get("", response_model=List[OrderResponse])
async def list_orders(
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db)
):
    """List the caller's orders, newest first."""
    return await order_service.list_orders(db, subject.id)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db)
):
    try:
        return await order_service.get_order(db, order_id, subject.id)
    except (NotFoundError, ForbiddenError) as e:
        raise _lookup_error(e)


@router.get("/{order_id}/items", response_model=List[OrderItemResponse])
async def get_order_items(
    order_id: int,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db)
):
    """Line items of one of the caller's orders, with their price snapshots."""
    try:
        return await order_service.list_order_items(db, order_id, subject.id)
    except (NotFoundError, ForbiddenError) as e:
        raise _lookup_error(e)
