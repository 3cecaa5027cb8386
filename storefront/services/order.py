import asyncio
import logging
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from storefront.core.config import settings
from storefront.core.errors import (
    ForbiddenError,
    InvalidOrderError,
    NotFoundError,
    PersistenceError,
    UnauthenticatedError,
)
from storefront.db.models import Order, OrderItem, OrderStatus, Product
from storefront.schemas.order import OrderCreate

logger = logging.getLogger(__name__)

SKIP_UNKNOWN = "skip"
REJECT_UNKNOWN = "reject"


async def price_order_lines(
    db: AsyncSession,
    data: OrderCreate,
    unknown_product_policy: str = SKIP_UNKNOWN
) -> Tuple[List[Tuple[Product, int]], int]:
    """
    Resolve every requested line against the catalog and compute the total
    from server-side prices. Client-supplied prices are never consulted.
    """
    if unknown_product_policy not in (SKIP_UNKNOWN, REJECT_UNKNOWN):
        raise ValueError(f"Unknown product policy: {unknown_product_policy}")

    lines = []
    total = 0

    for item in data.items:
        product = await db.get(Product, item.product_id)

        if product is None:
            if unknown_product_policy == REJECT_UNKNOWN:
                logger.warning(f"Rejecting order: product {item.product_id} not found")
                raise InvalidOrderError(f"Product {item.product_id} not available")
            logger.warning(f"Skipping unknown product {item.product_id}")
            continue

        lines.append((product, item.quantity))
        total += product.price * item.quantity

    return lines, total


async def _place_order(
    db: AsyncSession,
    subject_id: str,
    data: OrderCreate,
    unknown_product_policy: str
) -> Tuple[Order, int]:
    lines, total = await price_order_lines(db, data, unknown_product_policy)

    new_order = Order(
        user_id=subject_id,
        status=OrderStatus.PENDING,
        total_amount=total,
        address=data.address,
    )
    db.add(new_order)
    await db.flush()

    for product, quantity in lines:
        db.add(OrderItem(
            order_id=new_order.id,
            product_id=product.id,
            quantity=quantity,
            price=product.price
        ))

    await db.commit()
    await db.refresh(new_order)
    return new_order, len(lines)


async def create_order(
    db: AsyncSession,
    subject_id: Optional[str],
    data: OrderCreate,
    unknown_product_policy: Optional[str] = None,
    timeout: Optional[float] = None
) -> Order:
    """
    Record a pending order for `subject_id`.

    Pricing and the writes of the order row and all of its item rows run in
    one transaction bounded by `timeout`: on any storage failure or expiry the
    session is rolled back and PersistenceError is raised.
    """
    if not subject_id:
        raise UnauthenticatedError("Authentication required")

    policy = unknown_product_policy or settings.UNKNOWN_PRODUCT_POLICY
    timeout = timeout if timeout is not None else settings.DB_TIMEOUT_SECONDS
    if policy not in (SKIP_UNKNOWN, REJECT_UNKNOWN):
        raise ValueError(f"Unknown product policy: {policy}")

    try:
        new_order, line_count = await asyncio.wait_for(
            _place_order(db, subject_id, data, policy),
            timeout=timeout
        )
    except InvalidOrderError:
        await db.rollback()
        raise
    except asyncio.TimeoutError:
        await db.rollback()
        logger.error(f"Timed out saving order for user {subject_id} after {timeout}s")
        raise PersistenceError("Timed out saving order")
    except Exception as e:
        await db.rollback()
        logger.error(f"Failed to save order for user {subject_id}: {str(e)}")
        raise PersistenceError("Failed to save order") from e

    logger.info(f"Order created: id={new_order.id}, user={subject_id}, total={new_order.total_amount}, items={line_count}")
    return new_order


async def list_orders(db: AsyncSession, subject_id: str) -> List[Order]:
    result = await db.execute(
        select(Order)
        .where(Order.user_id == subject_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
    )
    return list(result.scalars().all())


async def get_order(db: AsyncSession, order_id: int, subject_id: str) -> Order:
    order = await db.get(Order, order_id)

    if order is None:
        raise NotFoundError("Order not found")

    if order.user_id != subject_id:
        raise ForbiddenError("Forbidden")

    return order


async def list_order_items(db: AsyncSession, order_id: int, subject_id: str) -> List[OrderItem]:
    order = await get_order(db, order_id, subject_id)

    result = await db.execute(
        select(OrderItem)
        .where(OrderItem.order_id == order.id)
        .order_by(OrderItem.id)
    )
    return list(result.scalars().all())
