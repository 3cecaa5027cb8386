"""
Device-local shopping cart.

The cart is the only record of what the next order will contain until the
server accepts it. Its state is written through a CartStorage backend after
every mutation, so a new CartStore on the same backend and namespace picks up
where the previous one left off.
"""
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from storefront.schemas.base import CamelModel

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "sambamart-cart"


class CartItem(CamelModel):
    product_id: int
    name: str
    image_url: str
    # display-only snapshot, never sent at checkout
    price: int
    quantity: int = Field(ge=1)


class CartState(BaseModel):
    items: List[CartItem] = []
    is_open: bool = False


class CartStorage(ABC):
    """Where a cart's serialized state lives between sessions."""

    @abstractmethod
    def load(self, namespace: str) -> Optional[str]:
        ...

    @abstractmethod
    def save(self, namespace: str, data: str) -> None:
        ...

    @abstractmethod
    def delete(self, namespace: str) -> None:
        ...


class MemoryCartStorage(CartStorage):
    def __init__(self):
        self.data: Dict[str, str] = {}

    def load(self, namespace: str) -> Optional[str]:
        return self.data.get(namespace)

    def save(self, namespace: str, data: str) -> None:
        self.data[namespace] = data

    def delete(self, namespace: str) -> None:
        self.data.pop(namespace, None)


class JsonFileCartStorage(CartStorage):
    """Keeps each namespace in `<directory>/<namespace>.json`."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def _path(self, namespace: str) -> Path:
        return self.directory / f"{namespace}.json"

    def load(self, namespace: str) -> Optional[str]:
        path = self._path(namespace)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def save(self, namespace: str, data: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(namespace)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(data, encoding="utf-8")
        os.replace(tmp_path, path)

    def delete(self, namespace: str) -> None:
        self._path(namespace).unlink(missing_ok=True)


class CartStore:
    """
    Cart state for one device. Create one at application start and call
    reset() on logout.
    """

    def __init__(self, storage: Optional[CartStorage] = None, namespace: str = DEFAULT_NAMESPACE):
        self.storage = storage or MemoryCartStorage()
        self.namespace = namespace
        self._items: List[CartItem] = []
        self._is_open = False
        self._total = 0
        self._item_count = 0
        self._restore()

    @property
    def items(self) -> List[CartItem]:
        return [item.model_copy() for item in self._items]

    @property
    def total(self) -> int:
        return self._total

    @property
    def item_count(self) -> int:
        return self._item_count

    @property
    def is_open(self) -> bool:
        return self._is_open

    def add_item(self, product) -> None:
        """Add one unit of `product`; any object with id, name, price and image_url."""
        existing = self._find(product.id)

        if existing:
            existing.quantity += 1
        else:
            self._items.append(CartItem(
                product_id=product.id,
                name=product.name,
                image_url=product.image_url,
                price=product.price,
                quantity=1
            ))

        logger.debug(f"Added to cart: product_id={product.id}")
        self._commit()

    def remove_item(self, product_id: int) -> None:
        self._items = [item for item in self._items if item.product_id != product_id]
        logger.debug(f"Removed from cart: product_id={product_id}")
        self._commit()

    def update_quantity(self, product_id: int, quantity: int) -> None:
        if quantity <= 0:
            self.remove_item(product_id)
            return

        item = self._find(product_id)
        if item is None:
            return

        item.quantity = quantity
        logger.debug(f"Updated cart item: product_id={product_id}, quantity={quantity}")
        self._commit()

    def clear_cart(self) -> None:
        self._items = []
        logger.debug("Cart cleared")
        self._commit()

    def toggle_cart(self) -> None:
        self._is_open = not self._is_open
        self._save()

    def set_open(self, is_open: bool) -> None:
        self._is_open = is_open
        self._save()

    def reset(self) -> None:
        """Drop all cart state, including what was persisted. Called on logout."""
        self._items = []
        self._is_open = False
        self._recompute()
        self.storage.delete(self.namespace)

    def order_lines(self) -> List[Dict[str, int]]:
        """Lines for the checkout payload, without prices."""
        return [{"productId": item.product_id, "quantity": item.quantity} for item in self._items]

    def _find(self, product_id: int) -> Optional[CartItem]:
        return next((item for item in self._items if item.product_id == product_id), None)

    def _recompute(self) -> None:
        self._total = sum(item.price * item.quantity for item in self._items)
        self._item_count = sum(item.quantity for item in self._items)

    def _commit(self) -> None:
        self._recompute()
        self._save()

    def _save(self) -> None:
        state = CartState(items=self._items, is_open=self._is_open)
        self.storage.save(self.namespace, state.model_dump_json(by_alias=True))

    def _restore(self) -> None:
        raw = self.storage.load(self.namespace)
        if raw:
            try:
                state = CartState.model_validate_json(raw)
            except ValidationError as e:
                logger.warning(f"Discarding unreadable cart state in {self.namespace}: {str(e)}")
            else:
                self._items = state.items
                self._is_open = state.is_open
        self._recompute()
