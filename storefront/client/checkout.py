import logging

from storefront.client.api import StorefrontClient
from storefront.client.cart import CartStore
from storefront.client.errors import InvalidInputError, SubmissionInProgressError
from storefront.schemas.order import OrderResponse

logger = logging.getLogger(__name__)

MIN_ADDRESS_LENGTH = 5


class OrderSubmitter:
    """
    Turns the cart into an order. The cart is cleared only after the server
    has accepted the order; a failed submission leaves it untouched.
    """

    def __init__(self, client: StorefrontClient, cart: CartStore, min_address_length: int = MIN_ADDRESS_LENGTH):
        self.client = client
        self.cart = cart
        self.min_address_length = min_address_length
        self._submitting = False

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    def validate(self, address: str) -> str:
        if not self.cart.items:
            raise InvalidInputError("Your cart is empty")

        address = (address or "").strip()
        if len(address) < self.min_address_length:
            raise InvalidInputError("Address is too short. Please provide full delivery details.")

        return address

    async def submit(self, address: str) -> OrderResponse:
        if self._submitting:
            raise SubmissionInProgressError("An order is already being placed")

        address = self.validate(address)
        lines = self.cart.order_lines()

        self._submitting = True
        try:
            order = await self.client.create_order(address, lines)
        finally:
            self._submitting = False

        self.cart.clear_cart()
        logger.info(f"Order {order.id} placed, total={order.total_amount}")
        return order
