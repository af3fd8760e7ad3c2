"""
Shop

Consumer side of the loop: queues customer orders, serves them one item
per tick from the StorageLedger, and signals demand back to dispatch.
"""

import logging
import random
from collections import deque
from typing import Deque, Dict, Any, List, Optional

from .base import EventSource, ParamValidator
from .dispatch import DispatchController
from .items import Item
from .storage import StorageLedger
from ..flow.events import LogisticsEventType

logger = logging.getLogger("Shop")


class Customer:
    """A customer order: satisfied once it holds requested_items items."""

    def __init__(self, customer_id: str, requested_items: int):
        self.id = customer_id
        self.requested_items = ParamValidator.validate_positive(requested_items, "Requested items")
        self._items: List[Item] = []

    @property
    def fulfilled(self) -> int:
        return len(self._items)

    @property
    def is_satisfied(self) -> bool:
        return self.fulfilled >= self.requested_items

    def add_item(self, item: Item) -> None:
        self._items.append(item)


class Shop(EventSource):
    """
    Single shop bound to a single warehouse.

    Order sizes default to a seeded uniform draw in [min_order, max_order]
    so runs are reproducible.
    """

    device_id = "shop"

    def __init__(self, storage: StorageLedger, dispatch: DispatchController,
                 seed: int = 42, min_order: int = 1, max_order: int = 5):
        self.storage = storage
        self.dispatch = dispatch
        self.min_order = ParamValidator.validate_positive(min_order, "Min order")
        if max_order < min_order:
            raise ValueError("Max order must not be below min order")
        self.max_order = max_order
        self._rng = random.Random(seed)

        self._queue: Deque[Customer] = deque()
        self.current_customer: Optional[Customer] = None
        self._next_customer_number = 1

        self.satisfied_customers = 0
        self.delivered_items = 0

    # ========== Read-Only State ==========

    @property
    def customers_in_shop(self) -> int:
        return len(self._queue) + (1 if self.current_customer is not None else 0)

    @property
    def items_in_orders(self) -> int:
        """Items taken from storage and held by the order being served."""
        return self.current_customer.fulfilled if self.current_customer else 0

    @property
    def is_idle(self) -> bool:
        return self.customers_in_shop == 0

    # ========== Commands ==========

    def spawn_customer(self, requested_items: Optional[int] = None) -> Customer:
        """Enqueue a new customer and signal its demand to the warehouse."""
        if requested_items is None:
            requested_items = self._rng.randint(self.min_order, self.max_order)

        customer = Customer(f"customer_{self._next_customer_number}", requested_items)
        self._next_customer_number += 1
        self._queue.append(customer)

        logger.info(f"{customer.id} ordered {customer.requested_items} items")
        self._emit_event(LogisticsEventType.ORDER_PLACED,
                         {'customer_id': customer.id, 'requested': customer.requested_items})
        self.dispatch.request_items(customer.requested_items)
        return customer

    # ========== Cyclic Execution ==========

    def tick(self) -> None:
        if self.current_customer is None:
            if not self._queue:
                self._idle_tick()
                return
            self.current_customer = self._queue.popleft()

        customer = self.current_customer
        if customer.is_satisfied:
            self.satisfied_customers += 1
            self.delivered_items += customer.requested_items
            self.current_customer = None
            logger.info(f"{customer.id} satisfied ({customer.requested_items} items)")
            self._emit_event(LogisticsEventType.ORDER_SATISFIED,
                             {'customer_id': customer.id, 'delivered': customer.requested_items})
            return

        if not self.storage.is_empty:
            customer.add_item(self.storage.take())

    def _idle_tick(self) -> None:
        """Gradual pool shrink, then keep-warm request, once nothing is in flight."""
        if self.dispatch.has_requested_items or self.dispatch.has_active_carriers:
            return

        self.dispatch.clean_pool(1 if self.storage.has_space else 0)

        if self.storage.has_space:
            self.dispatch.request_items(1)

    def get_tags(self) -> Dict[str, Any]:
        return {
            "Shop.SatisfiedCustomers": self.satisfied_customers,
            "Shop.DeliveredItems": self.delivered_items,
            "Shop.CustomersInShop": self.customers_in_shop,
        }
