from typing import Optional

from .engine import SimulationEngine
from .flow import EventDispatcher
from .logistics import (
    CarrierFleet,
    DispatchController,
    ProductionPool,
    Shop,
    StorageLedger,
)
from ..settings import WarehouseSettings, load_config


def build_warehouse(settings: Optional[WarehouseSettings] = None,
                    event_dispatcher: Optional[EventDispatcher] = None) -> SimulationEngine:
    """
    Build the warehouse loop: pool -> fleet -> ledger -> shop.

    CRITICAL: This function ONLY assembles components and wires handles.
    - NO dispatch logic
    - NO global instances; every dependency is passed in explicitly
    """
    if settings is None:
        settings = load_config()

    pool = ProductionPool(
        production_per_minute=settings.production_per_minute,
        storage_positions=settings.pool_storage_positions,
        item_size=settings.item_size,
    )
    storage = StorageLedger(
        max_capacity=settings.max_capacity,
        per_line_amount=settings.per_line_amount,
    )
    fleet = CarrierFleet(
        pool,
        storage,
        carrier_capacity=settings.carrier_capacity,
        traveling_time=settings.traveling_time,
        loading_timeout=settings.loading_timeout,
    )
    dispatch = DispatchController(pool, fleet)
    shop = Shop(
        storage,
        dispatch,
        seed=settings.seed,
        min_order=settings.min_order,
        max_order=settings.max_order,
    )

    return SimulationEngine(
        pool, storage, fleet, dispatch, shop,
        time_step=settings.time_step,
        event_dispatcher=event_dispatcher,
    )
