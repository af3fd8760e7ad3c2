"""
Logistics Control Core

Stock accounting, production scaling and carrier dispatch.

Components (leaf to root):
- ProductionPool: elastic producer units + shared output buffer
- StorageLedger: capacity-bounded LIFO warehouse stock
- CarrierFleet: transient carriers moving batches pool -> ledger
- DispatchController: outstanding demand, pool sizing, carrier spawn
- Shop: consumer collaborator issuing demand and taking stock
"""

from .errors import LogisticsError, CapacityExceeded, StorageEmpty, CarrierStateError
from .items import Item
from .storage import StorageLedger, grid_slot, position_for
from .production import ProducerUnit, ProductionPool
from .carriers import Carrier, CarrierFleet, CarrierState, hold_slot
from .dispatch import DispatchController
from .shop import Customer, Shop

__all__ = [
    'LogisticsError',
    'CapacityExceeded',
    'StorageEmpty',
    'CarrierStateError',
    'Item',
    'StorageLedger',
    'grid_slot',
    'position_for',
    'ProducerUnit',
    'ProductionPool',
    'Carrier',
    'CarrierFleet',
    'CarrierState',
    'hold_slot',
    'DispatchController',
    'Customer',
    'Shop'
]
