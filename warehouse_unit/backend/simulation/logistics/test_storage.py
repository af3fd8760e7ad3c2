"""
Storage Ledger Tests

Checks:
1. LIFO order
2. Capacity bound (CapacityExceeded, count unchanged)
3. Empty take (StorageEmpty)
4. Grid cursor derived from count
"""

import pytest

from warehouse_unit.backend.simulation.logistics import (
    CapacityExceeded,
    Item,
    StorageEmpty,
    StorageLedger,
    grid_slot,
    position_for,
)


def test_take_returns_items_in_reverse_store_order():
    ledger = StorageLedger(max_capacity=10)
    items = [Item(width=float(i)) for i in range(1, 6)]

    for item in items:
        ledger.store(item)

    taken = [ledger.take() for _ in range(len(items))]
    assert taken == list(reversed(items))
    assert ledger.is_empty


def test_store_at_capacity_raises_and_keeps_count():
    ledger = StorageLedger(max_capacity=3)
    for _ in range(3):
        ledger.store(Item())

    with pytest.raises(CapacityExceeded) as exc:
        ledger.store(Item())

    assert exc.value.capacity == 3
    assert ledger.count == 3
    assert not ledger.has_space


def test_zero_capacity_rejects_every_store():
    ledger = StorageLedger(max_capacity=0)
    with pytest.raises(CapacityExceeded):
        ledger.store(Item())
    assert ledger.count == 0


def test_take_on_empty_ledger_raises():
    ledger = StorageLedger()
    with pytest.raises(StorageEmpty):
        ledger.take()


def test_grid_cursor_wraps_x_then_z_then_layer():
    ledger = StorageLedger(max_capacity=200, per_line_amount=8)
    assert ledger.grid_cursor == (0, 0, 0)

    for _ in range(8):
        ledger.store(Item())
    assert ledger.grid_cursor == (0, 1, 0)

    for _ in range(8 * 7 + 3):
        ledger.store(Item())
    assert ledger.count == 67
    assert ledger.grid_cursor == (3, 0, 1)

    # Taking reverses the cursor exactly
    for _ in range(4):
        ledger.take()
    assert ledger.grid_cursor == (7, 7, 0)


def test_grid_slot_is_pure_function_of_index():
    assert grid_slot(0, 4) == (0, 0, 0)
    assert grid_slot(5, 4) == (1, 1, 0)
    assert grid_slot(16, 4) == (0, 0, 1)
    assert grid_slot(31, 4) == (3, 3, 1)


def test_position_for_scales_by_item_extent():
    position = position_for(9, 4, base=(10.0, 0.0, -2.0), extent=(2.0, 0.5, 3.0))
    # index 9 -> x=1, z=2, layer=0
    assert position == (12.0, 0.0, 4.0)

    ledger = StorageLedger(per_line_amount=2, base_position=(1.0, 1.0, 1.0))
    for _ in range(4):
        ledger.store(Item())
    assert ledger.next_position() == (1.0, 2.0, 1.0)
    assert ledger.placements()[-1] == (2.0, 1.0, 2.0)


def test_lowering_capacity_below_count_keeps_stock():
    ledger = StorageLedger(max_capacity=5)
    for _ in range(4):
        ledger.store(Item())

    ledger.set_max_capacity(2)
    assert ledger.count == 4
    with pytest.raises(CapacityExceeded):
        ledger.store(Item())

    ledger.take()
    ledger.take()
    ledger.take()
    ledger.store(Item())
    assert ledger.count == 2


def test_negative_capacity_is_rejected():
    with pytest.raises(ValueError):
        StorageLedger(max_capacity=-1)
    ledger = StorageLedger()
    with pytest.raises(ValueError):
        ledger.set_max_capacity(-5)
