"""
Dispatch Controller Tests

Checks demand accounting, grow-only pool sizing, batch dispatch and
gradual pool shrink.
"""

import pytest

from warehouse_unit.backend.simulation.logistics import (
    CarrierFleet,
    DispatchController,
    ProductionPool,
    StorageLedger,
)


def make_dispatch(carrier_capacity=5, loading_timeout=None):
    pool = ProductionPool(production_per_minute=60)
    fleet = CarrierFleet(pool, StorageLedger(max_capacity=100),
                         carrier_capacity=carrier_capacity, traveling_time=5.0,
                         loading_timeout=loading_timeout)
    return DispatchController(pool, fleet)


def test_request_grows_pool_to_outstanding_demand():
    dispatch = make_dispatch()
    dispatch.request_items(5)
    assert dispatch.outstanding_demand == 5
    assert dispatch.pool.size >= 5


def test_request_never_shrinks_pool():
    dispatch = make_dispatch()
    dispatch.pool.set_target_size(8)
    dispatch.request_items(2)
    assert dispatch.pool.size == 8


def test_negative_request_is_rejected():
    dispatch = make_dispatch()
    with pytest.raises(ValueError):
        dispatch.request_items(-1)
    assert dispatch.outstanding_demand == 0


def test_zero_request_spawns_nothing():
    dispatch = make_dispatch()
    dispatch.request_items(0)
    assert dispatch.tick() == []
    assert not dispatch.has_active_carriers


@pytest.mark.parametrize("demand, expected_carriers", [(1, 1), (5, 1), (7, 2), (10, 2), (11, 3)])
def test_tick_dispatches_fixed_size_batches(demand, expected_carriers):
    dispatch = make_dispatch()
    dispatch.request_items(demand)

    carriers = dispatch.tick()

    assert len(carriers) == expected_carriers
    assert all(c.requested == 5 for c in carriers)
    assert dispatch.outstanding_demand == 0
    assert dispatch.active_carriers == expected_carriers


def test_request_below_capacity_still_uses_full_trip():
    dispatch = make_dispatch()
    dispatch.request_items(2)
    carriers = dispatch.tick()
    assert len(carriers) == 1
    assert carriers[0].requested == 5


def test_pool_covers_outstanding_demand_across_requests():
    dispatch = make_dispatch()
    for amount in (3, 4, 2):
        dispatch.request_items(amount)
        assert dispatch.pool.size >= dispatch.outstanding_demand
    assert dispatch.pool.size == 9


def test_clean_pool_removes_one_unit_per_call():
    dispatch = make_dispatch()
    dispatch.pool.set_target_size(3)

    assert dispatch.clean_pool(1) is True
    assert dispatch.pool.size == 2
    assert dispatch.clean_pool(1) is True
    assert dispatch.pool.size == 1
    assert dispatch.clean_pool(1) is False
    assert dispatch.pool.size == 1
    assert dispatch.clean_pool(0) is True
    assert dispatch.pool.size == 0


def test_clean_pool_keeps_outstanding_demand_covered():
    dispatch = make_dispatch()
    dispatch.request_items(5)

    assert dispatch.clean_pool(0) is False
    assert dispatch.pool.size == 5
    assert dispatch.pool.size >= dispatch.outstanding_demand

    dispatch.pool.set_target_size(6)
    assert dispatch.clean_pool(0) is True
    assert dispatch.pool.size == 5
    assert dispatch.clean_pool(0) is False


def test_timed_out_carrier_shortfall_is_requested_again():
    dispatch = make_dispatch(loading_timeout=2.0)
    dispatch.request_items(5)
    first = dispatch.tick()
    assert len(first) == 1

    dispatch.fleet.tick(5.0)  # arrive, buffer empty
    dispatch.fleet.tick(2.0)  # timeout, departs empty
    assert first[0].held == 0

    retry = dispatch.tick()

    assert len(retry) == 1
    assert retry[0].requested == 5
    assert dispatch.outstanding_demand == 0
    assert dispatch.active_carriers == 2
    assert dispatch.pool.size >= 5
    assert dispatch.tick() == []
