"""
Shop Tests

Order service, keep-warm requests and idle pool shrink.
"""

from warehouse_unit.backend.simulation.logistics import (
    CarrierFleet,
    DispatchController,
    Item,
    ProductionPool,
    Shop,
    StorageLedger,
)


def make_shop(max_capacity=10, seed=42):
    pool = ProductionPool(production_per_minute=60)
    storage = StorageLedger(max_capacity=max_capacity)
    fleet = CarrierFleet(pool, storage, carrier_capacity=5, traveling_time=5.0)
    dispatch = DispatchController(pool, fleet)
    return Shop(storage, dispatch, seed=seed)


def test_spawn_customer_signals_demand():
    shop = make_shop()
    customer = shop.spawn_customer(3)

    assert customer.requested_items == 3
    assert shop.customers_in_shop == 1
    assert shop.dispatch.outstanding_demand == 3
    assert shop.dispatch.pool.size == 3


def test_random_order_sizes_are_seeded_and_bounded():
    shop_a, shop_b = make_shop(seed=7), make_shop(seed=7)
    sizes_a = [shop_a.spawn_customer().requested_items for _ in range(20)]
    sizes_b = [shop_b.spawn_customer().requested_items for _ in range(20)]

    assert sizes_a == sizes_b
    assert all(1 <= s <= 5 for s in sizes_a)


def test_shop_takes_one_item_per_tick_until_satisfied():
    shop = make_shop()
    for _ in range(5):
        shop.storage.store(Item())
    shop.spawn_customer(2)

    shop.tick()
    assert shop.storage.count == 4
    assert shop.items_in_orders == 1
    shop.tick()
    assert shop.storage.count == 3

    # Satisfaction is recognised on the following tick
    assert shop.satisfied_customers == 0
    shop.tick()
    assert shop.satisfied_customers == 1
    assert shop.delivered_items == 2
    assert shop.customers_in_shop == 0
    assert shop.storage.count == 3


def test_customers_are_served_in_arrival_order():
    shop = make_shop()
    first = shop.spawn_customer(1)
    shop.spawn_customer(4)
    shop.storage.store(Item())

    shop.tick()
    assert shop.current_customer is first
    assert first.is_satisfied


def test_empty_storage_leaves_order_waiting():
    shop = make_shop()
    shop.spawn_customer(2)
    for _ in range(3):
        shop.tick()
    assert shop.current_customer.fulfilled == 0


def test_idle_shop_requests_keep_warm_item():
    shop = make_shop()
    shop.tick()
    assert shop.dispatch.outstanding_demand == 1
    assert shop.dispatch.pool.size == 1


def test_idle_shop_waits_while_carriers_are_active():
    shop = make_shop()
    shop.dispatch.request_items(5)
    shop.dispatch.tick()
    shop.dispatch.pool.set_target_size(4)

    shop.tick()
    assert shop.dispatch.outstanding_demand == 0
    assert shop.dispatch.pool.size == 4


def test_idle_shop_with_full_storage_shrinks_pool_gradually():
    shop = make_shop(max_capacity=2)
    shop.storage.store(Item())
    shop.storage.store(Item())
    shop.dispatch.pool.set_target_size(3)

    shop.tick()
    assert shop.dispatch.pool.size == 2
    assert shop.dispatch.outstanding_demand == 0
    shop.tick()
    shop.tick()
    shop.tick()
    assert shop.dispatch.pool.size == 0


def test_idle_shop_with_space_shrinks_to_one_then_requests():
    shop = make_shop()
    shop.dispatch.pool.set_target_size(3)

    shop.tick()
    assert shop.dispatch.pool.size == 2
    assert shop.dispatch.outstanding_demand == 1
