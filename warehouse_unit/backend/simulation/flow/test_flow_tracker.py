"""
Flow Tracker - Basic Test

Tests event-driven logistics tracking.
"""

from warehouse_unit.backend.simulation.flow import (
    Event,
    EventDispatcher,
    FlowTracker,
    LogisticsEventType,
)


def emit(dispatcher, event_type, timestamp, device_id="test", **data):
    dispatcher.emit(Event(type=event_type, timestamp=timestamp, device_id=device_id, data=data))


def test_flow_tracker_basic():
    """Test basic flow tracker functionality"""
    print("=" * 60)
    print("FLOW TRACKER - BASIC TEST")
    print("=" * 60)

    dispatcher = EventDispatcher()
    tracker = FlowTracker(dispatcher)

    # Production and storage
    for t in range(3):
        emit(dispatcher, LogisticsEventType.ITEM_PRODUCED, float(t), unit_id="producer_1")
    emit(dispatcher, LogisticsEventType.ITEM_STORED, 3.0, count=1)
    emit(dispatcher, LogisticsEventType.ITEM_TAKEN, 4.0, count=0)

    counters = tracker.get_counters()
    print(f"  Counters: {counters}")
    assert counters['items_produced'] == 3
    assert counters['items_stored'] == 1
    assert counters['items_taken'] == 1

    # Order lifecycle
    emit(dispatcher, LogisticsEventType.ORDER_PLACED, 10.0, customer_id="customer_1", requested=2)
    emit(dispatcher, LogisticsEventType.DEMAND_REQUESTED, 10.0, amount=2, outstanding=2)
    emit(dispatcher, LogisticsEventType.ORDER_SATISFIED, 40.0, customer_id="customer_1", delivered=2)

    metrics = tracker.get_metrics(3600.0)
    print(f"  Metrics: {metrics}")
    assert metrics['orders_placed'] == 1
    assert metrics['orders_satisfied'] == 1
    assert metrics['items_delivered'] == 2
    assert metrics['average_lead_time_s'] == 30.0
    assert metrics['throughput_per_hour'] == 2.0
    assert tracker.get_counters()['items_requested'] == 2

    assert len(dispatcher.get_event_log()) == 8


def test_carrier_events_are_counted():
    dispatcher = EventDispatcher()
    tracker = FlowTracker(dispatcher)

    emit(dispatcher, LogisticsEventType.CARRIER_DISPATCHED, 0.0, carrier_id="carrier_1", requested=5)
    emit(dispatcher, LogisticsEventType.LOADING_TIMEOUT, 35.0, held=2, requested=5)
    emit(dispatcher, LogisticsEventType.STORAGE_BLOCKED, 40.0, held=2)
    emit(dispatcher, LogisticsEventType.CARRIER_UNLOADED, 41.0, delivered=2)

    metrics = tracker.get_metrics(60.0)
    assert metrics['carriers_dispatched'] == 1
    assert metrics['loading_timeouts'] == 1
    assert metrics['storage_blocked'] == 1
    assert metrics['carriers_completed'] == 1


def test_dispatcher_without_log_still_notifies():
    dispatcher = EventDispatcher(keep_log=False)
    seen = []
    dispatcher.subscribe(LogisticsEventType.POOL_RESIZED, seen.append)

    emit(dispatcher, LogisticsEventType.POOL_RESIZED, 1.0, previous=0, size=2)

    assert len(seen) == 1
    assert dispatcher.get_event_log() == []


def test_kpis_before_any_activity_are_zero():
    tracker = FlowTracker(EventDispatcher())
    metrics = tracker.get_metrics(0.0)
    assert metrics['throughput_per_hour'] == 0.0
    assert metrics['average_lead_time_s'] == 0.0
    assert tracker.kpis.calculate_fill_ratio(0, 0) == 0.0
    assert tracker.kpis.calculate_fill_ratio(5, 10) == 50.0
