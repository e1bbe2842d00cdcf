"""Tests for the order change feed and the live order tracker."""

from ordering.order.order import Order
from ordering.order.status import ChangeOrderStatus
from ordering.tracking.feed import OrderChange, OrderFeed, get_feed
from ordering.tracking.tracker import OrderRow, OrderTracker, load_rows, loyalty_balance, status_label
from protean import current_domain


class TestOrderFeed:
    def test_subscribers_receive_changes(self):
        feed = OrderFeed()
        seen = []
        feed.subscribe(seen.append)
        feed.publish(OrderChange(kind="placed", order_id="ord-1"))
        assert [c.order_id for c in seen] == ["ord-1"]

    def test_cancelled_subscription_stops_delivery(self):
        feed = OrderFeed()
        seen = []
        subscription = feed.subscribe(seen.append)
        subscription.cancel()
        subscription.cancel()
        feed.publish(OrderChange(kind="placed", order_id="ord-1"))
        assert seen == []
        assert feed.subscriber_count == 0

    def test_subscription_as_context_manager(self):
        feed = OrderFeed()
        with feed.subscribe(lambda change: None):
            assert feed.subscriber_count == 1
        assert feed.subscriber_count == 0

    def test_failing_listener_does_not_block_others(self):
        feed = OrderFeed()
        seen = []

        def broken(change):
            raise RuntimeError("render failed")

        feed.subscribe(broken)
        feed.subscribe(seen.append)
        feed.publish(OrderChange(kind="status_changed", order_id="ord-1", status="ready"))
        assert len(seen) == 1


class TestStatusLabels:
    def test_known_statuses(self):
        assert status_label("in_production") == "Em produção"
        assert status_label("out_for_delivery") == "A caminho"

    def test_unknown_status_is_shown_raw(self):
        assert status_label("on_hold") == "on_hold"
        assert status_label(None) == ""


class TestTrackerLifecycle:
    def _rows(self, customer_id=None):
        return [f"rows-for-{customer_id}"]

    def test_mount_loads_and_subscribes(self):
        feed = OrderFeed()
        tracker = OrderTracker(feed, loader=self._rows).mount()
        assert tracker.mounted
        assert tracker.rows == ["rows-for-None"]
        assert tracker.refreshes == 1
        assert feed.subscriber_count == 1

    def test_every_change_refreshes(self):
        feed = OrderFeed()
        tracker = OrderTracker(feed, loader=self._rows).mount()
        feed.publish(OrderChange(kind="placed", order_id="ord-1", customer_id="cust-001"))
        feed.publish(OrderChange(kind="status_changed", order_id="ord-1", customer_id="cust-001"))
        assert tracker.refreshes == 3

    def test_customer_view_ignores_other_customers(self):
        feed = OrderFeed()
        tracker = OrderTracker(feed, loader=self._rows, customer_id="cust-001").mount()
        feed.publish(OrderChange(kind="placed", order_id="ord-2", customer_id="cust-999"))
        assert tracker.refreshes == 1

    def test_unmount_releases_the_subscription(self):
        feed = OrderFeed()
        with OrderTracker(feed, loader=self._rows) as tracker:
            assert feed.subscriber_count == 1
        assert not tracker.mounted
        assert feed.subscriber_count == 0
        feed.publish(OrderChange(kind="placed", order_id="ord-1"))
        assert tracker.refreshes == 1


class TestLiveRows:
    def test_rows_are_newest_first_and_scoped_to_customer(self, make_place_order):
        first = current_domain.process(make_place_order(), asynchronous=False)
        second = current_domain.process(make_place_order(), asynchronous=False)
        current_domain.process(make_place_order(customer_id="cust-999"), asynchronous=False)

        rows = load_rows("cust-001")
        assert [r.order_id for r in rows] == [second, first]
        assert all(isinstance(r, OrderRow) for r in rows)
        assert rows[0].status_label == "Novo"
        assert rows[0].payment_label == "Pago"
        assert len(load_rows()) == 3

    def test_domain_events_refresh_a_mounted_tracker(self, make_place_order):
        with OrderTracker(get_feed(), customer_id="cust-001") as tracker:
            order_id = current_domain.process(make_place_order(), asynchronous=False)
            assert [r.order_id for r in tracker.rows] == [order_id]

            current_domain.process(ChangeOrderStatus(order_id=order_id, status="ready"), asynchronous=False)
            assert tracker.rows[0].status == "ready"
            assert tracker.rows[0].status_label == "Pronto"

    def test_rows_cover_more_than_a_page(self, items):
        repo = current_domain.repository_for(Order)
        for _ in range(120):
            repo.add(Order.place(customer_id="cust-bulk", items_data=items, payment_method="cash"))

        rows = load_rows("cust-bulk")
        assert len(rows) == 120
        assert rows[0].created_at >= rows[-1].created_at
        assert loyalty_balance("cust-bulk") == 120 * 150


class TestLoyaltyBalance:
    def test_points_add_up_across_orders(self, make_place_order):
        current_domain.process(make_place_order(), asynchronous=False)
        current_domain.process(make_place_order(), asynchronous=False)
        assert loyalty_balance("cust-001") == 300
        assert loyalty_balance("cust-999") == 0

    def test_cancelled_orders_give_no_points(self, make_place_order):
        kept = current_domain.process(make_place_order(), asynchronous=False)
        cancelled = current_domain.process(make_place_order(), asynchronous=False)
        current_domain.process(ChangeOrderStatus(order_id=cancelled, status="cancelled"), asynchronous=False)

        assert loyalty_balance("cust-001") == 150
        assert current_domain.repository_for(Order).get(kept).points_earned == 150

    def test_customer_tracker_shows_the_running_total(self, make_place_order):
        with OrderTracker(get_feed(), customer_id="cust-001") as tracker:
            assert tracker.points == 0
            current_domain.process(make_place_order(), asynchronous=False)
            current_domain.process(make_place_order(customer_id="cust-999"), asynchronous=False)
            assert tracker.points == 150
