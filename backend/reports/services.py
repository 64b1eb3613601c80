import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List

from django.db.models import Count, DecimalField, ExpressionWrapper, F, Q, Sum

from billing.models import Bill
from inventory.models import StockItem
from menu.models import MenuItem
from orders.models import OnlineOrder, Order, OrderItem
from users.models import User

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def _money(value) -> str:
    return str((value or Decimal("0.00")).quantize(CENTS))


def _line_value(prefix=""):
    return ExpressionWrapper(
        F(f"{prefix}price_at_sale") * F(f"{prefix}quantity"),
        output_field=DecimalField(max_digits=12, decimal_places=2),
    )


class SummaryReportService:
    """Date-range reports of sales activity."""

    # Orders whose value counts as revenue.
    REVENUE_STATUSES = (Order.OrderStatus.SERVED, Order.OrderStatus.BILLED)
    # Online orders that were paid for and not cancelled.
    ONLINE_REVENUE_STATUSES = (
        OnlineOrder.Status.CONFIRMED,
        OnlineOrder.Status.PREPARING,
        OnlineOrder.Status.OUT_FOR_DELIVERY,
        OnlineOrder.Status.DELIVERED,
    )

    @staticmethod
    def _orders_in_range(start_date: date, end_date: date):
        return Order.objects.filter(created_at__date__gte=start_date, created_at__date__lte=end_date)

    @staticmethod
    def _revenue_lines(orders):
        return OrderItem.objects.filter(
            order__in=orders.filter(status__in=SummaryReportService.REVENUE_STATUSES)
        )

    @staticmethod
    def generate_summary_report(start_date: date, end_date: date) -> Dict[str, Any]:
        """
        Summarize orders and bills created between ``start_date`` and
        ``end_date`` (both inclusive, in the project time zone).

        ``served_orders`` counts every order that reached the table, billed
        or not; ``billed_orders`` is the billed subset.
        """
        orders = SummaryReportService._orders_in_range(start_date, end_date)
        total_revenue = SummaryReportService._revenue_lines(orders).aggregate(
            total=Sum(_line_value())
        )["total"]

        bills = Bill.objects.filter(
            created_at__date__gte=start_date, created_at__date__lte=end_date
        )
        paid_total = bills.filter(status=Bill.BillStatus.PAID).aggregate(total=Sum("total"))["total"]

        online_orders = OnlineOrder.objects.filter(
            created_at__date__gte=start_date,
            created_at__date__lte=end_date,
            status__in=SummaryReportService.ONLINE_REVENUE_STATUSES,
        )
        online_revenue = online_orders.aggregate(total=Sum("total"))["total"]

        low_stock_items = StockItem.objects.filter(
            quantity_in_stock__lte=F("low_stock_threshold")
        ).count()

        report = {
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
            "total_revenue": _money(total_revenue),
            "total_orders": orders.count(),
            "served_orders": orders.filter(status__in=SummaryReportService.REVENUE_STATUSES).count(),
            "billed_orders": orders.filter(status=Order.OrderStatus.BILLED).count(),
            "cancelled_orders": orders.filter(status=Order.OrderStatus.CANCELLED).count(),
            "total_bills": bills.count(),
            "paid_bills_total": _money(paid_total),
            "online_orders": online_orders.count(),
            "online_revenue": _money(online_revenue),
            "low_stock_items": low_stock_items,
        }
        logger.debug(f"Summary report generated for {start_date} to {end_date}")
        return report

    @staticmethod
    def generate_staff_report(start_date: date, end_date: date) -> List[Dict[str, Any]]:
        """
        Per-waiter performance, highest revenue first. Orders a manager
        placed directly are grouped under the ``manager`` owner.
        """
        orders = SummaryReportService._orders_in_range(start_date, end_date)
        counts = {
            row["waiter_id"]: row
            for row in orders.order_by().values("waiter_id").annotate(
                total_orders=Count("id"),
                served_orders=Count("id", filter=Q(status__in=SummaryReportService.REVENUE_STATUSES)),
                cancelled_orders=Count("id", filter=Q(status=Order.OrderStatus.CANCELLED)),
            )
        }
        revenue = {
            row["order__waiter_id"]: row["revenue"]
            for row in SummaryReportService._revenue_lines(orders)
            .order_by()
            .values("order__waiter_id")
            .annotate(revenue=Sum(_line_value()))
        }

        owners = [(waiter.pk, waiter.name or waiter.email) for waiter in User.objects.filter(role=User.Role.WAITER)]
        if None in counts:
            owners.append((None, "Manager"))

        rows = []
        for waiter_id, waiter_name in owners:
            row = counts.get(waiter_id, {})
            total_orders = row.get("total_orders", 0)
            waiter_revenue = revenue.get(waiter_id) or Decimal("0.00")
            average = waiter_revenue / total_orders if total_orders else Decimal("0.00")
            rows.append(
                {
                    "waiter_id": waiter_id if waiter_id is not None else Order.MANAGER_OWNER,
                    "waiter_name": waiter_name,
                    "total_orders": total_orders,
                    "served_orders": row.get("served_orders", 0),
                    "cancelled_orders": row.get("cancelled_orders", 0),
                    "total_revenue": waiter_revenue,
                    "average_order_value": average,
                }
            )

        rows.sort(key=lambda r: (-r["total_revenue"], r["waiter_name"]))
        for row in rows:
            row["total_revenue"] = _money(row["total_revenue"])
            row["average_order_value"] = _money(row["average_order_value"])

        logger.debug(f"Staff report generated for {start_date} to {end_date} ({len(rows)} row(s))")
        return rows

    @staticmethod
    def generate_menu_report(start_date: date, end_date: date) -> Dict[str, Any]:
        """
        Sales per menu item from served and billed orders, best sellers by
        revenue first. Lines of deleted menu items are kept under their
        snapshotted name.
        """
        orders = SummaryReportService._orders_in_range(start_date, end_date)
        sales = (
            SummaryReportService._revenue_lines(orders)
            .values("menu_item_id", "menu_item_name")
            .annotate(
                quantity_sold=Sum("quantity"),
                revenue=Sum(_line_value()),
                times_ordered=Count("order", distinct=True),
            )
            .order_by("-revenue", "menu_item_name")
        )

        report = {
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
            "total_items": MenuItem.objects.count(),
            "active_items": MenuItem.objects.filter(is_available=True).count(),
            "items": [
                {
                    "menu_item_id": row["menu_item_id"],
                    "name": row["menu_item_name"],
                    "quantity_sold": row["quantity_sold"],
                    "revenue": _money(row["revenue"]),
                    "times_ordered": row["times_ordered"],
                }
                for row in sales
            ],
        }
        logger.debug(f"Menu report generated for {start_date} to {end_date}")
        return report
