"""
Order and bill lifecycle events.

Each event is a Django ``Signal`` sent with a typed payload once the
surrounding transaction commits, so listeners (kitchen displays, printers,
dashboards) never observe state that is later rolled back. Receivers connect
the usual way:

    @receiver(ticket_ready)
    def print_ticket(sender, event, **kwargs):
        ...
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Union

from django.db import transaction
from django.dispatch import Signal

logger = logging.getLogger(__name__)

order_created = Signal()
order_status_changed = Signal()
ticket_ready = Signal()
bill_created = Signal()
bill_settled = Signal()
online_order_status_changed = Signal()


@dataclass(frozen=True)
class OrderCreated:
    order_id: str
    order_type: str
    status: str
    table_number: Optional[int]
    owner_id: Union[int, str]


@dataclass(frozen=True)
class OrderStatusChanged:
    order_id: str
    old_status: str
    new_status: str
    table_number: Optional[int]


@dataclass(frozen=True)
class TicketReady:
    """A kitchen ticket (approved or paid online order) or a bill ticket is ready to print."""

    KIND_ORDER = "order"
    KIND_BILL = "bill"
    KIND_ONLINE = "online"

    kind: str
    reference_id: str
    table_number: Optional[int]


@dataclass(frozen=True)
class OnlineOrderStatusChanged:
    online_order_id: str
    old_status: str
    new_status: str


@dataclass(frozen=True)
class BillCreated:
    bill_id: str
    table_number: Optional[int]
    total: Decimal
    order_ids: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class BillSettled:
    bill_id: str
    table_number: Optional[int]
    total: Decimal
    skipped_lines: int = 0


class OrderEventPublisher:
    """Centralized publishing for order, online order and bill events."""

    @staticmethod
    def _publish(signal, event):
        transaction.on_commit(lambda: OrderEventPublisher._send(signal, event))

    @staticmethod
    def _send(signal, event):
        for receiver, response in signal.send_robust(sender=OrderEventPublisher, event=event):
            if isinstance(response, Exception):
                logger.error(
                    f"Receiver {getattr(receiver, '__name__', receiver)} failed for "
                    f"{event.__class__.__name__}: {response}"
                )

    @staticmethod
    def order_created(order):
        logger.info(f"Publishing order_created for order {order.id}")
        OrderEventPublisher._publish(
            order_created,
            OrderCreated(
                order_id=str(order.id),
                order_type=order.order_type,
                status=order.status,
                table_number=order.table_number,
                owner_id=order.owner_id,
            ),
        )

    @staticmethod
    def order_status_changed(order, old_status):
        logger.info(f"Publishing order_status_changed for order {order.id}: {old_status} -> {order.status}")
        OrderEventPublisher._publish(
            order_status_changed,
            OrderStatusChanged(
                order_id=str(order.id),
                old_status=old_status,
                new_status=order.status,
                table_number=order.table_number,
            ),
        )

    @staticmethod
    def order_ticket_ready(order):
        OrderEventPublisher._publish(
            ticket_ready,
            TicketReady(
                kind=TicketReady.KIND_ORDER,
                reference_id=str(order.id),
                table_number=order.table_number,
            ),
        )

    @staticmethod
    def bill_created(bill, order_ids):
        logger.info(f"Publishing bill_created for bill {bill.id}")
        OrderEventPublisher._publish(
            bill_created,
            BillCreated(
                bill_id=str(bill.id),
                table_number=bill.table_number,
                total=bill.total,
                order_ids=[str(order_id) for order_id in order_ids],
            ),
        )
        OrderEventPublisher._publish(
            ticket_ready,
            TicketReady(
                kind=TicketReady.KIND_BILL,
                reference_id=str(bill.id),
                table_number=bill.table_number,
            ),
        )

    @staticmethod
    def bill_settled(bill, skipped_lines=0):
        logger.info(f"Publishing bill_settled for bill {bill.id}")
        OrderEventPublisher._publish(
            bill_settled,
            BillSettled(
                bill_id=str(bill.id),
                table_number=bill.table_number,
                total=bill.total,
                skipped_lines=skipped_lines,
            ),
        )

    @staticmethod
    def online_order_status_changed(online_order, old_status):
        logger.info(
            f"Publishing online_order_status_changed for online order {online_order.id}: "
            f"{old_status} -> {online_order.status}"
        )
        OrderEventPublisher._publish(
            online_order_status_changed,
            OnlineOrderStatusChanged(
                online_order_id=str(online_order.id),
                old_status=old_status,
                new_status=online_order.status,
            ),
        )

    @staticmethod
    def online_order_ticket_ready(online_order):
        OrderEventPublisher._publish(
            ticket_ready,
            TicketReady(
                kind=TicketReady.KIND_ONLINE,
                reference_id=str(online_order.id),
                table_number=None,
            ),
        )
