"""
Domain exceptions shared by every restaurant app, and the DRF exception
handler that renders them.

Services raise these; views let them propagate and the handler turns each
one into ``{"error": <message>, "code": <code>}`` with the matching status.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class POSError(Exception):
    """Base exception for restaurant POS domain errors."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "pos_error"


class NotFound(POSError):
    """Raised when a referenced order, bill, table, menu item or stock item is missing."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"

    def __init__(self, entity, identifier, message=None):
        self.entity = entity
        self.identifier = identifier
        if message is None:
            message = f"{entity} '{identifier}' not found"
        super().__init__(message)


class InvalidTransition(POSError):
    """Raised when a status change is not an edge of the state machine."""

    status_code = status.HTTP_409_CONFLICT
    code = "invalid_transition"

    def __init__(self, current, requested, message=None):
        self.current = current
        self.requested = requested
        if message is None:
            message = f"Cannot transition from {current} to {requested}"
        super().__init__(message)


class OrderNotEditable(POSError):
    """Raised when items are edited on an order that has left pending/approved, or a served/billed order is deleted."""

    status_code = status.HTTP_409_CONFLICT
    code = "order_not_editable"

    def __init__(self, order, message=None):
        self.order = order
        if message is None:
            message = f"Items of a {order.status} order cannot be changed"
        super().__init__(message)


class AlreadyPaid(POSError):
    status_code = status.HTTP_409_CONFLICT
    code = "already_paid"

    def __init__(self, bill_id, message=None):
        self.bill_id = bill_id
        super().__init__(message or "Bill is already paid")


class Unavailable(POSError):
    """Raised when an order references a menu item flagged unavailable."""

    code = "unavailable"

    def __init__(self, menu_item, message=None):
        self.menu_item = menu_item
        if message is None:
            message = f"{menu_item.name} is currently unavailable"
        super().__init__(message)


class NothingToBill(POSError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "nothing_to_bill"

    def __init__(self, table_number, message=None):
        self.table_number = table_number
        super().__init__(message or "No served orders found for this table")


class BillingConflict(POSError):
    """Raised when orders selected for a bill were billed by a concurrent request."""

    status_code = status.HTTP_409_CONFLICT
    code = "billing_conflict"


class ValidationError(POSError):
    code = "validation_error"


class PaymentSignatureError(POSError):
    code = "invalid_signature"

    def __init__(self, message=None):
        super().__init__(message or "Payment signature verification failed")


class PaymentMismatch(POSError):
    """Raised when a gateway confirmation belongs to a different payment than the one started."""

    code = "payment_mismatch"

    def __init__(self, message=None):
        super().__init__(message or "Payment does not belong to this bill or order")


class PaymentAlreadyUsed(POSError):
    status_code = status.HTTP_409_CONFLICT
    code = "payment_already_used"

    def __init__(self, payment_id, message=None):
        self.payment_id = payment_id
        super().__init__(message or f"Payment {payment_id} has already been applied")


def pos_exception_handler(exc, context):
    """
    Render POSError subclasses as JSON error bodies; defer everything else to
    DRF's default handler.
    """
    if isinstance(exc, POSError):
        request = context.get("request")
        logger.info(
            f"{exc.__class__.__name__}: {exc}",
            extra={
                "status_code": exc.status_code,
                "path": getattr(request, "path", None),
                "method": getattr(request, "method", None),
            },
        )
        return Response({"error": str(exc), "code": exc.code}, status=exc.status_code)

    return exception_handler(exc, context)
