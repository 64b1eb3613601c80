"""
Payment gateway confirmation checks.

A payment starts by recording the gateway order id on the bill (or online
order) it pays for. The gateway then signs ``"<gateway_order_id>|<payment_id>"``
with the shared key secret using HMAC-SHA256 and sends the hex digest back
with the payment. A confirmation is accepted only when the signature is
valid, the gateway order id is the one recorded for that bill or order, and
the payment id has not settled anything else.
"""
import hashlib
import hmac
import logging

from django.conf import settings

from orders.models import OnlineOrder
from restaurant_backend.exceptions import (
    PaymentAlreadyUsed,
    PaymentMismatch,
    PaymentSignatureError,
    ValidationError,
)

from .models import Bill

logger = logging.getLogger(__name__)


class GatewaySignatureService:
    ALGORITHM = hashlib.sha256

    @staticmethod
    def compute_signature(gateway_order_id: str, payment_id: str, secret: str = None) -> str:
        secret = secret if secret is not None else settings.PAYMENT_GATEWAY_KEY_SECRET
        message = f"{gateway_order_id}|{payment_id}".encode("utf-8")
        return hmac.new(secret.encode("utf-8"), message, GatewaySignatureService.ALGORITHM).hexdigest()

    @staticmethod
    def verify(gateway_order_id: str, payment_id: str, signature: str) -> None:
        """Raise PaymentSignatureError unless ``signature`` matches."""
        if not settings.PAYMENT_GATEWAY_KEY_SECRET:
            logger.error("PAYMENT_GATEWAY_KEY_SECRET is not configured; rejecting gateway confirmation")
            raise PaymentSignatureError("Payment gateway is not configured")

        expected = GatewaySignatureService.compute_signature(gateway_order_id, payment_id)
        # Constant-time comparison
        if not hmac.compare_digest(expected, signature or ""):
            logger.warning(f"Rejected gateway confirmation for payment {payment_id}: signature mismatch")
            raise PaymentSignatureError()

    @staticmethod
    def ensure_gateway_order_unclaimed(gateway_order_id: str, bill=None, online_order=None) -> None:
        """A gateway order pays for exactly one bill or online order."""
        if not gateway_order_id:
            raise ValidationError("A gateway order id is required")

        bills = Bill.objects.filter(gateway_order_id=gateway_order_id)
        if bill is not None:
            bills = bills.exclude(pk=bill.pk)
        online_orders = OnlineOrder.objects.filter(gateway_order_id=gateway_order_id)
        if online_order is not None:
            online_orders = online_orders.exclude(pk=online_order.pk)

        if bills.exists() or online_orders.exists():
            raise ValidationError(f"Gateway order {gateway_order_id} is already attached to another payment")

    @staticmethod
    def is_payment_used(payment_id: str) -> bool:
        return (
            Bill.objects.filter(gateway_payment_id=payment_id).exists()
            or OnlineOrder.objects.filter(payment_id=payment_id).exists()
        )

    @staticmethod
    def verify_confirmation(expected_gateway_order_id: str, gateway_order_id: str, payment_id: str, signature: str) -> None:
        """
        Full check for a confirmation of the payment started with
        ``expected_gateway_order_id``.
        """
        GatewaySignatureService.verify(gateway_order_id, payment_id, signature)

        if not expected_gateway_order_id or not hmac.compare_digest(
            expected_gateway_order_id, gateway_order_id
        ):
            logger.warning(
                f"Rejected gateway confirmation for payment {payment_id}: gateway order "
                f"{gateway_order_id} was not started for this receipt"
            )
            raise PaymentMismatch()

        if GatewaySignatureService.is_payment_used(payment_id):
            logger.warning(f"Rejected gateway confirmation: payment {payment_id} was already applied")
            raise PaymentAlreadyUsed(payment_id)
