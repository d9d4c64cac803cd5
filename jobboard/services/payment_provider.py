"""
Payment provider adapters.

Both adapters open provider orders and verify the checkout signature the
client sends back: hex(HMAC-SHA256(secret, "<order_id>|<payment_id>")).
StripePaymentProvider opens a Stripe PaymentIntent per order;
MockPaymentProvider is used when no Stripe key is configured.
"""
import hashlib
import hmac
import itertools
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional

import stripe

from jobboard.core.errors import ProviderError

logger = logging.getLogger(__name__)


@dataclass
class ProviderOrder:
    order_id: str
    status: str
    amount: float
    currency: str
    receipt: str
    metadata: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": self.order_id,
            "status": self.status,
            "amount": self.amount,
            "currency": self.currency,
            "receipt": self.receipt,
        }


def sign_payment(secret: str, order_id: str, payment_id: str) -> str:
    """Signature a client must present for (order_id, payment_id)."""
    message = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


class PaymentProvider(ABC):
    """Interface shared by every provider adapter."""

    name = "base"

    def __init__(self, signing_secret: str):
        if not signing_secret:
            raise ValueError("Payment signing secret must be configured")
        self._signing_secret = signing_secret

    @abstractmethod
    def create_order(
        self,
        amount: float,
        currency: str,
        receipt: str,
        metadata: Optional[Dict[str, str]] = None,
    ) -> ProviderOrder:
        """Open an order for amount in currency; metadata is stored with the provider."""
        pass

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        if not (order_id and payment_id and signature):
            return False
        expected = sign_payment(self._signing_secret, order_id, payment_id)
        return hmac.compare_digest(expected, signature)


class StripePaymentProvider(PaymentProvider):
    """Opens orders as Stripe PaymentIntents."""

    name = "stripe"

    def __init__(self, client: "stripe.StripeClient", signing_secret: str):
        super().__init__(signing_secret)
        self._client = client

    @classmethod
    def from_api_key(cls, api_key: str, signing_secret: str) -> "StripePaymentProvider":
        return cls(stripe.StripeClient(api_key), signing_secret)

    def create_order(self, amount, currency, receipt, metadata=None) -> ProviderOrder:
        metadata = dict(metadata or {})
        try:
            intent = self._client.payment_intents.create(params={
                # Stripe amounts are in the smallest currency unit
                "amount": int(round(amount * 100)),
                "currency": currency.lower(),
                "metadata": {**metadata, "receipt": receipt},
            })
        except stripe.StripeError as e:
            logger.error(f"Stripe order creation failed: receipt={receipt}, error={e}")
            raise ProviderError("Failed to create payment order") from e

        logger.info(f"Stripe order created: order_id={intent.id}, receipt={receipt}")
        return ProviderOrder(
            order_id=intent.id,
            status=intent.status,
            amount=intent.amount / 100,
            currency=intent.currency.upper(),
            receipt=receipt,
            metadata=metadata,
        )


class MockPaymentProvider(PaymentProvider):
    """In-process provider for development and tests."""

    name = "mock"

    def __init__(self, signing_secret: str):
        super().__init__(signing_secret)
        self._sequence = itertools.count(1)

    def create_order(self, amount, currency, receipt, metadata=None) -> ProviderOrder:
        order_id = f"mock_order_{int(time.time() * 1000)}_{next(self._sequence)}"
        logger.info(f"Mock order created: order_id={order_id}, receipt={receipt}")
        return ProviderOrder(
            order_id=order_id,
            status="created",
            amount=amount,
            currency=currency,
            receipt=receipt,
            metadata=dict(metadata or {}),
        )

    def sign(self, order_id: str, payment_id: str) -> str:
        """Produce the signature a real checkout would return."""
        return sign_payment(self._signing_secret, order_id, payment_id)


def build_payment_provider(stripe_secret_key: Optional[str], signing_secret: str) -> PaymentProvider:
    if stripe_secret_key:
        return StripePaymentProvider.from_api_key(stripe_secret_key, signing_secret)
    logger.warning("STRIPE_SECRET_KEY not configured - using mock payment provider")
    return MockPaymentProvider(signing_secret)
