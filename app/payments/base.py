"""
Payment Provider - Abstract base for payment gateways.

Implementations: MercadoPagoProvider (hosted checkout + webhooks), ManualProvider (dev).
Providers are synchronous (requests); request handlers call them through a threadpool.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Mapping, Optional


class PaymentGatewayError(Exception):
    """The gateway rejected the call or could not be reached."""


@dataclass
class CheckoutResult:
    """A hosted checkout session the client is redirected to."""
    id: str
    init_point: str


@dataclass
class PaymentStatus:
    """Current state of a payment as reported by the gateway."""
    id: str
    status: str  # approved, pending, in_process, rejected, cancelled, refunded, ...
    external_reference: Optional[str] = None
    amount: Optional[int] = None
    currency: Optional[str] = None

    @property
    def approved(self) -> bool:
        return self.status == "approved"


@dataclass
class MembershipItem:
    """The single SKU currently sold: one year of membership."""
    id: str = "membresia-anual"
    title: str = "Membresía Anual Colegio"
    unit_price: int = 10000
    currency: str = "CLP"


class PaymentProvider(ABC):
    """Abstract payment provider. Implement for Mercado Pago, manual, etc."""

    @abstractmethod
    def get_name(self) -> str:
        """Provider name, stored with each processed payment."""

    @abstractmethod
    def create_checkout(self, user_id: str, email: str) -> CheckoutResult:
        """
        Create a checkout session for the membership item.

        ``user_id`` travels as the external reference and is the only link
        between the gateway payment and the membership record.
        Raises PaymentGatewayError.
        """

    @abstractmethod
    def get_payment(self, payment_id: str) -> PaymentStatus:
        """Fetch full payment details. Raises PaymentGatewayError."""

    def verify_webhook(self, headers: Mapping[str, str], data_id: Optional[str]) -> bool:
        """Check the notification's authenticity. Providers without signatures accept all."""
        return True
