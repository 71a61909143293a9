"""
Manual Payment Provider - no gateway integration.

Used for local development: checkout returns a local page instead of a gateway URL and
payments are never reported as approved, so memberships are activated by an admin.
"""

from app.payments.base import CheckoutResult, PaymentProvider, PaymentStatus


class ManualProvider(PaymentProvider):
    """Provider that does not integrate with a gateway. Admin edits the membership."""

    def __init__(self, frontend_url: str = "http://localhost:5173"):
        self.frontend_url = frontend_url

    def get_name(self) -> str:
        return "manual"

    def create_checkout(self, user_id: str, email: str) -> CheckoutResult:
        return CheckoutResult(
            id=f"manual-{user_id}",
            init_point=f"{self.frontend_url}/pago-pendiente?ref={user_id}",
        )

    def get_payment(self, payment_id: str) -> PaymentStatus:
        # Nothing to verify externally; an admin confirms in the panel
        return PaymentStatus(id=payment_id, status="pending")
