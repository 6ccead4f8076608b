"""Order record and checkout request schemas."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from firebase_admin import firestore
from pydantic import BaseModel, ConfigDict, Field, ValidationError

PAID = "Paid"

# Metadata keys attached to the checkout session at creation time
META_EMAIL = "userEmail"
META_NAME = "userName"
META_PRODUCT = "productName"

_CENTS = Decimal("0.01")


class InvalidCheckoutRequest(ValueError):
    """Checkout request body rejected; message is safe to return to the client."""


class IncompleteSessionError(ValueError):
    """Completed checkout session lacks the data needed to build an order."""


class CheckoutRequest(BaseModel):
    """Body of POST /create-checkout-session."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    product_name: str = Field(alias="productName", min_length=1)
    amount: int = Field(gt=0, strict=True)  # minor currency units; no bools or strings
    user_email: str = Field(alias="userEmail", min_length=1)
    user_name: str = Field(alias="userName", min_length=1)

    def metadata(self) -> dict[str, str]:
        """Opaque session metadata, read back by the webhook."""
        return {
            META_EMAIL: self.user_email,
            META_NAME: self.user_name,
            META_PRODUCT: self.product_name,
        }


def parse_checkout_request(body: Any) -> CheckoutRequest:
    """Validate a decoded JSON body.

    Raises:
        InvalidCheckoutRequest: If a field is missing/empty or amount is invalid
    """
    if not isinstance(body, dict):
        raise InvalidCheckoutRequest("Invalid JSON body")

    # JSON null counts as absent
    present = {k: v for k, v in body.items() if v is not None}

    try:
        return CheckoutRequest.model_validate(present)
    except ValidationError as e:
        kinds = {error["type"] for error in e.errors()}
        locs = {error["loc"][0] for error in e.errors() if error["loc"]}
        if "missing" in kinds or "string_too_short" in kinds or locs != {"amount"}:
            raise InvalidCheckoutRequest("All fields are required") from e
        raise InvalidCheckoutRequest("amount must be a positive integer") from e


@dataclass
class Order:
    """A paid order, written once per completed checkout session."""

    customer_email: str
    customer_name: str
    product_name: str
    amount_paid: Decimal  # major currency units
    status: str = PAID

    @classmethod
    def from_session(cls, session: dict[str, Any]) -> "Order":
        """Build an order from a checkout.session.completed payload.

        Raises:
            IncompleteSessionError: If metadata or amount_total is missing or malformed
        """
        if not isinstance(session, dict):
            raise IncompleteSessionError(f"session object is {type(session).__name__}, not a mapping")

        metadata = session.get("metadata") or {}
        if not isinstance(metadata, dict):
            raise IncompleteSessionError(f"session {session.get('id')} metadata is not a mapping")

        missing = [k for k in (META_EMAIL, META_NAME, META_PRODUCT) if not metadata.get(k)]
        if missing:
            raise IncompleteSessionError(
                f"session {session.get('id')} missing metadata: {', '.join(missing)}"
            )

        amount_total = session.get("amount_total")
        if amount_total is None:
            raise IncompleteSessionError(f"session {session.get('id')} missing amount_total")

        try:
            amount_paid = (Decimal(amount_total) / 100).quantize(_CENTS)
        except (InvalidOperation, TypeError, ValueError) as e:
            raise IncompleteSessionError(
                f"session {session.get('id')} has invalid amount_total {amount_total!r}"
            ) from e

        return cls(
            customer_email=metadata[META_EMAIL],
            customer_name=metadata[META_NAME],
            product_name=metadata[META_PRODUCT],
            amount_paid=amount_paid,
        )

    def to_document(self) -> dict[str, Any]:
        """Firestore document; createdAt is assigned by the server."""
        return {
            "customerEmail": self.customer_email,
            "customerName": self.customer_name,
            "productName": self.product_name,
            "amountPaid": float(self.amount_paid),
            "status": self.status,
            "createdAt": firestore.SERVER_TIMESTAMP,
        }
