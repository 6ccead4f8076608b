"""Tests for checkout request validation and the Order record."""

from decimal import Decimal

import pytest
from firebase_admin import firestore

from checkout_relay.orders.models import (
    IncompleteSessionError,
    InvalidCheckoutRequest,
    Order,
    parse_checkout_request,
)

VALID_BODY = {
    "productName": "Analytical Engine Manual",
    "amount": 2500,
    "userEmail": "ada@example.com",
    "userName": "Ada Lovelace",
}


class TestParseCheckoutRequest:
    def test_valid_body(self):
        request = parse_checkout_request(VALID_BODY)

        assert request.product_name == "Analytical Engine Manual"
        assert request.amount == 2500
        assert request.user_email == "ada@example.com"
        assert request.user_name == "Ada Lovelace"

    def test_metadata_round_trips_session_keys(self):
        request = parse_checkout_request(VALID_BODY)

        assert request.metadata() == {
            "userEmail": "ada@example.com",
            "userName": "Ada Lovelace",
            "productName": "Analytical Engine Manual",
        }

    @pytest.mark.parametrize("field", ["productName", "amount", "userEmail", "userName"])
    def test_missing_field(self, field):
        body = {k: v for k, v in VALID_BODY.items() if k != field}

        with pytest.raises(InvalidCheckoutRequest, match="All fields are required"):
            parse_checkout_request(body)

    @pytest.mark.parametrize("field", ["productName", "userEmail", "userName"])
    def test_empty_string_counts_as_missing(self, field):
        body = {**VALID_BODY, field: "   "}

        with pytest.raises(InvalidCheckoutRequest, match="All fields are required"):
            parse_checkout_request(body)

    def test_null_counts_as_missing(self):
        body = {**VALID_BODY, "amount": None}

        with pytest.raises(InvalidCheckoutRequest, match="All fields are required"):
            parse_checkout_request(body)

    @pytest.mark.parametrize("amount", [0, -100, 12.5, "abc", True, "2500"])
    def test_invalid_amount(self, amount):
        body = {**VALID_BODY, "amount": amount}

        with pytest.raises(InvalidCheckoutRequest, match="positive integer"):
            parse_checkout_request(body)

    @pytest.mark.parametrize("body", [None, [], "text", 42])
    def test_non_object_body(self, body):
        with pytest.raises(InvalidCheckoutRequest, match="Invalid JSON body"):
            parse_checkout_request(body)


class TestOrder:
    SESSION = {
        "id": "cs_test_123",
        "amount_total": 1999,
        "metadata": {
            "userEmail": "ada@example.com",
            "userName": "Ada Lovelace",
            "productName": "Analytical Engine Manual",
        },
    }

    def test_from_session(self):
        order = Order.from_session(self.SESSION)

        assert order.customer_email == "ada@example.com"
        assert order.customer_name == "Ada Lovelace"
        assert order.product_name == "Analytical Engine Manual"
        assert order.amount_paid == Decimal("19.99")
        assert order.status == "Paid"

    @pytest.mark.parametrize(
        "amount_total,expected",
        [(2500, Decimal("25.00")), (1, Decimal("0.01")), (0, Decimal("0.00"))],
    )
    def test_amount_converted_from_minor_units(self, amount_total, expected):
        order = Order.from_session({**self.SESSION, "amount_total": amount_total})

        assert order.amount_paid == expected

    def test_missing_metadata_key(self):
        session = {**self.SESSION, "metadata": {"userEmail": "ada@example.com"}}

        with pytest.raises(IncompleteSessionError, match="userName, productName"):
            Order.from_session(session)

    def test_missing_metadata(self):
        session = {"id": "cs_test_123", "amount_total": 1999, "metadata": None}

        with pytest.raises(IncompleteSessionError):
            Order.from_session(session)

    def test_missing_amount_total(self):
        session = {**self.SESSION, "amount_total": None}

        with pytest.raises(IncompleteSessionError, match="amount_total"):
            Order.from_session(session)

    def test_to_document(self):
        document = Order.from_session(self.SESSION).to_document()

        assert document == {
            "customerEmail": "ada@example.com",
            "customerName": "Ada Lovelace",
            "productName": "Analytical Engine Manual",
            "amountPaid": 19.99,
            "status": "Paid",
            "createdAt": firestore.SERVER_TIMESTAMP,
        }


class TestOrderMalformedSession:
    """Verified but oddly shaped sessions surface as IncompleteSessionError."""

    @pytest.mark.parametrize("session", [None, "cs_test_123", ["cs_test_123"]])
    def test_session_not_a_mapping(self, session):
        with pytest.raises(IncompleteSessionError, match="not a mapping"):
            Order.from_session(session)

    @pytest.mark.parametrize("metadata", ["oops", ["userEmail"], 42])
    def test_metadata_not_a_mapping(self, metadata):
        session = {**TestOrder.SESSION, "metadata": metadata}

        with pytest.raises(IncompleteSessionError, match="metadata is not a mapping"):
            Order.from_session(session)

    @pytest.mark.parametrize("amount_total", ["abc", {"value": 1}, [1999]])
    def test_amount_total_not_numeric(self, amount_total):
        session = {**TestOrder.SESSION, "amount_total": amount_total}

        with pytest.raises(IncompleteSessionError, match="invalid amount_total"):
            Order.from_session(session)
