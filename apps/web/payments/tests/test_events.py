"""Tests for payment event building and logging."""

from decimal import Decimal
from unittest.mock import patch

from django.db import DatabaseError

import pytest
from pydantic import TypeAdapter

from apps.web.payments.events import (
    EventMetadata,
    EventType,
    OrderRecordedMetadata,
    PaymentEvent,
    PaymentEventLogger,
    RefundMetadata,
    build_event_from_session,
    minor_to_major,
    payment_event_errors,
)
from apps.web.payments.models import PaymentLog, PaymentLogStatus
from apps.web.payments.tests.helpers import completed_session


class TestMinorToMajor:
    @pytest.mark.parametrize(
        ("amount", "expected"),
        [
            (5000, Decimal("50.00")),
            (1201, Decimal("12.01")),
            (0, Decimal("0.00")),
            ("3900", Decimal("39.00")),
        ],
    )
    def test_converts(self, amount, expected):
        assert minor_to_major(amount) == expected

    @pytest.mark.parametrize("amount", [None, "abc", True])
    def test_missing_or_invalid(self, amount):
        assert minor_to_major(amount) is None


class TestBuildEventFromSession:
    def test_full_session(self):
        event = build_event_from_session(
            completed_session(),
            EventType.SESSION_COMPLETED,
            PaymentLogStatus.SUCCESS,
        )

        assert event.stripe_session_id == "cs_test_1"
        assert event.restaurant_slug == "al-bayt"
        assert event.amount == Decimal("39.00")
        assert event.currency == "sar"
        assert event.customer_email == "sara@example.com"
        assert event.customer_phone == "+966500000001"
        assert event.error_message is None

    def test_sparse_session(self):
        event = build_event_from_session(
            {"id": "cs_test_2"},
            EventType.SESSION_EXPIRED,
            PaymentLogStatus.EXPIRED,
            "expired",
        )

        assert event.stripe_session_id == "cs_test_2"
        assert event.restaurant_slug is None
        assert event.amount is None
        assert event.customer_email is None
        assert event.error_message == "expired"

    def test_malformed_nested_objects(self):
        event = build_event_from_session(
            {"id": "cs_test_3", "metadata": "oops", "customer_details": None},
            EventType.SESSION_EXPIRED,
            PaymentLogStatus.EXPIRED,
        )
        assert event.restaurant_slug is None


class TestPaymentEventErrors:
    def test_valid_event(self):
        event = PaymentEvent(
            event_type=EventType.SESSION_COMPLETED,
            status=PaymentLogStatus.SUCCESS,
            amount=Decimal("10.00"),
            customer_email="sara@example.com",
        )
        assert payment_event_errors(event) == []

    def test_reports_every_problem(self):
        event = PaymentEvent(
            event_type="",
            status=PaymentLogStatus.FAILED,
            amount=Decimal("-1"),
            customer_email="not-an-email",
        )
        assert payment_event_errors(event) == [
            "event_type is required",
            "amount cannot be negative",
            "customer_email is not a valid email",
        ]


class TestEventMetadata:
    def test_discriminated_on_kind(self):
        adapter = TypeAdapter(EventMetadata)

        metadata = adapter.validate_python(
            {"kind": "refund", "refund_reason": "requested_by_customer"}
        )

        assert isinstance(metadata, RefundMetadata)
        assert metadata.payment_updated is False


@pytest.mark.django_db
class TestPaymentEventLogger:
    def test_writes_row(self):
        event = build_event_from_session(
            completed_session(), EventType.SESSION_COMPLETED, PaymentLogStatus.SUCCESS
        )
        event.metadata = OrderRecordedMetadata(order_id=7, items_count=2)

        assert PaymentEventLogger().record(event) is True

        log = PaymentLog.objects.get()
        assert log.stripe_session_id == "cs_test_1"
        assert log.event_type == "checkout.session.completed"
        assert log.status == PaymentLogStatus.SUCCESS
        assert log.amount == Decimal("39.00")
        assert log.metadata == {
            "kind": "order_recorded",
            "order_id": 7,
            "payment_recorded": True,
            "items_recorded": True,
            "items_count": 2,
        }

    def test_default_currency(self):
        event = PaymentEvent(
            event_type=EventType.SIGNATURE_FAILED, status=PaymentLogStatus.FAILED
        )

        PaymentEventLogger(default_currency="aed").record(event)

        assert PaymentLog.objects.get().currency == "aed"

    def test_invalid_event_still_written(self):
        event = PaymentEvent(
            event_type=EventType.SESSION_COMPLETED,
            status=PaymentLogStatus.SUCCESS,
            customer_email="bad-email",
        )

        assert PaymentEventLogger().record(event) is True
        assert PaymentLog.objects.count() == 1

    def test_storage_failure_never_raises(self):
        event = PaymentEvent(
            event_type=EventType.SESSION_EXPIRED, status=PaymentLogStatus.EXPIRED
        )

        with patch.object(
            PaymentLog.objects, "create", side_effect=DatabaseError("disk full")
        ):
            assert PaymentEventLogger().record(event) is False

    def test_log_entries_are_append_only(self):
        PaymentEventLogger().record(
            PaymentEvent(event_type=EventType.SESSION_EXPIRED, status=PaymentLogStatus.EXPIRED)
        )
        log = PaymentLog.objects.get()
        log.error_message = "edited"

        with pytest.raises(ValueError, match="append-only"):
            log.save()
