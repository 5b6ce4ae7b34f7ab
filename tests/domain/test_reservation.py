"""Unit tests for the Reservation entity."""

from decimal import Decimal

import pytest

from fournil.domain.exceptions import ValidationError
from fournil.domain.model.reservation import (
    Reservation,
    ReservationStatus,
    ReservationType,
)


def _reservation(quantity: str = "5") -> Reservation:
    return Reservation(
        id=1,
        operation_id=10,
        article_id=1,
        lot_id=None,
        zone_id=3,
        reserved_quantity=Decimal(quantity),
        reservation_type=ReservationType.DELIVERY,
    )


class TestCreation:

    def test_new_reservation_is_active(self):
        r = _reservation()

        assert r.is_active
        assert r.outstanding_quantity == Decimal("5")

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            _reservation("0")


class TestDelivery:

    def test_partial_delivery_keeps_holding_the_rest(self):
        r = _reservation()

        r.record_delivery(Decimal("2"))

        assert r.status == ReservationStatus.RESERVED
        assert r.delivered_quantity == Decimal("2")
        assert r.outstanding_quantity == Decimal("3")

    def test_full_delivery_marks_delivered(self):
        r = _reservation()

        r.record_delivery(Decimal("2"))
        r.record_delivery(Decimal("3"))

        assert r.status == ReservationStatus.DELIVERED
        assert r.outstanding_quantity == Decimal("0")

    def test_over_delivery_rejected(self):
        r = _reservation()

        with pytest.raises(ValidationError, match="only 5 outstanding"):
            r.record_delivery(Decimal("6"))

    def test_delivery_on_released_reservation_rejected(self):
        r = _reservation()
        r.release()

        with pytest.raises(ValidationError, match="nothing to deliver"):
            r.record_delivery(Decimal("1"))


class TestResizeAndRelease:

    def test_cannot_shrink_below_delivered(self):
        r = _reservation()
        r.record_delivery(Decimal("3"))

        with pytest.raises(ValidationError, match="already delivered"):
            r.resize(Decimal("2"))

    def test_release_is_idempotent(self):
        r = _reservation()

        assert r.release(ReservationStatus.CANCELLED) is True
        assert r.release() is False
        assert r.status == ReservationStatus.CANCELLED
        assert r.outstanding_quantity == Decimal("0")

    def test_release_to_reserved_rejected(self):
        with pytest.raises(ValidationError):
            _reservation().release(ReservationStatus.RESERVED)

    def test_inactive_reservation_cannot_be_resized(self):
        r = _reservation()
        r.release()

        with pytest.raises(ValidationError, match="cannot be resized"):
            r.resize(Decimal("1"))
