"""Unit tests for the ReservationStore domain service."""

from datetime import timedelta
from decimal import Decimal

import pytest

from fournil.domain.exceptions import EntityNotFoundError, InsufficientAvailability
from fournil.domain.model.reservation import ReservationStatus
from fournil.domain.model.stock import StockEntry
from fournil.domain.service.availability_calculator import AvailabilityCalculator
from fournil.domain.service.reservation_store import ReservationStore
from tests.fakes import FakeReservationRepository, FakeStockRepository


def _setup(on_hand: str = "6", ttl: timedelta | None = None):
    stock = FakeStockRepository([StockEntry(1, None, 3, Decimal(on_hand))])
    repo = FakeReservationRepository()
    calculator = AvailabilityCalculator(stock, repo)
    return repo, calculator, ReservationStore(repo, calculator, ttl)


class TestReserve:

    def test_reserve_holds_stock(self):
        repo, calc, store = _setup()

        r = store.reserve(1, 1, None, 3, Decimal("4"))

        assert repo.get_by_id(r.id).status == ReservationStatus.RESERVED
        assert calc.availability(1, None).summary.total_available == Decimal("2")
        assert r.expires_at is None

    def test_reserve_beyond_availability_writes_nothing(self):
        repo, _, store = _setup()
        store.reserve(1, 1, None, 3, Decimal("4"))

        with pytest.raises(InsufficientAvailability, match="need 3, have 2 available"):
            store.reserve(2, 1, None, 3, Decimal("3"))

        assert repo.list_for_operation(2) == []

    def test_ttl_sets_expiry(self):
        _, _, store = _setup(ttl=timedelta(hours=2))

        r = store.reserve(1, 1, None, 3, Decimal("1"))

        assert r.expires_at - r.created_at == timedelta(hours=2)


class TestResize:

    def test_growing_ignores_the_owners_hold(self):
        repo, _, store = _setup()
        r = store.reserve(1, 1, None, 3, Decimal("4"))

        store.resize(r.id, Decimal("6"))

        assert repo.get_by_id(r.id).reserved_quantity == Decimal("6")

    def test_growing_blocked_by_other_operations(self):
        _, _, store = _setup()
        r = store.reserve(1, 1, None, 3, Decimal("4"))
        store.reserve(2, 1, None, 3, Decimal("2"))

        with pytest.raises(InsufficientAvailability):
            store.resize(r.id, Decimal("5"))

    def test_shrinking_always_allowed(self):
        repo, _, store = _setup()
        store.reserve(2, 1, None, 3, Decimal("2"))
        r = store.reserve(1, 1, None, 3, Decimal("4"))

        store.resize(r.id, Decimal("1"))

        assert repo.get_by_id(r.id).reserved_quantity == Decimal("1")

    def test_unknown_reservation_rejected(self):
        _, _, store = _setup()

        with pytest.raises(EntityNotFoundError, match="Reservation #99 not found"):
            store.resize(99, Decimal("1"))


class TestRelease:

    def test_release_all_for_operation(self):
        repo, calc, store = _setup()
        store.reserve(1, 1, None, 3, Decimal("2"))
        store.reserve(1, 1, None, 3, Decimal("1"))

        released = store.release_all_for_operation(1, ReservationStatus.CANCELLED)

        assert len(released) == 2
        assert all(r.status == ReservationStatus.CANCELLED for r in repo.list_for_operation(1))
        assert calc.availability(1, None).summary.total_available == Decimal("6")

    def test_release_twice_is_harmless(self):
        repo, _, store = _setup()
        r = store.reserve(1, 1, None, 3, Decimal("2"))

        store.release(r.id)
        store.release(r.id, ReservationStatus.CANCELLED)

        assert repo.get_by_id(r.id).status == ReservationStatus.RELEASED

    def test_delete_all_for_operation(self):
        repo, _, store = _setup()
        store.reserve(1, 1, None, 3, Decimal("2"))
        store.reserve(1, 1, None, 3, Decimal("1"))
        store.reserve(2, 1, None, 3, Decimal("1"))

        assert store.delete_all_for_operation(1) == 2
        assert repo.list_for_operation(1) == []
        assert len(repo.list_for_operation(2)) == 1
