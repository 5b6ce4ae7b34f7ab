"""Unit tests for the AvailabilityCalculator domain service."""

import logging
from decimal import Decimal

from fournil.domain.model.reservation import (
    Reservation,
    ReservationStatus,
    ReservationType,
)
from fournil.domain.model.stock import StockEntry
from fournil.domain.model.value_objects import Combination
from fournil.domain.service.availability_calculator import AvailabilityCalculator
from tests.fakes import FakeReservationRepository, FakeStockRepository


def _setup(*entries: StockEntry):
    stock_repo = FakeStockRepository(list(entries))
    reservation_repo = FakeReservationRepository()
    return reservation_repo, AvailabilityCalculator(stock_repo, reservation_repo)


def _hold(
    repo: FakeReservationRepository,
    operation_id: int,
    quantity: str,
    lot_id: int | None = None,
    zone_id: int | None = 3,
    article_id: int = 1,
) -> Reservation:
    reservation = Reservation(
        id=None,
        operation_id=operation_id,
        article_id=article_id,
        lot_id=lot_id,
        zone_id=zone_id,
        reserved_quantity=Decimal(quantity),
        reservation_type=ReservationType.DELIVERY,
    )
    repo.save(reservation)
    return reservation


class TestTotals:

    def test_two_deliveries_reserving_from_the_same_zone(self):
        reservations, calc = _setup(StockEntry(1, None, 3, Decimal("6")))

        _hold(reservations, operation_id=1, quantity="2")
        first = calc.availability(1, None).summary
        _hold(reservations, operation_id=2, quantity="2")
        second = calc.availability(1, None).summary

        assert (first.total_reserved, first.total_available) == (Decimal("2"), Decimal("4"))
        assert (second.total_reserved, second.total_available) == (Decimal("4"), Decimal("2"))
        assert second.total_stock == Decimal("6")

    def test_excluding_an_operation_gives_back_its_hold(self):
        reservations, calc = _setup(StockEntry(1, None, 3, Decimal("6")))
        _hold(reservations, operation_id=1, quantity="2")
        _hold(reservations, operation_id=2, quantity="2")

        everyone = calc.availability(1, None).summary
        without_second = calc.availability(1, 2).summary

        assert without_second.total_reserved == Decimal("2")
        assert without_second.total_available == everyone.total_available + Decimal("2")

    def test_inactive_reservations_do_not_hold_stock(self):
        reservations, calc = _setup(StockEntry(1, None, 3, Decimal("6")))
        released = _hold(reservations, operation_id=1, quantity="2")
        released.release()
        reservations.save(released)

        summary = calc.availability(1, None).summary

        assert summary.total_reserved == Decimal("0")
        assert summary.total_available == Decimal("6")

    def test_partially_delivered_reservation_holds_the_remainder(self):
        reservations, calc = _setup(StockEntry(1, None, 3, Decimal("5")))
        r = _hold(reservations, operation_id=1, quantity="4")
        r.record_delivery(Decimal("1"))
        reservations.save(r)

        summary = calc.availability(1, None).summary

        assert summary.total_reserved == Decimal("3")
        assert summary.total_available == Decimal("2")

    def test_other_articles_are_ignored(self):
        reservations, calc = _setup(
            StockEntry(1, None, 3, Decimal("6")),
            StockEntry(2, None, 3, Decimal("100")),
        )
        _hold(reservations, operation_id=1, quantity="50", article_id=2)

        summary = calc.availability(1, None).summary

        assert summary.total_stock == Decimal("6")
        assert summary.total_reserved == Decimal("0")


class TestPerCombination:

    def test_rows_list_lots_first_and_untracked_stock_last(self):
        _, calc = _setup(
            StockEntry(1, None, 3, Decimal("1")),
            StockEntry(1, 7, 3, Decimal("1")),
            StockEntry(1, 5, 4, Decimal("1")),
        )

        rows = calc.availability(1, None).per_combination

        assert [(r.lot_id, r.zone_id) for r in rows] == [(5, 4), (7, 3), (None, 3)]

    def test_row_available_is_stock_minus_reserved(self):
        reservations, calc = _setup(StockEntry(1, 7, 3, Decimal("10")))
        _hold(reservations, operation_id=1, quantity="4", lot_id=7)

        row = calc.availability(1, None).for_combination(Combination(7, 3))

        assert (row.stock, row.reserved, row.available) == (
            Decimal("10"), Decimal("4"), Decimal("6"),
        )

    def test_combination_filter(self):
        _, calc = _setup(
            StockEntry(1, 7, 3, Decimal("1")),
            StockEntry(1, 8, 3, Decimal("2")),
        )

        report = calc.availability(1, None, [Combination(8, 3)])

        assert [r.lot_id for r in report.per_combination] == [8]
        assert report.summary.total_stock == Decimal("2")

    def test_available_at_unknown_combination_is_zero(self):
        _, calc = _setup(StockEntry(1, 7, 3, Decimal("1")))

        assert calc.available_at(1, Combination(7, 4), None) == Decimal("0")


class TestUnscopedReservations:

    def test_article_level_hold_counts_in_totals_only(self):
        reservations, calc = _setup(StockEntry(1, None, 3, Decimal("6")))
        _hold(reservations, operation_id=1, quantity="2", zone_id=None)

        report = calc.availability(1, None)

        assert report.summary.total_reserved == Decimal("2")
        assert report.summary.total_available == Decimal("4")
        assert report.for_combination(Combination(None, 3)).reserved == Decimal("0")

    def test_article_level_hold_caps_every_combination(self):
        reservations, calc = _setup(StockEntry(1, None, 3, Decimal("6")))
        _hold(reservations, operation_id=1, quantity="2", zone_id=None)

        assert calc.available_at(1, Combination(None, 3), None) == Decimal("4")
        assert calc.available_at(1, Combination(None, None), None) == Decimal("4")


class TestAnomalies:

    def test_reservation_without_stock_reported_not_raised(self, caplog):
        reservations, calc = _setup(StockEntry(1, None, 3, Decimal("6")))
        _hold(reservations, operation_id=1, quantity="2", lot_id=7)

        with caplog.at_level(logging.WARNING, logger="fournil"):
            report = calc.availability(1, None)

        row = report.for_combination(Combination(7, 3))
        assert (row.stock, row.reserved, row.available) == (
            Decimal("0"), Decimal("2"), Decimal("0"),
        )
        assert len(report.anomalies) == 1
        assert report.anomalies[0].combination == Combination(7, 3)
        assert "no stock there" in caplog.text

    def test_over_reserved_combination_never_goes_negative(self):
        reservations, calc = _setup(StockEntry(1, None, 3, Decimal("1")))
        _hold(reservations, operation_id=1, quantity="3")

        summary = calc.availability(1, None).summary

        assert summary.total_available == Decimal("0")

    def test_scan_lists_anomalies_across_articles(self):
        reservations, calc = _setup(StockEntry(1, None, 3, Decimal("6")))
        _hold(reservations, operation_id=1, quantity="1", article_id=1)
        _hold(reservations, operation_id=2, quantity="1", article_id=2)

        found = calc.anomalies()

        assert [a.article_id for a in found] == [2]

    def test_released_reservation_is_not_an_anomaly(self):
        reservations, calc = _setup()
        r = _hold(reservations, operation_id=1, quantity="1")
        r.release(ReservationStatus.CANCELLED)
        reservations.save(r)

        assert calc.anomalies() == []
