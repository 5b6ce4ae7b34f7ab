"""Integration tests for master data, queries and input handling."""

from decimal import Decimal

import pytest

from fournil.application.add_article import AddArticleHandler
from fournil.application.add_storage_zone import AddStorageZoneHandler
from fournil.application.annotate_lot import AnnotateLotHandler
from fournil.application.create_operation import CreateOperationHandler
from fournil.application.dto import ItemSpec
from fournil.application.release_reservation import ReleaseReservationHandler
from fournil.application.set_operation_status import SetOperationStatusHandler
from fournil.application.show_anomalies import ShowAnomaliesHandler
from fournil.application.show_availability import ShowAvailabilityHandler
from fournil.application.show_operation import ShowOperationHandler
from fournil.application.show_reservations import ShowReservationsHandler
from fournil.domain.exceptions import EntityNotFoundError, ValidationError
from fournil.domain.model.reservation import Reservation, ReservationType
from tests.fakes import FakeUnitOfWork


def _setup() -> FakeUnitOfWork:
    uow = FakeUnitOfWork()
    AddStorageZoneHandler(uow).handle("CF1", "Chambre froide", capacity="500", unit="kg")
    AddArticleHandler(uow).handle("PRD-001", "Pain de mie", perishable=True, shelf_life_days=5)
    CreateOperationHandler(uow).handle(
        "initial_inventory", [ItemSpec("PRD-001", "6", to_zone="CF1")], status="completed"
    )
    return uow


class TestMasterData:

    def test_added_article_and_zone_are_usable(self):
        uow = _setup()

        article = uow.articles.get_by_code("PRD-001")
        zone = uow.zones.get_by_code("CF1")

        assert article.shelf_life_days == 5
        assert zone.capacity == Decimal("500")

    def test_duplicate_article_code_rejected(self):
        uow = _setup()

        with pytest.raises(ValidationError, match="already exists"):
            AddArticleHandler(uow).handle("PRD-001", "Autre pain")

    def test_negative_shelf_life_rejected(self):
        with pytest.raises(ValidationError, match="Shelf life"):
            AddArticleHandler(FakeUnitOfWork()).handle("PRD-009", "Pain", shelf_life_days=-1)


class TestLotNotes:

    def _produced_lot(self, uow: FakeUnitOfWork) -> str:
        dto = CreateOperationHandler(uow).handle(
            "preparation", [ItemSpec("PRD-001", "5", to_zone="CF1")], status="programmed"
        )
        done = SetOperationStatusHandler(uow).handle(
            dto.id, "completed", at="2024-01-15T14:30:00+00:00"
        )
        return done.lots[0].lot_code

    def test_notes_replaced_and_dates_kept(self):
        uow = _setup()
        code = self._produced_lot(uow)
        before = uow.lots.get_by_code(code)

        lot = AnnotateLotHandler(uow).handle(code, "  Fournée du matin ")

        stored = uow.lots.get_by_code(code)
        assert lot.notes == stored.notes == "Fournée du matin"
        assert stored.expiration_date == before.expiration_date
        assert stored.manufacturing_date == before.manufacturing_date

    def test_blank_notes_clear_them(self):
        uow = _setup()
        code = self._produced_lot(uow)

        AnnotateLotHandler(uow).handle(code, "   ")

        assert uow.lots.get_by_code(code).notes is None

    def test_unknown_lot(self):
        with pytest.raises(EntityNotFoundError, match="Lot not found: 'X-1'"):
            AnnotateLotHandler(_setup()).handle("X-1", "note")


class TestInputHandling:

    def test_unknown_article_code(self):
        uow = _setup()

        with pytest.raises(EntityNotFoundError, match="Article not found: 'NOPE'"):
            CreateOperationHandler(uow).handle("delivery", [ItemSpec("NOPE", "1", from_zone="CF1")])

    def test_unknown_zone_code(self):
        uow = _setup()

        with pytest.raises(EntityNotFoundError, match="Storage zone not found"):
            CreateOperationHandler(uow).handle("delivery", [ItemSpec("PRD-001", "1", from_zone="X")])

    def test_malformed_quantity(self):
        uow = _setup()

        with pytest.raises(ValidationError, match="Invalid quantity"):
            CreateOperationHandler(uow).handle("delivery", [ItemSpec("PRD-001", "abc", from_zone="CF1")])

    def test_unknown_operation_type(self):
        uow = _setup()

        with pytest.raises(ValidationError, match="Unknown operation type 'sale'"):
            CreateOperationHandler(uow).handle("sale", [ItemSpec("PRD-001", "1", from_zone="CF1")])

    def test_unknown_operation(self):
        with pytest.raises(EntityNotFoundError, match="Operation #42 not found"):
            ShowOperationHandler(_setup()).handle(42)


class TestReservationQueries:

    def test_release_one_reservation(self):
        uow = _setup()
        dto = CreateOperationHandler(uow).handle(
            "delivery", [ItemSpec("PRD-001", "2", from_zone="CF1")]
        )
        [hold] = ShowReservationsHandler(uow).handle(dto.id)

        released = ReleaseReservationHandler(uow).handle(hold.id)

        assert released.status == "released"
        assert ShowAvailabilityHandler(uow).handle("PRD-001").total_available == Decimal("6")

    def test_anomalies_listed_for_admins(self):
        uow = _setup()
        uow.reservations.save(
            Reservation(
                id=None,
                operation_id=99,
                article_id=uow.articles.get_by_code("PRD-001").id,
                lot_id=None,
                zone_id=7,
                reserved_quantity=Decimal("2"),
                reservation_type=ReservationType.DELIVERY,
            )
        )

        anomalies = ShowAnomaliesHandler(uow).handle()

        assert len(anomalies) == 1
        assert "no stock there" in anomalies[0]

    def test_availability_reports_anomalies(self):
        uow = _setup()
        uow.reservations.save(
            Reservation(
                id=None,
                operation_id=99,
                article_id=uow.articles.get_by_code("PRD-001").id,
                lot_id=None,
                zone_id=7,
                reserved_quantity=Decimal("2"),
                reservation_type=ReservationType.DELIVERY,
            )
        )

        dto = ShowAvailabilityHandler(uow).handle("PRD-001")

        assert len(dto.anomalies) == 1
        assert dto.total_available == Decimal("6")
