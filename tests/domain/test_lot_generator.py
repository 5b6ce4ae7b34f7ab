"""Unit tests for the LotGenerator domain service."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from fournil.domain.exceptions import EntityNotFoundError, MissingShelfLife
from fournil.domain.model.article import Article
from fournil.domain.model.lot import AUTO_LOT_NOTES, Lot
from fournil.domain.service.lot_generator import LotGenerator
from tests.fakes import FakeArticleRepository, FakeLotRepository

MADE_ON = datetime(2024, 1, 15, 14, 30, tzinfo=timezone.utc)


def _setup(lots: list[Lot] | None = None, alert_lead_days: int = 3):
    articles = FakeArticleRepository([
        Article(id=1, code="PRD-001", name="Pain de mie", shelf_life_days=5),
        Article(id=2, code="PRD-002", name="Brioche"),
    ])
    lot_repo = FakeLotRepository(lots)
    return lot_repo, LotGenerator(articles, lot_repo, alert_lead_days)


class TestGenerateLot:

    def test_lot_code_dates_and_produced_quantity(self):
        lot_repo, generator = _setup()

        result = generator.generate_lot(42, 1, Decimal("4.5"), Decimal("0.5"), MADE_ON)

        lot = result.lot
        assert lot.code == "PRD-001-20240115-001"
        assert lot.manufacturing_date == MADE_ON
        assert lot.use_date == datetime(2024, 1, 20, 14, 30, tzinfo=timezone.utc)
        assert lot.expiration_date == datetime(2024, 1, 20, 14, 30, tzinfo=timezone.utc)
        assert lot.alert_date == datetime(2024, 1, 17, 14, 30, tzinfo=timezone.utc)
        assert lot.supplier_id is None
        assert lot.is_internal
        assert lot.notes == AUTO_LOT_NOTES
        assert result.link.operation_id == 42
        assert result.link.lot_id == lot.id
        assert result.link.produced_quantity == Decimal("5.0")
        assert result.warnings == []
        assert lot_repo.get_by_code("PRD-001-20240115-001") is not None

    def test_sequence_increments_within_a_day(self):
        _, generator = _setup()

        first = generator.generate_lot(1, 1, Decimal("1"), Decimal("0"), MADE_ON)
        second = generator.generate_lot(2, 1, Decimal("1"), Decimal("0"), MADE_ON)
        next_day = generator.generate_lot(
            3, 1, Decimal("1"), Decimal("0"), datetime(2024, 1, 16, 8, 0, tzinfo=timezone.utc)
        )

        assert first.lot.code == "PRD-001-20240115-001"
        assert second.lot.code == "PRD-001-20240115-002"
        assert next_day.lot.code == "PRD-001-20240116-001"
        assert first.link.id != second.link.id

    def test_code_taken_by_a_manual_lot_is_skipped(self):
        manual = Lot(id=1, article_id=1, code="PRD-001-20240115-001")
        _, generator = _setup([manual])

        result = generator.generate_lot(1, 1, Decimal("2"), Decimal("0"), MADE_ON)

        assert result.lot.code == "PRD-001-20240115-002"

    def test_missing_shelf_life_creates_lot_with_warning(self):
        _, generator = _setup()

        result = generator.generate_lot(1, 2, Decimal("3"), Decimal("0"), MADE_ON)

        assert result.lot.code == "PRD-002-20240115-001"
        assert result.lot.use_date is None
        assert result.lot.expiration_date is None
        assert result.lot.alert_date is None
        assert len(result.warnings) == 1
        assert isinstance(result.warnings[0], MissingShelfLife)

    def test_nothing_produced_is_a_no_op(self):
        lot_repo, generator = _setup()

        result = generator.generate_lot(1, 1, Decimal("0"), Decimal("0"), MADE_ON)

        assert result.lot is None
        assert result.link is None
        assert lot_repo.list_for_article(1) == []

    def test_waste_only_batch_still_gets_a_lot(self):
        _, generator = _setup()

        result = generator.generate_lot(1, 1, Decimal("0"), Decimal("1.5"), MADE_ON)

        assert result.link.produced_quantity == Decimal("1.5")

    def test_alert_lead_is_configurable(self):
        _, generator = _setup(alert_lead_days=1)

        result = generator.generate_lot(1, 1, Decimal("1"), Decimal("0"), MADE_ON)

        assert result.lot.alert_date == datetime(2024, 1, 19, 14, 30, tzinfo=timezone.utc)

    def test_unknown_article_rejected(self):
        _, generator = _setup()

        with pytest.raises(EntityNotFoundError, match="Article #99 not found"):
            generator.generate_lot(1, 99, Decimal("1"), Decimal("0"), MADE_ON)
