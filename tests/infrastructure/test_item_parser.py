"""Tests for parsing --item values."""

import click
import pytest

from fournil.application.dto import AllocationSpec
from fournil.infrastructure.cli.item_parser import parse_item, parse_items


class TestParseItem:

    def test_article_and_quantity(self):
        spec = parse_item("PRD-001:5")

        assert spec.article_code == "PRD-001"
        assert spec.quantity == "5"
        assert spec.allocations == ()

    def test_zones_and_lot(self):
        spec = parse_item("PRD-001:2.5,from=CF1,to=EXPO,lot=PRD-001-20240115-001")

        assert (spec.from_zone, spec.to_zone) == ("CF1", "EXPO")
        assert spec.lot_code == "PRD-001-20240115-001"

    def test_repeated_allocations(self):
        spec = parse_item("FAR-T65:12,alloc=CF1/8/FAR-T65-L1,alloc=CF2/4")

        assert spec.allocations == (
            AllocationSpec(zone_code="CF1", quantity="8", lot_code="FAR-T65-L1"),
            AllocationSpec(zone_code="CF2", quantity="4"),
        )

    @pytest.mark.parametrize("raw", ["PRD-001", "PRD-001:1,zone=CF1", "PRD-001:1,alloc=CF1"])
    def test_malformed_rejected(self, raw):
        with pytest.raises(click.BadParameter):
            parse_item(raw)

    def test_parse_many(self):
        assert [s.article_code for s in parse_items(("A:1", "B:2"))] == ["A", "B"]
