"""Parse ``--item`` values typed on the command line into ItemSpec objects.

Format: ``ARTICLE:QTY[,key=value...]`` with keys ``lot``, ``from``, ``to``,
``notes`` and ``alloc``. ``alloc`` may repeat and reads ``ZONE/QTY[/LOT]``.

    FARINE-T65:12,alloc=CF1/8/FARINE-T65-20240110-001,alloc=CF2/4
    PRD-001:5,to=EXPO
"""

from __future__ import annotations

import click

from fournil.application.dto import AllocationSpec, ItemSpec

_KEYS = {"lot", "from", "to", "notes", "alloc"}


def _parse_allocation(raw: str) -> AllocationSpec:
    parts = raw.split("/")
    if len(parts) not in (2, 3) or not all(p.strip() for p in parts):
        raise click.BadParameter(
            f"Invalid allocation '{raw}'. Expected 'ZONE/QTY' or 'ZONE/QTY/LOT'."
        )
    zone, qty = parts[0].strip(), parts[1].strip()
    lot = parts[2].strip() if len(parts) == 3 else None
    return AllocationSpec(zone_code=zone, quantity=qty, lot_code=lot)


def parse_item(raw: str) -> ItemSpec:
    head, *options = [part.strip() for part in raw.split(",")]
    if ":" not in head:
        raise click.BadParameter(
            f"Invalid item format '{head}'. Expected 'ArticleCode:Quantity'."
        )
    article, qty = head.rsplit(":", 1)

    fields: dict[str, str] = {}
    allocations: list[AllocationSpec] = []
    for option in options:
        key, sep, value = option.partition("=")
        key = key.strip()
        if not sep or key not in _KEYS:
            raise click.BadParameter(
                f"Invalid item option '{option}'. Expected one of: {', '.join(sorted(_KEYS))}."
            )
        if key == "alloc":
            allocations.append(_parse_allocation(value))
        else:
            fields[key] = value.strip()

    return ItemSpec(
        article_code=article.strip(),
        quantity=qty.strip(),
        lot_code=fields.get("lot"),
        from_zone=fields.get("from"),
        to_zone=fields.get("to"),
        allocations=tuple(allocations),
        notes=fields.get("notes"),
    )


def parse_items(values: tuple[str, ...]) -> list[ItemSpec]:
    return [parse_item(value) for value in values]
