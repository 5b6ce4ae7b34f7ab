"""Domain service: Lot Generator.

When a production operation completes, the batch it produced becomes a
traceable lot: a daily-sequenced code, dates derived from the article's
shelf life, and a link back to the operation with the produced quantity.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal

from fournil.domain.exceptions import DomainWarning, EntityNotFoundError, MissingShelfLife
from fournil.domain.model.lot import AUTO_LOT_NOTES, Lot, OperationLot, format_lot_code
from fournil.domain.model.value_objects import ZERO
from fournil.domain.repository.article_repository import ArticleRepository
from fournil.domain.repository.lot_repository import LotRepository

logger = logging.getLogger(__name__)

DEFAULT_ALERT_LEAD_DAYS = 3


@dataclass
class LotGeneration:
    """Outcome of ``generate_lot``; ``lot`` is None when nothing was produced."""

    lot: Lot | None = None
    link: OperationLot | None = None
    warnings: list[DomainWarning] = field(default_factory=list)


class LotGenerator:

    def __init__(
        self,
        article_repo: ArticleRepository,
        lot_repo: LotRepository,
        alert_lead_days: int = DEFAULT_ALERT_LEAD_DAYS,
    ) -> None:
        self._article_repo = article_repo
        self._lot_repo = lot_repo
        self._alert_lead = timedelta(days=alert_lead_days)

    def generate_lot(
        self,
        operation_id: int,
        article_id: int,
        conform_quantity: Decimal,
        waste_quantity: Decimal,
        manufacturing_date: datetime,
    ) -> LotGeneration:
        """Create the lot of a completed production and link it.

        The produced quantity recorded on the link is conform + waste.
        Nothing is created when that total is not positive.
        """
        total_produced = conform_quantity + waste_quantity
        if total_produced <= ZERO:
            return LotGeneration()

        article = self._article_repo.get_by_id(article_id)
        if article is None:
            raise EntityNotFoundError(f"Article #{article_id} not found")

        code = self._next_code(article.code, article_id, manufacturing_date)

        use_date = expiration_date = alert_date = None
        if article.shelf_life_days is not None:
            use_date = manufacturing_date + timedelta(days=article.shelf_life_days)
            expiration_date = use_date
            alert_date = expiration_date - self._alert_lead

        lot = Lot(
            id=self._lot_repo.next_id(),
            article_id=article_id,
            code=code,
            manufacturing_date=manufacturing_date,
            use_date=use_date,
            expiration_date=expiration_date,
            alert_date=alert_date,
            supplier_id=None,
            notes=AUTO_LOT_NOTES,
        )
        self._lot_repo.save(lot)

        link = OperationLot(
            id=self._lot_repo.next_link_id(),
            operation_id=operation_id,
            lot_id=lot.id,
            produced_quantity=total_produced,
        )

        result = LotGeneration(lot=lot, link=link)
        if article.shelf_life_days is None:
            warning = MissingShelfLife(article.code, code)
            logger.warning("%s", warning)
            result.warnings.append(warning)
        logger.info(
            "Lot %s created for operation #%s (%s produced)",
            code, operation_id, total_produced,
        )
        return result

    def _next_code(self, article_code: str, article_id: int, day: datetime) -> str:
        sequence = self._lot_repo.count_for_article_on(article_id, day.date()) + 1
        code = format_lot_code(article_code, day.date(), sequence)
        # Lots created by hand on the same day may already use the next number.
        while self._lot_repo.get_by_code(code) is not None:
            sequence += 1
            code = format_lot_code(article_code, day.date(), sequence)
        return code
