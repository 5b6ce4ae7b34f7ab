"""Application service: Show Stock use case (query on the ledger)."""

from __future__ import annotations

from fournil.application.dto import StockLineDTO
from fournil.application.mapping import article_code, lot_code, zone_code
from fournil.domain.repository.unit_of_work import UnitOfWork
from fournil.domain.service.stock_ledger import StockLedger


class ShowStockHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, article_code_filter: str | None = None) -> list[StockLineDTO]:
        with self._uow:
            ledger = StockLedger(self._uow.stock)
            if article_code_filter is not None:
                article = self._uow.articles.get_by_code(article_code_filter)
                article_ids = [article.id] if article is not None else []
            else:
                article_ids = self._uow.stock.list_article_ids()
            return [
                StockLineDTO(
                    article_code=article_code(self._uow, entry.article_id),
                    lot_code=lot_code(self._uow, entry.lot_id),
                    zone_code=zone_code(self._uow, entry.zone_id) or "",
                    quantity=entry.quantity,
                )
                for article_id in article_ids
                for entry in ledger.query(article_id)
            ]
