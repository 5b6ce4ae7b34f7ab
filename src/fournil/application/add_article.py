"""Application service: Add Article use case (master data seeding)."""

from __future__ import annotations

from fournil.domain.exceptions import ValidationError
from fournil.domain.model.article import Article
from fournil.domain.repository.unit_of_work import UnitOfWork


class AddArticleHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        code: str,
        name: str,
        unit: str = "kg",
        perishable: bool = False,
        shelf_life_days: int | None = None,
    ) -> Article:
        with self._uow:
            if self._uow.articles.get_by_code(code) is not None:
                raise ValidationError(f"Article '{code}' already exists")
            article = Article(
                id=self._uow.articles.next_id(),
                code=code.strip(),
                name=name.strip(),
                unit=unit,
                perishable=perishable,
                shelf_life_days=shelf_life_days,
            )
            self._uow.articles.save(article)
            self._uow.commit()
        return article
