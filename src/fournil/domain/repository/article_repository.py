"""Abstract repositories for the master data the engine reads."""

from __future__ import annotations

from abc import ABC, abstractmethod

from fournil.domain.model.article import Article, StorageZone


class ArticleRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Reserve and return the next unique article ID."""

    @abstractmethod
    def get_by_id(self, article_id: int) -> Article | None:
        """Return an article by its ID, or None if not found."""

    @abstractmethod
    def get_by_code(self, code: str) -> Article | None:
        """Return an article by its exact code, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Article]:
        """Return every article."""

    @abstractmethod
    def save(self, article: Article) -> None:
        """Persist a new or updated article."""


class StorageZoneRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Reserve and return the next unique zone ID."""

    @abstractmethod
    def get_by_id(self, zone_id: int) -> StorageZone | None:
        """Return a zone by its ID, or None if not found."""

    @abstractmethod
    def get_by_code(self, code: str) -> StorageZone | None:
        """Return a zone by its exact code, or None if not found."""

    @abstractmethod
    def save(self, zone: StorageZone) -> None:
        """Persist a new or updated zone."""
