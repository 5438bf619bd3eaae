"""BaseService — abstract foundation for all scorectl services.

Every service receives a :class:`Store` at construction time. The Store
provides serialized write transactions and the clock; reads go through
a :class:`RecordRepository` bound to the same engine. Services own
their transaction boundaries via ``self._store.transaction()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from scorectl.infrastructure.repositories.records import RecordRepository

if TYPE_CHECKING:
    from scorectl.config.settings import ScoreSettings
    from scorectl.infrastructure.store import Store


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class ScoreService(BaseService):
            def record_score(self, ...) -> ServiceResult:
                with self._store.transaction() as txn:
                    ...
    """

    def __init__(self, store: Store) -> None:
        self._store = store
        self._records = RecordRepository(store.engine)

    @property
    def _settings(self) -> ScoreSettings:
        return self._store.settings
