"""Database-backed store for the semantic index."""

from __future__ import annotations

import logging
import threading
from typing import List, Optional

from django.db import transaction

from ..models import SemanticFact, UpdateJob
from ..signals import after_data_update_complete, before_data_update_complete
from ..titles import PageIdentity
from .types import TYPE_PAGE, DataItem, SemanticData, Subject

logger = logging.getLogger(__name__)


class Store:
    """Reads and writes SemanticData as :class:`SemanticFact` rows.

    ``create_update_job`` is the default for :meth:`update_data`; every call
    may override it, so forcing an inline rebuild never touches state shared
    with other callers.
    """

    def __init__(self, *, create_update_job: bool = True) -> None:
        self.create_update_job = create_update_job

    def get_semantic_data(self, subject: Subject) -> SemanticData:
        data = SemanticData(subject)
        for fact in SemanticFact.objects.filter(subject=subject.serialization()).order_by("position"):
            data.add_property_value(fact.property, DataItem(fact.value_type, fact.value))
        return data

    def update_data(self, semantic_data: SemanticData, *, create_update_job: Optional[bool] = None) -> None:
        """Replace the stored facts of ``semantic_data.subject``.

        ``before_data_update_complete`` fires before the write and
        ``after_data_update_complete`` right after it, both inside the same
        transaction.
        """

        schedule = self.create_update_job if create_update_job is None else create_update_job
        subject = semantic_data.subject

        with transaction.atomic():
            before_data_update_complete.send(sender=type(self), store=self, semantic_data=semantic_data)
            self._replace_facts(semantic_data)
            if schedule:
                self._schedule_update_jobs(subject)
            after_data_update_complete.send(sender=type(self), store=self, semantic_data=semantic_data)

        logger.debug("Stored %d facts for %s", len(semantic_data), subject.serialization())

    def delete_subject(self, subject: Subject) -> int:
        deleted, _ = SemanticFact.objects.filter(subject=subject.serialization()).delete()
        return deleted

    def get_dependent_pages(self, subject: Subject) -> List[PageIdentity]:
        """Return pages whose stored facts point at ``subject``."""

        key = subject.serialization()
        names = (
            SemanticFact.objects
            .filter(value_type=TYPE_PAGE, value=key)
            .exclude(subject=key)
            .values_list("subject", flat=True)
            .distinct()
        )
        pages = [PageIdentity.new_from_text(name) for name in names]
        return sorted(page for page in pages if page is not None)

    def _replace_facts(self, semantic_data: SemanticData) -> None:
        key = semantic_data.subject.serialization()
        SemanticFact.objects.filter(subject=key).delete()
        SemanticFact.objects.bulk_create(
            [
                SemanticFact(
                    subject=key,
                    property=property_key,
                    value_type=item.type_id,
                    value=item.value,
                    position=position,
                )
                for position, (property_key, item) in enumerate(semantic_data)
            ]
        )

    def _schedule_update_jobs(self, subject: Subject) -> None:
        pending = set(UpdateJob.objects.values_list("page", flat=True))
        reason = f"dependency of {subject.serialization()}"
        jobs = [
            UpdateJob(page=page.prefixed_text, reason=reason)
            for page in self.get_dependent_pages(subject)
            if page.prefixed_text not in pending
        ]
        if jobs:
            UpdateJob.objects.bulk_create(jobs)
            logger.info("Queued %d update jobs after %s changed", len(jobs), subject.serialization())


_store: Optional[Store] = None
_store_lock = threading.Lock()


def get_store() -> Store:
    """Return the shared store instance."""

    global _store
    with _store_lock:
        if _store is None:
            _store = Store()
        return _store


def reset_store() -> None:
    global _store
    with _store_lock:
        _store = None
