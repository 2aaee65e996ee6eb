"""Lookups from page identities to discussion topics."""

from __future__ import annotations

from typing import List

from .models import Topic
from .titles import PageIdentity


class TopicRepository:
    """Resolves topics by their own page or by the page that owns them.

    Results are read from the database on every call; nothing is cached.
    """

    def get_by_title(self, title: PageIdentity) -> Topic | None:
        return Topic.objects.filter(title=title.prefixed_text).first()

    def get_by_owner(self, owner: PageIdentity) -> List[Topic]:
        return list(Topic.objects.filter(owner=owner.prefixed_text))
