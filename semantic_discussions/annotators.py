"""Annotators that turn a discussion topic into semantic facts.

Each annotator owns exactly one predefined property: it declares that
property (see :mod:`semantic_discussions.properties`) and adds the topic's
value for it to a SemanticData object. Annotators only mutate the
SemanticData they are handed; they never write to a store.
"""

from __future__ import annotations

import re
from typing import List, Sequence, Type

from bs4 import BeautifulSoup, FeatureNotFound  # type: ignore
from django.utils.module_loading import import_string

from .models import Topic
from .semantic.registry import CATEGORY_PROPERTY
from .semantic.store import Store, get_store
from .semantic.types import (
    TYPE_BOOLEAN,
    TYPE_DATE,
    TYPE_NUMBER,
    TYPE_PAGE,
    TYPE_TEXT,
    DataItem,
    SemanticData,
    Subject,
)
from .titles import NS_USER, PageIdentity

# Summaries longer than this are truncated before being stored
MAX_SUMMARY_LENGTH = 500


class Annotator:
    """Base class for topic annotators."""

    key: str = ''
    type_id: str = TYPE_TEXT
    label: str = ''
    visible: bool = True

    def __init__(self, store: Store | None = None) -> None:
        self.store = store

    def annotate(self, topic: Topic, semantic_data: SemanticData) -> None:
        raise NotImplementedError


class TopicTitleAnnotator(Annotator):
    key = '_SSD_TOPIC_TITLE'
    type_id = TYPE_TEXT
    label = 'Topic title'

    def annotate(self, topic: Topic, semantic_data: SemanticData) -> None:
        if topic.subject.strip():
            semantic_data.add_property_value(self.key, DataItem.text(topic.subject.strip()))


class OwnerAnnotator(Annotator):
    key = '_SSD_OWNER'
    type_id = TYPE_PAGE
    label = 'Topic owner'

    def annotate(self, topic: Topic, semantic_data: SemanticData) -> None:
        owner = topic.get_owner_title()
        if owner is not None:
            semantic_data.add_property_value(self.key, DataItem.page(owner))


class CreatorAnnotator(Annotator):
    key = '_SSD_CREATOR'
    type_id = TYPE_PAGE
    label = 'Topic creator'

    def annotate(self, topic: Topic, semantic_data: SemanticData) -> None:
        user = PageIdentity.new_from_text(topic.creator, default_namespace=NS_USER)
        if user is not None:
            semantic_data.add_property_value(self.key, DataItem.page(PageIdentity(NS_USER, user.text)))


class CreationDateAnnotator(Annotator):
    key = '_SSD_CREATED'
    type_id = TYPE_DATE
    label = 'Topic creation date'

    def annotate(self, topic: Topic, semantic_data: SemanticData) -> None:
        if topic.created_at is not None:
            semantic_data.add_property_value(self.key, DataItem.date(topic.created_at))


class ModificationDateAnnotator(Annotator):
    key = '_SSD_MODIFIED'
    type_id = TYPE_DATE
    label = 'Topic modification date'

    def annotate(self, topic: Topic, semantic_data: SemanticData) -> None:
        if topic.modified_at is not None:
            semantic_data.add_property_value(self.key, DataItem.date(topic.modified_at))


class ReplyCountAnnotator(Annotator):
    key = '_SSD_REPLY_COUNT'
    type_id = TYPE_NUMBER
    label = 'Topic reply count'

    def annotate(self, topic: Topic, semantic_data: SemanticData) -> None:
        replies = topic.posts.filter(reply_to__isnull=False).count()
        semantic_data.add_property_value(self.key, DataItem.number(replies))


class LockedAnnotator(Annotator):
    key = '_SSD_LOCKED'
    type_id = TYPE_BOOLEAN
    label = 'Topic is locked'

    def annotate(self, topic: Topic, semantic_data: SemanticData) -> None:
        semantic_data.add_property_value(self.key, DataItem.boolean(topic.locked))


class SummaryAnnotator(Annotator):
    key = '_SSD_SUMMARY'
    type_id = TYPE_TEXT
    label = 'Topic summary'

    def annotate(self, topic: Topic, semantic_data: SemanticData) -> None:
        text = html_to_text(topic.summary)
        if text:
            semantic_data.add_property_value(self.key, DataItem.text(text[:MAX_SUMMARY_LENGTH]))


class OwnerCategoryAnnotator(Annotator):
    """Copies the categories stored for the owner page onto the topic.

    This is the fact that goes stale when the owner page is edited, which is
    why owned topics are rebuilt after their owner's data is committed.
    """

    key = '_SSD_OWNER_CATEGORY'
    type_id = TYPE_PAGE
    label = 'Topic owner category'

    def annotate(self, topic: Topic, semantic_data: SemanticData) -> None:
        owner = topic.get_owner_title()
        if owner is None:
            return
        store = self.store or get_store()
        owner_data = store.get_semantic_data(Subject.from_identity(owner))
        for item in owner_data.values(CATEGORY_PROPERTY):
            semantic_data.add_property_value(self.key, item)


def html_to_text(html: str) -> str:
    """Return the visible text of ``html`` with whitespace collapsed."""

    if not html:
        return ''

    try:
        soup = BeautifulSoup(html, 'lxml')
    except FeatureNotFound:
        soup = BeautifulSoup(html, 'html.parser')

    return re.sub(r'\s+', ' ', soup.get_text(' ')).strip()


class AnnotatorStore:
    """The ordered set of annotator classes in use."""

    def __init__(self, annotators: Sequence[Type[Annotator]] = ()) -> None:
        self._annotators: List[Type[Annotator]] = []
        for annotator in annotators:
            self.register(annotator)

    @classmethod
    def from_dotted_paths(cls, paths: Sequence[str]) -> AnnotatorStore:
        return cls([import_string(path) for path in paths])

    def register(self, annotator: Type[Annotator]) -> None:
        if annotator not in self._annotators:
            self._annotators.append(annotator)

    def get_annotators(self) -> List[Type[Annotator]]:
        return list(self._annotators)


class DataAnnotator:
    """Runs every registered annotator against a topic."""

    def __init__(self, annotator_store: AnnotatorStore, store: Store | None = None) -> None:
        self.annotator_store = annotator_store
        self.store = store

    def add_annotations(self, topic: Topic, semantic_data: SemanticData) -> None:
        for annotator_class in self.annotator_store.get_annotators():
            annotator_class(self.store).annotate(topic, semantic_data)
