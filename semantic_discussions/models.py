"""Database models for the semantic discussions app.

Wiki pages, discussion topics and their posts live here alongside the two
tables backing the semantic index: one row per stored fact, and the queue of
deferred update jobs the index falls back to when a change is not forced.
"""

from __future__ import annotations

from django.db import models

from .titles import PageIdentity


class Page(models.Model):
    """A wiki page. Saving one re-indexes its semantic data."""

    CONTENT_WIKITEXT = 'wikitext'
    CONTENT_BOARD = 'flow-board'
    CONTENT_TOPIC = 'flow-topic'
    CONTENT_MODELS = [
        (CONTENT_WIKITEXT, 'Wikitext'),
        (CONTENT_BOARD, 'Discussion board'),
        (CONTENT_TOPIC, 'Discussion topic'),
    ]

    namespace = models.IntegerField(default=0)
    title = models.CharField(max_length=255)
    text = models.TextField(blank=True)
    content_model = models.CharField(max_length=32, choices=CONTENT_MODELS, default=CONTENT_WIKITEXT)
    touched = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('namespace', 'title')

    @property
    def identity(self) -> PageIdentity:
        return PageIdentity(namespace=self.namespace, text=self.title)

    @classmethod
    def for_identity(cls, identity: PageIdentity) -> Page | None:
        return cls.objects.filter(namespace=identity.namespace, title=identity.text).first()

    def __str__(self) -> str:  # pragma: no cover - convenience display
        return self.identity.prefixed_text


class Topic(models.Model):
    """A discussion topic living under an owner (board) page."""

    title = models.CharField(max_length=255, unique=True)
    owner = models.CharField(max_length=255, db_index=True)
    subject = models.CharField(max_length=260)
    summary = models.TextField(blank=True)
    creator = models.CharField(max_length=255, blank=True)
    locked = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    modified_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['created_at', 'pk']

    def get_topic_title(self) -> PageIdentity | None:
        return PageIdentity.new_from_text(self.title)

    def get_owner_title(self) -> PageIdentity | None:
        return PageIdentity.new_from_text(self.owner)

    def __str__(self) -> str:  # pragma: no cover - convenience display
        return self.title


class Post(models.Model):
    """A post in a topic. The first post has no ``reply_to``."""

    topic = models.ForeignKey(Topic, on_delete=models.CASCADE, related_name='posts')
    reply_to = models.ForeignKey(
        'self',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='replies',
    )
    author = models.CharField(max_length=255)
    content = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)
    edited_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['created_at', 'pk']

    def __str__(self) -> str:  # pragma: no cover - convenience display
        return f"{self.topic.title} · {self.author}"


class SemanticFact(models.Model):
    """One stored (subject, property, value) triple of the semantic index."""

    subject = models.CharField(max_length=255, db_index=True)
    property = models.CharField(max_length=255, db_index=True)
    value_type = models.CharField(max_length=8)
    value = models.TextField()
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ['subject', 'position']

    def __str__(self) -> str:  # pragma: no cover - convenience display
        return f"{self.subject} · {self.property} · {self.value}"


class UpdateJob(models.Model):
    """A deferred request to re-index one page."""

    page = models.CharField(max_length=255)
    reason = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at', 'pk']

    def __str__(self) -> str:  # pragma: no cover - convenience display
        return self.page
