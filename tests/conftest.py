"""Pytest configuration shared across test modules."""

from __future__ import annotations

import os

import django
import pytest

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "semantic_discussions_site.settings")
os.environ.setdefault("DJANGO_SECRET_KEY", "test-secret")
os.environ.setdefault("DJANGO_DEBUG", "true")

django.setup()


@pytest.fixture()
def make_page(db):
    """Create (and thereby index) a wiki page from prefixed title text."""

    from semantic_discussions.models import Page
    from semantic_discussions.titles import PageIdentity

    def factory(title: str, text: str = "", content_model: str = Page.CONTENT_WIKITEXT) -> Page:
        identity = PageIdentity.new_from_text(title)
        return Page.objects.create(
            namespace=identity.namespace,
            title=identity.text,
            text=text,
            content_model=content_model,
        )

    return factory


@pytest.fixture()
def make_topic(db, make_page):
    """Create a topic with its opening post and its own topic page."""

    from semantic_discussions.models import Page, Post, Topic

    def factory(title: str, owner: str, subject: str = "A topic", **fields) -> Topic:
        fields.setdefault("creator", "Alice")
        topic = Topic.objects.create(title=title, owner=owner, subject=subject, **fields)
        Post.objects.create(topic=topic, author=topic.creator, content="<p>Opening post</p>")
        make_page(title, content_model=Page.CONTENT_TOPIC)
        return topic

    return factory


@pytest.fixture(autouse=True)
def fresh_services():
    """Drop cached services and module-level index state after each test."""

    yield

    from semantic_discussions.hooks import on_register_extension
    from semantic_discussions.semantic.namespaces import reset_namespaces
    from semantic_discussions.semantic.registry import reset_property_registry
    from semantic_discussions.semantic.store import reset_store
    from semantic_discussions.services import reset_services

    reset_services()
    reset_store()
    reset_property_registry()
    reset_namespaces()
    on_register_extension()
