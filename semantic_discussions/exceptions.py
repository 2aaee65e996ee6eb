"""Exceptions raised by the semantic discussions app."""

from __future__ import annotations

from typing import List, Tuple


class SemanticDiscussionsError(Exception):
    """Base class for every error raised by this app."""


class PropertyRegistrationError(SemanticDiscussionsError):
    """The property registry refused a property declaration."""


class RebuildError(SemanticDiscussionsError):
    """A page could not be resolved or rebuilt."""

    def __init__(self, page_name: str, message: str) -> None:
        super().__init__(f'{page_name}: {message}')
        self.page_name = page_name


class CascadeRebuildError(SemanticDiscussionsError):
    """One or more owned topic pages failed to rebuild after their owner changed."""

    def __init__(self, owner: str, failures: List[Tuple[str, Exception]]) -> None:
        pages = ', '.join(page for page, _ in failures)
        super().__init__(f'Rebuilding topics owned by {owner} failed for: {pages}')
        self.owner = owner
        self.failures = failures


class ApiUsageError(SemanticDiscussionsError):
    """A discussion API call was made with missing or invalid parameters."""

    def __init__(self, code: str, info: str) -> None:
        super().__init__(info)
        self.code = code
        self.info = info
