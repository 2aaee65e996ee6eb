"""Page identities shared by the discussion store and the semantic index.

A :class:`PageIdentity` is the opaque, comparable handle every other
module passes around. It is built from prefixed text such as
``Topic:Example/T1`` and rendered back with :attr:`PageIdentity.prefixed_text`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

NS_SPECIAL = -1
NS_MAIN = 0
NS_TALK = 1
NS_USER = 2
NS_USER_TALK = 3
NS_PROJECT = 4
NS_PROJECT_TALK = 5
NS_CATEGORY = 14
NS_TOPIC = 2600

NAMESPACE_NAMES: dict[int, str] = {
    NS_SPECIAL: 'Special',
    NS_MAIN: '',
    NS_TALK: 'Talk',
    NS_USER: 'User',
    NS_USER_TALK: 'User talk',
    NS_PROJECT: 'Project',
    NS_PROJECT_TALK: 'Project talk',
    NS_CATEGORY: 'Category',
    NS_TOPIC: 'Topic',
}

# Characters that can never appear in a page title
INVALID_TITLE_CHARS = re.compile(r'[#<>\[\]|{}\n\t]')


def _namespace_lookup() -> dict[str, int]:
    return {name.lower(): ns for ns, name in NAMESPACE_NAMES.items() if name}


def normalize_title_text(text: str) -> str:
    """Collapse underscores/whitespace and uppercase the first character."""

    cleaned = re.sub(r'[\s_]+', ' ', text).strip()
    if not cleaned:
        return ''
    return cleaned[0].upper() + cleaned[1:]


@dataclass(frozen=True, order=True)
class PageIdentity:
    """A page handle made of a namespace id and its unprefixed title text."""

    namespace: int
    text: str

    @classmethod
    def new_from_text(cls, text: str | None, default_namespace: int = NS_MAIN) -> PageIdentity | None:
        """Parse prefixed title text, returning ``None`` when it is not a valid title."""

        if text is None:
            return None
        candidate = text.strip()
        if not candidate or INVALID_TITLE_CHARS.search(candidate):
            return None

        namespace = default_namespace
        if ':' in candidate:
            prefix, rest = candidate.split(':', 1)
            lookup = _namespace_lookup()
            key = normalize_title_text(prefix).lower()
            if key in lookup:
                namespace = lookup[key]
                candidate = rest

        normalized = normalize_title_text(candidate)
        if not normalized:
            return None
        return cls(namespace=namespace, text=normalized)

    @property
    def namespace_name(self) -> str:
        return NAMESPACE_NAMES.get(self.namespace, f'NS{self.namespace}')

    @property
    def prefixed_text(self) -> str:
        name = self.namespace_name
        return f'{name}:{self.text}' if name else self.text

    @property
    def db_key(self) -> str:
        return self.text.replace(' ', '_')

    def __str__(self) -> str:
        return self.prefixed_text
