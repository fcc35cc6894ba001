# snippet_autocompleter/core/snippet.py
# Validated snippet record shared by the library, ranker and CLI.

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Tuple

from snippet_autocompleter.core.results import ValidationFailure

NAME_RE = re.compile(r"[A-Za-z0-9_]+")


class Category(str, Enum):
    ESSENTIAL = "essential"
    COMMON = "common"
    ADVANCED = "advanced"
    CUSTOM = "custom"


def _clean_tags(tags: Iterable[str]) -> Tuple[str, ...]:
    # ordered, de-duplicated, blank entries dropped
    seen = []
    for t in tags or ():
        t = str(t).strip()
        if t and t not in seen:
            seen.append(t)
    return tuple(seen)


@dataclass(frozen=True)
class Snippet:
    """
    A named code template with $N placeholders.

    Required fields are checked at construction; a malformed record raises
    ValidationFailure and never reaches the library.
    """

    name: str
    description: str
    template: str
    category: Category = Category.CUSTOM
    tags: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not self.name:
            raise ValidationFailure("Snippet name is required")
        if not NAME_RE.fullmatch(self.name):
            raise ValidationFailure("Snippet name must be alphanumeric (letters, numbers, underscore)")
        if not self.description:
            raise ValidationFailure("Snippet description is required")
        if not self.template:
            raise ValidationFailure("Snippet template is required")
        try:
            category = Category(self.category)
        except ValueError:
            raise ValidationFailure(f"Unknown category: {self.category!r}") from None
        object.__setattr__(self, "category", category)
        object.__setattr__(self, "tags", _clean_tags(self.tags))

    @property
    def tags_lower(self) -> Tuple[str, ...]:
        return tuple(t.lower() for t in self.tags)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "template": self.template,
            "category": self.category.value,
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Snippet":
        if not isinstance(data, dict):
            raise ValidationFailure(f"Snippet record must be a mapping, got {type(data).__name__}")
        tags = data.get("tags") or ()
        if isinstance(tags, str):
            tags = tags.split(",")
        return cls(
            name=str(data.get("name") or "").strip(),
            description=str(data.get("description") or "").strip(),
            template=str(data.get("template") or ""),
            category=data.get("category") or Category.CUSTOM,
            tags=tuple(tags),
        )
