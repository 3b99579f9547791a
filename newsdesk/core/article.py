"""
Article data model for Newsdesk.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

# Python attribute -> persisted JSON key, where they differ
_KEY_ALIASES = {
    "published_at": "publishedAt",
    "saved_at": "savedAt",
    "read_at": "readAt",
    "coverage": "_coverage",
    "country_score": "_countryScore",
}

# Written only when set
_OPTIONAL_KEYS = ("saved_at", "read_at", "coverage", "country_score")

_FIELDS = (
    "id", "title", "description", "content", "url", "image_url", "source",
    "published_at", "time_ago", "country", "category", "summary_points",
    "saved_at", "read_at", "coverage", "country_score",
)


@dataclass
class Article:
    """
    Represents a news article as served by the news service.

    ``coverage`` and ``country_score`` are annotations added by the ranking
    service; they are carried through untouched. Keys this model does not
    know about are kept in ``extra`` so nothing is lost on a round trip.
    """
    id: str
    title: str = ""
    description: str = ""
    content: str = ""
    url: str = ""
    image_url: Optional[str] = None
    source: str = ""
    published_at: str = ""
    time_ago: str = ""
    country: str = ""
    category: str = ""
    summary_points: Optional[List[str]] = None
    saved_at: Optional[str] = None
    read_at: Optional[str] = None  # reserved, nothing sets it
    coverage: Any = None
    country_score: Any = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.id is None:
            raise ValueError("Article is missing an id")
        # Ids compare as strings so dedup and removal match stored entries
        self.id = str(self.id)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Article":
        """
        Build an Article from its JSON representation.

        Raises:
            ValueError: If ``data`` is not a mapping or has no ``id``
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Article must be an object, got {type(data).__name__}")
        if data.get("id") is None:
            raise ValueError("Article is missing an id")

        remaining = dict(data)
        values = {}
        for name in _FIELDS:
            key = _KEY_ALIASES.get(name, name)
            if key in remaining:
                values[name] = remaining.pop(key)
        return cls(extra=remaining, **values)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to the persisted JSON shape.

        Core fields are always written, using their defaults when the
        source data lacked them. ``savedAt``, ``readAt`` and the ranking
        annotations are written only when set.
        """
        data = dict(self.extra)
        for name in _FIELDS:
            value = getattr(self, name)
            if name in _OPTIONAL_KEYS and value is None:
                continue
            data[_KEY_ALIASES.get(name, name)] = value
        return data


@dataclass
class Keyword:
    """A keyword tracked by a user."""
    id: str
    keyword: str
    user_id: str
    created_at: str
