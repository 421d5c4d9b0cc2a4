"""Hierarchical metric names.

A Name is an immutable tuple of string segments rendered as a dotted string.
Names are hashable and totally ordered so they can key dicts and sort results.
"""

from functools import total_ordering
from typing import Iterable, Tuple, Union


@total_ordering
class Name:
    """Immutable ordered sequence of name segments."""

    __slots__ = ("_segments", "_key")

    EMPTY: "Name"

    def __init__(self, segments: Iterable[str] = ()):
        parts = []
        for segment in segments:
            if segment is None:
                raise TypeError("Name segments must not be None")
            if not isinstance(segment, str):
                raise TypeError(f"Name segments must be str, got {type(segment).__name__}")
            if segment:
                parts.append(segment)
        object.__setattr__(self, "_segments", tuple(parts))
        object.__setattr__(self, "_key", ".".join(parts))

    def __setattr__(self, key, value):
        raise AttributeError("Name is immutable")

    @classmethod
    def build(cls, *segments: str) -> "Name":
        """Build a Name from literal segments, skipping empty strings."""
        name = cls(segments)
        if not name._segments:
            return cls.EMPTY
        return name

    @classmethod
    def parse(cls, *parts: str) -> "Name":
        """Build a Name from dotted strings, splitting every part on '.'.

        >>> Name.parse("a.b", "c") == Name.build("a", "b", "c")
        True
        """
        segments = []
        for part in parts:
            if part is None:
                raise TypeError("Name segments must not be None")
            if not isinstance(part, str):
                raise TypeError(f"Name segments must be str, got {type(part).__name__}")
            segments.extend(part.split("."))
        return cls.build(*segments)

    @classmethod
    def for_class(cls, klass: type, *segments: str) -> "Name":
        """Build a Name whose first segment is the class's fully-qualified identifier."""
        return cls.build(f"{klass.__module__}.{klass.__qualname__}", *segments)

    @staticmethod
    def join(prefix: "Name", name: "Name") -> "Name":
        """Concatenate prefix and name; EMPTY is the identity on either side."""
        if not prefix._segments:
            return name
        if not name._segments:
            return prefix
        return Name(prefix._segments + name._segments)

    def child(self, *segments: str) -> "Name":
        return Name.join(self, Name.build(*segments))

    @property
    def segments(self) -> Tuple[str, ...]:
        return self._segments

    @property
    def key(self) -> str:
        """Dotted rendering of the name."""
        return self._key

    def is_empty(self) -> bool:
        return not self._segments

    def __eq__(self, other):
        if not isinstance(other, Name):
            return NotImplemented
        return self._segments == other._segments

    def __lt__(self, other):
        if not isinstance(other, Name):
            return NotImplemented
        # Ties on the dotted form (e.g. ("a.b",) vs ("a", "b")) fall back to segments
        return (self._key, self._segments) < (other._key, other._segments)

    def __hash__(self):
        return hash(self._segments)

    def __len__(self):
        return len(self._segments)

    def __iter__(self):
        return iter(self._segments)

    def __str__(self):
        return self._key

    def __repr__(self):
        return f"Name({list(self._segments)!r})"

    def __reduce__(self):
        return (Name, (self._segments,))


Name.EMPTY = Name()

NameLike = Union[Name, str, Iterable[str]]


def to_name(value: NameLike) -> Name:
    """Coerce a Name, a dotted string or an iterable of dotted strings into a Name."""
    if isinstance(value, Name):
        return value
    if value is None:
        raise TypeError("Metric name must not be None")
    if isinstance(value, str):
        return Name.parse(value)
    return Name.parse(*value)
