"""Schema model — settings, sections, and the schema tree.

A :class:`Setting` is a leaf: one key governed by a range.  A
:class:`Section` is an internal node: one key holding a nested
:class:`Schema`.  Schemas are built once and reused across validations.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from rangeconf.domain.errors import FatalKind, report
from rangeconf.domain.ranges import Range


@dataclass(frozen=True)
class Setting:
    """Leaf schema node.

    Attributes:
        key: The configuration key.
        description: Human-readable purpose of the setting.
        range: Admissible values and default.
        inherit: When True, a value given at this level becomes the
            default for same-named settings in nested sections.
    """

    key: str
    description: str
    range: Range
    inherit: bool = False


@dataclass(frozen=True)
class Section:
    """Internal schema node holding a nested schema under ``key``."""

    key: str
    schema: Schema
    inherit: bool = False


@dataclass(frozen=True)
class Schema:
    """An ordered collection of settings and sections with unique keys.

    Build with :func:`schema` rather than directly.
    """

    description: str
    settings: tuple[Setting, ...] = ()
    sections: tuple[Section, ...] = ()
    settings_by_key: Mapping[str, Setting] = field(init=False, repr=False, compare=False)
    sections_by_key: Mapping[str, Section] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "settings_by_key", MappingProxyType({s.key: s for s in self.settings})
        )
        object.__setattr__(
            self, "sections_by_key", MappingProxyType({s.key: s for s in self.sections})
        )

    def setting(self, key: str) -> Setting | None:
        return self.settings_by_key.get(key)

    def section(self, key: str) -> Section | None:
        return self.sections_by_key.get(key)

    def keys(self) -> Iterator[str]:
        """Declared keys: settings first, then sections."""
        for s in self.settings:
            yield s.key
        for sec in self.sections:
            yield sec.key

    def __contains__(self, key: object) -> bool:
        return key in self.settings_by_key or key in self.sections_by_key


def schema(description: str, *elements: Setting | Section) -> Schema:
    """Build a :class:`Schema` from settings and sections in declaration order.

    Duplicate keys, including a setting and a section sharing a key, are
    fatal, as is any element that is neither a setting nor a section.

    Examples:
        >>> from rangeconf.domain.ranges import string_range
        >>> s = schema("demo", Setting("host", "Host name", string_range("localhost")))
        >>> [k for k in s.keys()]
        ['host']
    """
    settings: list[Setting] = []
    sections: list[Section] = []
    seen: set[str] = set()
    for element in elements:
        if isinstance(element, Setting):
            settings.append(element)
        elif isinstance(element, Section):
            sections.append(element)
        else:
            report(
                FatalKind.INVALID_SCHEMA_ELEMENT,
                "schema",
                f"{description}: not a setting or section: {element!r}",
                element=repr(element),
            )
        if element.key in seen:
            report(
                FatalKind.DUPLICATE_SCHEMA_KEY,
                "schema",
                f"{description}: duplicate key {element.key!r}",
                key=element.key,
            )
        seen.add(element.key)
    return Schema(description, tuple(settings), tuple(sections))

