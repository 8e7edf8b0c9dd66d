"""Ranges — the combinator algebra describing admissible values.

A range pairs two operations over a value found at some *path*:

* ``complete(path, value)`` validates a raw value and fills in defaults.
  It returns the completed value, or a :class:`RangeError` naming the range
  that rejected the value and where.  It never raises for bad data.
* ``fold(path, f, init, value)`` walks the scalar leaves of a value,
  calling ``f(range, path, acc, leaf)`` left to right and threading the
  accumulator.  The value may still be raw; it is re-completed first.

Composite ranges (sequences, tuples, maps, alternatives) are built from
other ranges, so a schema slot can describe arbitrarily nested data.

Examples:
    >>> port = integer_between_range(1, 65535, 8080)
    >>> port.complete(("port",), None)
    8080
    >>> port.complete(("port",), 0).path
    ('port',)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Collection, Mapping, Sequence, Set
from dataclasses import dataclass
from typing import Any

from rangeconf.domain.errors import FatalKind, report

Path = tuple[Any, ...]
FoldFn = Callable[["Range", Path, Any, Any], Any]


# ---------------------------------------------------------------------------
# Errors and paths
# ---------------------------------------------------------------------------


def format_path(path: Sequence[Any]) -> str:
    """Render a path for humans.

    Examples:
        >>> format_path(("db", "replicas", 0, "host"))
        'db.replicas[0].host'
        >>> format_path(())
        '<root>'
    """
    out = ""
    for part in path:
        if isinstance(part, int) and not isinstance(part, bool):
            out += f"[{part}]"
        elif out:
            out += f".{part}"
        else:
            out = str(part)
    return out or "<root>"


@dataclass(frozen=True)
class RangeError:
    """A validation failure. Returned, never raised.

    Attributes:
        range: The range that rejected the value, or None when the key
            itself is unknown to the schema.
        path: Location of the rejected value.
        value: The offending raw value.
    """

    range: Range | None
    path: Path
    value: Any

    def describe(self) -> str:
        where = format_path(self.path)
        if self.range is None:
            return f"unexpected key at {where} (value {self.value!r})"
        return f"value {self.value!r} at {where} is not {self.range.description}"


def is_range_error(value: Any) -> bool:
    return isinstance(value, RangeError)


def _is_sequence(value: Any) -> bool:
    if isinstance(value, (str, bytes, bytearray)):
        return False
    return isinstance(value, (Sequence, Set))


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


class Range(ABC):
    """Abstract range. Subclass to define custom ranges."""

    def __init__(self, description: str) -> None:
        self.description = description

    @abstractmethod
    def complete(self, path: Path, value: Any) -> Any:
        """Return the completed value or a :class:`RangeError`."""

    @abstractmethod
    def fold(self, path: Path, f: FoldFn, init: Any, value: Any) -> Any:
        """Fold ``f`` over the scalar leaves of ``value``."""

    def error(self, path: Path, value: Any) -> RangeError:
        return RangeError(self, tuple(path), value)

    def completed(self, path: Path, value: Any) -> Any:
        """Complete ``value``, escalating a RangeError to the fatal tier.

        Folding is only defined over values that complete; a failure here
        is a bug in the caller, not bad data.
        """
        result = self.complete(path, value)
        if isinstance(result, RangeError):
            report(
                FatalKind.FOLD_PRECONDITION,
                "fold",
                f"cannot fold over an invalid value: {result.describe()}",
                path=list(result.path),
                value=result.value,
            )
        return result

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.description!r}>"


class ScalarRange(Range):
    """Range over a single value, defined by a completer function.

    The completer takes ``(path, value)`` and returns the completed value
    or a :class:`RangeError`.
    """

    def __init__(self, description: str, completer: Callable[[Path, Any], Any]) -> None:
        super().__init__(description)
        self._completer = completer

    def complete(self, path: Path, value: Any) -> Any:
        return self._completer(tuple(path), value)

    def fold(self, path: Path, f: FoldFn, init: Any, value: Any) -> Any:
        return f(self, tuple(path), init, self.completed(path, value))


# ---------------------------------------------------------------------------
# Scalar ranges
# ---------------------------------------------------------------------------


def any_value_range(default: Any = None) -> Range:
    """Accept anything; ``None`` becomes ``default``."""
    return ScalarRange("any value", lambda path, value: default if value is None else value)


def non_nil_range(description: str = "a non-nil value") -> Range:
    def complete(path: Path, value: Any) -> Any:
        if value is None:
            return RangeError(rng, path, value)
        return value

    rng = ScalarRange(description, complete)
    return rng


def predicate_range(
    description: str,
    pred: Callable[[Any], bool],
    default: Any = None,
) -> Range:
    """Accept values satisfying ``pred``; ``None`` becomes ``default``."""

    def complete(path: Path, value: Any) -> Any:
        if value is None:
            return default
        if pred(value):
            return value
        return RangeError(rng, path, value)

    rng = ScalarRange(description, complete)
    return rng


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def boolean_range(default: bool | None = False) -> Range:
    return predicate_range("boolean", lambda v: isinstance(v, bool), default)


def string_range(default: str | None = "") -> Range:
    return predicate_range("string", lambda v: isinstance(v, str), default)


def nonempty_string_range(default: str | None = None) -> Range:
    return predicate_range(
        "non-empty string", lambda v: isinstance(v, str) and len(v) > 0, default
    )


def max_string_length_range(max_length: int, default: str | None = None) -> Range:
    return predicate_range(
        f"string of at most {max_length} characters",
        lambda v: isinstance(v, str) and len(v) <= max_length,
        default,
    )


def integer_range(default: int | None = 0) -> Range:
    return predicate_range("integer", _is_int, default)


def natural_range(default: int | None = 0) -> Range:
    return predicate_range("natural number", lambda v: _is_int(v) and v >= 0, default)


def integer_between_range(minimum: int, maximum: int, default: int | None = None) -> Range:
    """Integers in the closed interval ``[minimum, maximum]``."""
    return predicate_range(
        f"integer between {minimum} and {maximum}",
        lambda v: _is_int(v) and minimum <= v <= maximum,
        default,
    )


def number_range(default: float | None = 0) -> Range:
    return predicate_range(
        "number",
        lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
        default,
    )


def one_of_range(
    values: Collection[Any],
    default: Any = None,
    *,
    compare: Callable[[Any, Any], bool] | None = None,
) -> Range:
    """Accept members of ``values``.

    With ``compare``, membership is ``any(compare(value, v) for v in values)``.
    """
    members = tuple(values)

    def complete(path: Path, value: Any) -> Any:
        if value is None:
            return default
        if compare is None:
            found = value in members
        else:
            found = any(compare(value, m) for m in members)
        if found:
            return value
        return RangeError(rng, path, value)

    rng = ScalarRange("one of " + ", ".join(repr(m) for m in members), complete)
    return rng


# ---------------------------------------------------------------------------
# Wrapping ranges
# ---------------------------------------------------------------------------


class OptionalRange(Range):
    """``None`` stays ``None``; anything else goes to the wrapped range."""

    def __init__(self, inner: Range) -> None:
        super().__init__(f"optional {inner.description}")
        self.inner = inner

    def complete(self, path: Path, value: Any) -> Any:
        if value is None:
            return None
        return self.inner.complete(path, value)

    def fold(self, path: Path, f: FoldFn, init: Any, value: Any) -> Any:
        if value is None:
            return init
        return self.inner.fold(path, f, init, value)


class DefaultRange(Range):
    """Replace ``None`` with a default before delegating to the wrapped range."""

    def __init__(self, inner: Range, default: Any) -> None:
        super().__init__(f"{inner.description} (default {default!r})")
        self.inner = inner
        self.default = default

    def _fill(self, value: Any) -> Any:
        return self.default if value is None else value

    def complete(self, path: Path, value: Any) -> Any:
        return self.inner.complete(path, self._fill(value))

    def fold(self, path: Path, f: FoldFn, init: Any, value: Any) -> Any:
        return self.inner.fold(path, f, init, self._fill(value))


class AnyOfRange(Range):
    """First alternative that accepts the value wins."""

    def __init__(self, *ranges: Range) -> None:
        super().__init__("any of (" + "; ".join(r.description for r in ranges) + ")")
        self.ranges = ranges

    def complete(self, path: Path, value: Any) -> Any:
        for rng in self.ranges:
            result = rng.complete(path, value)
            if not isinstance(result, RangeError):
                return result
        return self.error(path, value)

    def fold(self, path: Path, f: FoldFn, init: Any, value: Any) -> Any:
        self.completed(path, value)
        for rng in self.ranges:
            if not isinstance(rng.complete(path, value), RangeError):
                return rng.fold(path, f, init, value)
        return init


class RangeMap(Range):
    """Post-process successful completions of another range with ``fn``."""

    def __init__(
        self,
        description: str,
        inner: Range,
        fn: Callable[..., Any],
        *args: Any,
    ) -> None:
        super().__init__(description)
        self.inner = inner
        self.fn = fn
        self.args = args

    def complete(self, path: Path, value: Any) -> Any:
        result = self.inner.complete(path, value)
        if isinstance(result, RangeError):
            return result
        return self.fn(result, *self.args)

    def fold(self, path: Path, f: FoldFn, init: Any, value: Any) -> Any:
        return f(self, tuple(path), init, self.completed(path, value))


# ---------------------------------------------------------------------------
# Collection ranges
# ---------------------------------------------------------------------------


class SequenceOfRange(Range):
    """Homogeneous sequence; the first bad element aborts completion."""

    def __init__(self, inner: Range, description: str | None = None) -> None:
        super().__init__(description or f"sequence of {inner.description}")
        self.inner = inner

    def _complete_items(self, path: Path, value: Any) -> list[Any] | RangeError:
        if value is None:
            return []
        if not _is_sequence(value):
            return self.error(path, value)
        out: list[Any] = []
        for index, item in enumerate(value):
            result = self.inner.complete((*path, index), item)
            if isinstance(result, RangeError):
                return result
            out.append(result)
        return out

    def complete(self, path: Path, value: Any) -> Any:
        return self._complete_items(tuple(path), value)

    def fold(self, path: Path, f: FoldFn, init: Any, value: Any) -> Any:
        self.completed(path, value)
        acc = init
        for index, item in enumerate(value or ()):
            acc = self.inner.fold((*path, index), f, acc, item)
        return acc


class SetOfRange(SequenceOfRange):
    """Like :class:`SequenceOfRange`, collapsed into a frozenset.

    Completed elements must be hashable; a list or map element is rejected.
    """

    def __init__(self, inner: Range, description: str | None = None) -> None:
        super().__init__(inner, description or f"set of {inner.description}")

    def complete(self, path: Path, value: Any) -> Any:
        result = self._complete_items(tuple(path), value)
        if isinstance(result, RangeError):
            return result
        try:
            return frozenset(result)
        except TypeError:
            return self.error(path, value)


class TupleOfRange(Range):
    """Fixed positions, each with its own range.

    Positions are paired with ranges in order; surplus elements or ranges
    are not paired.  ``None`` completes every position from ``None``.
    Sets are rejected, having no positions.
    """

    def __init__(self, *ranges: Range) -> None:
        super().__init__("tuple of (" + ", ".join(r.description for r in ranges) + ")")
        self.ranges = ranges

    def _items(self, value: Any) -> Sequence[Any]:
        if value is None:
            return (None,) * len(self.ranges)
        return list(value)

    def complete(self, path: Path, value: Any) -> Any:
        path = tuple(path)
        if value is not None and (not _is_sequence(value) or isinstance(value, Set)):
            return self.error(path, value)
        out: list[Any] = []
        for index, (rng, item) in enumerate(zip(self.ranges, self._items(value))):
            result = rng.complete((*path, index), item)
            if isinstance(result, RangeError):
                return result
            out.append(result)
        return tuple(out)

    def fold(self, path: Path, f: FoldFn, init: Any, value: Any) -> Any:
        self.completed(path, value)
        acc = init
        for index, (rng, item) in enumerate(zip(self.ranges, self._items(value))):
            acc = rng.fold((*path, index), f, acc, item)
        return acc


class MapOfRange(Range):
    """Homogeneous mapping; keys and values validated at ``path + (key,)``."""

    def __init__(self, key_range: Range, value_range: Range) -> None:
        super().__init__(f"map of {key_range.description} to {value_range.description}")
        self.key_range = key_range
        self.value_range = value_range

    def complete(self, path: Path, value: Any) -> Any:
        path = tuple(path)
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            return self.error(path, value)
        out: dict[Any, Any] = {}
        for key, item in value.items():
            slot = (*path, key)
            completed_key = self.key_range.complete(slot, key)
            if isinstance(completed_key, RangeError):
                return completed_key
            completed_item = self.value_range.complete(slot, item)
            if isinstance(completed_item, RangeError):
                return completed_item
            out[completed_key] = completed_item
        return out

    def fold(self, path: Path, f: FoldFn, init: Any, value: Any) -> Any:
        self.completed(path, value)
        acc = init
        for key, item in (value or {}).items():
            slot = (*path, key)
            acc = self.key_range.fold(slot, f, acc, key)
            acc = self.value_range.fold(slot, f, acc, item)
        return acc


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------


def optional_range(inner: Range) -> Range:
    return OptionalRange(inner)


def optional_default_range(inner: Range, default: Any) -> Range:
    """``None`` is replaced by ``default``, which must itself satisfy ``inner``."""
    return DefaultRange(inner, default)


def any_of_range(*ranges: Range) -> Range:
    return AnyOfRange(*ranges)


def sequence_of_range(inner: Range) -> Range:
    return SequenceOfRange(inner)


def set_of_range(inner: Range) -> Range:
    return SetOfRange(inner)


def some_of_range(values: Collection[Any], default: Collection[Any] = ()) -> Range:
    """A set whose members are drawn from ``values``."""
    members = tuple(values)
    rng = SetOfRange(
        one_of_range(members),
        "set of " + ", ".join(repr(m) for m in members),
    )
    if default:
        return DefaultRange(rng, list(default))
    return rng


def tuple_of_range(*ranges: Range) -> Range:
    return TupleOfRange(*ranges)


def map_of_range(key_range: Range, value_range: Range) -> Range:
    return MapOfRange(key_range, value_range)


def range_map(description: str, inner: Range, fn: Callable[..., Any], *args: Any) -> Range:
    """Apply ``fn(completed, *args)`` to values accepted by ``inner``."""
    return RangeMap(description, inner, fn, *args)
