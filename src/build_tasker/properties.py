"""Declared configuration properties of a task.

A task lists its configuration as ``TaskProperty`` class attributes::

    class Pack(Tasker):
        Count = TaskProperty(int, default=1)
        Label = TaskProperty(str)

The class-level table built from these declarations is what the argument
codec reads and writes; nothing is discovered from type annotations.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from build_tasker.errors import PropertyValueError

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})
_TABLE_ATTRIBUTE = "__task_properties__"


class TaskProperty:
    """Typed read/write configuration field with string coercion.

    Assigning a ``str`` to a non-``str`` property converts it with ``parse``
    (or the built-in conversion for ``int``, ``float``, ``bool`` and ``Path``).
    Properties declared with ``writable=False`` still accept assignments from
    task code but are never serialized or set from command-line arguments.
    An empty string assigned to a non-``str`` property without a custom
    ``parse`` stores ``None``, matching how ``None`` is formatted.
    """

    def __init__(  # noqa: PLR0913
        self,
        kind: type = str,
        *,
        default: Any = None,
        parse: Callable[[str], Any] | None = None,
        format: Callable[[Any], str] | None = None,  # noqa: A002
        writable: bool = True,
        doc: str = "",
    ) -> None:
        self.kind = kind
        self.default = default
        self.writable = writable
        self.doc = doc
        self.name = ""
        self._parse = parse
        self._format = format

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: object | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return instance.__dict__.get(self.name, self.default)

    def __set__(self, instance: object, value: Any) -> None:
        if isinstance(value, str):
            value = self.coerce(value)
        instance.__dict__[self.name] = value

    def __repr__(self) -> str:
        return f"TaskProperty(name={self.name!r}, kind={self.kind.__name__})"

    @property
    def type_name(self) -> str:
        return getattr(self.kind, "__name__", str(self.kind))

    def coerce(self, raw: str) -> Any:
        """Convert a command-line string to the declared type."""

        if self._parse is not None:
            try:
                return self._parse(raw)
            except (TypeError, ValueError) as error:
                raise PropertyValueError(self.name, raw, str(error)) from error

        if self.kind is str:
            return raw
        if raw == "":
            return None
        if self.kind is bool:
            return _parse_bool(self.name, raw)
        try:
            return self.kind(raw)
        except (TypeError, ValueError) as error:
            raise PropertyValueError(self.name, raw, str(error)) from error

    def format_value(self, value: Any) -> str:
        """Render a value for a ``Name=Value`` token."""

        if self._format is not None:
            return self._format(value)
        if value is None:
            return ""
        return str(value)


def declared_properties(cls: type) -> dict[str, TaskProperty]:
    """Return the ordered ``name -> TaskProperty`` table of a class.

    Base class declarations come first; a subclass redeclaring a name keeps
    the base position but replaces the descriptor.
    """

    cached = cls.__dict__.get(_TABLE_ATTRIBUTE)
    if cached is not None:
        return cached

    table: dict[str, TaskProperty] = {}
    for klass in reversed(cls.__mro__):
        for name, value in vars(klass).items():
            if isinstance(value, TaskProperty):
                table[name] = value
    setattr(cls, _TABLE_ATTRIBUTE, table)
    return table


def find_property(cls: type, name: str) -> TaskProperty | None:
    """Look up a declared property by its exact name."""

    return declared_properties(cls).get(name)


def _parse_bool(name: str, raw: str) -> bool:
    normalized = raw.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise PropertyValueError(name, raw, "expected a boolean")
