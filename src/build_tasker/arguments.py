"""``Name=Value`` argument codec for task properties."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from build_tasker.properties import declared_properties, find_property

logger = logging.getLogger(__name__)


def serialize_arguments(task: object) -> list[str]:
    """Render every writable declared property of ``task`` as ``Name=Value``.

    Values are not escaped; embedded quotes or spaces pass through as-is.
    """

    tokens: list[str] = []
    for name, prop in declared_properties(type(task)).items():
        if not prop.writable:
            continue
        tokens.append(f"{name}={prop.format_value(getattr(task, name))}")
    return tokens


def to_command_line(tokens: Iterable[str]) -> str:
    """Join tokens into one command-line string, each double-quoted as a whole."""

    return "".join(f' "{token}"' for token in tokens)


def parse_argument(raw: str) -> tuple[str, str] | None:
    """Split one raw argument into ``(name, value)``, or ``None`` when it has no ``=``."""

    trimmed = raw
    if len(trimmed) >= 2 and trimmed.startswith('"') and trimmed.endswith('"'):  # noqa: PLR2004
        trimmed = trimmed[1:-1]
    name, separator, value = trimmed.partition("=")
    if not separator:
        return None
    return name, value


def apply_arguments(task: object, args: Iterable[str]) -> list[str]:
    """Assign recognized ``Name=Value`` arguments to ``task`` properties.

    Malformed tokens, unknown names and read-only properties are skipped.
    Conversion failures raise ``PropertyValueError``.
    """

    applied: list[str] = []
    for raw in args:
        parsed = parse_argument(raw)
        if parsed is None:
            logger.debug("Skipping argument without '=': %r", raw)
            continue
        name, value = parsed
        prop = find_property(type(task), name)
        if prop is None:
            logger.debug("Skipping unknown property %r", name)
            continue
        if not prop.writable:
            logger.debug("Skipping read-only property %r", name)
            continue
        setattr(task, name, value)
        applied.append(name)
    return applied
