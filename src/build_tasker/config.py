"""Runtime configuration for task execution."""

from __future__ import annotations

import codecs
import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True)
class Settings:
    """Execution settings shared by the host and command-line entry points."""

    delegation_enabled: bool = True
    wrapped_executable: Path | None = None
    propagate_exit_code: bool = False
    child_encoding: str = "utf-8"

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment with defaults matching plain host runs."""

        wrapped = os.getenv("BUILD_TASKER_WRAPPED_EXECUTABLE", "").strip()
        return cls(
            delegation_enabled=_env_bool("BUILD_TASKER_DELEGATION", default=True),
            wrapped_executable=Path(wrapped) if wrapped else None,
            propagate_exit_code=_env_bool("BUILD_TASKER_PROPAGATE_EXIT_CODE", default=False),
            child_encoding=os.getenv("BUILD_TASKER_CHILD_ENCODING", "utf-8").strip(),
        )

    def validate(self) -> None:
        """Raise configuration error for unusable values."""

        if not self.child_encoding:
            raise ValueError("BUILD_TASKER_CHILD_ENCODING must not be empty.")
        try:
            codecs.lookup(self.child_encoding)
        except LookupError as error:
            raise ValueError(
                f"Unknown BUILD_TASKER_CHILD_ENCODING: {self.child_encoding!r}",
            ) from error
        if self.wrapped_executable is not None and not self.wrapped_executable.is_file():
            raise ValueError(
                "BUILD_TASKER_WRAPPED_EXECUTABLE does not point to a file: "
                f"{str(self.wrapped_executable)!r}",
            )


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")
