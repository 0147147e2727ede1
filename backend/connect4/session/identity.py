"""Identifier allocation for participants and matches.

Two policies are supported. ``uuid`` (the default) issues random UUID4
strings. ``numeric`` issues short random decimal strings, which are easier
to type into a join box; collisions with live identifiers are retried.
"""

from __future__ import annotations

import secrets
from enum import StrEnum
from typing import TYPE_CHECKING
from uuid import uuid4

from connect4.logic.exceptions import InvariantViolationError

if TYPE_CHECKING:
    from collections.abc import Container

_NUMERIC_ID_SPACE = 1_000_000
_MAX_ATTEMPTS = 100


class IdFormat(StrEnum):
    UUID = "uuid"
    NUMERIC = "numeric"


class IdGenerator:
    """Allocate identifiers that are unique among the ones currently live."""

    def __init__(self, id_format: IdFormat = IdFormat.UUID) -> None:
        self._format = id_format

    def _candidate(self) -> str:
        if self._format is IdFormat.NUMERIC:
            return str(secrets.randbelow(_NUMERIC_ID_SPACE))
        return str(uuid4())

    def new_id(self, taken: Container[str] = ()) -> str:
        """Return a fresh identifier not contained in taken."""
        for _ in range(_MAX_ATTEMPTS):
            candidate = self._candidate()
            if candidate not in taken:
                return candidate
        raise InvariantViolationError(f"could not allocate a free {self._format.value} id")
