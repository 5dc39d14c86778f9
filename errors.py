# errors.py
"""Exception hierarchy for the rotor engine.

Every validation domain gets its own error class plus an ``Enum`` of
failure kinds, so callers branch on ``err.kind`` instead of parsing
messages.  All errors derive from :class:`RotorError`; validation and
character errors are also ``ValueError`` subclasses.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Sequence, Tuple


class RotorError(Exception):
    """Base class for everything the engine raises."""


# ── validation ───────────────────────────────────────────────────


class ValidationError(RotorError, ValueError):
    """Malformed permutation, position, configuration or definition."""

    def __init__(self, message: str, kind: Enum) -> None:
        super().__init__(message)
        self.kind = kind

    @property
    def code(self) -> str:
        return self.kind.value


class PermutationErrorKind(str, Enum):
    WRONG_LENGTH = "WRONG_LENGTH"
    NON_INTEGER = "NON_INTEGER"
    OUT_OF_RANGE = "OUT_OF_RANGE"
    DUPLICATE = "DUPLICATE_VALUES"
    MISSING = "MISSING_VALUES"


class PermutationError(ValidationError):
    """Every problem found in one permutation, grouped by kind.

    ``problems`` maps a kind to the offending indices (``NON_INTEGER``,
    ``OUT_OF_RANGE``) or values (``DUPLICATE``, ``MISSING``).  For
    ``WRONG_LENGTH`` it holds the actual length.  ``kind`` is the first
    kind found, in the enum's order.
    """

    def __init__(self, problems: Dict[PermutationErrorKind, Tuple[int, ...]]) -> None:
        if not problems:
            raise ValueError("PermutationError needs at least one problem")
        self.problems = dict(problems)
        first = next(k for k in PermutationErrorKind if k in self.problems)
        super().__init__(self._describe(), first)

    @property
    def kinds(self) -> Tuple[PermutationErrorKind, ...]:
        return tuple(k for k in PermutationErrorKind if k in self.problems)

    @property
    def duplicates(self) -> Tuple[int, ...]:
        return self.problems.get(PermutationErrorKind.DUPLICATE, ())

    @property
    def missing(self) -> Tuple[int, ...]:
        return self.problems.get(PermutationErrorKind.MISSING, ())

    def _describe(self) -> str:
        parts = []
        for kind in self.kinds:
            items = self.problems[kind]
            if kind is PermutationErrorKind.WRONG_LENGTH:
                parts.append(f"must contain exactly 64 elements, got {items[0]}")
            elif kind is PermutationErrorKind.NON_INTEGER:
                parts.append(f"non-integer elements at indices {_join(items)}")
            elif kind is PermutationErrorKind.OUT_OF_RANGE:
                parts.append(f"elements out of range (0-63) at indices {_join(items)}")
            elif kind is PermutationErrorKind.DUPLICATE:
                parts.append(f"duplicate values: {_join(items)}")
            else:
                parts.append(f"missing values: {_join(items)}")
        return "Invalid rotor permutation: " + "; ".join(parts)


class PositionErrorKind(str, Enum):
    NON_INTEGER = "NON_INTEGER_POSITION"
    OUT_OF_RANGE = "POSITION_OUT_OF_RANGE"


class PositionError(ValidationError):
    def __init__(self, message: str, kind: PositionErrorKind, position: object) -> None:
        super().__init__(message, kind)
        self.position = position


class ConfigurationErrorKind(str, Enum):
    EMPTY = "NO_ROTORS_SPECIFIED"
    TOO_MANY_ROTORS = "TOO_MANY_ROTORS"
    LENGTH_MISMATCH = "POSITION_COUNT_MISMATCH"
    DUPLICATE_IDS = "DUPLICATE_ROTOR_IDS"
    INVALID_POSITION = "INVALID_START_POSITION"


class ConfigurationError(ValidationError):
    def __init__(
        self,
        message: str,
        kind: ConfigurationErrorKind,
        *,
        index: Optional[int] = None,
        rotor_ids: Sequence[str] = (),
    ) -> None:
        super().__init__(message, kind)
        self.index = index
        self.rotor_ids = tuple(rotor_ids)


class RotorDefinitionErrorKind(str, Enum):
    INVALID_ID = "INVALID_ID"
    INVALID_NAME = "INVALID_NAME"
    INVALID_TIMESTAMP = "INVALID_TIMESTAMP"


class RotorDefinitionError(ValidationError):
    pass


class TextErrorKind(str, Enum):
    INVALID_CHARACTERS = "INVALID_CHARACTERS"


class TextError(ValidationError):
    def __init__(self, message: str, characters: Sequence[str]) -> None:
        super().__init__(message, TextErrorKind.INVALID_CHARACTERS)
        self.characters = tuple(characters)


# ── characters ───────────────────────────────────────────────────


class CharacterError(RotorError, ValueError):
    """A single symbol or signal outside the alphabet."""


class InvalidCharacterError(CharacterError):
    def __init__(self, char: object) -> None:
        super().__init__(f"Character {char!r} is not in the supported charset")
        self.char = char


class IndexOutOfRangeError(CharacterError):
    def __init__(self, index: object, size: int) -> None:
        super().__init__(f"Index {index!r} is out of range (0-{size - 1})")
        self.index = index


# ── structure ────────────────────────────────────────────────────


class StructuralError(RotorError):
    """The rotor stack itself cannot be built."""


class UnknownRotorIdError(StructuralError, KeyError):
    def __init__(self, rotor_id: str) -> None:
        super().__init__(f"Rotor with ID {rotor_id!r} not found")
        self.rotor_id = rotor_id

    def __str__(self) -> str:
        return self.args[0]


class NoActiveRotorsError(StructuralError):
    def __init__(self) -> None:
        super().__init__("Cannot encrypt or decrypt with no rotors")


class RotorConsistencyError(RotorError, RuntimeError):
    """Internal invariant broken; a validated rotor can never cause this."""


def _join(items: Sequence[object]) -> str:
    return ", ".join(str(i) for i in items)
