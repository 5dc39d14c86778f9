# validation.py
"""
Standalone checks for permutations, positions, configurations and
rotor definitions.  Each one returns ``None`` on success and raises a
:class:`errors.ValidationError` subclass otherwise, so callers can run
them before calling :func:`codec.encode` / :func:`codec.decode`.
"""
from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import TYPE_CHECKING, Dict, List, Sequence, Tuple

from charset import (
    CHARSET_SIZE,
    MAX_ACTIVE_ROTORS,
    ROTOR_POSITION_MAX,
    ROTOR_POSITION_MIN,
)
from debug import Debug
from errors import (
    ConfigurationError,
    ConfigurationErrorKind,
    PermutationError,
    PermutationErrorKind,
    PositionError,
    PositionErrorKind,
    RotorDefinitionError,
    RotorDefinitionErrorKind,
    TextError,
)
from keyboard import is_valid_character

if TYPE_CHECKING:
    from rotor import RotorDefinition

debug = Debug()


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# ── permutations ─────────────────────────────────────────────────


def validate_permutation(permutation: Sequence[int]) -> None:
    """Prove *permutation* is a bijection over 0-63.

    A wrong length is reported on its own.  Otherwise every offending
    index and value is collected into one PermutationError.
    """
    if len(permutation) != CHARSET_SIZE:
        raise PermutationError({PermutationErrorKind.WRONG_LENGTH: (len(permutation),)})

    non_integer: List[int] = []
    out_of_range: List[int] = []
    for i, value in enumerate(permutation):
        if not _is_int(value):
            non_integer.append(i)
        elif not 0 <= value < CHARSET_SIZE:
            out_of_range.append(i)

    counts = Counter(v for v in permutation if _is_int(v) and 0 <= v < CHARSET_SIZE)
    duplicates = sorted(v for v, n in counts.items() if n > 1)
    missing = [v for v in range(CHARSET_SIZE) if v not in counts]

    problems: Dict[PermutationErrorKind, Tuple[int, ...]] = {}
    if non_integer:
        problems[PermutationErrorKind.NON_INTEGER] = tuple(non_integer)
    if out_of_range:
        problems[PermutationErrorKind.OUT_OF_RANGE] = tuple(out_of_range)
    if duplicates:
        problems[PermutationErrorKind.DUPLICATE] = tuple(duplicates)
    if missing:
        problems[PermutationErrorKind.MISSING] = tuple(missing)

    if problems:
        err = PermutationError(problems)
        debug.log("validation", str(err))
        raise err


def is_valid_permutation(permutation: Sequence[int]) -> bool:
    try:
        validate_permutation(permutation)
    except PermutationError:
        return False
    return True


# ── positions ────────────────────────────────────────────────────


def validate_position(position: int) -> None:
    if not _is_int(position):
        raise PositionError(
            f"Rotor position must be an integer, got {position!r}",
            PositionErrorKind.NON_INTEGER,
            position,
        )
    if not ROTOR_POSITION_MIN <= position <= ROTOR_POSITION_MAX:
        raise PositionError(
            f"Rotor position must be between {ROTOR_POSITION_MIN} and "
            f"{ROTOR_POSITION_MAX}, got {position}",
            PositionErrorKind.OUT_OF_RANGE,
            position,
        )


def position_to_index(position: int) -> int:
    """User-facing position (1-64) → internal offset (0-63)."""
    validate_position(position)
    return position - 1


def index_to_position(index: int) -> int:
    """Internal offset (0-63) → user-facing position (1-64)."""
    if not _is_int(index) or not 0 <= index < CHARSET_SIZE:
        raise PositionError(
            f"Array index must be between 0 and {CHARSET_SIZE - 1}, got {index!r}",
            PositionErrorKind.OUT_OF_RANGE,
            index,
        )
    return index + 1


# ── configurations ───────────────────────────────────────────────


def validate_configuration(rotor_ids: Sequence[str], positions: Sequence[int]) -> None:
    count = len(rotor_ids)
    if count == 0:
        raise ConfigurationError(
            "Encryption configuration must specify at least one rotor",
            ConfigurationErrorKind.EMPTY,
        )
    if count > MAX_ACTIVE_ROTORS:
        raise ConfigurationError(
            f"Encryption configuration cannot use more than {MAX_ACTIVE_ROTORS} "
            f"rotors, got {count}",
            ConfigurationErrorKind.TOO_MANY_ROTORS,
        )
    if len(positions) != count:
        raise ConfigurationError(
            f"Number of start positions ({len(positions)}) must match number "
            f"of rotors ({count})",
            ConfigurationErrorKind.LENGTH_MISMATCH,
        )

    repeated = [rid for rid, n in Counter(rotor_ids).items() if n > 1]
    if repeated:
        raise ConfigurationError(
            "Encryption configuration cannot use the same rotor multiple times: "
            + ", ".join(repr(r) for r in repeated),
            ConfigurationErrorKind.DUPLICATE_IDS,
            rotor_ids=repeated,
        )

    for index, position in enumerate(positions):
        try:
            validate_position(position)
        except PositionError as exc:
            raise ConfigurationError(
                f"Invalid start position at index {index}: {exc}",
                ConfigurationErrorKind.INVALID_POSITION,
                index=index,
            ) from exc


# ── rotor definitions ────────────────────────────────────────────


def validate_rotor_definition(definition: "RotorDefinition") -> None:
    rotor_id = definition.id
    if not isinstance(rotor_id, str) or not rotor_id.strip():
        raise RotorDefinitionError(
            "Rotor definition must have a non-empty string ID",
            RotorDefinitionErrorKind.INVALID_ID,
        )
    name = definition.name
    if not isinstance(name, str) or not name.strip():
        raise RotorDefinitionError(
            "Rotor definition must have a non-empty string name",
            RotorDefinitionErrorKind.INVALID_NAME,
        )
    for label in ("created_at", "updated_at"):
        if not isinstance(getattr(definition, label), datetime):
            raise RotorDefinitionError(
                f"Rotor definition must have a valid {label} timestamp",
                RotorDefinitionErrorKind.INVALID_TIMESTAMP,
            )
    validate_permutation(definition.permutation)


# ── text ─────────────────────────────────────────────────────────


def validate_encryptable_text(text: str) -> None:
    """Strict pre-check: every character must be in the alphabet."""
    invalid: List[str] = []
    for ch in text:
        if not is_valid_character(ch) and ch not in invalid:
            invalid.append(ch)
    if invalid:
        raise TextError(
            "Text contains characters that cannot be encrypted: "
            + ", ".join(repr(c) for c in invalid),
            invalid,
        )
