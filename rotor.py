# rotor.py
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Sequence, Tuple

from charset import CHARSET_SIZE, ROTOR_POSITION_MAX, ROTOR_POSITION_MIN
from debug import Debug
from errors import RotorConsistencyError
from keyboard import char_to_index, index_to_char
from validation import validate_position, validate_rotor_definition

debug = Debug()

_UNSET = object()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class RotorDefinition:
    """Static wiring of one rotor plus its metadata.

    Validated on construction and never mutated afterwards; use
    :meth:`revise` to obtain an edited copy.
    """

    id: str
    name: str
    permutation: Tuple[int, ...]
    description: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: Optional[datetime] = None
    _inverse: Tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.updated_at is None:
            object.__setattr__(self, "updated_at", self.created_at)
        object.__setattr__(self, "permutation", tuple(self.permutation))
        validate_rotor_definition(self)

        # integer lookup table for the reverse path
        inverse = [-1] * CHARSET_SIZE
        for i, value in enumerate(self.permutation):
            inverse[value] = i
        object.__setattr__(self, "_inverse", tuple(inverse))

    @property
    def inverse(self) -> Tuple[int, ...]:
        return self._inverse

    def revise(
        self,
        *,
        name: Optional[str] = None,
        description: Any = _UNSET,
        permutation: Optional[Sequence[int]] = None,
    ) -> "RotorDefinition":
        """Return an edited copy with the same id and a fresh ``updated_at``.

        Pass ``description=None`` to clear the description; leave it out to
        keep the current one.
        """
        changes = {"updated_at": utcnow()}
        if name is not None:
            changes["name"] = name.strip()
        if description is not _UNSET:
            changes["description"] = description.strip() if description is not None else None
        if permutation is not None:
            changes["permutation"] = tuple(permutation)
        return dataclasses.replace(self, **changes)

    def __repr__(self) -> str:
        return f"<RotorDefinition id={self.id!r} name={self.name!r}>"


@dataclass(frozen=True)
class RotorState:
    """A definition at a given position, for the span of one call."""

    definition: RotorDefinition
    position: int = ROTOR_POSITION_MIN
    step_count: int = 0

    def __post_init__(self) -> None:
        validate_position(self.position)

    @property
    def offset(self) -> int:
        return self.position - 1

    # ── stepping --------------------------------------------------
    def step(self) -> "RotorState":
        """Advance one position (64 wraps to 1); returns a new state."""
        position = ROTOR_POSITION_MIN if self.position == ROTOR_POSITION_MAX else self.position + 1
        stepped = RotorState(self.definition, position, self.step_count + 1)
        debug.log(
            "stepping",
            f"{self.definition.id} pos {self.position}->{position} steps={stepped.step_count}",
        )
        return stepped

    # ── signal paths ---------------------------------------------
    def forward(self, sig: int) -> int:
        shift = (sig + self.offset) % CHARSET_SIZE
        mapped = self.definition.permutation[shift]
        return (mapped - self.offset + CHARSET_SIZE) % CHARSET_SIZE

    def backward(self, sig: int) -> int:
        shift = (sig + self.offset) % CHARSET_SIZE
        mapped = self.definition.inverse[shift]
        if mapped < 0:
            raise RotorConsistencyError(
                f"Invalid rotor permutation: output {shift} not found in {self.definition.id!r}"
            )
        return (mapped - self.offset + CHARSET_SIZE) % CHARSET_SIZE

    def encrypt_char(self, char: str) -> str:
        out = index_to_char(self.forward(char_to_index(char)))
        debug.log("rotor", f"{self.definition.id}@{self.position} {char!r}->{out!r}")
        return out

    def decrypt_char(self, char: str) -> str:
        out = index_to_char(self.backward(char_to_index(char)))
        debug.log("rotor", f"{self.definition.id}@{self.position} {char!r}<-{out!r}")
        return out

    # ── niceties --------------------------------------------------
    def __repr__(self) -> str:
        return f"<RotorState {self.definition.id} pos={self.position} steps={self.step_count}>"


def create_active_rotor(definition: RotorDefinition, start_position: int) -> RotorState:
    return RotorState(definition, start_position, 0)


def forward_transform(char: str, definition: RotorDefinition, position: int) -> str:
    """Map *char* through *definition* turned to *position* (encode direction)."""
    return RotorState(definition, position).encrypt_char(char)


def inverse_transform(char: str, definition: RotorDefinition, position: int) -> str:
    """Undo :func:`forward_transform` for the same rotor and position."""
    return RotorState(definition, position).decrypt_char(char)
