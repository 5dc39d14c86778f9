# machine.py  ─────────────────────────────────────────────────────
from __future__ import annotations

from typing import Mapping, Sequence, Tuple

from charset import CHARSET_SIZE
from debug import Debug
from errors import NoActiveRotorsError, UnknownRotorIdError
from rotor import RotorDefinition, RotorState, create_active_rotor

debug = Debug()


def step_cascade(rotors: Sequence[RotorState]) -> Tuple[RotorState, ...]:
    """Step the rightmost rotor and carry leftwards.

    A rotor's left neighbour steps whenever the rotor's *cumulative*
    step count lands on a multiple of 64; the carry stops at the first
    rotor whose count is not.
    """
    if not rotors:
        raise NoActiveRotorsError()

    stepped = list(rotors)
    i = len(stepped) - 1
    stepped[i] = stepped[i].step()
    while i > 0 and stepped[i].step_count % CHARSET_SIZE == 0:
        stepped[i - 1] = stepped[i - 1].step()
        i -= 1
    return tuple(stepped)


def build_active_rotors(
    rotor_ids: Sequence[str],
    start_positions: Sequence[int],
    lookup: Mapping[str, RotorDefinition],
) -> Tuple[RotorState, ...]:
    """Fresh states for one call, in configured (left-to-right) order."""
    states = []
    for rotor_id, position in zip(rotor_ids, start_positions):
        try:
            definition = lookup[rotor_id]
        except KeyError:
            raise UnknownRotorIdError(rotor_id) from None
        states.append(create_active_rotor(definition, position))
    return tuple(states)


class RotorMachine:
    """An ordered rotor stack for one encrypt or decrypt run."""

    def __init__(self, rotors: Sequence[RotorState]) -> None:
        if not rotors:
            raise NoActiveRotorsError()
        self.rotors: Tuple[RotorState, ...] = tuple(rotors)

    @classmethod
    def from_lookup(
        cls,
        rotor_ids: Sequence[str],
        start_positions: Sequence[int],
        lookup: Mapping[str, RotorDefinition],
    ) -> "RotorMachine":
        return cls(build_active_rotors(rotor_ids, start_positions, lookup))

    # ── state ───────────────────────────────────────────────────

    @property
    def positions(self) -> Tuple[int, ...]:
        return tuple(r.position for r in self.rotors)

    @property
    def step_counts(self) -> Tuple[int, ...]:
        return tuple(r.step_count for r in self.rotors)

    def _step_rotors(self) -> None:
        self.rotors = step_cascade(self.rotors)
        debug.log("stepping", f"Rotor pos {list(self.positions)}")

    # ── one symbol  ─────────────────────────────────────────────

    def encipher(self, letter: str) -> str:
        """Forward through every rotor left to right, then step."""
        signal = letter
        for rotor in self.rotors:
            signal = rotor.encrypt_char(signal)
        self._step_rotors()
        debug.log("encipher", f"{letter!r} -> {signal!r}")
        return signal

    def decipher(self, letter: str) -> str:
        """Inverse through every rotor right to left, then step.

        The inverse runs at the same positions :meth:`encipher` used for
        this character index, so both directions walk one state sequence.
        """
        signal = letter
        for rotor in reversed(self.rotors):
            signal = rotor.decrypt_char(signal)
        self._step_rotors()
        debug.log("decipher", f"{letter!r} -> {signal!r}")
        return signal

    def __repr__(self) -> str:
        return f"<RotorMachine positions={list(self.positions)}>"
