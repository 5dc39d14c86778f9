# codec.py
"""
Whole-message encode / decode on top of :class:`machine.RotorMachine`.

Characters outside the alphabet are skipped and reported as warnings;
only a broken configuration or rotor lookup raises.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Mapping, Sequence, Tuple

from debug import Debug
from keyboard import is_valid_character
from machine import RotorMachine
from rotor import RotorDefinition
from validation import validate_configuration

debug = Debug()


@dataclass(frozen=True)
class EncryptionConfiguration:
    """Ordered rotor ids and their matching start positions."""

    rotor_ids: Tuple[str, ...]
    start_positions: Tuple[int, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "rotor_ids", tuple(self.rotor_ids))
        object.__setattr__(self, "start_positions", tuple(self.start_positions))

    def validate(self) -> None:
        validate_configuration(self.rotor_ids, self.start_positions)


@dataclass(frozen=True)
class CryptographyResult:
    result: str
    final_positions: Tuple[int, ...]
    characters_processed: int
    warnings: Tuple[str, ...] = ()


def _run(
    text: str,
    configuration: EncryptionConfiguration,
    lookup: Mapping[str, RotorDefinition],
    pick: Callable[[RotorMachine], Callable[[str], str]],
) -> CryptographyResult:
    configuration.validate()
    machine = RotorMachine.from_lookup(
        configuration.rotor_ids, configuration.start_positions, lookup
    )
    step = pick(machine)

    out: List[str] = []
    warnings: List[str] = []
    for ch in text:
        if is_valid_character(ch):
            out.append(step(ch))
        else:
            note = f"Skipped invalid character: {ch!r}"
            warnings.append(note)
            debug.log("codec", note)

    return CryptographyResult(
        result="".join(out),
        final_positions=machine.positions,
        characters_processed=len(text),
        warnings=tuple(warnings),
    )


def encode(
    text: str,
    configuration: EncryptionConfiguration,
    lookup: Mapping[str, RotorDefinition],
) -> CryptographyResult:
    """Encrypt *text* with the rotors *configuration* names."""
    return _run(text, configuration, lookup, lambda m: m.encipher)


def decode(
    text: str,
    configuration: EncryptionConfiguration,
    lookup: Mapping[str, RotorDefinition],
) -> CryptographyResult:
    """Decrypt *text*; *configuration* must match the one used to encrypt."""
    return _run(text, configuration, lookup, lambda m: m.decipher)


def make_configuration(
    rotor_ids: Sequence[str], start_positions: Sequence[int]
) -> EncryptionConfiguration:
    """Build and validate a configuration in one go."""
    configuration = EncryptionConfiguration(tuple(rotor_ids), tuple(start_positions))
    configuration.validate()
    return configuration
