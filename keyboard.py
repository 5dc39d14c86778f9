# keyboard.py
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from charset import CHARSET
from debug import Debug
from errors import IndexOutOfRangeError, InvalidCharacterError

debug = Debug()


# ── Keyboard ──────────────────────────────────────────────────────
class Keyboard:
    """Read-only two-way table between symbols and alphabet indices."""

    __slots__ = ("alphabet", "alpha_to_index")

    def __init__(self, alphabet: str = CHARSET) -> None:
        if len(set(alphabet)) != len(alphabet):
            raise ValueError("Alphabet symbols must be distinct")
        self.alphabet: str = alphabet
        self.alpha_to_index: Mapping[str, int] = MappingProxyType(
            {ch: i for i, ch in enumerate(alphabet)}
        )

    # letter → integer signal
    def forward(self, letter: str) -> int:
        if not isinstance(letter, str) or len(letter) != 1:
            raise InvalidCharacterError(letter)
        try:
            return self.alpha_to_index[letter]
        except KeyError:
            debug.log("keyboard", f"rejected {letter!r}")
            raise InvalidCharacterError(letter) from None

    # integer signal → letter
    def backward(self, signal: int) -> str:
        if (
            isinstance(signal, bool)
            or not isinstance(signal, int)
            or not (0 <= signal < len(self.alphabet))
        ):
            raise IndexOutOfRangeError(signal, len(self.alphabet))
        return self.alphabet[signal]

    def __contains__(self, letter: object) -> bool:
        return isinstance(letter, str) and letter in self.alpha_to_index

    def __len__(self) -> int:
        return len(self.alphabet)

    def __repr__(self) -> str:
        return f"<Keyboard size={len(self.alphabet)}>"


KEYBOARD = Keyboard()


def char_to_index(char: str) -> int:
    """Index (0-63) of *char*; raises InvalidCharacterError otherwise."""
    return KEYBOARD.forward(char)


def index_to_char(index: int) -> str:
    """Symbol at *index*; raises IndexOutOfRangeError outside 0-63."""
    return KEYBOARD.backward(index)


def is_valid_character(char: object) -> bool:
    return char in KEYBOARD
