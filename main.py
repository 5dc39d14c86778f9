# main.py
from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from codec import CryptographyResult, EncryptionConfiguration, decode, encode
from debug import Debug
from errors import RotorError
from rotor import RotorDefinition
from validation import validate_encryptable_text

# ────────────────────────────────────────────────────────────────────────
#  0. Configuration & logging
# ────────────────────────────────────────────────────────────────────────


debug = Debug()


@dataclass(slots=True)
class Config:
    """Runtime switches for the command-line front-end."""

    strict: bool = False            # reject out-of-alphabet text instead of skipping
    echo_decrypt: bool = True       # REPL: decrypt every ciphertext straight back
    show_state: bool = True         # print final positions and warnings


# ────────────────────────────────────────────────────────────────────────
#  1. JSON loading helpers
# ────────────────────────────────────────────────────────────────────────


def _parse_time(raw: Any) -> Optional[datetime]:
    if not raw:
        return None
    if not isinstance(raw, str):
        raise ValueError(f"Timestamp must be an ISO string, got {raw!r}")
    return datetime.fromisoformat(raw)


def rotor_from_dict(data: Dict[str, Any]) -> RotorDefinition:
    """Inverse of :func:`rotor_generator.rotor_to_dict`; validates on the way."""
    if not isinstance(data, dict):
        raise ValueError(f"Rotor entry must be an object, got {data!r}")
    missing = {"id", "name", "permutation"} - data.keys()
    if missing:
        raise ValueError(f"Missing keys in rotor entry: {', '.join(sorted(missing))}")
    if not isinstance(data["permutation"], list):
        raise ValueError(f"Rotor {data['id']!r}: permutation must be a list")

    created = _parse_time(data.get("createdAt"))
    kwargs: Dict[str, Any] = {
        "id": data["id"],
        "name": data["name"],
        "permutation": tuple(data["permutation"]),
        "description": data.get("description"),
        "updated_at": _parse_time(data.get("updatedAt")),
    }
    if created is not None:
        kwargs["created_at"] = created
    return RotorDefinition(**kwargs)


def load_rotor_file(path: str | Path) -> Dict[str, RotorDefinition]:
    """Read a listing written by ``rotor_generator.py --format json``."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict) or not isinstance(data.get("rotors"), list):
        raise ValueError(f"{path}: expected an object with a 'rotors' list")
    rotors: Dict[str, RotorDefinition] = {}
    for entry in data["rotors"]:
        rotor = rotor_from_dict(entry)
        if rotor.id in rotors:
            raise ValueError(f"{path}: rotor id {rotor.id!r} appears more than once")
        rotors[rotor.id] = rotor
    return rotors


def load_config(path: str | Path) -> dict:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: config must be a JSON object")
    required = {"rotor_file", "rotors", "positions"}
    missing = required - data.keys()
    if missing:
        raise ValueError(f"Missing keys in config: {', '.join(sorted(missing))}")
    if not isinstance(data["rotor_file"], str):
        raise ValueError("'rotor_file' must be a path string")
    for key in ("rotors", "positions"):
        if not isinstance(data[key], list):
            raise ValueError(f"'{key}' must be a list")
    return data


def resolve_rotor_refs(refs: Sequence[str], rotors: Dict[str, RotorDefinition]) -> List[str]:
    """Accept rotor ids or (unique) rotor names; return ids.

    Unknown references pass through unchanged so the engine reports them.
    """
    by_name: Dict[str, List[str]] = {}
    for rotor in rotors.values():
        by_name.setdefault(rotor.name, []).append(rotor.id)

    ids = []
    for ref in refs:
        if ref in rotors:
            ids.append(ref)
        elif len(by_name.get(ref, ())) == 1:
            ids.append(by_name[ref][0])
        else:
            ids.append(ref)
    return ids


# ────────────────────────────────────────────────────────────────────────
#  2. Session – wraps the lookup, the rotor order and the switches
# ────────────────────────────────────────────────────────────────────────


class Session:
    """Encrypt / decrypt with one fixed rotor order and start positions."""

    def __init__(
        self,
        rotors: Dict[str, RotorDefinition],
        configuration: EncryptionConfiguration,
        cfg: Config,
    ) -> None:
        self.rotors = rotors
        self.configuration = configuration
        self.cfg = cfg
        configuration.validate()

    def encrypt(self, msg: str) -> CryptographyResult:
        if self.cfg.strict:
            validate_encryptable_text(msg)
        return encode(msg, self.configuration, self.rotors)

    def decrypt(self, cipher: str) -> CryptographyResult:
        if self.cfg.strict:
            validate_encryptable_text(cipher)
        return decode(cipher, self.configuration, self.rotors)


def report(label: str, res: CryptographyResult, cfg: Config) -> None:
    print(f"{label}: {res.result}")
    if cfg.show_state:
        print(f"  final positions : {list(res.final_positions)}")
        print(f"  characters      : {res.characters_processed}")
        for w in res.warnings:
            print(f"  ⚠ {w}")


# ────────────────────────────────────────────────────────────────────────
#  3. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Encrypt or decrypt with Enigma+ rotors")
    p.add_argument("--rotor-file", metavar="FILE", help="JSON rotor listing from rotor_generator.py")
    p.add_argument("--rotors", nargs="+", metavar="ROTOR", help="Rotor ids or names, left to right")
    p.add_argument("--positions", nargs="+", type=int, metavar="N", help="Start positions 1-64 (default: all 1)")
    p.add_argument("--config", metavar="FILE", help="Load rotor_file / rotors / positions from JSON.")
    p.add_argument("-m", "--message", metavar="TEXT", help="Text to process. If omitted, an interactive REPL starts.")
    p.add_argument("--decrypt", action="store_true", help="Decrypt --message instead of encrypting it.")
    p.add_argument("--strict", action="store_true", help="Reject characters outside the alphabet instead of skipping them.")
    p.add_argument("--quiet", action="store_true", help="Print the resulting text only.")
    p.add_argument(
        "--debug",
        nargs="+",
        metavar="COMPONENT",
        choices=sorted(Debug.components),
        help="Enable debug logging for these components.",
    )
    p.add_argument("--log-file", metavar="FILE", help="Also write debug output to FILE.")
    return p.parse_args(argv)


def build_session(args: argparse.Namespace, cfg: Config) -> Session:
    if args.config:
        cfg_dict = load_config(args.config)
        rotor_file = cfg_dict["rotor_file"]
        refs = cfg_dict["rotors"]
        positions = cfg_dict["positions"]
    else:
        if not args.rotor_file or not args.rotors:
            raise ValueError("--rotor-file and --rotors are required without --config")
        rotor_file = args.rotor_file
        refs = args.rotors
        positions = args.positions or [1] * len(refs)

    rotors = load_rotor_file(rotor_file)
    ids = resolve_rotor_refs(refs, rotors)
    return Session(rotors, EncryptionConfiguration(tuple(ids), tuple(positions)), cfg)


# ────────────────────────────────────────────────────────────────────────
#  4. Main entry point
# ────────────────────────────────────────────────────────────────────────


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    debug.configure(log_to=args.log_file)
    if args.debug:
        debug.enable(*args.debug)

    cfg = Config(strict=args.strict, show_state=not args.quiet)

    try:
        session = build_session(args, cfg)
    except (OSError, ValueError, KeyError) as exc:
        print(f"❌  Failed to load configuration: {exc}", file=sys.stderr)
        return 1

    # one‑shot mode ------------------------------------------------------
    if args.message is not None:
        try:
            if args.decrypt:
                report("Decrypted", session.decrypt(args.message), cfg)
            else:
                report("Encrypted", session.encrypt(args.message), cfg)
        except RotorError as exc:
            print(f"❌  {exc}", file=sys.stderr)
            return 1
        return 0

    # interactive REPL ---------------------------------------------------
    print(f"\nLoaded {len(session.rotors)} rotors; using {list(session.configuration.rotor_ids)}.")
    print("Type blank line to quit.\n")
    while True:
        try:
            txt = input("\nMessage to encrypt: ")
        except EOFError:
            break
        if not txt.strip():
            break
        try:
            res = session.encrypt(txt)
            report("\nEncrypted", res, cfg)
            if cfg.echo_decrypt:
                report("\nDecrypted", session.decrypt(res.result), cfg)
        except RotorError as exc:
            print(f"❌  {exc}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
