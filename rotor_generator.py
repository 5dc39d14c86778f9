# rotor_generator.py
from __future__ import annotations

import argparse
import csv
import io
import json
import sys
import time
from pathlib import Path
from random import Random, SystemRandom
from typing import Any, Dict, List, Optional, Sequence

from charset import CHARSET, CHARSET_SIZE, MAX_GENERATED_ROTORS
from debug import Debug
from rotor import RotorDefinition, utcnow
from validation import validate_permutation

debug = Debug()

# ─── helpers ────────────────────────────────────────────────────────────


def build_rng(seed: int | None) -> Random | SystemRandom:
    """Return deterministic RNG when *seed* is given, else CSPRNG."""
    return Random(seed) if seed is not None else SystemRandom()  # CSPRNG


def _base36(n: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    out = ""
    while True:
        n, r = divmod(n, 36)
        out = digits[r] + out
        if not n:
            return out


def generate_random_permutation(rng: Random | SystemRandom | None = None) -> tuple[int, ...]:
    """Return a random bijection over 0-63 (Fisher-Yates via ``shuffle``)."""
    rng = rng or SystemRandom()
    permutation = list(range(CHARSET_SIZE))
    rng.shuffle(permutation)
    validate_permutation(permutation)
    return tuple(permutation)


def generate_rotor_id(rng: Random | SystemRandom | None = None) -> str:
    """``rotor_<time36>_<rand36><rand36>``, unique for practical purposes."""
    rng = rng or SystemRandom()
    stamp = _base36(int(time.time() * 1000))
    tail = _base36(rng.getrandbits(32)) + _base36(rng.getrandbits(32))
    return f"rotor_{stamp}_{tail}"


def create_custom_rotor(
    name: str,
    permutation: Sequence[int],
    description: str | None = None,
    rotor_id: str | None = None,
) -> RotorDefinition:
    now = utcnow()
    return RotorDefinition(
        id=rotor_id or generate_rotor_id(),
        name=name.strip(),
        permutation=tuple(permutation),
        description=description.strip() if description is not None else None,
        created_at=now,
        updated_at=now,
    )


def create_random_rotor(
    name: str,
    description: str | None = None,
    rng: Random | SystemRandom | None = None,
) -> RotorDefinition:
    rng = rng or SystemRandom()
    rotor = create_custom_rotor(
        name,
        generate_random_permutation(rng),
        description,
        rotor_id=generate_rotor_id(rng),
    )
    debug.log("generator", f"created {rotor.id} ({rotor.name})")
    return rotor


def generate_multiple_rotors(
    count: int,
    name_prefix: str = "Rotor",
    rng: Random | SystemRandom | None = None,
) -> List[RotorDefinition]:
    if not 1 <= count <= MAX_GENERATED_ROTORS:
        raise ValueError(f"Count must be between 1 and {MAX_GENERATED_ROTORS}")
    rng = rng or SystemRandom()
    return [
        create_random_rotor(
            f"{name_prefix} {i}", f"Auto-generated rotor {i} of {count}", rng
        )
        for i in range(1, count + 1)
    ]


def create_shift_rotor(name: str = "Test Rotor") -> RotorDefinition:
    """Every symbol maps to the next one (NOT for real use)."""
    permutation = [(i + 1) % CHARSET_SIZE for i in range(CHARSET_SIZE)]
    return create_custom_rotor(name, permutation, "Simple shift cipher for testing")


def create_identity_rotor(name: str = "Identity Rotor") -> RotorDefinition:
    permutation = list(range(CHARSET_SIZE))
    return create_custom_rotor(name, permutation, "Identity rotor for testing")


# ─── output formatters ─────────────────────────────────────────────────


def rotor_to_dict(rotor: RotorDefinition) -> Dict[str, Any]:
    return {
        "id": rotor.id,
        "name": rotor.name,
        "description": rotor.description,
        "permutation": list(rotor.permutation),
        "createdAt": rotor.created_at.isoformat(),
        "updatedAt": rotor.updated_at.isoformat(),
    }


def emit_json(rotors: Sequence[RotorDefinition]) -> str:
    payload = {
        "charset": CHARSET,
        "rotors": [rotor_to_dict(r) for r in rotors],
    }
    return json.dumps(payload, indent=2)


def emit_csv(rotors: Sequence[RotorDefinition]) -> str:
    out = io.StringIO()
    writer = csv.writer(out)
    writer.writerow(["id", "name", "description", "permutation"])
    for r in rotors:
        writer.writerow([r.id, r.name, r.description or "", " ".join(map(str, r.permutation))])
    return out.getvalue()


# ─── CLI ───────────────────────────────────────────────────────────────


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate random Enigma+ rotors.")
    p.add_argument("--count", type=int, default=5, help="How many rotors (default 5)")
    p.add_argument("--prefix", default="Rotor", help="Name prefix (default 'Rotor')")
    p.add_argument(
        "--seed",
        type=int,
        help="Integer seed for deterministic wiring "
        "(omit for cryptographically strong randomness)",
    )
    p.add_argument(
        "--format",
        choices=["json", "csv"],
        default="json",
        help="Output format (default json)",
    )
    p.add_argument(
        "--outfile",
        type=Path,
        help="Write to this file (stdout if omitted)",
    )
    p.add_argument("--debug", action="store_true", help="Log every generated rotor")
    return p.parse_args(argv)


# ─── main ──────────────────────────────────────────────────────────────


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    debug.configure()
    if args.debug:
        debug.enable("generator")

    try:
        rotors = generate_multiple_rotors(args.count, args.prefix, build_rng(args.seed))
    except ValueError as exc:
        print(f"❌  {exc}", file=sys.stderr)
        return 2

    text = emit_json(rotors) if args.format == "json" else emit_csv(rotors)

    if args.outfile:
        args.outfile.write_text(text, encoding="utf-8")
        print(f"Wrote {args.outfile} ({args.format}, {len(rotors)} rotors)")
    else:
        sys.stdout.write(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
