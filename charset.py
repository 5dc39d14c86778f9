# charset.py
from __future__ import annotations

import string
from typing import Dict

# ── alphabet ─────────────────────────────────────────────────────
# 0-25 A-Z, 26-51 a-z, 52-61 0-9, 62 space, 63 period
CHARSET = string.ascii_uppercase + string.ascii_lowercase + string.digits + " ."
CHARSET_SIZE = len(CHARSET)

SYMBOL_INDICES: Dict[str, int] = {
    "SPACE": CHARSET.index(" "),
    "PERIOD": CHARSET.index("."),
}

# ── limits ───────────────────────────────────────────────────────
ROTOR_POSITION_MIN = 1
ROTOR_POSITION_MAX = CHARSET_SIZE

MAX_ACTIVE_ROTORS = 8       # rotors in one encrypt / decrypt call
MAX_GENERATED_ROTORS = 20   # rotors per generator batch
