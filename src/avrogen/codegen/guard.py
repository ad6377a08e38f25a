"""Include guards for generated headers.

Regenerating a header keeps the guard already present in the existing file,
so that repeated runs over an unchanged schema produce identical output.
"""
from __future__ import annotations

import random
from pathlib import Path

from avrogen.codegen.identifiers import make_canonical


def read_guard(path: str | Path) -> str:
    """Return the guard of an existing header, or ``''`` if there is none.

    The guard is the name of an ``#ifndef NAME`` line directly followed by
    ``#define NAME``.
    """
    try:
        lines = Path(path).read_text(encoding='utf-8', errors='replace').splitlines()
    except FileNotFoundError:
        return ''

    candidate = ''
    for line in lines:
        line = line.strip()
        if not candidate:
            if line.startswith('#ifndef '):
                candidate = line[len('#ifndef '):]
        elif line.startswith('#define '):
            if candidate == line[len('#define '):]:
                break
        else:
            candidate = ''
    return candidate


def make_guard(header_file: str, rng: random.Random | None = None) -> str:
    """Synthesize a guard from the header file name and a random suffix."""
    rng = rng or random.Random()
    return f'{make_canonical(header_file, fold_case=True)}_{rng.getrandbits(32)}_H'
