"""Deterministic fingerprints for career path requests.

The key only has to be stable for equal normalized inputs: role and list
elements are stripped and lower-cased, lists are sorted, and the canonical
JSON is folded into a 32-bit rolling hash rendered in base 36. Collisions are
tolerated; they produce a false cache hit, never an error.
"""

from __future__ import annotations

import json
from collections.abc import Iterable

from career_compass_core.constants import CACHE_KEY_PREFIX
from career_compass_core.models.profile import PathRequest

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def generate_cache_key(
    role: str | None,
    skills: Iterable[str] | None,
    tasks: Iterable[str] | None,
    interests: Iterable[str] | None,
    *,
    prefix: str = CACHE_KEY_PREFIX,
) -> str:
    """Return an order-, case- and whitespace-independent key for the inputs."""
    normalized = {
        "role": (role or "").strip().lower(),
        "skills": _normalize_list(skills),
        "tasks": _normalize_list(tasks),
        "interests": _normalize_list(interests),
    }
    key_string = json.dumps(normalized, separators=(",", ":"), ensure_ascii=False)
    return f"{prefix}{_to_base36(abs(_rolling_hash(key_string)))}"


def cache_key_for_request(request: PathRequest, *, prefix: str = CACHE_KEY_PREFIX) -> str:
    """Fingerprint a PathRequest."""
    return generate_cache_key(
        request.current_role,
        request.skills,
        request.tasks,
        request.interests,
        prefix=prefix,
    )


def _normalize_list(values: Iterable[str] | None) -> list[str]:
    return sorted(v.strip().lower() for v in (values or []))


def _rolling_hash(text: str) -> int:
    """Signed 32-bit ``h * 31 + unit`` hash over UTF-16 code units."""
    data = text.encode("utf-16-le")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = ((h << 5) - h + unit) & 0xFFFFFFFF
    if h & 0x80000000:
        h -= 1 << 32
    return h


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))
