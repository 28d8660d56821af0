"""content.parsing

Tolerant JSON parsing for persisted blobs (form state, item lists, records).

Anything read back from storage may be stale, hand-edited or truncated.
We only:
- strip a UTF-8 BOM and surrounding whitespace
- normalize smart quotes / non-breaking spaces
- remove trailing commas
- json.loads, then check the root type

On failure the caller gets ParseResult(data=None, error=...) and decides on a default.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ParseResult:
    data: Optional[Any]
    raw: str
    cleaned: str
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.data is not None


def normalize_smart_quotes(s: str) -> str:
    return (
        (s or "")
        .replace("\u201c", '"')
        .replace("\u201d", '"')
        .replace("\u00a0", " ")
    )


def remove_trailing_commas(s: str) -> str:
    return re.sub(r",\s*([}\]])", r"\1", s)


def clean(raw: str) -> str:
    s = (raw or "").lstrip("\ufeff").strip()
    s = normalize_smart_quotes(s)
    return remove_trailing_commas(s)


def try_parse_json(raw: Optional[str], root: type = dict) -> ParseResult:
    """Best-effort parse. `root` is the required type of the top-level value."""
    if raw is None:
        return ParseResult(data=None, raw="", cleaned="", error="missing")
    raw = str(raw)
    s = clean(raw)
    if not s:
        return ParseResult(data=None, raw=raw, cleaned=s, error="empty")

    try:
        obj = json.loads(s)
    except ValueError as e:
        return ParseResult(data=None, raw=raw, cleaned=s, error=f"json.loads: {type(e).__name__}: {e}")

    if not isinstance(obj, root):
        return ParseResult(
            data=None,
            raw=raw,
            cleaned=s,
            error=f"JSON root is {type(obj).__name__}, expected {root.__name__}",
        )
    return ParseResult(data=obj, raw=raw, cleaned=s)


def parse_object(raw: Optional[str]) -> Optional[Dict[str, Any]]:
    return try_parse_json(raw, dict).data


def parse_list(raw: Optional[str]) -> Optional[List[Any]]:
    return try_parse_json(raw, list).data
