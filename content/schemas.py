"""content.schemas

Contracts for user-entered session content:
- SessionForm: the raw text fields of the session form (what the user typed).
- ItemRow: one raw row of the tracked-item editor.
- SessionInputs (core): the parsed, integer-only view the calculators consume.

Design choice:
Forms keep the user's text as-is (so a half-typed value survives a reload);
parsing to integers happens once, here, with the same leniency as a browser
number field read through parseInt: leading integer wins, anything else is 0.
"""

from __future__ import annotations

import re
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from core.state import SessionInputs, TrackedQuantity

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def as_int(x: Any, default: int = 0) -> int:
    """parseInt-style: '12', ' 12abc', '12.9' -> 12; '', 'abc', None -> default."""
    if isinstance(x, bool):
        return int(x)
    if isinstance(x, int):
        return x
    if isinstance(x, float):
        return int(x) if x == x and abs(x) != float("inf") else default
    m = _LEADING_INT_RE.match(str(x or ""))
    if not m:
        return default
    return int(m.group(1))


def _as_text(x: Any) -> str:
    if x is None:
        return ""
    return str(x)


# =========================
# Session form
# =========================


FORM_FIELDS = (
    "location",
    "start_level",
    "start_exp",
    "start_meso",
    "end_level",
    "end_exp",
    "end_meso",
)


@dataclass(frozen=True)
class SessionForm:
    location: str = ""
    start_level: str = ""
    start_exp: str = ""
    start_meso: str = ""
    end_level: str = ""
    end_exp: str = ""
    end_meso: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def form_from_mapping(d: Optional[Mapping[str, Any]]) -> SessionForm:
    """Build a form from a loaded dict, ignoring unknown keys."""
    d = dict(d or {})
    return SessionForm(**{k: _as_text(d.get(k, "")) for k in FORM_FIELDS})


# =========================
# Tracked item rows
# =========================


def new_row_id() -> str:
    return str(time.time_ns())


@dataclass(frozen=True)
class ItemRow:
    id: str = field(default_factory=new_row_id)
    name: str = ""
    start_count: str = ""
    end_count: str = ""
    price: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    def to_quantity(self) -> TrackedQuantity:
        return TrackedQuantity(
            name=self.name,
            start_count=as_int(self.start_count),
            end_count=as_int(self.end_count),
            unit_value=as_int(self.price),
        )


def rows_from_list(items: Optional[Iterable[Any]]) -> List[ItemRow]:
    """Normalize a loaded item list. Non-dict entries are dropped."""
    out: List[ItemRow] = []
    for it in list(items or []):
        if not isinstance(it, Mapping):
            continue
        row_id = _as_text(it.get("id")).strip() or new_row_id()
        out.append(
            ItemRow(
                id=row_id,
                name=_as_text(it.get("name")),
                start_count=_as_text(it.get("start_count")),
                end_count=_as_text(it.get("end_count")),
                price=_as_text(it.get("price")),
            )
        )
    return out


# =========================
# Parsed inputs
# =========================


def inputs_from_form(form: SessionForm, rows: Iterable[ItemRow] = ()) -> SessionInputs:
    return SessionInputs(
        start_level=as_int(form.start_level),
        start_amount=as_int(form.start_exp),
        start_currency=as_int(form.start_meso),
        end_level=as_int(form.end_level),
        end_amount=as_int(form.end_exp),
        end_currency=as_int(form.end_meso),
        tracked=tuple(r.to_quantity() for r in rows),
    )


def inputs_from_mapping(d: Mapping[str, Any]) -> SessionInputs:
    """Inverse of dataclasses.asdict(SessionInputs)."""
    tracked = []
    for q in list(d.get("tracked") or []):
        if not isinstance(q, Mapping):
            continue
        tracked.append(
            TrackedQuantity(
                name=_as_text(q.get("name")),
                start_count=as_int(q.get("start_count")),
                end_count=as_int(q.get("end_count")),
                unit_value=as_int(q.get("unit_value")),
            )
        )
    return SessionInputs(
        start_level=as_int(d.get("start_level")),
        start_amount=as_int(d.get("start_amount")),
        start_currency=as_int(d.get("start_currency")),
        end_level=as_int(d.get("end_level")),
        end_amount=as_int(d.get("end_amount")),
        end_currency=as_int(d.get("end_currency")),
        tracked=tuple(tracked),
    )
