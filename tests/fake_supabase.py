"""
In-memory stand-in for the supabase-py table API.

Implements the subset of the PostgREST request builder the services use:
select (with count="exact" and embedded resources), eq, ilike, gte, lte,
in_, order (desc / nullsfirst), range, limit, insert, update, delete,
upsert and execute. Rows are plain dicts; `execute()` returns an object
with `.data` and `.count` like postgrest's APIResponse.
"""

import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from postgrest.exceptions import APIError

from catalog.normalize import parse_price

# Generated columns computed on read
_GENERATED = {
    "discounted_price_value": lambda row: parse_price(row.get("discounted_price")),
}

_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


@dataclass
class FakeResponse:
    data: List[Dict[str, Any]]
    count: Optional[int] = None


def like_to_regex(pattern: str) -> "re.Pattern":
    """Translate a LIKE pattern (with backslash escapes) to a regex."""
    out = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\" and i + 1 < len(pattern):
            out.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        if ch == "%":
            out.append(".*")
        elif ch == "_":
            out.append(".")
        else:
            out.append(re.escape(ch))
        i += 1
    return re.compile("".join(out), re.IGNORECASE | re.DOTALL)


def _split_top_level(columns: str) -> List[str]:
    parts, depth, current = [], 0, ""
    for ch in columns:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        if ch == "," and depth == 0:
            parts.append(current.strip())
            current = ""
        else:
            current += ch
    if current.strip():
        parts.append(current.strip())
    return parts


def _singular(table: str) -> str:
    return table[:-1] if table.endswith("s") else table


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self._db = db
        self._table = table
        self._op = "select"
        self._columns = "*"
        self._count: Optional[str] = None
        self._payload: Any = None
        self._ignore_duplicates = False
        self._filters: List[Callable[[Dict[str, Any]], bool]] = []
        self._orders: List[Tuple[str, bool, Optional[bool]]] = []
        self._range: Optional[Tuple[int, int]] = None
        self._limit: Optional[int] = None
        db.calls.append(self)

    # --- operations -------------------------------------------------------

    def select(self, columns: str = "*", count: Optional[str] = None) -> "FakeQuery":
        self._op, self._columns, self._count = "select", columns, count
        return self

    def insert(self, payload: Any) -> "FakeQuery":
        self._op, self._payload = "insert", payload
        return self

    def upsert(self, payload: Any, on_conflict: str = "id", ignore_duplicates: bool = False) -> "FakeQuery":
        self._op, self._payload, self._ignore_duplicates = "upsert", payload, ignore_duplicates
        return self

    def update(self, values: Dict[str, Any]) -> "FakeQuery":
        self._op, self._payload = "update", values
        return self

    def delete(self) -> "FakeQuery":
        self._op = "delete"
        return self

    # --- filters ----------------------------------------------------------

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda row: _value(row, column) is not None and str(_value(row, column)) == str(value))
        return self

    def ilike(self, column: str, pattern: str) -> "FakeQuery":
        regex = like_to_regex(pattern)
        self._filters.append(lambda row: regex.fullmatch(str(_value(row, column) or "")) is not None)
        return self

    def gte(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda row: _value(row, column) is not None and float(_value(row, column)) >= float(value))
        return self

    def lte(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda row: _value(row, column) is not None and float(_value(row, column)) <= float(value))
        return self

    def in_(self, column: str, values: List[Any]) -> "FakeQuery":
        wanted = {str(v) for v in values}
        self._filters.append(lambda row: str(_value(row, column)) in wanted)
        return self

    # --- modifiers --------------------------------------------------------

    def order(self, column: str, desc: bool = False, nullsfirst: Optional[bool] = None) -> "FakeQuery":
        self._orders.append((column, desc, nullsfirst))
        return self

    def range(self, start: int, end: int) -> "FakeQuery":
        self._range = (start, end)
        return self

    def limit(self, size: int) -> "FakeQuery":
        self._limit = size
        return self

    # --- introspection for tests -----------------------------------------

    @property
    def table_name(self) -> str:
        return self._table

    @property
    def orders(self) -> List[Tuple[str, bool, Optional[bool]]]:
        return list(self._orders)

    @property
    def requested_range(self) -> Optional[Tuple[int, int]]:
        return self._range

    # --- execution --------------------------------------------------------

    def execute(self) -> FakeResponse:
        error = self._db.errors.get(self._table)
        if error is not None:
            raise error

        rows = self._db.tables.setdefault(self._table, [])
        if self._op == "insert":
            return FakeResponse(data=[self._db.insert_row(self._table, r) for r in _as_list(self._payload)])
        if self._op == "upsert":
            return FakeResponse(data=self._upsert(rows))

        matched = [row for row in rows if all(f(row) for f in self._filters)]

        if self._op == "update":
            for row in matched:
                row.update(self._payload)
            return FakeResponse(data=[dict(row) for row in matched])
        if self._op == "delete":
            self._db.tables[self._table] = [row for row in rows if row not in matched]
            return FakeResponse(data=[dict(row) for row in matched])

        matched = self._sorted(matched)
        total = len(matched)
        if self._range is not None:
            start, end = self._range
            if start > 0 and start >= total:
                raise APIError({
                    "code": "PGRST103",
                    "message": "Requested range not satisfiable",
                    "details": f"An offset of {start} was requested, but there are only {total} rows.",
                    "hint": None,
                })
            matched = matched[start:end + 1]
        if self._limit is not None:
            matched = matched[:self._limit]

        data = [self._db.project(self._table, row, self._columns) for row in matched]
        return FakeResponse(data=data, count=total if self._count == "exact" else None)

    def _sorted(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        # Least significant key first; each pass is stable
        for column, desc, nullsfirst in reversed(self._orders):
            if nullsfirst is None:
                nullsfirst = desc
            present = [r for r in rows if _value(r, column) is not None]
            missing = [r for r in rows if _value(r, column) is None]
            present = sorted(present, key=lambda r: _sort_value(_value(r, column)), reverse=desc)
            rows = missing + present if nullsfirst else present + missing
        return rows

    def _upsert(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        written = []
        existing = {str(r.get("id")): r for r in rows}
        for payload in _as_list(self._payload):
            current = existing.get(str(payload.get("id")))
            if current is None:
                written.append(self._db.insert_row(self._table, payload))
            elif not self._ignore_duplicates:
                current.update(payload)
                written.append(dict(current))
        return written


def _as_list(payload: Any) -> List[Dict[str, Any]]:
    return list(payload) if isinstance(payload, list) else [payload]


def _value(row: Dict[str, Any], column: str) -> Any:
    if column in _GENERATED and column not in row:
        return _GENERATED[column](row)
    return row.get(column)


def _sort_value(value: Any) -> Any:
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return str(value)


class FakeSupabase:
    """
    Usage:
        db = FakeSupabase({"products": [...]})
        store = CatalogStore(db)
    """

    def __init__(self, tables: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.tables: Dict[str, List[Dict[str, Any]]] = {
            name: [dict(row) for row in rows] for name, rows in (tables or {}).items()
        }
        self.calls: List[FakeQuery] = []
        self.errors: Dict[str, Exception] = {}
        self._clock = 0

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def fail(self, table: str, code: str = "XX000", message: str = "boom") -> None:
        """Make every query on `table` raise a PostgREST APIError."""
        self.errors[table] = APIError({"code": code, "message": message, "details": None, "hint": None})

    def calls_to(self, table: str) -> List[FakeQuery]:
        return [q for q in self.calls if q.table_name == table]

    def insert_row(self, table: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        row = dict(payload)
        row.setdefault("id", str(uuid.uuid4()))
        if table != "products":
            self._clock += 1
            row.setdefault("created_at", (_EPOCH + timedelta(seconds=self._clock)).isoformat())
        self.tables.setdefault(table, []).append(row)
        return dict(row)

    def project(self, table: str, row: Dict[str, Any], columns: str) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for part in _split_top_level(columns):
            if part == "*":
                out.update(row)
                continue
            if "(" not in part:
                out[part] = row.get(part)
                continue

            head, inner = part.split("(", 1)
            inner = inner[:-1]
            alias, _, target = head.partition(":")
            if not target:
                alias, target = head, head
            target = target.split("!")[0]

            fk = f"{_singular(target)}_id"
            if fk in row:
                parent = next(
                    (r for r in self.tables.get(target, []) if str(r.get("id")) == str(row[fk])),
                    None,
                )
                out[alias] = self.project(target, parent, inner) if parent else None
            else:
                back_fk = f"{_singular(table)}_id"
                children = [r for r in self.tables.get(target, []) if str(r.get(back_fk)) == str(row.get("id"))]
                out[alias] = [self.project(target, child, inner) for child in children]
        return out
