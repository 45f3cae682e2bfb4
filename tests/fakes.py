# =============================================================================
# tests/fakes.py - In-Memory Supabase Stand-In
# =============================================================================
# Implements the slice of the supabase-py query builder the services use,
# backed by plain dicts:
#
#   client.table("tasks").select("*", count="exact").eq("status", "todo")
#         .order("createdAt", desc=True).range(0, 9).execute()
#
# plus `client.storage.from_(bucket)` for signed uploads and deletes.
# Installed by the `db` fixture in conftest.py.
# =============================================================================

import copy
import fnmatch
import json
import re
from functools import cmp_to_key
from typing import Any

from lib.utils import parse_datetime


class FakeResponse:
    """Mirrors postgrest's APIResponse (data + count)."""

    def __init__(self, data: Any, count: int | None = None):
        self.data = data
        self.count = count


# =============================================================================
# Value Helpers
# =============================================================================

def get_path(document: dict[str, Any], column: str) -> Any:
    """Resolve `a->>b` JSON paths as well as plain columns."""
    value: Any = document
    for part in column.split("->>"):
        if not isinstance(value, dict):
            return None
        value = value.get(part.strip())
    return value


def compare(left: Any, right: Any) -> int:
    """Three-way compare; ISO timestamps compare as datetimes."""
    if isinstance(left, str) and isinstance(right, str):
        left_date, right_date = parse_datetime(left), parse_datetime(right)
        if left_date and right_date:
            left, right = left_date, right_date
    elif isinstance(left, (int, float)) and isinstance(right, str):
        right = float(right)
    if left == right:
        return 0
    return -1 if left < right else 1


def equals(value: Any, expected: Any) -> bool:
    if isinstance(expected, str) and not isinstance(value, str):
        if isinstance(value, bool):
            return str(value).lower() == expected.lower()
        return value is not None and str(value) == expected
    return value == expected


def ilike(value: Any, pattern: str) -> bool:
    if value is None:
        return False
    glob = pattern.replace("%", "*")
    return fnmatch.fnmatch(str(value).lower(), glob.lower())


def contains(value: Any, needle: Any) -> bool:
    """Postgres `@>` for arrays and JSON arrays of objects."""
    if not isinstance(value, list):
        return False
    for wanted in needle:
        if isinstance(wanted, dict):
            found = any(
                isinstance(item, dict) and all(item.get(k) == v for k, v in wanted.items())
                for item in value
            )
        else:
            found = wanted in value
        if not found:
            return False
    return True


def split_top_level(text: str) -> list[str]:
    """Split on commas that aren't nested in brackets or braces."""
    parts, depth, current = [], 0, ""
    for char in text:
        if char in "[{(":
            depth += 1
        elif char in "]})":
            depth -= 1
        if char == "," and depth == 0:
            parts.append(current)
            current = ""
        else:
            current += char
    if current:
        parts.append(current)
    return parts


def parse_array_literal(text: str) -> list[Any]:
    """`{a,b}` Postgres array or a JSON array."""
    if text.startswith("{") and text.endswith("}"):
        return [item.strip('"') for item in text[1:-1].split(",") if item]
    return json.loads(text)


def parse_or_clause(clause: str):
    """Turn `col.op.value` into a predicate."""
    match = re.match(r"^(?P<column>[^.]+)\.(?P<op>[a-z]+)\.(?P<value>.*)$", clause.strip())
    if not match:
        raise ValueError(f"Unsupported or() clause: {clause}")
    column, op, value = match.group("column"), match.group("op"), match.group("value")

    if op == "eq":
        return lambda doc: equals(get_path(doc, column), value)
    if op == "ilike":
        return lambda doc: ilike(get_path(doc, column), value)
    if op == "cs":
        needle = parse_array_literal(value)
        return lambda doc: contains(get_path(doc, column), needle)
    raise ValueError(f"Unsupported or() operator: {op}")


# =============================================================================
# Query Builder
# =============================================================================

class FakeQuery:
    def __init__(self, store: "FakeSupabase", table: str):
        self._store = store
        self._table = table
        self._action = "select"
        self._columns = "*"
        self._count: str | None = None
        self._payload: Any = None
        self._filters: list = []
        self._orders: list[tuple[str, bool]] = []
        self._range: tuple[int, int] | None = None
        self._limit: int | None = None
        self._single = False

    # -- actions --------------------------------------------------------------

    def select(self, columns: str = "*", count: str | None = None):
        self._action, self._columns, self._count = "select", columns, count
        return self

    def insert(self, payload):
        self._action, self._payload = "insert", payload
        return self

    def update(self, changes):
        self._action, self._payload = "update", changes
        return self

    def delete(self):
        self._action = "delete"
        return self

    # -- filters --------------------------------------------------------------

    def _where(self, predicate):
        self._filters.append(predicate)
        return self

    def eq(self, column, value):
        return self._where(lambda doc: equals(get_path(doc, column), value))

    def neq(self, column, value):
        return self._where(lambda doc: not equals(get_path(doc, column), value))

    def _ordered(self, column, value, test):
        def predicate(doc):
            current = get_path(doc, column)
            return current is not None and test(compare(current, value))
        return self._where(predicate)

    def gt(self, column, value):
        return self._ordered(column, value, lambda c: c > 0)

    def gte(self, column, value):
        return self._ordered(column, value, lambda c: c >= 0)

    def lt(self, column, value):
        return self._ordered(column, value, lambda c: c < 0)

    def lte(self, column, value):
        return self._ordered(column, value, lambda c: c <= 0)

    def in_(self, column, values):
        values = list(values)
        return self._where(lambda doc: get_path(doc, column) in values)

    def ilike(self, column, pattern):
        return self._where(lambda doc: ilike(get_path(doc, column), pattern))

    def contains(self, column, values):
        return self._where(lambda doc: contains(get_path(doc, column), values))

    def is_(self, column, value):
        if value != "null":
            raise ValueError(f"Unsupported is_() value: {value}")
        return self._where(lambda doc: get_path(doc, column) is None)

    def or_(self, filters: str):
        predicates = [parse_or_clause(part) for part in split_top_level(filters)]
        return self._where(lambda doc: any(p(doc) for p in predicates))

    # -- modifiers ------------------------------------------------------------

    def order(self, column, desc=False):
        self._orders.append((column, desc))
        return self

    def range(self, start, end):
        self._range = (start, end)
        return self

    def limit(self, size):
        self._limit = size
        return self

    def single(self):
        self._single = True
        return self

    # -- execution ------------------------------------------------------------

    def _matches(self) -> list[dict[str, Any]]:
        rows = self._store.tables.setdefault(self._table, [])
        return [row for row in rows if all(p(row) for p in self._filters)]

    def _sorted(self, rows):
        def compare_rows(a, b):
            for column, desc in self._orders:
                left, right = get_path(a, column), get_path(b, column)
                if left is None and right is None:
                    continue
                # Postgres default: NULLS LAST ascending, NULLS FIRST descending
                if left is None:
                    return -1 if desc else 1
                if right is None:
                    return 1 if desc else -1
                result = compare(left, right)
                if result:
                    return -result if desc else result
            return 0
        return sorted(rows, key=cmp_to_key(compare_rows))

    def _project(self, row):
        if self._columns.strip() == "*":
            return copy.deepcopy(row)
        columns = [c.strip() for c in self._columns.split(",")]
        return {c: copy.deepcopy(row.get(c)) for c in columns}

    def execute(self) -> FakeResponse:
        if self._store.fail_queries:
            raise RuntimeError("connection refused")

        rows = self._store.tables.setdefault(self._table, [])

        if self._action == "insert":
            payload = self._payload if isinstance(self._payload, list) else [self._payload]
            inserted = [copy.deepcopy(doc) for doc in payload]
            rows.extend(inserted)
            return FakeResponse(copy.deepcopy(inserted))

        if self._action == "update":
            updated = []
            for row in self._matches():
                row.update(copy.deepcopy(self._payload))
                updated.append(copy.deepcopy(row))
            return FakeResponse(updated)

        if self._action == "delete":
            doomed = self._matches()
            doomed_ids = {id(row) for row in doomed}
            self._store.tables[self._table] = [row for row in rows if id(row) not in doomed_ids]
            return FakeResponse(copy.deepcopy(doomed))

        matches = self._sorted(self._matches())
        total = len(matches)
        if self._range:
            start, end = self._range
            matches = matches[start:end + 1]
        if self._limit is not None:
            matches = matches[: self._limit]
        data = [self._project(row) for row in matches]

        if self._single:
            if len(data) != 1:
                raise RuntimeError(
                    "{'code': 'PGRST116', 'message': 'JSON object requested, "
                    f"multiple (or no) rows returned', 'details': 'Results contain {len(data)} rows'}}"
                )
            return FakeResponse(data[0], total if self._count else None)

        return FakeResponse(data, total if self._count else None)


# =============================================================================
# Storage
# =============================================================================

class FakeBucket:
    def __init__(self, storage: "FakeStorage", name: str):
        self._storage = storage
        self.name = name

    def create_signed_upload_url(self, path: str) -> dict[str, str]:
        if self._storage.fail:
            raise RuntimeError("storage unavailable")
        self._storage.signed.append(path)
        url = f"https://test-project.supabase.co/storage/v1/object/upload/sign/{self.name}/{path}?token=abc"
        return {"signed_url": url, "signedUrl": url, "token": "abc", "path": path}

    def remove(self, paths: list[str]) -> list[dict[str, str]]:
        if self._storage.fail:
            raise RuntimeError("storage unavailable")
        self._storage.removed.extend(paths)
        return [{"name": path} for path in paths]


class FakeStorage:
    def __init__(self):
        self.fail = False
        self.signed: list[str] = []
        self.removed: list[str] = []

    def from_(self, bucket: str) -> FakeBucket:
        return FakeBucket(self, bucket)


class FakeSupabase:
    """Stands in for `supabase.Client`."""

    def __init__(self):
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.storage = FakeStorage()
        self.fail_queries = False

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rows(self, name: str) -> list[dict[str, Any]]:
        return self.tables.get(name, [])

    def seed(self, name: str, *documents: dict[str, Any]) -> list[dict[str, Any]]:
        """Insert documents as-is (no id/timestamp stamping)."""
        self.tables.setdefault(name, []).extend(copy.deepcopy(list(documents)))
        return list(documents)
