"""In-memory stand-ins for the Supabase client and the Playwright page fetcher."""
from __future__ import annotations

import copy
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeTable:
    def __init__(self):
        self.rows: List[Dict[str, Any]] = []
        self.fail_with: Optional[Exception] = None
        self._tick = 0

    def next_created_at(self) -> str:
        self._tick += 1
        return (datetime(2025, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=self._tick)).isoformat()


class FakeQuery:
    """Implements the slice of the postgrest query builder the repository uses."""

    def __init__(self, table: FakeTable):
        self.table = table
        self._op = "select"
        self._columns = ("*",)
        self._count = None
        self._payload = None
        self._on_conflict = None
        self._order = None
        self._limit = None
        self._in = None

    def select(self, *columns, count=None):
        self._op = "select"
        self._columns = columns or ("*",)
        self._count = count
        return self

    def upsert(self, payload, on_conflict=None):
        self._op = "upsert"
        self._payload = payload
        self._on_conflict = on_conflict
        return self

    def order(self, column, desc=False):
        self._order = (column, desc)
        return self

    def limit(self, n):
        self._limit = n
        return self

    def in_(self, column, values):
        self._in = (column, list(values))
        return self

    def execute(self):
        if self.table.fail_with is not None:
            raise self.table.fail_with
        if self._op == "upsert":
            return self._execute_upsert()
        return self._execute_select()

    def _execute_upsert(self):
        key = self._on_conflict
        for row in self.table.rows:
            if row[key] == self._payload[key]:
                row.update(copy.deepcopy(self._payload))
                return FakeResponse([copy.deepcopy(row)])
        row = {"id": str(uuid.uuid4()), "created_at": self.table.next_created_at()}
        row.update(copy.deepcopy(self._payload))
        self.table.rows.append(row)
        return FakeResponse([copy.deepcopy(row)])

    def _execute_select(self):
        rows = list(self.table.rows)
        if self._in is not None:
            column, values = self._in
            rows = [r for r in rows if r.get(column) in values]
        total = len(rows)
        if self._order is not None:
            column, desc = self._order
            rows.sort(key=lambda r: r.get(column), reverse=desc)
        if self._limit is not None:
            rows = rows[: self._limit]
        if self._columns != ("*",):
            rows = [{c: r.get(c) for c in self._columns} for r in rows]
        return FakeResponse(copy.deepcopy(rows), count=total if self._count else None)


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, FakeTable] = {}

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self.tables.setdefault(name, FakeTable()))


class FakePage:
    def __init__(self, url: str, html: str):
        self.url = url
        self.html = html

    async def content(self) -> str:
        return self.html

    async def screenshot(self, path=None, full_page=False):
        with open(path, "wb") as f:
            f.write(b"\x89PNG")


class FakeFetcher:
    """
    Serves canned HTML instead of driving a browser. `details` maps detail
    URLs to HTML, or to an exception instance to raise while loading that page.
    """

    def __init__(self, gallery_html: str = "", details: Optional[Dict[str, Any]] = None,
                 gallery_error: Optional[Exception] = None, load_error: Optional[Exception] = None):
        self.gallery_html = gallery_html
        self.details = details or {}
        self.gallery_error = gallery_error
        self.load_error = load_error
        self.diagnostics = None
        self.opened: List[str] = []
        self.open_pages = 0
        self.closed = False

    def __call__(self, diagnostics):
        self.diagnostics = diagnostics
        return self

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.closed = True

    async def open_gallery(self, hackathon_url: str):
        if self.gallery_error is not None:
            raise self.gallery_error
        return FakePage(hackathon_url + "/project-gallery", self.gallery_html)

    async def await_projects_loaded(self, page):
        if self.load_error is not None:
            raise self.load_error

    @asynccontextmanager
    async def open_detail(self, url: str):
        self.opened.append(url)
        self.open_pages += 1
        try:
            outcome = self.details.get(url, "<html></html>")
            if isinstance(outcome, Exception):
                raise outcome
            yield FakePage(url, outcome)
        finally:
            self.open_pages -= 1
