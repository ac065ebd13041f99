import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import pipelines...` work.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

from datetime import datetime, timezone

import pytest

from common.rules_engine.models import Account, Monitor


class FakeScriptSource:
    """In-memory script source; guids listed in `failing` raise on fetch."""

    def __init__(self, *, monitors=None, scripts=None, failing=(), list_error=None):
        self.monitors = list(monitors or [])
        self.scripts = dict(scripts or {})
        self.failing = set(failing)
        self.list_error = list_error
        self.fetched: list[str] = []

    def list_accounts(self):
        return [Account(id=1, name="Test")]

    def list_monitors(self, *, account_id):
        if self.list_error is not None:
            raise self.list_error
        return [m for m in self.monitors if m.account_id == account_id]

    def fetch_script(self, *, account_id, monitor_guid):
        self.fetched.append(monitor_guid)
        if monitor_guid in self.failing:
            raise RuntimeError(f"NerdGraph unavailable for {monitor_guid}")
        return self.scripts.get(monitor_guid)


class RecordingDocumentStore:
    def __init__(self, *, documents=None, read_error=None, write_error=None):
        self.documents = dict(documents or {})
        self.read_error = read_error
        self.write_error = write_error
        self.writes: list[tuple[int, str, str, dict]] = []

    def read_document(self, *, account_id, collection, document_id):
        if self.read_error is not None:
            raise self.read_error
        return self.documents.get((account_id, collection, document_id))

    def write_document(self, *, account_id, collection, document_id, document):
        self.writes.append((account_id, collection, document_id, document))
        if self.write_error is not None:
            raise self.write_error
        self.documents[(account_id, collection, document_id)] = document


@pytest.fixture
def fixed_clock():
    moment = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
    return lambda: moment


@pytest.fixture
def make_monitor():
    def _make(guid: str, *, name: str | None = None, monitor_type: str = "SCRIPT_API", account_id: int = 1, tags=None):
        return Monitor(
            guid=guid,
            name=name or f"Monitor {guid}",
            monitor_type=monitor_type,
            tags=tags or {},
            account_id=account_id,
        )

    return _make


@pytest.fixture
def make_source():
    return FakeScriptSource


@pytest.fixture
def make_document_store():
    return RecordingDocumentStore
