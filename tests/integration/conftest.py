import os
from collections.abc import Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest

from invoicedesk.config.settings import Settings
from invoicedesk.database.connection import close_pool, get_connection, init_pool
from invoicedesk.records.models import DocumentRecord, new_record_id, now_millis

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "invoicedesk" / "database" / "schema.sql"


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "invoicedesk_test")
    return Settings(realtime_poll_timeout_seconds=1.0)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            conn.execute(SCHEMA_PATH.read_text(encoding="utf-8"))
            conn.commit()
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup(integration_pool: None) -> Generator[list[str], None, None]:
    cleanup: list[str] = []
    yield cleanup
    if not cleanup:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute("DELETE FROM invoices WHERE id = ANY(%s::uuid[])", (cleanup,))
        conn.commit()


@pytest.fixture
def make_invoice(integration_cleanup: list[str]) -> Any:
    """Build records whose IDs are deleted after the test."""

    def _make(**overrides: Any) -> DocumentRecord:
        values: dict[str, Any] = {
            "id": new_record_id(),
            "invoice_number": "FT-2024-001",
            "vendor": "Acme Srl",
            "date": "2024-03-15",
            "amount": 120.5,
            "currency": "EUR",
            "document_bytes": b"%PDF-1.4 integration",
            "original_file_name": "acme.pdf",
            "created_at": now_millis(),
        }
        values.update(overrides)
        integration_cleanup.append(values["id"])
        return DocumentRecord(**values)

    return _make
