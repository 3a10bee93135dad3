"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio

from zycle.core.entities import Material
from zycle.core.interfaces.document_store import WriteBatch
from zycle.infrastructure.storage.documents import (
    DocumentInvoiceStore,
    DocumentLoanStore,
    DocumentMaterialStore,
)
from zycle.infrastructure.storage.sqlite import ConnectionPool, SQLiteDocumentStore
from zycle.infrastructure.storage.sqlite.migrations import initialize_database

TENANT = "acme"


@pytest.fixture
def tenant_id() -> str:
    return TENANT


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest_asyncio.fixture
async def pool(temp_db_path: Path) -> AsyncGenerator[ConnectionPool, None]:
    """Migrated database behind a small connection pool."""
    await initialize_database(temp_db_path, create_backup_before=False)
    pool = ConnectionPool(temp_db_path, pool_size=2, busy_timeout=5000)
    await pool.initialize()
    yield pool
    await pool.close()


@pytest.fixture
def document_store(pool: ConnectionPool) -> SQLiteDocumentStore:
    return SQLiteDocumentStore(pool)


@pytest.fixture
def material_store(document_store: SQLiteDocumentStore) -> DocumentMaterialStore:
    return DocumentMaterialStore(document_store)


@pytest.fixture
def invoice_store(document_store: SQLiteDocumentStore) -> DocumentInvoiceStore:
    return DocumentInvoiceStore(document_store)


@pytest.fixture
def loan_store(document_store: SQLiteDocumentStore) -> DocumentLoanStore:
    return DocumentLoanStore(document_store)


@pytest.fixture
def add_material(document_store, material_store, tenant_id):
    """Factory that writes a material straight to the store and returns its id."""

    async def _add(name: str, price: float = 1000.0, stock: float = 0.0, code: str | None = None) -> str:
        batch = WriteBatch()
        material_id = material_store.stage_create(
            batch, tenant_id, Material(name=name, price=price, stock=stock, code=code)
        )
        await document_store.commit_batch(batch)
        return material_id

    return _add


@pytest.fixture
def copper() -> Material:
    return Material(id="mat-copper", name="COBRE #1", code="103", price=30000, stock=50.0)


@pytest.fixture
def cardboard() -> Material:
    return Material(id="mat-carton", name="CARTON", code="202", price=500, stock=0.0)
