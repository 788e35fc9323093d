"""
Shared pytest fixtures for the CSV Insights test suite.
"""

import pytest
from pathlib import Path
from typing import AsyncGenerator, List

from httpx import AsyncClient, ASGITransport

from csvinsights.main import app
from csvinsights.models import Dataset
from csvinsights.services.csv_ingestion import CsvIngestionService
from csvinsights.services.session_store import SessionStore, session_store


@pytest.fixture(autouse=True)
def clear_sessions():
    """Each test starts without any stored sessions."""
    session_store.clear()
    yield
    session_store.clear()


@pytest.fixture
def ingestion() -> CsvIngestionService:
    """Ingestion service with default settings."""
    return CsvIngestionService()


@pytest.fixture
def small_cap_ingestion() -> CsvIngestionService:
    """Ingestion service with a tiny row cap and small batches."""
    return CsvIngestionService(max_rows=10, chunk_size_rows=4)


@pytest.fixture
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def mixed_csv_text() -> str:
    """Three numeric and two categorical columns."""
    lines = ["a,b,c,d,e"]
    colors = ["red", "green", "blue"]
    for i in range(1, 13):
        lines.append(f"{i},{i * 2},{20 - i},{colors[i % 3]},{'yes' if i % 2 else 'no'}")
    return "\n".join(lines) + "\n"


@pytest.fixture
def mixed_csv_file(tmp_path: Path, mixed_csv_text: str) -> Path:
    path = tmp_path / "mixed.csv"
    path.write_text(mixed_csv_text)
    return path


def make_dataset(rows: List[dict]) -> Dataset:
    columns = list(rows[0].keys()) if rows else []
    return Dataset(columns=columns, rows=[{c: str(r.get(c, "")) for c in columns} for r in rows])


@pytest.fixture
def dataset_factory():
    """Build a Dataset from a list of dicts; missing keys become empty strings."""
    return make_dataset


@pytest.fixture
def pets_dataset() -> Dataset:
    return make_dataset([
        {"a": "1", "b": "cat"},
        {"a": "2", "b": "dog"},
        {"a": "3", "b": "cat"},
    ])


@pytest.fixture
async def test_client() -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
