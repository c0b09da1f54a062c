"""Shared pytest fixtures for d2-models tests."""

import json
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from d2_models.runtime.model_definition import ModelDefinition


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def load_fixture(fixtures_dir: Path) -> Callable[[str], Any]:
    """Return a loader for api fixtures, e.g. ``load_fixture("/api/schemas/dataElement")``.

    Every call returns a fresh copy, so tests may mutate the result.
    """

    def _load(api_path: str) -> Any:
        path = fixtures_dir / f"{api_path.strip('/')}.json"
        return json.loads(path.read_text(encoding="utf-8"))

    return _load


@pytest.fixture
def data_element_schema(load_fixture: Callable[[str], Any]) -> dict[str, Any]:
    """Return the dataElement schema payload."""
    return load_fixture("/api/schemas/dataElement")


@pytest.fixture
def fake_api() -> MagicMock:
    """Return a RemoteApi stand-in with AsyncMock methods."""
    api = MagicMock()
    api.get = AsyncMock(
        return_value={"name": "BS_COLL (N, DSD) TARGET: Blood Units Donated"}
    )
    api.post = AsyncMock(return_value={"response": {"uid": "newUid00001"}})
    api.update = AsyncMock(return_value={"status": "OK"})
    api.delete = AsyncMock(return_value=None)
    return api


@pytest.fixture
def data_element_definition(
    data_element_schema: dict[str, Any], fake_api: MagicMock
) -> ModelDefinition:
    """Return the dataElement definition bound to ``fake_api``."""
    return ModelDefinition.create_from_schema(data_element_schema, api=fake_api)
