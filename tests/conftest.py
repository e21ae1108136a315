#!/usr/bin/env python3
"""Shared pytest fixtures for the recipe-lite test suite."""

import pytest
import json
import pathlib
import sys
from typing import Any, Dict, List
from unittest.mock import patch

# Add parent directory to path for imports
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent))

from tests.fixtures.generate_test_data import (
    generate_object_document,
    generate_array_document,
    generate_corrupted_document,
    generate_unicode_document,
    write_garbage_array,
)


# ============================================================================
# File Fixtures
# ============================================================================

@pytest.fixture
def object_json_file(tmp_path) -> pathlib.Path:
    """Object-rooted document with a recipe string, 50 index tuples and noise."""
    json_file = tmp_path / "object.json"
    generate_object_document(50, recipe_rows=4, output_path=str(json_file))
    return json_file


@pytest.fixture
def array_json_file(tmp_path) -> pathlib.Path:
    """Array-rooted document with 100 rows and a garbage element every 10 rows."""
    json_file = tmp_path / "array.json"
    generate_array_document(100, garbage_every=10, output_path=str(json_file))
    return json_file


@pytest.fixture
def corrupted_json_file(tmp_path) -> pathlib.Path:
    json_file = tmp_path / "corrupted.json"
    generate_corrupted_document(20, output_path=str(json_file))
    return json_file


@pytest.fixture
def unicode_json_file(tmp_path) -> pathlib.Path:
    json_file = tmp_path / "unicode.json"
    generate_unicode_document(30, output_path=str(json_file))
    return json_file


@pytest.fixture
def scalar_root_file(tmp_path) -> pathlib.Path:
    json_file = tmp_path / "scalar.json"
    json_file.write_text('  "just a string"')
    return json_file


@pytest.fixture
def large_garbage_file(tmp_path) -> pathlib.Path:
    """~20MB array in which no element matches any rule."""
    return write_garbage_array(tmp_path / "garbage.json", 200000)


@pytest.fixture
def write_json(tmp_path):
    """Write a Python value (or raw text) to a file and return its path."""
    def _write(value: Any, name: str = "input.json") -> pathlib.Path:
        json_file = tmp_path / name
        if isinstance(value, str):
            json_file.write_text(value, encoding='utf-8')
        else:
            json_file.write_text(json.dumps(value), encoding='utf-8')
        return json_file
    return _write


# ============================================================================
# Component Fixtures
# ============================================================================

@pytest.fixture
def converter():
    from recipe_core.streaming_converter import StreamingConverter
    return StreamingConverter()


@pytest.fixture
def streaming_parser():
    from recipe_core.streaming_parser import StreamingJSONParser
    return StreamingJSONParser(buf_size=16)


# ============================================================================
# FastAPI Test Client
# ============================================================================

@pytest.fixture
def api_settings(tmp_path):
    from recipe_core.config import Settings
    return Settings(upload_dir=tmp_path / "uploads", output_dir=tmp_path / "converted", upload_chunk_bytes=1024)


@pytest.fixture
def fastapi_client(api_settings):
    """FastAPI test client for OP2 with upload/output dirs under tmp_path."""
    from fastapi.testclient import TestClient
    from op2_api.app.main import app

    with patch('op2_api.app.main.get_settings', return_value=api_settings):
        yield TestClient(app)


# ============================================================================
# Test Data Fixtures
# ============================================================================

@pytest.fixture
def sample_rows() -> List[List[Any]]:
    return [
        [0, "sword", "Iron Sword", 120],
        [1, "potion", "Health Potion", "15"],
        [2, "gem", "Ruby", 2.5],
    ]


@pytest.fixture
def sample_object() -> Dict[str, Any]:
    return {
        "version": 3,
        "Ab": ["sword", "Iron Sword", 120],
        "x:1": ["potion", "Health Potion", "15"],
        "data": " Ab,x-1,2;B=,C,3 ",
    }


# ============================================================================
# Environment Fixtures
# ============================================================================

@pytest.fixture
def clean_environment(monkeypatch):
    """Ensure settings come from defaults, not the developer's shell."""
    from recipe_core.config import get_settings
    env_vars_to_remove = ['PORT', 'LOG_LEVEL', 'RECIPE_LITE_UPLOAD_DIR', 'RECIPE_LITE_OUTPUT_DIR',
                          'RECIPE_LITE_UPLOAD_CHUNK_BYTES', 'RECIPE_LITE_PROGRESS_EVERY']
    for var in env_vars_to_remove:
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ============================================================================
# Performance Testing Fixtures
# ============================================================================

@pytest.fixture
def memory_profiler():
    """Return a helper that reports min/max/avg RSS (MiB) while running a function."""
    try:
        from memory_profiler import memory_usage
    except ImportError:
        pytest.skip("memory_profiler not installed")

    def profile_memory(func, *args, **kwargs):
        mem_usage = memory_usage((func, args, kwargs), interval=0.05)
        return {
            "min": min(mem_usage),
            "max": max(mem_usage),
            "avg": sum(mem_usage) / len(mem_usage)
        }

    return profile_memory


# ============================================================================
# Test Markers
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")
    config.addinivalue_line("markers", "benchmark: marks benchmark tests")
