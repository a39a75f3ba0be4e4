"""
Pytest configuration and shared fixtures for rowproof tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

make_leaves = _common.make_leaves
make_bundle = _common.make_bundle
make_anchor_record = _common.make_anchor_record
write_sample_csv = _common.write_sample_csv


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def five_leaves():
    """Leaves sha256("0")..sha256("4")."""
    return make_leaves(5)


@pytest.fixture
def proof_bundle():
    """A valid five-row proof bundle for batch 0."""
    return make_bundle(count=5)


@pytest.fixture
def sample_csv(tmp_path):
    """A seven-row raw CSV file including sensitive columns."""
    return write_sample_csv(tmp_path / "data" / "dataset.csv", count=7)


@pytest.fixture
def built_artifacts(tmp_path, sample_csv):
    """Artifacts root produced by a real build (7 rows, batch size 4)."""
    from orchestrator.pipeline import BuildPipeline, PipelineConfig

    root = tmp_path / "artifacts"
    BuildPipeline(PipelineConfig(batch_size=4)).run(sample_csv, root)
    return root


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep ROWPROOF_* variables from the developer's shell out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("ROWPROOF_"):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


# =============================================================================
# Test Helpers (available to all tests via fixtures)
# =============================================================================

@pytest.fixture
def assert_check_passed():
    """Helper to assert a specific check passed in VerificationResult."""
    def _assert(result, check_id: str):
        checks = [c for c in result.checks if c.check_id == check_id]
        assert len(checks) == 1, f"Expected check '{check_id}' not found in {[c.check_id for c in result.checks]}"
        assert checks[0].ok, f"Check '{check_id}' failed: {checks[0].message}"
    return _assert


@pytest.fixture
def assert_check_failed():
    """Helper to assert a specific check failed in VerificationResult."""
    def _assert(result, check_id: str):
        checks = [c for c in result.checks if c.check_id == check_id]
        assert len(checks) == 1, f"Expected check '{check_id}' not found in {[c.check_id for c in result.checks]}"
        assert not checks[0].ok, f"Check '{check_id}' unexpectedly passed"
    return _assert
