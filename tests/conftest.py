"""Root-level pytest fixtures for the ghcnpivot test suite.

Provides shared configuration fixtures following the Pydantic-based config
layers. Tests should use these fixtures instead of creating raw dict configs.
"""

import pytest
from pathlib import Path
import tempfile
import shutil

from ghcnpivot.schemas import ParamConfig, UserConfig, resolve_config
from ghcnpivot.setup_directories import setup_output_directories


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config():
    """Expert configuration with all defaults."""
    return ParamConfig()


@pytest.fixture
def internal_config(param_config):
    """Fully validated runtime configuration (no overrides)."""
    return resolve_config(param_config, None, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for creating custom test configs.

    Returns a callable that accepts UserConfig-compatible kwargs.

    Examples
    --------
    >>> def test_small_buffers(make_config):
    ...     config = make_config(flush_threshold_bytes=64)
    ...     assert config.buffer.flush_threshold_bytes == 64
    """
    def _make(**user_overrides):
        if user_overrides:
            user = UserConfig(**user_overrides)
            return resolve_config(param_config, user, None)
        return resolve_config(param_config, None, None)

    return _make


# =============================================================================
# Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Temporary directory that is cleaned up after test."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def output_dirs(temp_dir):
    """Standard output directory structure: base, columns, logs."""
    return setup_output_directories(temp_dir / "out")
