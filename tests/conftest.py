"""Root-level pytest fixtures for the rasterhex test suite.

Provides shared configuration fixtures following the Pydantic-based
architecture, plus grid providers. Tests use these fixtures instead of
building raw dict configs.
"""

import pytest
from pathlib import Path
import tempfile
import shutil

from rasterhex.grid import H3GridProvider
from rasterhex.schemas import ParamConfig, UserConfig, resolve_config
from tests.helpers.fake_grid import SquareGridProvider


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
    >>> def test_custom_policy(make_config):
    ...     config = make_config(AGGREGATION="max")
    ...     assert config.aggregation.policy == "max"
    """
    def _make(**user_overrides):
        """Create InternalConfig with user overrides."""
        if user_overrides:
            user = UserConfig(**user_overrides)
            return resolve_config(param_config, user, None)
        return resolve_config(param_config, None, None)

    return _make


# =============================================================================
# Grid Fixtures
# =============================================================================

@pytest.fixture
def h3_grid():
    return H3GridProvider()


@pytest.fixture
def square_grid():
    """Square-cell fake grid with hand-computable cell ids."""
    return SquareGridProvider()


# =============================================================================
# Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Temporary directory that is cleaned up after test."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)
