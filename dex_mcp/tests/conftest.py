"""
Pytest configuration and shared fixtures.

This module provides:
1. Automatic loading of .env.test configuration
2. Custom marker registration
3. Sample contacts, notes and reminders
"""

import os
import sys
import pytest
from pathlib import Path
from dotenv import load_dotenv

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

# Load test environment configuration
# Priority: environment variables > .env.test
_project_root = Path(__file__).parent.parent.parent
_env_test_path = _project_root / ".env.test"

if _env_test_path.exists():
    load_dotenv(_env_test_path, override=False)

# Unit tests never talk to the real Dex API
os.environ.setdefault("DEX_API_KEY", "test-api-key")

from dex_mcp.tests.fakes import (
    FakeDexClient,
    sample_contacts,
    sample_notes,
    sample_reminders,
)


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests that require a real Dex account (DEX_API_KEY)"
    )
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def contacts():
    return sample_contacts()


@pytest.fixture
def notes():
    return sample_notes()


@pytest.fixture
def reminders():
    return sample_reminders()


@pytest.fixture
def fake_client():
    """In-memory Dex client preloaded with the sample data."""
    return FakeDexClient(sample_contacts(), sample_notes(), sample_reminders())
