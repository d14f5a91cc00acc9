"""Root pytest configuration for test discovery and auto-skip behavior.

All tests stay visible in the test explorer; tests that need external
infrastructure are auto-skipped unless explicitly enabled via environment
variables or pytest options.

Test Structure:
    tests/
    ├── bondarys_auth/         # Token, password and one-time code primitives
    │   └── unit/
    ├── bondarys_identity/     # Accounts, sign-in flows, impersonation
    │   ├── unit/              # Fast, isolated tests (mocked repositories)
    │   └── integration/       # Repositories against SQLite (PostgreSQL opt-in)
    ├── bondarys/              # HTTP API and CLI
    │   ├── unit/
    │   └── integration/
    └── shared/                # Shared fixtures and utilities

Environment Variables:
    RUN_INTEGRATION=1    Run @pytest.mark.integration tests (Testcontainers)
    RUN_ALL_TESTS=1      Run all tests (overrides other settings)

Pytest Options:
    --run-integration    Run integration tests
    --run-all            Run all tests
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

from bondarys_config import clear_settings_cache

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Optional overrides for local test runs
if (PROJECT_ROOT / "config" / ".env.test").exists():
    load_dotenv(PROJECT_ROOT / "config" / ".env.test")

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SMTP_ENABLED", "false")


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run tests marked with @pytest.mark.integration",
    )
    parser.addoption(
        "--run-all",
        action="store_true",
        default=False,
        help="Run all tests regardless of markers",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: Tests that need a PostgreSQL container (auto-skipped)",
    )
    config.addinivalue_line(
        "markers",
        "slow: Tests that take more than 1 second",
    )


def pytest_collection_modifyitems(config, items):
    """Auto-skip tests based on markers unless explicitly enabled."""
    run_all = config.getoption("--run-all") or os.environ.get(
        "RUN_ALL_TESTS",
        "",
    ).lower() in ("1", "true", "yes")

    if run_all:
        return

    run_integration = config.getoption("--run-integration") or os.environ.get(
        "RUN_INTEGRATION",
        "",
    ).lower() in ("1", "true", "yes")

    skip_integration = pytest.mark.skip(
        reason="Integration test - run with --run-integration or RUN_INTEGRATION=1",
    )

    for item in items:
        # Explicit marker only, not folder name
        item_markers = {mark.name for mark in item.iter_markers()}
        if not run_integration and "integration" in item_markers:
            item.add_marker(skip_integration)


@pytest.fixture(scope="session", autouse=True)
def configure_app_settings():
    """Start and end the session with an empty settings cache."""
    clear_settings_cache()
    yield
    clear_settings_cache()
