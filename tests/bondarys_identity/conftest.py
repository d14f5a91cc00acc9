"""
Pytest configuration for bondarys_identity tests.

Provides fixtures for the named test accounts.
"""

import pytest

from bondarys_identity.domain.account import Account
from tests.shared.fixtures.factories import TestAccountFactory


@pytest.fixture
def alice() -> Account:
    """Active, verified account with a password."""
    return TestAccountFactory.alice()


@pytest.fixture
def bob_placeholder() -> Account:
    """Inactive placeholder created by an OTP request."""
    return TestAccountFactory.bob_placeholder()


@pytest.fixture
def admin() -> Account:
    return TestAccountFactory.admin()
