"""Pytest configuration and fixtures."""

import pytest

from simpledex.config import DexConfig
from simpledex.dex import SimpleDEX, reset_default_dex
from simpledex.events import EventLog
from simpledex.ledger.memory import InMemoryLedger
from simpledex.pools.registry import PoolRegistry
from tests.helpers.factories import DexFixture, deploy_fixture


@pytest.fixture
def ledger() -> InMemoryLedger:
    """Empty in-memory token ledger."""
    return InMemoryLedger()


@pytest.fixture
def events() -> EventLog:
    """Empty event log."""
    return EventLog()


@pytest.fixture
def registry() -> PoolRegistry:
    """Empty pool registry."""
    return PoolRegistry()


@pytest.fixture
def config() -> DexConfig:
    """Default configuration, independent of SIMPLEDEX_* variables."""
    return DexConfig()


@pytest.fixture
def dex(ledger, events, registry, config) -> SimpleDEX:
    """Exchange wired to the ledger, events and registry fixtures."""
    return SimpleDEX(ledger=ledger, events=events, config=config, registry=registry)


@pytest.fixture
def fx() -> DexFixture:
    """Deployed exchange with funded owner, users and exchange account."""
    return deploy_fixture()


@pytest.fixture(autouse=True)
def _reset_default_dex():
    """Keep the process-wide exchange from leaking between tests."""
    yield
    reset_default_dex()
