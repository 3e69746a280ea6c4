"""Shared pytest fixtures for netdash tests."""

import os
import pytest
from loguru import logger
from netdash.core.ipv4 import parse_subnet
from netdash.models import Subnet, VLSMRequest


NETDASH_ENV_VARS = (
    'NETDASH_ALLOW_P2P',
    'NETDASH_OUTPUT_FORMAT',
    'NETDASH_LOG_LEVEL',
    'NETDASH_LOG_FILE',
    'NETDASH_ENUMERATE_LIMIT',
    'NETDASH_ENV_FILE',
    'NETDASH_DEBUG',
)


@pytest.fixture
def clean_env(monkeypatch):
    """Environment without NETDASH_* variables; values loaded by dotenv are dropped afterwards."""
    for name in NETDASH_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    for name in NETDASH_ENV_VARS:
        os.environ.pop(name, None)


@pytest.fixture
def reset_logging():
    """Remove loguru sinks added during a test."""
    yield
    logger.remove()
    logger.disable('netdash')


@pytest.fixture
def office_supernet() -> Subnet:
    """A /24 to carve VLSM plans from."""
    return parse_subnet('192.168.1.0/24')


@pytest.fixture
def office_requests() -> list[VLSMRequest]:
    """Typical branch office host counts."""
    return [
        VLSMRequest(label='Sales', hosts_needed=100),
        VLSMRequest(label='Engineering', hosts_needed=50),
        VLSMRequest(label='Management', hosts_needed=25),
        VLSMRequest(label='WAN', hosts_needed=2),
    ]


# Pytest markers for test organization
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line('markers', 'slow: marks tests that take longer than 5 seconds')
    config.addinivalue_line('markers', 'cli: marks tests that drive the command-line interface')
