"""
Pytest fixtures for the payout kernel test suite.

Provides:
- Structured logging configured for the session, with per-test capture
- A stand-in identity validator (address syntax belongs to the runtime)
- Address and coin set factories
"""

import json
import logging
from io import StringIO

import pytest

from payout_kernel.domain.coins import CoinSet
from payout_kernel.domain.identity import Addr
from payout_kernel.exceptions import InvalidInputError
from payout_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


# =============================================================================
# Identity validation
# =============================================================================


class PrefixAddressValidator:
    """Accepts lowercase alphanumeric addresses starting with ``prefix``."""

    def __init__(self, prefix: str = "addr"):
        self.prefix = prefix
        self.calls: list[str] = []

    def validate(self, raw: str) -> Addr:
        self.calls.append(raw)
        if not raw.startswith(self.prefix):
            raise InvalidInputError("address", f"missing prefix {self.prefix!r}: {raw}")
        body = raw[len(self.prefix):]
        if not body or not body.isalnum() or body.lower() != body:
            raise InvalidInputError("address", f"bad characters in {raw!r}")
        return Addr(raw)


@pytest.fixture
def validator() -> PrefixAddressValidator:
    return PrefixAddressValidator()


@pytest.fixture
def addr():
    """Factory: ``addr("alice")`` -> ``Addr("addralice")``."""

    def _make(name: str) -> Addr:
        return Addr(f"addr{name}")

    return _make


@pytest.fixture
def coins():
    """Factory: ``coins(uatom=5)`` -> ``CoinSet``."""

    def _make(**amounts: int) -> CoinSet:
        return CoinSet(amounts)

    return _make


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture payout_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            distribution.distribute_coins(sender, funds)
            logs = captured_logs()
            assert any(r["message"] == "distribution_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("payout_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)
