"""
Shared pytest fixtures.
"""

import logging
import sys
from pathlib import Path

import pytest

# Allow running from a source checkout without installing
sys.path.insert(0, str(Path(__file__).parents[1] / "src"))

from tests.fakes import FakeConnect, db, make_server


@pytest.fixture
def company_server():
    """SQL01 with the HR / Accounting / Sales example set plus system databases."""
    return make_server(
        "SQL01",
        db("Accounting"),
        db("HR", read_only=True, user_access="Single", status="Offline"),
        db("master"),
        db("model"),
        db("msdb"),
        db("Sales", user_access="Restricted", status="EmergencyMode"),
        db("tempdb"),
    )


@pytest.fixture
def fake_connect(company_server):
    """Fleet with SQL01 reachable and SQL02\\HR holding one database; anything else is down."""
    return FakeConnect({
        "SQL01": company_server,
        "SQL02\\HR": make_server(
            "SQL02\\HR", db("Payroll"), db("distribution"), service="HR", host="SQL02"
        ),
    })


@pytest.fixture(autouse=True)
def restore_logging():
    """setup_logging() replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
