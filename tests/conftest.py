"""Pytest fixtures and configuration."""

from datetime import datetime, timedelta, timezone

import pytest

from ghsa_audit.utils.common import set_verbose_enabled
from ghsa_audit.utils.models import AlertRecord
from ghsa_audit.utils.severity import SeverityLevel


@pytest.fixture
def now():
    """Fixed reference instant shared by a test run."""
    return datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_alert(now):
    """Factory for alert records created *days_ago* days before ``now``."""

    def _make(
        ghsa_id="GHSA-aaaa-bbbb-cccc",
        cve_id="",
        severity=SeverityLevel.HIGH,
        days_ago=1,
        state="open",
        summary="Prototype pollution",
        number=1,
        package="lodash",
        html_url="",
    ):
        return AlertRecord(
            ghsa_id=ghsa_id,
            cve_id=cve_id,
            summary=summary,
            severity=severity,
            created_at=now - timedelta(days=days_ago),
            state=state,
            number=number,
            package=package,
            html_url=html_url,
        )

    return _make


@pytest.fixture(autouse=True)
def reset_verbose():
    """Keep the module-level verbose switch from leaking between tests."""
    set_verbose_enabled(False)
    yield
    set_verbose_enabled(False)
