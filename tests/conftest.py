"""Root conftest — shared pytest markers.

Markers
-------
unit        fast, no I/O, pure logic
e2e         talks to the live research service (set QUICKRESEARCH_TEST_E2E=1)
slow        expected to take > 5 seconds
"""

from __future__ import annotations


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast, no I/O tests")
    config.addinivalue_line("markers", "e2e: requires the live research service")
    config.addinivalue_line("markers", "slow: test is expected to take > 5 s")
