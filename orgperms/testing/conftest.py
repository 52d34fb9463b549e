"""
Pytest plugin for orgperms testing fixtures.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["orgperms.testing.conftest"]
"""

from orgperms.testing.fixtures import acme_executor, mock_executor, sample_record

__all__ = [
    "mock_executor",
    "acme_executor",
    "sample_record",
]
