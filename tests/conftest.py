"""Shared fixtures."""

from orgperms.testing.fixtures import (  # noqa: F401
    acme_executor,
    mock_executor,
    sample_record,
)
