"""orgperms testing utilities.

Provides a scripted query executor and payload builders for testing code
that consumes the pagination engine or the orchestrator.
"""

from orgperms.testing.fixtures import (
    configure_acme,
    create_mock_record,
    make_edge,
    make_payload,
    make_repository,
    make_source,
)
from orgperms.testing.mock import MockCall, MockQueryExecutor, MockResponse

__all__ = [
    # Mock executor
    "MockQueryExecutor",
    "MockCall",
    "MockResponse",
    # Payload builders
    "make_source",
    "make_edge",
    "make_repository",
    "make_payload",
    "configure_acme",
    "create_mock_record",
]
