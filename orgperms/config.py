"""
Run configuration for orgperms.

Values come from explicit arguments (the CLI) with environment variables as
the fallback for the token, organization and endpoint.
"""

import os
from dataclasses import dataclass

from orgperms.exceptions import ConfigurationError
from orgperms.sorting import SortColumn
from orgperms.transport import DEFAULT_GRAPHQL_URL, DEFAULT_TIMEOUT

OUTPUT_FORMATS = ("json", "csv", "table")
DEFAULT_MAX_REQUESTS = 10_000


@dataclass
class QueryConfig:
    """Everything needed to run one permissions query and render it."""

    token: str
    organization: str
    paginate: bool = True
    sort_by: SortColumn = SortColumn.REPOSITORY
    output_format: str = "json"
    indent: int = 0
    all_users: bool = False
    base_url: str = DEFAULT_GRAPHQL_URL
    timeout: float = DEFAULT_TIMEOUT
    max_requests: int | None = DEFAULT_MAX_REQUESTS
    run_timeout: float | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """
        Check the configuration.

        Raises:
            ConfigurationError: On a missing token/organization or an invalid value
        """
        if not self.token:
            raise ConfigurationError(
                "A GitHub token is required (--token, ORGPERMS_TOKEN or GITHUB_TOKEN)"
            )
        if not self.organization:
            raise ConfigurationError(
                "An organization is required (--org or ORGPERMS_ORG)"
            )
        self.sort_by = SortColumn.parse(self.sort_by)
        if self.output_format not in OUTPUT_FORMATS:
            raise ConfigurationError(
                f"Invalid output format: {self.output_format}. "
                f"Must be one of: {', '.join(OUTPUT_FORMATS)}"
            )
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")
        if self.max_requests is not None and self.max_requests < 1:
            raise ConfigurationError("max_requests must be at least 1")
        if self.run_timeout is not None and self.run_timeout <= 0:
            raise ConfigurationError("run_timeout must be positive")

    @classmethod
    def from_env(
        cls,
        token: str | None = None,
        organization: str | None = None,
        base_url: str | None = None,
        **overrides: object,
    ) -> "QueryConfig":
        """
        Create a configuration, filling gaps from environment variables.

        Environment variables:
            ORGPERMS_TOKEN: GitHub token (takes precedence over GITHUB_TOKEN)
            GITHUB_TOKEN: GitHub token
            ORGPERMS_ORG: Organization login
            ORGPERMS_BASE_URL: GraphQL endpoint (default: https://api.github.com/graphql)

        Raises:
            ConfigurationError: If token or organization is still missing
        """
        return cls(
            token=token
            or os.environ.get("ORGPERMS_TOKEN")
            or os.environ.get("GITHUB_TOKEN", ""),
            organization=organization or os.environ.get("ORGPERMS_ORG", ""),
            base_url=base_url
            or os.environ.get("ORGPERMS_BASE_URL", DEFAULT_GRAPHQL_URL),
            **overrides,  # type: ignore[arg-type]
        )
