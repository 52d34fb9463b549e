"""
GraphQL query document for organization permissions.

The document is static apart from the page sizes, which are rendered in
through ``string.Template``. Cursors are always passed as variables.
"""

from string import Template

from orgperms.exceptions import ConfigurationError

# GitHub caps `first` at 100 for both connections
MAX_PAGE_SIZE = 100

_PERMISSIONS_TEMPLATE = Template("""
query ($$orgname: String!, $$endCursor: String, $$innerCursor: String) {
    organization(login: $$orgname) {
        repositories(first: $repository_page_size, after: $$endCursor) {
            nodes {
                nameWithOwner
                description
                url
                collaborators(first: $collaborator_page_size, after: $$innerCursor) {
                    edges {
                        permission
                        permissionSources {
                            permission
                            source {
                                __typename
                                ... on Organization {
                                    login
                                }
                                ... on Repository {
                                    nameWithOwner
                                }
                                ... on Team {
                                    name
                                }
                            }
                        }
                        node {
                            login
                        }
                    }
                    pageInfo {
                        hasNextPage
                        endCursor
                    }
                }
            }
            pageInfo {
                hasNextPage
                endCursor
            }
        }
    }
    rateLimit {
        limit
        cost
        remaining
        resetAt
    }
}
""")


def build_permissions_query(
    repository_page_size: int = MAX_PAGE_SIZE,
    collaborator_page_size: int = MAX_PAGE_SIZE,
) -> str:
    """
    Render the permissions query for the given page sizes.

    Args:
        repository_page_size: Repositories per outer page (1-100)
        collaborator_page_size: Collaborators per inner page (1-100)

    Returns:
        GraphQL query document

    Raises:
        ConfigurationError: If a page size is out of range
    """
    for label, size in (
        ("repository_page_size", repository_page_size),
        ("collaborator_page_size", collaborator_page_size),
    ):
        if not 1 <= size <= MAX_PAGE_SIZE:
            raise ConfigurationError(
                f"{label} must be between 1 and {MAX_PAGE_SIZE}, got {size}"
            )

    return _PERMISSIONS_TEMPLATE.substitute(
        repository_page_size=repository_page_size,
        collaborator_page_size=collaborator_page_size,
    )


PERMISSIONS_QUERY = build_permissions_query()
