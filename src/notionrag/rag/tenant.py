"""Tenant resolution for rag-search requests."""

from collections.abc import Mapping

from notionrag.constants import DEFAULT_TENANT_HEADER
from notionrag.errors import UnauthorizedError

UNAUTHORIZED_MESSAGE = (
    "Unauthorized: Missing tenant_id. Must be provided via {header} header "
    "or 'tenant_id' argument."
)


def header_value(headers: Mapping[str, str] | None, name: str) -> str | None:
    """Case-insensitive header lookup."""
    if not headers:
        return None
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def resolve_tenant(
    headers: Mapping[str, str] | None,
    tenant_id: str | None = None,
    header_name: str = DEFAULT_TENANT_HEADER,
) -> str:
    """Resolve the tenant scope of a request.

    The transport header wins over the ``tenant_id`` tool argument; the
    argument exists for transports without per-request headers (stdio).
    Values are opaque and used verbatim.

    Args:
        headers: Request headers attached by the transport, if any
        tenant_id: Tenant id passed as a tool argument
        header_name: Name of the tenant header

    Returns:
        str: The tenant identifier

    Raises:
        UnauthorizedError: If neither source supplies a non-empty value
    """
    from_header = header_value(headers, header_name)
    if from_header:
        return from_header
    if tenant_id:
        return tenant_id
    raise UnauthorizedError(UNAUTHORIZED_MESSAGE.format(header=header_name))
