"""Error taxonomy of the discovery core."""


class DiscoveryError(Exception):
    """Base class for discovery errors."""


class InvalidArgumentError(DiscoveryError, ValueError):
    """Raised for malformed pagination, filters, limits or depths."""


class NotFoundError(DiscoveryError, LookupError):
    """Raised when the starting entity of an operation does not exist."""

    def __init__(self, entity: str, entity_id: int) -> None:
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class DeadlineExceededError(DiscoveryError, TimeoutError):
    """Raised when a traversal runs past its deadline."""
