"""Domain-layer exceptions.

These replace HTTPException in domain and service code, keeping those
layers free of HTTP awareness. Global exception handlers in main.py map
these to the appropriate HTTP status codes.
"""


class EntityNotFoundError(Exception):
    """Entity not found (unknown workspace, no open check-in). Maps to HTTP 404."""

    def __init__(self, entity: str, entity_id=None):
        self.entity = entity
        self.entity_id = entity_id
        msg = f"{entity} {entity_id} not found" if entity_id else f"{entity} not found"
        super().__init__(msg)


class CheckInConflictError(Exception):
    """A check-in is already open for the workspace. Maps to HTTP 409."""

    def __init__(self, workspace_id: str):
        self.workspace_id = workspace_id
        super().__init__(f"Check-in already open for workspace {workspace_id}")


class DomainValidationError(Exception):
    """Business-rule validation failure. Maps to HTTP 400."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class ChangeProviderError(Exception):
    """Change-set provider could not enumerate changes.

    Never surfaces to the user: the snapshotter substitutes an empty set.
    """

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)
