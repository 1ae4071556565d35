"""Domain exceptions raised by services and translated to HTTP by the
handlers in ``inventory_api.core.error_handlers``."""


class InventoryError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(InventoryError):
    """An order, product, supplier or user id does not resolve."""

    status_code = 404


class BusinessValidationError(InventoryError):
    """Request content violates a business rule (bad status token, missing productId...)."""

    status_code = 400


class PermissionDeniedError(InventoryError):
    """The acting user may not perform the operation."""

    status_code = 403


class IllegalStateError(InventoryError):
    """The operation is not allowed in the entity's current state."""

    status_code = 400


class DuplicateResourceError(InventoryError):
    status_code = 409


class AccountInactiveError(InventoryError):
    status_code = 403
