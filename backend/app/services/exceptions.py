from typing import List, Optional


class MarketplaceException(Exception):
    pass


class ValidationError(MarketplaceException):
    """Input was well-formed JSON but breaks a business rule."""

    def __init__(self, message: str, param: Optional[str] = None, value=None):
        super().__init__(message)
        self.param = param
        self.value = value

    def to_errors(self) -> List[dict]:
        err = {"message": str(self)}
        if self.param is not None:
            err["param"] = self.param
            err["value"] = self.value
        return [err]


class NotFoundError(MarketplaceException):
    pass


class InsufficientStockError(MarketplaceException):
    def __init__(self, item_id: str, requested: int, available: int):
        super().__init__(
            f"Not enough stock for item {item_id}. Requested={requested} Available={available}"
        )
        self.item_id = item_id
        self.requested = requested
        self.available = available


class ForbiddenError(MarketplaceException):
    pass


class StorageError(MarketplaceException):
    pass
