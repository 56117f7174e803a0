from __future__ import annotations


class MixboxError(Exception):
    """Base class for storefront domain errors."""


class ValidationFailedError(MixboxError):
    def __init__(self, message: str, errors: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = dict(errors or {})


class MissingSessionIdError(ValidationFailedError):
    def __init__(self) -> None:
        super().__init__("No session ID provided")


class QuantityMismatchError(ValidationFailedError):
    def __init__(self, selected_size: int, total_quantity: int) -> None:
        super().__init__(
            "Selected products do not match package size. "
            f"size={selected_size} selected={total_quantity}"
        )
        self.selected_size = selected_size
        self.total_quantity = total_quantity


class InvalidSizeError(ValidationFailedError):
    def __init__(self, message: str) -> None:
        super().__init__(message)


class InvalidItemIndexError(ValidationFailedError):
    def __init__(self, item_index: int | None) -> None:
        super().__init__(f"Invalid item index: {item_index!r}")
        self.item_index = item_index


class InvalidQuantityError(ValidationFailedError):
    def __init__(self, message: str = "Quantity must be greater than zero") -> None:
        super().__init__(message)


class InvalidActionError(ValidationFailedError):
    pass


class MissingSugarPreferenceError(ValidationFailedError):
    def __init__(self) -> None:
        super().__init__("sugarPreference is required for a random selection")


class CustomerDetailsValidationError(ValidationFailedError):
    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("Invalid customer details", errors)


class NotFoundError(MixboxError):
    pass


class SessionNotFoundError(NotFoundError):
    def __init__(self, session_id: str) -> None:
        super().__init__("Session not found")
        self.session_id = session_id


class PackageNotFoundError(NotFoundError):
    def __init__(self, slug: str) -> None:
        super().__init__(f"Package not found: {slug}")
        self.slug = slug


class DrinkNotFoundError(NotFoundError):
    def __init__(self, slug: str) -> None:
        super().__init__(f"Drink not found: {slug}")
        self.slug = slug


class SelectionNotFoundError(NotFoundError):
    def __init__(self, selection_id: str) -> None:
        super().__init__("Invalid or expired selection")
        self.selection_id = selection_id


class NoMatchingDrinksError(NotFoundError):
    def __init__(self, sugar_preference: str) -> None:
        super().__init__(f"No drinks match your sugar preference: {sugar_preference}")
        self.sugar_preference = sugar_preference


class ConcurrentModificationError(MixboxError):
    def __init__(self, session_id: str) -> None:
        super().__init__("Basket was modified by another request. Reload and retry.")
        self.session_id = session_id


class CatalogDataError(MixboxError):
    """The catalog returned a record the storefront cannot use."""
