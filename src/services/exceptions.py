"""Service layer exception classes for Catering Logistics.

This module defines all custom exceptions used by the service layer to provide
consistent error handling across the application. Every exception keeps the
identifiers it was raised for as attributes, so callers can show a single
actionable message.

Exception Hierarchy:
    ServiceError (base)
    ├── NotFound
    │   ├── ProductNotFound
    │   ├── IngredientNotFound
    │   ├── CategoryNotFound
    │   ├── EventNotFound
    │   └── ReorderNotFound
    ├── CollaboratorUnavailable
    ├── UnitMismatch
    ├── InvalidPackaging
    ├── ValidationError
    ├── ProductInUse
    └── DatabaseError
"""

from typing import Iterable, Optional


class ServiceError(Exception):
    """Base exception for all service layer errors.

    All service-specific exceptions inherit from this class.
    """

    pass


class NotFound(ServiceError):
    """Raised when a referenced record does not exist."""

    pass


class ProductNotFound(NotFound):
    """Raised when product cannot be found by ID.

    Args:
        product_id: The product ID that was not found

    Example:
        >>> raise ProductNotFound(123)
        ProductNotFound: Product with ID 123 not found
    """

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product with ID {product_id} not found")


class IngredientNotFound(NotFound):
    """Raised when a recipe line points at an ingredient product that does not exist.

    Args:
        ingredient_id: The missing ingredient product ID
        product_id: The finished product whose recipe references it
    """

    def __init__(self, ingredient_id: int, product_id: Optional[int] = None):
        self.ingredient_id = ingredient_id
        self.product_id = product_id
        message = f"Ingredient with ID {ingredient_id} not found"
        if product_id is not None:
            message += f" (referenced by recipe of product {product_id})"
        super().__init__(message)


class CategoryNotFound(NotFound):
    """Raised when category cannot be found by ID."""

    def __init__(self, category_id: int):
        self.category_id = category_id
        super().__init__(f"Category with ID {category_id} not found")


class EventNotFound(NotFound):
    """Raised when event cannot be found by ID."""

    def __init__(self, event_id: int):
        self.event_id = event_id
        super().__init__(f"Event with ID {event_id} not found")


class ReorderNotFound(NotFound):
    """Raised when a reorder or reorder item cannot be found by ID."""

    def __init__(self, reorder_id: int, entity: str = "Reorder"):
        self.reorder_id = reorder_id
        self.entity = entity
        super().__init__(f"{entity} with ID {reorder_id} not found")


class CollaboratorUnavailable(ServiceError):
    """Raised when the storage collaborator cannot be read.

    Args:
        operation: Storage call that failed (e.g. "get_recipe_lines")
        original_error: Underlying exception, if any

    Example:
        >>> raise CollaboratorUnavailable("get_recipe_lines")
        CollaboratorUnavailable: Storage unavailable during get_recipe_lines
    """

    def __init__(self, operation: str, original_error: Optional[Exception] = None):
        self.operation = operation
        self.original_error = original_error
        message = f"Storage unavailable during {operation}"
        if original_error is not None:
            message += f": {original_error}"
        super().__init__(message)


class UnitMismatch(ServiceError):
    """Raised when one ingredient is used with different units across recipes.

    Args:
        ingredient_id: The ingredient product ID
        ingredient_name: The ingredient's display name
        units: The conflicting units
        product_names: Finished products whose recipes use the ingredient

    Example:
        >>> raise UnitMismatch(10, "Bun", ["Stück", "g"], ["Burger", "Wrap"])
        UnitMismatch: Ingredient 'Bun' (ID 10) has inconsistent units across
        recipes (Stück, g; used in Burger, Wrap) - contact an administrator
    """

    def __init__(
        self,
        ingredient_id: int,
        ingredient_name: str,
        units: Iterable[str],
        product_names: Iterable[str] = (),
    ):
        self.ingredient_id = ingredient_id
        self.ingredient_name = ingredient_name
        self.units = list(units)
        self.product_names = list(product_names)

        details = ", ".join(self.units)
        if self.product_names:
            details += f"; used in {', '.join(self.product_names)}"
        super().__init__(
            f"Ingredient '{ingredient_name}' (ID {ingredient_id}) has inconsistent units "
            f"across recipes ({details}) - contact an administrator"
        )


class InvalidPackaging(ServiceError):
    """Raised when a packaging row has a non-positive amount per package.

    Args:
        product_id: Product the packaging belongs to
        amount_per_package: The offending amount
    """

    def __init__(self, product_id: int, amount_per_package):
        self.product_id = product_id
        self.amount_per_package = amount_per_package
        super().__init__(
            f"Packaging for product {product_id} has invalid amount per package "
            f"{amount_per_package}; it must be greater than zero"
        )


class ValidationError(ServiceError):
    """Raised when data validation fails."""

    def __init__(self, errors: list):
        self.errors = errors
        error_msg = "; ".join(errors)
        super().__init__(f"Validation failed: {error_msg}")


class ProductInUse(ServiceError):
    """Raised when attempting to delete product that has dependencies.

    Args:
        product_id: The product ID being deleted
        dependencies: Dictionary of dependency counts {entity_type: count}

    Example:
        >>> deps = {"recipes": 2, "events": 1}
        >>> raise ProductInUse(123, deps)
        ProductInUse: Cannot delete product 123: used in 2 recipes, 1 events
    """

    def __init__(self, product_id: int, dependencies: dict):
        self.product_id = product_id
        self.dependencies = dependencies

        details = ", ".join(
            f"{count} {entity_type}" for entity_type, count in dependencies.items() if count > 0
        )

        super().__init__(f"Cannot delete product {product_id}: used in {details}")


class DatabaseError(ServiceError):
    """Raised when a database write fails."""

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")
