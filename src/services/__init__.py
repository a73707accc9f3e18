"""Services package - Business logic layer for Catering Logistics.

This package contains all service modules that provide business logic
and database operations for the application.

Architecture:
- Services: Stateless functions organized by domain (catalog, event, reorder)
- Aggregation core: recipe_resolver -> ingredient_aggregation_service ->
  packaging_projector, combined by shopping_list_service
- Storage: the core reads the catalog only through CatalogStorage
- Transactions: Managed via session_scope() context manager
- Exceptions: Consistent error handling via ServiceError hierarchy

Service Modules:
- catalog_service: Categories, products, recipe lines and packaging units
- event_service: Events and their packing lists
- reorder_service: Restock requests for running events
- shopping_list_service: Purchase recommendations for selections and events
- export_service: Tabular exports of purchase recommendations

Infrastructure:
- exceptions: Custom exception classes for service layer errors
- database: Session management and database utilities
- catalog_storage: Storage collaborator interface and implementations
"""

# Service modules
from . import (
    database,
    catalog_storage,
    catalog_service,
    event_service,
    ingredient_aggregation_service,
    packaging_projector,
    shopping_list_service,
    reorder_service,
    export_service,
)

# Aggregation core
from .catalog_storage import (
    CatalogStorage,
    InMemoryCatalogStorage,
    PackagingRecord,
    ProductRecord,
    RecipeLineRecord,
    SqlCatalogStorage,
)
from .recipe_resolver import ScaledIngredientLine, resolve
from .selection import Selection, SelectionSet
from .ingredient_aggregation_service import (
    AggregatedIngredientLine,
    Contribution,
    aggregate,
    aggregate_ingredients_for_event,
)
from .packaging_projector import PurchaseRecommendation, project
from .shopping_list_service import aggregate_and_project, get_event_shopping_list
from .packaging_heuristics import guess_packaging_label, is_non_food

# Infrastructure - Exception hierarchy
from .exceptions import (
    CategoryNotFound,
    CollaboratorUnavailable,
    DatabaseError,
    EventNotFound,
    IngredientNotFound,
    InvalidPackaging,
    NotFound,
    ProductInUse,
    ProductNotFound,
    ReorderNotFound,
    ServiceError,
    UnitMismatch,
    ValidationError,
)

# Infrastructure - Session management
from .database import session_scope

__all__ = [
    # Service modules
    "database",
    "catalog_storage",
    "catalog_service",
    "event_service",
    "ingredient_aggregation_service",
    "packaging_projector",
    "shopping_list_service",
    "reorder_service",
    "export_service",
    # Aggregation core
    "CatalogStorage",
    "InMemoryCatalogStorage",
    "SqlCatalogStorage",
    "ProductRecord",
    "RecipeLineRecord",
    "PackagingRecord",
    "ScaledIngredientLine",
    "resolve",
    "Selection",
    "SelectionSet",
    "AggregatedIngredientLine",
    "Contribution",
    "aggregate",
    "aggregate_ingredients_for_event",
    "PurchaseRecommendation",
    "project",
    "aggregate_and_project",
    "get_event_shopping_list",
    "guess_packaging_label",
    "is_non_food",
    # Infrastructure - Exception hierarchy
    "ServiceError",
    "NotFound",
    "ProductNotFound",
    "IngredientNotFound",
    "CategoryNotFound",
    "EventNotFound",
    "ReorderNotFound",
    "CollaboratorUnavailable",
    "UnitMismatch",
    "InvalidPackaging",
    "ValidationError",
    "ProductInUse",
    "DatabaseError",
    # Infrastructure - Session management
    "session_scope",
]
