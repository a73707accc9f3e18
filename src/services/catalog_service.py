"""
Catalog Service - CRUD for categories, products, recipes and packaging.

Administrators maintain the catalog here; the aggregation core only reads it
through CatalogStorage.

Write-side rules:
- Product names are unique
- A recipe line's unit must equal its ingredient's unit, and its amount
  must be positive
- A product cannot be its own ingredient
- Packaging amounts must be positive; each product has at most one
  packaging row
- Products referenced by recipes or event packing lists cannot be deleted

Session Management Pattern:
- All functions accept optional `session` parameter
- If session is provided, use it directly (allows callers to manage transactions)
- If session is None, create a new session_scope for the operation
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.models import Category, EventProduct, PackagingUnit, Product, RecipeLine
from src.services.database import session_scope
from src.services.dto_utils import AmountLike, to_decimal
from src.services.exceptions import (
    CategoryNotFound,
    DatabaseError,
    IngredientNotFound,
    ProductInUse,
    ProductNotFound,
    ValidationError,
)
from src.services.logging_utils import get_service_logger, log_operation

logger = get_service_logger(__name__)


def _flush(sess: Session) -> None:
    """Flush pending writes, reporting constraint violations as DatabaseError."""
    try:
        sess.flush()
    except IntegrityError as e:
        raise DatabaseError("Catalog write violates a database constraint", e) from e


# ============================================================================
# Categories
# ============================================================================


def create_category(
    name: str,
    symbol: Optional[str] = None,
    session: Optional[Session] = None,
) -> Category:
    """
    Create a category.

    Raises:
        ValidationError: If name is empty or already taken
    """
    if not name or not name.strip():
        raise ValidationError(["Category name cannot be empty"])

    def _impl(sess: Session) -> Category:
        existing = sess.query(Category).filter(Category.name == name.strip()).first()
        if existing:
            raise ValidationError([f"Category with name '{name.strip()}' already exists"])

        category = Category(name=name.strip(), symbol=symbol)
        sess.add(category)
        _flush(sess)
        return category

    if session is not None:
        return _impl(session)
    with session_scope() as sess:
        return _impl(sess)


def get_category(category_id: int, session: Optional[Session] = None) -> Category:
    """
    Get a category by ID.

    Raises:
        CategoryNotFound: If category doesn't exist
    """

    def _impl(sess: Session) -> Category:
        category = sess.get(Category, category_id)
        if category is None:
            raise CategoryNotFound(category_id)
        return category

    if session is not None:
        return _impl(session)
    with session_scope() as sess:
        return _impl(sess)


def list_categories(session: Optional[Session] = None) -> List[Category]:
    """List all categories ordered by name."""

    def _impl(sess: Session) -> List[Category]:
        return sess.query(Category).order_by(Category.name).all()

    if session is not None:
        return _impl(session)
    with session_scope() as sess:
        return _impl(sess)


def delete_category(category_id: int, session: Optional[Session] = None) -> None:
    """
    Delete a category. Its products are kept without a category.

    Raises:
        CategoryNotFound: If category doesn't exist
    """

    def _impl(sess: Session) -> None:
        category = get_category(category_id, session=sess)
        for product in list(category.products):
            product.category_id = None
        sess.delete(category)
        _flush(sess)

    if session is not None:
        return _impl(session)
    with session_scope() as sess:
        return _impl(sess)


# ============================================================================
# Products
# ============================================================================


def _check_product_data(
    sess: Session,
    name: Optional[str],
    unit: Optional[str],
    category_id: Optional[int],
    exclude_id: Optional[int] = None,
) -> None:
    errors = []
    if not name or not name.strip():
        errors.append("Product name cannot be empty")
    if not unit or not unit.strip():
        errors.append("Product unit cannot be empty")
    if errors:
        raise ValidationError(errors)

    query = sess.query(Product).filter(Product.name == name.strip())
    if exclude_id is not None:
        query = query.filter(Product.id != exclude_id)
    if query.first() is not None:
        raise ValidationError([f"Product with name '{name.strip()}' already exists"])

    if category_id is not None and sess.get(Category, category_id) is None:
        raise CategoryNotFound(category_id)


def create_product(
    name: str,
    unit: str,
    category_id: Optional[int] = None,
    session: Optional[Session] = None,
) -> Product:
    """
    Create a product.

    Args:
        name: Unique display name
        unit: Base unit (e.g. "g", "Stück")
        category_id: Optional category
        session: Optional database session

    Returns:
        Created Product

    Raises:
        ValidationError: If name or unit is empty, or the name is taken
        CategoryNotFound: If category_id doesn't exist
    """

    def _impl(sess: Session) -> Product:
        _check_product_data(sess, name, unit, category_id)
        product = Product(name=name.strip(), unit=unit.strip(), category_id=category_id)
        sess.add(product)
        _flush(sess)
        log_operation(logger, operation="create_product", outcome="success", product_id=product.id)
        return product

    if session is not None:
        return _impl(session)
    with session_scope() as sess:
        return _impl(sess)


def get_product(product_id: int, session: Optional[Session] = None) -> Product:
    """
    Get a product by ID.

    Raises:
        ProductNotFound: If product doesn't exist
    """

    def _impl(sess: Session) -> Product:
        product = sess.get(Product, product_id)
        if product is None:
            raise ProductNotFound(product_id)
        return product

    if session is not None:
        return _impl(session)
    with session_scope() as sess:
        return _impl(sess)


def list_products(
    category_id: Optional[int] = None,
    session: Optional[Session] = None,
) -> List[Product]:
    """
    List products ordered by name.

    Args:
        category_id: If given, only products in this category
        session: Optional database session
    """

    def _impl(sess: Session) -> List[Product]:
        query = sess.query(Product)
        if category_id is not None:
            query = query.filter(Product.category_id == category_id)
        return query.order_by(Product.name).all()

    if session is not None:
        return _impl(session)
    with session_scope() as sess:
        return _impl(sess)


def update_product(
    product_id: int,
    data: Dict[str, Any],
    session: Optional[Session] = None,
) -> Product:
    """
    Update a product's name, unit or category.

    Changing the unit of a product that is used as an ingredient is refused,
    since its recipe lines would no longer match.

    Raises:
        ProductNotFound: If product doesn't exist
        ValidationError: If the new data is invalid, or the unit changes while
            recipes use the product
    """

    def _impl(sess: Session) -> Product:
        product = get_product(product_id, session=sess)
        name = data.get("name", product.name)
        unit = data.get("unit", product.unit)
        category_id = data.get("category_id", product.category_id)
        _check_product_data(sess, name, unit, category_id, exclude_id=product_id)

        if unit.strip() != product.unit:
            recipe_count = (
                sess.query(RecipeLine).filter(RecipeLine.ingredient_id == product_id).count()
            )
            if recipe_count:
                raise ValidationError(
                    [
                        f"Cannot change the unit of '{product.name}': "
                        f"it is an ingredient in {recipe_count} recipes"
                    ]
                )

        product.name = name.strip()
        product.unit = unit.strip()
        product.category_id = category_id
        _flush(sess)
        sess.refresh(product)
        return product

    if session is not None:
        return _impl(session)
    with session_scope() as sess:
        return _impl(sess)


def delete_product(product_id: int, session: Optional[Session] = None) -> None:
    """
    Delete a product with its own recipe and packaging.

    Raises:
        ProductNotFound: If product doesn't exist
        ProductInUse: If recipes or event packing lists reference it
    """

    def _impl(sess: Session) -> None:
        product = get_product(product_id, session=sess)

        dependencies = {}
        recipe_count = (
            sess.query(RecipeLine).filter(RecipeLine.ingredient_id == product_id).count()
        )
        if recipe_count:
            dependencies["recipes"] = recipe_count
        event_count = (
            sess.query(EventProduct).filter(EventProduct.product_id == product_id).count()
        )
        if event_count:
            dependencies["events"] = event_count
        if dependencies:
            raise ProductInUse(product_id, dependencies)

        sess.delete(product)
        _flush(sess)
        log_operation(logger, operation="delete_product", outcome="success", product_id=product_id)

    if session is not None:
        return _impl(session)
    with session_scope() as sess:
        return _impl(sess)


# ============================================================================
# Recipe lines
# ============================================================================


def add_recipe_line(
    product_id: int,
    ingredient_id: int,
    amount: AmountLike,
    unit: Optional[str] = None,
    session: Optional[Session] = None,
) -> RecipeLine:
    """
    Add an ingredient to a product's recipe.

    Args:
        product_id: Finished product
        ingredient_id: Ingredient product
        amount: Ingredient amount per unit of the finished product
        unit: Unit of amount; defaults to the ingredient's unit and must
            equal it when given
        session: Optional database session

    Returns:
        Created RecipeLine

    Raises:
        ProductNotFound: If the finished product doesn't exist
        IngredientNotFound: If the ingredient doesn't exist
        ValidationError: If amount <= 0, the unit doesn't match, the product
            is its own ingredient, or the ingredient is already in the recipe
    """
    quantity = to_decimal(amount)
    if quantity <= 0:
        raise ValidationError([f"Recipe amount must be positive, got {amount}"])
    if product_id == ingredient_id:
        raise ValidationError(["A product cannot be an ingredient of itself"])

    def _impl(sess: Session) -> RecipeLine:
        get_product(product_id, session=sess)
        ingredient = sess.get(Product, ingredient_id)
        if ingredient is None:
            raise IngredientNotFound(ingredient_id, product_id)

        line_unit = (unit or ingredient.unit).strip()
        if line_unit != ingredient.unit:
            raise ValidationError(
                [
                    f"Unit '{line_unit}' does not match the unit '{ingredient.unit}' "
                    f"of ingredient '{ingredient.name}'"
                ]
            )

        existing = (
            sess.query(RecipeLine)
            .filter(RecipeLine.product_id == product_id)
            .filter(RecipeLine.ingredient_id == ingredient_id)
            .first()
        )
        if existing is not None:
            raise ValidationError([f"'{ingredient.name}' is already part of this recipe"])

        line = RecipeLine(
            product_id=product_id,
            ingredient_id=ingredient_id,
            amount=quantity,
            unit=line_unit,
        )
        sess.add(line)
        _flush(sess)
        log_operation(
            logger,
            operation="add_recipe_line",
            outcome="success",
            product_id=product_id,
            ingredient_id=ingredient_id,
        )
        return line

    if session is not None:
        return _impl(session)
    with session_scope() as sess:
        return _impl(sess)


def list_recipe_lines(product_id: int, session: Optional[Session] = None) -> List[RecipeLine]:
    """
    List a product's recipe lines in insertion order.

    Raises:
        ProductNotFound: If product doesn't exist
    """

    def _impl(sess: Session) -> List[RecipeLine]:
        get_product(product_id, session=sess)
        return (
            sess.query(RecipeLine)
            .filter(RecipeLine.product_id == product_id)
            .order_by(RecipeLine.id)
            .all()
        )

    if session is not None:
        return _impl(session)
    with session_scope() as sess:
        return _impl(sess)


def remove_recipe_line(
    product_id: int,
    ingredient_id: int,
    session: Optional[Session] = None,
) -> bool:
    """
    Remove an ingredient from a product's recipe.

    Returns:
        True if a line was removed, False if there was none
    """

    def _impl(sess: Session) -> bool:
        line = (
            sess.query(RecipeLine)
            .filter(RecipeLine.product_id == product_id)
            .filter(RecipeLine.ingredient_id == ingredient_id)
            .first()
        )
        if line is None:
            return False
        sess.delete(line)
        _flush(sess)
        return True

    if session is not None:
        return _impl(session)
    with session_scope() as sess:
        return _impl(sess)


# ============================================================================
# Packaging units
# ============================================================================


def set_packaging_unit(
    product_id: int,
    amount_per_package: AmountLike,
    packaging_label: str,
    session: Optional[Session] = None,
) -> PackagingUnit:
    """
    Create or replace a product's packaging.

    Args:
        product_id: Product being packaged
        amount_per_package: Base units per package (must be positive)
        packaging_label: Singular container name (e.g. "Sack")
        session: Optional database session

    Raises:
        ProductNotFound: If product doesn't exist
        ValidationError: If amount <= 0 or the label is empty
    """
    amount = to_decimal(amount_per_package, field="amount_per_package")
    errors = []
    if amount <= 0:
        errors.append(f"Amount per package must be positive, got {amount_per_package}")
    if not packaging_label or not packaging_label.strip():
        errors.append("Packaging label cannot be empty")
    if errors:
        raise ValidationError(errors)

    def _impl(sess: Session) -> PackagingUnit:
        get_product(product_id, session=sess)
        packaging = (
            sess.query(PackagingUnit).filter(PackagingUnit.product_id == product_id).first()
        )
        if packaging is None:
            packaging = PackagingUnit(product_id=product_id)
            sess.add(packaging)
        packaging.amount_per_package = amount
        packaging.packaging_label = packaging_label.strip()
        _flush(sess)
        return packaging

    if session is not None:
        return _impl(session)
    with session_scope() as sess:
        return _impl(sess)


def get_packaging_unit(product_id: int, session: Optional[Session] = None) -> Optional[PackagingUnit]:
    """Get a product's packaging, or None if it has none."""

    def _impl(sess: Session) -> Optional[PackagingUnit]:
        return sess.query(PackagingUnit).filter(PackagingUnit.product_id == product_id).first()

    if session is not None:
        return _impl(session)
    with session_scope() as sess:
        return _impl(sess)


def delete_packaging_unit(product_id: int, session: Optional[Session] = None) -> bool:
    """
    Remove a product's packaging.

    Returns:
        True if a packaging row was removed, False if there was none
    """

    def _impl(sess: Session) -> bool:
        packaging = get_packaging_unit(product_id, session=sess)
        if packaging is None:
            return False
        sess.delete(packaging)
        _flush(sess)
        return True

    if session is not None:
        return _impl(session)
    with session_scope() as sess:
        return _impl(sess)
