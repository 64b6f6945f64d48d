"""Category aggregate and its management commands."""

from datetime import UTC, datetime

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.catalogue.events import CategoryCreated, CategoryUpdated
from storefront.domain import logger, storefront
from storefront.errors import DomainValidationError, NotFoundError


@storefront.aggregate
class Category:
    """A grouping of products. ``product_count`` is maintained by event handlers."""

    name: String(required=True, max_length=100)
    slug: String(required=True, max_length=120)
    parent_id: Identifier()
    product_count: Integer(default=0, min_value=0)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(cls, name, slug, parent_id=None):
        now = datetime.now(UTC)
        category = cls(
            name=name,
            slug=slug,
            parent_id=parent_id,
            product_count=0,
            created_at=now,
            updated_at=now,
        )
        category.raise_(
            CategoryCreated(
                category_id=str(category.id),
                name=name,
                slug=slug,
                parent_id=str(parent_id) if parent_id else None,
            )
        )
        return category

    def update(self, name=None, slug=None, parent_id=None):
        if parent_id is not None and str(parent_id) == str(self.id):
            raise DomainValidationError({"parent_id": ["A category cannot be its own parent"]})

        if name is not None:
            self.name = name
            self.slug = slug or self.slug
        if parent_id is not None:
            self.parent_id = parent_id or None
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CategoryUpdated(
                category_id=str(self.id),
                name=self.name,
                slug=self.slug,
                parent_id=str(self.parent_id) if self.parent_id else None,
            )
        )

    def set_product_count(self, count):
        self.product_count = count
        self.updated_at = datetime.now(UTC)


def load_category(category_id) -> Category:
    try:
        return current_domain.repository_for(Category).get(category_id)
    except ObjectNotFoundError:
        raise NotFoundError({"category_id": [f"Category {category_id} not found"]}) from None


@storefront.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=100)
    parent_id: Identifier()


@storefront.command(part_of="Category")
class UpdateCategory:
    category_id: Identifier(required=True)
    name: String(max_length=100)
    parent_id: String(max_length=50)  # empty string moves the category to the top level


@storefront.command(part_of="Category")
class DeleteCategory:
    category_id: Identifier(required=True)


@storefront.command_handler(part_of=Category)
class ManageCategoriesHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        from storefront.catalogue.lookup import slugify

        if command.parent_id:
            load_category(command.parent_id)

        category = Category.create(
            name=command.name,
            slug=slugify(command.name),
            parent_id=command.parent_id,
        )
        current_domain.repository_for(Category).add(category)
        return str(category.id)

    @handle(UpdateCategory)
    def update_category(self, command):
        from storefront.catalogue.lookup import slugify

        category = load_category(command.category_id)
        if command.parent_id:
            load_category(command.parent_id)

        category.update(
            name=command.name,
            slug=slugify(command.name) if command.name else None,
            parent_id=command.parent_id,
        )
        current_domain.repository_for(Category).add(category)

    @handle(DeleteCategory)
    def delete_category(self, command):
        """Delete an empty leaf category; children and products must be moved first."""
        from storefront.catalogue.lookup import ProductLookup

        repo = current_domain.repository_for(Category)
        category = load_category(command.category_id)

        children = repo._dao.query.filter(parent_id=str(category.id)).limit(None).all().total
        if children:
            raise DomainValidationError(
                {"category_id": ["Cannot delete a category with child categories, move or delete them first"]}
            )
        if ProductLookup().count_in_category(category.id):
            raise DomainValidationError(
                {"category_id": ["Cannot delete a category with products, move or delete them first"]}
            )

        repo._dao.delete(category)
        logger.info("Category deleted", category_id=str(category.id))
