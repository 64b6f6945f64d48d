"""Product catalogue administration — commands and handler."""

import json

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category_counts import refresh_product_count
from storefront.catalogue.lookup import ProductLookup
from storefront.catalogue.product import Product
from storefront.domain import storefront, logger


@storefront.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=200)
    base_price: Float(required=True, min_value=0.0)
    discount_percent: Float(default=0.0, min_value=0.0, max_value=100.0)
    quantity: Integer(default=0, min_value=0)
    brand: String(max_length=100)
    description: Text()
    category_id: Identifier()
    specifications: Text()  # JSON object


@storefront.command(part_of="Product")
class UpdateProductDetails:
    product_id: Identifier(required=True)
    name: String(max_length=200)
    brand: String(max_length=100)
    description: Text()
    category_id: Identifier()
    specifications: Text()  # JSON object


@storefront.command(part_of="Product")
class UpdateProductPrice:
    product_id: Identifier(required=True)
    base_price: Float(min_value=0.0)
    discount_percent: Float(min_value=0.0, max_value=100.0)


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id: Identifier(required=True)


@storefront.command_handler(part_of=Product)
class ManageProductsHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        lookup = ProductLookup()
        product = Product.create(
            name=command.name,
            slug=lookup.unique_slug(command.name),
            base_price=command.base_price,
            discount_percent=command.discount_percent,
            quantity=command.quantity,
            brand=command.brand,
            description=command.description,
            category_id=command.category_id,
            specifications=json.loads(command.specifications) if command.specifications else None,
        )
        lookup.repository.add(product)
        return str(product.id)

    @handle(UpdateProductDetails)
    def update_product_details(self, command):
        lookup = ProductLookup()
        product = lookup.get_product(command.product_id)

        changes = {}
        if command.name is not None:
            changes["name"] = command.name
        if command.brand is not None:
            changes["brand"] = command.brand
        if command.description is not None:
            changes["description"] = command.description
        if command.specifications is not None:
            changes["specifications"] = json.loads(command.specifications)

        if "name" in changes and changes["name"] != product.name:
            product.slug = lookup.unique_slug(changes["name"], exclude_id=product.id)
        if changes:
            product.update_details(**changes)
        if command.category_id is not None:
            product.recategorize(command.category_id)

        lookup.repository.add(product)

    @handle(UpdateProductPrice)
    def update_product_price(self, command):
        lookup = ProductLookup()
        product = lookup.get_product(command.product_id)
        product.reprice(base_price=command.base_price, discount_percent=command.discount_percent)
        lookup.repository.add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        """Delete the product. Historical order lines keep their snapshots."""
        lookup = ProductLookup()
        product = lookup.get_product(command.product_id)
        category_id = product.category_id

        current_domain.repository_for(Product)._dao.delete(product)
        refresh_product_count(category_id, exclude_product_id=product.id)

        logger.info("Product deleted", product_id=str(product.id), category_id=str(category_id))
