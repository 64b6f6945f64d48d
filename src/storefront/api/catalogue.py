"""FastAPI endpoints for products and categories."""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.api.dependencies import require_admin
from storefront.api.schemas import (
    AdjustStockRequest,
    CategoryIdResponse,
    CreateCategoryRequest,
    CreateProductRequest,
    ProductIdResponse,
    StatusResponse,
    UpdateCategoryRequest,
    UpdateProductDetailsRequest,
    UpdateProductPriceRequest,
)
from storefront.api.serializers import category_to_dict, product_to_dict, related_product_to_dict
from storefront.catalogue.category import CreateCategory, DeleteCategory, UpdateCategory
from storefront.catalogue.lookup import ProductLookup
from storefront.catalogue.management import (
    CreateProduct,
    DeleteProduct,
    UpdateProductDetails,
    UpdateProductPrice,
)
from storefront.catalogue.queries import get_category, list_categories, list_products, related_products
from storefront.inventory.adjustment import AdjustStock

product_router = APIRouter(prefix="/products", tags=["products"])
category_router = APIRouter(prefix="/categories", tags=["categories"])


# --- Product endpoints ---


@product_router.get("")
async def get_products(
    category_id: str | None = None,
    search: str | None = None,
    in_stock: bool | None = None,
    page: int = 1,
    limit: int = 20,
) -> dict:
    result = list_products(category_id=category_id, search=search, in_stock=in_stock, page=page, limit=limit)
    return {**result, "products": [product_to_dict(p) for p in result["products"]]}


@product_router.get("/{product_id}")
async def get_product(product_id: str) -> dict:
    """Product detail with a few other products from the same category."""
    product = ProductLookup().get_product(product_id)
    return {
        **product_to_dict(product),
        "related_products": [related_product_to_dict(p) for p in related_products(product)],
    }


@product_router.post("", status_code=201, response_model=ProductIdResponse, dependencies=[Depends(require_admin)])
async def create_product(body: CreateProductRequest) -> ProductIdResponse:
    command = CreateProduct(
        name=body.name,
        base_price=body.base_price,
        discount_percent=body.discount_percent,
        quantity=body.quantity,
        brand=body.brand,
        description=body.description,
        category_id=body.category_id,
        specifications=json.dumps(body.specifications) if body.specifications else None,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.put("/{product_id}", response_model=StatusResponse, dependencies=[Depends(require_admin)])
async def update_product_details(product_id: str, body: UpdateProductDetailsRequest) -> StatusResponse:
    command = UpdateProductDetails(
        product_id=product_id,
        name=body.name,
        brand=body.brand,
        description=body.description,
        category_id=body.category_id,
        specifications=json.dumps(body.specifications) if body.specifications is not None else None,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/price", response_model=StatusResponse, dependencies=[Depends(require_admin)])
async def update_product_price(product_id: str, body: UpdateProductPriceRequest) -> StatusResponse:
    command = UpdateProductPrice(
        product_id=product_id,
        base_price=body.base_price,
        discount_percent=body.discount_percent,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.post("/{product_id}/stock", dependencies=[Depends(require_admin)])
async def adjust_product_stock(product_id: str, body: AdjustStockRequest) -> dict:
    command = AdjustStock(product_id=product_id, delta=body.delta, reason=body.reason)
    quantity = current_domain.process(command, asynchronous=False)
    return {"product_id": product_id, "quantity": quantity}


@product_router.delete("/{product_id}", response_model=StatusResponse, dependencies=[Depends(require_admin)])
async def delete_product(product_id: str) -> StatusResponse:
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return StatusResponse(status="deleted")


# --- Category endpoints ---


@category_router.get("")
async def get_categories(parent_id: str | None = None) -> list[dict]:
    return [category_to_dict(c) for c in list_categories(parent_id=parent_id)]


@category_router.get("/{category_id}")
async def get_category_detail(category_id: str) -> dict:
    return category_to_dict(get_category(category_id))


@category_router.post("", status_code=201, response_model=CategoryIdResponse, dependencies=[Depends(require_admin)])
async def create_category(body: CreateCategoryRequest) -> CategoryIdResponse:
    command = CreateCategory(name=body.name, parent_id=body.parent_id)
    result = current_domain.process(command, asynchronous=False)
    return CategoryIdResponse(category_id=result)


@category_router.put("/{category_id}", response_model=StatusResponse, dependencies=[Depends(require_admin)])
async def update_category(category_id: str, body: UpdateCategoryRequest) -> StatusResponse:
    command = UpdateCategory(category_id=category_id, name=body.name, parent_id=body.parent_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@category_router.delete("/{category_id}", response_model=StatusResponse, dependencies=[Depends(require_admin)])
async def delete_category(category_id: str) -> StatusResponse:
    current_domain.process(DeleteCategory(category_id=category_id), asynchronous=False)
    return StatusResponse(status="deleted")
