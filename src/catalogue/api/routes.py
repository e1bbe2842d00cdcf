"""FastAPI endpoints for the Catalogue domain."""

from fastapi import APIRouter
from protean.utils.globals import current_domain

from catalogue.api.schemas import (
    AddIngredientRequest,
    AdjustStockRequest,
    CreateProductRequest,
    IngredientIdResponse,
    IngredientListResponse,
    IngredientResponse,
    ProductIdResponse,
    ProductListResponse,
    ProductResponse,
    StatusResponse,
    UpdateIngredientRequest,
    UpdateProductRequest,
)
from catalogue.ingredient.ingredient import Ingredient
from catalogue.ingredient.management import AddIngredient, AdjustIngredientStock, UpdateIngredient
from catalogue.product.lifecycle import ActivateProduct, DeactivateProduct, list_products
from catalogue.product.management import CreateProduct, UpdateProduct
from catalogue.product.product import Product
from shared.queries import fetch_all

product_router = APIRouter(prefix="/products", tags=["products"])
ingredient_router = APIRouter(prefix="/ingredients", tags=["ingredients"])


def _product_response(product) -> ProductResponse:
    return ProductResponse(
        product_id=str(product.id),
        name=product.name,
        description=product.description,
        category=product.category,
        price=product.price,
        image_ref=product.image_ref,
        active=product.active,
    )


def _ingredient_response(ingredient) -> IngredientResponse:
    return IngredientResponse(
        ingredient_id=str(ingredient.id),
        name=ingredient.name,
        quantity=ingredient.quantity,
        unit=ingredient.unit,
    )


# --- Product endpoints ---


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def create_product(body: CreateProductRequest) -> ProductIdResponse:
    command = CreateProduct(
        name=body.name,
        description=body.description,
        category=body.category,
        price=body.price,
        image_ref=body.image_ref,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.get("", response_model=ProductListResponse)
async def get_products(include_inactive: bool = False) -> ProductListResponse:
    products = list_products(include_inactive=include_inactive)
    return ProductListResponse(products=[_product_response(p) for p in products])


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    product = current_domain.repository_for(Product).get(product_id)
    return _product_response(product)


@product_router.put("/{product_id}", response_model=StatusResponse)
async def update_product(product_id: str, body: UpdateProductRequest) -> StatusResponse:
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        description=body.description,
        category=body.category,
        price=body.price,
        image_ref=body.image_ref,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def deactivate_product(product_id: str) -> StatusResponse:
    current_domain.process(DeactivateProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/activate", response_model=StatusResponse)
async def activate_product(product_id: str) -> StatusResponse:
    current_domain.process(ActivateProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


# --- Ingredient endpoints ---


@ingredient_router.post("", status_code=201, response_model=IngredientIdResponse)
async def add_ingredient(body: AddIngredientRequest) -> IngredientIdResponse:
    command = AddIngredient(name=body.name, quantity=body.quantity, unit=body.unit)
    result = current_domain.process(command, asynchronous=False)
    return IngredientIdResponse(ingredient_id=result)


@ingredient_router.get("", response_model=IngredientListResponse)
async def get_ingredients() -> IngredientListResponse:
    ingredients = fetch_all(Ingredient)
    ingredients = sorted(ingredients, key=lambda i: i.name.lower())
    return IngredientListResponse(ingredients=[_ingredient_response(i) for i in ingredients])


@ingredient_router.put("/{ingredient_id}", response_model=StatusResponse)
async def update_ingredient(ingredient_id: str, body: UpdateIngredientRequest) -> StatusResponse:
    command = UpdateIngredient(ingredient_id=ingredient_id, name=body.name, unit=body.unit)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@ingredient_router.put("/{ingredient_id}/stock", response_model=StatusResponse)
async def adjust_ingredient_stock(ingredient_id: str, body: AdjustStockRequest) -> StatusResponse:
    command = AdjustIngredientStock(ingredient_id=ingredient_id, delta=body.delta)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
