"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- Product Request Schemas ---


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Trufas de Chocolate",
                    "description": "Caixa com 6 trufas de chocolate belga.",
                    "category": "doces",
                    "price": 45.0,
                    "image_ref": "products/trufas.jpg",
                }
            ]
        }
    }

    name: str = Field(..., max_length=255)
    description: str | None = None
    category: str | None = Field(None, max_length=100)
    price: float
    image_ref: str | None = Field(None, max_length=500)


class UpdateProductRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"price": 48.0}]}}

    name: str | None = Field(None, max_length=255)
    description: str | None = None
    category: str | None = Field(None, max_length=100)
    price: float | None = None
    image_ref: str | None = Field(None, max_length=500)


# --- Ingredient Request Schemas ---


class AddIngredientRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"name": "Farinha de trigo", "quantity": 5.0, "unit": "kg"}]}}

    name: str = Field(..., max_length=255)
    quantity: float = 0.0
    unit: str = Field("g", max_length=5)


class UpdateIngredientRequest(BaseModel):
    name: str | None = Field(None, max_length=255)
    unit: str | None = Field(None, max_length=5)


class AdjustStockRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"delta": -0.5}]}}

    delta: float


# --- Response Schemas ---


class ProductIdResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"product_id": "b2c3d4e5-f6a7-8901-bcde-f12345678901"}]}}

    product_id: str


class ProductResponse(BaseModel):
    product_id: str
    name: str
    description: str | None = None
    category: str | None = None
    price: float
    image_ref: str | None = None
    active: bool


class ProductListResponse(BaseModel):
    products: list[ProductResponse]


class IngredientIdResponse(BaseModel):
    ingredient_id: str


class IngredientResponse(BaseModel):
    ingredient_id: str
    name: str
    quantity: float
    unit: str


class IngredientListResponse(BaseModel):
    ingredients: list[IngredientResponse]


class StatusResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "ok"}]}}

    status: str = "ok"
