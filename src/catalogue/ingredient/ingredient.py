"""Ingredient aggregate: raw stock kept in the bakery's pantry."""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, String

from catalogue.domain import catalogue
from catalogue.ingredient.events import IngredientAdded, IngredientStockAdjusted


class StockUnit(Enum):
    GRAM = "g"
    KILOGRAM = "kg"
    MILLILITRE = "ml"
    LITRE = "l"
    UNIT = "un"


@catalogue.aggregate
class Ingredient:
    name: String(required=True, max_length=255)
    quantity: Float(default=0.0)
    unit: String(choices=StockUnit, default=StockUnit.GRAM.value)
    updated_at: DateTime()

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.quantity is not None and self.quantity < 0:
            raise ValidationError({"quantity": ["Stock cannot be negative"]})

    @classmethod
    def add(cls, name, quantity=0.0, unit=StockUnit.GRAM.value):
        now = datetime.now(UTC)
        ingredient = cls(name=name, quantity=quantity, unit=unit, updated_at=now)
        ingredient.raise_(
            IngredientAdded(
                ingredient_id=ingredient.id,
                name=name,
                quantity=quantity,
                unit=unit,
            )
        )
        return ingredient

    def rename(self, name=None, unit=None):
        if name is not None:
            self.name = name
        if unit is not None:
            self.unit = unit
        self.updated_at = datetime.now(UTC)

    def adjust_stock(self, delta):
        """Add (positive delta) or consume (negative delta) stock."""
        if self.quantity + delta < 0:
            raise ValidationError(
                {"quantity": [f"Only {self.quantity} {self.unit} of {self.name} in stock"]}
            )

        previous = self.quantity
        self.quantity = round(self.quantity + delta, 3)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            IngredientStockAdjusted(
                ingredient_id=self.id,
                previous_quantity=previous,
                new_quantity=self.quantity,
                unit=self.unit,
            )
        )
