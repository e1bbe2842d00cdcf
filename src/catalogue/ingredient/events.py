"""Domain events for the Ingredient aggregate."""

from protean.fields import Float, Identifier, String

from catalogue.domain import catalogue


@catalogue.event(part_of="Ingredient")
class IngredientAdded:
    """A new ingredient started being tracked in stock."""

    __version__ = 1

    ingredient_id: Identifier(required=True)
    name: String(required=True)
    quantity: Float(required=True)
    unit: String(required=True)


@catalogue.event(part_of="Ingredient")
class IngredientStockAdjusted:
    """Stock of an ingredient was replenished or consumed."""

    __version__ = 1

    ingredient_id: Identifier(required=True)
    previous_quantity: Float(required=True)
    new_quantity: Float(required=True)
    unit: String(required=True)
