"""Ingredient stock management: commands and handler."""

from protean import handle
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.ingredient.ingredient import Ingredient


@catalogue.command(part_of="Ingredient")
class AddIngredient:
    name: String(required=True, max_length=255)
    quantity: Float(default=0.0)
    unit: String(max_length=5, default="g")


@catalogue.command(part_of="Ingredient")
class UpdateIngredient:
    ingredient_id: Identifier(required=True)
    name: String(max_length=255)
    unit: String(max_length=5)


@catalogue.command(part_of="Ingredient")
class AdjustIngredientStock:
    ingredient_id: Identifier(required=True)
    delta: Float(required=True)


@catalogue.command_handler(part_of=Ingredient)
class ManageIngredientHandler:
    @handle(AddIngredient)
    def add_ingredient(self, command):
        ingredient = Ingredient.add(
            name=command.name,
            quantity=command.quantity or 0.0,
            unit=command.unit or "g",
        )
        current_domain.repository_for(Ingredient).add(ingredient)
        return str(ingredient.id)

    @handle(UpdateIngredient)
    def update_ingredient(self, command):
        repo = current_domain.repository_for(Ingredient)
        ingredient = repo.get(command.ingredient_id)
        ingredient.rename(name=command.name, unit=command.unit)
        repo.add(ingredient)

    @handle(AdjustIngredientStock)
    def adjust_stock(self, command):
        repo = current_domain.repository_for(Ingredient)
        ingredient = repo.get(command.ingredient_id)
        ingredient.adjust_stock(command.delta)
        repo.add(ingredient)
