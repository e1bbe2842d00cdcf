"""Application tests for product and ingredient commands."""

import pytest
from catalogue.ingredient.ingredient import Ingredient
from catalogue.ingredient.management import AddIngredient, AdjustIngredientStock, UpdateIngredient
from catalogue.product.lifecycle import ActivateProduct, DeactivateProduct, list_products
from catalogue.product.management import CreateProduct, UpdateProduct
from catalogue.product.product import Product
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _create_product(name="Trufas", price=45.0, **kwargs):
    return current_domain.process(CreateProduct(name=name, price=price, **kwargs), asynchronous=False)


class TestProductCommands:
    def test_create_persists_product(self):
        product_id = _create_product(category="doces")
        product = current_domain.repository_for(Product).get(product_id)
        assert product.name == "Trufas"
        assert product.category == "doces"
        assert product.active is True

    def test_update_product(self):
        product_id = _create_product()
        current_domain.process(UpdateProduct(product_id=product_id, price=50.0), asynchronous=False)
        product = current_domain.repository_for(Product).get(product_id)
        assert product.price == 50.0
        assert product.name == "Trufas"

    def test_update_unknown_product(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(UpdateProduct(product_id="missing", price=50.0), asynchronous=False)


class TestProductListing:
    def test_deactivated_products_leave_the_shelf(self):
        trufas = _create_product(name="Trufas")
        _create_product(name="Bolo de cenoura", price=60.0)

        current_domain.process(DeactivateProduct(product_id=trufas), asynchronous=False)

        assert [p.name for p in list_products()] == ["Bolo de cenoura"]
        assert [p.name for p in list_products(include_inactive=True)] == ["Bolo de cenoura", "Trufas"]

    def test_reactivated_product_is_listed_again(self):
        product_id = _create_product()
        current_domain.process(DeactivateProduct(product_id=product_id), asynchronous=False)
        current_domain.process(ActivateProduct(product_id=product_id), asynchronous=False)
        assert [p.name for p in list_products()] == ["Trufas"]

    def test_listing_is_not_cut_at_one_page(self):
        repo = current_domain.repository_for(Product)
        for number in range(105):
            repo.add(Product.create(name=f"Brigadeiro {number:03d}", price=3.5))

        products = list_products()
        assert len(products) == 105
        assert products[-1].name == "Brigadeiro 104"


class TestIngredientCommands:
    def test_add_and_adjust_stock(self):
        ingredient_id = current_domain.process(
            AddIngredient(name="Farinha", quantity=5.0, unit="kg"), asynchronous=False
        )
        current_domain.process(AdjustIngredientStock(ingredient_id=ingredient_id, delta=-1.5), asynchronous=False)

        ingredient = current_domain.repository_for(Ingredient).get(ingredient_id)
        assert ingredient.quantity == 3.5
        assert ingredient.unit == "kg"

    def test_overdraw_is_rejected_and_stock_kept(self):
        ingredient_id = current_domain.process(AddIngredient(name="Ovos", quantity=6, unit="un"), asynchronous=False)
        with pytest.raises(ValidationError):
            current_domain.process(AdjustIngredientStock(ingredient_id=ingredient_id, delta=-10), asynchronous=False)

        ingredient = current_domain.repository_for(Ingredient).get(ingredient_id)
        assert ingredient.quantity == 6

    def test_update_ingredient_name(self):
        ingredient_id = current_domain.process(AddIngredient(name="Acucar"), asynchronous=False)
        current_domain.process(UpdateIngredient(ingredient_id=ingredient_id, name="Açúcar"), asynchronous=False)
        assert current_domain.repository_for(Ingredient).get(ingredient_id).name == "Açúcar"
