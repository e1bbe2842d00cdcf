"""Product shelf lifecycle: commands and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product
from shared.queries import fetch_all


@catalogue.command(part_of="Product")
class DeactivateProduct:
    product_id: Identifier(required=True)


@catalogue.command(part_of="Product")
class ActivateProduct:
    product_id: Identifier(required=True)


@catalogue.command_handler(part_of=Product)
class ManageLifecycleHandler:
    @handle(DeactivateProduct)
    def deactivate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.deactivate()
        repo.add(product)

    @handle(ActivateProduct)
    def activate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.activate()
        repo.add(product)


def list_products(include_inactive=False):
    """Products on the shelf, by name. Staff may ask for inactive ones too."""
    products = fetch_all(Product) if include_inactive else fetch_all(Product, active=True)
    return sorted(products, key=lambda p: p.name.lower())
