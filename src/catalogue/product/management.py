"""Product creation and editing — commands and handler."""

from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product


@catalogue.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    description: Text()
    category: String(max_length=100)
    price: Float(required=True)
    image_ref: String(max_length=500)


@catalogue.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    name: String(max_length=255)
    description: Text()
    category: String(max_length=100)
    price: Float()
    image_ref: String(max_length=500)


@catalogue.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        product = Product.create(
            name=command.name,
            price=command.price,
            description=command.description,
            category=command.category,
            image_ref=command.image_ref,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update(
            name=command.name,
            description=command.description,
            category=command.category,
            price=command.price,
            image_ref=command.image_ref,
        )
        repo.add(product)
