"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, String

from catalogue.domain import catalogue


@catalogue.event(part_of="Product")
class ProductCreated:
    """A new product was added to the shelf."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    category: String()
    price: Float(required=True)
    created_at: DateTime(required=True)


@catalogue.event(part_of="Product")
class ProductUpdated:
    """Staff edited a product's name, description, category, price or image."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    category: String()
    price: Float(required=True)


@catalogue.event(part_of="Product")
class ProductDeactivated:
    """A product was taken off the shelf (soft delete)."""

    __version__ = 1

    product_id: Identifier(required=True)
    deactivated_at: DateTime(required=True)


@catalogue.event(part_of="Product")
class ProductActivated:
    """A previously deactivated product is back on sale."""

    __version__ = 1

    product_id: Identifier(required=True)
    activated_at: DateTime(required=True)
