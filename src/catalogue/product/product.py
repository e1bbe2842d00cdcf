"""Product aggregate: an item on the bakery's shelf.

Products are never removed; staff deactivate them instead so past orders
keep pointing at a real record and the product can be brought back later.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, String, Text

from catalogue.domain import catalogue
from catalogue.product.events import (
    ProductActivated,
    ProductCreated,
    ProductDeactivated,
    ProductUpdated,
)


@catalogue.aggregate
class Product:
    """Product aggregate root."""

    name: String(required=True, max_length=255)
    description: Text()
    category: String(max_length=100)
    price: Float(required=True)
    image_ref: String(max_length=500)
    active: Boolean(default=True)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def price_must_be_positive(self):
        if self.price is not None and self.price <= 0:
            raise ValidationError({"price": ["Price must be greater than zero"]})

    @classmethod
    def create(cls, name, price, description=None, category=None, image_ref=None):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            price=price,
            description=description,
            category=category,
            image_ref=image_ref,
            active=True,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=name,
                category=category,
                price=price,
                created_at=now,
            )
        )
        return product

    def update(self, name=None, description=None, category=None, price=None, image_ref=None):
        """Apply the staff's edits. Fields left as None are kept."""
        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if category is not None:
            self.category = category
        if price is not None:
            self.price = price
        if image_ref is not None:
            self.image_ref = image_ref

        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductUpdated(
                product_id=self.id,
                name=self.name,
                category=self.category,
                price=self.price,
            )
        )

    def deactivate(self):
        if not self.active:
            raise ValidationError({"active": ["Product is already inactive"]})

        self.active = False
        self.updated_at = datetime.now(UTC)
        self.raise_(ProductDeactivated(product_id=self.id, deactivated_at=self.updated_at))

    def activate(self):
        if self.active:
            raise ValidationError({"active": ["Product is already active"]})

        self.active = True
        self.updated_at = datetime.now(UTC)
        self.raise_(ProductActivated(product_id=self.id, activated_at=self.updated_at))
