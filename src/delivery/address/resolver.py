"""Address Resolver: postal code in, canonical street/district/city/region out."""

import re

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError

from delivery.address.port import AddressLookup, ResolvedAddress

logger = structlog.get_logger(__name__)


class InvalidPostalCode(ValidationError):
    def __init__(self, postal_code: str) -> None:
        super().__init__({"postal_code": [f"Postal code must have exactly 8 digits: {postal_code!r}"]})
        self.postal_code = postal_code


class AddressNotFound(ObjectNotFoundError):
    def __init__(self, postal_code: str) -> None:
        super().__init__({"postal_code": [f"No address found for postal code {postal_code}"]})
        self.postal_code = postal_code


def clean_postal_code(postal_code: str) -> str:
    """Strip everything but digits; raise unless exactly 8 remain."""
    digits = re.sub(r"\D", "", postal_code or "")
    if len(digits) != 8:
        raise InvalidPostalCode(postal_code)
    return digits


class AddressResolver:
    def __init__(self, lookup: AddressLookup) -> None:
        self.lookup = lookup

    def resolve(self, postal_code: str) -> ResolvedAddress:
        digits = clean_postal_code(postal_code)

        address = self.lookup.lookup(digits)
        if address is None:
            logger.info("address_not_found", postal_code=digits)
            raise AddressNotFound(digits)

        logger.debug("address_resolved", postal_code=digits, city=address.city)
        return address
