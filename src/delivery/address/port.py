"""Address lookup port (abstract interface).

Adapters turn an 8-digit postal code into the canonical street, district,
city and region. House number and complement never come from a lookup.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from delivery.store import Location


@dataclass(frozen=True)
class ResolvedAddress:
    postal_code: str
    street: str
    district: str
    city: str
    region: str


@dataclass(frozen=True)
class DeliveryAddress:
    """A resolved address completed with what only the customer knows."""

    postal_code: str
    street: str
    number: str
    district: str = ""
    city: str = ""
    region: str = ""
    complement: str = ""

    @classmethod
    def from_resolved(cls, resolved: ResolvedAddress, number: str, complement: str = "") -> "DeliveryAddress":
        return cls(
            postal_code=resolved.postal_code,
            street=resolved.street,
            number=number,
            district=resolved.district,
            city=resolved.city,
            region=resolved.region,
            complement=complement,
        )

    @property
    def street_line(self) -> str:
        line = f"{self.street}, {self.number}"
        if self.complement:
            line = f"{line} - {self.complement}"
        if self.district:
            line = f"{line}, {self.district}"
        return line

    def to_location(self) -> Location:
        return Location(
            street_address=self.street_line,
            city=self.city,
            region=self.region,
            postal_code=self.postal_code,
        )


class AddressLookupError(Exception):
    """The lookup provider could not be reached or answered garbage."""


class AddressLookup(ABC):
    """Abstract postal-code lookup."""

    @abstractmethod
    def lookup(self, postal_code: str) -> ResolvedAddress | None:
        """Resolve an 8-digit postal code.

        Returns None when the provider reports the code as unknown.
        Raises AddressLookupError on transport or payload failures.
        """
        ...
