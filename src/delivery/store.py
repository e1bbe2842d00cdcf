"""The bakery's fixed pickup identity: where couriers collect orders."""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Location:
    """A postal address, optionally pinned to coordinates."""

    street_address: str
    city: str
    region: str
    postal_code: str
    country: str = "BR"
    latitude: float | None = None
    longitude: float | None = None


@dataclass(frozen=True)
class Store:
    name: str
    phone: str
    location: Location


def load_store() -> Store:
    """Build the pickup identity from STORE_* environment variables."""
    return Store(
        name=os.environ.get("STORE_NAME", "Tarsi Sweet"),
        phone=os.environ.get("STORE_PHONE", "+5511980732523"),
        location=Location(
            street_address=os.environ.get("STORE_STREET", "Rua dos Argentinos, 127"),
            city=os.environ.get("STORE_CITY", "São Paulo"),
            region=os.environ.get("STORE_REGION", "SP"),
            postal_code=os.environ.get("STORE_POSTAL_CODE", "03878-020"),
            country=os.environ.get("STORE_COUNTRY", "BR"),
            latitude=float(os.environ.get("STORE_LATITUDE", "-23.50941175264895")),
            longitude=float(os.environ.get("STORE_LONGITUDE", "-46.49309144575759")),
        ),
    )
