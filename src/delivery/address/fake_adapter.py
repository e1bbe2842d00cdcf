"""In-memory address lookup for development and testing."""

from delivery.address.port import AddressLookup, AddressLookupError, ResolvedAddress

_DEFAULT_DIRECTORY = {
    "03878020": ResolvedAddress(
        postal_code="03878020",
        street="Rua dos Argentinos",
        district="Vila Rio Branco",
        city="São Paulo",
        region="SP",
    ),
    "01310100": ResolvedAddress(
        postal_code="01310100",
        street="Avenida Paulista",
        district="Bela Vista",
        city="São Paulo",
        region="SP",
    ),
}


class FakeAddressLookup(AddressLookup):
    """Lookup backed by a dict. Unknown codes resolve to None."""

    def __init__(self, directory: dict[str, ResolvedAddress] | None = None) -> None:
        self.directory = dict(_DEFAULT_DIRECTORY if directory is None else directory)
        self.available = True
        self.calls: list[str] = []

    def configure(self, available: bool = True) -> None:
        self.available = available

    def register(self, address: ResolvedAddress) -> None:
        self.directory[address.postal_code] = address

    def lookup(self, postal_code: str) -> ResolvedAddress | None:
        self.calls.append(postal_code)
        if not self.available:
            raise AddressLookupError("Address lookup unavailable")
        return self.directory.get(postal_code)
