"""Address lookup factory.

get_lookup() picks the adapter named by the ADDRESS_LOOKUP environment
variable ("fake" by default, "viacep" for the real service).
"""

import os

from delivery.address.port import AddressLookup

_lookup_instance: AddressLookup | None = None


def get_lookup() -> AddressLookup:
    """Return the configured address lookup (singleton)."""
    global _lookup_instance
    if _lookup_instance is None:
        adapter = os.environ.get("ADDRESS_LOOKUP", "fake")
        if adapter == "fake":
            from delivery.address.fake_adapter import FakeAddressLookup

            _lookup_instance = FakeAddressLookup()
        elif adapter == "viacep":
            from delivery.address.viacep import ViaCepLookup

            _lookup_instance = ViaCepLookup()
        else:
            raise ValueError(f"Unknown address lookup adapter: {adapter}")
    return _lookup_instance


def set_lookup(lookup: AddressLookup) -> None:
    """Override the active address lookup (useful for tests)."""
    global _lookup_instance
    _lookup_instance = lookup


def reset_lookup() -> None:
    """Reset the address lookup singleton."""
    global _lookup_instance
    _lookup_instance = None
