"""Courier adapter abstraction: pluggable on-demand delivery integration."""

import os

from delivery.courier.port import Courier

_courier_instance: Courier | None = None


def get_courier() -> Courier:
    """Return the configured courier adapter (singleton).

    Uses FakeCourier by default. In production, set COURIER_ADAPTER=uber
    together with the UBER_* credentials.
    """
    global _courier_instance
    if _courier_instance is None:
        adapter = os.environ.get("COURIER_ADAPTER", "fake")
        if adapter == "fake":
            from delivery.courier.fake_adapter import FakeCourier

            _courier_instance = FakeCourier()
        elif adapter == "uber":
            from delivery.courier.uber_direct import UberDirectCourier

            _courier_instance = UberDirectCourier.from_env()
        else:
            raise ValueError(f"Unknown courier adapter: {adapter}")
    return _courier_instance


def set_courier(courier: Courier) -> None:
    """Override the active courier (useful for tests)."""
    global _courier_instance
    _courier_instance = courier


def reset_courier() -> None:
    """Reset the courier singleton (useful for testing)."""
    global _courier_instance
    _courier_instance = None
