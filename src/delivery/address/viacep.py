"""ViaCEP adapter: Brazilian postal-code (CEP) lookup over HTTP."""

import httpx
import structlog

from delivery.address.port import AddressLookup, AddressLookupError, ResolvedAddress

logger = structlog.get_logger(__name__)

VIACEP_BASE_URL = "https://viacep.com.br/ws"


class ViaCepLookup(AddressLookup):
    def __init__(self, client: httpx.Client | None = None, timeout: float = 10.0) -> None:
        self._client = client or httpx.Client(base_url=VIACEP_BASE_URL, timeout=timeout)

    def lookup(self, postal_code: str) -> ResolvedAddress | None:
        try:
            response = self._client.get(f"/{postal_code}/json/")
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("address_lookup_failed", postal_code=postal_code, error=str(exc))
            raise AddressLookupError(f"Address lookup failed for {postal_code}") from exc

        if not isinstance(payload, dict):
            raise AddressLookupError(f"Unexpected address payload for {postal_code}")

        # ViaCEP answers 200 with {"erro": true} for unknown codes
        if payload.get("erro") in (True, "true"):
            return None

        return ResolvedAddress(
            postal_code=postal_code,
            street=payload.get("logradouro") or "",
            district=payload.get("bairro") or "",
            city=payload.get("localidade") or "",
            region=payload.get("uf") or "",
        )

    def close(self) -> None:
        self._client.close()
