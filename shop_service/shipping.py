# shop_service/shipping.py
"""
RajaOngkir client.

Thin async wrapper over the RajaOngkir starter API used to list destination
cities and quote courier costs for a destination and parcel weight.
"""

import logging
from typing import List, Optional

import httpx

from shop_service.config import (
    RAJAONGKIR_API_KEY,
    RAJAONGKIR_BASE_URL,
    RAJAONGKIR_COURIERS,
    RAJAONGKIR_ORIGIN,
    RAJAONGKIR_TIMEOUT,
)
from shop_service.db.schemas import City, CourierOption

logger = logging.getLogger(__name__)


class ShippingError(Exception):
    """Raised when RajaOngkir is unreachable or answers with an error."""


class RajaOngkirClient:

    def __init__(
        self,
        api_key: str = RAJAONGKIR_API_KEY,
        base_url: str = RAJAONGKIR_BASE_URL,
        origin: str = RAJAONGKIR_ORIGIN,
        couriers: Optional[List[str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.origin = origin
        self.couriers = couriers or RAJAONGKIR_COURIERS
        self._http_client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"key": api_key},
            timeout=RAJAONGKIR_TIMEOUT,
            transport=transport,
        )

    async def close(self) -> None:
        await self._http_client.aclose()

    async def _request(self, method: str, path: str, data: Optional[dict] = None) -> list:
        try:
            response = await self._http_client.request(method, path, data=data)
        except httpx.HTTPError as e:
            logger.error("RajaOngkir %s %s failed: %s", method, path, e)
            raise ShippingError("Shipping service is unavailable") from e

        try:
            body = response.json()["rajaongkir"]
        except (ValueError, KeyError, TypeError) as e:
            logger.error("RajaOngkir %s %s answered %s: %s", method, path, response.status_code, response.text)
            raise ShippingError("Unexpected response from shipping service") from e

        status = body.get("status", {}) if isinstance(body, dict) else None
        if not isinstance(status, dict):
            logger.error("RajaOngkir %s %s answered %s: %s", method, path, response.status_code, response.text)
            raise ShippingError("Unexpected response from shipping service")
        code = status.get("code", response.status_code)
        if response.status_code >= 400 or (isinstance(code, int) and code >= 400):
            message = status.get("description") or response.text
            logger.error("RajaOngkir %s %s answered %s: %s", method, path, response.status_code, message)
            raise ShippingError(message)

        results = body.get("results") or []
        if not isinstance(results, list):
            raise ShippingError("Unexpected response from shipping service")
        return results

    async def get_cities(self) -> List[City]:
        results = await self._request("GET", "/city")
        return [City(value=str(city["city_id"]), label=city["city_name"]) for city in results]

    async def get_costs(self, destination: str, weight: int, courier: Optional[str] = None) -> List[CourierOption]:
        """
        Quote every service of the requested courier(s).

        The starter plan accepts one courier per request, so each configured
        courier is queried in turn. Services without a cost entry are skipped.
        """
        options = []
        for code in [courier] if courier else self.couriers:
            results = await self._request(
                "POST",
                "/cost",
                data={
                    "origin": self.origin,
                    "destination": destination,
                    "weight": weight,
                    "courier": code,
                },
            )
            for result in results:
                for service in result.get("costs", []):
                    costs = service.get("cost") or []
                    if not costs:
                        continue
                    options.append(CourierOption(
                        name=f"{result['code'].upper()} {service['service']}",
                        cost=costs[0]["value"],
                        etd=costs[0].get("etd") or None,
                    ))
        return options


async def get_shipping_client():
    client = RajaOngkirClient()
    try:
        yield client
    finally:
        await client.close()
