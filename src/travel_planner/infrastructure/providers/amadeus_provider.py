"""
Provedor Amadeus API
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError as PydanticValidationError

from ...domain.errors import AuthFailure, NotFound, UpstreamError
from ...domain.models import AirportSuggestion, Credential, FlightDestination, FlightOffer
from ..config import Config

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

FLIGHT_OFFERS = "flight-offers"
FLIGHT_DESTINATIONS = "flight-destinations"
AIRPORT_SUGGESTIONS = "airport-suggestions"


class AmadeusProvider:
    """Provedor de voos via Amadeus API"""

    name = "Amadeus"

    # Busca sempre para um único adulto
    ADULTS = 1
    SUGGESTION_LIMIT = 5

    def __init__(self, config: Optional[Config] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._config = config or Config()
        self._base_url = self._config.get_amadeus_base_url()
        self._transport = transport

    async def search_one_way(
        self, origin: str, destination: str, departure_date: date, token: Credential
    ) -> List[FlightOffer]:
        """Busca ofertas de ida"""
        params = self._build_search_params(origin, destination, departure_date)
        data = await self._get(FLIGHT_OFFERS, "/v2/shopping/flight-offers", params, token)
        offers = self._parse_items(FLIGHT_OFFERS, data, FlightOffer)
        if not offers:
            raise NotFound(FLIGHT_OFFERS, "No flights found for the given criteria")
        return offers

    async def search_return_candidates(
        self, origin: str, departure_date: date, token: Credential
    ) -> List[FlightDestination]:
        """Busca destinos a partir do destino da ida (candidatos de volta)"""
        params = {"origin": origin, "departureDate": departure_date.isoformat()}
        data = await self._get(
            FLIGHT_DESTINATIONS, "/v1/shopping/flight-destinations", params, token, not_found_on_404=True
        )
        candidates = self._parse_items(FLIGHT_DESTINATIONS, data, FlightDestination)
        if not candidates:
            raise NotFound(FLIGHT_DESTINATIONS, "No return flights found for the given criteria")
        return candidates

    async def suggest_airports(self, keyword: str, token: Credential) -> List[AirportSuggestion]:
        """Sugestões de aeroportos (autocompletar)"""
        params = {
            "subType": "AIRPORT",
            "keyword": keyword,
            "page[limit]": self.SUGGESTION_LIMIT,
        }
        data = await self._get(AIRPORT_SUGGESTIONS, "/v1/reference-data/locations", params, token)
        return self._parse_items(AIRPORT_SUGGESTIONS, data, AirportSuggestion)

    def _build_search_params(self, origin: str, destination: str, departure_date: date) -> dict:
        """Constrói parâmetros da requisição"""
        params = {
            "originLocationCode": origin,
            "destinationLocationCode": destination,
            "departureDate": departure_date.isoformat(),
            "adults": self.ADULTS,
            "max": self._config.MAX_OFFERS,
        }
        if self._config.DEFAULT_CURRENCY:
            params["currencyCode"] = self._config.DEFAULT_CURRENCY
        return params

    async def _get(
        self,
        operation: str,
        path: str,
        params: Dict[str, Any],
        token: Credential,
        not_found_on_404: bool = False,
    ) -> Any:
        headers = {"Authorization": f"Bearer {token.token}"}
        logger.debug("GET %s params=%s", path, params)

        async with httpx.AsyncClient(timeout=self._config.REQUEST_TIMEOUT, transport=self._transport) as client:
            try:
                response = await client.get(f"{self._base_url}{path}", params=params, headers=headers)
            except httpx.TimeoutException as e:
                logger.error("%s timed out", operation)
                raise UpstreamError(operation, "request timed out") from e
            except httpx.HTTPError as e:
                logger.error("%s transport error: %s", operation, e)
                raise UpstreamError(operation, f"transport error: {e}") from e

        if response.status_code == 401:
            raise AuthFailure(f"{operation}: access token rejected", status=401)
        if response.status_code == 404 and not_found_on_404:
            raise NotFound(operation)
        if not response.is_success:
            logger.error("%s failed with status %s", operation, response.status_code)
            raise UpstreamError(operation, f"unexpected status {response.status_code}", status=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(operation, "response body is not valid JSON", status=response.status_code) from e

    def _parse_items(self, operation: str, data: Any, model: Type[ModelT]) -> List[ModelT]:
        """Converte o campo "data" da resposta nos modelos de domínio"""
        if not isinstance(data, dict):
            raise UpstreamError(operation, "unexpected response shape")
        items = data.get("data")
        if not isinstance(items, list):
            raise UpstreamError(operation, "unexpected response shape")
        try:
            return [model.model_validate(item) for item in items]
        except PydanticValidationError as e:
            raise UpstreamError(operation, f"malformed item in response: {e.error_count()} error(s)") from e
