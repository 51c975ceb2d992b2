"""
Application Services - Casos de uso principais
"""
import logging
from typing import Any, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..domain.errors import AuthFailure, ValidationError
from ..domain.models import AirportSuggestion, FlightDestination, SearchRequest, TripType, UnifiedResult
from .interfaces import FlightProviderInterface, TokenProviderInterface
from .normalizer import normalize

logger = logging.getLogger(__name__)

# Nome do parâmetro de entrada (query string) para cada campo do modelo
REQUEST_FIELDS = {
    "origin": "origin",
    "destination": "destination",
    "departure_date": "departureDate",
    "return_date": "returnDate",
    "trip_type": "tripType",
}


def _pick(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = payload.get(key)
        if isinstance(value, str):
            value = value.strip()
        if value not in (None, ""):
            return value
    return None


def parse_request(payload: Mapping[str, Any]) -> SearchRequest:
    """Valida um payload bruto (query string / JSON) e cria o SearchRequest"""
    data = {field: _pick(payload, key, field) for field, key in REQUEST_FIELDS.items()}
    for field in ("origin", "destination", "departure_date"):
        if data[field] is None:
            raise ValidationError(REQUEST_FIELDS[field], "is required")

    if data["trip_type"] is None:
        data["trip_type"] = TripType.ROUND_TRIP if data["return_date"] is not None else TripType.ONE_WAY

    try:
        return SearchRequest(**data)
    except PydanticValidationError as e:
        error = e.errors()[0]
        loc = error.get("loc") or ("return_date",)
        field = REQUEST_FIELDS.get(str(loc[0]), str(loc[0]))
        message = error.get("msg", "is invalid").removeprefix("Value error, ")
        raise ValidationError(field, message) from e


class FlightSearchService:
    """Serviço principal de busca de voos"""

    def __init__(self, provider: FlightProviderInterface, token_cache: TokenProviderInterface):
        self._provider = provider
        self._token_cache = token_cache

    async def search(self, request: Union[SearchRequest, Mapping[str, Any]]) -> List[UnifiedResult]:
        """Valida, obtém token, consulta ida (e volta) e normaliza"""
        if not isinstance(request, SearchRequest):
            request = parse_request(request)

        logger.info(
            "Searching %s %s -> %s on %s%s",
            request.trip_type.value,
            request.origin,
            request.destination,
            request.departure_date.isoformat(),
            f" returning {request.return_date.isoformat()}" if request.return_date else "",
        )

        token = await self._token_cache.get_token()
        try:
            outbound = await self._provider.search_one_way(
                request.origin, request.destination, request.departure_date, token
            )
            return_candidates: Optional[List[FlightDestination]] = None
            if request.is_round_trip:
                return_candidates = await self._provider.search_return_candidates(
                    request.destination, request.return_date, token
                )
        except AuthFailure:
            self._token_cache.invalidate(token)
            raise

        results = normalize(outbound, return_candidates)
        logger.info("Search returned %d result(s)", len(results))
        return results

    async def suggest_airports(self, keyword: str) -> List[AirportSuggestion]:
        """Sugestões de aeroportos para autocompletar"""
        keyword = (keyword or "").strip()
        if not keyword:
            raise ValidationError("keyword", "is required")

        token = await self._token_cache.get_token()
        try:
            return await self._provider.suggest_airports(keyword, token)
        except AuthFailure:
            self._token_cache.invalidate(token)
            raise
