"""
Interfaces/Contratos para Application Layer
"""
from datetime import date
from typing import List, Protocol

from ..domain.models import AirportSuggestion, Credential, FlightDestination, FlightOffer


class TokenProviderInterface(Protocol):
    """Interface para o cache de credenciais"""

    async def get_token(self) -> Credential:
        ...

    def invalidate(self, credential: Credential) -> None:
        ...


class FlightProviderInterface(Protocol):
    """Interface para provedores de voo"""
    name: str

    async def search_one_way(
        self, origin: str, destination: str, departure_date: date, token: Credential
    ) -> List[FlightOffer]:
        """Busca ofertas de ida"""
        ...

    async def search_return_candidates(
        self, origin: str, departure_date: date, token: Credential
    ) -> List[FlightDestination]:
        """Busca candidatos de volta"""
        ...

    async def suggest_airports(self, keyword: str, token: Credential) -> List[AirportSuggestion]:
        ...
