"""
Factory para criar instâncias configuradas dos serviços
"""
from typing import Optional

import httpx

from ..application.services import FlightSearchService
from .auth.token_cache import AmadeusTokenCache
from .config import Config
from .providers.amadeus_provider import AmadeusProvider


class FlightSearchServiceFactory:
    """Factory para criar o serviço de busca configurado"""

    @staticmethod
    def create(config: Optional[Config] = None, transport: Optional[httpx.AsyncBaseTransport] = None) -> FlightSearchService:
        """Cria uma instância completa do serviço de busca"""
        if config is None:
            config = Config()

        token_cache = AmadeusTokenCache(config, transport=transport)
        provider = AmadeusProvider(config, transport=transport)

        return FlightSearchService(provider=provider, token_cache=token_cache)
