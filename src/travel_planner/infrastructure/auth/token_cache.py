"""
Cache do token OAuth2 da Amadeus
"""
import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import httpx

from ...domain.errors import AuthFailure
from ...domain.models import Credential
from ..config import Config

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AmadeusTokenCache:
    """Guarda um único token e renova quando expira.

    A renovação é protegida por um asyncio.Lock: buscas concorrentes que
    encontram o cache vazio esperam a mesma troca de credenciais.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        clock: Callable[[], datetime] = _utcnow,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._config = config or Config()
        self._clock = clock
        self._transport = transport
        self._credential: Optional[Credential] = None
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def credential(self) -> Optional[Credential]:
        return self._credential

    async def get_token(self) -> Credential:
        """Retorna um token válido, renovando se necessário"""
        cached = self._credential
        if cached and cached.is_valid(self._clock()):
            logger.debug("Using cached Amadeus token")
            return cached

        async with self._refresh_lock():
            # Outra corrotina pode ter renovado enquanto esperávamos
            cached = self._credential
            if cached and cached.is_valid(self._clock()):
                return cached
            self._credential = await self._exchange_credentials()
            return self._credential

    def invalidate(self, credential: Credential) -> None:
        """Descarta o token rejeitado, se ainda for o que está no cache"""
        if self._credential is credential:
            logger.info("Discarding cached Amadeus token")
            self._credential = None

    def _refresh_lock(self) -> asyncio.Lock:
        # asyncio.Lock fica preso ao primeiro loop que espera nele
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def _exchange_credentials(self) -> Credential:
        """Obtém token de acesso OAuth2 (client_credentials)"""
        if not self._config.is_amadeus_configured():
            raise AuthFailure("Amadeus client id/secret are not configured")

        url = f"{self._config.get_amadeus_base_url()}/v1/security/oauth2/token"
        logger.info("Requesting new Amadeus access token")

        async with httpx.AsyncClient(timeout=self._config.REQUEST_TIMEOUT, transport=self._transport) as client:
            try:
                response = await client.post(
                    url,
                    data={
                        "grant_type": "client_credentials",
                        "client_id": self._config.AMADEUS_CLIENT_ID,
                        "client_secret": self._config.AMADEUS_CLIENT_SECRET,
                    },
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
            except httpx.HTTPError as e:
                logger.error("Token request failed: %s", e)
                raise AuthFailure(f"Unable to get access token: {e}") from e

        if not response.is_success:
            logger.error("Token request rejected with status %s", response.status_code)
            raise AuthFailure("Unable to get access token", status=response.status_code)

        try:
            body = response.json()
            token = body["access_token"]
            expires_in = int(body.get("expires_in", 0))
        except (ValueError, KeyError, TypeError) as e:
            raise AuthFailure("Malformed token response") from e

        if not token:
            raise AuthFailure("Token response carried an empty access_token")

        ttl = max(0, expires_in - self._config.TOKEN_EXPIRY_MARGIN)
        credential = Credential(token=token, expires_at=self._clock() + timedelta(seconds=ttl))
        logger.info("Amadeus token acquired, valid for %ss", ttl)
        return credential
