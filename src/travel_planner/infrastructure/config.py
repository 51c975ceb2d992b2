"""
Configuração da aplicação
"""
import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Configuração centralizada"""

    # Credenciais Amadeus (AMADEUS_API_KEY/SECRET são os nomes antigos)
    AMADEUS_CLIENT_ID = os.getenv("AMADEUS_CLIENT_ID") or os.getenv("AMADEUS_API_KEY", "")
    AMADEUS_CLIENT_SECRET = os.getenv("AMADEUS_CLIENT_SECRET") or os.getenv("AMADEUS_API_SECRET", "")
    AMADEUS_ENV = os.getenv("AMADEUS_ENV", "TEST").upper()

    # Defaults
    DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Limites
    REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "30"))
    TOKEN_EXPIRY_MARGIN = int(os.getenv("TOKEN_EXPIRY_MARGIN", "0"))
    MAX_OFFERS = int(os.getenv("MAX_OFFERS", "50"))

    def __init__(self, **overrides):
        for key, value in overrides.items():
            if not hasattr(type(self), key):
                raise AttributeError(f"Unknown config option: {key}")
            setattr(self, key, value)

    def is_amadeus_configured(self) -> bool:
        return bool(self.AMADEUS_CLIENT_ID and self.AMADEUS_CLIENT_SECRET)

    def get_amadeus_base_url(self) -> str:
        """Retorna a base URL da Amadeus conforme ambiente."""
        return "https://api.amadeus.com" if self.AMADEUS_ENV.upper() == "PRODUCTION" else "https://test.api.amadeus.com"
