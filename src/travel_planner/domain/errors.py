"""
Erros de domínio da busca de voos
"""
from typing import Optional


class TravelPlannerError(Exception):
    """Base de todos os erros da busca"""

    kind = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        return {"error": self.kind, "message": self.message}


class ValidationError(TravelPlannerError):
    """Parâmetro de entrada ausente ou inválido (nunca chega à API)"""

    kind = "validation_error"
    status_code = 400

    def __init__(self, field: str, message: str):
        super().__init__(f"Invalid '{field}': {message}")
        self.field = field

    def to_payload(self) -> dict:
        return {**super().to_payload(), "field": self.field}


class AuthFailure(TravelPlannerError):
    """Não foi possível obter ou renovar o token"""

    kind = "auth_failure"

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class NotFound(TravelPlannerError):
    """A API reportou zero resultados"""

    kind = "not_found"
    status_code = 404

    def __init__(self, operation: str, message: str = "No results found for the given criteria"):
        super().__init__(message)
        self.operation = operation

    def to_payload(self) -> dict:
        return {**super().to_payload(), "operation": self.operation}


class UpstreamError(TravelPlannerError):
    """Qualquer outra falha da API: status, corpo inválido, rede ou timeout"""

    kind = "upstream_error"

    def __init__(self, operation: str, message: str, status: Optional[int] = None):
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.status = status

    def to_payload(self) -> dict:
        return {**super().to_payload(), "operation": self.operation}


def http_status_for(exc: Exception) -> int:
    """Mapeia um erro para o status HTTP equivalente"""
    if isinstance(exc, TravelPlannerError):
        return exc.status_code
    return 500
