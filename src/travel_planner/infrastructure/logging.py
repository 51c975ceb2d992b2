"""
Configuração de logging do processo
"""
import logging
import sys

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Configura o logging raiz uma única vez (chamadas seguintes não fazem nada)"""
    global _configured
    if _configured:
        return

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        stream=sys.stdout,
    )
    _configured = True
