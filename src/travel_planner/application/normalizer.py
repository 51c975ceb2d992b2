"""
Normaliza ofertas de ida e candidatos de volta em um único tipo de resultado
"""
from typing import List, Optional, Sequence

from ..domain.models import FlightDestination, FlightOffer, OneWayOffer, RoundTripOffer, UnifiedResult


def normalize(
    outbound: Sequence[FlightOffer],
    return_candidates: Optional[Sequence[FlightDestination]] = None,
) -> List[UnifiedResult]:
    """Converte ofertas em resultados unificados.

    Sem candidatos (ida simples) cada oferta vira um OneWayOffer. Com
    candidatos, cada oferta vira um RoundTripOffer pareado com o primeiro
    candidato cujo destino é o aeroporto de partida da oferta. Ofertas sem
    par recebem return_=None. A ordem da ida é sempre preservada.

    O pareamento considera apenas o código do aeroporto (ignora data e preço).
    """
    if return_candidates is None:
        return [OneWayOffer(offer=offer) for offer in outbound]

    return [
        RoundTripOffer(outbound=offer, return_=find_return(offer, return_candidates))
        for offer in outbound
    ]


def find_return(offer: FlightOffer, candidates: Sequence[FlightDestination]) -> Optional[FlightDestination]:
    """Primeiro candidato que volta ao aeroporto de partida da oferta"""
    origin = offer.origin
    if origin is None:
        return None
    return next((candidate for candidate in candidates if candidate.destination == origin), None)
