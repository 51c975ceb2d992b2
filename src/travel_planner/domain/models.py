"""
Domain Models - Entidades de negócio puras
"""
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Annotated, Any, Callable, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


IATA_CODE = re.compile(r"^[A-Z]{3}$")


class UpstreamModel(BaseModel):
    """Base para modelos vindos da API (camelCase, imutáveis)"""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Credential(BaseModel):
    """Token bearer da API e o instante em que expira"""
    model_config = ConfigDict(frozen=True)

    token: str = Field(..., min_length=1)
    expires_at: datetime

    def is_valid(self, now: datetime) -> bool:
        return now < self.expires_at


class TripType(str, Enum):
    ONE_WAY = "one-way"
    ROUND_TRIP = "round-trip"

    @classmethod
    def _missing_(cls, value: Any):
        # Aceita também "oneway"/"roundtrip" vindos do formulário antigo
        if isinstance(value, str):
            compact = value.strip().lower().replace("-", "").replace("_", "")
            for member in cls:
                if member.value.replace("-", "") == compact:
                    return member
        return None


class SearchRequest(BaseModel):
    """Parâmetros de busca já normalizados"""
    model_config = ConfigDict(frozen=True)

    origin: str
    destination: str
    departure_date: date
    return_date: Optional[date] = None
    trip_type: TripType = TripType.ONE_WAY

    @field_validator("origin", "destination", mode="before")
    @classmethod
    def _normalize_code(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().upper()
            if not IATA_CODE.match(value):
                raise ValueError("must be a 3-letter airport code")
        return value

    @field_validator("trip_type", mode="before")
    @classmethod
    def _coerce_trip_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return TripType(value)
            except ValueError:
                raise ValueError("must be 'one-way' or 'round-trip'") from None
        return value

    @model_validator(mode="after")
    def _check_return_date(self) -> "SearchRequest":
        if self.trip_type is TripType.ROUND_TRIP:
            if self.return_date is None:
                raise ValueError("return date is required for a round trip")
            if self.return_date < self.departure_date:
                raise ValueError("return date cannot be earlier than departure date")
        elif self.return_date is not None:
            raise ValueError("return date is only allowed for a round trip")
        return self

    @property
    def is_round_trip(self) -> bool:
        return self.trip_type is TripType.ROUND_TRIP


class FlightEndpoint(UpstreamModel):
    """Partida ou chegada de um segmento"""
    iata_code: str = Field(..., alias="iataCode")
    at: str = Field(..., description="ISO datetime local")
    terminal: Optional[str] = None


class FlightSegment(UpstreamModel):
    """Segmento de voo individual"""
    departure: FlightEndpoint
    arrival: FlightEndpoint
    carrier_code: Optional[str] = Field(None, alias="carrierCode")
    number: Optional[str] = None
    duration: Optional[str] = None

    @property
    def flight_code(self) -> str:
        return f"{self.carrier_code or ''}{self.number or ''}"


class Itinerary(UpstreamModel):
    segments: List[FlightSegment] = Field(default_factory=list)
    duration: Optional[str] = None


class Price(UpstreamModel):
    """Preço no formato da API: valor decimal em string + moeda"""
    total: str
    currency: Optional[str] = None
    grand_total: Optional[str] = Field(None, alias="grandTotal")

    @field_validator("total", "grand_total")
    @classmethod
    def _check_decimal(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            amount = Decimal(value)
        except InvalidOperation:
            raise ValueError("must be a decimal amount") from None
        if not amount.is_finite():
            raise ValueError("must be a decimal amount")
        return value

    @property
    def amount(self) -> Decimal:
        return Decimal(self.grand_total or self.total)

    def __str__(self) -> str:
        return f"{self.currency or ''} {self.total}".strip()


class FlightOffer(UpstreamModel):
    """Oferta de voo completa (resposta de flight-offers)"""
    id: str
    price: Price
    itineraries: List[Itinerary] = Field(default_factory=list)
    source: Optional[str] = None
    one_way: Optional[bool] = Field(None, alias="oneWay")
    last_ticketing_date: Optional[str] = Field(None, alias="lastTicketingDate")
    number_of_bookable_seats: Optional[int] = Field(None, alias="numberOfBookableSeats")
    validating_airline_codes: List[str] = Field(default_factory=list, alias="validatingAirlineCodes")

    @property
    def segments(self) -> List[FlightSegment]:
        return [seg for itinerary in self.itineraries for seg in itinerary.segments]

    @property
    def origin(self) -> Optional[str]:
        """Aeroporto de partida do primeiro segmento do primeiro itinerário"""
        if not self.itineraries or not self.itineraries[0].segments:
            return None
        return self.itineraries[0].segments[0].departure.iata_code

    @property
    def final_destination(self) -> Optional[str]:
        if not self.itineraries or not self.itineraries[0].segments:
            return None
        return self.itineraries[0].segments[-1].arrival.iata_code

    @property
    def total_stops(self) -> int:
        """Número total de paradas"""
        return max(0, len(self.segments) - 1)

    @property
    def route_summary(self) -> str:
        """Resumo da rota"""
        segments = self.segments
        if not segments:
            return ""
        return " → ".join([segments[0].departure.iata_code] + [seg.arrival.iata_code for seg in segments])


class FlightDestination(UpstreamModel):
    """Candidato de volta (resposta de flight-destinations)"""
    origin: str
    destination: str
    departure_date: date = Field(..., alias="departureDate")
    return_date: Optional[date] = Field(None, alias="returnDate")
    price: Price


class AirportSuggestion(UpstreamModel):
    """Sugestão de aeroporto para autocompletar"""
    iata_code: str = Field(..., alias="iataCode")
    name: str
    detailed_name: Optional[str] = Field(None, alias="detailedName")
    city_name: Optional[str] = None
    country_code: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _flatten_address(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("address"), dict):
            address = data["address"]
            data = {**data}
            data.setdefault("city_name", address.get("cityName"))
            data.setdefault("country_code", address.get("countryCode"))
        return data


class OneWayOffer(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["one-way-offer"] = "one-way-offer"
    offer: FlightOffer


class RoundTripOffer(BaseModel):
    """Ida + candidato de volta; return_ é None quando não há volta"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: Literal["roundtrip-offer"] = "roundtrip-offer"
    outbound: FlightOffer
    return_: Optional[FlightDestination] = Field(..., alias="return")

    @property
    def has_return(self) -> bool:
        return self.return_ is not None


UnifiedResult = Annotated[Union[OneWayOffer, RoundTripOffer], Field(discriminator="kind")]


def match_result(
    result: UnifiedResult,
    one_way: Callable[[OneWayOffer], Any],
    round_trip: Callable[[RoundTripOffer], Any],
) -> Any:
    """Despacha para o handler da variante; qualquer outro tipo é erro"""
    if isinstance(result, OneWayOffer):
        return one_way(result)
    if isinstance(result, RoundTripOffer):
        return round_trip(result)
    raise TypeError(f"Unknown result variant: {type(result).__name__}")
