"""
Interface de linha de comando
"""
import asyncio
import argparse
import math
from typing import List, Optional, Sequence

from pydantic import TypeAdapter
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

from ..application.services import FlightSearchService
from ..domain.errors import TravelPlannerError, http_status_for
from ..domain.models import AirportSuggestion, OneWayOffer, RoundTripOffer, UnifiedResult, match_result
from ..infrastructure.config import Config
from ..infrastructure.factory import FlightSearchServiceFactory
from ..infrastructure.logging import configure_logging

PAGE_SIZE = 6
NO_RETURN = "Sem volta disponível"

_results_adapter = TypeAdapter(List[UnifiedResult])


class TravelPlannerCLI:
    """Interface CLI para o Travel Planner"""

    def __init__(self, service: Optional[FlightSearchService] = None, console: Optional[Console] = None):
        self.console = console or Console()
        self._service = service

    @property
    def search_service(self) -> FlightSearchService:
        if self._service is None:
            self._service = FlightSearchServiceFactory.create()
        return self._service

    def run(self, argv: Optional[Sequence[str]] = None) -> int:
        """Executa a interface CLI e retorna o exit code"""
        args = self._parse_arguments(argv)
        try:
            if args.command == "airports":
                suggestions = asyncio.run(self.search_service.suggest_airports(args.keyword))
                self._display_airports(suggestions)
            else:
                payload = {
                    "origin": args.origin,
                    "destination": args.destination,
                    "departureDate": args.depart,
                    "returnDate": args.return_date,
                    "tripType": args.trip_type,
                }
                if args.json:
                    results = asyncio.run(self.search_service.search(payload))
                    self.console.print_json(_results_adapter.dump_json(results, by_alias=True).decode())
                else:
                    with self.console.status("Buscando voos..."):
                        results = asyncio.run(self.search_service.search(payload))
                    self._display_results(results, args.sort, args.page)
        except TravelPlannerError as e:
            self._display_error(e)
            return 1
        return 0

    def _parse_arguments(self, argv: Optional[Sequence[str]]) -> argparse.Namespace:
        """Configura e processa argumentos da linha de comando"""
        parser = argparse.ArgumentParser(
            prog="travel-planner",
            description="Travel Planner - Busca de voos via Amadeus",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Exemplos de uso:
  travel-planner search --origin LHR --destination JFK --depart 2025-06-01
  travel-planner search --origin LIS --destination MAD --depart 2025-06-01 --return 2025-06-10
  travel-planner airports lisbon
            """
        )
        subparsers = parser.add_subparsers(dest="command", required=True)

        search = subparsers.add_parser("search", help="Busca ofertas de voo")
        search.add_argument("--origin", required=True, help="Código IATA origem (ex: JFK)")
        search.add_argument("--destination", required=True, help="Código IATA destino (ex: LAX)")
        search.add_argument("--depart", required=True, help="Data partida YYYY-MM-DD")
        search.add_argument("--return", dest="return_date", help="Data retorno YYYY-MM-DD (ida e volta)")
        search.add_argument("--trip-type", choices=["one-way", "round-trip"],
                            help="Tipo de viagem (padrão: ida e volta quando --return é informado)")
        search.add_argument("--sort", choices=["none", "price-asc", "price-desc"], default="none",
                            help="Ordenação da exibição (padrão: ordem da API)")
        search.add_argument("--page", type=int, default=1, help=f"Página exibida ({PAGE_SIZE} por página)")
        search.add_argument("--json", action="store_true", help="Imprime os resultados em JSON")

        airports = subparsers.add_parser("airports", help="Sugestões de aeroportos")
        airports.add_argument("keyword", help="Nome ou parte do nome do aeroporto/cidade")

        return parser.parse_args(argv)

    def _display_results(self, results: List[UnifiedResult], sort: str = "none", page: int = 1):
        """Exibe resultados da busca"""
        ordered = list(results)
        if sort != "none":
            ordered.sort(key=_result_price, reverse=(sort == "price-desc"))

        total_pages = max(1, math.ceil(len(ordered) / PAGE_SIZE))
        page = min(max(1, page), total_pages)
        shown = ordered[(page - 1) * PAGE_SIZE:page * PAGE_SIZE]

        table = Table(show_lines=True, title=f"Voos encontrados ({len(results)}) - página {page}/{total_pages}")
        table.add_column("Tipo", style="bold cyan", width=12)
        table.add_column("Preço", style="bold green", justify="right")
        table.add_column("Rota", style="yellow")
        table.add_column("Partida")
        table.add_column("Voos")
        table.add_column("Volta")

        for result in shown:
            table.add_row(*match_result(result, one_way=_one_way_row, round_trip=_round_trip_row))

        self.console.print(table)

    def _display_airports(self, suggestions: List[AirportSuggestion]):
        if not suggestions:
            self.console.print(Panel.fit("[yellow]Nenhum aeroporto encontrado.[/yellow]", border_style="yellow"))
            return

        table = Table(title="Aeroportos")
        table.add_column("IATA", style="bold cyan")
        table.add_column("Nome")
        table.add_column("Cidade")
        table.add_column("País")
        for airport in suggestions:
            table.add_row(airport.iata_code, airport.name, airport.city_name or "-", airport.country_code or "-")
        self.console.print(table)

    def _display_error(self, error: TravelPlannerError):
        self.console.print(
            Panel.fit(
                f"[red]{escape(error.message)}[/red]",
                title=f"Erro {http_status_for(error)} ({error.kind})",
                border_style="red",
            )
        )


def _result_price(result: UnifiedResult):
    return match_result(
        result,
        one_way=lambda r: r.offer.price.amount,
        round_trip=lambda r: r.outbound.price.amount,
    )


def _offer_columns(offer) -> List[str]:
    segments = offer.segments
    departure = segments[0].departure.at.replace("T", " ") if segments else "-"
    flights = ", ".join(seg.flight_code for seg in segments if seg.flight_code) or "-"
    return [str(offer.price), offer.route_summary or "-", departure, flights]


def _one_way_row(result: OneWayOffer) -> List[str]:
    return ["Ida", *_offer_columns(result.offer), "-"]


def _round_trip_row(result: RoundTripOffer) -> List[str]:
    if result.has_return:
        candidate = result.return_
        back = f"{candidate.origin} → {candidate.destination} em {candidate.departure_date.isoformat()} ({candidate.price})"
    else:
        back = f"[yellow]{NO_RETURN}[/yellow]"
    return ["Ida e volta", *_offer_columns(result.outbound), back]


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Função principal"""
    configure_logging(Config.LOG_LEVEL)
    cli = TravelPlannerCLI()
    return cli.run(argv)


if __name__ == "__main__":
    raise SystemExit(main())
