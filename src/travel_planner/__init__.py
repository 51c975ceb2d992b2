"""Travel Planner - busca de voos via Amadeus"""

__version__ = "0.1.0"
