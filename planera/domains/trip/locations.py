"""City name to airport code and coordinate lookups."""

from types import MappingProxyType

DEFAULT_IATA_CODE = "ATH"

CITY_TO_IATA = MappingProxyType(
    {
        "london": "LHR", "paris": "CDG", "rome": "FCO", "barcelona": "BCN",
        "madrid": "MAD", "amsterdam": "AMS", "berlin": "BER", "athens": "ATH",
        "lisbon": "LIS", "dublin": "DUB", "vienna": "VIE", "prague": "PRG",
        "budapest": "BUD", "warsaw": "WAW", "copenhagen": "CPH", "stockholm": "ARN",
        "oslo": "OSL", "helsinki": "HEL", "zurich": "ZRH", "geneva": "GVA",
        "brussels": "BRU", "milan": "MXP", "venice": "VCE", "florence": "FLR",
        "munich": "MUC", "frankfurt": "FRA", "dubai": "DXB", "doha": "DOH",
        "abu dhabi": "AUH", "istanbul": "IST", "cairo": "CAI", "tel aviv": "TLV",
        "new york": "JFK", "los angeles": "LAX", "chicago": "ORD", "miami": "MIA",
        "san francisco": "SFO", "boston": "BOS", "washington": "IAD",
        "tokyo": "NRT", "singapore": "SIN", "hong kong": "HKG", "beijing": "PEK",
        "shanghai": "PVG", "seoul": "ICN", "bangkok": "BKK", "kuala lumpur": "KUL",
        "sydney": "SYD", "melbourne": "MEL", "auckland": "AKL",
        "santorini": "JTR", "mykonos": "JMK", "crete": "HER", "rhodes": "RHO",
        "corfu": "CFU", "thessaloniki": "SKG", "nice": "NCE", "marseille": "MRS",
        "lyon": "LYS", "bordeaux": "BOD", "toulouse": "TLS", "naples": "NAP",
        "palermo": "PMO", "malaga": "AGP", "seville": "SVQ", "valencia": "VLC",
        "bilbao": "BIO", "porto": "OPO", "edinburgh": "EDI", "manchester": "MAN",
        "birmingham": "BHX", "glasgow": "GLA", "belfast": "BFS",
    }
)

CITY_COORDINATES = MappingProxyType(
    {
        "paris": (48.8566, 2.3522),
        "london": (51.5074, -0.1278),
        "rome": (41.9028, 12.4964),
        "barcelona": (41.3851, 2.1734),
        "amsterdam": (52.3676, 4.9041),
        "athens": (37.9838, 23.7275),
        "berlin": (52.5200, 13.4050),
        "madrid": (40.4168, -3.7038),
        "dubai": (25.2048, 55.2708),
        "new york": (40.7128, -74.0060),
        "tokyo": (35.6762, 139.6503),
        "singapore": (1.3521, 103.8198),
        "lisbon": (38.7223, -9.1393),
        "prague": (50.0755, 14.4378),
        "vienna": (48.2082, 16.3738),
    }
)


def extract_iata_code(city_name: str) -> str:
    """Best-effort airport code for a free-text city name.

    A city contained in the name wins; otherwise an already upper-case
    three-letter code passes through; otherwise Athens.
    """
    lower = city_name.lower()
    for city, code in CITY_TO_IATA.items():
        if city in lower:
            return code
    stripped = city_name.strip()
    if len(stripped) == 3 and stripped.isalpha() and stripped.isupper():
        return stripped
    return DEFAULT_IATA_CODE


def get_fallback_coordinates(destination: str) -> dict[str, float]:
    """Approximate city-centre coordinates, Athens when unknown."""
    lower = destination.lower()
    latitude, longitude = CITY_COORDINATES["athens"]
    for city, coords in CITY_COORDINATES.items():
        if city in lower:
            latitude, longitude = coords
            break
    return {"latitude": latitude, "longitude": longitude}
