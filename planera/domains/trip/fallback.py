"""Canned and randomized data used when a provider is unavailable.

Every function is pure apart from the random noise, which comes from an
injectable ``random.Random`` so results can be reproduced in tests.
"""

import random
import statistics
from datetime import date
from typing import Any

from planera.domains.trip.locations import extract_iata_code, get_fallback_coordinates

_rng = random.Random()


def _pick_for_destination(
    destination: str,
    by_city: dict[str, list[dict[str, Any]]],
    default: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    lower = destination.lower()
    for city, items in by_city.items():
        if city in lower:
            return [dict(item) for item in items]
    return [dict(item) for item in default]


# ============ Hotels ============

_HOTELS_BY_CITY = {
    "paris": [
        {"name": "Hotel Le Marais", "rating": "4", "price": "180", "currency": "EUR", "amenities": ["WiFi", "Breakfast", "Air Conditioning"], "address": "Le Marais District", "description": "Charming boutique hotel in the heart of Le Marais"},
        {"name": "Montmartre Residence", "rating": "4", "price": "150", "currency": "EUR", "amenities": ["WiFi", "Terrace", "City View"], "address": "Montmartre", "description": "Cozy hotel with stunning views of Sacré-Cœur"},
        {"name": "Saint-Germain Palace", "rating": "5", "price": "320", "currency": "EUR", "amenities": ["WiFi", "Spa", "Restaurant", "Bar"], "address": "Saint-Germain-des-Prés", "description": "Luxury hotel in the literary heart of Paris"},
    ],
    "rome": [
        {"name": "Hotel Trastevere", "rating": "4", "price": "160", "currency": "EUR", "amenities": ["WiFi", "Breakfast", "Rooftop"], "address": "Trastevere", "description": "Beautiful hotel in Rome's most charming neighborhood"},
        {"name": "Colosseum View Inn", "rating": "4", "price": "190", "currency": "EUR", "amenities": ["WiFi", "Air Conditioning", "City View"], "address": "Near Colosseum", "description": "Wake up to views of ancient Rome"},
        {"name": "Vatican Suites", "rating": "5", "price": "280", "currency": "EUR", "amenities": ["WiFi", "Spa", "Restaurant"], "address": "Near Vatican", "description": "Elegant suites steps from St. Peter's"},
    ],
    "barcelona": [
        {"name": "Gothic Quarter Hotel", "rating": "4", "price": "140", "currency": "EUR", "amenities": ["WiFi", "Breakfast", "Terrace"], "address": "Gothic Quarter", "description": "Historic hotel in medieval Barcelona"},
        {"name": "Barceloneta Beach Resort", "rating": "4", "price": "200", "currency": "EUR", "amenities": ["WiFi", "Pool", "Beach Access"], "address": "Barceloneta", "description": "Beachfront hotel with Mediterranean views"},
        {"name": "Eixample Boutique", "rating": "5", "price": "260", "currency": "EUR", "amenities": ["WiFi", "Spa", "Restaurant", "Gym"], "address": "Eixample", "description": "Modernist luxury in Gaudí's neighborhood"},
    ],
    "athens": [
        {"name": "Plaka Heritage Hotel", "rating": "4", "price": "120", "currency": "EUR", "amenities": ["WiFi", "Breakfast", "Rooftop"], "address": "Plaka", "description": "Traditional hotel with Acropolis views"},
        {"name": "Monastiraki Square Inn", "rating": "4", "price": "100", "currency": "EUR", "amenities": ["WiFi", "Air Conditioning"], "address": "Monastiraki", "description": "Central location near ancient Agora"},
        {"name": "Syntagma Grand", "rating": "5", "price": "220", "currency": "EUR", "amenities": ["WiFi", "Spa", "Pool", "Restaurant"], "address": "Syntagma Square", "description": "Luxury hotel overlooking Parliament"},
    ],
}

_DEFAULT_HOTELS = [
    {"name": "City Center Hotel", "rating": "4", "price": "150", "currency": "EUR", "amenities": ["WiFi", "Breakfast", "Air Conditioning"], "address": "City Center", "description": "Comfortable hotel in the heart of the city"},
    {"name": "Old Town Inn", "rating": "4", "price": "130", "currency": "EUR", "amenities": ["WiFi", "Terrace"], "address": "Old Town", "description": "Charming accommodation in the historic district"},
    {"name": "Grand Plaza Hotel", "rating": "5", "price": "250", "currency": "EUR", "amenities": ["WiFi", "Spa", "Pool", "Restaurant"], "address": "Main Square", "description": "Luxury hotel with premium amenities"},
]


def get_fallback_hotels(destination: str) -> list[dict[str, Any]]:
    """Three well-known hotels for the destination, or a generic set.

    Each hotel is placed at the city centre, the same shape live hotels use.
    """
    hotels = _pick_for_destination(destination, _HOTELS_BY_CITY, _DEFAULT_HOTELS)
    for hotel in hotels:
        hotel["coordinates"] = get_fallback_coordinates(destination)
    return hotels


# ============ Activities ============

_ACTIVITIES_BY_CITY = {
    "paris": [
        {"title": "Eiffel Tower Visit", "description": "Iconic iron tower with panoramic views", "price": "26", "duration": "2-3 hours"},
        {"title": "Louvre Museum", "description": "World's largest art museum", "price": "17", "duration": "3-4 hours"},
        {"title": "Seine River Cruise", "description": "Scenic boat tour", "price": "15", "duration": "1 hour"},
        {"title": "Montmartre Walking Tour", "description": "Explore the artistic neighborhood", "price": "20", "duration": "2 hours"},
    ],
    "rome": [
        {"title": "Colosseum Tour", "description": "Ancient Roman amphitheater", "price": "18", "duration": "2-3 hours"},
        {"title": "Vatican Museums", "description": "Art collection and Sistine Chapel", "price": "17", "duration": "3-4 hours"},
        {"title": "Roman Forum Walk", "description": "Ancient ruins exploration", "price": "16", "duration": "2 hours"},
        {"title": "Trastevere Food Tour", "description": "Taste authentic Roman cuisine", "price": "65", "duration": "3 hours"},
    ],
    "barcelona": [
        {"title": "Sagrada Familia", "description": "Gaudí's masterpiece basilica", "price": "26", "duration": "2 hours"},
        {"title": "Park Güell", "description": "Colorful mosaic park", "price": "10", "duration": "2 hours"},
        {"title": "Gothic Quarter Tour", "description": "Medieval streets exploration", "price": "15", "duration": "2 hours"},
        {"title": "La Boqueria Market", "description": "Famous food market visit", "price": "0", "duration": "1-2 hours"},
    ],
    "athens": [
        {"title": "Acropolis Tour", "description": "Ancient citadel with Parthenon", "price": "20", "duration": "3 hours"},
        {"title": "Acropolis Museum", "description": "Modern museum with ancient artifacts", "price": "15", "duration": "2-3 hours"},
        {"title": "Plaka Walking Tour", "description": "Historic neighborhood exploration", "price": "0", "duration": "2 hours"},
        {"title": "Greek Cooking Class", "description": "Learn traditional recipes", "price": "75", "duration": "4 hours"},
    ],
}

_DEFAULT_ACTIVITIES = [
    {"title": "City Walking Tour", "description": "Explore the main attractions", "price": "20", "duration": "3 hours"},
    {"title": "Local Museum Visit", "description": "Discover local history and culture", "price": "15", "duration": "2 hours"},
    {"title": "Food Tasting Tour", "description": "Sample local cuisine", "price": "50", "duration": "3 hours"},
    {"title": "Sunset Viewpoint", "description": "Best views of the city", "price": "0", "duration": "1 hour"},
]


def get_fallback_activities(destination: str) -> list[dict[str, Any]]:
    """Four signature activities for the destination, or a generic set."""
    return _pick_for_destination(destination, _ACTIVITIES_BY_CITY, _DEFAULT_ACTIVITIES)


# ============ Restaurants ============

_RESTAURANTS_BY_CITY = {
    "paris": [
        {"name": "Le Petit Cler", "cuisine": "French", "priceRange": "€€", "rating": "4.5", "address": "Rue Cler, 7th"},
        {"name": "Bouillon Chartier", "cuisine": "Traditional French", "priceRange": "€", "rating": "4.3", "address": "7 Rue du Faubourg Montmartre"},
        {"name": "L'Ami Jean", "cuisine": "Basque", "priceRange": "€€€", "rating": "4.7", "address": "27 Rue Malar, 7th"},
    ],
    "rome": [
        {"name": "Da Enzo al 29", "cuisine": "Roman", "priceRange": "€€", "rating": "4.6", "address": "Via dei Vascellari 29, Trastevere"},
        {"name": "Pizzarium", "cuisine": "Pizza", "priceRange": "€", "rating": "4.5", "address": "Via della Meloria 43"},
        {"name": "Roscioli", "cuisine": "Italian", "priceRange": "€€€", "rating": "4.7", "address": "Via dei Giubbonari 21"},
    ],
    "barcelona": [
        {"name": "Can Culleretes", "cuisine": "Catalan", "priceRange": "€€", "rating": "4.4", "address": "Carrer d'en Quintana 5"},
        {"name": "Bar del Pla", "cuisine": "Tapas", "priceRange": "€€", "rating": "4.5", "address": "Carrer de Montcada 2"},
        {"name": "Tickets", "cuisine": "Modern Spanish", "priceRange": "€€€", "rating": "4.8", "address": "Avinguda del Paral·lel 164"},
    ],
    "athens": [
        {"name": "Karamanlidika", "cuisine": "Greek Deli", "priceRange": "€€", "rating": "4.6", "address": "Sokratous 1, Psyrri"},
        {"name": "Ta Karamanlidika tou Fani", "cuisine": "Greek", "priceRange": "€€", "rating": "4.5", "address": "Evripidou 52"},
        {"name": "Funky Gourmet", "cuisine": "Modern Greek", "priceRange": "€€€€", "rating": "4.7", "address": "Paramithias 13"},
    ],
}

_DEFAULT_RESTAURANTS = [
    {"name": "Local Taverna", "cuisine": "Local", "priceRange": "€€", "rating": "4.3", "address": "Old Town"},
    {"name": "City Bistro", "cuisine": "International", "priceRange": "€€", "rating": "4.4", "address": "Main Square"},
    {"name": "Fine Dining Restaurant", "cuisine": "Gourmet", "priceRange": "€€€", "rating": "4.6", "address": "City Center"},
]


def get_fallback_restaurants(destination: str) -> list[dict[str, Any]]:
    """Three restaurants for the destination, or a generic set."""
    return _pick_for_destination(destination, _RESTAURANTS_BY_CITY, _DEFAULT_RESTAURANTS)


# ============ Transportation ============


def generate_transportation_options(
    destination: str,
    origin: str,
    travelers: int,
    rng: random.Random | None = None,
) -> list[dict[str, Any]]:
    """Airport transfer and local transport options with noisy prices."""
    rng = rng or _rng
    return [
        {
            "type": "taxi",
            "name": "Airport Taxi",
            "description": f"Private taxi from {destination} airport to hotel",
            "price": 35 + rng.randrange(20),
            "currency": "EUR",
            "duration": "30-45 min",
            "bookingUrl": "https://www.kiwitaxi.com",
        },
        {
            "type": "uber",
            "name": "Uber/Bolt",
            "description": "Ride-sharing service",
            "price": 25 + rng.randrange(15),
            "currency": "EUR",
            "duration": "30-45 min",
            "bookingUrl": "https://www.uber.com",
        },
        {
            "type": "car",
            "name": "Car Rental",
            "description": "Rent a car for your trip",
            "pricePerDay": 40 + rng.randrange(30),
            "currency": "EUR",
            "bookingUrl": "https://www.rentalcars.com",
        },
        {
            "type": "public",
            "name": "Public Transport",
            "description": "Metro/Bus from airport",
            "price": (5 + rng.randrange(10)) * max(travelers, 1),
            "currency": "EUR",
            "duration": "45-60 min",
        },
    ]


# ============ Flights ============

_FLIGHT_HOURS = {
    "ATH": {"CDG": 3.5, "LHR": 3.8, "FCO": 2.0, "BCN": 3.0, "MAD": 3.5, "AMS": 3.5, "BER": 2.8, "DXB": 4.5, "JFK": 11.0},
    "CDG": {"ATH": 3.5, "LHR": 1.2, "FCO": 2.0, "BCN": 2.0, "MAD": 2.0, "AMS": 1.0, "BER": 1.8, "DXB": 6.5, "JFK": 8.5},
    "LHR": {"ATH": 3.8, "CDG": 1.2, "FCO": 2.5, "BCN": 2.2, "MAD": 2.5, "AMS": 1.0, "BER": 2.0, "DXB": 7.0, "JFK": 8.0},
}

_EUROPEAN_AIRLINES = [
    ("A3", "Aegean Airlines"), ("AF", "Air France"), ("BA", "British Airways"),
    ("LH", "Lufthansa"), ("KL", "KLM"), ("IB", "Iberia"), ("AZ", "ITA Airways"),
    ("FR", "Ryanair"), ("U2", "easyJet"),
]
_MIDDLE_EAST_AIRLINES = [
    ("EK", "Emirates"), ("QR", "Qatar Airways"), ("EY", "Etihad Airways"), ("TK", "Turkish Airlines"),
]
_US_AIRLINES = [("AA", "American Airlines"), ("DL", "Delta Air Lines"), ("UA", "United Airlines")]
_ASIAN_AIRLINES = [
    ("SQ", "Singapore Airlines"), ("NH", "All Nippon Airways"), ("CX", "Cathay Pacific"), ("TG", "Thai Airways"),
]

_EUROPEAN_CODES = frozenset(
    "ATH CDG LHR FCO BCN MAD AMS BER MUC FRA VIE ZRH BRU LIS DUB CPH ARN OSL HEL MXP VCE PRG BUD WAW".split()
)
_MIDDLE_EAST_CODES = frozenset("DXB DOH AUH RUH JED CAI TLV IST".split())
_US_CODES = frozenset("JFK LAX ORD MIA SFO BOS IAD".split())
_ASIAN_CODES = frozenset("NRT SIN HKG PEK PVG ICN BKK KUL CGK MNL DEL BOM SYD MEL".split())

# Departure hour per preferred flight time
_DEPARTURE_HOURS = {
    "morning": (7, 8, 9),
    "afternoon": (13, 14, 15),
    "evening": (18, 19, 20),
}


def calculate_flight_duration(origin_code: str, destination_code: str) -> float:
    """Approximate block time in hours; 2.5h for unknown routes."""
    return (
        _FLIGHT_HOURS.get(origin_code, {}).get(destination_code)
        or _FLIGHT_HOURS.get(destination_code, {}).get(origin_code)
        or 2.5
    )


def calculate_realistic_price(
    origin_code: str,
    destination_code: str,
    rng: random.Random | None = None,
) -> float:
    """One-way economy price per person, banded by flight length."""
    rng = rng or _rng
    hours = calculate_flight_duration(origin_code, destination_code)
    if hours < 2:
        return 80 + rng.random() * 40
    if hours < 5:
        return 150 + rng.random() * 100
    return 400 + rng.random() * 200


def get_realistic_airlines_for_route(origin_code: str, destination_code: str) -> list[tuple[str, str]]:
    """Carriers plausibly flying the route, as (code, name) pairs."""
    codes = {origin_code, destination_code}
    if codes <= _EUROPEAN_CODES:
        return _EUROPEAN_AIRLINES
    if codes & _MIDDLE_EAST_CODES:
        return _MIDDLE_EAST_AIRLINES
    if codes & _US_CODES:
        return _US_AIRLINES
    if codes & _ASIAN_CODES:
        return _ASIAN_AIRLINES
    return _EUROPEAN_AIRLINES


def format_clock(hour: int, minute: int) -> str:
    """24h clock values as ``hh:mm AM/PM``."""
    hour %= 24
    period = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12:02d}:{minute:02d} {period}"


def format_hours(hours: float) -> str:
    """Fractional hours as ``"2h 30m"``."""
    total = round(hours * 60)
    h, m = divmod(total, 60)
    return f"{h}h {m}m" if m else f"{h}h"


def skyscanner_url(origin_code: str, destination_code: str, departure: str, return_: str | None) -> str:
    """Search link for a route; dates are YYYY-MM-DD."""
    url = f"https://www.skyscanner.com/transport/flights/{origin_code}/{destination_code}/{departure[2:].replace('-', '')}"
    if return_:
        url += f"/{return_[2:].replace('-', '')}"
    return url


def _leg(airline: tuple[str, str], hours: float, departure_hour: int, rng: random.Random) -> dict[str, Any]:
    minute = rng.choice((0, 15, 30, 45))
    arrival_total = departure_hour * 60 + minute + round(hours * 60)
    return {
        "airline": airline[1],
        "flightNumber": f"{airline[0]}{rng.randrange(100, 1000)}",
        "departure": format_clock(departure_hour, minute),
        "arrival": format_clock(arrival_total // 60, arrival_total % 60),
        "duration": format_hours(hours),
        "stops": 0,
    }


def generate_flight_fallback(
    origin_code: str,
    destination_code: str,
    departure_date: str,
    return_date: str | None,
    adults: int,
    preferred_flight_time: str | None = None,
    rng: random.Random | None = None,
) -> list[dict[str, Any]]:
    """Three plausible flight options, cheapest first.

    Shaped like the options produced from live Duffel offers so the app
    renders both the same way.
    """
    rng = rng or _rng
    adults = max(adults, 1)
    hours = calculate_flight_duration(origin_code, destination_code)
    airlines = get_realistic_airlines_for_route(origin_code, destination_code)
    departure_hours = _DEPARTURE_HOURS.get((preferred_flight_time or "").lower())

    options = []
    for i, airline in enumerate(rng.sample(airlines, k=min(3, len(airlines)))):
        per_person = calculate_realistic_price(origin_code, destination_code, rng)
        if return_date:
            per_person *= 2
        per_person = round(per_person, 2)
        out_hour = departure_hours[i % 3] if departure_hours else rng.randrange(6, 21)
        ret_hour = departure_hours[(i + 1) % 3] if departure_hours else rng.randrange(6, 21)
        option = {
            "id": f"fallback_{origin_code}_{destination_code}_{i}",
            "pricePerPerson": per_person,
            "totalPrice": round(per_person * adults, 2),
            "currency": "EUR",
            "outbound": _leg(airline, hours, out_hour, rng),
            "return": _leg(airline, hours, ret_hour, rng) if return_date else None,
            "luggage": "1 checked bag included",
            "checkedBaggageIncluded": True,
            "bookingUrl": skyscanner_url(origin_code, destination_code, departure_date, return_date),
            "isBestPrice": False,
            "isFallback": True,
        }
        options.append(option)

    options.sort(key=lambda o: o["pricePerPerson"])
    if options:
        options[0]["isBestPrice"] = True
    return options


def generate_flights_for_trip(
    origin: str,
    destination: str,
    start: date,
    end: date,
    adults: int,
    preferred_flight_time: str | None = None,
    rng: random.Random | None = None,
) -> list[dict[str, Any]]:
    """``generate_flight_fallback`` for city names and trip dates."""
    return_date = end.isoformat() if end > start else None
    return generate_flight_fallback(
        extract_iata_code(origin),
        extract_iata_code(destination),
        start.isoformat(),
        return_date,
        adults,
        preferred_flight_time,
        rng,
    )


# ============ Daily expenses ============

FOOD_PER_DAY = 60
ACTIVITIES_PER_DAY = 40
LOCAL_TRANSPORT_PER_DAY = 15


def _price(value: Any) -> float | None:
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        digits = "".join(c for c in value if c.isdigit() or c == ".")
        try:
            return float(digits)
        except ValueError:
            return None
    return None


def estimate_daily_expenses(hotels: list[dict[str, Any]] | None, destination: str) -> dict[str, Any]:
    """Per-day spend estimate from the median hotel price plus allowances.

    The destination's fallback hotels stand in when no priced hotel list
    is available (for example when hotels were skipped).
    """
    prices = [p for p in (_price(h.get("price")) for h in hotels or []) if p is not None]
    if not prices:
        prices = [_price(h["price"]) for h in get_fallback_hotels(destination)]
    accommodation = round(statistics.median(prices))
    return {
        "accommodation": accommodation,
        "food": FOOD_PER_DAY,
        "activities": ACTIVITIES_PER_DAY,
        "transportation": LOCAL_TRANSPORT_PER_DAY,
        "total": accommodation + FOOD_PER_DAY + ACTIVITIES_PER_DAY + LOCAL_TRANSPORT_PER_DAY,
        "currency": "EUR",
    }