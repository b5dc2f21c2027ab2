"""Built-in gazetteer of major cities and countries.

Backs free-text location resolution and autocomplete when no external
geocoding service is configured. Keys are lowercase aliases; several aliases
may map to the same place.
"""

from ipstudio.domain.entities import Location

# alias -> (lat, lng, display name)
CITY_COORDINATES: dict[str, tuple[float, float, str]] = {
    # North America
    "new york": (40.7128, -74.0060, "New York"),
    "nyc": (40.7128, -74.0060, "New York"),
    "los angeles": (34.0522, -118.2437, "Los Angeles"),
    "la": (34.0522, -118.2437, "Los Angeles"),
    "chicago": (41.8781, -87.6298, "Chicago"),
    "houston": (29.7604, -95.3698, "Houston"),
    "phoenix": (33.4484, -112.0740, "Phoenix"),
    "philadelphia": (39.9526, -75.1652, "Philadelphia"),
    "san antonio": (29.4241, -98.4936, "San Antonio"),
    "san diego": (32.7157, -117.1611, "San Diego"),
    "dallas": (32.7767, -96.7970, "Dallas"),
    "san jose": (37.3382, -121.8863, "San Jose"),
    "austin": (30.2672, -97.7431, "Austin"),
    "miami": (25.7617, -80.1918, "Miami"),
    "seattle": (47.6062, -122.3321, "Seattle"),
    "san francisco": (37.7749, -122.4194, "San Francisco"),
    "sf": (37.7749, -122.4194, "San Francisco"),
    "denver": (39.7392, -104.9903, "Denver"),
    "boston": (42.3601, -71.0589, "Boston"),
    "portland": (45.5152, -122.6784, "Portland"),
    "atlanta": (33.7490, -84.3880, "Atlanta"),
    "flagstaff": (35.1983, -111.6513, "Flagstaff, Arizona"),
    "solvang": (34.5958, -120.1376, "Solvang, California"),
    "toronto": (43.6532, -79.3832, "Toronto"),
    "montreal": (45.5017, -73.5673, "Montreal"),
    "vancouver": (49.2827, -123.1207, "Vancouver"),
    "mexico city": (19.4326, -99.1332, "Mexico City"),
    # Europe (London boroughs cluster on central London)
    "london": (51.5074, -0.1278, "London"),
    "finsbury park": (51.5074, -0.1278, "London"),
    "soho": (51.5074, -0.1278, "London"),
    "hackney": (51.5074, -0.1278, "London"),
    "shoreditch": (51.5074, -0.1278, "London"),
    "camden": (51.5074, -0.1278, "London"),
    "islington": (51.5074, -0.1278, "London"),
    "westminster": (51.5074, -0.1278, "London"),
    "kensington": (51.5074, -0.1278, "London"),
    "chelsea": (51.5074, -0.1278, "London"),
    "greenwich": (51.5074, -0.1278, "London"),
    "paris": (48.8566, 2.3522, "Paris"),
    "berlin": (52.5200, 13.4050, "Berlin"),
    "madrid": (40.4168, -3.7038, "Madrid"),
    "rome": (41.9028, 12.4964, "Rome"),
    "amsterdam": (52.3676, 4.9041, "Amsterdam"),
    "barcelona": (41.3851, 2.1734, "Barcelona"),
    "vienna": (48.2082, 16.3738, "Vienna"),
    "prague": (50.0755, 14.4378, "Prague"),
    "stockholm": (59.3293, 18.0686, "Stockholm"),
    "copenhagen": (55.6761, 12.5683, "Copenhagen"),
    "dublin": (53.3498, -6.2603, "Dublin"),
    "zurich": (47.3769, 8.5417, "Zurich"),
    "brussels": (50.8503, 4.3517, "Brussels"),
    "warsaw": (52.2297, 21.0122, "Warsaw"),
    "lisbon": (38.7223, -9.1393, "Lisbon"),
    "athens": (37.9838, 23.7275, "Athens"),
    "moscow": (55.7558, 37.6173, "Moscow"),
    "istanbul": (41.0082, 28.9784, "Istanbul"),
    # Asia
    "tokyo": (35.6762, 139.6503, "Tokyo"),
    "beijing": (39.9042, 116.4074, "Beijing"),
    "shanghai": (31.2304, 121.4737, "Shanghai"),
    "mumbai": (19.0760, 72.8777, "Mumbai"),
    "delhi": (28.7041, 77.1025, "Delhi"),
    "singapore": (1.3521, 103.8198, "Singapore"),
    "hong kong": (22.3193, 114.1694, "Hong Kong"),
    "seoul": (37.5665, 126.9780, "Seoul"),
    "bangkok": (13.7563, 100.5018, "Bangkok"),
    "dubai": (25.2048, 55.2708, "Dubai"),
    "taipei": (25.0330, 121.5654, "Taipei"),
    "kuala lumpur": (3.1390, 101.6869, "Kuala Lumpur"),
    "jakarta": (-6.2088, 106.8456, "Jakarta"),
    "manila": (14.5995, 120.9842, "Manila"),
    "bangalore": (12.9716, 77.5946, "Bangalore"),
    # South America
    "são paulo": (-23.5505, -46.6333, "São Paulo"),
    "sao paulo": (-23.5505, -46.6333, "São Paulo"),
    "rio de janeiro": (-22.9068, -43.1729, "Rio de Janeiro"),
    "rio": (-22.9068, -43.1729, "Rio de Janeiro"),
    "buenos aires": (-34.6037, -58.3816, "Buenos Aires"),
    "lima": (-12.0464, -77.0428, "Lima"),
    "bogota": (4.7110, -74.0721, "Bogotá"),
    "santiago": (-33.4489, -70.6693, "Santiago"),
    "caracas": (10.4806, -66.9036, "Caracas"),
    # Oceania
    "sydney": (-33.8688, 151.2093, "Sydney"),
    "melbourne": (-37.8136, 144.9631, "Melbourne"),
    "brisbane": (-27.4698, 153.0251, "Brisbane"),
    "perth": (-31.9505, 115.8605, "Perth"),
    "auckland": (-36.8485, 174.7633, "Auckland"),
    # Africa
    "cairo": (30.0444, 31.2357, "Cairo"),
    "johannesburg": (-26.2041, 28.0473, "Johannesburg"),
    "cape town": (-33.9249, 18.4241, "Cape Town"),
    "lagos": (6.5244, 3.3792, "Lagos"),
    "nairobi": (-1.2921, 36.8219, "Nairobi"),
    "casablanca": (33.5731, -7.5898, "Casablanca"),
    # Indigenous territories
    "standing rock": (45.750, -100.750, "Standing Rock Reservation"),
    "standing rock reservation": (45.750, -100.750, "Standing Rock Reservation"),
    "pine ridge": (43.000, -102.500, "Pine Ridge Reservation"),
    "pine ridge reservation": (43.000, -102.500, "Pine Ridge Reservation"),
    "navajo nation": (36.000, -109.500, "Navajo Nation"),
    "cherokee nation": (35.900, -94.800, "Cherokee Nation"),
    "osage nation": (36.500, -96.300, "Osage Nation"),
    "tohono oodham": (32.000, -111.900, "Tohono O'odham Nation"),
    "tohono oodham nation": (32.000, -111.900, "Tohono O'odham Nation"),
    "hopi reservation": (35.800, -110.200, "Hopi Reservation"),
    "blackfeet reservation": (48.600, -113.000, "Blackfeet Reservation"),
    # Middle East
    "tel aviv": (32.0853, 34.7818, "Tel Aviv"),
    "jerusalem": (31.7683, 35.2137, "Jerusalem"),
    "riyadh": (24.7136, 46.6753, "Riyadh"),
    "doha": (25.2854, 51.5310, "Doha"),
    "abu dhabi": (24.4539, 54.3773, "Abu Dhabi"),
}

# Approximate geographic centres
COUNTRY_COORDINATES: dict[str, tuple[float, float, str]] = {
    "usa": (37.0902, -95.7129, "USA"),
    "united states": (37.0902, -95.7129, "United States"),
    "uk": (55.3781, -3.4360, "UK"),
    "united kingdom": (55.3781, -3.4360, "United Kingdom"),
    "canada": (56.1304, -106.3468, "Canada"),
    "france": (46.2276, 2.2137, "France"),
    "germany": (51.1657, 10.4515, "Germany"),
    "spain": (40.4637, -3.7492, "Spain"),
    "italy": (41.8719, 12.5674, "Italy"),
    "australia": (-25.2744, 133.7751, "Australia"),
    "japan": (36.2048, 138.2529, "Japan"),
    "china": (35.8617, 104.1954, "China"),
    "india": (20.5937, 78.9629, "India"),
    "brazil": (-14.2350, -51.9253, "Brazil"),
    "argentina": (-38.4161, -63.6167, "Argentina"),
    "mexico": (23.6345, -102.5528, "Mexico"),
    "russia": (61.5240, 105.3188, "Russia"),
    "south africa": (-30.5595, 22.9375, "South Africa"),
    "egypt": (26.8206, 30.8025, "Egypt"),
    "nigeria": (9.0820, 8.6753, "Nigeria"),
    "kenya": (-0.0236, 37.9062, "Kenya"),
    "israel": (31.0461, 34.8516, "Israel"),
    "uae": (23.4241, 53.8478, "UAE"),
    "saudi arabia": (23.8859, 45.0792, "Saudi Arabia"),
    "turkey": (38.9637, 35.2433, "Turkey"),
    "south korea": (35.9078, 127.7669, "South Korea"),
    "indonesia": (-0.7893, 113.9213, "Indonesia"),
    "thailand": (15.8700, 100.9925, "Thailand"),
    "vietnam": (14.0583, 108.2772, "Vietnam"),
    "philippines": (12.8797, 121.7740, "Philippines"),
    "new zealand": (-40.9006, 174.8860, "New Zealand"),
}

ALL_PLACES: dict[str, tuple[float, float, str]] = {**CITY_COORDINATES, **COUNTRY_COORDINATES}


def _to_location(entry: tuple[float, float, str]) -> Location:
    lat, lng, name = entry
    return Location(name=name, lat=lat, lng=lng)


def lookup(text: str) -> Location | None:
    """Exact alias lookup, cities before countries."""
    key = text.strip().lower()
    entry = CITY_COORDINATES.get(key) or COUNTRY_COORDINATES.get(key)
    return _to_location(entry) if entry else None


def split_location_text(text: str) -> list[str]:
    """Split free text into individual location names.

    A single comma between short parts reads as "City, Country" and is kept
    whole; anything else is split on commas.
    """
    trimmed = text.strip()
    if not trimmed:
        return []

    parts = [part.strip() for part in trimmed.split(",")]
    if len(parts) == 2 and all(len(part.split()) <= 3 for part in parts):
        return [trimmed]
    return [part for part in parts if part]


def search(query: str, limit: int = 5, min_length: int = 2) -> list[Location]:
    """Autocomplete over the gazetteer.

    Exact alias matches rank first, then prefix matches, then substring
    matches. Places reachable through several aliases appear once.
    """
    if not query or len(query) < min_length:
        return []

    term = query.strip().lower()
    results: list[Location] = []
    seen: set[str] = set()

    def _take(entry: tuple[float, float, str]) -> None:
        if entry[2] not in seen:
            seen.add(entry[2])
            results.append(_to_location(entry))

    for key, entry in ALL_PLACES.items():
        if key == term:
            _take(entry)
    for matcher in (str.startswith, str.__contains__):
        for key, entry in ALL_PLACES.items():
            if len(results) >= limit:
                break
            if matcher(key, term):
                _take(entry)

    return results[:limit]


def format_location_name(locations: list[Location]) -> str:
    """Compact display name: "A", "A & B" or "A & N more"."""
    match locations:
        case []:
            return ""
        case [only]:
            return only.name
        case [first, second]:
            return f"{first.name} & {second.name}"
        case [first, *rest]:
            return f"{first.name} & {len(rest)} more"
