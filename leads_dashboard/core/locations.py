"""Locations offered by the company search, grouped by country."""

from typing import Dict, Tuple

GROUPED_LOCATIONS: Dict[str, Tuple[str, ...]] = {
    "United States": (
        "New York, USA",
        "Los Angeles, USA",
        "Chicago, USA",
        "Houston, USA",
        "Phoenix, USA",
        "Philadelphia, USA",
        "San Antonio, USA",
        "San Diego, USA",
        "Dallas, USA",
        "San Jose, USA",
    ),
    "United Kingdom": (
        "London, UK",
        "Manchester, UK",
        "Birmingham, UK",
        "Leeds, UK",
        "Glasgow, UK",
    ),
    "Canada": (
        "Toronto, Canada",
        "Vancouver, Canada",
        "Montreal, Canada",
        "Calgary, Canada",
    ),
    "Australia": (
        "Sydney, Australia",
        "Melbourne, Australia",
        "Brisbane, Australia",
        "Perth, Australia",
    ),
    "Germany": ("Berlin, Germany", "Munich, Germany", "Frankfurt, Germany"),
    "France": ("Paris, France", "Lyon, France", "Marseille, France"),
    "Japan": ("Tokyo, Japan", "Osaka, Japan", "Nagoya, Japan"),
    "India": ("Mumbai, India", "Delhi, India", "Bangalore, India", "Chennai, India"),
    "Other Locations": ("Singapore", "Hong Kong", "Dubai, UAE", "Abu Dhabi, UAE"),
}

LOCATIONS: Tuple[str, ...] = tuple(city for cities in GROUPED_LOCATIONS.values() for city in cities)


def is_known_location(location: str) -> bool:
    return location in LOCATIONS


def unknown_location_message(location: str) -> str:
    return f"Unknown location: {location}"
