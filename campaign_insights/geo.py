import logging
from types import MappingProxyType
from typing import NamedTuple, Optional


logger = logging.getLogger(__name__)


class Coordinate(NamedTuple):
    lat: float
    lng: float


# Used for any region name missing from REGION_COORDINATES; also the map's initial view.
DEFAULT_COORDINATE = Coordinate(24.0, 54.0)

REGION_COORDINATES = MappingProxyType({
    # UAE emirates
    "Dubai": Coordinate(25.2048, 55.2708),
    "Sharjah": Coordinate(25.3463, 55.4209),
    "Abu Dhabi": Coordinate(24.4539, 54.3773),
    "Ajman": Coordinate(25.4052, 55.5136),
    "Ras Al Khaimah": Coordinate(25.6741, 55.9804),
    "Fujairah": Coordinate(25.1288, 56.3265),
    "Umm Al Quwain": Coordinate(25.5653, 55.5533),
    "Al Ain": Coordinate(24.1302, 55.8023),
    # Gulf
    "Riyadh": Coordinate(24.7136, 46.6753),
    "Jeddah": Coordinate(21.4858, 39.1925),
    "Doha": Coordinate(25.2854, 51.5310),
    "Muscat": Coordinate(23.5880, 58.3829),
    "Manama": Coordinate(26.2235, 50.5876),
    "Kuwait City": Coordinate(29.3759, 47.9774),
    # International
    "Cairo": Coordinate(30.0444, 31.2357),
    "London": Coordinate(51.5074, -0.1278),
    "New York": Coordinate(40.7128, -74.0060),
    "Tokyo": Coordinate(35.6762, 139.6503),
    "Singapore": Coordinate(1.3521, 103.8198),
    "Mumbai": Coordinate(19.0760, 72.8777),
})


def is_known_region(region: Optional[str]) -> bool:
    return region in REGION_COORDINATES


def resolve_coordinates(region: Optional[str]) -> Coordinate:
    coords = REGION_COORDINATES.get(region) if region is not None else None
    if coords is None:
        logger.debug("No coordinates for region %r, using default %s", region, DEFAULT_COORDINATE)
        return DEFAULT_COORDINATE
    return coords
