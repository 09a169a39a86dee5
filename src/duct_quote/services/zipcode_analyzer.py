"""
Zipcode coverage analysis for the Utah service area.

Compares the surcharge table against known county zipcode ranges to find
zipcodes that have not been priced yet.
"""
from typing import Iterable

# County -> inclusive (start, end) zipcode ranges and the main cities
UTAH_COUNTIES = {
    "Salt Lake County": {
        "ranges": [(84101, 84129), (84150, 84152), (84165, 84165), (84170, 84171), (84180, 84190)],
        "cities": ["Salt Lake City", "West Valley City", "Sandy", "West Jordan", "Taylorsville",
                   "Murray", "Draper", "Riverton", "South Jordan", "Midvale",
                   "Cottonwood Heights", "Holladay", "Millcreek"],
    },
    "Utah County": {
        "ranges": [(84003, 84006), (84042, 84043), (84057, 84062), (84097, 84097),
                   (84601, 84606), (84626, 84629), (84631, 84633), (84645, 84648),
                   (84651, 84653), (84655, 84660), (84662, 84663), (84664, 84665)],
        "cities": ["Provo", "Orem", "Lehi", "American Fork", "Pleasant Grove", "Springville",
                   "Spanish Fork", "Payson", "Saratoga Springs", "Eagle Mountain", "Lindon",
                   "Mapleton"],
    },
    "Davis County": {
        "ranges": [(84010, 84025), (84037, 84037), (84040, 84041), (84054, 84056),
                   (84075, 84075), (84087, 84087)],
        "cities": ["Layton", "Bountiful", "Farmington", "Kaysville", "Clearfield", "Syracuse",
                   "Clinton", "Centerville", "Woods Cross", "North Salt Lake", "Fruit Heights"],
    },
    "Weber County": {
        "ranges": [(84401, 84415), (84067, 84067)],
        "cities": ["Ogden", "Roy", "Riverdale", "South Ogden", "Washington Terrace",
                   "North Ogden", "Pleasant View", "Harrisville", "Farr West"],
    },
    "Summit County": {
        "ranges": [(84017, 84017), (84032, 84036), (84049, 84049), (84060, 84061),
                   (84068, 84068), (84098, 84098)],
        "cities": ["Park City", "Heber City", "Coalville", "Kamas", "Oakley", "Francis"],
    },
    "Tooele County": {
        "ranges": [(84029, 84029), (84074, 84074), (84081, 84081)],
        "cities": ["Tooele", "Grantsville", "Stansbury Park"],
    },
    "Cache County": {
        "ranges": [(84302, 84302), (84310, 84341)],
        "cities": ["Logan", "North Logan", "Smithfield", "Hyde Park", "Providence", "Nibley",
                   "Hyrum", "Millville"],
    },
}

SERVICE_AREA = (84000, 84999)
NEARBY_RADIUS = 20


def _existing(zipcodes: Iterable[str]) -> set[int]:
    return {int(z) for z in zipcodes if str(z).isdigit()}


def _county_zipcodes(county: str) -> list[int]:
    if county not in UTAH_COUNTIES:
        raise KeyError(f"Unknown county '{county}'")
    return [
        zipcode
        for start, end in UTAH_COUNTIES[county]["ranges"]
        for zipcode in range(start, end + 1)
    ]


def analyze_county(county: str, zipcodes: Iterable[str]) -> list[str]:
    """Zipcodes of county that are missing from zipcodes."""
    existing = _existing(zipcodes)
    return [f"{z:05d}" for z in _county_zipcodes(county) if z not in existing]


def find_nearby_missing(zipcode: str, zipcodes: Iterable[str], radius: int = NEARBY_RADIUS) -> list[str]:
    """Unpriced service-area zipcodes within radius of zipcode."""
    if len(zipcode) != 5 or not zipcode.isdigit():
        raise ValueError("Please enter a valid 5-digit zipcode.")

    base = int(zipcode)
    existing = _existing(zipcodes)
    low, high = SERVICE_AREA
    return [
        f"{z:05d}"
        for z in range(base - radius, base + radius + 1)
        if low <= z <= high and z not in existing
    ]


def county_coverage(county: str, zipcodes: Iterable[str]) -> dict:
    """How many of the county's zipcodes are in the surcharge table."""
    existing = _existing(zipcodes)
    county_zips = _county_zipcodes(county)
    covered = sum(1 for z in county_zips if z in existing)
    total = len(county_zips)
    return {
        "county": county,
        "total": total,
        "covered": covered,
        "percentage": round(covered / total * 100) if total else 0,
    }
