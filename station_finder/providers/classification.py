from typing import Iterable, Optional

from station_finder.locale import LocaleTables, default_locale

FIRE_STATION_TYPE = "fire_station"


def is_fire_station(
    name: str,
    address: str = "",
    types: Optional[Iterable[str]] = None,
    locale: Optional[LocaleTables] = None,
) -> bool:
    """
    Decide whether a raw search hit is a fire station.

    Args:
        name: Place name as returned by the provider.
        address: Place address.
        types: Category tags from the provider, if any.

    Returns:
        bool: True when tagged `fire_station` or the name or address carries a fire/service keyword.
    """
    locale = locale or default_locale()
    tags = [str(t).lower().replace(" ", "_") for t in (types or [])]
    if FIRE_STATION_TYPE in tags:
        return True
    text = f"{name or ''} {address or ''}".lower()
    return any(keyword in text for keyword in locale.fire_keywords)


def has_excluded_words(name: str, address: str = "", locale: Optional[LocaleTables] = None) -> bool:
    """True when name or address contains a known false-positive word (media, corporate...)."""
    locale = locale or default_locale()
    name_l = (name or "").lower()
    address_l = (address or "").lower()
    return any(word in name_l or word in address_l for word in locale.excluded_words)
