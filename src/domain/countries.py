"""
Country registry - the fixed set of countries a seller can register from.

Values double as select-menu option values and as the stored Country
column, so they must stay stable once records exist.
"""

from dataclasses import dataclass

from .exceptions import InvalidSelection


@dataclass(frozen=True)
class Country:
    """Selectable country."""

    name: str
    code: str  # ISO 3166-1 alpha-2
    flag: str


# Select menus accept at most 25 options
COUNTRIES: tuple[Country, ...] = (
    Country("Netherlands", "NL", "🇳🇱"),
    Country("Belgium", "BE", "🇧🇪"),
    Country("Germany", "DE", "🇩🇪"),
    Country("France", "FR", "🇫🇷"),
    Country("Luxembourg", "LU", "🇱🇺"),
    Country("Austria", "AT", "🇦🇹"),
    Country("Switzerland", "CH", "🇨🇭"),
    Country("United Kingdom", "GB", "🇬🇧"),
    Country("Ireland", "IE", "🇮🇪"),
    Country("Spain", "ES", "🇪🇸"),
    Country("Portugal", "PT", "🇵🇹"),
    Country("Italy", "IT", "🇮🇹"),
    Country("Denmark", "DK", "🇩🇰"),
    Country("Sweden", "SE", "🇸🇪"),
    Country("Norway", "NO", "🇳🇴"),
    Country("Finland", "FI", "🇫🇮"),
    Country("Poland", "PL", "🇵🇱"),
    Country("Czech Republic", "CZ", "🇨🇿"),
    Country("Greece", "GR", "🇬🇷"),
)

_BY_NAME = {country.name: country for country in COUNTRIES}


def get_country(value: str) -> Country:
    """
    Look up a country by its option value.

    Raises:
        InvalidSelection: If the value is not a registered country
    """
    try:
        return _BY_NAME[value]
    except KeyError:
        raise InvalidSelection(f"Unknown country: {value!r}") from None
