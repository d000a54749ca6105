"""Weather condition code -> icon file name."""

DEFAULT_ICON = "overcast.svg"

CONDITION_ICONS = {
    "thunderstorm": "thunderstorms.svg",
    "drizzle": "drizzle.svg",
    "rain": "rain.svg",
    "snow": "snow.svg",
    "clear": "clear.svg",
    "clouds": "clouds.svg",
    "mist": "mist.svg",
}


def map_condition_to_icon(condition_code: str) -> str:
    """Case-insensitive; unknown codes get the overcast icon."""
    return CONDITION_ICONS.get((condition_code or "").lower(), DEFAULT_ICON)
