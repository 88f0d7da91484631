from enum import Enum
from typing import NamedTuple


VALID_COLOUR_SCHEMES = ("green", "purple", "red", "blue")
DEFAULT_COLOUR_SCHEME = "blue"
GRADIENT_CEILING = 200


class ThemeColour(NamedTuple):
    """Colour with separate light and dark appearance values."""

    light: str
    dark: str

    def resolve(self, dark: bool = False) -> str:
        return self.dark if dark else self.light


BACKGROUND = ThemeColour(light="#ffffff", dark="#242424")
EMPTY = ThemeColour(light="#eaedf6", dark="#525062")
TEXT_PRIMARY = ThemeColour(light="#000000", dark="#ffffff")


class ReviewBucket(str, Enum):
    NONE = "none"
    VERY_LIGHT = "veryLight"
    LIGHT = "light"
    MEDIUM = "medium"
    DARK = "dark"
    VERY_DARK = "veryDark"

    @property
    def level(self) -> int:
        return list(ReviewBucket).index(self)


PALETTES: dict[str, dict[ReviewBucket, str]] = {
    "green": {
        ReviewBucket.VERY_LIGHT: "#e5ffcc",
        ReviewBucket.LIGHT: "#ccff99",
        ReviewBucket.MEDIUM: "#99ff66",
        ReviewBucket.DARK: "#66cc33",
        ReviewBucket.VERY_DARK: "#339900",
    },
    "blue": {
        ReviewBucket.VERY_LIGHT: "#abd4f2",
        ReviewBucket.LIGHT: "#84bded",
        ReviewBucket.MEDIUM: "#5ea5e8",
        ReviewBucket.DARK: "#1f6dc7",
        ReviewBucket.VERY_DARK: "#18477c",
    },
    "red": {
        ReviewBucket.VERY_LIGHT: "#ff9496",
        ReviewBucket.LIGHT: "#ff7776",
        ReviewBucket.MEDIUM: "#ff5754",
        ReviewBucket.DARK: "#ff2e2e",
        ReviewBucket.VERY_DARK: "#a31f1f",
    },
    "purple": {
        ReviewBucket.VERY_LIGHT: "#dfabf2",
        ReviewBucket.LIGHT: "#d389ee",
        ReviewBucket.MEDIUM: "#c565e9",
        ReviewBucket.DARK: "#b73ae4",
        ReviewBucket.VERY_DARK: "#72248f",
    },
}


def review_bucket(count: int) -> ReviewBucket:
    """Map a daily review count to its intensity bucket."""

    if count <= 0:
        return ReviewBucket.NONE
    if count <= 20:
        return ReviewBucket.VERY_LIGHT
    if count <= 50:
        return ReviewBucket.LIGHT
    if count <= 100:
        return ReviewBucket.MEDIUM
    if count <= 200:
        return ReviewBucket.DARK
    return ReviewBucket.VERY_DARK


def resolve_colour_scheme(value: str | None) -> str:
    """Return the lower-cased scheme if allowed, otherwise the default."""

    if value and value.strip().lower() in VALID_COLOUR_SCHEMES:
        return value.strip().lower()
    return DEFAULT_COLOUR_SCHEME


def bucket_colour(bucket: ReviewBucket, scheme: str, dark: bool = False) -> str:
    if bucket is ReviewBucket.NONE:
        return EMPTY.resolve(dark)
    return PALETTES[resolve_colour_scheme(scheme)][bucket]


def _hex_to_rgb(value: str) -> tuple[int, int, int]:
    value = value.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def _rgb_to_hex(rgb: tuple[int, int, int]) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb)


def gradient_colour(
    count: int,
    scheme: str,
    ceiling: int = GRADIENT_CEILING,
    dark: bool = False,
) -> str:
    """Interpolate between the palette's lightest and darkest colours.

    Counts are clamped to `ceiling`; zero keeps the empty cell colour.
    """

    if ceiling <= 0:
        raise ValueError("ceiling must be positive")
    if count <= 0:
        return EMPTY.resolve(dark)

    palette = PALETTES[resolve_colour_scheme(scheme)]
    start = _hex_to_rgb(palette[ReviewBucket.VERY_LIGHT])
    end = _hex_to_rgb(palette[ReviewBucket.VERY_DARK])
    ratio = min(count, ceiling) / ceiling

    return _rgb_to_hex(
        tuple(round(low + (high - low) * ratio) for low, high in zip(start, end))
    )


def colour_for_count(
    count: int,
    scheme: str,
    mode: str = "buckets",
    dark: bool = False,
) -> str:
    if mode == "gradient":
        return gradient_colour(count, scheme, dark=dark)
    return bucket_colour(review_bucket(count), scheme, dark=dark)
