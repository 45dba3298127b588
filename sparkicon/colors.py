from __future__ import annotations

from typing import TypeAlias

RGBA: TypeAlias = tuple[int, int, int, int]

GRAY: RGBA = (50, 50, 50, 255)
DARK_GREEN: RGBA = (0, 100, 0, 255)
RED: RGBA = (255, 0, 0, 255)

NAMED_COLORS: dict[str, RGBA] = {
    "gray": GRAY,
    "grey": GRAY,
    "dark_green": DARK_GREEN,
    "red": RED,
    "black": (0, 0, 0, 255),
    "white": (255, 255, 255, 255),
}


def to_rgba(color: object) -> RGBA:
    """Normalize a 3 or 4 channel color into an RGBA255 tuple.

    Accepts sequences of ints, ``"#rrggbb"`` / ``"#rrggbbaa"`` strings and the
    names in ``NAMED_COLORS``.
    """
    if isinstance(color, str):
        return _parse_color_string(color)
    try:
        channels = [int(c) for c in color]  # type: ignore[union-attr]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid color: {color!r}") from exc
    if len(channels) == 3:
        channels.append(255)
    if len(channels) != 4:
        raise ValueError(f"color must have 3 or 4 channels, got {len(channels)}")
    for c in channels:
        if c < 0 or c > 255:
            raise ValueError(f"color channel out of range 0..255: {c}")
    return (channels[0], channels[1], channels[2], channels[3])


def _parse_color_string(value: str) -> RGBA:
    text = value.strip().lower()
    if text in NAMED_COLORS:
        return NAMED_COLORS[text]
    if not text.startswith("#") or len(text) not in (7, 9):
        raise ValueError(f"invalid color string: {value!r}")
    try:
        channels = [int(text[i : i + 2], 16) for i in range(1, len(text), 2)]
    except ValueError as exc:
        raise ValueError(f"invalid color string: {value!r}") from exc
    return to_rgba(channels)
