from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import tomllib
from typing import Any, Mapping

from .colors import DARK_GREEN, GRAY, RGBA, to_rgba
from .errors import ConfigError
from .graph import GraphStyle


@dataclass(frozen=True)
class GraphConfig:
    width: int = 100
    height: int = 100
    foreground: RGBA = DARK_GREEN
    background: RGBA = GRAY
    style: GraphStyle = GraphStyle.BAR
    # 0 disables the timer; updates then only happen on request.
    interval_s: float = 60.0
    image_format: str = "JPEG"
    quality: int = 75
    show_graph: bool = True

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "GraphConfig":
        """Build a config from a parsed mapping; missing keys keep their defaults."""
        defaults = cls()
        unknown = sorted(set(raw) - set(cls.__dataclass_fields__))
        if unknown:
            raise ConfigError(f"unknown config field(s): {', '.join(unknown)}")
        config = cls(
            width=_coerce_positive_int(raw.get("width", defaults.width), "width"),
            height=_coerce_positive_int(raw.get("height", defaults.height), "height"),
            foreground=_coerce_color(raw.get("foreground", defaults.foreground), "foreground"),
            background=_coerce_color(raw.get("background", defaults.background), "background"),
            style=_coerce_style(raw.get("style", defaults.style)),
            interval_s=_coerce_non_negative_float(raw.get("interval_s", defaults.interval_s), "interval_s"),
            image_format=_coerce_str(raw.get("image_format", defaults.image_format), "image_format").upper(),
            quality=_coerce_positive_int(raw.get("quality", defaults.quality), "quality"),
            show_graph=_coerce_bool(raw.get("show_graph", defaults.show_graph), "show_graph"),
        )
        if config.quality > 100:
            raise ConfigError("quality must be in 1..100")
        return config


def load_config(path: str | Path) -> GraphConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"config file not found: {config_path}")
    with config_path.open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML in {config_path}: {exc}") from exc
    # Allow either a flat file or a [graph] table.
    table = raw.get("graph", raw)
    if not isinstance(table, dict):
        raise ConfigError("graph must be a table")
    return GraphConfig.from_mapping(table)


def _coerce_positive_int(value: object, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{label} must be an integer")
    if value <= 0:
        raise ConfigError(f"{label} must be > 0")
    return value


def _coerce_non_negative_float(value: object, label: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{label} must be a number")
    if value < 0:
        raise ConfigError(f"{label} must be >= 0")
    return float(value)


def _coerce_str(value: object, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{label} must be a non-empty string")
    return value.strip()


def _coerce_bool(value: object, label: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{label} must be a boolean")
    return value


def _coerce_color(value: object, label: str) -> RGBA:
    try:
        return to_rgba(value)
    except ValueError as exc:
        raise ConfigError(f"{label}: {exc}") from exc


def _coerce_style(value: object) -> GraphStyle:
    try:
        return GraphStyle.parse(value)  # type: ignore[arg-type]
    except ValueError as exc:
        raise ConfigError(f"style must be one of: point, line, bar (got {value!r})") from exc
