from __future__ import annotations

from enum import Enum
import logging
from typing import TYPE_CHECKING

import torch

from .colors import RGBA, to_rgba
from .encode import encode_image

if TYPE_CHECKING:
    from .config import GraphConfig


LOGGER = logging.getLogger(__name__)


class GraphStyle(str, Enum):
    POINT = "point"
    BAR = "bar"
    # Older name for POINT.
    LINE = "point"

    @classmethod
    def parse(cls, value: "GraphStyle | str") -> "GraphStyle":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            member = cls.__members__.get(value.strip().upper())
            if member is not None:
                return member
        raise ValueError(f"unsupported graph style: {value!r}")


class SparklineGraph:
    """Scrolling sparkline held in an RGBA255 ``(height, width, 4)`` tensor.

    Each sample pushed shifts the image one column to the left and paints the
    freed rightmost column. Sample ``0`` is the bottom of the canvas and
    ``height`` is the top.
    """

    def __init__(
        self,
        width: int,
        height: int,
        foreground: RGBA | tuple[int, int, int],
        background: RGBA | tuple[int, int, int],
        style: GraphStyle | str = GraphStyle.POINT,
        *,
        image_format: str = "JPEG",
        quality: int = 75,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be > 0")
        if not 1 <= quality <= 100:
            raise ValueError("quality must be in 1..100")
        self._style = GraphStyle.parse(style)
        self._width = int(width)
        self._height = int(height)
        self._foreground = to_rgba(foreground)
        self._background = to_rgba(background)
        self._image_format = image_format
        self._quality = quality
        self._fg = torch.tensor(self._foreground, dtype=torch.uint8)
        self._bg = torch.tensor(self._background, dtype=torch.uint8)
        self._rows = torch.arange(self._height)
        self._pixels = self._bg.view(1, 1, 4).expand(self._height, self._width, 4).clone()

    @classmethod
    def from_config(cls, config: "GraphConfig") -> "SparklineGraph":
        return cls(
            width=config.width,
            height=config.height,
            foreground=config.foreground,
            background=config.background,
            style=config.style,
            image_format=config.image_format,
            quality=config.quality,
        )

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def foreground(self) -> RGBA:
        return self._foreground

    @property
    def background(self) -> RGBA:
        return self._background

    @property
    def style(self) -> GraphStyle:
        return self._style

    def snapshot(self) -> torch.Tensor:
        return self._pixels.clone()

    def column(self, x: int) -> torch.Tensor:
        self._validate_column(x)
        return self._pixels[:, x, :].clone()

    def blank(self) -> None:
        self._pixels[:, :, :] = self._bg

    def blank_column(self, x: int) -> None:
        self._validate_column(x)
        self._pixels[:, x, :] = self._bg

    def push_sample(self, value: int) -> bool:
        """Scroll left by one column and paint ``value`` into the last column.

        Returns False when the value is above ``height``; the last column then
        keeps the duplicate left behind by the scroll.
        """
        self._scroll()
        return self._render_column(value)

    def encode(self, *, image_format: str | None = None, quality: int | None = None) -> bytes:
        return encode_image(
            self._pixels,
            image_format=image_format or self._image_format,
            quality=self._quality if quality is None else quality,
        )

    def _scroll(self) -> None:
        if self._width < 2:
            return
        src = self._pixels[:, 1:, :].clone()
        self._pixels[:, : self._width - 1, :] = src

    def _render_column(self, value: int) -> bool:
        value = int(value)
        if value > self._height:
            LOGGER.warning("sample %d must not exceed height %d, ignoring", value, self._height)
            return False
        if value < 0:
            LOGGER.warning("sample %d is negative, painting an empty column", value)
        # Row 0 is the top of the image.
        row = self._height - value
        if self._style is GraphStyle.BAR:
            mask = self._rows >= row
        else:
            mask = self._rows == row
        self._pixels[:, self._width - 1, :] = torch.where(mask.unsqueeze(1), self._fg, self._bg)
        return True

    def _validate_column(self, x: int) -> None:
        if x < 0 or x >= self._width:
            raise ValueError(f"column index out of range: {x}")
