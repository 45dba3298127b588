from __future__ import annotations

import io

import numpy as np
from PIL import Image
import torch

from .errors import EncodingError

# Formats that cannot store an alpha channel.
_RGB_ONLY_FORMATS = {"JPEG", "BMP"}


def encode_image(pixels: torch.Tensor, *, image_format: str = "JPEG", quality: int = 75) -> bytes:
    """Serialize an ``(h, w, 4)`` uint8 RGBA tensor into compressed image bytes."""
    if not torch.is_tensor(pixels):
        raise EncodingError("pixels must be a torch.Tensor")
    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise EncodingError(f"pixels has invalid shape: {tuple(pixels.shape)} expected (h, w, 4)")
    if pixels.shape[0] <= 0 or pixels.shape[1] <= 0:
        raise EncodingError(f"pixels has invalid dimensions: {tuple(pixels.shape)}")
    if pixels.dtype != torch.uint8:
        raise EncodingError(f"pixels must be uint8, got {pixels.dtype}")

    fmt = image_format.strip().upper()
    if fmt == "JPG":
        fmt = "JPEG"
    data = np.ascontiguousarray(pixels.detach().cpu().numpy())
    buf = io.BytesIO()
    try:
        image = Image.fromarray(data)
        if fmt in _RGB_ONLY_FORMATS:
            image = image.convert("RGB")
        params: dict[str, object] = {}
        if fmt in ("JPEG", "WEBP"):
            params["quality"] = int(quality)
        image.save(buf, format=fmt, **params)
    except (OSError, ValueError, KeyError, MemoryError) as exc:
        raise EncodingError(f"failed to encode {fmt}: {exc}") from exc
    return buf.getvalue()


def decode_image(data: bytes) -> torch.Tensor:
    """Decode image bytes into an ``(h, w, 4)`` uint8 RGBA tensor."""
    try:
        with Image.open(io.BytesIO(data)) as image:
            arr = np.asarray(image.convert("RGBA"), dtype=np.uint8)
    except (OSError, ValueError) as exc:
        raise EncodingError(f"failed to decode image: {exc}") from exc
    return torch.from_numpy(arr.copy())
