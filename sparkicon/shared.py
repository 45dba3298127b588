from __future__ import annotations

import threading

import torch

from .graph import SparklineGraph


class SharedGraph:
    """Lock-guarded access to a ``SparklineGraph`` shared between threads.

    Every push is committed as one scroll+render unit, and encoding never
    observes a half-shifted grid.
    """

    def __init__(self, graph: SparklineGraph) -> None:
        self._graph = graph
        self._lock = threading.Lock()
        self._revision = 0

    @property
    def width(self) -> int:
        return self._graph.width

    @property
    def height(self) -> int:
        return self._graph.height

    @property
    def revision(self) -> int:
        return self._revision

    def blank(self) -> None:
        with self._lock:
            self._graph.blank()
            self._revision += 1

    def push_sample(self, value: int) -> bool:
        with self._lock:
            accepted = self._graph.push_sample(value)
            self._revision += 1
            return accepted

    def snapshot(self) -> torch.Tensor:
        with self._lock:
            return self._graph.snapshot()

    def encode(self, *, image_format: str | None = None, quality: int | None = None) -> bytes:
        with self._lock:
            return self._graph.encode(image_format=image_format, quality=quality)
