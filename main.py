from __future__ import annotations

import argparse
from dataclasses import asdict
import itertools
import logging
import math
from pathlib import Path
import sys
from typing import Sequence

from sparkicon import (
    ConfigError,
    EncodingError,
    GraphConfig,
    SampleFeedThread,
    SharedGraph,
    SparklineGraph,
    load_config,
)

LOGGER = logging.getLogger("sparkicon")


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="sparkicon")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Push samples into a blank graph and write one icon.")
    _add_graph_arguments(render)
    render.add_argument(
        "samples",
        nargs="*",
        type=int,
        help="Integer samples, oldest first. Read from stdin when omitted.",
    )

    demo = sub.add_parser("demo", help="Feed a synthetic temperature curve into the graph on a timer.")
    _add_graph_arguments(demo)
    demo.add_argument("--ticks", type=int, default=30)
    demo.add_argument("--interval-s", type=float, default=None)

    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    try:
        config = _resolve_config(args)
    except (ConfigError, FileNotFoundError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    if not config.show_graph:
        print("show_graph is disabled in config, nothing to render")
        return 0

    if args.command == "render":
        samples = list(args.samples) if args.samples else _read_samples(sys.stdin)
        graph = SparklineGraph.from_config(config)
        graph.blank()
        rejected = 0
        for value in samples:
            if not graph.push_sample(value):
                rejected += 1
        try:
            icon = graph.encode()
        except EncodingError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
        args.output.write_bytes(icon)
        print(f"wrote {args.output}: samples={len(samples)} rejected={rejected} bytes={len(icon)}")
        return 0

    if args.command == "demo":
        interval_s = args.interval_s if args.interval_s is not None else (min(config.interval_s, 0.1) or 0.1)
        if args.ticks <= 0 or interval_s <= 0:
            print("error: demo needs --ticks > 0 and --interval-s > 0", file=sys.stderr)
            return 2
        shared = SharedGraph(SparklineGraph.from_config(config))
        shared.blank()
        provider = _synthetic_temperature(config.height)
        feed = SampleFeedThread(
            shared,
            provider=provider,
            sink=args.output.write_bytes,
            interval_s=interval_s,
            max_ticks=args.ticks,
        )
        feed.start()
        try:
            feed.join()
        except KeyboardInterrupt:
            pass
        finally:
            feed.stop()
        if feed.last_error is not None:
            print(f"error: {feed.last_error}", file=sys.stderr)
            return 1
        print(f"demo complete: ticks={feed.ticks} output={args.output}")
        return 0

    raise RuntimeError(f"unsupported command: {args.command}")


def _add_graph_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", type=Path, default=None, help="TOML file with a [graph] table.")
    parser.add_argument("--width", type=int, default=None)
    parser.add_argument("--height", type=int, default=None)
    parser.add_argument("--style", choices=["point", "line", "bar"], default=None)
    parser.add_argument("--foreground", default=None, help="Color name or #rrggbb.")
    parser.add_argument("--background", default=None, help="Color name or #rrggbb.")
    parser.add_argument("--format", dest="image_format", default=None, help="Pillow format name, e.g. JPEG or PNG.")
    parser.add_argument("--quality", type=int, default=None)
    parser.add_argument("--output", type=Path, required=True)


def _resolve_config(args: argparse.Namespace) -> GraphConfig:
    config = load_config(args.config) if args.config is not None else GraphConfig()
    overrides = {
        key: getattr(args, key)
        for key in ("width", "height", "style", "foreground", "background", "image_format", "quality")
        if getattr(args, key) is not None
    }
    if not overrides:
        return config
    # Re-validate so command line values get the same checks as the file.
    return GraphConfig.from_mapping({**asdict(config), **overrides})


def _read_samples(stream) -> list[int]:
    out: list[int] = []
    for line in stream:
        for token in line.split():
            try:
                out.append(int(token))
            except ValueError:
                LOGGER.warning("ignoring non-integer sample %r", token)
    return out


def _synthetic_temperature(height: int):
    ticks = itertools.count()

    def provider() -> int:
        t = next(ticks)
        return int(round(height / 2 + (height / 2 - 1) * math.sin(t / 6.0)))

    return provider


if __name__ == "__main__":
    sys.exit(main())
