from __future__ import annotations

import contextlib
import importlib.util
import io
from pathlib import Path
import sys
import tempfile
import unittest
from unittest import mock

from PIL import Image
import torch

from sparkicon.encode import decode_image

MODULE_PATH = Path(__file__).resolve().parents[1] / "main.py"
SPEC = importlib.util.spec_from_file_location("sparkicon_cli_main", MODULE_PATH)
if SPEC is None or SPEC.loader is None:
    raise RuntimeError(f"failed to load module spec for {MODULE_PATH}")
MODULE = importlib.util.module_from_spec(SPEC)
sys.modules[SPEC.name] = MODULE
SPEC.loader.exec_module(MODULE)

cli_main = MODULE.main


class CliTests(unittest.TestCase):
    def _run(self, argv: list[str]) -> tuple[int, str]:
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = cli_main(argv)
        return code, out.getvalue()

    def test_render_writes_png_with_bars(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            output = Path(td) / "icon.png"
            code, text = self._run(
                [
                    "render",
                    "--width", "4",
                    "--height", "3",
                    "--style", "bar",
                    "--foreground", "#ff0000",
                    "--background", "black",
                    "--format", "png",
                    "--output", str(output),
                    "1", "3", "9",
                ]
            )
            self.assertEqual(code, 0)
            self.assertIn("samples=3 rejected=1", text)
            pixels = decode_image(output.read_bytes())
        red = torch.all(pixels == torch.tensor([255, 0, 0, 255], dtype=torch.uint8), dim=-1)
        self.assertEqual(red.sum(dim=0).tolist(), [0, 1, 3, 3])

    def test_render_reads_samples_from_stdin(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            output = Path(td) / "icon.jpg"
            with mock.patch("sys.stdin", io.StringIO("10 20\n30 x\n")):
                code, text = self._run(["render", "--output", str(output)])
            self.assertEqual(code, 0)
            self.assertIn("samples=3", text)
            with Image.open(output) as image:
                self.assertEqual(image.size, (100, 100))
                self.assertEqual(image.format, "JPEG")

    def test_render_respects_show_graph_flag(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            config = Path(td) / "sparkicon.toml"
            config.write_text("[graph]\nshow_graph = false\n", encoding="utf-8")
            output = Path(td) / "icon.jpg"
            code, text = self._run(["render", "--config", str(config), "--output", str(output), "1"])
            self.assertEqual(code, 0)
            self.assertIn("nothing to render", text)
            self.assertFalse(output.exists())

    def test_demo_runs_bounded_ticks(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            output = Path(td) / "demo.png"
            code, text = self._run(
                [
                    "demo",
                    "--width", "12",
                    "--height", "8",
                    "--format", "png",
                    "--ticks", "4",
                    "--interval-s", "0.001",
                    "--output", str(output),
                ]
            )
            self.assertEqual(code, 0)
            self.assertIn("ticks=4", text)
            pixels = decode_image(output.read_bytes())
        self.assertEqual(tuple(pixels.shape), (8, 12, 4))

    def test_invalid_overrides_report_clean_errors(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            output = Path(td) / "icon.jpg"
            for flags in (["--quality", "0"], ["--width", "0"], ["--foreground", "nope"], ["--quality", "101"]):
                with self.subTest(flags=flags):
                    err = io.StringIO()
                    with contextlib.redirect_stderr(err):
                        code, _ = self._run(["render", *flags, "--output", str(output), "1"])
                    self.assertEqual(code, 2)
                    self.assertIn("error:", err.getvalue())
            self.assertFalse(output.exists())

    def test_overrides_apply_on_top_of_config_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            config = Path(td) / "sparkicon.toml"
            config.write_text('[graph]\nwidth = 6\nheight = 5\nforeground = "red"\n', encoding="utf-8")
            output = Path(td) / "icon.png"
            code, _ = self._run(
                ["render", "--config", str(config), "--height", "2", "--format", "png", "--output", str(output), "2"]
            )
            self.assertEqual(code, 0)
            pixels = decode_image(output.read_bytes())
        self.assertEqual(tuple(pixels.shape), (2, 6, 4))
        self.assertEqual(pixels[0, 5].tolist(), [255, 0, 0, 255])

    def test_missing_config_file_reports_error(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            err = io.StringIO()
            with contextlib.redirect_stderr(err):
                code, _ = self._run(
                    ["render", "--config", str(Path(td) / "absent.toml"), "--output", str(Path(td) / "i.jpg"), "1"]
                )
        self.assertEqual(code, 2)
        self.assertIn("config file not found", err.getvalue())

    def test_demo_rejects_non_positive_interval(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            err = io.StringIO()
            with contextlib.redirect_stderr(err):
                code, _ = self._run(["demo", "--interval-s", "0", "--output", str(Path(td) / "demo.png")])
        self.assertEqual(code, 2)


if __name__ == "__main__":
    unittest.main()
