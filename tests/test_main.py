"""Tests for main.py CLI functionality."""

import io
import logging
import zipfile
from unittest.mock import patch

import pytest

from webready.core.logging_config import set_debug_logging
from webready.main import build_parser, main
from webready.testing.fakes import create_test_image


def _write_image(path, width=1000, height=500):
    path.write_bytes(create_test_image(width, height))
    return str(path)


class TestMainCLI:
    """Tests for the main CLI functionality."""

    def test_main_with_no_args_shows_help(self):
        """Test that running main without arguments shows help."""
        with patch("sys.argv", ["webready"]):
            with patch("argparse.ArgumentParser.print_help") as mock_help:
                with patch("sys.exit") as mock_exit:
                    main()
                    mock_help.assert_called_once()
                    mock_exit.assert_called_once_with(1)

    def test_main_version_command(self):
        """Test version command output."""
        with patch("sys.argv", ["webready", "version"]):
            with patch("builtins.print") as mock_print:
                with patch("sys.exit") as mock_exit, patch(
                    "argparse.ArgumentParser.print_help"
                ) as mock_help:
                    main()
                    mock_help.assert_not_called()
                    mock_print.assert_any_call("WebReady CLI")
                    mock_print.assert_any_call("Version 0.1.0")
                    mock_print.assert_any_call(
                        "Responsive WebP/AVIF derivatives with ready-to-use markup"
                    )
                    mock_exit.assert_called_once_with(0)

    def test_main_process_command_dispatches(self):
        """Test process command reaches run_single with parsed options."""
        test_args = [
            "webready",
            "process",
            "hero.jpg",
            "--widths",
            "480,960",
            "--formats",
            "webp,avif",
            "--basename",
            "hero",
            "--strict",
        ]

        with patch("sys.argv", test_args):
            with patch("webready.main.run_single") as mock_run:
                main()
                args = mock_run.call_args[0][0]
                assert args.image == "hero.jpg"
                assert args.widths == "480,960"
                assert args.formats == "webp,avif"
                assert args.basename == "hero"
                assert args.strict is True

    def test_main_batch_command_dispatches(self):
        """Test batch command reaches run_batch with its processor."""
        test_args = ["webready", "batch", "a.jpg", "b.jpg", "--processor", "asyncio"]

        with patch("sys.argv", test_args):
            with patch("webready.main.run_batch") as mock_run:
                main()
                args = mock_run.call_args[0][0]
                assert args.images == ["a.jpg", "b.jpg"]
                assert args.processor == "asyncio"

    def test_batch_rejects_unknown_processor(self):
        """Test argparse rejects processors that are not registered."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["batch", "a.jpg", "--processor", "gpu"])

    def test_batch_has_no_basename_option(self):
        """Test batch does not accept a base name."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["batch", "a.jpg", "--basename", "x"])


class TestCommandsEndToEnd:
    """Run the commands against real files."""

    def test_process_writes_archive(self, tmp_path):
        """Test process writes <basename>-assets.zip into the output directory."""
        image = _write_image(tmp_path / "banner.png")
        out_dir = tmp_path / "out"
        out_dir.mkdir()

        with patch("sys.argv", ["webready", "process", image, "-o", str(out_dir)]):
            main()

        archive_path = out_dir / "banner-assets.zip"
        with zipfile.ZipFile(io.BytesIO(archive_path.read_bytes())) as archive:
            assert archive.namelist() == [
                "banner-480.webp",
                "banner-768.webp",
                "snippet.html",
            ]

    def test_process_to_explicit_file(self, tmp_path):
        """Test -o may name the archive file itself."""
        image = _write_image(tmp_path / "banner.png")
        target = tmp_path / "nested" / "custom.zip"

        with patch(
            "sys.argv",
            ["webready", "process", image, "--widths", "300", "-o", str(target)],
        ):
            main()

        with zipfile.ZipFile(target) as archive:
            assert archive.namelist() == ["banner-300.webp", "snippet.html"]

    def test_batch_writes_archive(self, tmp_path):
        """Test batch writes webready-batch.zip and skips unreadable files."""
        first = _write_image(tmp_path / "one.png")
        second = _write_image(tmp_path / "two.png", width=600, height=600)
        broken = tmp_path / "broken.jpg"
        broken.write_bytes(b"not an image")

        test_args = [
            "webready",
            "batch",
            first,
            second,
            str(broken),
            "--widths",
            "480",
            "-o",
            str(tmp_path),
        ]
        with patch("sys.argv", test_args):
            main()

        with zipfile.ZipFile(tmp_path / "webready-batch.zip") as archive:
            assert archive.namelist() == [
                "one-480.webp",
                "two-480.webp",
                "snippets.html",
            ]
            document = archive.read("snippets.html").decode("utf-8")
        assert "<!-- 1 skipped: broken.jpg -->" in document

    def test_missing_file_exits_with_error(self, tmp_path):
        """Test a WebReady error becomes exit status 1."""
        missing = str(tmp_path / "nope.jpg")

        with patch("sys.argv", ["webready", "process", missing, "-o", str(tmp_path)]):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 1

    def test_too_small_image_exits_with_error(self, tmp_path):
        """Test a request with no feasible width fails the command."""
        image = _write_image(tmp_path / "tiny.png", width=100, height=100)

        with patch("sys.argv", ["webready", "process", image, "-o", str(tmp_path)]):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 1
        assert not (tmp_path / "tiny-assets.zip").exists()

    def test_debug_flag_leaves_root_logger_alone(self, tmp_path):
        """Test --debug raises only the package loggers to DEBUG."""
        image = _write_image(tmp_path / "banner.png")
        root_level = logging.getLogger().level

        try:
            with patch(
                "sys.argv",
                ["webready", "process", image, "--debug", "-o", str(tmp_path)],
            ):
                main()

            assert logging.getLogger("webready").level == logging.DEBUG
            assert logging.getLogger("webready.cli").level == logging.DEBUG
            assert logging.getLogger().level == root_level
        finally:
            set_debug_logging(False)
