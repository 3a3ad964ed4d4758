"""
Tests for the gifops command-line interface.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
from PIL import Image

from gifops.cli.main import main


@pytest.fixture
def gif_file(tmp_dir, five_frame_gif):
    path = tmp_dir / "in.gif"
    path.write_bytes(five_frame_gif)
    return path


class TestMain:
    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as info:
            main(["--version"])
        assert info.value.code == 0
        assert "gifops" in capsys.readouterr().out


class TestTransformCommand:
    def test_resize_and_limit(self, gif_file, tmp_dir, capsys):
        out = tmp_dir / "out.gif"
        code = main(["transform", str(gif_file), "-o", str(out),
                     "--width", "20", "--height", "10", "--resize", "resize",
                     "--max-frames", "3", "--max-size", "128"])
        assert code == 0
        img = Image.open(out)
        assert img.size == (20, 10)
        assert img.n_frames == 3
        assert "Done!" in capsys.readouterr().out

    def test_format_from_extension(self, gif_file, tmp_dir):
        out = tmp_dir / "still.png"
        assert main(["transform", str(gif_file), "-o", str(out), "--max-size", "128"]) == 0
        img = Image.open(out)
        assert img.format == "PNG"
        assert getattr(img, "n_frames", 1) == 1

    def test_quality_option(self, gif_file, tmp_dir):
        out = tmp_dir / "out.jpg"
        code = main(["transform", str(gif_file), "-o", str(out),
                     "--quality", "jpeg_quality=50", "--max-size", "128"])
        assert code == 0
        assert Image.open(out).format == "JPEG"

    def test_config_file(self, gif_file, tmp_dir):
        config = tmp_dir / "opts.yaml"
        config.write_text("max_duration_ms: 100\n")
        out = tmp_dir / "out.gif"
        code = main(["transform", str(gif_file), "-o", str(out),
                     "--config", str(config), "--max-size", "128"])
        assert code == 0
        assert Image.open(out).n_frames == 2

    def test_missing_input(self, tmp_dir, capsys):
        code = main(["transform", str(tmp_dir / "nope.gif"), "-o", str(tmp_dir / "o.gif")])
        assert code == 1
        assert "not found" in capsys.readouterr().err

    def test_bad_quality_pair(self, gif_file, tmp_dir, capsys):
        code = main(["transform", str(gif_file), "-o", str(tmp_dir / "o.jpg"),
                     "--quality", "jpeg_quality"])
        assert code == 1
        assert "KEY=VALUE" in capsys.readouterr().err

    def test_unsupported_format(self, gif_file, tmp_dir, capsys):
        code = main(["transform", str(gif_file), "-o", str(tmp_dir / "o.xyz")])
        assert code == 1
        assert "Unsupported" in capsys.readouterr().err

    def test_frame_too_large(self, gif_file, tmp_dir, capsys):
        code = main(["transform", str(gif_file), "-o", str(tmp_dir / "o.gif"),
                     "--max-size", "16"])
        assert code == 1
        assert "exceeds" in capsys.readouterr().err

    def test_output_directory_missing(self, gif_file, tmp_dir, capsys):
        out = tmp_dir / "nope" / "o.gif"
        code = main(["transform", str(gif_file), "-o", str(out), "--max-size", "128"])
        assert code == 1
        assert capsys.readouterr().err.startswith("Error:")
        assert not out.exists()

    def test_truncated_input(self, tmp_dir, five_frame_gif, capsys):
        path = tmp_dir / "cut.gif"
        path.write_bytes(five_frame_gif[: len(five_frame_gif) * 2 // 3])
        code = main(["transform", str(path), "-o", str(tmp_dir / "o.gif"), "--max-size", "128"])
        assert code == 1
        assert "Error:" in capsys.readouterr().err


class TestInfoCommand:
    def test_prints_header(self, gif_file, capsys):
        assert main(["info", str(gif_file)]) == 0
        out = capsys.readouterr().out
        assert "GIF" in out
        assert "60x40" in out
        assert "Frames:      5" in out
        assert "infinite" in out

    def test_not_an_image(self, tmp_dir, capsys):
        path = tmp_dir / "junk.gif"
        path.write_bytes(b"junk")
        assert main(["info", str(path)]) == 1
        assert "Error" in capsys.readouterr().err

    def test_truncated_animation(self, tmp_dir, five_frame_gif, capsys):
        path = tmp_dir / "cut.gif"
        path.write_bytes(five_frame_gif[: len(five_frame_gif) * 2 // 3])
        assert main(["info", str(path)]) == 1
        assert "Error" in capsys.readouterr().err


class TestVerbose:
    @pytest.mark.parametrize("argv_tail,expected", [
        ([], False),
        (["--verbose"], True),
        (["-v"], True),
    ])
    def test_flag_after_subcommand(self, gif_file, argv_tail, expected):
        with patch("gifops.cli.main._configure_logging") as configure:
            assert main(["info", str(gif_file)] + argv_tail) == 0
        configure.assert_called_once_with(expected)

    def test_flag_before_subcommand(self, gif_file):
        with patch("gifops.cli.main._configure_logging") as configure:
            assert main(["--verbose", "info", str(gif_file)]) == 0
        configure.assert_called_once_with(True)

    def test_transform_accepts_flag(self, gif_file, tmp_dir):
        out = tmp_dir / "out.gif"
        with patch("gifops.cli.main._configure_logging") as configure:
            code = main(["transform", str(gif_file), "-o", str(out),
                         "--max-size", "128", "--verbose"])
        assert code == 0
        configure.assert_called_once_with(True)
        assert out.is_file()
