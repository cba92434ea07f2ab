"""Tests for the command-line interface."""
import json

import numpy as np
import pytest
from PIL import Image

from penhatch.cli import create_parser, main
from penhatch.palette import RED

GRID_ARGS = ["--blocks-x", "2", "--blocks-y", "2", "--scale-x", "20", "--scale-y", "20"]


@pytest.fixture
def red_png(clean_env):
    path = clean_env / "red.png"
    image = np.zeros((20, 20, 3), dtype=np.uint8)
    image[:, :] = RED.srgb
    Image.fromarray(image).save(path)
    return path


def test_parser_defaults():
    parsed = create_parser().parse_args(["in.png"])
    assert parsed.output is None
    assert parsed.blocks_x is None
    assert parsed.verbose is False


def test_converts_image(red_png, capsys):
    output = red_png.parent / "out" / "red.svg"

    assert main([str(red_png), str(output), "--seed", "7"] + GRID_ARGS) == 0

    assert output.exists()
    assert 'inkscape:label="Red"' in output.read_text(encoding="utf-8")
    out = capsys.readouterr().out
    assert f"Saved SVG to {output}." in out
    assert "Random seed: 7" in out


def test_default_output_path(red_png):
    assert main([str(red_png)] + GRID_ARGS) == 0
    assert red_png.with_suffix(".svg").exists()


def test_seed_from_environment(red_png, monkeypatch, capsys):
    monkeypatch.setenv("RANDOM_SEED", "77")
    assert main([str(red_png)] + GRID_ARGS) == 0
    assert "Random seed: 77" in capsys.readouterr().out


def test_flags_override_env_file(red_png, capsys):
    env_file = red_png.parent / "plot.env"
    env_file.write_text("RANDOM_SEED=5\nPIXELS_X=2\nPIXELS_Y=2\n"
                        "INPUT_SCALE_TO_X=20\nINPUT_SCALE_TO_Y=20\n")

    assert main([str(red_png), "--env-file", str(env_file), "--seed", "6"]) == 0
    assert "Random seed: 6" in capsys.readouterr().out


def test_custom_inks(red_png):
    inks = red_png.parent / "inks.json"
    inks.write_text(json.dumps([{"name": "Ochre", "rgb": "#cc7722"}]))
    output = red_png.with_suffix(".svg")

    assert main([str(red_png), str(output), "--inks", str(inks)] + GRID_ARGS) == 0
    assert 'inkscape:label="Ochre"' in output.read_text(encoding="utf-8")


def test_missing_input(clean_env, capsys):
    assert main([str(clean_env / "missing.png")]) == 1
    assert "Error:" in capsys.readouterr().err


def test_missing_env_file(red_png, capsys):
    assert main([str(red_png), "--env-file", "nope.env"]) == 1
    assert "Error:" in capsys.readouterr().err


def test_invalid_spacing(red_png, capsys):
    code = main([str(red_png), "--min-spacing", "5", "--max-spacing", "1"] + GRID_ARGS)
    assert code == 1
    assert "max_spacing" in capsys.readouterr().err


def test_bad_environment_value(red_png, monkeypatch, capsys):
    monkeypatch.setenv("PIXELS_X", "many")
    assert main([str(red_png)] + GRID_ARGS) == 1
    assert "PIXELS_X" in capsys.readouterr().err
