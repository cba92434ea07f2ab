"""Tests for environment configuration."""
import pytest

from penhatch.config import load_env_config
from penhatch.types import ConfigError, HatchConfig


class TestLoadEnvConfig:

    def test_defaults(self):
        assert load_env_config(environ={}) == HatchConfig()

    def test_parses_variables(self):
        config = load_env_config(environ={
            "PIXELS_X": "12",
            "PIXELS_Y": "9",
            "INPUT_SCALE_TO_X": "240",
            "INPUT_SCALE_TO_Y": "180",
            "LINE_MIN_SPACING": "0.5",
            "LINE_MAX_SPACING": "4",
            "BRIGHTEN": "-20",
            "RANDOM_SEED": "1234",
            "SVG_WIDTH": "200mm",
            "SVG_HEIGHT": "150mm",
        })

        assert (config.blocks_x, config.blocks_y) == (12, 9)
        assert (config.scale_to_x, config.scale_to_y) == (240, 180)
        assert config.min_spacing == 0.5
        assert config.max_spacing == 4.0
        assert config.brighten == -20
        assert config.seed == 1234
        assert (config.svg_width, config.svg_height) == ("200mm", "150mm")

    def test_empty_values_ignored(self):
        config = load_env_config(environ={"PIXELS_X": "", "RANDOM_SEED": "  "})
        assert config.blocks_x == 40
        assert config.seed is None

    def test_unrelated_variables_ignored(self):
        assert load_env_config(environ={"HOME": "/root"}) == HatchConfig()

    @pytest.mark.parametrize("var,value", [
        ("PIXELS_X", "forty"),
        ("LINE_MIN_SPACING", "1,5"),
        ("RANDOM_SEED", "0.5"),
    ])
    def test_invalid_value(self, var, value):
        with pytest.raises(ConfigError, match=var):
            load_env_config(environ={var: value})

    def test_updates_given_config(self):
        config = HatchConfig(field="swirl")
        result = load_env_config(environ={"PIXELS_Y": "3"}, config=config)
        assert result is config
        assert config.blocks_y == 3
        assert config.field == "swirl"


class TestEnvFile:

    def test_reads_file(self, tmp_path):
        env_file = tmp_path / "plot.env"
        env_file.write_text("PIXELS_X=7\nSVG_WIDTH=8in\n# comment\n")

        config = load_env_config(env_file, environ={})

        assert config.blocks_x == 7
        assert config.svg_width == "8in"

    def test_environment_overrides_file(self, tmp_path):
        env_file = tmp_path / "plot.env"
        env_file.write_text("PIXELS_X=7\nPIXELS_Y=7\n")

        config = load_env_config(env_file, environ={"PIXELS_X": "11"})

        assert config.blocks_x == 11
        assert config.blocks_y == 7

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_env_config(tmp_path / "missing.env", environ={})

    def test_finds_dotenv_in_working_directory(self, clean_env, monkeypatch):
        (clean_env / ".env").write_text("RANDOM_SEED=99\n")
        assert load_env_config().seed == 99

    def test_process_environment(self, clean_env, monkeypatch):
        (clean_env / ".env").write_text("RANDOM_SEED=99\n")
        monkeypatch.setenv("RANDOM_SEED", "5")
        assert load_env_config().seed == 5


class TestValidate:

    def test_defaults_valid(self):
        HatchConfig().validate()

    @pytest.mark.parametrize("kwargs", [
        {"blocks_x": 0},
        {"blocks_y": -1},
        {"blocks_x": 50, "scale_to_x": 40},
        {"min_spacing": 0.0},
        {"min_spacing": 3.0, "max_spacing": 2.0},
        {"dilution_step": 0.0},
        {"dilution_step": 1.0},
        {"seed": -1},
        {"workers": 0},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ConfigError):
            HatchConfig(**kwargs).validate()

    def test_equal_spacings_allowed(self):
        HatchConfig(min_spacing=2.0, max_spacing=2.0).validate()
