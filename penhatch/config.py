"""Configuration from environment variables and ``.env`` files."""
import logging
import os
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional, Tuple, Union

from dotenv import dotenv_values, find_dotenv

from penhatch.types import ConfigError, HatchConfig

logger = logging.getLogger(__name__)

# Variable name -> (HatchConfig attribute, parser)
ENV_VARS: Dict[str, Tuple[str, Callable[[str], object]]] = {
    "PIXELS_X": ("blocks_x", int),
    "PIXELS_Y": ("blocks_y", int),
    "INPUT_SCALE_TO_X": ("scale_to_x", int),
    "INPUT_SCALE_TO_Y": ("scale_to_y", int),
    "LINE_MIN_SPACING": ("min_spacing", float),
    "LINE_MAX_SPACING": ("max_spacing", float),
    "BRIGHTEN": ("brighten", int),
    "RANDOM_SEED": ("seed", int),
    "SVG_WIDTH": ("svg_width", str),
    "SVG_HEIGHT": ("svg_height", str),
}


def _read_env_file(env_file: Optional[Union[str, Path]], search: bool) -> Dict[str, str]:
    if env_file is not None:
        path = Path(env_file)
        if not path.exists():
            raise FileNotFoundError(f"Environment file not found: {path}")
    elif search:
        found = find_dotenv(usecwd=True)
        if not found:
            return {}
        path = Path(found)
    else:
        return {}

    logger.debug(f"Reading environment file {path}")
    return {k: v for k, v in dotenv_values(path).items() if v is not None}


def load_env_config(
    env_file: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
    config: Optional[HatchConfig] = None
) -> HatchConfig:
    """
    Build a HatchConfig from environment variables.

    Values from ``env_file`` (or a ``.env`` found from the working directory
    when reading the real environment) are overridden by the environment
    itself. Unset or empty variables keep the existing value.

    Args:
        env_file: Explicit .env file
        environ: Mapping to read instead of ``os.environ``
        config: Config to update in place (defaults to a fresh one)

    Returns:
        The updated config

    Raises:
        FileNotFoundError: If ``env_file`` is given but missing
        ConfigError: If a variable cannot be parsed
    """
    values = _read_env_file(env_file, search=environ is None)
    values.update(os.environ if environ is None else environ)

    config = config or HatchConfig()
    for var, (attr, parse) in ENV_VARS.items():
        raw = values.get(var)
        if raw is None or not raw.strip():
            continue
        try:
            setattr(config, attr, parse(raw.strip()))
        except ValueError as e:
            raise ConfigError(f"Invalid value for {var}: {raw!r}") from e

    return config
