"""
Configuration layer - run settings and their loader.
"""

from gpx_stream.config.loader import CONFIG_ENV_VAR, load_config
from gpx_stream.config.settings import DEFAULT_CHUNK_SIZE, TranscodeConfig

__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_CHUNK_SIZE",
    "TranscodeConfig",
    "load_config",
]
