"""Configuration package.

``Settings`` holds secrets and deployment values from the environment;
``load_config`` layers them over config/config.yaml.  ``settings`` is a
process-wide instance for modules that need a value at import time.
"""

from src.config.loader import load_config
from src.config.settings import Settings

settings = Settings()

__all__ = ["Settings", "load_config", "settings"]
