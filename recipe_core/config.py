"""Environment-driven settings and logging setup."""

import logging
import os
import pathlib
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    port: int = 10000
    upload_dir: pathlib.Path = pathlib.Path("uploads")
    output_dir: pathlib.Path = pathlib.Path("converted")
    upload_chunk_bytes: int = 8 * 1024 * 1024
    progress_every: int = 100000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            port=int(env.get("PORT", cls.port)),
            upload_dir=pathlib.Path(env.get("RECIPE_LITE_UPLOAD_DIR", cls.upload_dir)),
            output_dir=pathlib.Path(env.get("RECIPE_LITE_OUTPUT_DIR", cls.output_dir)),
            upload_chunk_bytes=int(env.get("RECIPE_LITE_UPLOAD_CHUNK_BYTES", cls.upload_chunk_bytes)),
            progress_every=int(env.get("RECIPE_LITE_PROGRESS_EVERY", cls.progress_every)),
            log_level=env.get("LOG_LEVEL", cls.log_level).upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def configure_logging(level: Optional[str] = None) -> None:
    """Install a root handler once and apply ``level`` (default from settings)."""
    numeric_level = getattr(logging, (level or get_settings().log_level).upper(), logging.INFO)
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(format=LOG_FORMAT, level=numeric_level)
    root_logger.setLevel(numeric_level)
