"""Application settings and fixed business constants."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import dotenv_values

DEFAULT_TAX_RATE = 0.1
DEFAULT_COMMISSION_RATE = 0.04

CONTEXT_KEY_TXN = "txn"

DEFAULT_CONFIG_PATH = Path("local.env")

_DB_DSN = "DB_DSN"
_ENCRYPT_KEY = "ENCRYPT_KEY"


@dataclass(frozen=True)
class EnvConfig:
    """Settings read from the environment file and variables."""

    db_dsn: str = ""
    encrypt_key: str = ""


def load_env_config(path: Optional[Union[str, Path]] = None) -> EnvConfig:
    """Load settings; environment variables override values from the file.

    When ``ENV`` is ``test`` an empty configuration is returned and no file is read.
    """
    if os.environ.get("ENV") == "test":
        return EnvConfig()

    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not config_path.is_file():
        raise FileNotFoundError(f"config file not found: {config_path}")
    values = dotenv_values(config_path)

    def setting(name: str) -> str:
        return os.environ.get(name) or values.get(name) or ""

    return EnvConfig(db_dsn=setting(_DB_DSN), encrypt_key=setting(_ENCRYPT_KEY))