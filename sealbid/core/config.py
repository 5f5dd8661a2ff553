"""
Engine configuration parameters for Sealbid.

Defines auction defaults, ledger location and logging options.
Values are layered: dataclass defaults, then an optional JSON file,
then SEALBID_* environment variables (a .env file is honoured).
"""

import json
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import find_dotenv, load_dotenv


ENV_PREFIX = "SEALBID_"

# Environment variable -> config field
ENV_FIELDS = {
    "BID_DURATION": "default_bid_duration",
    "REVEAL_DURATION": "default_reveal_duration",
    "ALLOW_REINIT": "allow_reinit",
    "DB_PATH": "db_path",
    "LOG_DIR": "log_dir",
    "LOG_TO_FILE": "log_to_file",
}

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass
class EngineConfig:
    """Engine-wide configuration parameters"""

    # Auction parameters
    default_bid_duration: int = 300  # Seconds of bidding after init
    default_reveal_duration: int = 300  # Seconds of reveal after bid end
    allow_reinit: bool = False  # Permit InitAuction to overwrite an asset

    # Paths
    db_path: Path = Path("data") / "sealbid.db"
    log_dir: Path = Path("logs")

    # Logging
    log_to_file: bool = False


# Global config instance (can be overridden)
config = EngineConfig()


def _coerce(name: str, raw: Any) -> Any:
    """Convert a raw file/env value to the type of field `name`."""
    if name in ("default_bid_duration", "default_reveal_duration"):
        if isinstance(raw, bool):
            raise ValueError(f"{name} must be an integer, got {raw!r}")
        try:
            return int(raw)
        except (TypeError, ValueError) as err:
            raise ValueError(f"{name} must be an integer, got {raw!r}") from err
    if name in ("allow_reinit", "log_to_file"):
        if isinstance(raw, bool):
            return raw
        text = str(raw).strip().lower()
        if text in TRUE_VALUES:
            return True
        if text in FALSE_VALUES:
            return False
        raise ValueError(f"{name} must be a boolean, got {raw!r}")
    if name in ("db_path", "log_dir"):
        if not isinstance(raw, (str, Path)):
            raise ValueError(f"{name} must be a path, got {raw!r}")
        return Path(raw).expanduser()
    raise ValueError(f"Unknown config field: {name}")


def _from_file(config_path: Path) -> Dict[str, Any]:
    data = json.loads(config_path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a JSON object")
    known = {f.name for f in fields(EngineConfig)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown config keys in {config_path}: {sorted(unknown)}")
    return {name: _coerce(name, value) for name, value in data.items()}


def _from_env(environ: Dict[str, str]) -> Dict[str, Any]:
    overrides = {}
    for suffix, name in ENV_FIELDS.items():
        key = ENV_PREFIX + suffix
        if key in environ:
            overrides[name] = _coerce(name, environ[key])
    return overrides


def load_config(
    config_path: Optional[str] = None,
    environ: Optional[Dict[str, str]] = None,
    use_dotenv: bool = True,
) -> EngineConfig:
    """
    Load configuration from file and environment, or use defaults.

    Args:
        config_path: Optional path to a JSON config file
        environ: Environment mapping (defaults to os.environ)
        use_dotenv: Load a .env file into os.environ first

    Returns:
        EngineConfig instance

    Raises:
        ValueError: on unknown keys or values of the wrong type
    """
    if use_dotenv and environ is None:
        load_dotenv(find_dotenv(usecwd=True))
    if environ is None:
        environ = dict(os.environ)

    cfg = EngineConfig()
    if config_path:
        cfg = replace(cfg, **_from_file(Path(config_path)))

    return replace(cfg, **_from_env(environ))
