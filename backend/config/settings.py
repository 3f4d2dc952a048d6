"""
Runtime Configuration

Reads every setting the service needs from the environment once at startup.
A `.env` file next to the process is honoured (python-dotenv) but never
overrides variables that are already set.

The only required value is DATABASE_URL; everything else has a default in
constants.py.
"""
import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from constants import DeploymentMode, EnvKeys, PoolDefaults, ServerConfig
from exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_TRUE_VALUES = ('true', '1', 'yes', 'on')


@dataclass(frozen=True)
class Settings:
    """Immutable settings snapshot built by load_settings()."""

    database_url: str
    pool_size: int = PoolDefaults.SIZE
    pool_max_overflow: int = PoolDefaults.MAX_OVERFLOW
    pool_timeout: float = PoolDefaults.TIMEOUT_SECONDS
    pool_recycle: int = PoolDefaults.RECYCLE_SECONDS
    echo_sql: bool = False
    mode: DeploymentMode = DeploymentMode.SITE
    host: str = ServerConfig.HOST
    port: int = ServerConfig.PORT
    log_dir: Optional[Path] = None
    log_level: str = "INFO"


def _read_int(
    env: Mapping[str, str],
    key: str,
    default: int,
    invalid: dict,
    minimum: int = 1,
    disabled: Optional[int] = None,
) -> int:
    """Read an integer >= minimum; `disabled` is an extra accepted sentinel."""
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        invalid[key] = raw
        return default
    if value < minimum and value != disabled:
        invalid[key] = raw
    return value


def _read_float(env: Mapping[str, str], key: str, default: float, invalid: dict) -> float:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        invalid[key] = raw
        return default
    if value <= 0:
        invalid[key] = raw
    return value


def load_settings(
    env: Optional[Mapping[str, str]] = None,
    dotenv_path: Optional[Path] = None,
) -> Settings:
    """
    Build Settings from the environment.

    Args:
        env: Mapping to read from instead of os.environ (tests pass a dict;
             no .env file is loaded in that case)
        dotenv_path: Explicit .env file to load before reading os.environ

    Returns:
        Settings instance

    Raises:
        ConfigurationError: If DATABASE_URL is missing or any value is invalid
    """
    if env is None:
        load_dotenv(dotenv_path=dotenv_path, override=False)
        env = os.environ

    database_url = (env.get(EnvKeys.DATABASE_URL) or "").strip()
    if not database_url:
        raise ConfigurationError(
            f"{EnvKeys.DATABASE_URL} is not set (environment or .env file)",
            missing_keys=[EnvKeys.DATABASE_URL],
        )
    try:
        make_url(database_url)
    except ArgumentError as e:
        raise ConfigurationError(
            f"{EnvKeys.DATABASE_URL} could not be parsed: {e}",
            invalid_keys=[EnvKeys.DATABASE_URL],
        ) from e

    invalid: dict = {}
    pool_size = _read_int(env, EnvKeys.POOL_SIZE, PoolDefaults.SIZE, invalid)
    pool_max_overflow = _read_int(
        env, EnvKeys.POOL_MAX_OVERFLOW, PoolDefaults.MAX_OVERFLOW, invalid, minimum=0
    )
    pool_timeout = _read_float(env, EnvKeys.POOL_TIMEOUT, PoolDefaults.TIMEOUT_SECONDS, invalid)
    # -1 turns recycling off (SQLAlchemy pool_recycle convention)
    pool_recycle = _read_int(
        env, EnvKeys.POOL_RECYCLE, PoolDefaults.RECYCLE_SECONDS, invalid, disabled=-1
    )
    port = _read_int(env, EnvKeys.PORT, ServerConfig.PORT, invalid)

    mode = DeploymentMode.SITE
    raw_mode = env.get(EnvKeys.MODE)
    if raw_mode:
        try:
            mode = DeploymentMode.from_string(raw_mode)
        except ValueError:
            invalid[EnvKeys.MODE] = raw_mode

    if invalid:
        raise ConfigurationError(
            f"Invalid configuration values: {', '.join(sorted(invalid))}",
            invalid_keys=sorted(invalid),
        )

    log_dir = env.get(EnvKeys.LOG_DIR)
    settings = Settings(
        database_url=database_url,
        pool_size=pool_size,
        pool_max_overflow=pool_max_overflow,
        pool_timeout=pool_timeout,
        pool_recycle=pool_recycle,
        echo_sql=(env.get(EnvKeys.ECHO_SQL, "false").lower() in _TRUE_VALUES),
        mode=mode,
        host=env.get(EnvKeys.HOST) or ServerConfig.HOST,
        port=port,
        log_dir=Path(log_dir).expanduser() if log_dir else None,
        log_level=(env.get(EnvKeys.LOG_LEVEL) or "INFO").upper(),
    )
    logger.info(
        f"Settings loaded: mode={settings.mode.value}, pool_size={settings.pool_size}, "
        f"max_overflow={settings.pool_max_overflow}, timeout={settings.pool_timeout:g}s"
    )
    return settings
