import os
from pathlib import Path
from typing import Annotated

from loguru import logger
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

__all__ = [
    "Json2DcpSettings",
    "get_context",
    "init_context",
    "reset_context",
]


class Json2DcpSettings(BaseSettings):
    """json2dcp settings.

    Values are read from ``J2D_`` prefixed environment variables and from any
    ``.env`` files handed to :func:`init_context`.
    """

    model_config = SettingsConfigDict(env_prefix="J2D_", case_sensitive=False, extra="ignore")

    device_dir: Path = Path.cwd()
    design_name: str = "top"
    log_level: str = "INFO"
    io_wrapper_types: Annotated[frozenset[str], NoDecode] = frozenset({"IOB_OUTBUF", "IOB_IBUFCTRL"})
    checkpoint_indent: int | None = None

    @field_validator("device_dir", mode="after")
    @classmethod
    def is_dir(cls, value: Path) -> Path:
        """Check if the device directory exists."""
        if not value.is_dir():
            raise ValueError(f"{value} is not a valid directory")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def normalise_log_level(cls, value: str) -> str:
        """Upper-case the log level and check that loguru knows it."""
        level = str(value).strip().upper()
        logger.level(level)
        return level

    @field_validator("io_wrapper_types", mode="before")
    @classmethod
    def parse_wrapper_types(cls, value: str | list[str] | set[str] | frozenset[str]) -> frozenset[str]:
        """Accept a comma separated string as well as a collection."""
        if isinstance(value, str):
            return frozenset(i.strip() for i in value.split(",") if i.strip())
        return frozenset(value)


# Module-level singleton pattern for settings management
_context_instance: Json2DcpSettings | None = None


def init_context(
    device_dir: Path | None = None,
    dot_env: Path | None = None,
    **overrides: object,
) -> Json2DcpSettings:
    """Initialize the global json2dcp context with settings.

    Subsequent calls will override the existing context.

    Args:
        device_dir: Directory holding the device database files
        dot_env: Optional .env file, the ``J2D_ENV_FILE`` variable is used when unset
        **overrides: Further settings taking precedence over the environment

    Returns:
        The initialized Json2DcpSettings instance
    """
    global _context_instance
    env_files: list[Path] = []

    if dot_env is None and (e := os.getenv("J2D_ENV_FILE")):
        dot_env = Path(e)

    if dot_env is not None:
        if dot_env.exists():
            env_files.append(dot_env)
        else:
            logger.warning(f".env file not found: {dot_env} this is ignored")

    if device_dir is not None:
        overrides["device_dir"] = device_dir

    _context_instance = Json2DcpSettings(_env_file=tuple(env_files), **overrides)
    logger.debug("json2dcp context initialized")
    return _context_instance


def get_context() -> Json2DcpSettings:
    """Get the global json2dcp context.

    Returns:
        The current Json2DcpSettings instance

    Raises:
        RuntimeError: If context has not been initialized with init_context()
    """
    if _context_instance is None:
        raise RuntimeError("json2dcp context not initialized. Call init_context() first.")

    return _context_instance


def reset_context() -> None:
    """Reset the global context (primarily for testing)."""
    global _context_instance
    _context_instance = None
    logger.debug("json2dcp context reset")
