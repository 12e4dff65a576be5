"""Resolve credentials and defaults from `.env.local` and the process environment.

Values are resolved once by the caller and passed down explicitly; nothing here writes
back into ``os.environ``.
"""

import os
from pathlib import Path
from typing import Literal, Mapping, Optional, Union

from dotenv import dotenv_values
from pydantic import BaseModel

from .core.exceptions import ConfigurationError
from .core.logger import get_logger

logger = get_logger(__name__)

DEFAULT_MODEL = "gemini-3-flash-preview"
DEFAULT_REQUEST_TIMEOUT_MS = 45_000

EnvSource = Literal["dotenv-local", "process-env", "none"]


class ResolvedEnv(BaseModel):
    """Credentials and model id found in the environment, plus where they came from."""

    api_key: Optional[str] = None
    model: Optional[str] = None
    source: EnvSource = "none"


def _read_dotenv_local(cwd: Path) -> Mapping[str, Optional[str]]:
    path = cwd / ".env.local"
    if not path.is_file():
        return {}
    logger.debug(f"Reading settings from {path}")
    return dotenv_values(path)


def _api_key_from(values: Mapping[str, Optional[str]]) -> Optional[str]:
    return values.get("GOOGLE_API_KEY") or values.get("GEMINI_API_KEY") or None


def resolve_env_settings(
    cwd: Optional[Union[str, Path]] = None, env: Optional[Mapping[str, str]] = None
) -> ResolvedEnv:
    """
    Resolve the API key and model id.

    `.env.local` in ``cwd`` takes precedence over the process environment. Missing values
    in `.env.local` fall back to the process environment.

    Args:
        cwd: Directory searched for `.env.local`; defaults to the current working directory.
        env: Environment mapping; defaults to ``os.environ``.

    Returns:
        The resolved settings and their source.
    """
    local = _read_dotenv_local(Path(cwd) if cwd is not None else Path.cwd())
    process_env = env if env is not None else os.environ

    local_key = _api_key_from(local)
    process_key = _api_key_from(process_env)
    local_model = local.get("GEMINI_MODEL") or None
    process_model = process_env.get("GEMINI_MODEL") or None

    if local_key or local_model:
        return ResolvedEnv(
            api_key=local_key or process_key,
            model=local_model or process_model,
            source="dotenv-local",
        )

    if process_key or process_model:
        return ResolvedEnv(api_key=process_key, model=process_model, source="process-env")

    return ResolvedEnv()


def resolve_api_key(explicit: Optional[str] = None, resolved: Optional[ResolvedEnv] = None) -> str:
    """Return the explicit key, else the resolved one.

    Raises:
        ConfigurationError: If no API key is available.
    """
    if explicit:
        return explicit

    settings = resolved or resolve_env_settings()
    if not settings.api_key:
        msg = "Missing API key. Set GOOGLE_API_KEY or GEMINI_API_KEY in .env.local or the environment."
        logger.error(msg)
        raise ConfigurationError(msg)
    return settings.api_key


def resolve_default_model(env: Optional[Mapping[str, str]] = None) -> str:
    process_env = env if env is not None else os.environ
    return process_env.get("GEMINI_MODEL") or DEFAULT_MODEL


def resolve_request_timeout_ms(env: Optional[Mapping[str, str]] = None) -> int:
    process_env = env if env is not None else os.environ
    raw = process_env.get("GEMINI_REQUEST_TIMEOUT_MS")
    if raw:
        try:
            value = float(raw)
        except ValueError:
            logger.warning(f"Ignoring non-numeric GEMINI_REQUEST_TIMEOUT_MS={raw!r}")
            return DEFAULT_REQUEST_TIMEOUT_MS
        if value > 0:
            return int(value)
    return DEFAULT_REQUEST_TIMEOUT_MS
