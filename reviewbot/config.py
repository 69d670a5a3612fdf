"""Configuration management for reviewbot."""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_ROOT_DIR = "."
DEFAULT_MAX_STEPS = 10
DEFAULT_REQUEST_TIMEOUT = 60.0

DEFAULT_MODELS = {
    "openai": {
        "model": "gpt-4.1-mini",
        "endpoint": "https://api.openai.com/v1",
        "api_key_env": "OPENAI_API_KEY",
    },
    "anthropic": {
        "model": "claude-3-5-haiku-latest",
        "endpoint": "https://api.anthropic.com",
        "api_key_env": "ANTHROPIC_API_KEY",
    },
}

_FUZZY_ENV_HINTS = {
    "openai": ["OPENAI", "OPENAI_API", "OA_KEY"],
    "anthropic": ["ANTHROPIC", "CLAUDE"],
}

_SECRET_MARKERS = ("KEY", "TOKEN")


@dataclass
class Config:
    """Runtime configuration for reviewbot."""

    provider: str
    model: str
    llm_endpoint: str
    api_key_env: str
    root_dir: str = DEFAULT_ROOT_DIR
    max_steps: int = DEFAULT_MAX_STEPS
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    def resolve_api_key(self) -> Optional[str]:
        """Return the API key from the configured environment variable."""
        value = os.environ.get(self.api_key_env)
        if value is None or not value.strip():
            return None
        return value

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


_CONFIG_STATE: Dict[str, Optional[Config]] = {"active": None}


def detect_available_providers(
    env: Optional[Dict[str, str]] = None,
) -> Dict[str, List[str]]:
    """Return mapping of provider -> matching env vars found."""
    env_dict: Dict[str, str] = dict(os.environ if env is None else env)
    detected: Dict[str, List[str]] = {p: [] for p in DEFAULT_MODELS}
    for provider, defaults in DEFAULT_MODELS.items():
        key_name = defaults["api_key_env"]
        if key_name in env_dict:
            detected[provider].append(key_name)
        hints = _FUZZY_ENV_HINTS.get(provider, [])
        for env_key in env_dict:
            if env_key in detected[provider]:
                continue
            for hint in hints:
                if hint.lower() in env_key.lower():
                    detected[provider].append(env_key)
                    break
    return detected


def _auto_select_provider(
    detected: Optional[Dict[str, List[str]]] = None,
) -> str:
    if detected is None:
        detected = detect_available_providers()
    for provider in ("openai", "anthropic"):
        if detected.get(provider):
            return provider
    return "openai"


def _select_env_var_for_provider(
    provider: str, detected: Dict[str, List[str]]
) -> str:
    default = DEFAULT_MODELS[provider]["api_key_env"]
    env_matches = detected.get(provider, [])
    if default in env_matches:
        return default
    # Only secret-looking names; OPENAI_BASE_URL and friends are not keys.
    for name in env_matches:
        if any(marker in name.upper() for marker in _SECRET_MARKERS):
            return name
    return default


def _int_setting(name: str, raw: Any) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def _float_setting(name: str, raw: Any) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def _first_set(*values: Any) -> Any:
    for value in values:
        if value is not None and value != "":
            return value
    return None


def load_config(*, overrides: Optional[Dict[str, Any]] = None) -> Config:
    """Build configuration from environment and overrides.

    Overrides (usually CLI flags) win over environment variables, which win
    over the provider defaults. ``None`` overrides are ignored.
    """
    overrides = {k: v for k, v in (overrides or {}).items() if v is not None}
    detected = detect_available_providers()

    provider = (
        overrides.get("provider")
        or os.environ.get("REVIEWBOT_PROVIDER")
        or _auto_select_provider(detected)
    )
    if provider not in DEFAULT_MODELS:
        raise ConfigError(
            f"Unsupported provider '{provider}'. "
            f"Choose one of: {', '.join(sorted(DEFAULT_MODELS))}"
        )
    defaults = DEFAULT_MODELS[provider]

    model = (
        overrides.get("model")
        or os.environ.get("REVIEWBOT_LLM_MODEL")
        or defaults["model"]
    )
    endpoint = (
        overrides.get("endpoint")
        or os.environ.get("REVIEWBOT_LLM_ENDPOINT")
        or defaults["endpoint"]
    )
    api_key_env = overrides.get("api_key_env") or _select_env_var_for_provider(
        provider, detected
    )
    root_dir = (
        overrides.get("root_dir")
        or os.environ.get("ROOT_DIR")
        or DEFAULT_ROOT_DIR
    )
    max_steps = _int_setting(
        "max_steps",
        _first_set(
            overrides.get("max_steps"),
            os.environ.get("REVIEWBOT_MAX_STEPS"),
            DEFAULT_MAX_STEPS,
        ),
    )
    request_timeout = _float_setting(
        "request_timeout",
        _first_set(
            overrides.get("request_timeout"),
            os.environ.get("REVIEWBOT_LLM_REQUEST_TIMEOUT"),
            DEFAULT_REQUEST_TIMEOUT,
        ),
    )

    config = Config(
        provider=provider,
        model=str(model),
        llm_endpoint=str(endpoint),
        api_key_env=str(api_key_env),
        root_dir=str(root_dir),
        max_steps=max_steps,
        request_timeout=request_timeout,
    )
    if not config.resolve_api_key():
        logger.warning(
            "Missing env '%s'. Make sure your %s API key is configured.",
            config.api_key_env,
            provider,
        )

    set_active_config(config)
    return config


def set_active_config(config: Config) -> None:
    _CONFIG_STATE["active"] = config


def get_active_config() -> Config:
    active = _CONFIG_STATE.get("active")
    if active is None:
        return load_config()
    return active


def clear_active_config() -> None:
    _CONFIG_STATE["active"] = None


def describe_provider(provider: str) -> str:
    meta = DEFAULT_MODELS.get(provider)
    if not meta:
        return provider
    return f"{provider} (default model: {meta['model']})"
