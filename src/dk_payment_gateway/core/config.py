"""
Configuration objects and helpers for the DK payment gateway client.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, List, Mapping, Optional, Union

from .environment import build_environment
from .errors import ConfigurationError

__all__ = [
    "DEFAULT_OPEN_TIMEOUT",
    "DEFAULT_TIMEOUT",
    "GatewayConfig",
    "GatewayParameters",
    "load_gateway_config",
]

DEFAULT_TIMEOUT = 30
DEFAULT_OPEN_TIMEOUT = 10

_PARAMETER_TO_ENV_KEY = {
    "base_url": "DK_BASE_URL",
    "api_key": "DK_API_KEY",
    "username": "DK_USERNAME",
    "password": "DK_PASSWORD",
    "client_id": "DK_CLIENT_ID",
    "client_secret": "DK_CLIENT_SECRET",
    "source_app": "DK_SOURCE_APP",
    "timeout": "DK_TIMEOUT",
    "open_timeout": "DK_OPEN_TIMEOUT",
}

Timeout = Union[int, float, str]


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _is_blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""


def _parse_timeout(raw: Any, name: str) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationError(f"{name} must be greater than zero")
    return value


@dataclass(frozen=True)
class GatewayParameters:
    """
    Explicit parameter bundle for building a :class:`GatewayConfig`.

    Every field left as ``None`` falls through to the environment.
    """

    base_url: Optional[str] = None
    api_key: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    source_app: Optional[str] = None
    timeout: Optional[Timeout] = None
    open_timeout: Optional[Timeout] = None

    def as_overrides(self) -> Dict[str, str]:
        overrides: Dict[str, str] = {}
        for field_name, env_key in _PARAMETER_TO_ENV_KEY.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            overrides[env_key] = _stringify(value)
        return overrides


def _collect_parameter_overrides(
    parameters: Optional[GatewayParameters],
    explicit: Mapping[str, Any],
) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    if parameters is not None:
        overrides.update(parameters.as_overrides())

    for key, value in explicit.items():
        if value is None:
            continue
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:
            raise TypeError(f"Unknown gateway parameter '{key}'") from exc
        overrides[env_key] = _stringify(value)
    return overrides


@dataclass(frozen=True)
class GatewayConfig:
    """
    Connection and credential settings for one client.

    The seven identity fields may be left empty at construction time so that
    :meth:`missing_fields` can report them; :class:`GatewayClient` refuses to
    start until :attr:`valid` is true.
    """

    base_url: Optional[str] = None
    api_key: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    source_app: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    open_timeout: float = DEFAULT_OPEN_TIMEOUT

    REQUIRED_FIELDS = (
        "base_url",
        "api_key",
        "username",
        "password",
        "client_id",
        "client_secret",
        "source_app",
    )

    def __post_init__(self) -> None:
        if isinstance(self.base_url, str):
            object.__setattr__(self, "base_url", self.base_url.strip().rstrip("/"))
        object.__setattr__(self, "timeout", _parse_timeout(self.timeout, "timeout"))
        object.__setattr__(
            self, "open_timeout", _parse_timeout(self.open_timeout, "open_timeout")
        )

    def missing_fields(self) -> List[str]:
        return [name for name in self.REQUIRED_FIELDS if _is_blank(getattr(self, name))]

    @property
    def valid(self) -> bool:
        return not self.missing_fields()

    def validate(self) -> "GatewayConfig":
        missing = self.missing_fields()
        if missing:
            raise ConfigurationError(
                f"Missing required configuration fields: {', '.join(missing)}"
            )
        return self

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def __repr__(self) -> str:
        shown = []
        for field in fields(self):
            value = getattr(self, field.name)
            if field.name in ("password", "client_secret", "api_key") and value:
                value = "***"
            shown.append(f"{field.name}={value!r}")
        return f"GatewayConfig({', '.join(shown)})"

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "GatewayConfig":
        return cls(
            base_url=values.get("DK_BASE_URL"),
            api_key=values.get("DK_API_KEY"),
            username=values.get("DK_USERNAME"),
            password=values.get("DK_PASSWORD"),
            client_id=values.get("DK_CLIENT_ID"),
            client_secret=values.get("DK_CLIENT_SECRET"),
            source_app=values.get("DK_SOURCE_APP"),
            timeout=values.get("DK_TIMEOUT") or DEFAULT_TIMEOUT,
            open_timeout=values.get("DK_OPEN_TIMEOUT") or DEFAULT_OPEN_TIMEOUT,
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        parameters: Optional[GatewayParameters] = None,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        source_app: Optional[str] = None,
        timeout: Optional[Timeout] = None,
        open_timeout: Optional[Timeout] = None,
    ) -> "GatewayConfig":
        parameter_overrides = _collect_parameter_overrides(
            parameters,
            {
                "base_url": base_url,
                "api_key": api_key,
                "username": username,
                "password": password,
                "client_id": client_id,
                "client_secret": client_secret,
                "source_app": source_app,
                "timeout": timeout,
                "open_timeout": open_timeout,
            },
        )
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(environment.gateway_settings())


def load_gateway_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[GatewayParameters] = None,
    base_url: Optional[str] = None,
    api_key: Optional[str] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    client_id: Optional[str] = None,
    client_secret: Optional[str] = None,
    source_app: Optional[str] = None,
    timeout: Optional[Timeout] = None,
    open_timeout: Optional[Timeout] = None,
) -> GatewayConfig:
    """
    Build a validated :class:`GatewayConfig` from the environment.

    Values can come from ``DK_*`` environment variables, a ``.env`` file,
    direct keyword arguments, or any mix of the three. Raises
    :class:`ConfigurationError` when a required field is still missing.
    """
    config = GatewayConfig.from_env(
        env_file=env_file,
        overrides=overrides,
        base=base,
        parameters=parameters,
        base_url=base_url,
        api_key=api_key,
        username=username,
        password=password,
        client_id=client_id,
        client_secret=client_secret,
        source_app=source_app,
        timeout=timeout,
        open_timeout=open_timeout,
    )
    return config.validate()
