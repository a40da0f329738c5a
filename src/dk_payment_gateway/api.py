"""
Public, high-level helpers for building a gateway client.
"""

from __future__ import annotations

from typing import Mapping, Optional, Union

import requests

from .core.client import GatewayClient
from .core.config import GatewayConfig, GatewayParameters, load_gateway_config

__all__ = ["connect", "create_client"]

Timeout = Union[int, float, str]


def create_client(
    *,
    config: Optional[GatewayConfig] = None,
    session: Optional[requests.Session] = None,
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
) -> GatewayClient:
    """
    Construct a :class:`GatewayClient`.

    Callers either pass a ready-made :class:`GatewayConfig` or let the helper
    assemble one from ``DK_*`` environment data and keyword overrides.
    """
    if config is not None:
        extras = (
            overrides,
            base,
            parameters,
            base_url,
            api_key,
            username,
            password,
            client_id,
            client_secret,
            source_app,
            timeout,
            open_timeout,
        )
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built GatewayConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_gateway_config(
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
    return GatewayClient(cfg, session=session)


def connect(
    *,
    config: Optional[GatewayConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
) -> GatewayClient:
    """Create a client and run the two-step authentication right away."""
    client = create_client(
        config=config,
        session=session,
        env_file=env_file,
        overrides=overrides,
    )
    return client.authenticate()
