"""
Resolution of ``DK_*`` settings from the process environment and ``.env`` files.

Precedence, lowest first: the ``.env`` file, then the process environment (or
the ``base`` mapping a caller supplies), then explicit overrides such as the
CLI's ``--set KEY=VALUE`` flags.

``.env`` lines follow the usual shell-ish format::

    # comment
    export DK_BASE_URL=https://gateway.example/api/dkpg
    DK_PASSWORD="secret # not a comment"
    DK_SOURCE_APP=SRC_AVS_0201   # trailing comment
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, MutableMapping, Optional, Tuple

__all__ = ["ENV_PREFIX", "GatewayEnvironment", "build_environment", "load_env_file"]

ENV_PREFIX = "DK_"

_QUOTES = ("'", '"')


def _clean_value(raw: str) -> str:
    value = raw.strip()
    if value[:1] in _QUOTES:
        closing = value.find(value[0], 1)
        if closing != -1:
            return value[1:closing]
    comment = value.find(" #")
    if comment != -1:
        value = value[:comment].rstrip()
    return value


def _split_line(line: str) -> Optional[Tuple[str, str]]:
    line = line.strip()
    if not line or line.startswith("#"):
        return None
    if line.startswith("export "):
        line = line[len("export "):]
    key, sep, value = line.partition("=")
    key = key.strip()
    if not sep or not key:
        return None
    return key, _clean_value(value)


def _read_env_file(path: Path) -> Dict[str, str]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    pairs = (_split_line(line) for line in text.splitlines())
    return dict(pair for pair in pairs if pair is not None)


def load_env_file(
    path: str = ".env",
    *,
    environ: Optional[MutableMapping[str, str]] = None,
) -> Dict[str, str]:
    """Copy unset keys from ``path`` into ``environ`` (``os.environ`` by default)."""
    target: MutableMapping[str, str] = os.environ if environ is None else environ
    for key, value in _read_env_file(Path(path)).items():
        target.setdefault(key, value)
    return dict(target)


@dataclass(frozen=True)
class GatewayEnvironment:
    variables: Mapping[str, str]

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.variables.get(key, default)

    def gateway_settings(self) -> Dict[str, str]:
        """Only the ``DK_*`` entries, which is all the client configuration reads."""
        return {key: value for key, value in self.variables.items() if key.startswith(ENV_PREFIX)}


def build_environment(
    *,
    env_file: Optional[str] = ".env",
    base: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> GatewayEnvironment:
    """
    Layer the ``.env`` file, ``base`` (``os.environ`` when omitted) and
    ``overrides``. ``env_file=None`` skips the file; a missing file is ignored.
    """
    resolved: Dict[str, str] = {} if env_file is None else _read_env_file(Path(env_file))
    resolved.update(os.environ if base is None else base)
    resolved.update(overrides or {})
    return GatewayEnvironment(variables=resolved)
