"""
HTTP transport for the DK payment gateway.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Union

import requests

from .canonical import canonical_json
from .config import GatewayConfig
from .errors import APIError, InvalidParameterError, NetworkError, ResponseParseError
from .session import GatewaySession

__all__ = ["API_KEY_HEADER", "Transport"]

API_KEY_HEADER = "X-gravitee-api-key"

Body = Union[Mapping[str, Any], str, bytes, None]


def _encode_body(body: Body) -> Optional[Union[str, bytes]]:
    if body is None:
        return None
    if isinstance(body, (str, bytes)):
        return body
    return canonical_json(body)


def _parse_body(response: requests.Response) -> Any:
    text = response.text
    if not text:
        return None
    content_type = response.headers.get("Content-Type", "").lower()
    if "json" not in content_type and not text.lstrip().startswith(("{", "[")):
        return text
    try:
        return response.json()
    except ValueError as exc:
        if 200 <= response.status_code < 300:
            raise ResponseParseError(
                f"Failed to parse JSON response from {response.url}: {text[:200]}"
            ) from exc
        return text


def _error_body(parsed: Any) -> Mapping[str, Any]:
    return parsed if isinstance(parsed, Mapping) else {}


class Transport:
    """
    Sends requests to the gateway and maps HTTP status ranges to errors.

    Authentication headers are read from the shared :class:`GatewaySession`
    at send time, so a re-authenticated client picks up the new token without
    rebuilding the transport.
    """

    def __init__(
        self,
        config: GatewayConfig,
        state: GatewaySession,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.state = state
        self.session = session or requests.Session()

    def build_headers(
        self,
        headers: Optional[Mapping[str, str]] = None,
        skip_auth: bool = False,
    ) -> Dict[str, str]:
        merged: Dict[str, str] = {
            "Content-Type": "application/json",
            API_KEY_HEADER: self.config.api_key or "",
        }
        if not skip_auth:
            if self.state.access_token:
                merged["Authorization"] = f"Bearer {self.state.access_token}"
            merged["source_app"] = self.config.source_app or ""
        if headers:
            merged.update(headers)
        return merged

    def send(
        self,
        method: str,
        path: str,
        *,
        body: Body = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        skip_auth: bool = False,
    ) -> Any:
        url = self.config.url_for(path)
        logging.info("Sending %s %s", method.upper(), path)
        try:
            response = self.session.request(
                method.upper(),
                url,
                data=_encode_body(body),
                params=params or None,
                headers=self.build_headers(headers, skip_auth),
                timeout=(self.config.open_timeout, self.config.timeout),
            )
        except requests.RequestException as exc:
            raise NetworkError(f"Network error: {exc}") from exc

        logging.debug("Gateway responded to %s with %s", path, response.status_code)
        return self.handle_response(response)

    def post(
        self,
        path: str,
        body: Body = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
        skip_auth: bool = False,
    ) -> Any:
        return self.send("POST", path, body=body, headers=headers, skip_auth=skip_auth)

    def get(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
        skip_auth: bool = False,
    ) -> Any:
        return self.send("GET", path, params=params, headers=headers, skip_auth=skip_auth)

    def handle_response(self, response: requests.Response) -> Any:
        status = response.status_code
        parsed = _parse_body(response)

        if 200 <= status < 300:
            return parsed

        if 400 <= status < 500:
            body = _error_body(parsed)
            message = body.get("response_message") or body.get("response_detail") or "Client error"
            logging.warning("Gateway rejected request with %s: %s", status, message)
            raise InvalidParameterError(
                message,
                response_code=body.get("response_code"),
                response_detail=body.get("response_detail"),
            )

        if 500 <= status < 600:
            body = _error_body(parsed)
            message = (
                body.get("response_description") or body.get("response_message") or "Server error"
            )
            logging.warning("Gateway failed with %s: %s", status, message)
            raise APIError(
                message,
                response_code=body.get("response_code"),
                response_message=body.get("response_message"),
                response_description=body.get("response_description"),
            )

        raise APIError(f"Unexpected response status: {status}")
