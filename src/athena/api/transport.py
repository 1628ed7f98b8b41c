# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/athena/api/transport.py

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import requests
from requests.auth import HTTPBasicAuth

from athena.config.models import AthenaConfig
from athena.api.errors import (
    AthenaDecodeError,
    AthenaHTTPError,
    AthenaTransportError,
    RequestConstructionError,
)

log = logging.getLogger("athena")

API_VERSION = "api/v3"
API_NAMESPACE = "onefuse"

# how much of a bad body ends up in a decode error
BODY_SNIPPET_CHARS = 500


# -----------------------
# URLs
# -----------------------
def collection_url(config: AthenaConfig, resource_type: str) -> str:
    return f"{config.base_url()}/{API_VERSION}/{API_NAMESPACE}/{resource_type}/"


def item_url(config: AthenaConfig, resource_type: str, id: int) -> str:
    return f"{collection_url(config, resource_type)}{int(id)}/"


def url_from_href(config: AthenaConfig, href: str) -> str:
    """
    Links come back service-relative (``/api/v3/onefuse/...``).
    """
    if href.startswith(("http://", "https://")):
        return href
    return f"{config.base_url()}{href}"


# -----------------------
# Session / headers
# -----------------------
def standard_headers(config: AthenaConfig) -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "Accept": "*/*",
        "Cache-Control": "no-cache",
        "accept-encoding": "gzip, deflate",
        "Connection": "keep-alive",
        "Host": config.host_header(),
        "SOURCE": "Terraform",
    }


def new_session(config: AthenaConfig) -> requests.Session:
    """
    One session per operation; nothing is shared between calls.
    """
    session = requests.Session()
    session.headers.update(standard_headers(config))
    session.auth = HTTPBasicAuth(config.user, config.password)
    session.verify = config.verify_ssl
    if not config.verify_ssl:
        log.warning("TLS certificate verification is disabled for %s", config.host_header())
    return session


# -----------------------
# Request / response
# -----------------------
def encode_body(method: str, url: str, body: Optional[Any]) -> Optional[str]:
    if body is None:
        return None
    try:
        return json.dumps(body)
    except (TypeError, ValueError) as exc:
        raise RequestConstructionError(
            f"athena.apiClient: Failed to encode request body for {method} {url}: {exc}"
        ) from exc


def send(
    session: requests.Session,
    config: AthenaConfig,
    method: str,
    url: str,
    body: Optional[Any] = None,
) -> requests.Response:
    """
    Execute one request and classify the outcome.

    Raises RequestConstructionError when the body cannot be encoded,
    AthenaTransportError when no response came back and
    AthenaHTTPError when the status is >= 400.
    """
    data = encode_body(method, url, body)
    log.debug("%s %s", method, url)
    try:
        res = session.request(
            method,
            url,
            data=data,
            timeout=config.request_timeout_seconds,
        )
    except requests.RequestException as exc:
        raise AthenaTransportError(
            f"athena.apiClient: Failed to do request {method} {url} {data or ''}".rstrip()
            + f": {exc}"
        ) from exc

    check_for_errors(res)
    return res


def check_for_errors(res: requests.Response) -> None:
    if res.status_code >= 400:
        raise AthenaHTTPError(res.status_code, res.text)


def decode(res: requests.Response) -> Any:
    try:
        return res.json()
    except ValueError as exc:
        snippet = (res.text or "")[:BODY_SNIPPET_CHARS]
        raise AthenaDecodeError(
            f"athena.apiClient: Failed to unmarshal response {snippet}"
        ) from exc
