# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/athena/api/resources.py

from __future__ import annotations

import logging
from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from athena.config.models import AthenaConfig
from athena.api import transport
from athena.api.errors import AthenaDecodeError, AthenaNotFoundError
from athena.api.models import CollectionResponse

log = logging.getLogger("athena")

M = TypeVar("M", bound=BaseModel)


def parse(payload: Any, model: Type[M]) -> M:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        snippet = str(payload)[: transport.BODY_SNIPPET_CHARS]
        raise AthenaDecodeError(
            f"athena.apiClient: Failed to unmarshal response into {model.__name__}: {snippet}"
        ) from exc


def get_url(config: AthenaConfig, url: str, model: Type[M]) -> M:
    with transport.new_session(config) as session:
        res = transport.send(session, config, "GET", url)
        return parse(transport.decode(res), model)


def get_by_id(config: AthenaConfig, resource_type: str, id: int, model: Type[M]) -> M:
    return get_url(config, transport.item_url(config, resource_type, id), model)


def find_first(
    config: AthenaConfig,
    resource_type: str,
    filter_expr: str,
    collection_model: Type[CollectionResponse],
    search_key: str,
):
    """
    GET ``{collection}?filter={filter_expr}`` and return the first embedded item.

    Only the first page is looked at.
    """
    # query is appended by hand so `:` stays unescaped on the wire
    url = f"{transport.collection_url(config, resource_type)}?filter={filter_expr}"
    log.debug("Looking up %s with filter %s", resource_type, filter_expr)
    collection = get_url(config, url, collection_model)

    entity = collection.first()
    if entity is None:
        raise AthenaNotFoundError(f"athena.apiClient: Could not find {resource_type} '{search_key}'!")
    return entity


def find_by_name(
    config: AthenaConfig,
    resource_type: str,
    name: str,
    collection_model: Type[CollectionResponse],
    extra_filter: str = "",
):
    return find_first(
        config,
        resource_type,
        f"name:{name}{extra_filter}",
        collection_model,
        search_key=name,
    )
