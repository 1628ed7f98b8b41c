# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/athena/binding/ipam_policy.py

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping

from athena.api.client import AthenaAPIClient
from athena.binding.ipam_reservation import BindingError

log = logging.getLogger("athena")


class IPAMPolicyDataSource:
    """Read-only lookup for ``athena_ipam_policy``: name in, id/description/workspace out."""

    def __init__(self, client: AthenaAPIClient):
        self.client = client

    def read(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        log.info("athena.dataSourceIPAMPolicyRead")
        name = record.get("name")
        if not name:
            raise BindingError("name is required")

        policy = self.client.get_ipam_policy_by_name(name)
        links = policy.links
        return {
            **record,
            "id": str(policy.id),
            "name": policy.name or name,
            "description": policy.description or "",
            "workspace_url": links.workspace.href if links else "",
        }
