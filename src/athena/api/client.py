# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/athena/api/client.py

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from athena.config.models import AthenaConfig
from athena.api import resources, transport
from athena.api.errors import (
    AthenaNotFoundError,
    AthenaNotImplementedError,
    RequestConstructionError,
)
from athena.api.jobs import JobRunner, get_job_status
from athena.api.models import (
    IPAMPolicy,
    IPAMPolicyResponse,
    IPAMReservation,
    JobStatus,
    RenderTemplateRequest,
    RenderTemplateResponse,
    Workspace,
    WorkspacesListResponse,
)

log = logging.getLogger("athena")

WORKSPACE_RESOURCE_TYPE = "workspaces"
IPAM_RESERVATION_RESOURCE_TYPE = "ipamReservations"
IPAM_POLICY_RESOURCE_TYPE = "ipamPolicies"
RENDER_TEMPLATE_RESOURCE_TYPE = "templateTester"

DEFAULT_WORKSPACE_NAME = "Default"


class AthenaAPIClient:
    """
    Domain operations against the OneFuse REST API.

    Holds only the immutable config; every call opens its own session.
    ``runner_options`` are passed through to each JobRunner (poll interval,
    timeout, sleep/clock, observers).
    """

    def __init__(self, config: AthenaConfig, **runner_options: Any):
        self.config = config
        self.runner_options = runner_options

    def _runner(self) -> JobRunner:
        return JobRunner(self.config, **self.runner_options)

    # -----------------------
    # IPAM reservations
    # -----------------------
    def create_ipam_reservation(self, new_record: IPAMReservation) -> IPAMReservation:
        log.info("athena.apiClient: CreateIPAMReservation")
        config = self.config

        # validated before anything goes on the wire
        policy_url = self._resolve_policy_url(new_record)
        workspace_url = self.find_workspace_url_or_default(new_record.workspace)

        request = new_record.model_copy(update={"policy": policy_url, "workspace": workspace_url})
        url = transport.collection_url(config, IPAM_RESERVATION_RESOURCE_TYPE)

        return self._runner().run_and_fetch("POST", url, request.to_wire(), IPAMReservation)

    def get_ipam_reservation(self, id: int) -> IPAMReservation:
        log.info("athena.apiClient: GetIPAMReservation")
        return resources.get_by_id(self.config, IPAM_RESERVATION_RESOURCE_TYPE, id, IPAMReservation)

    def update_ipam_reservation(self, id: int, updated: IPAMReservation) -> IPAMReservation:
        log.info("athena.apiClient: UpdateIPAMReservation")
        raise AthenaNotImplementedError("athena.apiClient: Not implemented yet")

    def delete_ipam_reservation(self, id: int) -> None:
        log.info("athena.apiClient: DeleteIPAMReservation")
        url = transport.item_url(self.config, IPAM_RESERVATION_RESOURCE_TYPE, id)
        self._runner().run("DELETE", url)

    def _resolve_policy_url(self, record: IPAMReservation) -> str:
        has_id = bool(record.policy_id)
        has_url = bool(record.policy)
        if has_id == has_url:
            raise RequestConstructionError(
                "athena.apiClient: IPAM Record Create requires exactly one of PolicyID or Policy URL"
            )
        if has_id:
            return transport.item_url(self.config, IPAM_POLICY_RESOURCE_TYPE, record.policy_id)
        return record.policy

    # -----------------------
    # IPAM policies
    # -----------------------
    def get_ipam_policy(self, id: int) -> IPAMPolicy:
        log.info("athena.apiClient: GetIPAMPolicy")
        return resources.get_by_id(self.config, IPAM_POLICY_RESOURCE_TYPE, id, IPAMPolicy)

    def get_ipam_policy_by_name(self, name: str) -> IPAMPolicy:
        log.info("athena.apiClient: GetIPAMPolicyByName")
        return resources.find_by_name(self.config, IPAM_POLICY_RESOURCE_TYPE, name, IPAMPolicyResponse)

    # -----------------------
    # Workspaces
    # -----------------------
    def get_workspace_by_name(self, name: str) -> Workspace:
        return resources.find_by_name(self.config, WORKSPACE_RESOURCE_TYPE, name, WorkspacesListResponse)

    def find_default_workspace(self) -> Workspace:
        log.debug("athena.findDefaultWorkspaceID")
        return resources.find_first(
            self.config,
            WORKSPACE_RESOURCE_TYPE,
            f"name.exact:{DEFAULT_WORKSPACE_NAME}",
            WorkspacesListResponse,
            search_key=DEFAULT_WORKSPACE_NAME,
        )

    def find_workspace_url_or_default(self, workspace_url: Optional[str]) -> str:
        if workspace_url:
            return workspace_url
        try:
            workspace = self.find_default_workspace()
        except AthenaNotFoundError as exc:
            raise AthenaNotFoundError(f"athena.apiClient: Failed to find default workspace: {exc}") from exc
        if workspace.id is None:
            raise AthenaNotFoundError("athena.apiClient: Default workspace has no id")
        return transport.item_url(self.config, WORKSPACE_RESOURCE_TYPE, workspace.id)

    # -----------------------
    # Jobs
    # -----------------------
    def get_job_status(self, id: int) -> JobStatus:
        return get_job_status(self.config, id)

    # -----------------------
    # Templates
    # -----------------------
    def render_template(self, template: str, template_properties: Optional[Dict[str, Any]] = None) -> str:
        """
        POST only so the body can carry the template; nothing is created and
        there is no job to wait for.
        """
        log.info("athena.apiClient: RenderTemplate")
        config = self.config

        body = RenderTemplateRequest(template=template, template_properties=template_properties or None)
        url = transport.collection_url(config, RENDER_TEMPLATE_RESOURCE_TYPE)

        with transport.new_session(config) as session:
            res = transport.send(session, config, "POST", url, body.to_wire())
            rendered = resources.parse(transport.decode(res), RenderTemplateResponse)
        return rendered.value

