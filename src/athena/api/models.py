# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/athena/api/models.py

from __future__ import annotations

from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class WireModel(BaseModel):
    """Base for everything that crosses the wire; accepts both field names and JSON aliases."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class LinkRef(WireModel):
    href: str = ""
    title: str = ""


# ---------------------------------------------------------------------
# Links blocks
# ---------------------------------------------------------------------
class SelfLinks(WireModel):
    self_: LinkRef = Field(default_factory=LinkRef, alias="self")


class WorkspaceScopedLinks(SelfLinks):
    workspace: LinkRef = Field(default_factory=LinkRef)


class ReservationLinks(WorkspaceScopedLinks):
    policy: LinkRef = Field(default_factory=LinkRef)
    job_metadata: LinkRef = Field(default_factory=LinkRef, alias="jobMetadata")


class JobLinks(WorkspaceScopedLinks):
    job_metadata: LinkRef = Field(default_factory=LinkRef, alias="jobMetadata")
    managed_object: LinkRef = Field(default_factory=LinkRef, alias="managedObject")
    policy: LinkRef = Field(default_factory=LinkRef)


# ---------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------
class Workspace(WireModel):
    links: Optional[SelfLinks] = Field(default=None, alias="_links")
    id: Optional[int] = None
    name: Optional[str] = None


class IPAMPolicy(WireModel):
    links: Optional[WorkspaceScopedLinks] = Field(default=None, alias="_links")
    id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None


class IPAMReservation(WireModel):
    """
    An IP allocation record.

    ``policy_id``/``policy`` and ``workspace`` are what the caller sends;
    ``links`` is what the service hands back. ``dns_search_suffix`` is kept on
    the entity for the binding layer but is not part of the request body.
    """

    links: Optional[ReservationLinks] = Field(default=None, alias="_links")
    id: Optional[int] = None
    hostname: Optional[str] = None
    policy_id: Optional[int] = Field(default=None, alias="policyId")
    policy: Optional[str] = None
    workspace: Optional[str] = None
    ip_address: Optional[str] = Field(default=None, alias="ipAddress")
    gateway: Optional[str] = None
    # always sent, even when empty
    primary_dns: str = Field(default="", alias="primaryDns")
    secondary_dns: str = Field(default="", alias="secondaryDns")
    network: Optional[str] = None
    subnet: Optional[str] = None
    dns_suffix: Optional[str] = Field(default=None, alias="dnsSuffix")
    dns_search_suffix: Optional[List[str]] = Field(default=None, alias="dnsSearchSuffix", exclude=True)
    netmask: Optional[str] = None
    nic_label: Optional[str] = Field(default=None, alias="nicLabel")
    template_properties: Optional[Dict[str, Any]] = None

    def to_wire(self) -> Dict[str, Any]:
        body = super().to_wire()
        # empty strings and maps are "unset" for the service
        return {
            k: v for k, v in body.items()
            if k in ("primaryDns", "secondaryDns") or v not in ("", {}, 0)
        }


class ErrorMessage(WireModel):
    message: str = ""


class ErrorDetails(WireModel):
    code: Optional[int] = None
    errors: List[ErrorMessage] = Field(default_factory=list)

    def messages(self) -> List[str]:
        return [e.message for e in self.errors]


class JobStatus(WireModel):
    links: Optional[JobLinks] = Field(default=None, alias="_links")
    id: int
    job_state_description: Optional[str] = Field(default=None, alias="jobStateDescription")
    job_state: Optional[str] = Field(default=None, alias="jobState")
    job_tracking_id: Optional[str] = Field(default=None, alias="jobTrackingId")
    job_type: Optional[str] = Field(default=None, alias="jobType")
    error_details: Optional[ErrorDetails] = Field(default=None, alias="errorDetails")

    def managed_object_href(self) -> str:
        return self.links.managed_object.href if self.links else ""


class RenderTemplateRequest(WireModel):
    template: Optional[str] = None
    template_properties: Optional[Dict[str, Any]] = None


class RenderTemplateResponse(WireModel):
    value: str = ""


# ---------------------------------------------------------------------
# Collections (HAL `_embedded` wrappers)
# ---------------------------------------------------------------------
class CollectionResponse(WireModel, Generic[T]):
    """
    A list endpoint response. Subclasses say where their items live;
    callers only use ``items()`` / ``first()``.
    """

    def items(self) -> List[T]:
        raise NotImplementedError

    def first(self) -> Optional[T]:
        items = self.items()
        return items[0] if items else None


class _EmbeddedWorkspaces(WireModel):
    workspaces: List[Workspace] = Field(default_factory=list)


class WorkspacesListResponse(CollectionResponse[Workspace]):
    embedded: _EmbeddedWorkspaces = Field(default_factory=_EmbeddedWorkspaces, alias="_embedded")

    def items(self) -> List[Workspace]:
        return self.embedded.workspaces


class _EmbeddedIPAMPolicies(WireModel):
    ipam_policies: List[IPAMPolicy] = Field(default_factory=list, alias="ipamPolicies")


class IPAMPolicyResponse(CollectionResponse[IPAMPolicy]):
    embedded: _EmbeddedIPAMPolicies = Field(default_factory=_EmbeddedIPAMPolicies, alias="_embedded")

    def items(self) -> List[IPAMPolicy]:
        return self.embedded.ipam_policies
