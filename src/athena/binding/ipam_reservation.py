# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/athena/binding/ipam_reservation.py

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Tuple

from athena.api.client import AthenaAPIClient
from athena.api.errors import AthenaError
from athena.api.models import IPAMReservation

log = logging.getLogger("athena")

Record = Dict[str, Any]

# record key -> entity attribute, for the plain string fields
STRING_FIELDS = {
    "ip_address": "ip_address",
    "netmask": "netmask",
    "subnet": "subnet",
    "gateway": "gateway",
    "network": "network",
    "primary_dns": "primary_dns",
    "secondary_dns": "secondary_dns",
    "dns_suffix": "dns_suffix",
    "nic_label": "nic_label",
}

# fields whose change would require a remote update
TRACKED_FIELDS = (
    "hostname",
    "computed_hostname",
    "policy_id",
    "workspace_url",
    "ip_address",
    "netmask",
    "subnet",
    "network",
    "gateway",
    "primary_dns",
    "secondary_dns",
    "dns_suffix",
    "nic_label",
    "template_properties",
)


class BindingError(AthenaError):
    """A record or a server link did not have the expected shape."""


def policy_id_from_href(href: str) -> int:
    """
    ``.../ipamPolicies/42/`` -> 42.

    The id is the second-to-last ``/`` segment; this relies on the service
    keeping its trailing-slash link format.
    """
    parts = (href or "").split("/")
    if len(parts) < 2:
        raise BindingError(f"Cannot derive policy id from link '{href}'")
    try:
        return int(parts[-2])
    except ValueError as exc:
        raise BindingError(f"Cannot derive policy id from link '{href}'") from exc


def parse_record_id(id: str) -> int:
    try:
        return int(id)
    except (TypeError, ValueError) as exc:
        raise BindingError(f"Invalid IPAM reservation id '{id}'") from exc


def reservation_from_record(record: Mapping[str, Any]) -> IPAMReservation:
    hostname = record.get("hostname")
    if not hostname:
        raise BindingError("hostname is required")

    fields: Dict[str, Any] = {
        attr: record.get(key) or None for key, attr in STRING_FIELDS.items()
    }
    # always sent, empty is fine
    fields["primary_dns"] = record.get("primary_dns") or ""
    fields["secondary_dns"] = record.get("secondary_dns") or ""

    return IPAMReservation(
        hostname=hostname,
        policy_id=record.get("policy_id") or None,
        workspace=record.get("workspace_url") or None,
        dns_search_suffix=[str(s) for s in record.get("dns_search_suffix") or []] or None,
        template_properties=dict(record.get("template_properties") or {}) or None,
        **fields,
    )


def bind_reservation(record: Mapping[str, Any], reservation: IPAMReservation) -> Record:
    """
    Copy what the service returned back onto the record.
    """
    log.debug("athena.bindIPAMReservationResource")
    out: Record = dict(record)

    links = reservation.links
    if links is None:
        raise BindingError(f"IPAM reservation {reservation.id} came back without links")

    out["computed_hostname"] = reservation.hostname or ""
    out["workspace_url"] = links.workspace.href
    for key, attr in STRING_FIELDS.items():
        out[key] = getattr(reservation, attr) or ""
    out["policy_id"] = policy_id_from_href(links.policy.href)

    # not echoed by the service; keep what the caller asked for
    if reservation.dns_search_suffix is not None:
        out["dns_search_suffix"] = list(reservation.dns_search_suffix)
    else:
        out.setdefault("dns_search_suffix", [])
    return out


def has_changes(old: Mapping[str, Any], new: Mapping[str, Any]) -> bool:
    return any(old.get(k) != new.get(k) for k in TRACKED_FIELDS)


class IPAMReservationResource:
    """
    Create/read/update/delete handlers for the ``athena_ipam_record`` resource.
    Records are flat dicts; ids are strings.
    """

    def __init__(self, client: AthenaAPIClient):
        self.client = client

    def create(self, record: Mapping[str, Any]) -> Tuple[str, Record]:
        log.info("athena.resourceIPAMReservationCreate")
        created = self.client.create_ipam_reservation(reservation_from_record(record))
        return str(created.id), bind_reservation(record, created)

    def read(self, id: str, record: Mapping[str, Any]) -> Record:
        log.info("athena.resourceIPAMReservationRead")
        found = self.client.get_ipam_reservation(parse_record_id(id))
        return bind_reservation(record, found)

    def update(self, id: str, old: Mapping[str, Any], new: Mapping[str, Any]) -> Record:
        log.info("athena.resourceIPAMReservationUpdate")
        if not has_changes(old, new):
            return dict(new)

        desired = reservation_from_record(new)
        updated = self.client.update_ipam_reservation(parse_record_id(id), desired)
        return bind_reservation(new, updated)

    def delete(self, id: str) -> None:
        log.info("athena.resourceIPAMReservationDelete")
        self.client.delete_ipam_reservation(parse_record_id(id))
