"""Find OCI resources by display name (and freeform tags)"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Mapping

import oci


class ResourceKind(str, Enum):
    VCN = "vcn"
    INTERNET_GATEWAY = "internet_gateway"
    ROUTE_TABLE = "route_table"
    SUBNET = "subnet"
    IMAGE = "image"
    INSTANCE = "instance"


# Kinds whose list call is scoped to a VCN
_VCN_SCOPED: frozenset[ResourceKind] = frozenset(
    {ResourceKind.INTERNET_GATEWAY, ResourceKind.ROUTE_TABLE, ResourceKind.SUBNET}
)

# Kinds the service can pre-filter by display name
_SERVER_FILTERED: frozenset[ResourceKind] = frozenset({ResourceKind.IMAGE, ResourceKind.INSTANCE})


class ResourceLocator:
    """List-then-match lookup over the compute and virtual network clients.

    "Not found" is returned as ``None``: callers branch on it to decide
    whether to create something. Backend failures propagate unchanged.
    """

    def __init__(
        self,
        compute_client: oci.core.ComputeClient,
        network_client: oci.core.VirtualNetworkClient,
    ) -> None:
        self.compute_client: oci.core.ComputeClient = compute_client
        self.network_client: oci.core.VirtualNetworkClient = network_client

    def _list_call(self, kind: ResourceKind) -> Callable[..., Any]:
        return {
            ResourceKind.VCN: self.network_client.list_vcns,
            ResourceKind.INTERNET_GATEWAY: self.network_client.list_internet_gateways,
            ResourceKind.ROUTE_TABLE: self.network_client.list_route_tables,
            ResourceKind.SUBNET: self.network_client.list_subnets,
            ResourceKind.IMAGE: self.compute_client.list_images,
            ResourceKind.INSTANCE: self.compute_client.list_instances,
        }[kind]

    def list_all(
        self,
        kind: ResourceKind,
        compartment_id: str,
        display_name: str | None = None,
        vcn_id: str | None = None,
    ) -> list[Any]:
        """All resources of ``kind`` visible in the compartment, every page included"""
        kwargs: dict[str, Any] = {"compartment_id": compartment_id}
        if kind in _VCN_SCOPED:
            if not vcn_id:
                raise ValueError(f"{kind.value} lookup requires a vcn_id")
            kwargs["vcn_id"] = vcn_id
        if display_name is not None and kind in _SERVER_FILTERED:
            kwargs["display_name"] = display_name

        response = oci.pagination.list_call_get_all_results(self._list_call(kind), **kwargs)
        return list(response.data or [])

    def find_all(
        self,
        kind: ResourceKind,
        compartment_id: str,
        display_name: str,
        vcn_id: str | None = None,
        tags: Mapping[str, str] | None = None,
    ) -> list[Any]:
        """Every resource whose display name (and every given freeform tag) matches exactly, in list order"""
        return [
            resource
            for resource in self.list_all(kind, compartment_id, display_name=display_name, vcn_id=vcn_id)
            if resource.display_name == display_name and (not tags or _has_tags(resource, tags))
        ]

    def find(
        self,
        kind: ResourceKind,
        compartment_id: str,
        display_name: str,
        vcn_id: str | None = None,
        tags: Mapping[str, str] | None = None,
    ) -> Any | None:
        """First match of :meth:`find_all`, or ``None``"""
        matches = self.find_all(kind, compartment_id, display_name, vcn_id=vcn_id, tags=tags)
        return matches[0] if matches else None


def _has_tags(resource: Any, tags: Mapping[str, str]) -> bool:
    freeform: dict[str, str] = getattr(resource, "freeform_tags", None) or {}
    return all(freeform.get(key) == value for key, value in tags.items())
