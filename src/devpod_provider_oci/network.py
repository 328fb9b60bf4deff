"""Converge the shared DevPod network of a compartment"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import oci
from rich.console import Console

from devpod_provider_oci.constants import (
    DEFAULT_ROUTE_CIDR,
    LABEL_TYPE,
    LABEL_TYPE_DEVPOD,
    NETWORK_NAMES,
    SUBNET_CIDR,
    SUBNET_DNS_LABEL,
    VCN_CIDR,
    VCN_DNS_LABEL,
    NetworkNames,
)
from devpod_provider_oci.errors import BackendError
from devpod_provider_oci.locator import ResourceKind, ResourceLocator

CONSOLE: Console = Console(stderr=True)


@dataclass
class NetworkTopology:
    vcn: oci.core.models.Vcn
    internet_gateway: oci.core.models.InternetGateway
    route_table: oci.core.models.RouteTable
    subnet: oci.core.models.Subnet


class NetworkConvergence:
    """Find-or-create the VCN, internet gateway, route table and subnet.

    Each step looks its resource up by reserved display name and creates it
    only when absent. A resource that already exists is used as found, even
    if its properties differ from what would be created. Nothing is ever
    deleted, so an interrupted run leaves resources that the next run picks up.
    """

    def __init__(
        self,
        locator: ResourceLocator,
        names: NetworkNames = NETWORK_NAMES,
    ) -> None:
        self.locator: ResourceLocator = locator
        self.network_client: oci.core.VirtualNetworkClient = locator.network_client
        self.names: NetworkNames = names

    @property
    def _tags(self) -> dict[str, str]:
        return {LABEL_TYPE: LABEL_TYPE_DEVPOD}

    def ensure_network(self, compartment_id: str, availability_domain: str, machine_id: str) -> oci.core.models.Subnet:
        """Return the subnet instances of ``machine_id`` attach to"""
        return self.converge(compartment_id, availability_domain, machine_id).subnet

    def converge(self, compartment_id: str, availability_domain: str, machine_id: str) -> NetworkTopology:
        CONSOLE.print(f"[yellow]Ensuring network for machine {machine_id}...[/yellow]")

        vcn = self._ensure_vcn(compartment_id)
        internet_gateway = self._ensure_internet_gateway(compartment_id, vcn.id)
        route_table = self._ensure_route_table(compartment_id, vcn.id, internet_gateway.id)
        subnet = self._ensure_subnet(compartment_id, vcn.id, route_table.id, availability_domain)

        return NetworkTopology(
            vcn=vcn,
            internet_gateway=internet_gateway,
            route_table=route_table,
            subnet=subnet,
        )

    def _find(self, kind: ResourceKind, compartment_id: str, name: str, vcn_id: str | None = None) -> Any | None:
        try:
            return self.locator.find(kind, compartment_id, name, vcn_id=vcn_id)
        except Exception as e:
            raise BackendError(f"list {kind.value}", e) from e

    def _create(self, kind: ResourceKind, create_call: Any, details: Any) -> Any:
        try:
            resource = create_call(details).data
        except Exception as e:
            raise BackendError(f"create {kind.value}", e) from e
        CONSOLE.print(f"[green]✅ Created {kind.value} {resource.display_name} ({resource.id})[/green]")
        return resource

    def _ensure_vcn(self, compartment_id: str) -> oci.core.models.Vcn:
        vcn = self._find(ResourceKind.VCN, compartment_id, self.names.vcn)
        if vcn is not None:
            return vcn

        details = oci.core.models.CreateVcnDetails(
            compartment_id=compartment_id,
            display_name=self.names.vcn,
            cidr_block=VCN_CIDR,
            dns_label=VCN_DNS_LABEL,
            freeform_tags=self._tags,
        )
        return self._create(ResourceKind.VCN, self.network_client.create_vcn, details)

    def _ensure_internet_gateway(self, compartment_id: str, vcn_id: str) -> oci.core.models.InternetGateway:
        gateway = self._find(ResourceKind.INTERNET_GATEWAY, compartment_id, self.names.internet_gateway, vcn_id)
        if gateway is not None:
            return gateway

        details = oci.core.models.CreateInternetGatewayDetails(
            compartment_id=compartment_id,
            display_name=self.names.internet_gateway,
            vcn_id=vcn_id,
            is_enabled=True,
            freeform_tags=self._tags,
        )
        return self._create(ResourceKind.INTERNET_GATEWAY, self.network_client.create_internet_gateway, details)

    def _ensure_route_table(self, compartment_id: str, vcn_id: str, gateway_id: str) -> oci.core.models.RouteTable:
        route_table = self._find(ResourceKind.ROUTE_TABLE, compartment_id, self.names.route_table, vcn_id)
        if route_table is not None:
            return route_table

        details = oci.core.models.CreateRouteTableDetails(
            compartment_id=compartment_id,
            display_name=self.names.route_table,
            vcn_id=vcn_id,
            route_rules=[
                oci.core.models.RouteRule(
                    network_entity_id=gateway_id,
                    destination=DEFAULT_ROUTE_CIDR,
                    destination_type=oci.core.models.RouteRule.DESTINATION_TYPE_CIDR_BLOCK,
                )
            ],
            freeform_tags=self._tags,
        )
        return self._create(ResourceKind.ROUTE_TABLE, self.network_client.create_route_table, details)

    def _ensure_subnet(
        self,
        compartment_id: str,
        vcn_id: str,
        route_table_id: str,
        availability_domain: str,
    ) -> oci.core.models.Subnet:
        subnet = self._find(ResourceKind.SUBNET, compartment_id, self.names.subnet, vcn_id)
        if subnet is not None:
            return subnet

        details = oci.core.models.CreateSubnetDetails(
            compartment_id=compartment_id,
            display_name=self.names.subnet,
            vcn_id=vcn_id,
            cidr_block=SUBNET_CIDR,
            route_table_id=route_table_id,
            dns_label=SUBNET_DNS_LABEL,
            availability_domain=availability_domain,
            freeform_tags=self._tags,
        )
        return self._create(ResourceKind.SUBNET, self.network_client.create_subnet, details)
