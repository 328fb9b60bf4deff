"""Shared test fixtures: an in-memory stand-in for the OCI compute and network services."""

from __future__ import annotations

import itertools
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import oci
import pytest
from oci.core.models import Instance

from devpod_provider_oci.provider import OracleProvider

COMPARTMENT_ID = "ocid1.compartment.oc1..test"
AVAILABILITY_DOMAIN = "AD-1"

RSA_PUBLIC_KEY = (
    "ssh-rsa AAAAB3NzaC1yc2EAAAADAQABAAABAQDVEnA5bsxU1ltrt9mPho/JrVeMS17sI9GjIeNCLcb2bIFTzZ6I8d+hFddgmHFItgLJLJWUY"
    "DIHjhE0yB6zLKVkDmeQ/T4Qy2UaV2x8O+KQa+7Chl8DaTfnr/0b8flaFG9VSLJKA/QJ/Sl07oCbRQt3l9bHXvVMux0VTGavEjpKwtFFtWkDx"
    "/vDxJoFsA+oMkGaF2AP2+jIc3WCATaprllUxI42pav52m065fpPEvMfK8LJ3L6t5IOa49LieoNPz23s5GOsN66E6kmNuuWQ/HH7I0vPovoeH"
    "qizX9CkHTdTYuI87Je39yEjVliMQurEUouHlZU075P06SBYGnObp9yp"
)


class FakeResponse:
    """Single-page list/get response"""

    def __init__(self, data: Any) -> None:
        self.status = 200
        self.headers: Dict[str, str] = {}
        self.data = data
        self.request = None
        self.next_page = None
        self.has_next_page = False


class FakeOCI:
    """Resources, call log and injectable failures shared by both fake clients."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self.vcns: List[oci.core.models.Vcn] = []
        self.internet_gateways: List[oci.core.models.InternetGateway] = []
        self.route_tables: List[oci.core.models.RouteTable] = []
        self.subnets: List[oci.core.models.Subnet] = []
        self.images: List[oci.core.models.Image] = []
        self.instances: List[Instance] = []
        self.vnic_attachments: List[oci.core.models.VnicAttachment] = []
        self.vnics: Dict[str, oci.core.models.Vnic] = {}

        self.calls: List[tuple] = []
        self.failures: Dict[str, BaseException] = {}

        self.network = FakeNetworkClient(self)
        self.compute = FakeComputeClient(self)

    def new_id(self, kind: str) -> str:
        return f"ocid1.{kind}.oc1..{next(self._ids)}"

    def record(self, method: str, **kwargs: Any) -> None:
        kwargs.pop("retry_strategy", None)
        self.calls.append((method, kwargs))
        if method in self.failures:
            raise self.failures[method]

    def count(self, method: str) -> int:
        return sum(1 for name, _ in self.calls if name == method)

    def creates(self) -> List[str]:
        return [name for name, _ in self.calls if name.startswith("create_")]

    def add_image(self, display_name: str) -> oci.core.models.Image:
        image = oci.core.models.Image(
            id=self.new_id("image"),
            compartment_id=COMPARTMENT_ID,
            display_name=display_name,
            lifecycle_state="AVAILABLE",
        )
        self.images.append(image)
        return image

    def add_instance(
        self,
        machine_id: str,
        lifecycle_state: str = Instance.LIFECYCLE_STATE_RUNNING,
        display_name: Optional[str] = None,
        public_ip: Optional[str] = "129.146.1.10",
        private_ip: str = "10.0.0.2",
        with_vnic: bool = True,
    ) -> Instance:
        instance = Instance(
            id=self.new_id("instance"),
            compartment_id=COMPARTMENT_ID,
            display_name=display_name or f"devpod-{machine_id}",
            lifecycle_state=lifecycle_state,
            freeform_tags={"machine-id": machine_id, "type": "devpod"},
        )
        self.instances.append(instance)
        if with_vnic:
            self.attach_vnic(instance.id, public_ip, private_ip)
        return instance

    def attach_vnic(self, instance_id: str, public_ip: Optional[str], private_ip: str) -> None:
        vnic_id = self.new_id("vnic")
        self.vnics[vnic_id] = oci.core.models.Vnic(id=vnic_id, public_ip=public_ip, private_ip=private_ip)
        self.vnic_attachments.append(
            oci.core.models.VnicAttachment(
                id=self.new_id("vnicattachment"),
                instance_id=instance_id,
                vnic_id=vnic_id,
                lifecycle_state="ATTACHED",
            )
        )

    def settle(self) -> None:
        """Move every instance in a transitional state to where it was heading"""
        settled = {
            Instance.LIFECYCLE_STATE_PROVISIONING: Instance.LIFECYCLE_STATE_RUNNING,
            Instance.LIFECYCLE_STATE_STARTING: Instance.LIFECYCLE_STATE_RUNNING,
            Instance.LIFECYCLE_STATE_STOPPING: Instance.LIFECYCLE_STATE_STOPPED,
            Instance.LIFECYCLE_STATE_TERMINATING: Instance.LIFECYCLE_STATE_TERMINATED,
        }
        for instance in self.instances:
            instance.lifecycle_state = settled.get(instance.lifecycle_state, instance.lifecycle_state)

    def purge_terminated(self) -> None:
        self.instances = [i for i in self.instances if i.lifecycle_state != Instance.LIFECYCLE_STATE_TERMINATED]


def _named(items: List[Any], display_name: Optional[str]) -> List[Any]:
    if display_name is None:
        return list(items)
    return [item for item in items if item.display_name == display_name]


class FakeNetworkClient:
    def __init__(self, backend: FakeOCI) -> None:
        self.backend = backend

    def list_vcns(self, compartment_id: str, **kwargs: Any) -> FakeResponse:
        self.backend.record("list_vcns", compartment_id=compartment_id, **kwargs)
        return FakeResponse([v for v in self.backend.vcns if v.compartment_id == compartment_id])

    def create_vcn(self, details: oci.core.models.CreateVcnDetails) -> FakeResponse:
        self.backend.record("create_vcn", details=details)
        vcn = oci.core.models.Vcn(
            id=self.backend.new_id("vcn"),
            compartment_id=details.compartment_id,
            display_name=details.display_name,
            cidr_block=details.cidr_block,
            dns_label=details.dns_label,
            freeform_tags=details.freeform_tags,
            lifecycle_state="AVAILABLE",
        )
        self.backend.vcns.append(vcn)
        return FakeResponse(vcn)

    def list_internet_gateways(self, compartment_id: str, vcn_id: Optional[str] = None, **kwargs: Any) -> FakeResponse:
        self.backend.record("list_internet_gateways", compartment_id=compartment_id, vcn_id=vcn_id, **kwargs)
        return FakeResponse([g for g in self.backend.internet_gateways if g.vcn_id == vcn_id])

    def create_internet_gateway(self, details: oci.core.models.CreateInternetGatewayDetails) -> FakeResponse:
        self.backend.record("create_internet_gateway", details=details)
        gateway = oci.core.models.InternetGateway(
            id=self.backend.new_id("internetgateway"),
            compartment_id=details.compartment_id,
            display_name=details.display_name,
            vcn_id=details.vcn_id,
            is_enabled=details.is_enabled,
            lifecycle_state="AVAILABLE",
        )
        self.backend.internet_gateways.append(gateway)
        return FakeResponse(gateway)

    def list_route_tables(self, compartment_id: str, vcn_id: Optional[str] = None, **kwargs: Any) -> FakeResponse:
        self.backend.record("list_route_tables", compartment_id=compartment_id, vcn_id=vcn_id, **kwargs)
        return FakeResponse([r for r in self.backend.route_tables if r.vcn_id == vcn_id])

    def create_route_table(self, details: oci.core.models.CreateRouteTableDetails) -> FakeResponse:
        self.backend.record("create_route_table", details=details)
        route_table = oci.core.models.RouteTable(
            id=self.backend.new_id("routetable"),
            compartment_id=details.compartment_id,
            display_name=details.display_name,
            vcn_id=details.vcn_id,
            route_rules=details.route_rules,
            lifecycle_state="AVAILABLE",
        )
        self.backend.route_tables.append(route_table)
        return FakeResponse(route_table)

    def list_subnets(self, compartment_id: str, vcn_id: Optional[str] = None, **kwargs: Any) -> FakeResponse:
        self.backend.record("list_subnets", compartment_id=compartment_id, vcn_id=vcn_id, **kwargs)
        return FakeResponse([s for s in self.backend.subnets if s.vcn_id == vcn_id])

    def create_subnet(self, details: oci.core.models.CreateSubnetDetails) -> FakeResponse:
        self.backend.record("create_subnet", details=details)
        subnet = oci.core.models.Subnet(
            id=self.backend.new_id("subnet"),
            compartment_id=details.compartment_id,
            display_name=details.display_name,
            vcn_id=details.vcn_id,
            cidr_block=details.cidr_block,
            route_table_id=details.route_table_id,
            availability_domain=details.availability_domain,
            lifecycle_state="AVAILABLE",
        )
        self.backend.subnets.append(subnet)
        return FakeResponse(subnet)

    def get_vnic(self, vnic_id: str) -> FakeResponse:
        self.backend.record("get_vnic", vnic_id=vnic_id)
        return FakeResponse(self.backend.vnics[vnic_id])


class FakeComputeClient:
    def __init__(self, backend: FakeOCI) -> None:
        self.backend = backend

    def list_images(self, compartment_id: str, display_name: Optional[str] = None, **kwargs: Any) -> FakeResponse:
        self.backend.record("list_images", compartment_id=compartment_id, display_name=display_name, **kwargs)
        return FakeResponse(_named(self.backend.images, display_name))

    def list_instances(self, compartment_id: str, display_name: Optional[str] = None, **kwargs: Any) -> FakeResponse:
        self.backend.record("list_instances", compartment_id=compartment_id, display_name=display_name, **kwargs)
        return FakeResponse(_named(self.backend.instances, display_name))

    def launch_instance(self, details: oci.core.models.LaunchInstanceDetails) -> FakeResponse:
        self.backend.record("launch_instance", details=details)
        instance = Instance(
            id=self.backend.new_id("instance"),
            compartment_id=details.compartment_id,
            availability_domain=details.availability_domain,
            display_name=details.display_name,
            shape=details.shape,
            freeform_tags=dict(details.freeform_tags),
            lifecycle_state=Instance.LIFECYCLE_STATE_PROVISIONING,
        )
        self.backend.instances.append(instance)
        self.backend.attach_vnic(instance.id, "129.146.20.30", "10.0.0.5")
        return FakeResponse(instance)

    def instance_action(self, instance_id: str, action: str, **kwargs: Any) -> FakeResponse:
        self.backend.record("instance_action", instance_id=instance_id, action=action)
        instance = self._get(instance_id)
        instance.lifecycle_state = {
            "START": Instance.LIFECYCLE_STATE_STARTING,
            "STOP": Instance.LIFECYCLE_STATE_STOPPING,
        }[action]
        return FakeResponse(instance)

    def terminate_instance(self, instance_id: str, **kwargs: Any) -> FakeResponse:
        self.backend.record("terminate_instance", instance_id=instance_id, **kwargs)
        self._get(instance_id).lifecycle_state = Instance.LIFECYCLE_STATE_TERMINATING
        return FakeResponse(None)

    def list_vnic_attachments(self, compartment_id: str, instance_id: Optional[str] = None, **kwargs: Any) -> FakeResponse:
        self.backend.record("list_vnic_attachments", compartment_id=compartment_id, instance_id=instance_id)
        return FakeResponse([a for a in self.backend.vnic_attachments if a.instance_id == instance_id])

    def _get(self, instance_id: str) -> Instance:
        for instance in self.backend.instances:
            if instance.id == instance_id:
                return instance
        raise oci.exceptions.ServiceError(404, "NotAuthorizedOrNotFound", {}, "instance not found")


@pytest.fixture
def fake_oci() -> FakeOCI:
    return FakeOCI()


@pytest.fixture
def oci_client(fake_oci: FakeOCI) -> SimpleNamespace:
    """Object shaped like OCIClient, carrying the fake clients"""
    return SimpleNamespace(compute_client=fake_oci.compute, network_client=fake_oci.network)


@pytest.fixture
def provider(oci_client: SimpleNamespace) -> OracleProvider:
    return OracleProvider(oci_client, COMPARTMENT_ID)
