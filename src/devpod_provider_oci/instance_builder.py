"""Assemble launch requests for DevPod machines"""

from __future__ import annotations

import base64
import uuid
from importlib import resources

import oci
import yaml
from jinja2 import Template
from rich.console import Console

from devpod_provider_oci.constants import (
    KEY_NAME_MACHINE_ID_LENGTH,
    KEY_NAME_SUFFIX_LENGTH,
    LABEL_MACHINE_ID,
    LABEL_TYPE,
    LABEL_TYPE_DEVPOD,
    SSH_USER,
    display_name,
)
from devpod_provider_oci.errors import (
    BackendError,
    ImageNotFound,
    InvalidDiskSize,
    InvalidInputError,
    MissingMachineID,
)
from devpod_provider_oci.fingerprint import fingerprint
from devpod_provider_oci.locator import ResourceKind, ResourceLocator
from devpod_provider_oci.network import NetworkConvergence

CONSOLE: Console = Console(stderr=True)

CLOUD_CONFIG_TEMPLATE = "cloud-config.yaml.j2"


def load_cloud_config_template() -> str:
    return resources.files("devpod_provider_oci").joinpath("templates").joinpath(CLOUD_CONFIG_TEMPLATE).read_text()


def key_name(machine_id: str) -> str:
    """Short, unique name for the machine's SSH key"""
    return f"{machine_id[:KEY_NAME_MACHINE_ID_LENGTH]}-{uuid.uuid4().hex[:KEY_NAME_SUFFIX_LENGTH]}"


def parse_disk_size(disk_size_gb: str) -> int:
    try:
        size = int(str(disk_size_gb).strip())
    except ValueError as e:
        raise InvalidDiskSize(disk_size_gb) from e
    if size <= 0:
        raise InvalidDiskSize(disk_size_gb)
    return size


class InstanceRequestBuilder:
    """Build ``LaunchInstanceDetails`` for a machine.

    Only the network may be created while building; the launch itself is
    left to the caller.
    """

    def __init__(
        self,
        locator: ResourceLocator,
        network: NetworkConvergence,
        template: str | None = None,
    ) -> None:
        self.locator: ResourceLocator = locator
        self.network: NetworkConvergence = network
        self.template: str = template if template is not None else load_cloud_config_template()

    def render_cloud_config(self, public_key: str) -> str:
        """Render the cloud-init document and check that it is valid YAML"""
        document = Template(self.template).render(public_key=public_key.strip(), user=SSH_USER)
        try:
            yaml.safe_load(document)
        except yaml.YAMLError as e:
            raise InvalidInputError(f"generated cloud config is not valid YAML: {e}") from e
        return document

    def find_image(self, compartment_id: str, disk_image: str) -> oci.core.models.Image:
        try:
            image = self.locator.find(ResourceKind.IMAGE, compartment_id, disk_image)
        except Exception as e:
            raise BackendError("find image", e) from e
        if image is None:
            raise ImageNotFound(disk_image)
        return image

    def build(
        self,
        machine_id: str,
        disk_image: str,
        disk_size_gb: str,
        shape: str,
        region: str,
        availability_domain: str,
        compartment_id: str,
        public_key: str,
    ) -> oci.core.models.LaunchInstanceDetails:
        if not machine_id:
            raise MissingMachineID()

        key_fingerprint = fingerprint(public_key)
        name = key_name(machine_id)
        CONSOLE.print(f"[yellow]Creating instance in {region} with SSH key {name} ({key_fingerprint})[/yellow]")

        user_data = base64.b64encode(self.render_cloud_config(public_key).encode()).decode()
        disk_size = parse_disk_size(disk_size_gb)

        image = self.find_image(compartment_id, disk_image)

        try:
            subnet = self.network.ensure_network(compartment_id, availability_domain, machine_id)
        except Exception as e:
            raise BackendError("create or get network", e) from e

        return oci.core.models.LaunchInstanceDetails(
            availability_domain=availability_domain,
            compartment_id=compartment_id,
            shape=shape,
            display_name=display_name(machine_id),
            source_details=oci.core.models.InstanceSourceViaImageDetails(
                image_id=image.id,
                boot_volume_size_in_gbs=disk_size,
            ),
            launch_options=oci.core.models.LaunchOptions(
                boot_volume_type=oci.core.models.LaunchOptions.BOOT_VOLUME_TYPE_PARAVIRTUALIZED,
                network_type=oci.core.models.LaunchOptions.NETWORK_TYPE_PARAVIRTUALIZED,
                is_consistent_volume_naming_enabled=True,
            ),
            create_vnic_details=oci.core.models.CreateVnicDetails(
                subnet_id=subnet.id,
                assign_public_ip=True,
            ),
            metadata={
                "user_data": user_data,
                "ssh_authorized_keys": public_key.strip(),
            },
            freeform_tags={
                LABEL_MACHINE_ID: machine_id,
                LABEL_TYPE: LABEL_TYPE_DEVPOD,
            },
        )
