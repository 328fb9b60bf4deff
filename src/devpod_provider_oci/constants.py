"""Well-known names, tags and status tokens used by the provider"""

from __future__ import annotations

from typing import NamedTuple

# Freeform tags
LABEL_MACHINE_ID = "machine-id"
LABEL_TYPE = "type"
LABEL_TYPE_DEVPOD = "devpod"

DISPLAY_NAME_PREFIX = "devpod"
KEY_NAME_MACHINE_ID_LENGTH = 24
KEY_NAME_SUFFIX_LENGTH = 8


class NetworkNames(NamedTuple):
    """Reserved display names of the shared per-compartment network.

    These names are the only thing that makes network convergence idempotent:
    a resource carrying one of them is reused as-is.
    """

    vcn: str = "devpod-vcn"
    internet_gateway: str = "devpod-ig"
    route_table: str = "devpod-rt"
    subnet: str = "devpod-subnet"


NETWORK_NAMES = NetworkNames()

VCN_CIDR = "10.0.0.0/16"
VCN_DNS_LABEL = "devpodvcn"
SUBNET_CIDR = "10.0.0.0/24"
SUBNET_DNS_LABEL = "devpodsubnet"
DEFAULT_ROUTE_CIDR = "0.0.0.0/0"

SSH_USER = "devpod"

# Status tokens printed by the status command
STATUS_RUNNING = "running"
STATUS_STOPPED = "stopped"
STATUS_TERMINATED = "terminated"
STATUS_STARTING = "starting"
STATUS_STOPPING = "stopping"
STATUS_NOT_FOUND = "not_found"

# Error messages
ERR_MISSING_MACHINE_ID = "missing machine id"
ERR_MISSING_SERVER = "missing server"


def display_name(machine_id: str) -> str:
    """Display name of the instance that belongs to ``machine_id``"""
    return f"{DISPLAY_NAME_PREFIX}-{machine_id}"
