"""Provider options passed by DevPod through the environment"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from devpod_provider_oci.auth_manager import DEFAULT_CONFIG_FILE, DEFAULT_PROFILE
from devpod_provider_oci.errors import OptionsError


@dataclass
class Options:
    machine_id: str = ""
    machine_folder: str = ""

    region: str = ""
    compartment_id: str = ""
    availability_domain: str = ""
    disk_image: str = ""
    disk_size: str = ""
    machine_type: str = ""
    oci_config_file: str = ""
    oci_profile: str = DEFAULT_PROFILE

    @classmethod
    def from_env(cls, skip_machine: bool = False, environ: Mapping[str, str] | None = None) -> Options:
        """Read options from ``environ`` (``os.environ`` by default).

        ``skip_machine`` drops the machine specific variables, as ``init`` runs
        before any machine exists.
        """
        env: Mapping[str, str] = os.environ if environ is None else environ
        options = cls()

        if not skip_machine:
            options.machine_id = from_env_or_error(env, "MACHINE_ID")
            options.machine_folder = from_env_or_error(env, "MACHINE_FOLDER")

        options.oci_config_file = env.get("OCI_CONFIG_FILE") or str(Path(DEFAULT_CONFIG_FILE).expanduser())
        options.oci_profile = env.get("OCI_PROFILE") or DEFAULT_PROFILE

        options.compartment_id = from_env_or_error(env, "COMPARTMENT_ID")
        options.disk_size = from_env_or_error(env, "DISK_SIZE")
        options.disk_image = from_env_or_error(env, "DISK_IMAGE")
        options.machine_type = from_env_or_error(env, "MACHINE_TYPE")
        options.region = from_env_or_error(env, "REGION")
        options.availability_domain = from_env_or_error(env, "AVAILABILITY_DOMAIN")

        return options


def from_env_or_error(env: Mapping[str, str], name: str) -> str:
    value = env.get(name)
    if value:
        return value

    raise OptionsError(f"couldn't find option {name} in environment, please make sure {name} is defined")
