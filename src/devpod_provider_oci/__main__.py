"""Entry point for running devpod_provider_oci as a module"""

from devpod_provider_oci.cli import main

if __name__ == "__main__":
    main()
