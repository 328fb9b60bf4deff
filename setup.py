from setuptools import setup, find_packages

setup(
    name="devpod-provider-oci",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    package_data={"devpod_provider_oci": ["templates/*.j2"]},
    install_requires=[
        "oci>=2.155.0",
        "cryptography>=3.2.1",
        "click>=8.0.0",
        "rich>=13.0.0",
        "pyyaml>=5.4",
        "jinja2>=3.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "devpod-provider-oci=devpod_provider_oci.cli:main",
        ],
    },
    python_requires=">=3.9",
)
