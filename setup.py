""" Setup script for the Suno failover client """
from setuptools import setup, find_packages

setup(
    name="suno-failover",
    version="0.1.0",
    description="Suno session management with credit based credential failover",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "pydantic>=2.0.0",
        "requests>=2.31.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "suno-failover=suno_failover.main:main",
        ],
    },
)
