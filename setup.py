from __future__ import annotations

from setuptools import find_namespace_packages, setup


setup(
    name="shipyard-release",
    version="0.1.0",
    description="Ordered release pipeline for interdependent cargo crates",
    python_requires=">=3.10",
    packages=find_namespace_packages(include=["shipyard", "shipyard.*"]),
    install_requires=[
        "PyYAML>=6.0",
        "structlog>=23.1",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "shipyard=shipyard.cli.shipyard:main",
        ],
    },
)
