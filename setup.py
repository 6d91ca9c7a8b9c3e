"""Setup configuration for iplookup."""

from setuptools import setup, find_packages

setup(
    name="iplookup",
    version="0.1.0",
    description="Query a STUN service for the current public IP address",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        "aioice>=0.9.0",
        "pyyaml>=6.0",
        "click>=8.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "iplookup=iplookup.cli:main",
        ],
    },
)
