#!/usr/bin/env python3
"""
ShardCache Setup Script
=======================
Allows installation of the shardcache package.

Usage:
    pip install -e .           # Development install
    pip install -e ".[test]"   # With test dependencies
    pip install .              # Regular install
"""

from setuptools import setup, find_packages

setup(
    name="shardcache",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "xxhash>=3.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
)
