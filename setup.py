#!/usr/bin/env python3
"""
Setup script for app-publisher.

This file is primarily for backward compatibility.
The project is configured via pyproject.toml using hatchling.
"""

import os
import re
from setuptools import setup, find_packages


def read(rel_path):
    """Read file content."""
    here = os.path.abspath(os.path.dirname(__file__))
    with open(os.path.join(here, rel_path), 'r', encoding='utf-8') as fp:
        return fp.read()


def find_version(rel_path):
    """Extract version from the version module."""
    version_match = re.search(
        r'^__version__\s*=\s*[\'"]([^\'"]*)[\'"]',
        read(rel_path),
        re.MULTILINE
    )
    if version_match:
        return version_match.group(1)
    raise RuntimeError("Unable to find version string.")


if __name__ == "__main__":
    setup(
        name="app-publisher",
        version=find_version("app_publisher/__version__.py"),
        packages=find_packages(exclude=["tests*", "docs*"]),
        python_requires=">=3.8",
    )
