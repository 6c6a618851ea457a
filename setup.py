# Copyright 2022-2025 TII (SSRC) and the Ghaf contributors
# SPDX-License-Identifier: Apache-2.0
from setuptools import find_packages, setup

setup(
    name="ldaps-shell",
    version="0.1",
    description="Interactive LDAPS search shell.",
    packages=find_packages(),
    python_requires=">=3.8",
    install_requires=[
        "ldap3",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "ldaps-shell=ldaps_shell.main:main",
        ],
    },
)
