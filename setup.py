# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Setup configuration for podzol, the modpack manager
"""

from setuptools import setup, find_packages

setup(
    name="podzol",
    version="0.1.0",
    description="Build Modrinth .mrpack modpacks from a declarative manifest",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.11",
    install_requires=[
        "httpx>=0.27.0",
        "pydantic>=2.5.0",
        "PyYAML>=6.0",
        "tomli-w>=1.0.0",
        "aiofiles>=23.2.0",
        "rich>=13.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.23.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "podzol=podzol.cli:main",
        ]
    },
)
