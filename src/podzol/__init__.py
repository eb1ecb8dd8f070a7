# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
podzol - modpack manager

Builds Modrinth ``.mrpack`` archives from a declarative ``podzol.toml``.
"""

__version__ = "0.1.0"
