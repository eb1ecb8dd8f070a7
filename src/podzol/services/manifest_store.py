# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Manifest Store

Single responsibility: read and write podzol.toml.
"""

import tomllib
from pathlib import Path

import tomli_w

from podzol.core.errors import ManifestError
from podzol.core.logging import get_service_logger
from podzol.models.manifest import Manifest

logger = get_service_logger("manifest_store")


def load_manifest(path: Path) -> Manifest:
    """
    Load and validate a manifest file.

    Raises:
        ManifestError: If the file is missing or not valid TOML
        ValidationError: If the document does not describe a valid pack
    """
    path = Path(path)
    if not path.exists():
        raise ManifestError(f"Manifest not found: {path}", path=str(path))

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"Invalid TOML in {path}: {e}", path=str(path))
    except OSError as e:
        raise ManifestError(f"Cannot read manifest {path}: {e}", path=str(path))

    manifest = Manifest.from_dict(data)
    logger.debug(f"Loaded manifest {manifest} from {path}")
    return manifest


def save_manifest(manifest: Manifest, path: Path) -> None:
    """
    Write a manifest atomically (temp file, then rename).

    Comments and formatting of an existing file are not preserved.
    """
    path = Path(path)
    temp_path = path.with_suffix(path.suffix + ".tmp")

    try:
        with open(temp_path, "wb") as f:
            tomli_w.dump(manifest.to_dict(), f)
        temp_path.replace(path)
    except OSError as e:
        raise ManifestError(f"Cannot write manifest {path}: {e}", path=str(path))

    logger.debug(f"Saved manifest {manifest} to {path}")
