"""
Firmware deployment functionality for godotino.

This module provides upload of compiled firmware to connected boards.
"""

from .deployer import (
    SERIAL_PORT_PREFIXES,
    Deployer,
    DeploymentError,
    DeploymentResult,
    UploadOptions,
)

__all__ = [
    "SERIAL_PORT_PREFIXES",
    "Deployer",
    "DeploymentError",
    "DeploymentResult",
    "UploadOptions",
]
