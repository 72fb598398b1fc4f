"""Configuration modules for godotino."""

from .board_catalog import (
    BOARD_CATALOG,
    BoardCatalogError,
    BoardInfo,
    board_fqbn,
    get_board,
)
from .manifest import (
    MANIFEST_FILENAME,
    BuildSettings,
    Manifest,
    ManifestError,
    find_manifest,
    load_manifest,
)
from .user_config import UserConfig, UserConfigError

__all__ = [
    "BOARD_CATALOG",
    "BoardCatalogError",
    "BoardInfo",
    "board_fqbn",
    "get_board",
    "MANIFEST_FILENAME",
    "BuildSettings",
    "Manifest",
    "ManifestError",
    "find_manifest",
    "load_manifest",
    "UserConfig",
    "UserConfigError",
]
