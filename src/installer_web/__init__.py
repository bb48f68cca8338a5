from installer_web.assets import Asset, AssetResolver, DirectoryAssetResolver, MappingAssetResolver
from installer_web.config import InstallerConfig, ServerConfig, load_installer_config
from installer_web.dialogs import DialogError, FolderPicker, TkFolderPicker
from installer_web.installer import ConfigSerializationError, InstallerFramework
from installer_web.server import BindError, ServerAddress, WebServer

__version__ = "0.1.0"

__all__ = [
    "Asset",
    "AssetResolver",
    "BindError",
    "ConfigSerializationError",
    "DialogError",
    "DirectoryAssetResolver",
    "FolderPicker",
    "InstallerConfig",
    "InstallerFramework",
    "MappingAssetResolver",
    "ServerAddress",
    "ServerConfig",
    "TkFolderPicker",
    "WebServer",
    "__version__",
    "load_installer_config",
]
