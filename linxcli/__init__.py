from .client import AsyncLinxClient, LinxClient, UploadResult
from .keystore import DeleteKeyStore

__version__ = "1.0.0"
VERSION = tuple(map(int, __version__.split(".")))


__all__ = (
    "VERSION",
    "LinxClient",
    "AsyncLinxClient",
    "UploadResult",
    "DeleteKeyStore",
)
