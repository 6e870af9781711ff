"""FileDrop client: talk to a FileDrop server from Python or the terminal."""

from filedrop.client.api import FileDropClient
from filedrop.client.config import (
    DEFAULT_SERVER_URL,
    ClientConfig,
    JsonFileUrlStore,
    MemoryUrlStore,
    ServerUrlStore,
)
from filedrop.client.errors import FileDropAPIError, FileDropClientError, ServerConnectionError
from filedrop.client.notifications import Notification, NotificationLevel, Notifier
from filedrop.client.tree import TreeView, confirm_delete_message, format_size
from filedrop.client.uploads import UploadItem, UploadQueue, UploadStatus

__all__ = [
    "DEFAULT_SERVER_URL",
    "ClientConfig",
    "FileDropAPIError",
    "FileDropClient",
    "FileDropClientError",
    "JsonFileUrlStore",
    "MemoryUrlStore",
    "Notification",
    "NotificationLevel",
    "Notifier",
    "ServerConnectionError",
    "ServerUrlStore",
    "TreeView",
    "UploadItem",
    "UploadQueue",
    "UploadStatus",
    "confirm_delete_message",
    "format_size",
]
