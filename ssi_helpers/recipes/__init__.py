from .cleanup import delete_connections, delete_all_connections, delete_all_credentials

__all__ = [
    "delete_connections", "delete_all_connections", "delete_all_credentials"
]
