from .cloud import CloudAgent
from .transport import http_request


__all__ = ["CloudAgent", "http_request"]
