"""
Client package for the bot registry.

Contains the HTTP client base and the remote registry facade.
"""

from .base_client import BaseHTTPClient
from .registry_client import RemoteRegistryClient

__all__ = [
    "BaseHTTPClient",
    "RemoteRegistryClient",
]
