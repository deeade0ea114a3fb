from .client import GPodderAuthClient, GPodderDefaultAuthClient
from .models import GPodderUserCredentials

__all__ = [
    "GPodderAuthClient",
    "GPodderDefaultAuthClient",
    "GPodderUserCredentials",
]
