"""
Device Log Service
HTTP endpoint that appends device registration records to a flat log file
"""

from .config import ServiceConfig
from .errors import InvalidPayloadError, LogStoreError
from .main import create_app
from .models import DeviceRecord
from .server import BackgroundServer, ServerStartError
from .store import LogStore

__all__ = [
    'ServiceConfig', 'InvalidPayloadError', 'LogStoreError', 'create_app',
    'DeviceRecord', 'BackgroundServer', 'ServerStartError', 'LogStore',
]
