"""
Configuration for the device Log Service
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load .env (default) or a custom file via ENV_FILE
load_dotenv(dotenv_path=os.getenv("ENV_FILE", ".env"), override=False)


@dataclass
class ServiceConfig:
    """Where the service listens and which file it appends to"""

    host: str = "0.0.0.0"
    port: int = 8080
    log_file: str = "server.log"
    ready_timeout_s: float = 10.0

    @classmethod
    def from_env(cls) -> 'ServiceConfig':
        """Create config from environment variables"""
        return cls(
            host=os.getenv('DEVLOG_HOST', '0.0.0.0'),
            port=int(os.getenv('DEVLOG_PORT', '8080')),
            log_file=os.getenv('DEVLOG_FILE', 'server.log'),
            ready_timeout_s=float(os.getenv('DEVLOG_READY_TIMEOUT', '10')),
        )
