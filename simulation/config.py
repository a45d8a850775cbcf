"""
Configuration for the network simulation driver
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv(dotenv_path=os.getenv("ENV_FILE", ".env"), override=False)


@dataclass
class SimulationConfig:
    """Target endpoint and client settings"""

    server_url: str = "http://localhost:8080/"
    request_timeout_s: float = 5.0

    @classmethod
    def from_env(cls) -> 'SimulationConfig':
        """Create config from environment variables"""
        return cls(
            server_url=os.getenv('DEVLOG_URL', 'http://localhost:8080/'),
            request_timeout_s=float(os.getenv('DEVLOG_REQUEST_TIMEOUT', '5.0')),
        )
