"""
Network Simulation
Generates synthetic device records and posts them to the Log Service
"""

from .config import SimulationConfig
from .driver import SimulationResult, run_simulation, send_record
from .network import DEFAULT_NETWORKS, NetworkConfig, build_devices

__all__ = [
    'SimulationConfig', 'SimulationResult', 'run_simulation', 'send_record',
    'DEFAULT_NETWORKS', 'NetworkConfig', 'build_devices',
]
