"""
Synthetic network layout: which devices live on which subnet
"""

from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple

from log_service.models import DeviceRecord

FIRST_HOST_SUFFIX = 10


@dataclass(frozen=True)
class NetworkConfig:
    """Device mix for one /24 subnet"""

    subnet_prefix: str
    pc: int = 0
    laptop: int = 0
    printer: int = 0

    def device_groups(self) -> List[Tuple[str, int]]:
        # IP suffixes are handed out in this order
        return [("PC", self.pc), ("Laptop", self.laptop), ("Printer", self.printer)]


DEFAULT_NETWORKS: Tuple[NetworkConfig, ...] = (
    NetworkConfig(subnet_prefix="192.168.1", pc=3, laptop=1, printer=1),
    NetworkConfig(subnet_prefix="192.168.2", pc=3, laptop=1, printer=1),
)


def routing_for(suffix: int) -> str:
    return "Dynamic" if suffix % 2 == 0 else "Static"


def build_devices(networks: Sequence[NetworkConfig] = DEFAULT_NETWORKS) -> Iterator[DeviceRecord]:
    """Yield one record per device, subnet by subnet, in a fixed order."""
    for net_number, net in enumerate(networks, start=1):
        suffix = FIRST_HOST_SUFFIX
        for device_type, count in net.device_groups():
            for index in range(1, count + 1):
                yield DeviceRecord(
                    DeviceName=f"{device_type}{index}_{net_number}",
                    DeviceType=device_type,
                    IPAddress=f"{net.subnet_prefix}.{suffix}",
                    RoutingType=routing_for(suffix),
                )
                suffix += 1
