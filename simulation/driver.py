"""
Simulation driver: posts synthetic device records to the Log Service one at a time
"""

import json
import logging
from dataclasses import dataclass, field
from typing import List, Sequence

import httpx

from log_service.models import DeviceRecord
from .network import DEFAULT_NETWORKS, NetworkConfig, build_devices

LOG = logging.getLogger("devlog.simulation")
LOG.setLevel(logging.INFO)
if not LOG.handlers:
    _sh = logging.StreamHandler()
    _sh.setFormatter(logging.Formatter("%(asctime)s - SIMULATION - %(message)s"))
    LOG.addHandler(_sh)


@dataclass
class SimulationResult:
    """Outcome of one simulation run"""

    sent: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.sent) + len(self.failed)


def send_record(client: httpx.Client, url: str, record: DeviceRecord) -> bool:
    """POST one record. Failures are reported on the console and never raised."""
    try:
        body = json.dumps(record.model_dump())
    except (TypeError, ValueError) as e:
        LOG.error(f"❌ JSON marshaling failed for {record.DeviceName}: {e}")
        return False

    try:
        r = client.post(url, content=body, headers={"Content-Type": "application/json"})
    except httpx.HTTPError as e:
        LOG.error(f"❌ POST failed for {record.DeviceName}: {e!r}")
        return False

    if r.status_code == httpx.codes.OK:
        print(f"[OK] Sent {record.DeviceName} ({record.IPAddress}): server replied: {r.text}")
        return True

    print(f"[FAIL] Sent {record.DeviceName} ({record.IPAddress}): server returned {r.status_code}")
    return False


def run_simulation(
    client: httpx.Client,
    url: str,
    networks: Sequence[NetworkConfig] = DEFAULT_NETWORKS,
) -> SimulationResult:
    """Post every simulated device sequentially; no retries, no early exit."""
    result = SimulationResult()
    print("Starting network simulation...")
    for record in build_devices(networks):
        if send_record(client, url, record):
            result.sent.append(record.DeviceName)
        else:
            result.failed.append(record.DeviceName)
    print(f"Simulation finished: {len(result.sent)} sent, {len(result.failed)} failed.")
    return result
