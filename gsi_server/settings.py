from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ListenerSettings:
    port: int
    service_name: str
    # Skip Steam discovery and install straight into this folder.
    cfg_dir: Path | None


def settings_from_env(*, default_port: int = 8090, default_service_name: str = "gsi_server") -> ListenerSettings:
    cfg_dir = os.environ.get("GSI_CFG_DIR")
    return ListenerSettings(
        port=int(os.environ.get("GSI_PORT", default_port)),
        service_name=os.environ.get("GSI_SERVICE_NAME", default_service_name),
        cfg_dir=Path(cfg_dir) if cfg_dir else None,
    )
