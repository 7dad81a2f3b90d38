from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Paths:
    ini_default: str = "InstallCMX.ini"
    log_default: str = "InstallCMX.log"


PATHS = Paths()
