# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gpinstall/topology/probe.py

from __future__ import annotations

import logging
import socket
from typing import Protocol

log = logging.getLogger("gpinstall")


class Prober(Protocol):
    def probe(self, host: str) -> bool: ...


class TcpProber:
    """
    Connect-style reachability check: a host is reachable when a TCP
    connection to ``host:port`` is established within ``timeout`` seconds.
    No data is exchanged.
    """

    def __init__(self, port: int = 22, timeout: float = 5.0):
        self.port = port
        self.timeout = timeout

    def probe(self, host: str) -> bool:
        try:
            with socket.create_connection((host, self.port), timeout=self.timeout):
                return True
        except OSError as e:
            log.debug("Host %s:%d is not reachable: %s", host, self.port, e)
            return False
