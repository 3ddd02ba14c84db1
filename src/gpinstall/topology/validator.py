# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gpinstall/topology/validator.py

from __future__ import annotations

import logging
from typing import Optional

from gpinstall.config.models import InstallConfig
from gpinstall.errors import TopologyFailure
from gpinstall.observers.dispatcher import EventBus
from gpinstall.observers.events import HostProbed, TopologyClassified, TopologyRejected, new_ctx, stamp

from .hostfile import read_host_lines
from .models import InstallationTopology, TopologyMode
from .probe import Prober, TcpProber

log = logging.getLogger("gpinstall")


class TopologyValidator:
    """
    Turns the seed host file into a classified ``InstallationTopology``.

    Every candidate is probed once, sequentially, in file order. The
    reachable set then decides between single and multi mode:

      - nothing reachable                      -> TopologyFailure
      - exactly the master reachable           -> single
      - exactly one host, but not the master   -> TopologyFailure
      - anything else                          -> multi, which needs a
                                                  positive even number of
                                                  segment hosts
    """

    def __init__(
        self,
        config: InstallConfig,
        prober: Optional[Prober] = None,
        bus: Optional[EventBus] = None,
        run_ctx: Optional[dict] = None,
    ):
        self.config = config
        self.prober = prober or TcpProber(port=config.ssh_port, timeout=config.probe_timeout)
        self.bus = bus or EventBus()
        self.ctx = run_ctx or new_ctx(master=config.master_hostname)

    def validate(self) -> InstallationTopology:
        cfg = self.config
        topo = InstallationTopology(
            seed_host_file=cfg.seed_host_file,
            master_hostname=cfg.master_hostname,
            working_host_file=cfg.working_host_file,
            segment_host_file=cfg.segment_host_file,
        )

        log.info("Setting up & checking if the hosts are reachable")
        for host in read_host_lines(cfg.seed_host_file):
            reachable = self.prober.probe(host)
            self.bus.emit(HostProbed(host=host, port=cfg.ssh_port, reachable=reachable, **stamp(self.ctx)))
            if not reachable:
                log.warning("The host %s is not reachable on port %d", host, cfg.ssh_port)
                continue
            log.debug("The host %s is reachable", host)
            topo.validated_hosts.append(host)
            if host != cfg.master_hostname:
                topo.segment_hosts.append(host)

        log.debug("Total hosts reachable: %d", len(topo.validated_hosts))
        try:
            topo.mode = self._classify(topo)
        except TopologyFailure as e:
            self.bus.emit(TopologyRejected(reason=e.reason, error=str(e), **stamp(self.ctx)))
            raise

        log.info(
            "Topology is %s: %d host(s), %d segment host(s)",
            topo.mode.value, len(topo.validated_hosts), len(topo.segment_hosts),
        )
        self.bus.emit(
            TopologyClassified(
                mode=topo.mode.value,
                validated_hosts=list(topo.validated_hosts),
                segment_hosts=list(topo.segment_hosts),
                **stamp(self.ctx),
            )
        )
        return topo

    def _classify(self, topo: InstallationTopology) -> TopologyMode:
        hosts = topo.validated_hosts
        master = topo.master_hostname
        seed = topo.seed_host_file

        if not hosts:
            raise TopologyFailure(
                TopologyFailure.NO_REACHABLE_HOSTS,
                f"No hosts are reachable from the hostfile {seed}, check the hosts",
            )
        if len(hosts) == 1:
            if hosts[0] == master:
                return TopologyMode.SINGLE
            raise TopologyFailure(
                TopologyFailure.MASTER_UNREACHABLE,
                f"Master host {master} is not reachable from the hostfile {seed}, check the hosts",
            )

        if master not in hosts:
            if self.config.strict_master_check:
                raise TopologyFailure(
                    TopologyFailure.MASTER_UNREACHABLE,
                    f"Master host {master} is not reachable from the hostfile {seed}, check the hosts",
                )
            log.warning("Master host %s is not among the reachable hosts", master)

        if len(topo.segment_hosts) % 2 == 1:
            raise TopologyFailure(
                TopologyFailure.ODD_SEGMENT_COUNT,
                f"There is an odd number of segment hosts ({len(topo.segment_hosts)}), "
                "installation cannot continue",
            )
        if not topo.segment_hosts:
            raise TopologyFailure(
                TopologyFailure.NO_SEGMENT_HOSTS,
                "No segment host found, cannot continue",
            )
        return TopologyMode.MULTI
