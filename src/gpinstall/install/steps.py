# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gpinstall/install/steps.py

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Sequence

import paramiko

from gpinstall.config.models import GREENPLUM_LINK, InstallConfig
from gpinstall.errors import ConfigurationError, StepFailure
from gpinstall.observers.dispatcher import EventBus
from gpinstall.observers.events import (
    SeedHostFileReady,
    StepFailed,
    StepStarted,
    StepSucceeded,
    new_ctx,
    stamp,
)
from gpinstall.topology.hostfile import ensure_seed_host_file
from gpinstall.topology.models import InstallationTopology
from gpinstall.topology.persister import WorkingSetPersister
from gpinstall.topology.probe import Prober
from gpinstall.topology.validator import TopologyValidator
from gpinstall.utils.execution import ExecutionContext
from gpinstall.utils.shell import run_logged
from gpinstall.utils.ssh_runner import SSHRunner, open_ssh

log = logging.getLogger("gpinstall")

CommandRunner = Callable[..., None]
SSHOpener = Callable[..., SSHRunner]


class HostSetup:
    """
    Runs the host part of an installation:

      1. seed host file      (generated from the hosts table when missing)
      2. topology            (probe, classify, validate)
      3. working host files  (validated hosts / segment hosts)
      4. gpssh-exkeys        (keyless access, all validated hosts)
      5. gpseginstall        (multi mode only)
      6. binary symlinks     (multi mode only, on every segment host)

    Any failure raises an ``InstallError`` subclass and nothing after it runs.
    """

    def __init__(
        self,
        config: InstallConfig,
        *,
        ctx: ExecutionContext = ExecutionContext(),
        prober: Optional[Prober] = None,
        bus: Optional[EventBus] = None,
        run_id: Optional[str] = None,
        command_runner: Optional[CommandRunner] = None,
        ssh_opener: Optional[SSHOpener] = None,
    ):
        self.config = config
        self.ctx = ctx
        self.prober = prober
        self.bus = bus or EventBus()
        self.event_ctx = new_ctx(master=config.master_hostname, run_id=run_id)
        self.command_runner = command_runner or run_logged
        self.ssh_opener = ssh_opener or open_ssh

    # ------------------ topology ------------------

    def discover(self) -> InstallationTopology:
        """Provision, validate and persist the host sets."""
        cfg = self.config
        generated = ensure_seed_host_file(cfg.seed_host_file, cfg.hosts_table)
        self.bus.emit(SeedHostFileReady(path=str(cfg.seed_host_file), generated=generated, **stamp(self.event_ctx)))

        topo = TopologyValidator(cfg, self.prober, bus=self.bus, run_ctx=self.event_ctx).validate()
        WorkingSetPersister(bus=self.bus, run_ctx=self.event_ctx).persist(topo)
        return topo

    # ------------------ downstream steps ------------------

    def _gp_bin(self, name: str) -> str:
        if self.config.gphome is None:
            raise ConfigurationError(f"GPHOME is not set, cannot locate {name}")
        return str(self.config.gphome / "bin" / name)

    def _link_target(self) -> str:
        target = self.config.install_location
        if target is None:
            raise ConfigurationError("No product version configured, cannot create the binary symlink")
        return str(target)

    def check_prerequisites(self, topo: InstallationTopology) -> None:
        """Fail before any command runs if a later step could not."""
        self._gp_bin("gpssh-exkeys")
        if topo.is_multi:
            self._link_target()

    def _step(self, name: str, fn: Callable[[], None]) -> None:
        self.bus.emit(StepStarted(step=name, **stamp(self.event_ctx)))
        start = time.time()
        try:
            fn()
        except Exception as exc:
            self.bus.emit(StepFailed(step=name, error=str(exc), **stamp(self.event_ctx)))
            raise
        self.bus.emit(StepSucceeded(step=name, duration_sec=round(time.time() - start, 2), **stamp(self.event_ctx)))

    def exchange_keys(self, topo: InstallationTopology) -> None:
        log.info("Running gpssh-exkeys to enable keyless access on this server")
        cmd = [self._gp_bin("gpssh-exkeys"), "-f", str(topo.working_host_file)]
        self._step("gpssh-exkeys", lambda: self.command_runner(cmd, label="gpssh-exkeys", ctx=self.ctx))

    def install_segments(self, topo: InstallationTopology) -> None:
        log.info("Running gpseginstall to install the software on all the segment hosts")
        cmd = [self._gp_bin("gpseginstall"), "-f", str(topo.segment_host_file)]
        self._step("gpseginstall", lambda: self.command_runner(cmd, label="gpseginstall", ctx=self.ctx))

    def link_binaries(self, topo: InstallationTopology) -> None:
        target = self._link_target()
        hosts = list(topo.segment_hosts)
        log.debug("Creating the softlink for the binaries on %d host(s)", len(hosts))
        self._step("symlink", lambda: self._link_hosts(hosts, target))

    def _link_hosts(self, hosts: Sequence[str], target: str) -> None:
        commands = [f"rm -rf {GREENPLUM_LINK}", f"ln -s {target} {GREENPLUM_LINK}"]
        for host in hosts:
            if self.ctx.dry_run:
                for c in commands:
                    log.info("[symlink] (%s) dry-run: %s", host, c)
                continue
            try:
                ssh = self.ssh_opener(
                    host,
                    port=self.config.ssh_port,
                    username=self.config.ssh_username,
                    key_path=self.config.ssh_key,
                )
            except (paramiko.SSHException, OSError) as e:
                raise StepFailure(f"[symlink] cannot connect to {host}: {e}") from e
            try:
                for c in commands:
                    log.debug("[symlink] (%s) $ %s", host, c)
                    try:
                        rc, _, err = ssh.run(c)
                    except (paramiko.SSHException, OSError) as e:
                        raise StepFailure(f"[symlink] '{c}' failed on {host}: {e}") from e
                    if rc != 0:
                        raise StepFailure(f"[symlink] '{c}' failed on {host} (rc={rc}): {err.strip()}")
            finally:
                ssh.close()
            log.info("[symlink] %s -> %s on %s", GREENPLUM_LINK, target, host)

    # ------------------ public API ------------------

    def run(self) -> InstallationTopology:
        topo = self.discover()
        self.check_prerequisites(topo)
        self.exchange_keys(topo)
        if topo.is_multi:
            self.install_segments(topo)
            self.link_binaries(topo)
        return topo
