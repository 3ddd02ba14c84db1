# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gpinstall/errors.py
class InstallError(RuntimeError):
    """Base class for every failure that must abort the installation."""


class ConfigurationError(InstallError):
    """Raised when the run configuration is missing or invalid."""


class ProvisioningFailure(InstallError):
    """Raised when the seed host file or the hosts table cannot be read or written."""


class TopologyFailure(InstallError):
    """Raised when the reachable host set violates a topology invariant."""

    NO_REACHABLE_HOSTS = "no-reachable-hosts"
    MASTER_UNREACHABLE = "master-unreachable"
    ODD_SEGMENT_COUNT = "odd-segment-count"
    NO_SEGMENT_HOSTS = "no-segment-hosts"

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason


class PersistenceFailure(InstallError):
    """Raised when a working host file cannot be deleted or written."""


class StepFailure(InstallError):
    """Raised when a downstream installation command fails."""
