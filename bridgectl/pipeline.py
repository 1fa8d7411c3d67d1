# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""End-to-end run: detect, install, reconcile, restart, verify, validate.

Control flow is strictly linear. Each step returns a StepResult; the first
failed step moves the run to ABORTED and nothing after it runs. There is no
automatic rollback: the daemon.json backup is left for a manual restore.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from bridgectl.daemon_config import ReconcileResult, reconcile
from bridgectl.installer import Installer
from bridgectl.models.settings import SettingsModel
from bridgectl.network import NetworkValidator, ValidationResult
from bridgectl.runtime import Detection, RuntimeProfile, detect_runtime
from bridgectl.service import ServiceController
from bridgectl.utils.exceptions import BridgectlError, InstallError, PrivilegeError
from bridgectl.utils.logging import get_logger

logger = get_logger(__name__)


class Stage(Enum):
    """Where a run is. Stages only move forward; ABORTED is terminal."""

    NOT_STARTED = "not-started"
    INSTALLED = "installed"
    CONFIG_WRITTEN = "config-written"
    RESTARTING = "restarting"
    VERIFIED = "verified"
    VALIDATED = "validated"
    DONE = "done"
    ABORTED = "aborted"


@dataclass(frozen=True)
class StepResult:
    """Tagged outcome of one pipeline step."""

    stage: Stage
    ok: bool
    error: Optional[BridgectlError] = None


@dataclass
class PipelineResult:
    """Final state of a run."""

    stage: Stage = Stage.NOT_STARTED
    steps: List[StepResult] = field(default_factory=list)
    detection: Optional[Detection] = None
    reconcile: Optional[ReconcileResult] = None
    validation: Optional[ValidationResult] = None
    error: Optional[BridgectlError] = None

    @property
    def ok(self) -> bool:
        return self.stage is Stage.DONE

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


def require_root(geteuid: Callable[[], int] = os.geteuid) -> None:
    """Raise PrivilegeError unless running as root."""
    if geteuid() != 0:
        raise PrivilegeError(
            "This command must be run as root.",
            hint="Re-run with sudo",
        )


class Pipeline:
    """Runs the full reconfiguration for one set of settings.

    Collaborators are injectable so the flow can be exercised without
    touching the host.
    """

    def __init__(
        self,
        settings: SettingsModel,
        detector: Callable[..., Detection] = detect_runtime,
        installer: Optional[Installer] = None,
        service: Optional[ServiceController] = None,
        validator: Optional[NetworkValidator] = None,
        reconciler: Callable[..., ReconcileResult] = reconcile,
        geteuid: Callable[[], int] = os.geteuid,
        skip_validation: bool = False,
    ):
        self.settings = settings
        self.detector = detector
        self.installer = installer or Installer()
        self.service = service or ServiceController()
        self._validator = validator
        self.reconciler = reconciler
        self.geteuid = geteuid
        self.skip_validation = skip_validation
        self.result = PipelineResult()

    @property
    def validator(self) -> NetworkValidator:
        if self._validator is None:
            self._validator = NetworkValidator(self.settings.validation)
        return self._validator

    def _step(self, stage: Stage, fn: Callable[[], None]) -> StepResult:
        """Run fn; on success advance to stage, on failure abort."""
        try:
            fn()
        except BridgectlError as e:
            step = StepResult(stage=stage, ok=False, error=e)
            self.result.steps.append(step)
            self.result.stage = Stage.ABORTED
            self.result.error = e
            logger.error(f"{stage.value}: {e}", console_output=False)
            return step

        step = StepResult(stage=stage, ok=True)
        self.result.steps.append(step)
        self.result.stage = stage
        return step

    # ========== Steps ==========

    def _detect_and_install(self) -> None:
        require_root(self.geteuid)
        detection = self.detector(self.settings.install.default_kind)
        if not detection.installed:
            self.installer.install(detection.profile)
            detection = self.detector(self.settings.install.default_kind)
            if not detection.installed:
                raise InstallError(
                    "Docker still not detected after installation",
                    hint="Check that docker or snap is on PATH",
                )
        self.result.detection = detection

    @property
    def profile(self) -> RuntimeProfile:
        return self.result.detection.profile

    def _write_config(self) -> None:
        target = self.settings.network
        self.result.reconcile = self.reconciler(
            self.profile.config_path, target.bip, target.subnet, target.pool_size
        )

    def _restart(self) -> None:
        self.validator.prune_networks()
        self.service.restart(self.profile)

    def _verify(self) -> None:
        svc = self.settings.service
        self.service.wait_until_active(
            self.profile,
            timeout=svc.timeout,
            interval=svc.interval,
            backoff=svc.backoff,
            max_interval=svc.max_interval,
        )

    def _validate(self) -> None:
        target = self.settings.network
        self.validator.check_bridge_network(target.gateway)
        self.result.validation = self.validator.check(target.bip)
        self.validator.ensure_bridge_up()

    # ========== Orchestration ==========

    def run(self) -> PipelineResult:
        """Run every step in order, stopping at the first failure."""
        steps: List[tuple] = [
            (Stage.INSTALLED, self._detect_and_install),
            (Stage.CONFIG_WRITTEN, self._write_config),
            (Stage.RESTARTING, self._restart),
            (Stage.VERIFIED, self._verify),
        ]
        if not self.skip_validation:
            steps.append((Stage.VALIDATED, self._validate))

        for stage, fn in steps:
            step = self._step(stage, fn)
            if not step.ok:
                return self.result

        self.result.stage = Stage.DONE
        return self.result
