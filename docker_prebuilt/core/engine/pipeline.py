"""
Install pipeline — the ordered, fail-fast install state machine.

    CHECKING_HOST → CHECKING_REQUIREMENTS → CHECKING_EXISTING → FETCHING
    → EXTRACTING → INSTALLING_BINARY → RECONCILING_SERVICE
    → PROVISIONING_USER → DONE

Any ``InstallError`` moves the run to the absorbing FAILED state and the
remaining stages are skipped. Nothing already applied is rolled back.
If CHECKING_EXISTING finds the requested version already installed,
the run ends in DONE immediately.

Each step takes the current ``PipelineState`` and returns the next one;
steps never talk to each other directly.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path

from docker_prebuilt.adapters.privileged import PrivilegedExecutor
from docker_prebuilt.core.detection import existing, host, requirements
from docker_prebuilt.core.detection.requirements import Runner
from docker_prebuilt.core.errors import InstallError
from docker_prebuilt.core.models.host import HostProfile
from docker_prebuilt.core.models.target import InstallConfig, InstallTarget
from docker_prebuilt.core.services import binaries, service, users
from docker_prebuilt.core.services.extract import install_archive
from docker_prebuilt.core.services.fetch import Transport, download_file, fetch
from docker_prebuilt.data import UNIT_DIR

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    CHECKING_HOST = "checking_host"
    CHECKING_REQUIREMENTS = "checking_requirements"
    CHECKING_EXISTING = "checking_existing"
    FETCHING = "fetching"
    EXTRACTING = "extracting"
    INSTALLING_BINARY = "installing_binary"
    RECONCILING_SERVICE = "reconciling_service"
    PROVISIONING_USER = "provisioning_user"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class PipelineState:
    """Values accumulated by the steps of one run."""

    host: HostProfile
    target: InstallTarget
    username: str | None = None
    requirements: dict[str, str | None] = field(default_factory=dict)
    existing_version: str | None = None
    archive_path: Path | None = None
    binary_dir: Path | None = None
    installed: tuple[str, ...] = ()
    service_registered: bool = False
    already_installed: bool = False


@dataclass
class PipelineReport:
    """Terminal outcome of a run."""

    stage: Stage
    state: PipelineState
    completed: list[Stage] = field(default_factory=list)
    failed_stage: Stage | None = None
    error: InstallError | None = None
    short_circuited: bool = False

    @property
    def ok(self) -> bool:
        return self.stage == Stage.DONE

    @property
    def exit_code(self) -> int:
        if self.ok:
            return 0
        return self.error.exit_code if self.error else 2

    @property
    def message(self) -> str:
        name = self.state.target.name
        version = self.state.target.version
        if self.short_circuited:
            return f"{name} {version} is already installed"
        if self.ok:
            return f"successfully installed {name} {version}"
        return f"could not install {name}: {self.error}"

    def to_dict(self) -> dict:
        return {
            "stage": self.stage.value,
            "exit_code": self.exit_code,
            "completed": [s.value for s in self.completed],
            "failed_stage": self.failed_stage.value if self.failed_stage else None,
            "error": str(self.error) if self.error else None,
            "short_circuited": self.short_circuited,
            "message": self.message,
        }


Step = Callable[[PipelineState], PipelineState]


class InstallPipeline:
    """Sequences the install steps for one host and one target.

    Collaborators are injected so tests can run the whole pipeline
    without a network, root, or real host tools:

        executor:  privileged command runner (one credential session)
        run:       ``subprocess.run``-compatible probe runner
        transport: archive download function
    """

    def __init__(
        self,
        config: InstallConfig,
        executor: PrivilegedExecutor,
        *,
        run: Runner = subprocess.run,
        transport: Transport = download_file,
        unit_dir: Path | None = None,
    ) -> None:
        self.config = config
        self.executor = executor
        self._run = run
        self._transport = transport
        self._unit_dir = unit_dir or UNIT_DIR

    def steps(self) -> list[tuple[Stage, Step]]:
        return [
            (Stage.CHECKING_HOST, self.check_host),
            (Stage.CHECKING_REQUIREMENTS, self.check_requirements),
            (Stage.CHECKING_EXISTING, self.check_existing),
            (Stage.FETCHING, self.fetch_archive),
            (Stage.EXTRACTING, self.extract_archive),
            (Stage.INSTALLING_BINARY, self.install_binary),
            (Stage.RECONCILING_SERVICE, self.reconcile_service),
            (Stage.PROVISIONING_USER, self.provision_user),
        ]

    def initial_state(self, profile: HostProfile, username: str | None = None) -> PipelineState:
        return PipelineState(host=profile, target=self.config.target, username=username)

    def run(self, state: PipelineState) -> PipelineReport:
        """Run every stage in order until DONE or FAILED."""
        completed: list[Stage] = []

        for stage, step in self.steps():
            logger.debug("→ %s", stage.value)
            try:
                state = step(state)
            except InstallError as e:
                e.step = e.step or stage.value
                logger.debug("%s failed: %s", stage.value, e)
                return PipelineReport(
                    stage=Stage.FAILED,
                    state=state,
                    completed=completed,
                    failed_stage=stage,
                    error=e,
                )
            completed.append(stage)

            if state.already_installed:
                logger.info("current %s version matches requested installation version", state.target.name)
                return PipelineReport(
                    stage=Stage.DONE,
                    state=state,
                    completed=completed,
                    short_circuited=True,
                )

        return PipelineReport(stage=Stage.DONE, state=state, completed=completed)

    # ── Steps ───────────────────────────────────────────────────

    def check_host(self, state: PipelineState) -> PipelineState:
        host.check_host(state.host, self.config.host)
        return state

    def check_requirements(self, state: PipelineState) -> PipelineState:
        found = requirements.check_requirements(self.config.requirements, run=self._run)
        logger.debug("all requirements met, installing %s %s", state.target.name, state.target.version)
        return replace(state, requirements=found)

    def check_existing(self, state: PipelineState) -> PipelineState:
        version = existing.detect_installed_version(state.target, state.host.platform, run=self._run)
        return replace(
            state,
            existing_version=version,
            already_installed=version == state.target.version,
        )

    def fetch_archive(self, state: PipelineState) -> PipelineState:
        archive = fetch(state.target, state.host, transport=self._transport)
        return replace(state, archive_path=archive)

    def extract_archive(self, state: PipelineState) -> PipelineState:
        assert state.archive_path is not None
        binary_dir = install_archive(
            state.archive_path,
            state.target.install_root,
            state.target.extract_path(state.host.platform),
        )
        return replace(state, binary_dir=binary_dir)

    def install_binary(self, state: PipelineState) -> PipelineState:
        assert state.binary_dir is not None
        names = binaries.install_binaries(
            state.binary_dir,
            state.target.bin_dir(state.host.platform),
            self.executor,
        )
        return replace(state, installed=tuple(names))

    def reconcile_service(self, state: PipelineState) -> PipelineState:
        registered = service.reconcile(state.target, self.executor, self._unit_dir)
        return replace(state, service_registered=registered)

    def provision_user(self, state: PipelineState) -> PipelineState:
        username = state.username or users.current_username()
        users.provision(username, state.target.group, self.executor)
        return replace(state, username=username)
