"""Tests for ProfileLifecycleManager against an in-memory container runtime."""

import threading

import pytest

from statkit.application.use_cases.profile_lifecycle import ProfileLifecycleManager
from statkit.config import DockerConfig
from statkit.domain.exceptions import (
    ContainerRuntimeError,
    ImagePullFailedError,
    ImageStartFailedError,
    MissingImageError,
    ProfileNotFoundError,
)
from statkit.domain.value_objects import ProfileStatus, RemovalOutcome


@pytest.fixture()
def manager(runtime, registry):
    return ProfileLifecycleManager(runtime, registry)


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------


class TestGetAllStatuses:
    """Status of every declared profile."""

    def test_no_containers_means_not_found(self, manager):
        statuses = manager.get_all_statuses()

        assert statuses == {
            "default": ProfileStatus.NOT_FOUND,
            "exposome": ProfileStatus.NOT_FOUND,
            "draft": ProfileStatus.NOT_FOUND,
        }

    def test_maps_runtime_states(self, manager, runtime):
        runtime.containers["default"] = "running"
        runtime.containers["exposome"] = "exited"

        statuses = manager.get_all_statuses()

        assert statuses["default"] == ProfileStatus.RUNNING
        assert statuses["exposome"] == ProfileStatus.STOPPED
        assert statuses["draft"] == ProfileStatus.NOT_FOUND

    def test_matches_names_exactly(self, manager, runtime):
        """Containers whose names only contain a profile name are ignored."""
        runtime.containers["default-backup"] = "running"

        statuses = manager.get_all_statuses()

        assert statuses["default"] == ProfileStatus.NOT_FOUND
        assert "default-backup" not in statuses

    def test_runtime_offline_degrades_every_status(self, manager, runtime):
        runtime.containers["default"] = "running"
        runtime.offline = True

        statuses = manager.get_all_statuses()

        assert set(statuses.values()) == {ProfileStatus.DOCKER_OFFLINE}
        assert len(statuses) == 3

    def test_other_runtime_errors_propagate(self, manager, runtime, monkeypatch):
        def fail(names):
            raise ContainerRuntimeError("500 Server Error")

        monkeypatch.setattr(runtime, "list_containers", fail)

        with pytest.raises(ContainerRuntimeError):
            manager.get_all_statuses()

    def test_empty_registry(self, runtime):
        from statkit.infrastructure.config.profile_registry import InMemoryProfileRegistry

        manager = ProfileLifecycleManager(runtime, InMemoryProfileRegistry([]))

        assert manager.get_all_statuses() == {}
        assert runtime.calls == []


class TestGetStatus:
    """Status of a single profile."""

    def test_undeclared_profile(self, manager):
        with pytest.raises(ProfileNotFoundError):
            manager.get_status("nope")

    def test_missing_container(self, manager):
        assert manager.get_status("default") == ProfileStatus.NOT_FOUND

    def test_running_container(self, manager, runtime):
        runtime.containers["default"] = "running"
        assert manager.get_status("default") == ProfileStatus.RUNNING

    def test_runtime_offline(self, manager, runtime):
        runtime.offline = True
        assert manager.get_status("default") == ProfileStatus.DOCKER_OFFLINE


# ---------------------------------------------------------------------------
# Start / remove
# ---------------------------------------------------------------------------


class TestStart:
    """Pull, clean and launch."""

    def test_start_runs_steps_in_order(self, manager, runtime):
        runtime.containers["default"] = "running"

        manager.start("default")

        steps = [call[0] for call in runtime.calls]
        assert steps == ["pull", "stop", "remove", "run"]
        assert runtime.containers == {"default": "running"}

    def test_container_spec(self, manager, runtime):
        manager.start("exposome")

        spec = runtime.calls[-1][1]
        assert spec.name == "exposome"
        assert spec.image == "datashield/rock-exposome:2.3"
        assert spec.internal_port == 6311
        assert spec.host_port == 6312
        assert spec.environment == {"DEBUG": "FALSE"}

    def test_start_without_existing_container(self, manager, runtime):
        manager.start("default")

        assert manager.get_status("default") == ProfileStatus.RUNNING
        assert runtime.pulled == ["datashield/rock-base:latest"]

    def test_start_always_pulls(self, manager, runtime):
        manager.start("default")
        manager.start("default")

        assert runtime.pulled == ["datashield/rock-base:latest"] * 2

    def test_undeclared_profile(self, manager, runtime):
        with pytest.raises(ProfileNotFoundError):
            manager.start("nope")
        assert runtime.calls == []

    def test_missing_image(self, manager, runtime):
        with pytest.raises(MissingImageError, match="draft"):
            manager.start("draft")
        assert runtime.calls == []

    def test_pull_failure(self, manager, runtime):
        runtime.containers["default"] = "running"
        runtime.pull_error = ContainerRuntimeError("did not complete within 300s")

        with pytest.raises(ImagePullFailedError) as exc_info:
            manager.start("default")

        assert exc_info.value.image == "datashield/rock-base:latest"
        assert isinstance(exc_info.value.__cause__, ContainerRuntimeError)
        # The old container is left alone when the pull fails
        assert runtime.containers == {"default": "running"}

    def test_start_failure_names_image(self, manager, runtime):
        runtime.run_error = ContainerRuntimeError("port is already allocated")

        with pytest.raises(ImageStartFailedError, match="datashield/rock-base:latest"):
            manager.start("default")

    def test_pull_timeout_is_passed_to_runtime(self, runtime, registry, monkeypatch):
        seen = {}

        def pull(image, timeout, cancel_event=None):
            seen["timeout"] = timeout
            seen["cancel_event"] = cancel_event

        monkeypatch.setattr(runtime, "pull_image", pull)
        manager = ProfileLifecycleManager(runtime, registry, DockerConfig(pull_timeout=12.0))
        event = threading.Event()

        manager.start("default", cancel_event=event)

        assert seen == {"timeout": 12.0, "cancel_event": event}

    def test_default_pull_timeout_is_five_minutes(self):
        assert DockerConfig().pull_timeout == 300.0

    def test_concurrent_starts_keep_one_container(self, manager, runtime):
        runtime.pull_delay = 0.01
        errors = []

        def start():
            try:
                manager.start("default")
            except Exception as exc:  # noqa: BLE001 - collected for the assertion
                errors.append(exc)

        threads = [threading.Thread(target=start) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert runtime.containers == {"default": "running"}
        assert runtime.max_live == 1


class TestRemove:
    """Idempotent teardown."""

    def test_start_then_remove_then_status(self, manager):
        manager.start("default")
        manager.remove("default")

        assert manager.get_status("default") == ProfileStatus.NOT_FOUND

    def test_remove_missing_container_does_not_raise(self, manager, runtime):
        manager.remove("default")
        assert ("stop", "default") in runtime.calls

    def test_removal_outcome(self, manager, runtime):
        runtime.containers["default"] = "exited"

        assert manager._remove_container("default") == RemovalOutcome.REMOVED
        assert manager._remove_container("default") == RemovalOutcome.ALREADY_ABSENT

    def test_remove_undeclared_profile(self, manager, runtime):
        with pytest.raises(ProfileNotFoundError):
            manager.remove("nope")

        assert runtime.calls == []
        assert "nope" not in manager._locks
