"""Shared fixtures: in-memory fakes of the StatKit ports."""

import io
import re
import threading
import time

import pytest

from statkit.application.dto import ContainerInfoDTO
from statkit.application.use_cases.sessions import ProfileSessionRegistry
from statkit.domain.entities import ProfileConfig
from statkit.domain.exceptions import (
    ContainerNotFoundError,
    ContainerRuntimeError,
    RServerError,
    RuntimeUnavailableError,
)
from statkit.infrastructure.config.profile_registry import InMemoryProfileRegistry


# ---------------------------------------------------------------------------
# Backend connection fakes
# ---------------------------------------------------------------------------


class FakeResult:
    """RServerResult holding a plain Python value."""

    def __init__(self, value=True, error=False):
        self.value = value
        self.error = error

    def as_logical(self):
        return bool(self.value)

    def as_native(self):
        return self.value

    def is_error(self):
        return self.error


class _RemoteFile(io.BytesIO):
    """Write handle that stores its content in the fake backend on close."""

    def __init__(self, connection, name):
        super().__init__()
        self._connection = connection
        self._name = name

    def close(self):
        if not self.closed:
            self._connection.files[self._name] = self.getvalue()
            self._connection.closed_handles.append(self._name)
        super().close()


_REMOVE_PATTERN = re.compile(r"(?:unlink|file\.remove)\('([^']*)'\)")


class FakeConnection:
    """RConnection keeping files in a dict and recording every command.

    Args:
        results: Maps an exact evaluated command to its outcome. Exceptions
            are raised, None is returned as-is, FakeResult instances are
            returned, any other value is wrapped in a FakeResult.
    """

    def __init__(self, results=None):
        self.results = dict(results or {})
        self.evaluated = []
        self.files = {}
        self.closed_handles = []
        self.closed = False
        self.fail_create = None

    def eval(self, command):
        self.evaluated.append(command)
        if command in self.results:
            outcome = self.results[command]
            if isinstance(outcome, BaseException):
                raise outcome
            if outcome is None or isinstance(outcome, FakeResult):
                return outcome
            return FakeResult(outcome)
        match = _REMOVE_PATTERN.search(command)
        if match:
            self.files.pop(match.group(1), None)
        return FakeResult(True)

    def open_file(self, name):
        if name not in self.files:
            raise RServerError(f"No such file: {name}")
        return io.BytesIO(self.files[name])

    def create_file(self, name):
        if self.fail_create is not None:
            raise self.fail_create
        return _RemoteFile(self, name)

    def close(self):
        self.closed = True


class FakeConnectionFactory:
    """ConnectionFactory handing out FakeConnections and counting them."""

    def __init__(self):
        self.created = []

    def retry_create_connection(self):
        connection = FakeConnection()
        self.created.append(connection)
        return connection


# ---------------------------------------------------------------------------
# Container runtime fake
# ---------------------------------------------------------------------------


class FakeRuntime:
    """ContainerRuntimePort over an in-memory container table.

    ``list_containers`` filters by substring like Docker's name filter.
    """

    def __init__(self):
        self.containers = {}
        self.pulled = []
        self.calls = []
        self.offline = False
        self.pull_error = None
        self.run_error = None
        self.pull_delay = 0.0
        self.max_live = 0
        self._lock = threading.Lock()

    def _check_online(self):
        if self.offline:
            raise RuntimeUnavailableError("Docker is unreachable")

    def list_containers(self, names):
        self.calls.append(("list", tuple(names)))
        self._check_online()
        return [
            ContainerInfoDTO(name=name, state=state)
            for name, state in self.containers.items()
            if any(n in name for n in names)
        ]

    def get_state(self, name):
        self.calls.append(("inspect", name))
        self._check_online()
        if name not in self.containers:
            raise ContainerNotFoundError(f"No such container: {name}")
        return self.containers[name]

    def pull_image(self, image, timeout, cancel_event=None):
        self.calls.append(("pull", image))
        self._check_online()
        if self.pull_delay:
            time.sleep(self.pull_delay)
        if self.pull_error is not None:
            raise self.pull_error
        self.pulled.append(image)

    def stop_container(self, name):
        self.calls.append(("stop", name))
        self._check_online()
        with self._lock:
            if name not in self.containers:
                raise ContainerNotFoundError(f"No such container: {name}")
            self.containers[name] = "exited"

    def remove_container(self, name):
        self.calls.append(("remove", name))
        self._check_online()
        with self._lock:
            if name not in self.containers:
                raise ContainerNotFoundError(f"No such container: {name}")
            del self.containers[name]

    def run_container(self, spec):
        self.calls.append(("run", spec))
        self._check_online()
        if self.run_error is not None:
            raise self.run_error
        with self._lock:
            if spec.name in self.containers:
                raise ContainerRuntimeError(f"Conflict: name '{spec.name}' is in use")
            self.containers[spec.name] = "running"
            live = sum(1 for s in self.containers.values() if s == "running")
            self.max_live = max(self.max_live, live)
        return f"id-{spec.name}"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def fake_result():
    """The FakeResult class, for building scripted outcomes."""
    return FakeResult


@pytest.fixture()
def connection():
    return FakeConnection()


@pytest.fixture()
def make_connection():
    """Build a FakeConnection with scripted results."""
    return FakeConnection


@pytest.fixture()
def connection_factory():
    return FakeConnectionFactory()


@pytest.fixture()
def runtime():
    return FakeRuntime()


@pytest.fixture()
def profiles():
    return [
        ProfileConfig(name="default", image="datashield/rock-base:latest", port=6311),
        ProfileConfig(name="exposome", image="datashield/rock-exposome:2.3", port=6312,
                      whitelist=frozenset({"dsBase", "dsExposome"})),
        ProfileConfig(name="draft", image=None, port=6313),
    ]


@pytest.fixture()
def registry(profiles):
    return InMemoryProfileRegistry(profiles)


@pytest.fixture()
def sessions(registry):
    """Session registry over the sample profiles with fake connections."""
    return ProfileSessionRegistry(registry, lambda profile: FakeConnectionFactory())
