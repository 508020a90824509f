# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Docker adapter implementing ContainerRuntimePort with the Docker SDK.

All Docker SDK calls go through :func:`_docker_errors`, which uses
:func:`classify_docker_error` to translate SDK and transport exceptions
into the runtime categories of :mod:`statkit.domain.exceptions`.
"""

from __future__ import annotations

import concurrent.futures
import logging
import threading
import time
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Sequence

import docker
import requests
from docker.errors import DockerException, NotFound

from statkit.application.dto import ContainerInfoDTO, ContainerSpecDTO
from statkit.config import DockerConfig
from statkit.domain.exceptions import (
    ContainerNotFoundError,
    ContainerRuntimeError,
    RuntimeUnavailableError,
)

logger = logging.getLogger(__name__)

# How often a pending pull checks its cancel event
_PULL_POLL_INTERVAL = 0.5


def _is_unreachable(exc: BaseException) -> bool:
    """Whether ``exc`` (or anything in its cause chain) is a transport failure."""
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, (requests.exceptions.ConnectionError, ConnectionError)):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return False


def classify_docker_error(exc: BaseException, action: str) -> Optional[ContainerRuntimeError]:
    """Map a Docker SDK exception onto a runtime error category.

    Args:
        exc: Exception raised by the Docker SDK or its transport.
        action: Short description of the failed call, used in the message.

    Returns:
        The classified error, or None if ``exc`` is not a runtime error
        and should propagate unchanged.
    """
    if _is_unreachable(exc):
        return RuntimeUnavailableError(f"{action}: Docker is unreachable")
    if isinstance(exc, NotFound):
        return ContainerNotFoundError(f"{action}: {exc.explanation or exc}")
    if isinstance(exc, DockerException):
        return ContainerRuntimeError(f"{action}: {exc}")
    return None


@contextmanager
def _docker_errors(action: str) -> Iterator[None]:
    try:
        yield
    except Exception as exc:
        classified = classify_docker_error(exc, action)
        if classified is None:
            raise
        raise classified from exc


def _container_name(container: Any) -> str:
    """Container name without the leading '/' Docker prepends."""
    name = container.attrs.get("Name") or (container.attrs.get("Names") or [""])[0]
    return name[1:] if name.startswith("/") else name


class DockerRuntimeAdapter:
    """ContainerRuntimePort backed by a Docker daemon.

    The Docker client is created on first use, so constructing the adapter
    never fails when the daemon is down.

    Args:
        config: Docker settings (daemon URL, API and stop timeouts).
        client: Pre-built Docker client; mostly useful for tests.
    """

    def __init__(
        self,
        config: Optional[DockerConfig] = None,
        client: Optional[docker.DockerClient] = None,
    ) -> None:
        self._config = config or DockerConfig()
        self._client = client
        self._client_lock = threading.Lock()

    @property
    def client(self) -> docker.DockerClient:
        with self._client_lock:
            if self._client is None:
                timeout = int(self._config.api_timeout)
                with _docker_errors("Connect to Docker"):
                    if self._config.base_url:
                        self._client = docker.DockerClient(
                            base_url=self._config.base_url, timeout=timeout
                        )
                    else:
                        self._client = docker.from_env(timeout=timeout)
                logger.info("Docker client initialized")
            return self._client

    # ------------------------------------------------------------------
    # ContainerRuntimePort interface
    # ------------------------------------------------------------------

    def list_containers(self, names: Sequence[str]) -> List[ContainerInfoDTO]:
        with _docker_errors("List containers"):
            containers = self.client.containers.list(
                all=True,
                filters={"name": list(names)},
                ignore_removed=True,
            )
            return [
                ContainerInfoDTO(name=_container_name(c), state=c.status)
                for c in containers
            ]

    def get_state(self, name: str) -> str:
        with _docker_errors(f"Inspect container '{name}'"):
            return self.client.containers.get(name).status

    def pull_image(
        self,
        image: str,
        timeout: float,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        """Pull ``image`` on a worker thread and wait at most ``timeout`` s.

        When the wait ends early (timeout or cancel) the pull itself keeps
        running in the daemon; only the wait is abandoned.
        """
        client = self.client
        executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="docker-pull"
        )
        future = executor.submit(client.images.pull, image)
        deadline = time.monotonic() + timeout
        try:
            while True:
                if cancel_event is not None and cancel_event.is_set():
                    raise ContainerRuntimeError(f"Pull of '{image}' was interrupted")
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise ContainerRuntimeError(
                        f"Pull of '{image}' did not complete within {timeout:g}s"
                    )
                try:
                    with _docker_errors(f"Pull image '{image}'"):
                        future.result(timeout=min(remaining, _PULL_POLL_INTERVAL))
                except concurrent.futures.TimeoutError:
                    continue
                logger.info("Pulled image '%s'", image)
                return
        finally:
            executor.shutdown(wait=False)

    def stop_container(self, name: str) -> None:
        with _docker_errors(f"Stop container '{name}'"):
            self.client.containers.get(name).stop(timeout=self._config.stop_timeout)

    def remove_container(self, name: str) -> None:
        with _docker_errors(f"Remove container '{name}'"):
            self.client.containers.get(name).remove()

    def run_container(self, spec: ContainerSpecDTO) -> str:
        with _docker_errors(f"Run container '{spec.name}'"):
            container = self.client.containers.run(
                spec.image,
                name=spec.name,
                detach=True,
                ports={f"{spec.internal_port}/tcp": spec.host_port},
                environment=dict(spec.environment),
            )
        logger.info(
            "Container '%s' started (host_port: %d, internal: %d)",
            spec.name,
            spec.host_port,
            spec.internal_port,
        )
        return container.id
