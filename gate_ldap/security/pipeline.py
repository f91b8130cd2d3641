"""
Authentication Pipeline - Ordered chain of named request stages.

Stages run in list order. Each stage either answers the request or passes
it on. AuthenticationRequired raised anywhere in the chain (or by the
endpoint) is handed to the entry point, so every unauthenticated access
goes through the same redirect decision.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, FrozenSet, Iterable, List, Optional, Tuple

from gate_ldap.errors import AuthenticationRequired, ConfigurationError
from gate_ldap.security.http import GatewayRequest, GatewayResponse


logger = logging.getLogger(__name__)

Handler = Callable[[GatewayRequest], GatewayResponse]


class Stage(ABC):
    """A named pipeline stage."""

    name: str = "stage"

    @abstractmethod
    def __call__(self, request: GatewayRequest, next_handler: Handler) -> GatewayResponse:
        pass

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class AuthenticationPipeline:
    """
    Ordered authentication stages plus an entry point.

    After lock_core() the stages present at that moment are core stages:
    they cannot be removed and the entry point cannot be replaced. New
    stages may still be added anywhere.
    """

    def __init__(self):
        self._stages: List[Stage] = []
        self._ignored: List[str] = []
        self._entry_point = None
        self._core: FrozenSet[str] = frozenset()
        self._locked = False

    @property
    def stage_names(self) -> Tuple[str, ...]:
        return tuple(stage.name for stage in self._stages)

    @property
    def core_stage_names(self) -> FrozenSet[str]:
        return self._core

    @property
    def entry_point(self):
        return self._entry_point

    @property
    def locked(self) -> bool:
        return self._locked

    def get_stage(self, name: str) -> Optional[Stage]:
        for stage in self._stages:
            if stage.name == name:
                return stage
        return None

    def add_stage(self, stage: Stage) -> "AuthenticationPipeline":
        """Append a stage at the end of the chain."""
        self._check_unique(stage)
        self._stages.append(stage)
        return self

    def add_before(self, stage: Stage, anchor: str) -> "AuthenticationPipeline":
        """Insert a stage immediately before the named anchor stage."""
        self._check_unique(stage)
        self._stages.insert(self._index_of(anchor), stage)
        return self

    def add_after(self, stage: Stage, anchor: str) -> "AuthenticationPipeline":
        """Insert a stage immediately after the named anchor stage."""
        self._check_unique(stage)
        self._stages.insert(self._index_of(anchor) + 1, stage)
        return self

    def remove_stage(self, name: str) -> Stage:
        """
        Remove a non-core stage.

        Raises:
            ConfigurationError: If the stage is a locked core stage or unknown
        """
        if name in self._core:
            raise ConfigurationError(f"Core stage {name!r} cannot be removed")
        stage = self._stages.pop(self._index_of(name))
        return stage

    def ignore(self, *path_prefixes: str) -> "AuthenticationPipeline":
        """Let requests under these path prefixes bypass every stage."""
        self._ignored.extend(path_prefixes)
        return self

    def is_ignored(self, path: str) -> bool:
        return any(path == p or path.startswith(p.rstrip("/") + "/") for p in self._ignored)

    def set_entry_point(self, entry_point) -> "AuthenticationPipeline":
        """
        Register the handler for unauthenticated access.

        The entry point must provide commence(request, error) -> GatewayResponse.
        """
        if self._locked:
            raise ConfigurationError("The entry point cannot be replaced once core stages are locked")
        self._entry_point = entry_point
        return self

    def lock_core(self) -> "AuthenticationPipeline":
        """Freeze the current stages as core stages."""
        self._core = frozenset(self.stage_names)
        self._locked = True
        return self

    def handle(self, request: GatewayRequest, endpoint: Handler) -> GatewayResponse:
        """
        Run the request through the chain and then the endpoint.

        Args:
            request: Inbound request
            endpoint: Protected resource handler

        Returns:
            Response from a stage, the endpoint, or the entry point
        """
        if self.is_ignored(request.path):
            return endpoint(request)

        stages = tuple(self._stages)

        def dispatch(index: int, req: GatewayRequest) -> GatewayResponse:
            if index == len(stages):
                return endpoint(req)
            return stages[index](req, lambda r: dispatch(index + 1, r))

        try:
            return dispatch(0, request)
        except AuthenticationRequired as exc:
            if self._entry_point is None:
                raise
            logger.debug("Unauthenticated %s %s, redirecting to login", request.method, request.path)
            return self._entry_point.commence(request, exc)

    def _index_of(self, name: str) -> int:
        for index, stage in enumerate(self._stages):
            if stage.name == name:
                return index
        raise ConfigurationError(f"No stage named {name!r} in pipeline {list(self.stage_names)}")

    def _check_unique(self, stage: Stage):
        if stage.name in self.stage_names:
            raise ConfigurationError(f"Stage {stage.name!r} is already in the pipeline")


def first_present(pipeline: AuthenticationPipeline, names: Iterable[str]) -> Optional[str]:
    """The earliest stage in pipeline order whose name is in names."""
    wanted = set(names)
    for name in pipeline.stage_names:
        if name in wanted:
            return name
    return None
