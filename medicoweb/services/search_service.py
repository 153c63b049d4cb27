from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable
from uuid import uuid4

from medicoweb.schemas.search import SearchState
from medicoweb.services.image_service import request_image
from medicoweb.services.monograph_service import request_monograph
from medicoweb.utils.logging import logger


EMPTY_INPUT_MESSAGE = "Please enter a drug name."
MONOGRAPH_FAILURE_MESSAGE = (
    "Failed to generate the drug monograph. Please check the drug name and try again."
)

Requestor = Callable[[str], Awaitable[Any]]


@dataclass(frozen=True)
class Branch:
    name: str
    state_field: str
    blocking: bool
    failure_message: str | None = None


# Both branches run concurrently; only a blocking failure reaches the user.
BRANCHES: tuple[Branch, ...] = (
    Branch("monograph", "monograph", blocking=True, failure_message=MONOGRAPH_FAILURE_MESSAGE),
    Branch("image", "image", blocking=False),
)


def _default_requestors() -> dict[str, Requestor]:
    return {
        "monograph": request_monograph,
        "image": request_image,
    }


class SearchOrchestrator:
    """
    Owns the search state of one browser session.

    Each valid search resets the state, runs every branch in ``BRANCHES``
    concurrently and applies the outcomes only after all of them settled.
    Searches are numbered; outcomes of a search that has since been
    superseded are dropped.
    """

    def __init__(self, requestors: dict[str, Requestor] | None = None) -> None:
        overrides = {name: fn for name, fn in (requestors or {}).items() if fn is not None}
        self._requestors = {**_default_requestors(), **overrides}
        self._generation = 0
        self.state = SearchState()

    @property
    def generation(self) -> int:
        return self._generation

    async def search(self, drug_name: str) -> SearchState:
        name = str(drug_name or "").strip()
        if not name:
            self.state = self.state.model_copy(update={"error": EMPTY_INPUT_MESSAGE})
            return self.state

        self._generation += 1
        generation = self._generation
        self.state = SearchState(
            loading=True,
            has_searched=True,
            drug_name=name,
            generation=generation,
        )
        logger.info("Search #%d started for %s", generation, name)

        try:
            outcomes = await asyncio.gather(
                *(self._requestors[branch.name](name) for branch in BRANCHES),
                return_exceptions=True,
            )
        except asyncio.CancelledError:
            if generation == self._generation:
                self.state = self.state.model_copy(update={"loading": False})
            logger.warning("Search #%d for %s was cancelled", generation, name)
            raise

        if generation != self._generation:
            logger.debug("Discarding stale search #%d for %s", generation, name)
            return self.state

        # Only a blocking branch failure may leave an error behind.
        updates: dict[str, Any] = {"loading": False, "error": None}
        for branch, outcome in zip(BRANCHES, outcomes):
            if isinstance(outcome, BaseException):
                if branch.blocking:
                    logger.error("Search #%d %s branch failed: %s", generation, branch.name, str(outcome))
                    updates["error"] = branch.failure_message
                else:
                    logger.warning("Search #%d %s branch failed: %s", generation, branch.name, str(outcome))
                continue
            updates[branch.state_field] = outcome

        self.state = self.state.model_copy(update=updates)
        logger.info(
            "Search #%d settled for %s (error=%s)",
            generation,
            name,
            bool(self.state.error),
        )
        return self.state


class SearchSessionStore:
    """In-memory map of browser session id to its orchestrator. Current state only."""

    def __init__(
        self,
        ttl_seconds: int,
        orchestrator_factory: Callable[[], SearchOrchestrator] = SearchOrchestrator,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._factory = orchestrator_factory
        self._sessions: dict[str, SearchOrchestrator] = {}
        self._touched_at: dict[str, float] = {}
        self._lock = asyncio.Lock()

    def _prune_expired(self, now: float) -> None:
        expired_ids = [
            session_id
            for session_id, touched in self._touched_at.items()
            if now - touched > self.ttl_seconds
            and not self._sessions[session_id].state.loading
        ]
        for session_id in expired_ids:
            self._sessions.pop(session_id, None)
            self._touched_at.pop(session_id, None)

    async def get_or_create(self, session_id: str | None) -> tuple[str, SearchOrchestrator]:
        normalized_session_id = str(session_id or "").strip() or str(uuid4())
        async with self._lock:
            now = time.time()
            self._prune_expired(now)
            orchestrator = self._sessions.get(normalized_session_id)
            if orchestrator is None:
                orchestrator = self._factory()
                self._sessions[normalized_session_id] = orchestrator
            self._touched_at[normalized_session_id] = now
            return normalized_session_id, orchestrator

    async def get(self, session_id: str) -> SearchOrchestrator | None:
        normalized_session_id = str(session_id or "").strip()
        if not normalized_session_id:
            return None
        async with self._lock:
            now = time.time()
            self._prune_expired(now)
            orchestrator = self._sessions.get(normalized_session_id)
            if orchestrator is not None:
                self._touched_at[normalized_session_id] = now
            return orchestrator

    def __len__(self) -> int:
        return len(self._sessions)
