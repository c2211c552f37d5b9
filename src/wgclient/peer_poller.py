"""
Background refresh of the peer list.

A poller owns one asyncio task that calls ``list_peers`` on a fixed
interval and publishes an immutable ``PeerSnapshot``. Its lifetime is bound
to whoever created it: ``stop()`` cancels the task and no tick runs after
that.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from .api_client import AdaptiveApiClient
from .exceptions import CallbackError, NetworkError, ServerError, SessionExpired, WgClientError, describe_error
from .peer_poller_helpers import PeerSnapshot, PollerState, PollingPolicy, TickOutcome
from .utils.formatting import format_duration

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
Sleeper = Callable[[float], Awaitable[None]]
SnapshotCallback = Callable[[PeerSnapshot], None]
LogoutCallback = Callable[[], None]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PeerListPoller:
    """
    Periodically fetches peers and publishes snapshots.

    Ticks are single-flight: a tick requested while another is in flight
    returns ``TickOutcome.SKIPPED`` without touching the network. Network
    and server errors are counted and polling continues at the same
    interval. A rejected session stops the poller and sets ``logged_out``.
    """

    def __init__(
        self,
        client: AdaptiveApiClient,
        *,
        on_snapshot: Optional[SnapshotCallback] = None,
        on_logout: Optional[LogoutCallback] = None,
        clock: Optional[Clock] = None,
        sleep: Optional[Sleeper] = None,
        name: str = "peer-poller",
    ) -> None:
        self._client = client
        self._on_snapshot = on_snapshot
        self._on_logout = on_logout
        self._clock = clock or _utc_now
        self._sleep = sleep or asyncio.sleep
        self._name = name

        self._policy: Optional[PollingPolicy] = None
        self._policy_changed = asyncio.Event()
        self._state = PollerState.IDLE
        self._task: Optional[asyncio.Task[None]] = None
        self._in_flight = False
        self._stop_requested = False
        self._snapshot = PeerSnapshot()

        self.logged_out = asyncio.Event()
        self.failure: Optional[BaseException] = None

    @property
    def state(self) -> PollerState:
        return self._state

    @property
    def snapshot(self) -> PeerSnapshot:
        return self._snapshot

    @property
    def policy(self) -> Optional[PollingPolicy]:
        return self._policy

    @property
    def name(self) -> str:
        return self._name

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self, policy: PollingPolicy) -> None:
        """
        Start the background task; the first tick runs immediately.

        Raises:
            RuntimeError: If the poller was already stopped
        """
        if self._state is PollerState.STOPPED:
            raise RuntimeError(f"Poller {self._name} is stopped and cannot be restarted")
        if self._task is not None:
            logger.warning("Poller %s already started", self._name)
            return

        self._policy = policy
        self._state = PollerState.RUNNING
        logger.info("Starting poller %s (interval: %ss)", self._name, policy.interval_seconds)
        self._task = asyncio.create_task(self._poll_loop(), name=self._name)

    async def stop(self) -> None:
        """Stop polling. Idempotent; the poller cannot be restarted."""
        self._stop_requested = True
        self._state = PollerState.STOPPED
        task = self._task
        if task is None:
            return

        if task is asyncio.current_task():
            return
        if not task.done():
            task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            logger.debug("Poller %s task cancelled during shutdown", self._name)
        finally:
            self._task = None
        logger.info("Poller %s stopped", self._name)

    def update_policy(self, policy: PollingPolicy) -> None:
        """Replace the interval or pause/resume ticking."""
        self._policy = policy
        self._policy_changed.set()
        logger.debug("Poller %s policy updated: %s", self._name, policy)

    async def tick(self) -> TickOutcome:
        """
        Run one poll now.

        ``AuthFormatExhausted`` and ``ValidationError`` from a lazy probe
        propagate to the caller, as does ``CallbackError`` when a callback
        raises. The background loop stores any of these in ``failure``.
        """
        if self._state is PollerState.STOPPED:
            return TickOutcome.SKIPPED
        if self._in_flight:
            logger.debug("Poller %s tick skipped; previous tick still in flight", self._name)
            return TickOutcome.SKIPPED

        self._in_flight = True
        self._state = PollerState.POLLING
        started = asyncio.get_running_loop().time()
        try:
            peers = await self._client.list_peers()
        except SessionExpired:
            self._handle_logout()
            return TickOutcome.SESSION_EXPIRED
        except NetworkError as exc:
            self._record_failure(exc)
            return TickOutcome.NETWORK_ERROR
        except ServerError as exc:
            self._record_failure(exc)
            return TickOutcome.SERVER_ERROR
        finally:
            self._in_flight = False
            if self._state is PollerState.POLLING:
                self._state = PollerState.RUNNING if self._task is not None else PollerState.IDLE

        self._publish(PeerSnapshot.from_peers(peers, self._clock()))
        elapsed = asyncio.get_running_loop().time() - started
        logger.debug("Poller %s fetched %d peers in %s", self._name, len(peers), format_duration(elapsed))
        return TickOutcome.SUCCESS

    async def set_peer_enabled(self, peer_id: str, enabled: bool) -> None:
        """
        Enable or disable a peer and reflect it in the snapshot right away.

        Errors from the client propagate; the snapshot only changes after a
        successful call, and the next poll replaces the flip.
        """
        try:
            if enabled:
                await self._client.enable_peer(peer_id)
            else:
                await self._client.disable_peer(peer_id)
        except SessionExpired:
            self._handle_logout()
            raise
        self._publish(self._snapshot.with_peer_enabled(peer_id, enabled, self._clock()))

    async def wait_logged_out(self) -> None:
        await self.logged_out.wait()

    async def _poll_loop(self) -> None:
        logger.info("Poller %s loop started", self._name)
        try:
            while not self._stop_requested:
                policy = self._policy
                assert policy is not None
                if not policy.enabled:
                    self._policy_changed.clear()
                    logger.debug("Poller %s paused", self._name)
                    await self._policy_changed.wait()
                    continue

                try:
                    outcome = await self.tick()
                except WgClientError as exc:
                    self.failure = exc
                    self._state = PollerState.STOPPED
                    logger.error("Poller %s stopped after unrecoverable error: %s", self._name, describe_error(exc))
                    break
                if outcome is TickOutcome.SESSION_EXPIRED or self._stop_requested:
                    break

                await self._sleep(policy.interval_seconds)
        except asyncio.CancelledError:
            logger.info("Poller %s loop cancelled", self._name)
            raise
        finally:
            self._state = PollerState.STOPPED
        logger.info("Poller %s loop ended", self._name)

    def _record_failure(self, error: WgClientError) -> None:
        description = describe_error(error) or "unknown error"
        logger.warning("Poller %s tick failed: %s", self._name, description)
        self._publish(self._snapshot.with_failure(description))

    def _handle_logout(self) -> None:
        self._stop_requested = True
        self._state = PollerState.STOPPED
        task = self._task
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()
        if self.logged_out.is_set():
            return
        logger.warning("Poller %s stopped: session expired", self._name)
        self.logged_out.set()
        if self._on_logout is not None:
            try:
                self._on_logout()
            except Exception as exc:
                raise CallbackError("on_logout callback failed", callback="on_logout") from exc

    def _publish(self, snapshot: PeerSnapshot) -> None:
        self._snapshot = snapshot
        if self._on_snapshot is not None:
            try:
                self._on_snapshot(snapshot)
            except Exception as exc:
                raise CallbackError("on_snapshot callback failed", callback="on_snapshot") from exc


__all__ = ["PeerListPoller", "PeerSnapshot", "PollerState", "PollingPolicy", "TickOutcome"]
