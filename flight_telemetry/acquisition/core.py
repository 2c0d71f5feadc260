import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Mapping, Optional, Set

import httpx

from ..config import SystemConfig, ConnectionStatus, AcquisitionState, DEFAULT_CONFIG
from .events import EventChannel
from .history import TelemetryHistory, HistorySnapshot
from .sample import Sample, AttitudeOffsets, sample_from_record
from .simulator import FallbackGenerator

logger = logging.getLogger(__name__)


@dataclass
class AcquisitionStats:
    polls_started: int = 0
    ticks_dropped: int = 0
    real_samples: int = 0
    fallback_samples: int = 0


class TelemetryCore:
    """
    Owns the current Sample and the rolling history.

    Each tick fetches the endpoint once; a failed fetch of any kind is
    replaced by a synthetic sample that follows the same ingest path, so
    subscribers receive exactly one Sample per completed tick.
    """

    def __init__(
        self,
        config: SystemConfig = None,
        client: httpx.AsyncClient = None,
        generator: FallbackGenerator = None
    ):
        self.config = config or DEFAULT_CONFIG
        acq = self.config.acquisition

        self._client = client
        self._owns_client = client is None
        self._generator = generator or FallbackGenerator(acq.fallback_area)

        self._sample = Sample()
        self._raw_sample = Sample()
        self._offsets = AttitudeOffsets()
        self._history = TelemetryHistory(
            capacity=self.config.history_capacity,
            samples_per_second=acq.samples_per_second
        )

        self._samples: EventChannel[Sample] = EventChannel("sample", copier=Sample.copy)
        self._status_events: EventChannel[ConnectionStatus] = EventChannel("status")

        self._state = AcquisitionState.IDLE
        self._status = ConnectionStatus.DISCONNECTED
        self._is_updating = False
        self._alive = True

        self._poll_task: Optional[asyncio.Task] = None
        self._aux_task: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()

        self.stats = AcquisitionStats()

        logger.info(
            f"TelemetryCore initialized: {acq.samples_per_second} Hz, "
            f"history capacity {self._history.capacity}"
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def state(self) -> AcquisitionState:
        return self._state

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    @property
    def is_updating(self) -> bool:
        return self._is_updating

    @property
    def is_alive(self) -> bool:
        return self._alive

    @property
    def offsets(self) -> AttitudeOffsets:
        return replace(self._offsets)

    # ------------------------------------------------------------------
    # Subscribers
    # ------------------------------------------------------------------

    def subscribe(self, callback: Callable[[Sample], None]):
        self._samples.subscribe(callback)

    def unsubscribe(self, callback: Callable[[Sample], None]):
        self._samples.unsubscribe(callback)

    def subscribe_status(self, callback: Callable[[ConnectionStatus], None]):
        self._status_events.subscribe(callback)

    def unsubscribe_status(self, callback: Callable[[ConnectionStatus], None]):
        self._status_events.unsubscribe(callback)

    def set_status(self, status: ConnectionStatus):
        """Publish a status change; repeated values are not re-sent."""
        if status == self._status:
            return
        previous = self._status
        self._status = status
        if status == ConnectionStatus.SIMULATING:
            logger.warning(f"Data source degraded: {previous.name} -> SIMULATING")
        else:
            logger.info(f"Data source status: {previous.name} -> {status.name}")
        self._status_events.emit(status)

    # ------------------------------------------------------------------
    # Acquisition
    # ------------------------------------------------------------------

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.config.acquisition.request_timeout
            )
        return self._client

    async def poll(self) -> Optional[Sample]:
        """
        Fetch one record from the endpoint and ingest it.

        Returns:
            Copy of the emitted Sample, or None when the tick was dropped
            because a fetch is already outstanding or the core is shut down.
        """
        if self._is_updating:
            self.stats.ticks_dropped += 1
            logger.debug("Poll skipped: request already in flight")
            return None
        if not self._alive:
            return None

        self._is_updating = True
        self._state = AcquisitionState.FETCHING
        self.stats.polls_started += 1

        try:
            if self.config.offline:
                return self._fall_back("offline mode")

            url = self.config.acquisition.endpoint_url
            try:
                response = await self._get_client().get(url)
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                return self._fall_back(f"connection error: {e!r}")

            if not response.is_success:
                return self._fall_back(f"HTTP {response.status_code}")

            try:
                payload = response.json()
            except ValueError as e:
                return self._fall_back(f"malformed JSON: {e}")

            if not isinstance(payload, dict):
                return self._fall_back(f"unexpected payload type {type(payload).__name__}")

            if not self._alive:
                logger.debug("Discarding response received after shutdown")
                return None

            logger.debug("Endpoint fetch succeeded")
            self._state = AcquisitionState.INGESTING
            self.set_status(ConnectionStatus.CONNECTED)
            self.stats.real_samples += 1
            return self.ingest(payload)
        finally:
            self._is_updating = False
            self._state = AcquisitionState.IDLE

    def _fall_back(self, reason: str) -> Optional[Sample]:
        if not self._alive:
            return None
        if self._status == ConnectionStatus.SIMULATING:
            logger.debug(f"Still simulating ({reason})")
        else:
            logger.warning(f"Endpoint unavailable ({reason}), switching to simulation")
        self._state = AcquisitionState.SIMULATING
        self.set_status(ConnectionStatus.SIMULATING)
        self.stats.fallback_samples += 1
        return self.generate_fallback_sample()

    def generate_fallback_sample(self) -> Optional[Sample]:
        """Synthesize a plausible record and ingest it like a real one."""
        return self.ingest(self._generator.generate())

    def ingest(self, record: Mapping[str, Any]) -> Optional[Sample]:
        """
        Apply an endpoint record to the current Sample.

        Args:
            record: Flat record in endpoint naming (Latitude, AirSpeed, ...)

        Returns:
            Copy of the corrected Sample, None after shutdown
        """
        if not self._alive:
            logger.debug("Ignoring record ingested after shutdown")
            return None

        if not isinstance(record, Mapping):
            logger.warning(f"Record is not a mapping ({type(record).__name__}), using defaults")
            record = {}

        raw = sample_from_record(record, invert_roll=self.config.acquisition.invert_roll)
        self._raw_sample = raw
        self._sample = replace(
            raw,
            roll=raw.roll - self._offsets.roll,
            pitch=raw.pitch - self._offsets.pitch,
            yaw=raw.yaw - self._offsets.yaw,
        )

        self._history.push(self._sample)
        self._samples.emit(self._sample)
        return self._sample.copy()

    def reset_attitude_offsets(self):
        """Re-zero attitude: the current raw roll/pitch/yaw become the bias."""
        self._offsets = AttitudeOffsets(
            roll=self._raw_sample.roll,
            pitch=self._raw_sample.pitch,
            yaw=self._raw_sample.yaw,
        )
        logger.info(
            f"Attitude offsets captured: roll={self._offsets.roll:.2f} "
            f"pitch={self._offsets.pitch:.2f} yaw={self._offsets.yaw:.2f}"
        )

    def clear_history(self):
        self._history.clear()

    def get_current_sample(self) -> Sample:
        return self._sample.copy()

    def get_history(self) -> HistorySnapshot:
        return self._history.snapshot()

    def refresh_auxiliary(self):
        # Weather/wind refresh hook, no data source wired yet
        logger.debug("Auxiliary data refresh (not implemented)")

    def get_statistics(self) -> Dict[str, Any]:
        return {
            "state": self._state.name,
            "status": self._status.name,
            "history_length": len(self._history),
            "history_capacity": self._history.capacity,
            "polls_started": self.stats.polls_started,
            "ticks_dropped": self.stats.ticks_dropped,
            "real_samples": self.stats.real_samples,
            "fallback_samples": self.stats.fallback_samples,
        }

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    def _spawn_poll(self):
        task = asyncio.create_task(self.poll())
        self._inflight.add(task)
        task.add_done_callback(self._on_poll_done)

    def _on_poll_done(self, task: asyncio.Task):
        self._inflight.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Poll task failed", exc_info=error)

    async def _poll_loop(self):
        interval = self.config.acquisition.poll_interval
        while self._alive:
            self._spawn_poll()
            await asyncio.sleep(interval)

    async def _auxiliary_loop(self):
        interval = self.config.acquisition.auxiliary_interval
        while self._alive:
            await asyncio.sleep(interval)
            self.refresh_auxiliary()

    async def start(self, poll: bool = True):
        """
        Start the timers.

        Args:
            poll: Run the primary poll timer. Disabled when samples are
                pushed by a socket strategy instead.
        """
        if self._aux_task is not None:
            return
        if not self._alive:
            raise RuntimeError("TelemetryCore has been shut down")
        if poll:
            logger.info(f"Polling {self.config.acquisition.endpoint_url}")
            self._poll_task = asyncio.create_task(self._poll_loop())
        self._aux_task = asyncio.create_task(self._auxiliary_loop())

    async def shutdown(self):
        """Stop both timers, drop subscribers and release the HTTP client."""
        if not self._alive:
            return
        self._alive = False

        for task in (self._poll_task, self._aux_task):
            if task is not None:
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
        self._poll_task = None
        self._aux_task = None

        # Outstanding requests may finish; their results are discarded
        if self._inflight:
            await asyncio.wait(
                set(self._inflight),
                timeout=self.config.acquisition.request_timeout
            )
            for task in list(self._inflight):
                task.cancel()

        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

        self._samples.clear()
        self._status_events.clear()
        logger.info("TelemetryCore shut down")
