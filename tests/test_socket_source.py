import asyncio

from flight_telemetry.config import SystemConfig, SocketConfig, ConnectionStatus
from flight_telemetry.acquisition.core import TelemetryCore
from flight_telemetry.acquisition.socket_source import SocketAcquisition


class FakeSocket:
    def __init__(self, messages):
        self.messages = messages

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for message in self.messages:
            yield message


class ScriptedConnect:
    """Each call pops the next script entry: a message list or an exception."""

    def __init__(self, script):
        self.script = list(script)
        self.urls = []

    def __call__(self, url):
        self.urls.append(url)
        step = self.script.pop(0) if self.script else OSError("connection refused")
        if isinstance(step, Exception):
            raise step
        return FakeSocket(step)


def fast_config(attempts=3):
    return SocketConfig(url="ws://test", base_delay=0.001, max_delay=0.004,
                        max_reconnect_attempts=attempts)


def test_backoff_doubles_until_ceiling_then_gives_up():
    source = SocketAcquisition(TelemetryCore(SystemConfig()), SocketConfig())
    delays = [source.next_delay() for _ in range(6)]
    assert delays == [2.0, 4.0, 8.0, 10.0, 10.0, None]


def test_messages_are_ingested_and_bad_ones_skipped():
    core = TelemetryCore(SystemConfig())
    statuses = []
    core.subscribe_status(statuses.append)
    connect = ScriptedConnect([['{"Altitude": 3.5}', "garbage", "[1, 2]", '{"Altitude": "4"}']])
    source = SocketAcquisition(core, fast_config(), connect=connect)

    asyncio.run(source.run())

    assert core.get_history().altitude == [3.5, 4.0]
    assert source.messages_received == 2
    assert source.messages_rejected == 2
    assert statuses == [
        ConnectionStatus.CONNECTED,
        ConnectionStatus.DISCONNECTED,
        ConnectionStatus.ERROR,
        ConnectionStatus.DISCONNECTED,
        ConnectionStatus.ERROR,
        ConnectionStatus.DISCONNECTED,
        ConnectionStatus.ERROR,
        ConnectionStatus.DISCONNECTED,
    ]
    assert len(connect.urls) == 4
    assert core.status == ConnectionStatus.DISCONNECTED


def test_successful_open_resets_attempts():
    core = TelemetryCore(SystemConfig())
    connect = ScriptedConnect([
        OSError("refused"),
        OSError("refused"),
        ['{"Altitude": 1}'],
    ])
    source = SocketAcquisition(core, fast_config(attempts=2), connect=connect)

    asyncio.run(source.run())

    # two failures, one success (counter reset), then two more failures
    assert len(connect.urls) == 5
    assert core.get_history().altitude == [1.0]
    assert source.reconnect_attempts == 2


def test_stop_cancels_pending_reconnect():
    core = TelemetryCore(SystemConfig())
    config = SocketConfig(url="ws://test", base_delay=10.0, max_delay=10.0)
    source = SocketAcquisition(core, config, connect=ScriptedConnect([]))

    async def run():
        source.start()
        await asyncio.sleep(0.05)
        await source.stop()

    asyncio.run(run())
    assert source.reconnect_attempts == 1
