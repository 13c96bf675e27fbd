"""Tests for SignalBus delivery."""

import asyncio
import threading
import time
from unittest.mock import MagicMock

import pytest

from gridmenu.core.signals import CLICK_SIGNAL, SignalBus


class TestSignalBusInline:
    def test_emit_calls_listener(self):
        bus = SignalBus()
        cb = MagicMock()
        bus.on(CLICK_SIGNAL, cb)
        bus.emit(CLICK_SIGNAL, event="payload")
        cb.assert_called_once_with(CLICK_SIGNAL, event="payload")

    def test_emit_without_listeners(self):
        SignalBus().emit("nothing:here", event=None)

    def test_off_removes_listener(self):
        bus = SignalBus()
        cb = MagicMock()
        bus.on(CLICK_SIGNAL, cb)
        bus.off(CLICK_SIGNAL, cb)
        bus.emit(CLICK_SIGNAL, event=1)
        cb.assert_not_called()

    def test_off_unknown_listener(self):
        SignalBus().off(CLICK_SIGNAL, MagicMock())

    def test_failing_listener_does_not_block_others(self, caplog):
        bus = SignalBus()
        bad = MagicMock(side_effect=RuntimeError("boom"))
        good = MagicMock()
        bus.on(CLICK_SIGNAL, bad)
        bus.on(CLICK_SIGNAL, good)
        bus.emit(CLICK_SIGNAL, event=1)
        good.assert_called_once()
        assert "Listener for 'surface:click' failed" in caplog.text


class TestSignalBusLoop:
    @pytest.fixture
    def loop(self):
        _loop = asyncio.new_event_loop()
        t = threading.Thread(target=_loop.run_forever, daemon=True)
        t.start()
        yield _loop
        _loop.call_soon_threadsafe(_loop.stop)
        t.join(timeout=2)
        _loop.close()

    def test_off_loop_emit_delivers_on_loop_thread(self, loop):
        bus = SignalBus(loop)
        threads = []
        bus.on(CLICK_SIGNAL, lambda signal, **data: threads.append(threading.current_thread()))
        bus.emit(CLICK_SIGNAL, event=1)
        time.sleep(0.1)
        assert len(threads) == 1
        assert threads[0] is not threading.current_thread()
