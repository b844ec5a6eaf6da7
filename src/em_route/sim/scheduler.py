# sim/scheduler.py
import threading
import time

from em_route.app.protocols import CongestionGenerator, CongestionSink
from em_route.sim.clock import ms
from em_route.sim.hooks import EngineHooks, NoopHooks

DEFAULT_INTERVAL_MS = 30_000


class RefreshScheduler:
    """
    Periodically pulls samples from a generator and writes them into a ledger.

    One background thread per active schedule. `start` cancels any previous
    schedule before launching a new one; `stop` waits for an in-flight tick,
    so no write reaches the ledger after it returns.
    """

    def __init__(self, ledger: CongestionSink, *, hooks: EngineHooks | None = None):
        self.ledger = ledger
        self._hooks = hooks or NoopHooks()
        self._tick_lock = threading.RLock()  # serializes ticks with stop()
        self._state_lock = threading.Lock()  # guards start/stop transitions
        self._thread: threading.Thread | None = None
        self._stop_evt: threading.Event | None = None
        self._generator: CongestionGenerator | None = None
        self.interval_ms: float | None = None
        self.ticks = 0
        self.errors = 0

    def start(
        self,
        interval_ms: float = DEFAULT_INTERVAL_MS,
        generator: CongestionGenerator | None = None,
    ) -> None:
        if generator is None:
            raise ValueError("generator is required")
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be > 0, got {interval_ms}")
        with self._state_lock:
            self._stop_locked()
            stop_evt = threading.Event()
            self._stop_evt, self._generator, self.interval_ms = stop_evt, generator, interval_ms
            self._hooks.scheduler_started(interval_ms=interval_ms)
            self._tick(generator, stop_evt)  # first refresh happens before any wait
            self._thread = threading.Thread(
                target=self._run,
                args=(generator, stop_evt, ms(interval_ms)),
                name="congestion-refresh",
                daemon=True,
            )
            self._thread.start()

    def stop(self) -> None:
        with self._state_lock:
            self._stop_locked()

    def is_running(self) -> bool:
        t, evt = self._thread, self._stop_evt
        return t is not None and evt is not None and t.is_alive() and not evt.is_set()

    def refresh_now(self) -> bool:
        """Run one tick on the caller's thread; False when no schedule is active."""
        gen, evt = self._generator, self._stop_evt
        if gen is None or evt is None or evt.is_set():
            return False
        return self._tick(gen, evt)

    # --------------- Helpers -----------------------------

    def _stop_locked(self) -> None:
        evt, t = self._stop_evt, self._thread
        if evt is None:
            return  # already stopped: no-op
        evt.set()
        with self._tick_lock:
            pass  # wait out a tick that started before the flag was set
        if t is not None and t is not threading.current_thread():
            t.join()
        self._hooks.scheduler_stopped(ticks=self.ticks)
        self._stop_evt, self._thread, self._generator = None, None, None

    def _run(self, generator: CongestionGenerator, stop_evt: threading.Event, interval_s: float):
        while not stop_evt.wait(interval_s):
            self._tick(generator, stop_evt)

    def _tick(self, generator: CongestionGenerator, stop_evt: threading.Event) -> bool:
        with self._tick_lock:
            if stop_evt.is_set():
                return False
            t0 = time.perf_counter()
            tick = self.ticks + 1
            try:
                samples = generator()
                n = self.ledger.upsert(samples)
            except Exception as exc:
                # a bad batch must not end the schedule
                self.errors += 1
                self._hooks.refresh_error(tick=tick, exc=exc)
                return False
            finally:
                self.ticks = tick
            self._hooks.refresh_tick(tick=tick, samples=n, ms=(time.perf_counter() - t0) * 1000)
            return True
