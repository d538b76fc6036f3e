import threading


class WaitGroup:
    """Counting join: `wait()` blocks until every `add()` has a matching `done()`.

    Work must be added before it is handed to another thread, otherwise the
    counter can reach zero while that work is still pending.
    """

    def __init__(self):
        self._cond = threading.Condition()
        self._count = 0

    def add(self, n: int = 1) -> None:
        with self._cond:
            self._count += n
            if self._count < 0:
                raise ValueError("WaitGroup counter went negative")
            if self._count == 0:
                self._cond.notify_all()

    def done(self) -> None:
        self.add(-1)

    def wait(self, timeout=None) -> bool:
        """Wait for the counter to reach zero; returns False if `timeout` expired first."""
        with self._cond:
            return self._cond.wait_for(lambda: self._count == 0, timeout=timeout)

    @property
    def pending(self) -> int:
        with self._cond:
            return self._count
