import threading


class CancellationFlag:
    """
    Shared stop signal for one import run.

    The same instance is handed to the scanner and the importer; a stop
    request from any other thread sets it. It stays set until `reset()`.
    """

    def __init__(self):
        self._event = threading.Event()

    def set(self):
        self._event.set()

    def reset(self):
        self._event.clear()

    def is_set(self) -> bool:
        return self._event.is_set()

    def __bool__(self) -> bool:
        return self._event.is_set()

    def __repr__(self) -> str:
        return f"CancellationFlag(set={self.is_set()})"
