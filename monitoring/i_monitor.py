# monitoring/i_monitor.py

from abc import ABC, abstractmethod


class IMonitor(ABC):
    """
    Lifecycle contract for the background samplers the Pomodoro runner
    drives (today only the camera ActivitySampler).

    start() and stop() are both idempotent. A sampler that cannot acquire
    its device stays stopped after start() and reports why through its
    own error attribute instead of raising.
    """

    @property
    @abstractmethod
    def is_running(self) -> bool:
        """True while the worker is alive."""

    @abstractmethod
    def start(self) -> None:
        """Acquire the device and begin sampling. No-op when already running."""

    @abstractmethod
    def stop(self) -> None:
        """Stop sampling and release the device. Safe to call when stopped."""
