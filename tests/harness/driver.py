"""Headless terminal driver for dispatcher tests."""

from ghtui.core.terminal import Frame


class NullDriver:
    """Headless driver: keeps the last frame and a call log."""

    def __init__(self, size: tuple[int, int] = (120, 40)):
        self._size = size
        self.frames: list[Frame] = []
        self.calls: list[str] = []
        self.suspended = False
        self.stopped = False

    @property
    def last_frame(self) -> Frame | None:
        return self.frames[-1] if self.frames else None

    def size(self) -> tuple[int, int]:
        return self._size

    def set_size(self, width: int, height: int) -> None:
        self._size = (width, height)

    def draw(self, frame: Frame) -> None:
        self.calls.append("draw")
        self.frames.append(frame)

    def suspend(self) -> bool:
        self.calls.append("suspend")
        self.suspended = True
        return True

    def resume(self) -> None:
        self.calls.append("resume")
        self.suspended = False

    def stop(self) -> None:
        self.calls.append("stop")
        self.stopped = True
