"""
Timed frame capture into a zip of PNGs.

The frame loop only snapshots the canvas and queues an encode task;
PNG encoding and archive assembly run on a thread pool. Assembly joins
every queued encode before writing the (uncompressed) archive.
"""

import io
import sys
import zipfile
from concurrent.futures import Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import List, Optional, Tuple

from aurorascope.curtain.canvas import Canvas, encode_png

MAX_CATCH_UP = 3  # captures per tick when the loop falls behind


def frame_name(prefix: str, index: int) -> str:
    return f"{prefix}_{index:04d}.png"


class FrameCapture:
    """
    Samples a canvas at ``fps`` for ``seconds`` and packages the frames.

    Args:
        fps: Capture rate (not the draw rate).
        seconds: Capture duration.
        prefix: Archive entry prefix, e.g. ``aurora_0000.png``.
        max_workers: Encoder threads.
    """

    def __init__(
        self,
        fps: float = 5,
        seconds: float = 5.0,
        prefix: str = "aurora",
        max_workers: int = 2,
    ):
        self.fps = fps
        self.seconds = seconds
        self.prefix = prefix
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="capture")

        self.recording = False
        self.captured_frames = 0
        self.target_frames = 0
        self.next_capture_ms = 0.0
        self.archive: Optional[bytes] = None

        self._pending: List[Future] = []
        self._assembly: Optional[Future] = None

    @property
    def interval_ms(self) -> float:
        return 1000.0 / self.fps

    @property
    def ready(self) -> bool:
        self.poll()
        return self.archive is not None

    def start(self, now_ms: float, canvas: Optional[Canvas] = None) -> bool:
        """Begin a capture run. Ignored while one is already recording."""
        if self.recording:
            return False
        if canvas is None:
            print("Canvas not initialised yet.", file=sys.stderr)
            return False

        self._reset()
        self.target_frames = max(1, round(self.fps * self.seconds))
        self.next_capture_ms = now_ms
        self.recording = True
        print(f"ZIP capture started: {self.target_frames} frames @ {self.fps} fps")
        return True

    def tick(self, now_ms: float, canvas: Canvas) -> int:
        """
        Capture any frames that are due. Call once per drawn frame.

        Returns:
            Number of frames queued during this tick.
        """
        if not self.recording:
            return 0

        queued = 0
        while (
            self.captured_frames < self.target_frames
            and now_ms >= self.next_capture_ms
            and queued < MAX_CATCH_UP
        ):
            self._queue_frame(canvas)
            self.captured_frames += 1
            self.next_capture_ms += self.interval_ms
            queued += 1

        if self.captured_frames >= self.target_frames:
            print("Capture complete, zipping...")
            self._finish()
        return queued

    def _queue_frame(self, canvas: Canvas):
        name = frame_name(self.prefix, self.captured_frames)
        image = canvas.snapshot()
        self._pending.append(self._executor.submit(lambda: (name, encode_png(image))))

    def _finish(self):
        self.recording = False
        self._assembly = self._executor.submit(_assemble_zip, list(self._pending))

    def poll(self):
        """Collect a finished archive, if assembly is done."""
        if self._assembly is None or not self._assembly.done():
            return
        assembly, self._assembly = self._assembly, None
        try:
            self.archive = assembly.result()
        except Exception as e:
            print(f"ZIP capture error: {e}", file=sys.stderr)
            return
        print("ZIP ready. Press D to download.")

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until a finished run has been assembled. Returns ``ready``."""
        if self._assembly is not None:
            wait([self._assembly], timeout=timeout)
        return self.ready

    def save(self, path: Path) -> Optional[Path]:
        """Write the ready archive to ``path`` and release it."""
        if not self.ready:
            print("No ZIP ready yet.")
            return None
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.archive)
        self.archive = None
        print(f"ZIP saved: {path}")
        return path

    def cancel(self):
        """Drop queued frames, any pending or ready archive, and reset counters."""
        if self._assembly is not None:
            self._assembly.cancel()
        self._assembly = None
        self.archive = None
        for f in self._pending:
            f.cancel()
        self._reset()

    def _reset(self):
        self._pending = []
        self.recording = False
        self.captured_frames = 0
        self.target_frames = 0

    def close(self):
        self._executor.shutdown(wait=True)


def _assemble_zip(pending: List[Future]) -> bytes:
    wait(pending)
    entries: List[Tuple[str, bytes]] = [f.result() for f in pending]

    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_STORED) as zf:
        for name, data in sorted(entries):
            zf.writestr(name, data)
    return buf.getvalue()
