"""Tests for timed zip capture."""

import io
import zipfile

import pytest
from PIL import Image

from aurorascope.curtain import capture as capture_module
from aurorascope.curtain.canvas import Canvas
from aurorascope.curtain.capture import MAX_CATCH_UP, FrameCapture, frame_name


@pytest.fixture
def capture():
    cap = FrameCapture(fps=5, seconds=5.0)
    yield cap
    cap.close()


@pytest.fixture
def canvas():
    return Canvas(16, 12, (7, 10, 18))


def _run(cap, canvas, start=0.0):
    """Tick at exactly the capture interval until the run completes."""
    assert cap.start(start, canvas)
    now = start
    while cap.recording:
        cap.tick(now, canvas)
        now += cap.interval_ms


def test_frame_name():
    assert frame_name("aurora", 7) == "aurora_0007.png"
    assert frame_name("aurora", 24) == "aurora_0024.png"


class TestFrameCapture:
    def test_five_seconds_at_five_fps(self, capture, canvas, tmp_path):
        _run(capture, canvas)
        assert capture.captured_frames == 25
        assert capture.wait(timeout=10)

        out = capture.save(tmp_path / "aurora_frames.zip")
        with zipfile.ZipFile(out) as zf:
            names = zf.namelist()
            assert names == [f"aurora_{i:04d}.png" for i in range(25)]
            assert names[0] == "aurora_0000.png"
            assert names[-1] == "aurora_0024.png"
            for info in zf.infolist():
                assert info.compress_type == zipfile.ZIP_STORED
            img = Image.open(io.BytesIO(zf.read("aurora_0003.png")))
            assert img.size == (16, 12)

    def test_frames_snapshot_the_canvas_at_capture_time(self, canvas, tmp_path):
        cap = FrameCapture(fps=10, seconds=0.2)
        try:
            cap.start(0.0, canvas)
            canvas.background((255, 0, 0))
            cap.tick(0.0, canvas)
            canvas.background((0, 0, 255))
            cap.tick(100.0, canvas)
            assert cap.wait(timeout=10)
            with zipfile.ZipFile(cap.save(tmp_path / "a.zip")) as zf:
                first = Image.open(io.BytesIO(zf.read("aurora_0000.png"))).convert("RGB")
                second = Image.open(io.BytesIO(zf.read("aurora_0001.png"))).convert("RGB")
            assert first.getpixel((0, 0)) == (255, 0, 0)
            assert second.getpixel((0, 0)) == (0, 0, 255)
        finally:
            cap.close()

    def test_start_ignored_while_recording(self, capture, canvas):
        assert capture.start(0.0, canvas)
        capture.tick(0.0, canvas)
        assert not capture.start(50.0, canvas)
        assert capture.captured_frames == 1

    def test_start_without_canvas(self, capture, capsys):
        assert not capture.start(0.0, None)
        assert not capture.recording
        assert "Canvas not initialised yet." in capsys.readouterr().err

    def test_catch_up_is_capped(self, capture, canvas):
        capture.start(0.0, canvas)
        assert capture.tick(10_000.0, canvas) == MAX_CATCH_UP
        assert capture.tick(10_000.0, canvas) == MAX_CATCH_UP
        assert capture.captured_frames == 2 * MAX_CATCH_UP

    def test_nothing_due_before_interval(self, capture, canvas):
        capture.start(0.0, canvas)
        assert capture.tick(0.0, canvas) == 1
        assert capture.tick(150.0, canvas) == 0
        assert capture.tick(200.0, canvas) == 1

    def test_tick_when_idle(self, capture, canvas):
        assert capture.tick(0.0, canvas) == 0

    def test_save_without_archive(self, capture, tmp_path, capsys):
        assert capture.save(tmp_path / "none.zip") is None
        assert "No ZIP ready yet." in capsys.readouterr().out
        assert not (tmp_path / "none.zip").exists()

    def test_save_releases_archive(self, capture, canvas, tmp_path):
        _run(capture, canvas)
        capture.wait(timeout=10)
        assert capture.save(tmp_path / "a.zip") is not None
        assert not capture.ready
        assert capture.save(tmp_path / "b.zip") is None

    def test_new_run_after_save(self, canvas, tmp_path):
        cap = FrameCapture(fps=5, seconds=0.4, prefix="sky")
        try:
            for name in ("one.zip", "two.zip"):
                _run(cap, canvas)
                assert cap.wait(timeout=10)
                with zipfile.ZipFile(cap.save(tmp_path / name)) as zf:
                    assert zf.namelist() == ["sky_0000.png", "sky_0001.png"]
        finally:
            cap.close()

    def test_cancel_resets(self, capture, canvas):
        capture.start(0.0, canvas)
        capture.tick(0.0, canvas)
        capture.tick(200.0, canvas)
        capture.cancel()
        assert not capture.recording
        assert capture.captured_frames == 0
        assert not capture.ready
        # can start again
        assert capture.start(1000.0, canvas)

    def test_encode_failure_is_reported(self, capture, canvas, monkeypatch, capsys):
        def broken(image):
            raise OSError("disk on fire")

        monkeypatch.setattr(capture_module, "encode_png", broken)
        _run(capture, canvas)
        assert not capture.wait(timeout=10)
        err = capsys.readouterr().err
        assert "ZIP capture error: disk on fire" in err

    def test_messages(self, canvas, capsys):
        cap = FrameCapture(fps=5, seconds=0.2)
        try:
            _run(cap, canvas)
            cap.wait(timeout=10)
        finally:
            cap.close()
        out = capsys.readouterr().out
        assert "ZIP capture started: 1 frames @ 5 fps" in out
        assert "Capture complete, zipping..." in out
        assert "ZIP ready. Press D to download." in out
