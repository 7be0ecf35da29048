"""Tests for the frame driver."""

import zipfile

import numpy as np
import pytest

from aurorascope.curtain.base import CurtainConfig
from aurorascope.curtain.capture import FrameCapture
from aurorascope.curtain.driver import FrameDriver
from aurorascope.curtain.noise_field import PerlinNoise


@pytest.fixture
def driver(small_config, flat_noise):
    return FrameDriver(small_config, noise_fn=flat_noise)


class TestMoodParameters:
    def test_step_advances_clock(self, driver):
        driver.step(now_ms=0)
        driver.step(now_ms=0)
        assert driver.state.t == pytest.approx(0.008)
        assert driver.state.frame_index == 2

    @pytest.mark.parametrize("x, expected", [(0.0, -1.0), (32.0, 0.0), (64.0, 1.0), (500.0, 1.0)])
    def test_cursor_wind(self, driver, x, expected):
        driver.set_cursor((x, 10.0))
        assert driver.compute_wind() == pytest.approx(expected)

    def test_no_cursor_no_wind(self, driver):
        driver.set_cursor(None)
        assert driver.compute_wind() == 0.0

    def test_noise_wind_centred(self, flat_noise):
        cfg = CurtainConfig(width=64, height=48, cols=4, wind_source="noise")
        assert FrameDriver(cfg, noise_fn=flat_noise).compute_wind() == pytest.approx(0.0)

    def test_noise_wind_in_range(self):
        cfg = CurtainConfig(width=64, height=48, cols=4, wind_source="noise")
        d = FrameDriver(cfg, seed=2)
        for _ in range(20):
            d.state.advance(0.5)
            assert -1.0 <= d.compute_wind() <= 1.0

    def test_activity(self, driver):
        assert driver.compute_activity() == pytest.approx(0.75)
        driver.step(now_ms=0)
        assert driver.state.activity == pytest.approx(0.75)


class TestStep:
    def test_layers_front_to_back_depths(self, driver, monkeypatch):
        depths = []
        monkeypatch.setattr(
            driver.renderer, "render_curtain",
            lambda canvas, z, wind, activity, state: depths.append(z),
        )
        driver.step(now_ms=0)
        assert depths == pytest.approx([0.0, 1 / 3, 2 / 3, 1.0])

    def test_step_draws(self, driver):
        before = driver.canvas.to_array()
        driver.step(now_ms=0)
        assert not np.array_equal(before, driver.canvas.to_array())

    def test_run_yields_frames(self, small_config):
        d = FrameDriver(small_config, noise_fn=PerlinNoise(seed=1))
        seen = []
        frames = list(d.run(4, progress_callback=lambda cur, total: seen.append((cur, total))))
        assert len(frames) == 4
        for f in frames:
            assert f.shape == (48, 64, 3)
            assert f.dtype == np.uint8
        assert not np.array_equal(frames[0], frames[-1])
        assert seen[-1] == (4, 4)

    def test_resize(self, driver):
        driver.resize(80, 30)
        assert driver.canvas.size == (80, 30)
        assert (driver.state.width, driver.state.height) == (80, 30)
        driver.step(now_ms=0)
        assert driver.frame().shape == (30, 80, 3)

    def test_glow_frame(self, small_config, flat_noise):
        small_config.glow_enabled = True
        d = FrameDriver(small_config, noise_fn=flat_noise)
        d.step(now_ms=0)
        assert d.frame().mean() >= d.canvas.to_array().mean()


class TestDriverCapture:
    def test_save_without_capture(self, driver, tmp_path, capsys):
        assert driver.save_capture(tmp_path / "a.zip") is None
        assert "No ZIP ready yet." in capsys.readouterr().out

    def test_capture_on_driver_clock(self, small_config, flat_noise, fake_clock, tmp_path):
        capture = FrameCapture(fps=5, seconds=1.0)
        d = FrameDriver(small_config, noise_fn=flat_noise, capture=capture, clock_ms=fake_clock)
        try:
            assert d.start_capture()
            while capture.recording:
                d.step()
                fake_clock.advance(200)
            assert capture.wait(timeout=10)
            out = d.save_capture(tmp_path / "frames.zip")
            with zipfile.ZipFile(out) as zf:
                assert zf.namelist() == [f"aurora_{i:04d}.png" for i in range(5)]
        finally:
            capture.close()

    def test_start_capture_builds_capture_from_config(self, small_config, flat_noise):
        small_config.capture_fps = 2
        small_config.capture_seconds = 1.5
        d = FrameDriver(small_config, noise_fn=flat_noise)
        try:
            assert d.start_capture(now_ms=0)
            assert d.capture.target_frames == 3
            # second press is ignored while recording
            assert not d.start_capture(now_ms=10)
        finally:
            d.capture.close()
