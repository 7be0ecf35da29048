"""
Interactive aurora window.

Runs the frame driver live in a resizable pygame window. The cursor
steers the wind (and, with the interactive preset, bends the ribbons).

Keys:
    R    start a timed capture (ignored while one is running)
    D    save the finished capture as a zip
    Esc  quit

Usage:
    aurorascope [--preset NAME] [--width W] [--height H] [--fps N]
"""

import argparse
import sys
from pathlib import Path

import pygame

from aurorascope.curtain.base import PRESETS, CurtainConfig
from aurorascope.curtain.driver import FrameDriver

ARCHIVE_NAME = "aurora_frames.zip"


class AuroraWindow:
    """Host loop: events in, one driver step per tick, canvas out."""

    def __init__(
        self,
        config: CurtainConfig | None = None,
        seed: int = 0,
        archive_path: Path = Path(ARCHIVE_NAME),
    ):
        self.cfg = config or CurtainConfig.from_preset("interactive")
        self.driver = FrameDriver(self.cfg, seed=seed)
        self.archive_path = Path(archive_path)
        self.screen: pygame.Surface | None = None
        self.running = False

    def dispatch_key(self, key: int):
        if key == pygame.K_r:
            self.driver.start_capture()
        elif key == pygame.K_d:
            self.driver.save_capture(self.archive_path)
        elif key == pygame.K_ESCAPE:
            self.running = False

    def handle_event(self, event: pygame.event.Event):
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.KEYDOWN:
            self.dispatch_key(event.key)
        elif event.type == pygame.MOUSEMOTION:
            self.driver.set_cursor(event.pos)
        elif event.type == pygame.WINDOWLEAVE:
            self.driver.set_cursor(None)
        elif event.type == pygame.VIDEORESIZE:
            self.resize(event.w, event.h)

    def resize(self, width: int, height: int):
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        self.driver.resize(width, height)

    def present(self):
        canvas = self.driver.canvas
        surface = pygame.image.frombuffer(canvas.image.tobytes(), canvas.size, "RGB")
        self.screen.blit(surface, (0, 0))
        pygame.display.flip()

    def run(self):
        pygame.init()
        pygame.display.set_caption("Aurora")
        self.screen = pygame.display.set_mode((self.cfg.width, self.cfg.height), pygame.RESIZABLE)
        clock = pygame.time.Clock()
        self.running = True
        try:
            while self.running:
                for event in pygame.event.get():
                    self.handle_event(event)
                self.driver.step()
                if self.driver.capture is not None:
                    self.driver.capture.poll()
                self.present()
                clock.tick(self.cfg.fps)
        finally:
            if self.driver.capture is not None:
                self.driver.capture.close()
            pygame.quit()


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        prog="aurorascope",
        description="Interactive aurora borealis curtains",
    )
    parser.add_argument(
        "-p", "--preset", type=str, default="interactive",
        choices=sorted(PRESETS),
        help="Tuning preset (default: interactive)",
    )
    parser.add_argument("--width", type=int, default=None, help="Window width (default: 1280)")
    parser.add_argument("--height", type=int, default=None, help="Window height (default: 720)")
    parser.add_argument("-f", "--fps", type=int, default=None, help="Draw rate (default: 30)")
    parser.add_argument("--seed", type=int, default=0, help="Noise seed (default: 0)")
    parser.add_argument(
        "-o", "--archive", type=Path, default=Path(ARCHIVE_NAME),
        help=f"Where D saves the capture (default: {ARCHIVE_NAME})",
    )
    args = parser.parse_args(argv)

    try:
        config = CurtainConfig.from_preset(
            args.preset, width=args.width, height=args.height, fps=args.fps,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    AuroraWindow(config, seed=args.seed, archive_path=args.archive).run()


if __name__ == "__main__":
    main()
