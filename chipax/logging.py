"""Console reporting for chipax front ends.

:class:`EmulatorLogger` prints machine lifecycle events; :func:`scan_with_progress`
drives a tqdm bar from inside a jitted ``jax.lax.scan`` through io_callback.
"""

import time
from typing import Callable, Optional

import jax
from jax.experimental import io_callback
from tqdm import tqdm

from chipax.decode import disassemble

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class EmulatorLogger:
    """Timestamped console messages for one machine, filtered by level.

    Args:
        name: Tag printed on every line
        log_level: Lowest level that is printed, one of LEVELS
    """

    def __init__(self, name: str = "Chip8", log_level: str = "INFO"):
        log_level = log_level.upper()
        if log_level not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")
        self.name = name
        self.log_level = log_level
        self.start_time = time.time()

    def log(self, level: str, message: str):
        if LEVELS.index(level) < LEVELS.index(self.log_level):
            return
        elapsed = time.time() - self.start_time
        print(f"[{elapsed:8.2f}s][{level:>8s}][{self.name}] {message}", flush=True)

    def info(self, message: str):
        self.log("INFO", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)

    def log_rom_loaded(self, source: str, size: int):
        self.info(f"Loaded {source} ({size} bytes at 0x200)")

    def log_fault(self, error):
        """Report an ExecutionFault with the offending instruction disassembled."""
        self.critical(f"{error} [{disassemble(error.opcode)}]")

    def log_pause(self, paused: bool):
        self.info("Paused" if paused else "Resumed")

    def log_speed(self, speed: int):
        self.info(f"Speed: {speed} instructions per tick")

    def log_reset(self):
        self.info("Reset")

    def log_headless_start(self, rom: str, ticks: int, speed: int):
        self.info(f"Running {rom} headless for {ticks} ticks at speed {speed}")

    def log_headless_done(self, seconds: float, pc: int):
        self.info(f"Finished in {seconds:.2f}s, PC=0x{pc:03X}")

    def log_video_saved(self, filename: str, num_frames: int):
        self.info(f"Video saved: {filename} ({num_frames} frames)")


def build_tqdm_progress_bar(n: int, print_rate: Optional[int] = None, desc: Optional[str] = None, **kwargs):
    """Build the per-iteration hook of a tqdm bar counting to n scan iterations.

    The bar is opened on iteration 0, moved to the completed count every
    ``print_rate`` iterations and on the last one, then closed.
    """
    if desc is None:
        desc = f"Running {n:,} ticks"
    if print_rate is None:
        print_rate = max(1, min(n // 20, 50))
    else:
        print_rate = max(1, min(print_rate, n))

    for kwarg in ("total", "mininterval", "maxinterval", "miniters"):
        kwargs.pop(kwarg, None)

    bars = {}

    def _open():
        bars[0] = tqdm(total=n, desc=desc, unit="tick", **kwargs)

    def _advance(done):
        if 0 in bars:
            bars[0].update(int(done) - bars[0].n)

    def _close():
        if 0 in bars:
            bars.pop(0).close()

    def _skip(*_):
        return None

    def update_progress_bar(iter_num):
        done = iter_num + 1
        jax.lax.cond(iter_num == 0, lambda: io_callback(_open, None, ordered=True), _skip)
        jax.lax.cond(
            (done % print_rate == 0) | (done == n),
            lambda: io_callback(_advance, None, done, ordered=True),
            _skip,
        )
        jax.lax.cond(done == n, lambda: io_callback(_close, None, ordered=True), _skip)

    return update_progress_bar


def scan_with_progress(n: int, print_rate: Optional[int] = None, desc: Optional[str] = None, **tqdm_kwargs) -> Callable:
    """Decorate a scan body so a tqdm bar follows its iterations.

    The scanned ``xs`` must be the iteration index (or a tuple starting with it).
    """
    update_progress_bar = build_tqdm_progress_bar(n, print_rate, desc, **tqdm_kwargs)

    def _scan_progress_decorator(func):
        def wrapper_with_progress(carry, x):
            iter_num = x[0] if isinstance(x, tuple) else x
            update_progress_bar(iter_num)
            return func(carry, x)

        return wrapper_with_progress

    return _scan_progress_decorator
