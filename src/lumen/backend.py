"""Taichi runtime initialisation for CPU rendering.

All kernels in this package run on Taichi's CPU backend. The backend owns a
fixed pool of worker threads; the outermost loop of every render kernel is
split across that pool.

Example:
    >>> from lumen.backend import init_backend
    >>> init_backend(workers=4)
    >>> from lumen.render import render  # safe to import after init
"""

import logging
import os

import taichi as ti

from .errors import InvalidConfigError

logger = logging.getLogger(__name__)


def default_worker_count() -> int:
    """Return the number of CPU workers used when none is requested."""
    return max(1, os.cpu_count() or 1)


def init_backend(workers: int | None = None, debug: bool = False, random_seed: int = 0) -> int:
    """Initialise Taichi on the CPU backend.

    Must be called once, before importing modules that declare Taichi fields
    (lumen.scene, lumen.materials, lumen.camera, lumen.core.framebuffer and
    everything that imports them).

    Args:
        workers: Size of the CPU worker pool. Defaults to the number of cores.
        debug: Enable Taichi's bounds checking and debug assertions.
        random_seed: Seed for Taichi's own generator. The renderer does not
            draw from it; image randomness comes from RenderConfig.seed.

    Returns:
        The number of worker threads requested.

    Raises:
        InvalidConfigError: If workers is not a positive integer.
    """
    if workers is None:
        workers = default_worker_count()
    if int(workers) != workers or workers <= 0:
        raise InvalidConfigError(f"workers must be a positive integer, got {workers!r}")

    ti.init(
        arch=ti.cpu,
        cpu_max_num_threads=int(workers),
        debug=debug,
        random_seed=random_seed,
    )
    logger.info("Taichi CPU backend initialised with %d worker(s)", workers)
    return int(workers)
