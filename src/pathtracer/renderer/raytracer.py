# renderer/raytracer.py
import logging
import math
import queue
import random
import threading
from collections import namedtuple
from typing import Optional

from pathtracer.camera.camera import Camera
from pathtracer.core.ray import Ray
from pathtracer.core.vector import Color, Vector3
from pathtracer.geometry.hittable import Hittable
from pathtracer.renderer.image import Image

logger = logging.getLogger(__name__)

MAX_DEPTH = 50
T_MIN = 0.001  # Avoids re-hitting the surface a ray just left

BLACK = Vector3(0.0, 0.0, 0.0)

PixelUpdate = namedtuple("PixelUpdate", ["x", "y", "color"])
WorkerFinished = namedtuple("WorkerFinished", ["worker", "error"])


def ray_color(ray: Ray, world: Hittable, background: Color, depth: int,
              rng: random.Random) -> Color:
    """Radiance arriving along ``ray``, following at most ``depth`` bounces."""
    if depth <= 0:
        return BLACK

    rec = world.hit(ray, T_MIN, math.inf, rng)
    if rec is None:
        return background

    emitted = rec.material.emitted(rec.u, rec.v, rec.p)
    scatter = rec.material.scatter(ray, rec, rng)
    if scatter is None:
        return emitted

    scattered, attenuation = scatter
    return emitted + attenuation * ray_color(scattered, world, background, depth - 1, rng)


class Renderer:
    """
    Multi-threaded offline renderer.

    Every worker walks the whole image and traces its share of the samples
    per pixel. Samples travel to the calling thread through a single queue;
    only the calling thread touches the Image.

    The workers are Python threads and share the GIL, so ``threads`` splits
    the work into independently seeded sample streams but does not make
    tracing faster on several cores.
    """
    def __init__(self, world: Hittable, camera: Camera, width: int, height: int,
                 samples_per_pixel: int = 100, max_depth: int = MAX_DEPTH,
                 background: Color = BLACK, threads: int = 1, seed: Optional[int] = None):
        if samples_per_pixel <= 0:
            raise ValueError(f"samples_per_pixel must be positive, got {samples_per_pixel}")
        if threads <= 0:
            raise ValueError(f"threads must be positive, got {threads}")
        self.world = world
        self.camera = camera
        self.width = width
        self.height = height
        self.samples_per_pixel = samples_per_pixel
        self.max_depth = max_depth
        self.background = background
        self.threads = threads
        self.seed = seed

    def samples_for_worker(self, worker: int) -> int:
        """The remainder of samples_per_pixel / threads goes to the first workers."""
        base, extra = divmod(self.samples_per_pixel, self.threads)
        return base + (1 if worker < extra else 0)

    def _worker_rng(self, worker: int) -> random.Random:
        if self.seed is None:
            return random.Random()
        return random.Random(self.seed + worker)

    def _render_worker(self, worker: int, updates: queue.Queue):
        error = None
        try:
            rng = self._worker_rng(worker)
            samples = self.samples_for_worker(worker)
            # A one pixel wide (or tall) image samples the viewport centre line
            w_span = max(self.width - 1, 1)
            h_span = max(self.height - 1, 1)
            for j in range(self.height - 1, -1, -1):
                if worker == 0:
                    logger.info("Scanlines remaining: %d", j + 1)
                for i in range(self.width):
                    for _ in range(samples):
                        s = (i + rng.random()) / w_span
                        t = (j + rng.random()) / h_span
                        ray = self.camera.get_ray(s, t, rng)
                        color = ray_color(ray, self.world, self.background, self.max_depth, rng)
                        updates.put(PixelUpdate(i, j, color))
        except Exception as e:
            error = e
        updates.put(WorkerFinished(worker, error))

    def render(self) -> Image:
        image = Image(self.width, self.height)
        updates = queue.Queue()
        workers = [
            threading.Thread(target=self._render_worker, args=(k, updates),
                             name=f"render-worker-{k}", daemon=True)
            for k in range(self.threads)
        ]
        logger.info("Rendering %dx%d, %d samples per pixel on %d thread(s)",
                    self.width, self.height, self.samples_per_pixel, self.threads)
        for worker in workers:
            worker.start()

        running = len(workers)
        error = None
        while running:
            update = updates.get()
            if isinstance(update, WorkerFinished):
                running -= 1
                if update.error is not None and error is None:
                    error = update.error
                    logger.error("Worker %d failed: %s", update.worker, update.error)
                continue
            image.add_sample(update.x, update.y, update.color)

        for worker in workers:
            worker.join()
        if error is not None:
            raise error
        logger.info("Done.")
        return image
