import logging

import cv2
import numpy as np

from confetti.constants import BACKGROUND_COLOR, BURST_COUNT, CONFETTI_SIZE, PALETTE
from confetti.particle import ConfettiShape

logger = logging.getLogger(__name__)


class ConfettiRenderer:
    """
    Handles the drawing logic using OpenCV.
    Drives the particle system once per frame and fires scheduled bursts.
    """

    def __init__(self, system, width, height, background=BACKGROUND_COLOR):
        self.system = system
        self.w = width
        self.h = height
        self.bg_color = np.array(background, dtype=np.float32)

        # Pending bursts as (time, count, origin), kept sorted by time
        self.pending_bursts = []

    @property
    def bounds(self):
        return (self.w, self.h)

    @property
    def launch_point(self):
        """Bottom-center of the canvas."""
        return (self.w / 2, self.h)

    def schedule_burst(self, t, count=BURST_COUNT, origin=None):
        self.pending_bursts.append((t, count, origin or self.launch_point))
        self.pending_bursts.sort(key=lambda burst: burst[0])

    def _fire_due_bursts(self, t):
        while self.pending_bursts and self.pending_bursts[0][0] <= t:
            _, count, origin = self.pending_bursts.pop(0)
            logger.info(f"[+] Burst of {count} at t={t:.2f}s")
            self.system.emit_burst(count, origin, self.bounds, now=t)

    def draw_particle(self, frame, particle, t):
        age = particle.age(t)
        alpha = max(0, 1 - age / particle.lifespan)
        if alpha <= 0:
            return

        # Region around the piece, large enough for any rotation
        reach = int(np.ceil(np.hypot(*CONFETTI_SIZE) / 2)) + 1
        x0 = max(int(particle.x) - reach, 0)
        y0 = max(int(particle.y) - reach, 0)
        x1 = min(int(particle.x) + reach + 1, self.w)
        y1 = min(int(particle.y) + reach + 1, self.h)
        if x0 >= x1 or y0 >= y1:
            return

        # Draw opaque on a copy, then mix with whatever is already in the frame
        roi = frame[y0:y1, x0:x1]
        overlay = roi.copy()
        color = PALETTE[particle.color]
        center = (float(particle.x - x0), float(particle.y - y0))

        if particle.shape_type is ConfettiShape.CIRCLE:
            radius = int(min(CONFETTI_SIZE) / 2)
            cv2.circle(overlay, (int(particle.x) - x0, int(particle.y) - y0), radius, color, -1, cv2.LINE_AA)
        else:
            box = cv2.boxPoints((center, CONFETTI_SIZE, float(np.rad2deg(particle.rotation))))
            cv2.fillPoly(overlay, [box.astype(np.int32)], color, cv2.LINE_AA)

        frame[y0:y1, x0:x1] = cv2.addWeighted(overlay, alpha, roi, 1 - alpha, 0)

    def make_frame(self, t):
        """
        The callback function for MoviePy.
        Generates a single BGR frame at time t.
        """
        # 1. Advance physics, then launch anything due
        self.system.update(t, self.bounds)
        self._fire_due_bursts(t)

        # 2. Setup Canvas
        frame = np.full((self.h, self.w, 3), self.bg_color, dtype=np.uint8)

        # 3. Draw particles
        for particle in self.system.particles:
            self.draw_particle(frame, particle, t)

        return frame
