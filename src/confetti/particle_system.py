import logging
import time
from dataclasses import dataclass, fields, replace

import numpy as np

from confetti.constants import (
    ANGULAR_VELOCITY_RANGE,
    DAMPING,
    EMISSION_ANGLE_RANGE,
    GRAVITY,
    LIFESPAN_RANGE,
    MAX_STEP,
    PALETTE,
    SPEED_RANGE,
)
from confetti.exceptions import InvalidConfiguration
from confetti.particle import ConfettiShape, Particle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmissionConfig:
    """
    Sampling ranges for a burst. Every range is a ``(low, high)`` pair drawn
    from uniformly.

    Angles are in degrees in canvas coordinates (y grows downward), so 0 points
    right and -90 points straight up.
    """

    emission_angle_range: tuple = EMISSION_ANGLE_RANGE
    speed_range: tuple = SPEED_RANGE
    lifespan_range: tuple = LIFESPAN_RANGE
    angular_velocity_range: tuple = ANGULAR_VELOCITY_RANGE

    def validate(self):
        for f in fields(self):
            low, high = getattr(self, f.name)
            if low > high:
                raise InvalidConfiguration(f"{f.name} is inverted: ({low}, {high})")

        if self.speed_range[0] < 0:
            raise InvalidConfiguration(f"speed_range must be non-negative: {self.speed_range}")
        if self.lifespan_range[0] <= 0:
            raise InvalidConfiguration(f"lifespan_range must be positive: {self.lifespan_range}")

    def replace(self, **overrides):
        """Copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


class ParticleSystem:
    """
    Owns the live confetti particles and advances them once per tick.

    Not thread-safe: ``update``, ``emit_burst`` and any read of ``particles``
    must be serialized by the caller (one thread, or behind a lock).
    """

    def __init__(self, gravity=GRAVITY, damping=DAMPING, max_step=MAX_STEP, clock=time.monotonic, rng=None):
        if not 0 < damping <= 1:
            raise InvalidConfiguration(f"damping must be in (0, 1], got {damping}")
        if max_step <= 0:
            raise InvalidConfiguration(f"max_step must be positive, got {max_step}")

        self.gravity = gravity
        self.damping = damping
        self.max_step = max_step
        self.clock = clock
        self.rng = rng if rng is not None else np.random.default_rng()
        self.last_update_time = None

        self._particles = {}
        self._subscribers = []
        self._colors = list(PALETTE)
        self._shapes = list(ConfettiShape)

    @property
    def particles(self):
        """Snapshot of the live particles, in no particular order."""
        return tuple(self._particles.values())

    def get(self, particle_id):
        return self._particles.get(particle_id)

    def __len__(self):
        return len(self._particles)

    def __iter__(self):
        return iter(self.particles)

    def __contains__(self, item):
        """Accepts a particle or a particle id."""
        return getattr(item, "id", item) in self._particles

    def subscribe(self, callback):
        """
        Call ``callback(system)`` after every update and every non-empty burst.
        Returns a function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self):
        for callback in list(self._subscribers):
            callback(self)

    def update(self, now, bounds=None):
        """
        Advance every particle by the time since the previous call, then drop
        the ones older than their lifespan.

        ``bounds`` is the canvas size. Particles may leave it freely; only age
        removes them.
        """
        elapsed = now - (self.last_update_time if self.last_update_time is not None else now)
        self.last_update_time = now

        # Stalled or paused drivers would otherwise produce huge jumps
        elapsed = min(max(elapsed, 0.0), self.max_step)

        expired = []
        for particle_id in list(self._particles):
            particle = self._particles[particle_id]

            if elapsed > 0:
                # 1. Gravity
                particle.vy += self.gravity * elapsed

                # 2. Damping (air resistance)
                particle.vx *= self.damping
                particle.vy *= self.damping

                # 3. Rotation
                particle.rotation += particle.angular_velocity * elapsed

                # 4. Position
                particle.x += particle.vx * elapsed
                particle.y += particle.vy * elapsed

            # 5. Lifetime
            if particle.is_expired(now):
                expired.append(particle_id)

        for particle_id in expired:
            del self._particles[particle_id]

        if expired:
            logger.debug(f"Expired {len(expired)} particles, {len(self._particles)} remain")

        self._notify()

    def emit_burst(
        self,
        count,
        origin,
        bounds=None,
        emission_angle_range=None,
        speed_range=None,
        lifespan_range=None,
        angular_velocity_range=None,
        config=None,
        now=None,
    ):
        """
        Create ``count`` particles at ``origin``, each with randomized velocity,
        spin, lifespan, color and shape.

        Explicit ranges override the matching fields of ``config``. Everything
        is validated before the first particle is created, so an invalid call
        leaves the system untouched. Returns the new particles.
        """
        if count < 0:
            raise InvalidConfiguration(f"count must be non-negative, got {count}")

        config = (config or EmissionConfig()).replace(
            emission_angle_range=emission_angle_range,
            speed_range=speed_range,
            lifespan_range=lifespan_range,
            angular_velocity_range=angular_velocity_range,
        )
        config.validate()

        if count == 0:
            return []

        # Every particle in the burst ages from the same instant
        creation_time = self.clock() if now is None else now
        x, y = origin

        rng = self.rng
        angles = np.deg2rad(rng.uniform(*config.emission_angle_range, size=count))
        speeds = rng.uniform(*config.speed_range, size=count)
        lifespans = rng.uniform(*config.lifespan_range, size=count)
        rotations = rng.uniform(0.0, 2 * np.pi, size=count)
        angular_velocities = rng.uniform(*config.angular_velocity_range, size=count)
        colors = rng.integers(len(self._colors), size=count)
        shapes = rng.integers(len(self._shapes), size=count)

        created = []
        for i in range(count):
            particle = Particle(
                x,
                y,
                float(np.cos(angles[i]) * speeds[i]),
                float(np.sin(angles[i]) * speeds[i]),
                creation_time,
                float(lifespans[i]),
                self._colors[colors[i]],
                self._shapes[shapes[i]],
                rotation=float(rotations[i]),
                angular_velocity=float(angular_velocities[i]),
            )
            self._particles[particle.id] = particle
            created.append(particle)

        logger.debug(f"Emitted burst of {count} at ({x:.0f}, {y:.0f}), {len(self._particles)} live")

        self._notify()
        return created
