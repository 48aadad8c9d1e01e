"""Pytest configuration and shared fixtures."""

import pytest

from confetti.particle import ConfettiShape, Particle
from confetti.particle_system import ParticleSystem

ORIGIN = (200.0, 400.0)


@pytest.fixture
def system():
    """A system whose bursts are stamped at t=0 unless `now` is passed."""
    return ParticleSystem(clock=lambda: 0.0)


@pytest.fixture
def make_particle():
    def _make(vx=0.0, vy=0.0, lifespan=5.0, created=0.0, angular_velocity=1.0):
        return Particle(
            *ORIGIN,
            vx,
            vy,
            created,
            lifespan,
            "red",
            ConfettiShape.RECTANGLE,
            rotation=0.0,
            angular_velocity=angular_velocity,
        )

    return _make


@pytest.fixture
def insert():
    """Place hand-built particles into a system."""

    def _insert(system, *particles):
        for particle in particles:
            system._particles[particle.id] = particle

    return _insert
