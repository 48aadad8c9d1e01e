import uuid
from enum import Enum

from confetti.exceptions import InvalidConfiguration


class ConfettiShape(Enum):
    """Shapes a confetti piece can be drawn as."""

    RECTANGLE = "rectangle"
    CIRCLE = "circle"


class Particle:
    """
    A single confetti piece.

    Identity is the ``id`` alone: two particles compare equal (and hash the
    same) when their ids match, whatever their kinematic state.
    """

    def __init__(
        self,
        x,
        y,
        vx,
        vy,
        creation_timestamp,
        lifespan,
        color,
        shape_type,
        rotation=0.0,
        angular_velocity=0.0,
    ):
        if lifespan <= 0:
            raise InvalidConfiguration(f"lifespan must be positive, got {lifespan}")

        self.id = uuid.uuid4()
        self.x = x
        self.y = y
        self.vx = vx
        self.vy = vy
        self.ax = 0.0
        self.ay = 0.0
        self.creation_timestamp = creation_timestamp
        self.lifespan = lifespan
        self.color = color
        self.shape_type = shape_type
        self.rotation = rotation
        self.angular_velocity = angular_velocity

    @property
    def position(self):
        return (self.x, self.y)

    @property
    def velocity(self):
        return (self.vx, self.vy)

    @property
    def acceleration(self):
        return (self.ax, self.ay)

    def age(self, now):
        """Seconds elapsed since the particle was created."""
        return now - self.creation_timestamp

    def is_expired(self, now):
        return self.age(now) > self.lifespan

    def __eq__(self, other):
        if not isinstance(other, Particle):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return (
            f"Particle(id={self.id}, position=({self.x:.1f}, {self.y:.1f}), "
            f"color={self.color!r}, shape={self.shape_type.value})"
        )
