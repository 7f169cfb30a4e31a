"""Time-dependent frame rotations.

A :class:`Rotation` pairs an orthonormal 3x3 matrix ``M`` with its time
derivative ``dM``. Both follow the frame (passive) convention: ``M @ r``
expresses a vector given in the origin frame in the target frame, and
``dM @ r + M @ v`` yields the target-frame velocity, which accounts for the
target frame rotating with respect to the origin frame.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.spatial.transform import Rotation as _ScipyRotation

_ORTHONORMAL_TOL = 1e-9


def skew(v: ArrayLike) -> NDArray[np.float64]:
    """Cross-product matrix ``S`` such that ``S @ r == np.cross(v, r)``."""
    x, y, z = np.asarray(v, dtype=np.float64)
    return np.array([[0.0, -z, y], [z, 0.0, -x], [-y, x, 0.0]])


@dataclass(frozen=True, eq=False)
class Rotation:
    """An orientation and its rate of change.

    Attributes:
        matrix: Orthonormal rotation matrix (det = +1), shape (3, 3).
        derivative: Time derivative of ``matrix`` in 1/s, shape (3, 3).
    """

    matrix: NDArray[np.float64]
    derivative: NDArray[np.float64] = field(default_factory=lambda: np.zeros((3, 3)))

    @classmethod
    def identity(cls) -> Rotation:
        return cls(np.eye(3), np.zeros((3, 3)))

    @classmethod
    def from_matrix(cls, matrix: ArrayLike, angular_velocity: ArrayLike | None = None) -> Rotation:
        """Create a rotation from a matrix, checking that it is a proper rotation.

        Args:
            matrix: 3x3 matrix.
            angular_velocity: Optional angular velocity of the target frame
                relative to the origin frame, in rad/s, in target axes.

        Raises:
            ValueError: If the matrix is not 3x3, not orthonormal, or a
                reflection.
        """
        m = np.array(matrix, dtype=np.float64)
        if m.shape != (3, 3):
            raise ValueError(f"Rotation matrix must be 3x3, got shape {m.shape}")
        if not np.allclose(m @ m.T, np.eye(3), atol=_ORTHONORMAL_TOL):
            raise ValueError("Rotation matrix is not orthonormal")
        if np.linalg.det(m) < 0.0:
            raise ValueError("Rotation matrix has determinant -1 (reflection)")
        rotation = cls(m, np.zeros((3, 3)))
        if angular_velocity is not None:
            rotation = rotation.with_angular_velocity(angular_velocity)
        return rotation

    @classmethod
    def from_axis_angle(cls, axis: ArrayLike, angle: float) -> Rotation:
        """Rotation of the frame by ``angle`` radians about ``axis``.

        ``from_axis_angle([0, 0, 1], a)`` equals the elementary frame rotation
        R3(a) used throughout the IERS conventions.

        Raises:
            ValueError: If the axis has zero length.
        """
        axis = np.asarray(axis, dtype=np.float64)
        norm = np.linalg.norm(axis)
        if norm == 0.0:
            raise ValueError("Rotation axis must be non-zero")
        active = _ScipyRotation.from_rotvec(axis / norm * angle).as_matrix()
        return cls(active.T, np.zeros((3, 3)))

    @classmethod
    def from_euler(cls, sequence: str, angles: Sequence[float]) -> Rotation:
        """Compose elementary frame rotations about body axes.

        ``from_euler("ZXZ", [a, b, c])`` equals R3(c) @ R1(b) @ R3(a): the
        first angle is applied first.

        Raises:
            ValueError: If the sequence is not made of the axes X, Y and Z.
        """
        active = _ScipyRotation.from_euler(sequence.upper(), angles).as_matrix()
        return cls(active.T, np.zeros((3, 3)))

    @classmethod
    def from_quaternion(cls, quaternion: ArrayLike) -> Rotation:
        """Create a rotation from a scalar-last unit quaternion (x, y, z, w)."""
        active = _ScipyRotation.from_quat(quaternion).as_matrix()
        return cls(active.T, np.zeros((3, 3)))

    def as_quaternion(self) -> NDArray[np.float64]:
        """Scalar-last unit quaternion, the inverse of :meth:`from_quaternion`."""
        return _ScipyRotation.from_matrix(self.matrix.T).as_quat()

    def with_angular_velocity(self, omega: ArrayLike) -> Rotation:
        """Set the derivative from the target frame's angular velocity.

        Args:
            omega: Angular velocity of the target frame relative to the
                origin frame in rad/s, expressed in target-frame axes.
        """
        return Rotation(self.matrix, -skew(omega) @ self.matrix)

    def with_derivative(self, derivative: ArrayLike) -> Rotation:
        return Rotation(self.matrix, np.array(derivative, dtype=np.float64))

    @property
    def angular_velocity(self) -> NDArray[np.float64]:
        """Angular velocity of the target frame in rad/s, in target axes."""
        s = -self.derivative @ self.matrix.T
        return np.array([s[2, 1], s[0, 2], s[1, 0]])

    def __matmul__(self, other: object) -> Rotation:
        # (A @ B) applies B first, then A.
        if not isinstance(other, Rotation):
            return NotImplemented
        return Rotation(
            self.matrix @ other.matrix,
            self.derivative @ other.matrix + self.matrix @ other.derivative,
        )

    def compose(self, other: Rotation) -> Rotation:
        """Apply ``self`` first, then ``other``."""
        return other @ self

    def inverse(self) -> Rotation:
        return Rotation(self.matrix.T, self.derivative.T)

    transpose = inverse

    def apply(self, position: ArrayLike) -> NDArray[np.float64]:
        """Rotate position vectors of shape (3,) or (N, 3)."""
        return np.asarray(position, dtype=np.float64) @ self.matrix.T

    def apply_state(
        self, position: ArrayLike, velocity: ArrayLike
    ) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Rotate positions and velocities of shape (3,) or (N, 3).

        Returns:
            Tuple of (position, velocity) in the target frame.
        """
        r = np.asarray(position, dtype=np.float64)
        v = np.asarray(velocity, dtype=np.float64)
        return r @ self.matrix.T, r @ self.derivative.T + v @ self.matrix.T

    def is_close(self, other: Rotation, atol: float = 1e-12) -> bool:
        return bool(
            np.allclose(self.matrix, other.matrix, rtol=0.0, atol=atol)
            and np.allclose(self.derivative, other.derivative, rtol=0.0, atol=atol)
        )

    def __repr__(self) -> str:
        return f"Rotation(matrix={self.matrix.tolist()!r}, angular_velocity={self.angular_velocity.tolist()!r})"
