"""
Rectangular trajectory generator.

Pure reference path for the scripted square flight: a start point and a
list of single-axis moves, expressed in the local ENU frame (x east,
y north, z up).

No PX4 / MAVSDK code here.
"""

from typing import List, Sequence, Tuple

from square_fly.utils.shared_state import Position


# (axis, new value) applied one per leg transition
DEFAULT_MOVES: Tuple[Tuple[str, float], ...] = (
    ("y", 2.0),
    ("x", 2.0),
    ("y", 0.0),
    ("x", 0.0),
)


class SquareTrajectory:
    def __init__(
        self,
        start: Tuple[float, float, float] = (0.0, 9.0, 6.0),
        moves: Sequence[Tuple[str, float]] = DEFAULT_MOVES,
    ):
        for axis, _ in moves:
            if axis not in ("x", "y", "z"):
                raise ValueError(f"unknown axis {axis!r}")

        self.start = Position(*start)
        self.moves = tuple(moves)

    def waypoints(self) -> List[Position]:
        """
        Targets held on each leg, in order.

        Every waypoint after the first differs from its predecessor in
        exactly one coordinate.
        """
        points = [self.start]
        for axis, value in self.moves:
            points.append(points[-1].with_axis(axis, value))
        return points

    def outline_xy(self) -> Tuple[List[float], List[float]]:
        """XY vertices of the path, for plotting."""
        points = self.waypoints()
        return [p.x for p in points], [p.y for p in points]
