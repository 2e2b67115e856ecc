from dataclasses import dataclass, field
from typing import List

from square_fly.trajectories.square import SquareTrajectory
from square_fly.utils.shared_state import Position

# PX4 custom mode names as reported by the autopilot
OFFBOARD_MODE = "OFFBOARD"
LAND_MODE = "AUTO.LAND"

# PX4 drops out of offboard if setpoints arrive slower than this
MIN_OFFBOARD_RATE_HZ = 2.0


@dataclass
class SquareFlightConfig:
    system_address: str = "udp://:14540"   # SITL default
    offboard_rate_hz: float = 20.0         # 0.05s
    warmup_setpoints: int = 100
    request_interval_s: float = 5.0
    leg_dwell_s: float = 5.0
    offboard_mode: str = OFFBOARD_MODE
    landing_mode: str = LAND_MODE
    waypoints: List[Position] = field(default_factory=lambda: SquareTrajectory().waypoints())

    def __post_init__(self):
        if self.offboard_rate_hz <= MIN_OFFBOARD_RATE_HZ:
            raise ValueError(
                f"offboard_rate_hz must exceed {MIN_OFFBOARD_RATE_HZ} Hz, got {self.offboard_rate_hz}"
            )
        if self.request_interval_s <= 0 or self.leg_dwell_s <= 0:
            raise ValueError("request_interval_s and leg_dwell_s must be positive")
        if self.warmup_setpoints < 0:
            raise ValueError("warmup_setpoints must not be negative")
        if not self.waypoints:
            raise ValueError("at least one waypoint is required")

    @property
    def tick_s(self) -> float:
        return 1.0 / self.offboard_rate_hz
