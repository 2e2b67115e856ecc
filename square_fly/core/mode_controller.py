"""
Mode / arming requests toward the autopilot.

The controller walks a strict precondition chain each tick: offboard mode
first, arming only once offboard is reported. Every request, whatever its
outcome, restarts a single shared retry interval.
"""

from typing import Optional

from square_fly.core.config import LAND_MODE, OFFBOARD_MODE
from square_fly.utils.logutil import get_logger
from square_fly.utils.shared_state import VehicleStatus

log = get_logger("mode_controller")


class RequestThrottle:
    def __init__(self, interval_s: float):
        self.interval_s = interval_s
        self.last_attempt_time: Optional[float] = None

    def due(self, now: float) -> bool:
        if self.last_attempt_time is None:
            return True
        return now - self.last_attempt_time > self.interval_s

    def mark(self, now: float) -> None:
        self.last_attempt_time = now


class ModeArmingController:
    def __init__(
        self,
        link,
        retry_interval_s: float = 5.0,
        offboard_mode: str = OFFBOARD_MODE,
        landing_mode: str = LAND_MODE,
    ):
        self.link = link
        self.throttle = RequestThrottle(retry_interval_s)
        self.offboard_mode = offboard_mode
        self.landing_mode = landing_mode

    async def step(self, status: VehicleStatus, now: float) -> Optional[str]:
        """
        Issue at most one offboard or arm request.

        Returns the name of the request sent ("mode" or "arm"), or None.
        """
        if status.mode != self.offboard_mode:
            if not self.throttle.due(now):
                return None
            if await self.link.set_mode(self.offboard_mode):
                log.info("Offboard enabled")
            else:
                log.warning("Offboard request not accepted, retrying in %.1fs",
                            self.throttle.interval_s)
            self.throttle.mark(now)
            return "mode"

        if not status.armed and self.throttle.due(now):
            if await self.link.arm(True):
                log.info("Vehicle armed")
            else:
                log.warning("Arm request not accepted, retrying in %.1fs",
                            self.throttle.interval_s)
            self.throttle.mark(now)
            return "arm"

        return None

    async def request_landing(self, status: VehicleStatus, now: float) -> bool:
        """Ask for the landing mode unless it is already active. True if a request went out."""
        if status.mode == self.landing_mode or not self.throttle.due(now):
            return False

        if await self.link.set_mode(self.landing_mode):
            log.info("%s enabled", self.landing_mode)
        else:
            log.warning("%s request not accepted, retrying in %.1fs",
                        self.landing_mode, self.throttle.interval_s)
        self.throttle.mark(now)
        return True
