from mavsdk import System
from mavsdk.action import ActionError
from mavsdk.offboard import PositionNedYaw, OffboardError

from square_fly.core.config import LAND_MODE, OFFBOARD_MODE
from square_fly.utils.logutil import get_logger
from square_fly.utils.shared_state import Position

log = get_logger("offboard")


def enu_to_ned(target: Position, yaw_deg: float = 0.0) -> PositionNedYaw:
    # ENU (x east, y north, z up) -> NED (north, east, down)
    return PositionNedYaw(target.y, target.x, -target.z, yaw_deg)


def ned_to_enu(north_m: float, east_m: float, down_m: float) -> Position:
    return Position(x=east_m, y=north_m, z=-down_m)


class MavsdkLink:
    """
    Outbound half of the link: setpoints and mode/arm requests.

    Requests return True when the autopilot accepted them. Rejections are
    logged and reported as False, never raised.
    """

    def __init__(self, drone: System):
        self.drone = drone
        self._mode_actions = {
            OFFBOARD_MODE: drone.offboard.start,
            LAND_MODE: drone.action.land,
        }

    async def publish_setpoint(self, target: Position) -> None:
        # A dropped setpoint is not fatal: the next tick sends the target again
        try:
            await self.drone.offboard.set_position_ned(enu_to_ned(target))
        except OffboardError as e:
            log.warning("Failed to publish setpoint: %s", e._result.result)

    async def set_mode(self, mode: str) -> bool:
        action = self._mode_actions.get(mode)
        if action is None:
            log.warning("Mode %s is not supported by this link", mode)
            return False

        try:
            await action()
            return True
        except (OffboardError, ActionError) as e:
            log.warning("Failed to set %s: %s", mode, e._result.result)
            return False

    async def arm(self, value: bool = True) -> bool:
        try:
            if value:
                await self.drone.action.arm()
            else:
                await self.drone.action.disarm()
            return True
        except ActionError as e:
            log.warning("%s rejected: %s", "Arming" if value else "Disarming", e._result.result)
            return False
