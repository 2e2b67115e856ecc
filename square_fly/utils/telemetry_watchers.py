from dataclasses import replace

from mavsdk import System

from square_fly.core.offboard_helpers import ned_to_enu
from square_fly.utils.shared_state import FlightContext

# MAVSDK FlightMode name -> PX4 custom mode name
PX4_MODE_NAMES = {
    "READY": "AUTO.READY",
    "TAKEOFF": "AUTO.TAKEOFF",
    "HOLD": "AUTO.LOITER",
    "MISSION": "AUTO.MISSION",
    "RETURN_TO_LAUNCH": "AUTO.RTL",
    "LAND": "AUTO.LAND",
    "OFFBOARD": "OFFBOARD",
    "FOLLOW_ME": "AUTO.FOLLOW_TARGET",
    "MANUAL": "MANUAL",
    "ALTCTL": "ALTCTL",
    "POSCTL": "POSCTL",
    "ACRO": "ACRO",
    "STABILIZED": "STABILIZED",
    "RATTITUDE": "RATTITUDE",
}


def px4_mode_name(flight_mode) -> str:
    name = getattr(flight_mode, "name", str(flight_mode))
    return PX4_MODE_NAMES.get(name, name)


async def watch_connection(drone: System, state: FlightContext):
    async for conn in drone.core.connection_state():
        state.on_status_update(replace(state.current_status(), connected=conn.is_connected))
        if not state.running:
            break


async def watch_armed(drone: System, state: FlightContext):
    async for armed in drone.telemetry.armed():
        state.on_status_update(replace(state.current_status(), armed=armed))
        if not state.running:
            break


async def watch_flight_mode(drone: System, state: FlightContext):
    async for mode in drone.telemetry.flight_mode():
        state.on_status_update(replace(state.current_status(), mode=px4_mode_name(mode)))
        if not state.running:
            break


async def watch_position(drone: System, state: FlightContext):
    async for data in drone.telemetry.position_velocity_ned():
        pos = data.position
        state.on_position_update(ned_to_enu(pos.north_m, pos.east_m, pos.down_m))
        if not state.running:
            break


WATCHERS = (watch_connection, watch_armed, watch_flight_mode, watch_position)
