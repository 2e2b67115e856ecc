from mavsdk import System

from square_fly.utils.logutil import get_logger

log = get_logger("px4_connection")


async def connect_px4(system_address: str) -> System:
    """
    Open the MAVSDK link without waiting for the vehicle.

    Connectivity is observed through the telemetry mirror instead, so the
    flight loop decides when to start talking to the autopilot.
    """
    drone = System()
    log.info("Opening link to %s", system_address)
    await drone.connect(system_address=system_address)
    return drone
