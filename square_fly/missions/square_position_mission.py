"""
Square Position Mission

Flies the scripted rectangle with PX4 Position Offboard control:
stream setpoints, switch to OFFBOARD, arm, hold each corner for the dwell
time, then hand over to AUTO.LAND.

Operational notes:
- The mission waits for the autopilot connection without a timeout.
  If the link never comes up it waits until interrupted.
- Disarming or losing the link mid-flight does not restart the sequence;
  targets keep advancing on the local clock.
"""

import argparse
import asyncio
from contextlib import suppress

from square_fly.core.config import SquareFlightConfig
from square_fly.core.flight_loop import build_sequencer, run_flight
from square_fly.core.offboard_helpers import MavsdkLink
from square_fly.core.px4_connection import connect_px4
from square_fly.utils.logutil import get_logger, setup_logging
from square_fly.utils.shared_state import FlightContext
from square_fly.utils.telemetry_logger import log_telemetry_csv
from square_fly.utils.telemetry_watchers import WATCHERS

LOG_FILE = "square_position_mission_log.csv"

log = get_logger("mission")


async def cancel_and_await(tasks):
    """
    Cancel tasks and wait for all of them to finish.

    A task that already died with an error is logged, not re-raised, so one
    broken telemetry stream cannot abort shutdown.
    """
    for t in tasks:
        t.cancel()
    results = await asyncio.gather(*tasks, return_exceptions=True)
    for t, result in zip(tasks, results):
        if isinstance(result, Exception):
            log.warning("Task %s failed: %r", t.get_name(), result)


async def fly_square(cfg: SquareFlightConfig, log_file: str = LOG_FILE):
    drone = await connect_px4(cfg.system_address)
    link = MavsdkLink(drone)

    state = FlightContext()
    sequencer = build_sequencer(link, cfg)

    watchers = [asyncio.create_task(w(drone, state)) for w in WATCHERS]
    logger_task = asyncio.create_task(log_telemetry_csv(state, sequencer, log_file))

    try:
        await run_flight(link, state, sequencer, cfg)
    finally:
        state.running = False
        # the CSV logger exits on its own once running is cleared
        with suppress(asyncio.CancelledError):
            await logger_task
        await cancel_and_await(watchers)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Fly a scripted square in PX4 offboard mode")
    parser.add_argument("--system-address", default=SquareFlightConfig.system_address,
                        help="MAVSDK connection URL (default: %(default)s)")
    parser.add_argument("--rate", type=float, default=SquareFlightConfig.offboard_rate_hz,
                        help="setpoint rate in Hz, must exceed 2 (default: %(default)s)")
    parser.add_argument("--dwell", type=float, default=SquareFlightConfig.leg_dwell_s,
                        help="seconds to hold each corner (default: %(default)s)")
    parser.add_argument("--log-file", default=LOG_FILE,
                        help="CSV flight log name under logs/ (default: %(default)s)")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(log_to_file=True)

    cfg = SquareFlightConfig(
        system_address=args.system_address,
        offboard_rate_hz=args.rate,
        leg_dwell_s=args.dwell,
    )

    try:
        asyncio.run(fly_square(cfg, args.log_file))
    except KeyboardInterrupt:
        log.info("Interrupted, mission stopped")


if __name__ == "__main__":
    main()
