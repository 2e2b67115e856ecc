"""
Fixed-rate tick loop driving the square flight.

1) wait for the link to report a connection (no timeout)
2) stream the first target for the warm-up count
3) every tick: publish target, mode/arm requests, sequencer, status line

Clock and sleep are injectable so the loop can be driven by a simulated
clock; by default they are time.monotonic and asyncio.sleep.
"""

import asyncio
import time

from square_fly.core.config import SquareFlightConfig
from square_fly.core.mode_controller import ModeArmingController
from square_fly.core.sequencer import SequencerPhase, WaypointSequencer
from square_fly.utils.logutil import get_logger
from square_fly.utils.shared_state import FlightContext
from square_fly.utils.status_reporter import report_status

log = get_logger("flight_loop")


def build_sequencer(link, cfg: SquareFlightConfig) -> WaypointSequencer:
    controller = ModeArmingController(
        link,
        retry_interval_s=cfg.request_interval_s,
        offboard_mode=cfg.offboard_mode,
        landing_mode=cfg.landing_mode,
    )
    return WaypointSequencer(
        cfg.waypoints,
        controller,
        dwell_s=cfg.leg_dwell_s,
        offboard_mode=cfg.offboard_mode,
    )


async def wait_for_connection(state: FlightContext, tick_s: float, sleep=asyncio.sleep) -> bool:
    """
    Block until the mirror reports a connection.

    There is no timeout: if the link never connects this waits until
    shutdown. Returns False if shutdown came first.
    """
    log.info("Waiting for autopilot connection...")
    while state.running and not state.current_status().connected:
        await sleep(tick_s)

    if state.running:
        log.info("Autopilot connected")
    return state.running


async def prestream_setpoints(link, state: FlightContext, target, n: int, tick_s: float, sleep=asyncio.sleep):
    """PX4 rejects the offboard switch unless setpoints are already streaming."""
    log.info("Pre-streaming %d setpoints...", n)
    for _ in range(n):
        if not state.running:
            break
        await link.publish_setpoint(target)
        await sleep(tick_s)


async def tick(link, state: FlightContext, sequencer: WaypointSequencer, now: float) -> None:
    status = state.current_status()

    await link.publish_setpoint(sequencer.target)

    # Once landing is requested the offboard/arm chain must not pull the
    # vehicle back into offboard
    if sequencer.phase is not SequencerPhase.LANDING:
        await sequencer.controller.step(status, now)

    await sequencer.step(status, now)
    report_status(sequencer, state.current_position())


async def run_flight(
    link,
    state: FlightContext,
    sequencer: WaypointSequencer,
    cfg: SquareFlightConfig,
    clock=time.monotonic,
    sleep=asyncio.sleep,
) -> WaypointSequencer:
    tick_s = cfg.tick_s

    if not await wait_for_connection(state, tick_s, sleep):
        return sequencer

    await prestream_setpoints(link, state, sequencer.target, cfg.warmup_setpoints, tick_s, sleep)

    while state.running:
        await tick(link, state, sequencer, clock())
        await sleep(tick_s)

    log.info("Flight loop stopped in %s", sequencer.state.label)
    return sequencer
