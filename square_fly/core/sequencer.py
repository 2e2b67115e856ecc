"""
Waypoint sequencer for the square flight.

WAITING_FOR_ARM -> LEG_1 .. LEG_N -> LANDING

Leg k holds waypoint k for the dwell time, measured from the moment the
leg was entered. Transitions depend only on vehicle status (to leave
WAITING_FOR_ARM) and on the local clock (everything after); the live
position is never consulted.

Known limitation: losing arm or connection mid-sequence does not reset
the sequencer. It keeps publishing and advancing on elapsed time.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from square_fly.core.config import OFFBOARD_MODE
from square_fly.utils.logutil import get_logger
from square_fly.utils.shared_state import Position, VehicleStatus

log = get_logger("sequencer")


class SequencerPhase(Enum):
    WAITING_FOR_ARM = "WAITING_FOR_ARM"
    LEG = "LEG"
    LANDING = "LANDING"


@dataclass(frozen=True)
class SequencerState:
    phase: SequencerPhase = SequencerPhase.WAITING_FOR_ARM
    leg: int = 0  # 1-based while phase is LEG
    last_transition_time: Optional[float] = None

    @property
    def label(self) -> str:
        if self.phase is SequencerPhase.LEG:
            return f"LEG_{self.leg}"
        return self.phase.value


class WaypointSequencer:
    def __init__(
        self,
        waypoints: Sequence[Position],
        controller,
        dwell_s: float = 5.0,
        offboard_mode: str = OFFBOARD_MODE,
    ):
        if not waypoints:
            raise ValueError("at least one waypoint is required")

        self.waypoints = list(waypoints)
        self.controller = controller
        self.dwell_s = dwell_s
        self.offboard_mode = offboard_mode

        self.state = SequencerState()
        self.target = self.waypoints[0]

        self._handlers = {
            SequencerPhase.WAITING_FOR_ARM: self._step_waiting,
            SequencerPhase.LEG: self._step_leg,
            SequencerPhase.LANDING: self._step_landing,
        }

    @property
    def phase(self) -> SequencerPhase:
        return self.state.phase

    @property
    def started(self) -> bool:
        return self.state.phase is not SequencerPhase.WAITING_FOR_ARM

    async def step(self, status: VehicleStatus, now: float) -> None:
        await self._handlers[self.state.phase](status, now)

    def _enter(self, state: SequencerState) -> None:
        log.info("%s -> %s", self.state.label, state.label)
        self.state = state

    def _dwell_elapsed(self, now: float) -> bool:
        return now - self.state.last_transition_time > self.dwell_s

    async def _step_waiting(self, status: VehicleStatus, now: float) -> None:
        if status.mode == self.offboard_mode and status.armed:
            self._enter(SequencerState(SequencerPhase.LEG, 1, now))

    async def _step_leg(self, status: VehicleStatus, now: float) -> None:
        if not self._dwell_elapsed(now):
            return

        leg = self.state.leg
        if leg < len(self.waypoints):
            self.target = self.waypoints[leg]
            self._enter(SequencerState(SequencerPhase.LEG, leg + 1, now))
            log.info("New target x=%.2f, y=%.2f, z=%.2f", *self.target.as_tuple())
        else:
            self._enter(SequencerState(SequencerPhase.LANDING, 0, now))
            await self._step_landing(status, now)

    async def _step_landing(self, status: VehicleStatus, now: float) -> None:
        await self.controller.request_landing(status, now)
