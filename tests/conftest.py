import asyncio
from types import SimpleNamespace

import pytest
from mavsdk.action import ActionError, ActionResult
from mavsdk.offboard import OffboardError, OffboardResult

from square_fly.core.config import SquareFlightConfig
from square_fly.core.flight_loop import build_sequencer, run_flight
from square_fly.core.offboard_helpers import MavsdkLink
from square_fly.utils.shared_state import FlightContext, VehicleStatus


class FakeClock:
    """Simulated clock: every sleep advances exactly one tick."""

    def __init__(self, rate_hz: float = 20.0):
        self.rate_hz = rate_hz
        self.ticks = 0
        self.hooks = []

    def __call__(self) -> float:
        return self.ticks / self.rate_hz

    async def sleep(self, _dt):
        self.ticks += 1
        now = self()
        for hook in list(self.hooks):
            hook(now)


class FakeLink:
    """
    Records every outbound call with the simulated time it was made.

    With reflect=True an accepted request is applied to the mirrored
    status straight away, like a cooperative autopilot.
    """

    def __init__(self, clock, state: FlightContext, reflect: bool = False):
        self.clock = clock
        self.state = state
        self.reflect = reflect
        self.accept_mode = True
        self.accept_arm = True

        self.setpoints = []       # (t, Position)
        self.mode_requests = []   # (t, mode, status at call time)
        self.arm_requests = []    # (t, value, status at call time)

    async def publish_setpoint(self, target):
        self.setpoints.append((self.clock(), target))

    async def set_mode(self, mode):
        status = self.state.current_status()
        self.mode_requests.append((self.clock(), mode, status))
        if self.accept_mode and self.reflect:
            self.state.on_status_update(VehicleStatus(status.connected, mode, status.armed))
        return self.accept_mode

    async def arm(self, value=True):
        status = self.state.current_status()
        self.arm_requests.append((self.clock(), value, status))
        if self.accept_arm and self.reflect:
            self.state.on_status_update(VehicleStatus(status.connected, status.mode, value))
        return self.accept_arm

    def requests(self):
        """All mode and arm requests, in time order."""
        merged = [(t, "mode") for t, _, _ in self.mode_requests]
        merged += [(t, "arm") for t, _, _ in self.arm_requests]
        return sorted(merged)


class FakeDrone:
    """
    Stand-in for mavsdk.System behind the real MavsdkLink.

    Any call named in `fail` raises the matching MAVSDK error.
    """

    def __init__(self):
        self.calls = []
        self.fail = set()
        self.offboard = SimpleNamespace(
            start=self._call("offboard.start", self._offboard_error),
            set_position_ned=self._setpoint,
        )
        self.action = SimpleNamespace(
            land=self._call("action.land", self._action_error),
            arm=self._call("action.arm", self._action_error),
            disarm=self._call("action.disarm", self._action_error),
        )

    def _call(self, name, error):
        async def method():
            self.calls.append(name)
            if name in self.fail:
                raise error(name)
        return method

    async def _setpoint(self, sp):
        self.calls.append(("setpoint", sp))
        if "offboard.set_position_ned" in self.fail:
            raise OffboardError(
                OffboardResult(OffboardResult.Result.CONNECTION_ERROR, "lost"),
                "set_position_ned()",
            )

    @staticmethod
    def _offboard_error(origin):
        result = OffboardResult(OffboardResult.Result.COMMAND_DENIED, "denied")
        return OffboardError(result, origin)

    @staticmethod
    def _action_error(origin):
        result = ActionResult(ActionResult.Result.COMMAND_DENIED, "denied")
        return ActionError(result, origin)


class Flight:
    def __init__(self, reflect=False, connected=True, drone=None, **cfg_kwargs):
        self.cfg = SquareFlightConfig(**cfg_kwargs)
        self.clock = FakeClock(self.cfg.offboard_rate_hz)
        self.state = FlightContext()
        if connected:
            self.state.on_status_update(VehicleStatus(connected=True))
        if drone is not None:
            self.link = MavsdkLink(drone)
        else:
            self.link = FakeLink(self.clock, self.state, reflect=reflect)
        self.sequencer = build_sequencer(self.link, self.cfg)

    @property
    def warmup_end(self) -> float:
        return self.cfg.warmup_setpoints / self.cfg.offboard_rate_hz

    def at(self, t: float, fn):
        """Run fn once when simulated time first reaches t."""
        fired = []

        def hook(now):
            if not fired and now >= t:
                fired.append(now)
                fn()

        self.clock.hooks.append(hook)

    def set_status(self, t: float, **fields):
        def apply():
            current = self.state.current_status()
            values = dict(connected=current.connected, mode=current.mode, armed=current.armed)
            values.update(fields)
            self.state.on_status_update(VehicleStatus(**values))

        self.at(t, apply)

    def run(self, until: float):
        def stop():
            self.state.running = False

        self.at(until, stop)
        asyncio.run(run_flight(
            self.link, self.state, self.sequencer, self.cfg,
            clock=self.clock, sleep=self.clock.sleep,
        ))
        return self.sequencer

    def target_history(self):
        """[(first publish time, target)] for each distinct consecutive target."""
        history = []
        for t, target in self.link.setpoints:
            if not history or history[-1][1] != target:
                history.append((t, target))
        return history


@pytest.fixture
def make_flight():
    return Flight


@pytest.fixture
def drone():
    return FakeDrone()
