from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class Position:
    # Local ENU frame: x east, y north, z up (meters)
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def with_axis(self, axis: str, value: float) -> "Position":
        return replace(self, **{axis: value})

    def as_tuple(self):
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class VehicleStatus:
    connected: bool = False
    mode: str = ""
    armed: bool = False


@dataclass
class FlightContext:
    """
    Latest telemetry snapshots pushed in by the link.

    Each group (status, position) is replaced with a single assignment, so
    readers always see a whole value, never a half-updated one. Before the
    first update both hold their zero values.
    """

    status: VehicleStatus = field(default_factory=VehicleStatus)
    position: Position = field(default_factory=Position)

    # Control flags
    running: bool = True

    def on_status_update(self, status: VehicleStatus) -> None:
        self.status = status

    def on_position_update(self, position: Position) -> None:
        self.position = position

    def current_status(self) -> VehicleStatus:
        return self.status

    def current_position(self) -> Position:
        return self.position
