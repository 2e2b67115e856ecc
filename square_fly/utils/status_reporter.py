from square_fly.utils.logutil import get_logger
from square_fly.utils.shared_state import Position

log = get_logger("status")


def report_status(sequencer, position: Position) -> None:
    """Log the live position once the sequencer has left WAITING_FOR_ARM."""
    if not sequencer.started:
        return
    log.info("[%s] x=%.2f, y=%.2f, z=%.2f",
             sequencer.state.label, position.x, position.y, position.z)
