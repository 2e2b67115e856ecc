import asyncio
import csv
import time
from pathlib import Path

from .logutil import default_log_dir, get_logger
from .shared_state import FlightContext

log = get_logger("telemetry_logger")

CSV_HEADER = [
    "t",
    "x_m", "y_m", "z_m",
    "target_x_m", "target_y_m", "target_z_m",
    "mode", "armed", "phase",
]


async def log_telemetry_csv(
    state: FlightContext,
    sequencer,
    filename: str,
    log_dir=None,
    period_s: float = 0.1,
) -> Path:
    """
    Write live position, current target and sequencer phase to a CSV file.

    Files go to <repo_root>/logs/ unless log_dir is given, independent of
    the current working directory. Runs until state.running is cleared.
    """
    logs_dir = Path(log_dir) if log_dir else default_log_dir()
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / filename

    log.info("Telemetry logger started -> %s", log_path)

    with open(log_path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)

        t0 = time.time()

        while state.running:
            pos = state.current_position()
            status = state.current_status()
            target = sequencer.target

            writer.writerow([
                f"{time.time() - t0:.3f}",
                f"{pos.x:.3f}", f"{pos.y:.3f}", f"{pos.z:.3f}",
                f"{target.x:.3f}", f"{target.y:.3f}", f"{target.z:.3f}",
                status.mode,
                int(status.armed),
                sequencer.state.label,
            ])

            await asyncio.sleep(period_s)

    log.info("Telemetry logger stopped")
    return log_path
