import pandas as pd
import matplotlib.pyplot as plt
from pathlib import Path

# --------------------------------------------------
# Import trajectory (single source of truth)
# --------------------------------------------------

from square_fly.trajectories.square import SquareTrajectory


# --------------------------------------------------
# Paths
# --------------------------------------------------

REPO_ROOT = Path(__file__).resolve().parents[2]

CSV_PATH = REPO_ROOT / "logs" / "square_position_mission_log.csv"
OUTPUT_DIR = REPO_ROOT / "analysis" / "square" / "outputs"
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

OUTPUT_PNG = OUTPUT_DIR / "xy_actual_vs_reference.png"


# --------------------------------------------------
# Load telemetry (only samples after the first leg started)
# --------------------------------------------------

df = pd.read_csv(CSV_PATH)
df = df[df["phase"] != "WAITING_FOR_ARM"]

x = df["x_m"]
y = df["y_m"]

x_ref, y_ref = SquareTrajectory().outline_xy()


# --------------------------------------------------
# Plot
# --------------------------------------------------

plt.figure(figsize=(7, 7))

plt.plot(x_ref, y_ref, linestyle="--", linewidth=2, marker="o", label="Reference square")
plt.plot(x, y, linewidth=2, label="UAV trajectory")

if len(df):
    plt.scatter(x.iloc[0], y.iloc[0], color="green", s=60, label="Start")
    plt.scatter(x.iloc[-1], y.iloc[-1], color="red", s=60, label="End")

plt.axis("equal")
plt.grid(True)

plt.xlabel("East x [m]")
plt.ylabel("North y [m]")
plt.title("Square Offboard Trajectory (PX4 + MAVSDK)")

plt.legend()

# --------------------------------------------------
# Save
# --------------------------------------------------

plt.savefig(OUTPUT_PNG, dpi=200, bbox_inches="tight")
print(f"Saved plot → {OUTPUT_PNG}")

plt.show()
