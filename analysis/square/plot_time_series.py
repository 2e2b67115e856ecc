"""
Square Mission: Target vs Actual Time Series

1) Keeps samples from LEG_1 onward (phase column)
2) Time re-zeroed at the first leg
3) Plots commanded target and flown position per axis, plus XY tracking error
"""

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from pathlib import Path


# --------------------------------------------------
# Paths
# --------------------------------------------------

REPO_ROOT = Path(__file__).resolve().parents[2]
CSV_PATH = REPO_ROOT / "logs" / "square_position_mission_log.csv"

OUTPUT_DIR = Path(__file__).resolve().parent / "outputs"
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

OUTPUT_PNG = OUTPUT_DIR / "square_time_series.png"


# --------------------------------------------------
# Load CSV
# --------------------------------------------------

df = pd.read_csv(CSV_PATH)
df = df[df["phase"] != "WAITING_FOR_ARM"].reset_index(drop=True)

assert len(df), "No flight phase found in CSV"

t = df["t"].values - df["t"].values[0]

error_xy = np.sqrt(
    (df["x_m"] - df["target_x_m"]) ** 2 + (df["y_m"] - df["target_y_m"]) ** 2
)


# --------------------------------------------------
# Plot
# --------------------------------------------------

fig, axes = plt.subplots(4, 1, figsize=(10, 10), sharex=True)

for ax, axis in zip(axes[:3], ("x", "y", "z")):
    ax.plot(t, df[f"target_{axis}_m"], linestyle="--", linewidth=2, label="Target")
    ax.plot(t, df[f"{axis}_m"], linewidth=1.5, label="Actual")
    ax.set_ylabel(f"{axis} [m]")
    ax.grid(True)
    ax.legend(loc="upper right")

axes[3].plot(t, error_xy, color="tab:red", linewidth=1.5)
axes[3].set_ylabel("XY error [m]")
axes[3].set_xlabel("Time since LEG_1 [s]")
axes[3].grid(True)

# Shade landing phase
landing = df["phase"] == "LANDING"
if landing.any():
    t_land = t[landing.values.argmax()]
    for ax in axes:
        ax.axvspan(t_land, t[-1], color="grey", alpha=0.15)

fig.suptitle("Square Offboard Mission: Target vs Actual")
fig.tight_layout()

fig.savefig(OUTPUT_PNG, dpi=200, bbox_inches="tight")
print(f"Saved plot → {OUTPUT_PNG}")

plt.show()
