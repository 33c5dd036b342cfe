"""
Projected BAC-over-time graph. Produces an image file or returns data for web/iOS.
"""

from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Tuple

from bac_engine import calculations
from bac_engine.drinks import DrinkRecord
from bac_engine.profile import UserProfile
from bac_engine.safety import LEGAL_LIMIT_BAC


def curve_data(
    records: Iterable[DrinkRecord],
    profile: UserProfile,
    start: datetime,
    step_hours: float = 0.25,
    max_hours: float = 12.0,
) -> List[Tuple[float, float]]:
    """(hours_from_start, bac_percent) for use in any frontend (web, iOS)."""
    return calculations.bac_curve(records, profile, start, max_hours=max_hours, step_hours=step_hours)


def save_bac_graph(
    records: Iterable[DrinkRecord],
    profile: UserProfile,
    start: datetime,
    output_path: str = "bac_graph.png",
    step_hours: float = 0.25,
    max_hours: float = 12.0,
    title: str = "Projected BAC",
) -> str:
    """
    Plot projected BAC with matplotlib and save to file.
    Returns path to saved file. Requires: pip install matplotlib
    """
    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError("matplotlib is required for save_bac_graph. pip install matplotlib")

    points = curve_data(records, profile, start, step_hours=step_hours, max_hours=max_hours)
    if not points:
        times, bacs = [0], [0.0]
    else:
        times, bacs = zip(*points)

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(times, bacs, color="#2563eb", linewidth=2, label="BAC")
    ax.fill_between(times, bacs, alpha=0.2, color="#2563eb")
    ax.axhline(y=LEGAL_LIMIT_BAC, color="#dc2626", linestyle="--", linewidth=1, label="Legal limit (0.08%)")
    ax.axhline(y=calculations.SOBER_FLOOR, color="#16a34a", linestyle=":", linewidth=1, label="Sober (0.01%)")
    ax.set_xlabel(f"Hours from {start:%H:%M}")
    ax.set_ylabel("BAC (%)")
    ax.set_title(title)
    ax.legend(loc="upper right")
    ax.set_ylim(bottom=0)
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path
