"""Safety classification and drive-risk advisory helpers.

Conservative messaging for driving decisions based on estimated BAC.
It is educational only and never guarantees legal/safe driving.
"""

from datetime import timedelta
from enum import Enum

from bac_engine.calculations import LEGAL_LIMIT, SOBER_FLOOR, time_until_legal

LEGAL_LIMIT_BAC = LEGAL_LIMIT
BORDERLINE_BAC = 0.04
CONSERVATIVE_LIMIT_BAC = 0.02


class SafetyStatus(Enum):
    SAFE = "Safe to Drive"
    BORDERLINE = "Borderline"
    UNSAFE = "Call a Ride"


def safety_status(bac: float) -> SafetyStatus:
    if bac < BORDERLINE_BAC:
        return SafetyStatus.SAFE
    if bac < LEGAL_LIMIT_BAC:
        return SafetyStatus.BORDERLINE
    return SafetyStatus.UNSAFE


def is_sober(bac: float) -> bool:
    return bac < SOBER_FLOOR


def _hours(td: timedelta) -> float:
    return round(td.total_seconds() / 3600.0, 1)


def _advice_key(bac: float) -> str:
    """Finer bands inside SAFE, since 'safe' status still means alcohol is present."""
    status = safety_status(bac)
    if status is not SafetyStatus.SAFE:
        return status.name
    if bac >= CONSERVATIVE_LIMIT_BAC:
        return "PRESENT"
    if bac > 0:
        return "RESIDUAL"
    return "NONE"


# key -> (status, title, message)
_ADVICE = {
    "UNSAFE": (
        "do_not_drive",
        "Above legal limit",
        "Estimated BAC is at or above 0.08%. Do not drive.",
    ),
    "BORDERLINE": (
        "do_not_drive",
        "Likely impaired",
        "Estimated BAC is below 0.08% but still in a high-risk impairment range.",
    ),
    "PRESENT": (
        "do_not_drive",
        "Alcohol still present",
        "Estimated BAC is low but not near zero. Driving is still risky.",
    ),
    "RESIDUAL": (
        "caution",
        "Residual alcohol",
        "Estimated BAC is very low but not zero.",
    ),
    "NONE": (
        "ok",
        "No alcohol logged",
        "Estimated BAC is 0.000 right now.",
    ),
}


def get_drive_advice(bac_now: float, time_until_sober: timedelta) -> dict:
    """Return conservative drive-risk guidance from estimated BAC."""
    key = _advice_key(bac_now)
    status, title, message = _ADVICE[key]

    if key == "UNSAFE":
        action = f"Use a rideshare, taxi, or sober driver. Under the limit in about {_hours(time_until_legal(bac_now))}h."
    elif key in ("BORDERLINE", "PRESENT"):
        action = f"Do not drive. Wait about {max(1.0, _hours(time_until_sober))}h and recheck."
    elif key == "RESIDUAL":
        action = "Safest choice is still not to drive."
    else:
        action = "If you have not consumed alcohol, impairment risk is lower."

    return {
        "status": status,
        "safety_status": safety_status(bac_now).value,
        "title": title,
        "message": message,
        "action": action,
        "legal_limit_bac": LEGAL_LIMIT_BAC,
    }
