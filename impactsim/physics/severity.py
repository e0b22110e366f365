from __future__ import annotations

from typing import NamedTuple


class Severity(NamedTuple):
    level: str
    color: str
    description: str


# Upper bound (exclusive, megatons) for each level; the last entry is open-ended.
SEVERITY_SCALE: tuple[tuple[float, Severity], ...] = (
    (0.001, Severity("minimal", "#10b981", "Minimal damage, mostly atmospheric effects")),
    (0.1, Severity("low", "#3b82f6", "Local damage, similar to small bomb")),
    (10.0, Severity("moderate", "#f59e0b", "City-scale destruction")),
    (1000.0, Severity("high", "#ef4444", "Regional catastrophe")),
    (100000.0, Severity("catastrophic", "#dc2626", "Continental devastation")),
    (float("inf"), Severity("extinction", "#7f1d1d", "Global extinction event")),
)

HISTORICAL_EVENTS: tuple[tuple[float, str], ...] = (
    (0.015, "Chelyabinsk meteor (2013)"),
    (15.0, "Tunguska event (1908)"),
    (50.0, "Largest nuclear test (Tsar Bomba)"),
    (10000.0, "Chicxulub impactor (dinosaur extinction)"),
)


def impact_severity(megatons: float) -> Severity:
    for upper, severity in SEVERITY_SCALE:
        if megatons < upper:
            return severity
    return SEVERITY_SCALE[-1][1]


def historical_comparison(megatons: float) -> str:
    for upper, name in HISTORICAL_EVENTS:
        if megatons < upper:
            return name
    return "Larger than any known impact in history"
