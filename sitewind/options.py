"""Catalogue of temporary fencing and hoarding systems."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class FenceOption:
    key: str  # short id used by the form
    name: str  # what the PM sees
    capacity_kpa: float  # design wind pressure the system resists
    max_height_m: float


FENCE_OPTIONS: dict[str, FenceOption] = {
    "A": FenceOption(key="A", name="2.0 m panels @ 3.5 m centres", capacity_kpa=0.1, max_height_m=2.0),
    "B": FenceOption(key="B", name="2.0 m panels + rear brace/ballast", capacity_kpa=0.2, max_height_m=2.0),
    "C": FenceOption(key="C", name="2.4 m hoarding with buttress @ 2.4 m", capacity_kpa=0.3, max_height_m=2.4),
    "D": FenceOption(key="D", name="2.4 m mesh with rear braces @ 2.4 m", capacity_kpa=0.3, max_height_m=2.4),
    "E": FenceOption(key="E", name="2.4 m hoarding + heavy ballast", capacity_kpa=0.4, max_height_m=2.4),
    "F": FenceOption(key="F", name="3.0 m hoarding with twin buttress", capacity_kpa=0.5, max_height_m=3.0),
}


def option_applicable(
    option: FenceOption,
    pressure_kpa: Optional[float],
    required_height_m: float,
) -> bool:
    """An option applies when it is tall enough and strong enough."""
    if pressure_kpa is None:
        return False
    if required_height_m > option.max_height_m:
        return False
    return pressure_kpa <= option.capacity_kpa


def applicable_options(pressure_kpa: Optional[float], required_height_m: float) -> list[FenceOption]:
    return [
        option
        for option in FENCE_OPTIONS.values()
        if option_applicable(option, pressure_kpa, required_height_m)
    ]


__all__ = ["FENCE_OPTIONS", "FenceOption", "applicable_options", "option_applicable"]
