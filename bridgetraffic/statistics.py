"""Counts of generated vehicle types and breakdown rates per parameter setting."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from .vehicle import Vehicle
from .vehicle_types import SUV, Sedan, Truck

DEFAULT_LOG_DIR = Path("log")
VEHICLE_PROBABILITY_FILE = "vehicle_probability_statistics.csv"
BREAKDOWN_RATE_FILE = "breakdown_rate_statistics.csv"


@dataclass
class VehicleCount:
    """How many vehicles of each type have been generated."""

    sedan: int = 0
    suv: int = 0
    truck: int = 0
    total: int = 0


@dataclass(frozen=True)
class ParameterRecord:
    """A snapshot of the road taken when the control parameters changed."""

    time: float = 0.0
    safe_distance: int = 0
    stopping_speed: int = 0
    breakdown_count: int = 0
    vehicle_count: int = 0
    breakdown_rate: float = 0.0


@dataclass
class VehicleStatistics:
    """Collects vehicle-type counts and parameter-change records, and saves them as CSV."""

    count: VehicleCount = field(default_factory=VehicleCount)
    records: list[ParameterRecord] = field(default_factory=list)
    current_time: float = 0.0
    _last_safe_distance: int | None = field(default=None, repr=False)
    _last_stopping_speed: int | None = field(default=None, repr=False)

    def record_vehicle(self, vehicle: Vehicle) -> None:
        """Count a newly generated vehicle by its type."""
        if isinstance(vehicle, Sedan):
            self.count.sedan += 1
        elif isinstance(vehicle, SUV):
            self.count.suv += 1
        elif isinstance(vehicle, Truck):
            self.count.truck += 1
        self.count.total += 1

    def check_and_record_parameters(
        self,
        time: float,
        safe_distance: int,
        stopping_speed: int,
        vehicles: Sequence[Vehicle],
    ) -> ParameterRecord | None:
        """Record the breakdown rate when the parameters differ from the last ones seen.

        Returns the new record, or None when nothing changed.
        """
        self.current_time = time
        if (
            safe_distance == self._last_safe_distance
            and stopping_speed == self._last_stopping_speed
        ):
            return None
        self._last_safe_distance = safe_distance
        self._last_stopping_speed = stopping_speed

        broken = sum(1 for vehicle in vehicles if vehicle.is_broken_down)
        total = len(vehicles)
        record = ParameterRecord(
            time=time,
            safe_distance=safe_distance,
            stopping_speed=stopping_speed,
            breakdown_count=broken,
            vehicle_count=total,
            breakdown_rate=broken / total if total else 0.0,
        )
        self.records.append(record)
        return record

    def save_vehicle_probability_statistics(self, directory: str | Path = DEFAULT_LOG_DIR) -> Path:
        """Write the share of each vehicle type to a CSV file and return its path."""
        path = _prepare(directory) / VEHICLE_PROBABILITY_FILE
        total = self.count.total
        rows = (("Sedan", self.count.sedan), ("SUV", self.count.suv), ("Truck", self.count.truck))
        with path.open("w", encoding="utf-8", newline="") as fh:
            fh.write("VehicleType,Count,Probability\n")
            for name, n in rows:
                probability = n / total if total else 0.0
                fh.write(f"{name},{n},{probability:.4f}\n")
        return path

    def save_breakdown_rate_statistics(self, directory: str | Path = DEFAULT_LOG_DIR) -> Path:
        """Write every parameter-change record to a CSV file and return its path."""
        path = _prepare(directory) / BREAKDOWN_RATE_FILE
        with path.open("w", encoding="utf-8", newline="") as fh:
            fh.write(
                "Time(s),SafeDistance,Deceleration,BreakdownCount,VehicleCount,BreakdownRate\n"
            )
            for r in self.records:
                fh.write(
                    f"{r.time:.1f},{r.safe_distance},{r.stopping_speed},"
                    f"{r.breakdown_count},{r.vehicle_count},{r.breakdown_rate:.4f}\n"
                )
        return path

    def save_all(self, directory: str | Path = DEFAULT_LOG_DIR) -> tuple[Path, Path]:
        """Write both statistics files."""
        return (
            self.save_vehicle_probability_statistics(directory),
            self.save_breakdown_rate_statistics(directory),
        )


def _prepare(directory: str | Path) -> Path:
    path = Path(directory)
    path.mkdir(parents=True, exist_ok=True)
    return path