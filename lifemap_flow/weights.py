"""Edge weight to share conversion."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

DEFAULT_WEIGHT_POINTS = {1: 0.5, 2: 1.0, 3: 1.5}
DEFAULT_PER_UNIT = 0.5


@dataclass(frozen=True)
class WeightPolicy:
    """Maps an edge weight to its relative weight points.

    Weights listed in ``points`` use the table value; any other weight falls
    back to ``per_unit * weight``, clamped between the table entries of its
    nearest lower and higher weights. Points never decrease as weight grows.
    """

    points: dict[int, float] = field(default_factory=lambda: dict(DEFAULT_WEIGHT_POINTS), hash=False)
    per_unit: float = DEFAULT_PER_UNIT

    def __post_init__(self) -> None:
        if self.per_unit < 0:
            raise ValueError("per_unit must be non-negative")

        normalized = {}
        for weight, value in self.points.items():
            try:
                normalized[int(weight)] = float(value)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"Invalid weight point entry {weight!r}: {value!r}") from exc
        if any(value < 0 for value in normalized.values()):
            raise ValueError("Weight points must be non-negative")

        ordered = [normalized[weight] for weight in sorted(normalized)]
        if any(later < earlier for earlier, later in zip(ordered, ordered[1:])):
            raise ValueError("Weight points must not decrease as weight increases")
        object.__setattr__(self, "points", normalized)

    def point_value(self, weight: int) -> float:
        if weight in self.points:
            return self.points[weight]

        value = self.per_unit * weight
        lower = [points for key, points in self.points.items() if key < weight]
        upper = [points for key, points in self.points.items() if key > weight]
        if lower:
            value = max(value, max(lower))
        if upper:
            value = min(value, min(upper))
        return max(0.0, value)

    def shares(self, weights: Iterable[int]) -> list[float]:
        """Fractions of the source inflow each sibling edge receives."""

        values = [self.point_value(weight) for weight in weights]
        if not values:
            return []
        total = sum(values)
        if total <= 0:
            return [1.0 / len(values)] * len(values)
        return [value / total for value in values]

