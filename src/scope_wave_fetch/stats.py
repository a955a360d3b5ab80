from __future__ import annotations

import math
from dataclasses import dataclass


def mean(xs: list[float]) -> float:
    return sum(xs) / len(xs)


def stddev_sample(xs: list[float]) -> float:
    if len(xs) < 2:
        return 0.0
    mu = mean(xs)
    s2 = sum((x - mu) ** 2 for x in xs) / (len(xs) - 1)
    return math.sqrt(s2)


@dataclass(slots=True, frozen=True)
class Summary:
    n: int
    vmin: float
    vmax: float
    mu: float
    sigma: float

    def __str__(self) -> str:
        return (
            f"N={self.n}  min={self.vmin:.6g}  max={self.vmax:.6g}  "
            f"µ={self.mu:.6g}  σ={self.sigma:.6g}"
        )


def summarize(values: list[float]) -> Summary:
    if not values:
        return Summary(0, math.nan, math.nan, math.nan, math.nan)
    return Summary(len(values), min(values), max(values), mean(values), stddev_sample(values))
