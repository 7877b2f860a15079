"""Process memory sampling for long pipeline steps."""

from __future__ import annotations

from dataclasses import dataclass, field

import psutil


def _to_mb(value: int) -> float:
    return round(value / 1024 / 1024, 2)


@dataclass(frozen=True)
class MemorySample:
    """Resident and virtual memory of the process, in MB."""

    rss: float
    vms: float


@dataclass(frozen=True)
class MemorySummary:
    low: MemorySample
    high: MemorySample
    samples: int


@dataclass
class MemorySampler:
    """Collects memory samples for one measurement scope.

    Call ``record()`` at interesting points (e.g. once per page or pool) and
    ``summary()`` at the end of the scope.
    """

    process: psutil.Process = field(default_factory=psutil.Process)
    samples: list[MemorySample] = field(default_factory=list)

    def record(self) -> MemorySample:
        info = self.process.memory_info()
        sample = MemorySample(rss=_to_mb(info.rss), vms=_to_mb(info.vms))
        self.samples.append(sample)
        return sample

    def summary(self) -> MemorySummary:
        if not self.samples:
            self.record()
        return MemorySummary(
            low=MemorySample(
                rss=min(s.rss for s in self.samples),
                vms=min(s.vms for s in self.samples),
            ),
            high=MemorySample(
                rss=max(s.rss for s in self.samples),
                vms=max(s.vms for s in self.samples),
            ),
            samples=len(self.samples),
        )
