from __future__ import annotations

from dataclasses import dataclass

from ..clients import XrplNodeClient
from ..diagnostics import MemorySampler
from ..domain import PoolDescriptor, PoolWithReserves, TvlBreakdown
from ..report import TvlReport
from ..state import AppState


@dataclass
class PipelineContext:
    state: AppState
    client: XrplNodeClient
    pools: list[PoolDescriptor] | None = None
    pools_with_reserves: list[PoolWithReserves] | None = None
    breakdown: TvlBreakdown | None = None
    report: TvlReport | None = None

    def new_sampler(self) -> MemorySampler | None:
        """A fresh sampler for one step, or ``None`` when not measuring."""
        if self.state.settings.measure:
            return MemorySampler()
        return None

    @property
    def pools_required(self) -> list[PoolDescriptor]:
        if self.pools is None:
            raise RuntimeError(
                "Pools have not been set. Ensure collect_pools() is called before accessing this property."
            )
        return self.pools

    @property
    def pools_with_reserves_required(self) -> list[PoolWithReserves]:
        if self.pools_with_reserves is None:
            raise RuntimeError(
                "Pool reserves have not been set. Ensure collect_reserves() is called before accessing this property."
            )
        return self.pools_with_reserves

    @property
    def breakdown_required(self) -> TvlBreakdown:
        if self.breakdown is None:
            raise RuntimeError(
                "TVL has not been aggregated. Ensure aggregate() is called before accessing this property."
            )
        return self.breakdown

    @property
    def report_required(self) -> TvlReport:
        if self.report is None:
            raise RuntimeError(
                "Report has not been set. Ensure build_report() is called before accessing this property."
            )
        return self.report
