"""Ordered analysis results with an index-aligned selection mask."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from secretsweep.core.analyzer import AnalysisResult


@dataclass
class ResultSet:
    """Results plus a parallel selection mask of the same length."""

    results: list[AnalysisResult] = field(default_factory=list)
    selected: list[bool] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.selected and self.results:
            self.selected = [False] * len(self.results)
        if len(self.selected) != len(self.results):
            raise ValueError(
                f"selection mask has {len(self.selected)} entries for {len(self.results)} results"
            )

    @classmethod
    def fresh(cls, results: Sequence[AnalysisResult]) -> ResultSet:
        """A set over ``results`` with nothing selected."""
        return cls(list(results), [False] * len(results))

    def __len__(self) -> int:
        return len(self.results)

    def copy(self) -> ResultSet:
        return ResultSet(list(self.results), list(self.selected))

    def toggle(self, index: int) -> bool:
        """Flip the selection at ``index`` and return the new value."""
        self.selected[index] = not self.selected[index]
        return self.selected[index]

    @property
    def names(self) -> list[str]:
        return [r.name for r in self.results]

    @property
    def selected_names(self) -> list[str]:
        return [r.name for r, sel in zip(self.results, self.selected) if sel]

    def without(self, names: Iterable[str]) -> ResultSet:
        """Drop results named in ``names`` together with their mask entries."""
        drop = set(names)
        kept = [(r, sel) for r, sel in zip(self.results, self.selected) if r.name not in drop]
        return ResultSet([r for r, _ in kept], [sel for _, sel in kept])
