from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence


@dataclass
class Feasibility:
    feasible: bool
    reasons: List[str]


def check_column_counts(
    counts: Sequence[int], *, total: int, min_per_column: int, max_per_column: int
) -> Feasibility:
    reasons: List[str] = []
    if sum(counts) != total:
        reasons.append(f"column counts sum to {sum(counts)}, expected {total}")
    for col, c in enumerate(counts):
        if not (min_per_column <= c <= max_per_column):
            reasons.append(
                f"column {col} holds {c} numbers, expected {min_per_column}..{max_per_column}"
            )
    return Feasibility(feasible=not reasons, reasons=reasons)


def check_assignment_capacity(
    column_counts: Sequence[int], row_capacities: Sequence[int]
) -> Feasibility:
    """Gale-Ryser test: can a 0/1 grid have these column sums and row sums?

    Each column places at most one number per row, so the grid exists iff the
    totals agree and, for every k, the k largest row capacities fit into
    sum(min(count, k)) over the columns.
    """
    if any(c < 0 for c in column_counts) or any(r < 0 for r in row_capacities):
        return Feasibility(feasible=False, reasons=["negative count"])
    if sum(column_counts) != sum(row_capacities):
        return Feasibility(
            feasible=False,
            reasons=[f"column total {sum(column_counts)} != row total {sum(row_capacities)}"],
        )
    rows = sorted(row_capacities, reverse=True)
    running = 0
    for k in range(1, len(rows) + 1):
        running += rows[k - 1]
        bound = sum(min(c, k) for c in column_counts)
        if running > bound:
            return Feasibility(
                feasible=False,
                reasons=[f"{k} fullest rows need {running} cells, columns offer {bound}"],
            )
    return Feasibility(feasible=True, reasons=[])
