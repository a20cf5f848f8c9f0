"""Map a canonical-form solution back onto the original model's variables."""

from dataclasses import dataclass, field
from typing import Dict, Mapping

from .model import LPModel, SolutionStatus
from .transform import TransformationMetadata

OBJECTIVE_KEY = "ObjectiveValue"


@dataclass
class OriginalSolution:
    objective_value: float
    values: Dict[str, float] = field(default_factory=dict)


def to_original(canonical_solution: Mapping[str, float], meta: TransformationMetadata) -> OriginalSolution:
    """Undo the sense flip and recombine split variables.

    Values missing from ``canonical_solution`` count as 0: a variable that is
    not reported is non-basic in the final tableau.
    """
    z = float(canonical_solution.get(OBJECTIVE_KEY, 0.0))
    if meta.was_minimization:
        z = -z

    values: Dict[str, float] = {}
    for name in meta.original_variables:
        mapped = meta.variable_mapping.get(name)
        if mapped is None:
            # not produced by the transformer; look the name up directly
            values[name] = float(canonical_solution.get(name, 0.0))
            continue
        parts = meta.split_parts(name)
        if parts is not None:
            pos, neg = parts
            values[name] = float(canonical_solution.get(pos, 0.0)) - float(canonical_solution.get(neg, 0.0))
        else:
            values[name] = float(canonical_solution.get(mapped, 0.0))
    return OriginalSolution(z, values)


def apply_solution(model: LPModel, solution: OriginalSolution,
                   status: SolutionStatus = SolutionStatus.OPTIMAL) -> LPModel:
    """Return a copy of ``model`` with its solved state filled in."""
    out = model.clone()
    out.status = status
    out.optimal_value = solution.objective_value
    out.solution = dict(solution.values)
    for var in out.variables:
        if var.name in solution.values:
            var.value = solution.values[var.name]
    return out
