from __future__ import annotations

"""
Initial tableau construction from a canonical model.

Layout, for m constraints and n canonical variables, an (m+1) x (n+1) float
matrix:
- rows 0..m-1: constraint coefficients in columns 0..n-1, RHS in column n
- row m: negated objective coefficients (reduced costs for a max problem),
  0 in the RHS column
"""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .errors import BuilderPreconditionError
from .model import fmt_num
from .transform import CanonicalForm

ARTIFICIAL_PREFIX = "a"


@dataclass
class InitialTableau:
    matrix: np.ndarray
    basic: List[str]
    nonbasic: List[str]
    column_names: List[str]

    @property
    def shape(self):
        return self.matrix.shape

    def __str__(self):
        return format_tableau(self.matrix, self.basic, self.column_names)


class TableauBuilder:
    def __init__(self, canonical: Optional[CanonicalForm]):
        self.canonical = canonical

    def _require(self) -> CanonicalForm:
        if self.canonical is None or self.canonical.model is None:
            raise BuilderPreconditionError("Must convert to canonical form before creating tableau")
        return self.canonical

    def build(self) -> np.ndarray:
        model = self._require().model
        m, n = model.num_constraints, model.num_variables
        T = np.zeros((m + 1, n + 1), dtype=float)
        for i, con in enumerate(model.constraints):
            T[i, :n] = con.coefficients
            T[i, n] = con.rhs
        T[m, :n] = [-c for c in model.objective]
        T[m, n] = 0.0
        return T

    def basic_variables(self) -> List[str]:
        """Slack/surplus names in creation order, then a1..ak placeholders.

        One placeholder per constraint left without a slack or surplus (the
        original equalities). The placeholders are recorded in the metadata
        but never added as columns.
        """
        cf = self._require()
        meta = cf.metadata
        created = set(meta.slack_variables) | set(meta.surplus_variables)
        basic = [name for name in cf.model.variable_names if name in created]
        missing = cf.model.num_constraints - len(basic)
        artificials = [f"{ARTIFICIAL_PREFIX}{k+1}" for k in range(missing)]
        meta.artificial_variables = artificials
        return basic + artificials

    def nonbasic_variables(self) -> List[str]:
        cf = self._require()
        count = cf.model.num_variables - cf.metadata.synthetic_count
        return cf.model.variable_names[:count]

    def initial(self) -> InitialTableau:
        cf = self._require()
        return InitialTableau(
            matrix=self.build(),
            basic=self.basic_variables(),
            nonbasic=self.nonbasic_variables(),
            column_names=cf.model.variable_names,
        )


def format_tableau(T: np.ndarray, basic: List[str], column_names: List[str]) -> str:
    headers = ["BV"] + list(column_names) + ["RHS"]
    m = T.shape[0] - 1

    row_labels = [basic[i] if i < len(basic) else "" for i in range(m)] + ["Z"]
    cells = [[row_labels[i]] + [fmt_num(float(v)) for v in T[i]] for i in range(m + 1)]

    # compute column width from data
    samples = headers[:] + [c for row in cells for c in row]
    colw = max(6, max(len(s) for s in samples) + 2)

    lines = [" ".join(f"{h:>{colw}}" for h in headers)]
    lines.append("-" * (len(headers) * (colw + 1)))
    for i, row in enumerate(cells):
        if i == m:
            lines.append("-" * (len(headers) * (colw + 1)))
        lines.append(" ".join(f"{c:>{colw}}" for c in row))
    return "\n".join(lines)


def print_tableau(T: np.ndarray, basic: List[str], column_names: List[str], header: str = "Initial tableau"):
    print(f"\n{header}")
    print(format_tableau(T, basic, column_names))
