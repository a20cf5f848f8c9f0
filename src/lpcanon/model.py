from __future__ import annotations

"""
LP/IP model entities: Variable, Constraint and LPModel.

Pure data holders with validation and cloning. No transformation logic lives
here; see ``lpcanon.transform`` for the canonical-form pipeline.

Programmatic construction mirrors the dense ``c, A, b, senses`` layout:
- c: list[float] objective coefficients (length n)
- A: list[list[float]] constraint coefficients (m x n)
- b: list[float] right-hand sides (length m)
- senses: list[str] with entries in {"<=", ">=", "="}
- types: optional list[str] with entries in {"+", "-", "urs", "int", "bin"}
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Optional, Sequence, Union
import math
from fractions import Fraction
from decimal import Decimal

from .errors import ModelInvalidError

EPS = 1e-9
INF = math.inf

Num = Union[int, float, Fraction, Decimal]


class VariableType(Enum):
    CONTINUOUS = "continuous"
    INTEGER = "integer"
    BINARY = "binary"
    UNRESTRICTED = "unrestricted"


class ConstraintType(Enum):
    LE = "<="
    GE = ">="
    EQ = "="

    def flipped(self) -> "ConstraintType":
        if self is ConstraintType.LE:
            return ConstraintType.GE
        if self is ConstraintType.GE:
            return ConstraintType.LE
        return self


class ObjectiveSense(Enum):
    MAXIMIZE = "max"
    MINIMIZE = "min"


class SolutionStatus(Enum):
    UNKNOWN = "unknown"
    OPTIMAL = "optimal"
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"
    ERROR = "error"


# (type, lower, upper) for each token of the sign/type line
TYPE_TOKENS = {
    "+": (VariableType.CONTINUOUS, 0.0, INF),
    "-": (VariableType.CONTINUOUS, -INF, 0.0),
    "urs": (VariableType.UNRESTRICTED, -INF, INF),
    "int": (VariableType.INTEGER, 0.0, INF),
    "bin": (VariableType.BINARY, 0.0, 1.0),
}


def default_bounds(vtype: VariableType) -> tuple:
    if vtype is VariableType.BINARY:
        return 0.0, 1.0
    if vtype is VariableType.UNRESTRICTED:
        return -INF, INF
    return 0.0, INF


def fmt_num(x: Num) -> str:
    """Pretty-print a number as an integer or reduced fraction."""
    if isinstance(x, float):
        if math.isnan(x) or math.isinf(x):
            return str(x)
        if abs(x) < 1e-12:
            return "0"
        fr = Fraction.from_float(x).limit_denominator(10**6)
    else:
        fr = Fraction(x)
    if fr.denominator == 1:
        return str(fr.numerator)
    sign = '-' if fr.numerator * fr.denominator < 0 else ''
    return f"{sign}{abs(fr.numerator)}/{abs(fr.denominator)}"


def _terms(coeffs: Sequence[float], names: Sequence[str]) -> str:
    parts: List[str] = []
    for coeff, name in zip(coeffs, names):
        s = fmt_num(coeff)
        if parts:
            if s.startswith("-"):
                parts.append(f"- {s[1:]}*{name}")
            else:
                parts.append(f"+ {s}*{name}")
        else:
            parts.append(f"{s}*{name}")
    return " ".join(parts) if parts else "0"


@dataclass
class Variable:
    name: str
    type: VariableType = VariableType.CONTINUOUS
    lower: Optional[float] = None
    upper: Optional[float] = None
    value: float = 0.0

    def __post_init__(self):
        if not self.name:
            raise ModelInvalidError("variable name must not be empty")
        lo, hi = default_bounds(self.type)
        if self.lower is None:
            self.lower = lo
        if self.upper is None:
            self.upper = hi

    def is_value_valid(self, value: float, tol: float = EPS) -> bool:
        if value < self.lower - tol or value > self.upper + tol:
            return False
        if self.type is VariableType.INTEGER:
            return abs(value - round(value)) < tol
        if self.type is VariableType.BINARY:
            return abs(value) < tol or abs(value - 1.0) < tol
        return True

    def set_value(self, value: float) -> bool:
        if self.is_value_valid(value):
            self.value = value
            return True
        return False

    def bounds_string(self) -> str:
        n = self.name
        lo, hi = self.lower, self.upper
        if self.type is VariableType.BINARY:
            return f"{n} in {{0, 1}}"
        if self.type is VariableType.UNRESTRICTED:
            return f"{n} unrestricted"
        if self.type is VariableType.INTEGER:
            if lo == -INF and hi == INF:
                return f"{n} in Z"
            if lo >= 0 and hi == INF:
                return f"{n} in Z+"
            return f"{n} in Z, {fmt_num(lo)} <= {n} <= {fmt_num(hi)}"
        if lo >= 0 and hi == INF:
            return f"{n} >= 0"
        if lo == -INF and hi == INF:
            return f"{n} unrestricted"
        if lo == -INF and hi <= 0:
            return f"{n} <= {fmt_num(hi)}"
        return f"{fmt_num(lo)} <= {n} <= {fmt_num(hi)}"

    def clone(self) -> "Variable":
        return Variable(self.name, self.type, self.lower, self.upper, self.value)

    def __eq__(self, other):
        if not isinstance(other, Variable):
            return NotImplemented
        return self.name == other.name and self.type == other.type

    def __hash__(self):
        return hash((self.name, self.type))

    def __str__(self):
        return f"{self.name} ({self.type.name}): {self.value:.3f} [{self.bounds_string()}]"


@dataclass
class Constraint:
    coefficients: List[float]
    type: ConstraintType = ConstraintType.LE
    rhs: float = 0.0
    name: str = ""

    def is_valid(self, expected_count: int) -> bool:
        return self.coefficients is not None and len(self.coefficients) == expected_count

    def evaluate(self, values: Sequence[float]) -> float:
        if len(values) != len(self.coefficients):
            raise ValueError("value count must match coefficient count")
        return sum(a * x for a, x in zip(self.coefficients, values))

    def is_satisfied(self, values: Sequence[float], tol: float = EPS) -> bool:
        lhs = self.evaluate(values)
        if self.type is ConstraintType.LE:
            return lhs <= self.rhs + tol
        if self.type is ConstraintType.GE:
            return lhs >= self.rhs - tol
        return abs(lhs - self.rhs) <= tol

    def slack(self, values: Sequence[float]) -> float:
        """Slack for <=, surplus for >=, zero for equalities."""
        lhs = self.evaluate(values)
        if self.type is ConstraintType.LE:
            return self.rhs - lhs
        if self.type is ConstraintType.GE:
            return lhs - self.rhs
        return 0.0

    def to_less_equal(self) -> "Constraint":
        if self.type is ConstraintType.GE:
            # a >= b  ->  -a <= -b
            return Constraint([-a for a in self.coefficients], ConstraintType.LE, -self.rhs, self.name + "_std")
        return self.clone()

    def is_equivalent(self, other: "Constraint", tol: float = EPS) -> bool:
        if other is None or self.type is not other.type:
            return False
        if len(self.coefficients) != len(other.coefficients):
            return False
        if abs(self.rhs - other.rhs) > tol:
            return False
        return all(abs(a - b) <= tol for a, b in zip(self.coefficients, other.coefficients))

    def format(self, names: Optional[Sequence[str]] = None) -> str:
        if names is None or len(names) != len(self.coefficients):
            names = [f"x{j+1}" for j in range(len(self.coefficients))]
        return f"{_terms(self.coefficients, names)} {self.type.value} {fmt_num(self.rhs)}"

    def clone(self) -> "Constraint":
        return Constraint(list(self.coefficients), self.type, self.rhs, self.name)

    def __str__(self):
        return self.format()


@dataclass
class LPModel:
    sense: ObjectiveSense = ObjectiveSense.MAXIMIZE
    variables: List[Variable] = field(default_factory=list)
    constraints: List[Constraint] = field(default_factory=list)
    objective: List[float] = field(default_factory=list)
    # solved state, filled in after a solve / back-mapping step
    status: SolutionStatus = SolutionStatus.UNKNOWN
    optimal_value: Optional[float] = None
    solution: Dict[str, float] = field(default_factory=dict)

    @property
    def num_variables(self) -> int:
        return len(self.variables)

    @property
    def num_constraints(self) -> int:
        return len(self.constraints)

    @property
    def variable_names(self) -> List[str]:
        return [v.name for v in self.variables]

    @property
    def is_solved(self) -> bool:
        return self.status is not SolutionStatus.UNKNOWN

    def validate(self) -> None:
        """Raise ModelInvalidError naming the first broken invariant."""
        if not self.variables:
            raise ModelInvalidError("model has no variables")
        n = len(self.variables)
        if self.objective is None:
            raise ModelInvalidError("objective coefficients are missing")
        if len(self.objective) != n:
            raise ModelInvalidError(
                f"objective has {len(self.objective)} coefficients, expected {n}")
        names = self.variable_names
        if len(set(names)) != n:
            raise ModelInvalidError("variable names must be unique")
        for i, con in enumerate(self.constraints or []):
            if not con.is_valid(n):
                label = con.name or f"C{i+1}"
                if con.coefficients is None:
                    raise ModelInvalidError(f"constraint {label} has no coefficients, expected {n}")
                raise ModelInvalidError(
                    f"constraint {label} has {len(con.coefficients)} coefficients, expected {n}")

    def is_valid(self) -> bool:
        try:
            self.validate()
        except ModelInvalidError:
            return False
        return True

    def clone(self) -> "LPModel":
        return LPModel(
            sense=self.sense,
            variables=[v.clone() for v in self.variables],
            constraints=[c.clone() for c in self.constraints],
            objective=list(self.objective),
            status=self.status,
            optimal_value=self.optimal_value,
            solution=dict(self.solution),
        )

    def is_integer_program(self) -> bool:
        return any(v.type in (VariableType.INTEGER, VariableType.BINARY) for v in self.variables)

    def is_binary_program(self) -> bool:
        return any(v.type is VariableType.BINARY for v in self.variables)

    def objective_string(self) -> str:
        if not self.is_valid():
            return "Invalid model"
        word = "Maximize" if self.sense is ObjectiveSense.MAXIMIZE else "Minimize"
        return f"{word}: {_terms(self.objective, self.variable_names)}"

    def constraint_strings(self) -> List[str]:
        names = self.variable_names
        return [f"{c.name or f'C{i+1}'}: {c.format(names)}" for i, c in enumerate(self.constraints)]

    def summary(self) -> str:
        if self.is_integer_program():
            kind = "Binary IP" if self.is_binary_program() else "Integer IP"
        else:
            kind = "Linear Program"
        return (
            "Model Summary:\n"
            f"  Variables: {self.num_variables}\n"
            f"  Constraints: {self.num_constraints}\n"
            f"  Objective: {'Maximize' if self.sense is ObjectiveSense.MAXIMIZE else 'Minimize'}\n"
            f"  Type: {kind}\n"
            f"  Status: {self.status.name.capitalize()}"
        )

    @classmethod
    def from_arrays(cls, c: Sequence[Num], A: Sequence[Sequence[Num]], b: Sequence[Num],
                    senses: Sequence[str], maximize: bool = True,
                    types: Optional[Sequence[str]] = None,
                    names: Optional[Sequence[str]] = None) -> "LPModel":
        n = len(c)
        if len(A) != len(b) or len(A) != len(senses):
            raise ModelInvalidError("A, b and senses must have the same length")
        if names is None:
            names = [f"x{j+1}" for j in range(n)]
        if types is None:
            types = ["+"] * n
        if len(names) != n or len(types) != n:
            raise ModelInvalidError("names and types must match the number of objective coefficients")

        variables = [_variable_from_token(name, tok) for name, tok in zip(names, types)]
        constraints = []
        for i, (row, rhs, sense) in enumerate(zip(A, b, senses)):
            try:
                ctype = ConstraintType(sense)
            except ValueError:
                raise ModelInvalidError("sense must be one of <=, >=, =") from None
            constraints.append(Constraint([float(v) for v in row], ctype, float(rhs), f"C{i+1}"))

        model = cls(
            sense=ObjectiveSense.MAXIMIZE if maximize else ObjectiveSense.MINIMIZE,
            variables=variables,
            constraints=constraints,
            objective=[float(v) for v in c],
        )
        model.validate()
        return model


def _variable_from_token(name: str, token: str) -> Variable:
    tok = str(token).strip().lower()
    if tok in TYPE_TOKENS:
        vtype, lo, hi = TYPE_TOKENS[tok]
        return Variable(name, vtype, lo, hi)
    for vtype in VariableType:
        if tok in (vtype.value, vtype.name.lower()):
            return Variable(name, vtype)
    raise ModelInvalidError(f"unknown variable type: {token}. Valid types: +, -, urs, int, bin")
