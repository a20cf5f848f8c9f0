from __future__ import annotations

"""
Standard-form transformer.

Rewrites a model into canonical form:
- maximize objective (minimization converted by negating coefficients),
- unrestricted variables split into x+ - x- with both parts >= 0,
- every right-hand side non-negative,
- every constraint an equality (slack for <=, surplus for >=).

Each step takes a model and returns a new one; the caller's model is never
touched. Bookkeeping needed to map a solution back is collected in a
TransformationMetadata record.
"""

from dataclasses import dataclass, field
from typing import List, Tuple, Optional, Dict

from .errors import ModelInvalidError, TransformationError, BuilderPreconditionError
from .model import (
    LPModel, Variable, VariableType, ConstraintType, ObjectiveSense, INF,
)

SLACK_PREFIX = "s"
SPLIT_SEPARATOR = " - "


@dataclass
class TransformationMetadata:
    variable_mapping: Dict[str, str] = field(default_factory=dict)
    slack_variables: List[str] = field(default_factory=list)
    surplus_variables: List[str] = field(default_factory=list)
    artificial_variables: List[str] = field(default_factory=list)
    was_minimization: bool = False
    original_variables: List[str] = field(default_factory=list)
    canonical_variables: List[str] = field(default_factory=list)

    @property
    def original_variable_count(self) -> int:
        return len(self.original_variables)

    @property
    def canonical_variable_count(self) -> int:
        return len(self.canonical_variables)

    @property
    def synthetic_count(self) -> int:
        return len(self.slack_variables) + len(self.surplus_variables)

    def split_parts(self, name: str) -> Optional[Tuple[str, str]]:
        """(positive, negative) part names for a split variable, else None."""
        mapped = self.variable_mapping.get(name)
        if mapped is None or mapped == name or SPLIT_SEPARATOR not in mapped:
            return None
        pos, neg = mapped.split(SPLIT_SEPARATOR, 1)
        return pos, neg


@dataclass
class CanonicalForm:
    model: LPModel
    metadata: TransformationMetadata


# --- Steps ---

def normalize_objective(model: LPModel) -> Tuple[LPModel, bool]:
    out = model.clone()
    if out.sense is ObjectiveSense.MINIMIZE:
        out.objective = [-c for c in out.objective]
        out.sense = ObjectiveSense.MAXIMIZE
        return out, True
    return out, False


def split_unrestricted(model: LPModel) -> Tuple[LPModel, Dict[str, str]]:
    """Replace each unrestricted x by x+ and x-, keeping column order.

    Objective and constraint rows are rebuilt in lockstep with the variables.
    """
    out = model.clone()
    mapping: Dict[str, str] = {}
    new_vars: List[Variable] = []
    new_obj: List[float] = []
    new_rows: List[List[float]] = [[] for _ in out.constraints]
    taken = set(out.variable_names)

    for j, var in enumerate(out.variables):
        c = out.objective[j]
        if var.type is VariableType.UNRESTRICTED:
            pos, neg = f"{var.name}+", f"{var.name}-"
            for part in (pos, neg):
                if part in taken:
                    raise ModelInvalidError(
                        f"cannot split unrestricted variable {var.name}: name {part} is already in use")
                taken.add(part)
            new_vars.append(Variable(pos, VariableType.CONTINUOUS, 0.0, INF))
            new_vars.append(Variable(neg, VariableType.CONTINUOUS, 0.0, INF))
            new_obj += [c, -c]
            for i, con in enumerate(out.constraints):
                a = con.coefficients[j]
                new_rows[i] += [a, -a]
            mapping[var.name] = f"{pos}{SPLIT_SEPARATOR}{neg}"
        else:
            new_vars.append(var)
            new_obj.append(c)
            for i, con in enumerate(out.constraints):
                new_rows[i].append(con.coefficients[j])
            mapping[var.name] = var.name

    out.variables = new_vars
    out.objective = new_obj
    for con, row in zip(out.constraints, new_rows):
        con.coefficients = row
    return out, mapping


def normalize_rhs(model: LPModel) -> LPModel:
    out = model.clone()
    for con in out.constraints:
        if con.rhs < 0:
            con.coefficients = [-a for a in con.coefficients]
            con.rhs = -con.rhs
            con.type = con.type.flipped()
    return out


def _next_synthetic_name(counter: int, taken: set) -> Tuple[str, int]:
    name = f"{SLACK_PREFIX}{counter}"
    while name in taken:
        counter += 1
        name = f"{SLACK_PREFIX}{counter}"
    return name, counter


def add_slack_surplus(model: LPModel) -> Tuple[LPModel, List[str], List[str]]:
    """Turn every inequality into an equality.

    Slack (+1) for <=, surplus (-1) for >=; slacks and surpluses share one
    s1, s2, ... counter in constraint order. Equalities get no new column
    (a Phase I engine would still need an artificial variable there).
    """
    out = model.clone()
    slacks: List[str] = []
    surpluses: List[str] = []
    taken = set(out.variable_names)
    added: List[Tuple[int, str, float]] = []  # (row, name, coefficient)

    counter = 1
    for i, con in enumerate(out.constraints):
        if con.type is ConstraintType.EQ:
            continue
        name, counter = _next_synthetic_name(counter, taken)
        taken.add(name)
        counter += 1
        if con.type is ConstraintType.LE:
            slacks.append(name)
            added.append((i, name, 1.0))
        else:
            surpluses.append(name)
            added.append((i, name, -1.0))
        con.type = ConstraintType.EQ

    for _, name, _ in added:
        out.variables.append(Variable(name, VariableType.CONTINUOUS, 0.0, INF))
        out.objective.append(0.0)

    n_before = model.num_variables
    for i, con in enumerate(out.constraints):
        con.coefficients = con.coefficients + [0.0] * len(added)
    for k, (i, _, coeff) in enumerate(added):
        out.constraints[i].coefficients[n_before + k] = coeff

    return out, slacks, surpluses


def check_canonical(model: LPModel) -> None:
    if model.sense is not ObjectiveSense.MAXIMIZE:
        raise TransformationError("not canonical: objective is not maximization")
    n = model.num_variables
    if len(model.objective) != n:
        raise TransformationError(
            f"not canonical: objective has {len(model.objective)} coefficients for {n} variables")
    for var in model.variables:
        if var.type is VariableType.UNRESTRICTED:
            raise TransformationError(f"not canonical: variable {var.name} is still unrestricted")
    names = model.variable_names
    if len(set(names)) != n:
        dupes = sorted({x for x in names if names.count(x) > 1})
        raise TransformationError(f"not canonical: duplicate variable names {dupes}")
    for i, con in enumerate(model.constraints):
        label = con.name or f"C{i+1}"
        if con.type is not ConstraintType.EQ:
            raise TransformationError(f"not canonical: constraint {label} is not an equality")
        if con.rhs < 0:
            raise TransformationError(f"not canonical: constraint {label} has negative RHS")
        if len(con.coefficients) != n:
            raise TransformationError(
                f"not canonical: constraint {label} has {len(con.coefficients)} coefficients for {n} variables")


# --- Orchestration ---

class StandardFormTransformer:
    def __init__(self, model: LPModel, verbose: bool = False):
        if model is None:
            raise TypeError("model must not be None")
        self.original = model
        self.verbose = verbose
        self._result: Optional[CanonicalForm] = None

    @property
    def canonical(self) -> Optional[LPModel]:
        return self._result.model if self._result else None

    @property
    def metadata(self) -> Optional[TransformationMetadata]:
        return self._result.metadata if self._result else None

    @property
    def result(self) -> Optional[CanonicalForm]:
        return self._result

    def _log(self, msg: str):
        if self.verbose:
            print(msg)

    def transform(self) -> LPModel:
        self.original.validate()
        self._log("Converting model to canonical form...")

        model, was_min = normalize_objective(self.original)
        if was_min:
            self._log("   Converted minimization to maximization")

        model, mapping = split_unrestricted(model)
        n_split = sum(1 for name, m in mapping.items() if m != name)
        if n_split:
            self._log(f"   Split {n_split} unrestricted variable(s)")

        model = normalize_rhs(model)
        self._log("   Ensured all RHS values are non-negative")

        model, slacks, surpluses = add_slack_surplus(model)
        for name in slacks:
            self._log(f"   Added slack variable {name}")
        for name in surpluses:
            self._log(f"   Added surplus variable {name}")

        check_canonical(model)

        meta = TransformationMetadata(
            variable_mapping=mapping,
            slack_variables=slacks,
            surplus_variables=surpluses,
            was_minimization=was_min,
            original_variables=self.original.variable_names,
            canonical_variables=model.variable_names,
        )
        self._result = CanonicalForm(model, meta)
        self._log(f"Canonical form created: {self.original.num_variables} original -> "
                  f"{model.num_variables} canonical variables")
        return model

    def canonical_form_string(self) -> str:
        model = self.canonical
        if model is None:
            return "Canonical form not yet created"
        lines = ["CANONICAL FORM:", "==============", model.objective_string(), "", "Subject to:"]
        names = model.variable_names
        lines += [f"  {c.format(names)}" for c in model.constraints]
        lines += ["", "Variable bounds:"]
        lines += [f"  {v.bounds_string()}" for v in model.variables]
        nonpositive = [v.name for v in model.variables if v.upper <= 0 and v.lower < 0]
        if nonpositive:
            lines += ["", "Note: " + ", ".join(nonpositive) + " keep non-positive bounds; "
                      "substitute x = -x' to make them non-negative"]
        return "\n".join(lines)

    # Shortcuts to the builder and back-mapper for the current result

    def initial_tableau(self):
        from .tableau import TableauBuilder
        return TableauBuilder(self._result).build()

    def initial_basic_variables(self) -> List[str]:
        from .tableau import TableauBuilder
        return TableauBuilder(self._result).basic_variables()

    def initial_nonbasic_variables(self) -> List[str]:
        from .tableau import TableauBuilder
        return TableauBuilder(self._result).nonbasic_variables()

    def to_original(self, canonical_solution: Dict[str, float]):
        from .backmap import to_original
        if self._result is None:
            raise BuilderPreconditionError("no canonical form: call transform() first")
        return to_original(canonical_solution, self._result.metadata)


def to_canonical(model: LPModel, verbose: bool = False) -> CanonicalForm:
    t = StandardFormTransformer(model, verbose=verbose)
    t.transform()
    return t.result
