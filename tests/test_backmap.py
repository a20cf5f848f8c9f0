import pytest

from lpcanon import (
    LPModel, StandardFormTransformer, TransformationMetadata, SolutionStatus,
    BuilderPreconditionError, to_original, apply_solution,
)


def split_model(maximize=True):
    return LPModel.from_arrays(c=[5], A=[[2]], b=[10], senses=["<="], maximize=maximize, types=["urs"])


def test_split_variable_recombined():
    t = StandardFormTransformer(split_model())
    t.transform()
    res = t.to_original({"x1+": 4.0, "x1-": 1.0, "ObjectiveValue": 15.0})
    assert res.values == {"x1": 3.0}
    assert res.objective_value == 15.0


def test_objective_negated_for_minimization():
    t = StandardFormTransformer(split_model(maximize=False))
    t.transform()
    res = t.to_original({"x1+": 4.0, "x1-": 1.0, "ObjectiveValue": 15.0})
    assert res.values == {"x1": 3.0}
    assert res.objective_value == -15.0


def test_missing_entries_default_to_zero():
    model = LPModel.from_arrays(c=[1, 1, 1], A=[[1, 1, 1]], b=[3], senses=["<="], types=["+", "urs", "int"])
    t = StandardFormTransformer(model)
    t.transform()
    res = t.to_original({"x2-": 2.5})
    assert res.values == {"x1": 0.0, "x2": -2.5, "x3": 0.0}
    assert res.objective_value == 0.0
    # keys keep the original variable order
    assert list(res.values) == ["x1", "x2", "x3"]


def test_synthetic_values_are_dropped():
    model = LPModel.from_arrays(c=[-2, -3], A=[[1, 1]], b=[4], senses=["<="], maximize=False)
    t = StandardFormTransformer(model)
    t.transform()
    res = t.to_original({"x1": 0.0, "x2": 4.0, "s1": 0.0, "ObjectiveValue": 12.0})
    assert res.values == {"x1": 0.0, "x2": 4.0}
    assert res.objective_value == -12.0


@pytest.mark.parametrize("target", [-7.25, 0.0, 3.5, 1e6])
def test_round_trip_reproduces_intended_value(target):
    model = LPModel.from_arrays(
        c=[1, -2], A=[[1, 1], [1, -1]], b=[5, -1], senses=["<=", ">="], maximize=False, types=["urs", "+"],
    )
    t = StandardFormTransformer(model)
    t.transform()
    pos, neg = t.metadata.split_parts("x1")
    # any decomposition with pos - neg == target must map back to target
    canonical = {pos: max(target, 0.0) + 2.0, neg: max(-target, 0.0) + 2.0, "x2": 1.5, "s1": 0.5}
    res = t.to_original(canonical)
    assert res.values["x1"] == pytest.approx(target, abs=1e-9)
    assert res.values["x2"] == 1.5


def test_name_absent_from_mapping_is_looked_up_directly():
    meta = TransformationMetadata(
        variable_mapping={"x1": "x1"},
        original_variables=["x1", "y"],
    )
    res = to_original({"x1": 1.0, "y": 2.0}, meta)
    assert res.values == {"x1": 1.0, "y": 2.0}


def test_back_mapping_requires_transform():
    t = StandardFormTransformer(split_model())
    with pytest.raises(BuilderPreconditionError):
        t.to_original({"x1+": 1.0})


def test_apply_solution_fills_model_copy():
    model = split_model(maximize=False)
    t = StandardFormTransformer(model)
    t.transform()
    res = t.to_original({"x1+": 0.0, "x1-": 2.0, "ObjectiveValue": 10.0})

    solved = apply_solution(model, res)
    assert solved.status is SolutionStatus.OPTIMAL
    assert solved.optimal_value == -10.0
    assert solved.solution == {"x1": -2.0}
    assert solved.variables[0].value == -2.0
    assert solved.is_solved
    # the input model stays unsolved
    assert model.status is SolutionStatus.UNKNOWN
    assert model.solution == {}


def test_plain_name_containing_separator_is_copied():
    """A non-negative variable whose name contains ' - ' maps to itself."""
    model = LPModel.from_arrays(c=[1], A=[[1]], b=[5], senses=["<="], names=["a - b"])
    t = StandardFormTransformer(model)
    t.transform()
    assert t.metadata.split_parts("a - b") is None
    res = t.to_original({"a - b": 3.0, "a": 10.0, "b": 1.0})
    assert res.values == {"a - b": 3.0}
