import json

from lpcanon.cli import main, load_model
from lpcanon import ObjectiveSense, VariableType


def write_json(path, data):
    path.write_text(json.dumps(data))
    return str(path)


MODEL = {
    "c": [-2, -3],
    "A": [[1, 1]],
    "b": [4],
    "senses": ["<="],
    "maximize": False,
}


def test_load_model_reads_types_and_sense(tmp_path):
    path = write_json(tmp_path / "m.json", dict(MODEL, types=["urs", "+"], b=[4.5]))
    model = load_model(path)
    assert model.sense is ObjectiveSense.MINIMIZE
    assert model.variables[0].type is VariableType.UNRESTRICTED
    assert model.constraints[0].rhs == 4.5

    assert load_model(path, sense="max").sense is ObjectiveSense.MAXIMIZE


def test_main_prints_canonical_form_and_tableau(tmp_path, capsys):
    path = write_json(tmp_path / "m.json", MODEL)
    assert main([path, "--no-verbose"]) == 0
    out = capsys.readouterr().out
    assert "CANONICAL FORM:" in out
    assert "Maximize: 2*x1 + 3*x2 + 0*s1" in out
    assert "1*x1 + 1*x2 + 1*s1 = 4" in out
    assert "Basic variables: ['s1']" in out
    assert "Non-basic variables: ['x1', 'x2']" in out
    assert "Converted minimization" not in out


def test_main_verbose_and_solution(tmp_path, capsys):
    path = write_json(tmp_path / "m.json", MODEL)
    sol = write_json(tmp_path / "sol.json", {"x2": 4, "s1": 0, "ObjectiveValue": 12})
    assert main([path, "--solution", sol]) == 0
    out = capsys.readouterr().out
    assert "Converted minimization to maximization" in out
    assert "Objective value: -12" in out
    assert "x1 = 0" in out
    assert "x2 = 4" in out


def test_main_reports_invalid_model(tmp_path, capsys):
    path = write_json(tmp_path / "bad.json", dict(MODEL, A=[[1, 1, 1]]))
    assert main([path]) == 1
    assert "Error:" in capsys.readouterr().err


def test_main_reports_missing_field(tmp_path, capsys):
    data = dict(MODEL)
    del data["senses"]
    path = write_json(tmp_path / "bad.json", data)
    assert main([path]) == 1
    assert "senses" in capsys.readouterr().err


def test_main_rejects_solution_that_is_not_an_object(tmp_path, capsys):
    path = write_json(tmp_path / "m.json", MODEL)
    sol = write_json(tmp_path / "sol.json", [1, 2, 3])
    assert main([path, "--no-verbose", "--solution", sol]) == 1
    assert "must be an object" in capsys.readouterr().err


def test_main_rejects_null_solution_values(tmp_path, capsys):
    path = write_json(tmp_path / "m.json", MODEL)
    sol = write_json(tmp_path / "sol.json", {"x1": None})
    assert main([path, "--no-verbose", "--solution", sol]) == 1
    assert "Error:" in capsys.readouterr().err
