"""
Command-line front end: read a JSON model, print its canonical form.

JSON structure (same dense layout as the programmatic API):
    {"c": [...], "A": [[...], ...], "b": [...], "senses": ["<=", ...],
     "maximize": true, "types": ["+", "urs", ...], "names": ["x1", ...]}

An optional canonical solution file maps canonical variable names (and
"ObjectiveValue") to numbers; it is mapped back to the original variables.
"""

import argparse
import json
import sys
from decimal import Decimal

from .errors import LPCanonError
from .model import LPModel, fmt_num
from .tableau import TableauBuilder, print_tableau
from .transform import StandardFormTransformer


def load_model(path: str, sense: str = None) -> LPModel:
    with open(path, "r") as f:
        # Parse floats as Decimal to avoid binary float artifacts in display
        cfg = json.load(f, parse_float=Decimal)

    # CLI sense (if provided) overrides JSON; else fallback to JSON->max.
    if sense is None:
        maximize = bool(cfg.get("maximize", True))
    else:
        maximize = (sense == "max")

    try:
        return LPModel.from_arrays(
            c=cfg["c"],
            A=cfg["A"],
            b=cfg["b"],
            senses=cfg["senses"],
            maximize=maximize,
            types=cfg.get("types"),
            names=cfg.get("names"),
        )
    except KeyError as e:
        raise ValueError(f"missing field in model JSON: {e}") from None


def main(argv=None) -> int:
    p = argparse.ArgumentParser(prog="lpcanon", description="Convert an LP/IP model to canonical form and show the initial tableau")
    p.add_argument("json", help="Path to JSON file describing the model")
    p.add_argument("--sense", choices=["max", "min"], default=None, help="Objective sense (default: use JSON or max)")
    p.add_argument("--no-verbose", action="store_true", help="Hide transformation step printouts")
    p.add_argument("--solution", help="JSON file with a canonical solution to map back")
    args = p.parse_args(argv)

    try:
        model = load_model(args.json, sense=args.sense)
        print(model.summary())
        print(model.objective_string())
        for line in model.constraint_strings():
            print("  " + line)

        transformer = StandardFormTransformer(model, verbose=not args.no_verbose)
        transformer.transform()
        print()
        print(transformer.canonical_form_string())

        init = TableauBuilder(transformer.result).initial()
        print_tableau(init.matrix, init.basic, init.column_names)
        print("\nBasic variables:", init.basic)
        print("Non-basic variables:", init.nonbasic)

        if args.solution:
            with open(args.solution, "r") as f:
                raw = json.load(f)
            if not isinstance(raw, dict):
                raise ValueError("solution JSON must be an object mapping variable names to numbers")
            canonical_solution = {k: float(v) for k, v in raw.items()}
            res = transformer.to_original(canonical_solution)
            print("\n=== Original solution ===")
            print("Objective value:", fmt_num(res.objective_value))
            for name, value in res.values.items():
                print(f"  {name} = {fmt_num(value)}")
    except (LPCanonError, ValueError, TypeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
