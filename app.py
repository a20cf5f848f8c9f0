import json
import io
from decimal import Decimal
from contextlib import redirect_stdout

import numpy as np
import streamlit as st

from lpcanon import LPModel, StandardFormTransformer, TableauBuilder, LPCanonError
from lpcanon.model import fmt_num

st.set_page_config(page_title="Canonical Form Visualizer", layout="wide")
st.title("LP Canonical Form — Transform & Inspect")

# Sidebar options
with st.sidebar:
    st.header("Options")
    is_min = st.checkbox("Minimize (default: Maximize)", value=False)
    show_steps = st.checkbox("Show transformation steps", value=True)

# Default JSON template
default_json = {
    "c": [2, -3, 1],
    "A": [[1, 1, 0], [1, -1, 2], [0, 1, 1]],
    "b": [4, -2, 3],
    "senses": ["<=", ">=", "="],
    "types": ["+", "urs", "int"],
    "maximize": True
}

st.subheader("Model JSON")
json_text = st.text_area("Edit model JSON here", json.dumps(default_json, indent=2), height=260)

st.subheader("Canonical solution (optional)")
solution_text = st.text_area(
    "Map canonical variable names (and ObjectiveValue) to values",
    "",
    height=120,
    placeholder='{"x1": 1, "x2+": 3, "x2-": 0, "ObjectiveValue": -7}',
)

col_run, col_reset = st.columns([1, 1])
run = col_run.button("Transform")
if col_reset.button("Reset to template"):
    st.rerun()


def tableau_frame(T: np.ndarray, basic, column_names):
    """Rows labelled by basic variable, last row Z; values as fractions."""
    m = T.shape[0] - 1
    labels = [basic[i] if i < len(basic) else f"r{i+1}" for i in range(m)] + ["Z"]
    headers = list(column_names) + ["RHS"]
    return {
        h: {labels[i]: fmt_num(float(T[i, j])) for i in range(m + 1)}
        for j, h in enumerate(headers)
    }


if run:
    # Parse JSON
    try:
        cfg = json.loads(json_text, parse_float=Decimal)
        # Override maximize with UI toggle if provided
        if is_min:
            cfg["maximize"] = False
        elif "maximize" not in cfg:
            cfg["maximize"] = True
    except Exception as e:
        st.error(f"Invalid JSON: {e}")
    else:
        try:
            model = LPModel.from_arrays(
                c=cfg["c"],
                A=cfg["A"],
                b=cfg["b"],
                senses=cfg["senses"],
                maximize=cfg.get("maximize", True),
                types=cfg.get("types"),
                names=cfg.get("names"),
            )
        except (KeyError, ValueError) as e:
            st.error(f"Invalid model fields: {e}")
        else:
            # Capture transformer step output
            buf = io.StringIO()
            transformer = StandardFormTransformer(model, verbose=True)
            try:
                with redirect_stdout(buf):
                    transformer.transform()
            except LPCanonError as e:
                st.error(f"Transformation failed: {e}")
            else:
                st.subheader("Original model")
                st.code("\n".join([model.summary(), "", model.objective_string()] + model.constraint_strings()))

                if show_steps:
                    st.subheader("Transformation steps")
                    st.code(buf.getvalue())

                st.subheader("Canonical form")
                st.code(transformer.canonical_form_string())

                init = TableauBuilder(transformer.result).initial()
                st.subheader(f"Initial tableau ({init.shape[0]} × {init.shape[1]})")
                st.table(tableau_frame(init.matrix, init.basic, init.column_names))
                st.json({
                    "basic_variables": init.basic,
                    "non_basic_variables": init.nonbasic,
                    "variable_mapping": transformer.metadata.variable_mapping,
                    "slack_variables": transformer.metadata.slack_variables,
                    "surplus_variables": transformer.metadata.surplus_variables,
                    "artificial_placeholders": transformer.metadata.artificial_variables,
                    "was_minimization": transformer.metadata.was_minimization,
                })

                if solution_text.strip():
                    st.subheader("Original-form solution")
                    try:
                        sol = {k: float(v) for k, v in json.loads(solution_text).items()}
                    except Exception as e:
                        st.error(f"Invalid solution JSON: {e}")
                    else:
                        res = transformer.to_original(sol)
                        st.json({
                            "objective_value": fmt_num(res.objective_value),
                            "solution": {k: fmt_num(v) for k, v in res.values.items()},
                        })
