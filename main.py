from __future__ import annotations

import hashlib
from datetime import datetime
from pathlib import Path

import streamlit as st
import pandas as pd
import altair as alt

from chord_roots.config import load_config, deep_update, function_spec
from chord_roots.functions import make_function
from chord_roots.locator import find_roots
from chord_roots.report import results_frame
from chord_roots.solver import solve_brent_reference


# =============================================================================
# Page configuration
# =============================================================================
st.set_page_config(
    page_title="Chord Method Root Locator",
    layout="wide",
)

st.title("Chord Method Root Locator")
st.caption(
    "Fixed-step sign-change scan followed by chord (fixed-endpoint secant) refinement "
    "of every bracket, with Brent's method as an independent reference."
)

# =============================================================================
# Sidebar – configuration and inputs
# =============================================================================
PROJECT_ROOT = Path(__file__).resolve().parent
DEFAULT_CFG = PROJECT_ROOT / "config" / "chord_params.yml"

cfg_path = st.sidebar.text_input(
    "YAML config path",
    str(DEFAULT_CFG),
)
cfg = load_config(cfg_path)

# --- Function parameters
st.sidebar.subheader("Target Function")
fn_name, fn_params = function_spec(cfg)
st.sidebar.latex(r"f(x) = c_1 \log_{10}(x + s) - c_2 \sin(x)")

log_coef = st.sidebar.number_input("c1 (log coefficient)", value=fn_params.get("log_coef", 2.0), format="%.4f")
shift = st.sidebar.number_input("s (log shift)", value=fn_params.get("shift", 7.0), format="%.4f")
sin_coef = st.sidebar.number_input("c2 (sine coefficient)", value=fn_params.get("sin_coef", 5.0), format="%.4f")

# --- Interval and tolerances
st.sidebar.subheader("Search Interval")
interval = cfg["scan"]["interval"]
a = st.sidebar.number_input("a (lower)", value=float(interval["lower"]), step=0.5)
b = st.sidebar.number_input("b (upper)", value=float(interval["upper"]), step=0.5)
step = st.sidebar.number_input("Scan step", value=float(cfg["scan"]["step"]), min_value=1e-6, format="%.4f")

st.sidebar.subheader("Tolerances")
eps1 = st.sidebar.number_input("eps1 (argument)", value=float(cfg["tolerances"]["argument"]), format="%.1e")
eps2 = st.sidebar.number_input("eps2 (function)", value=float(cfg["tolerances"]["function"]), format="%.1e")

# --- Solver
st.sidebar.subheader("Solver")
max_iter = st.sidebar.number_input("Max iterations", value=int(cfg["solver"]["max_iter"]), step=50)
stop_rule = st.sidebar.radio(
    "Stopping rule",
    options=["both", "either"],
    index=0 if cfg["solver"]["stop_rule"] == "both" else 1,
    help="both: |f| <= eps2 and |dx| <= eps1. either: one of them is enough.",
)

# --- Apply overrides
cfg_run = deep_update(
    cfg,
    {
        "function": {"params": {"log_coef": log_coef, "shift": shift, "sin_coef": sin_coef}},
        "scan": {"step": step, "interval": {"lower": a, "upper": b}},
        "tolerances": {"argument": eps1, "function": eps2},
        "solver": {"max_iter": int(max_iter), "stop_rule": stop_rule},
    },
)
f = make_function(fn_name, **function_spec(cfg_run)[1])

# =============================================================================
# Read-only reference panel
# =============================================================================
st.sidebar.divider()
show_ref = st.sidebar.checkbox("Show config file details", value=False)

if show_ref:
    try:
        cfg_bytes = open(cfg_path, "rb").read()
        cfg_sha256 = hashlib.sha256(cfg_bytes).hexdigest()
    except OSError:
        cfg_sha256 = "N/A"

    st.sidebar.caption(f"Config file: {cfg_path}")
    st.sidebar.caption(f"Loaded: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    st.sidebar.caption(f"SHA-256: {cfg_sha256}")

# =============================================================================
# Explanation
# =============================================================================
with st.expander("Overview of the method", expanded=False):
    st.markdown(
        r"""
**Scan.** Starting at \(a\), the interval is walked in steps of fixed width.
A sub-interval \([x, x+h]\) is a bracket when \(f(x)\,f(x+h) < 0\).
Sub-intervals where \(f\) is undefined are skipped, and so is an exact zero on a grid point.

**Chord refinement.** The endpoint with the larger \(|f|\) is held fixed; the other moves:

\[
x_{k+1} = x_k - f(x_k)\,\frac{x_{fixed} - x_k}{f(x_{fixed}) - f(x_k)}
\]

Iteration stops on \(|f(x_k)| \le \varepsilon_2\) and/or \(|x_k - x_{k-1}| \le \varepsilon_1\),
or at the iteration ceiling. The convergence parameter is the ratio of consecutive errors.
"""
    )

tab_solver, tab_convergence = st.tabs(["Root Locator", "Convergence"])

if "report" not in st.session_state:
    st.session_state["report"] = None

# =============================================================================
# Locator tab
# =============================================================================
with tab_solver:
    if st.button("Find roots"):
        try:
            st.session_state["report"] = find_roots(
                f, a, b,
                tol_x=eps1,
                tol_f=eps2,
                step=step,
                max_iter=int(max_iter),
                stop_rule=stop_rule,
                record_history=True,
            )
        except ValueError as e:
            st.session_state["report"] = None
            st.error(str(e))

    report = st.session_state["report"]
    if report is not None:
        st.success(
            f"{len(report.roots)} root(s) found in [{a:g}, {b:g}] "
            f"({len(report.brackets)} bracket(s), total {report.total_elapsed_ms:.3f} ms)"
        )
        if report.failed:
            st.warning(f"{len(report.failed)} bracket(s) did not produce a finite estimate.")

        df = results_frame(report.roots)
        df["brent_reference"] = [
            solve_brent_reference(f, r.bracket[0], r.bracket[1]) for r in report.roots
        ]
        df["brent_reference"] = pd.to_numeric(df["brent_reference"], errors="coerce")
        df["abs_diff_vs_brent"] = (df["root"] - df["brent_reference"]).abs()
        st.dataframe(df, use_container_width=True)

        st.markdown("#### Plot: f(x) with located roots")
        n = 400
        xs = [a + (b - a) * i / (n - 1) for i in range(n)]
        curve = pd.DataFrame({"x": xs, "f": [f(x) for x in xs]}).dropna()

        line = alt.Chart(curve).mark_line().encode(
            x=alt.X("x:Q", title="x"),
            y=alt.Y("f:Q", title="f(x)"),
        )
        zero_rule = alt.Chart(pd.DataFrame({"y": [0.0]})).mark_rule().encode(y="y:Q")
        points = alt.Chart(df).mark_point(color="#D62728", size=80, filled=True).encode(
            x="root:Q",
            y="f_root:Q",
            tooltip=[
                alt.Tooltip("root:Q", format=",.6f"),
                alt.Tooltip("f_root:Q", format=".3e"),
                alt.Tooltip("iterations:Q"),
            ],
        )
        st.altair_chart((line + zero_rule + points).properties(height=360), use_container_width=True)

# =============================================================================
# Convergence tab
# =============================================================================
with tab_convergence:
    report = st.session_state["report"]
    if report is None or not report.roots:
        st.info("Run the locator to see per-root convergence.")
    else:
        labels = [f"x = {r.root:.6f}" for r in report.roots]
        choice = st.selectbox("Root", options=range(len(labels)), format_func=lambda i: labels[i])
        res = report.roots[choice]

        df_hist = pd.DataFrame(
            [{"iter": p.iteration, "x": p.x, "abs_f": abs(p.fx), "error": p.error} for p in res.history]
        )
        if df_hist.empty:
            st.info("No iteration history recorded for this root.")
        else:
            long = df_hist.melt(id_vars=["iter"], value_vars=["abs_f", "error"], var_name="quantity")
            long = long[long["value"] > 0]
            chart = alt.Chart(long).mark_line(point=True).encode(
                x=alt.X("iter:Q", title="Iteration"),
                y=alt.Y("value:Q", title="Magnitude", scale=alt.Scale(type="log")),
                color=alt.Color("quantity:N", title=""),
                tooltip=["iter:Q", "quantity:N", alt.Tooltip("value:Q", format=".3e")],
            )
            st.altair_chart(chart.properties(height=320), use_container_width=True)
            st.dataframe(df_hist, use_container_width=True)
