"""
Streamlit web interface for the probability distribution toolkit.

Interactive UI with tabs for:
- PDF/CDF evaluation
- Distribution plots
- Quantile solver
"""

import streamlit as st
import numpy as np
import pandas as pd
import plotly.graph_objects as go
from probcalc.diagnostics.consistency import default_grid
from probcalc.engine import evaluate, list_distributions, quantile, validate_parameters
from probcalc.utils.types import DistributionId

# Starting values for the sidebar inputs
EXAMPLE_PARAMETERS = {
    DistributionId.NORMAL: (0.0, 1.0),
    DistributionId.EXPONENTIAL: (1.0,),
    DistributionId.CHI_SQUARE: (4.0,),
    DistributionId.T: (10.0,),
    DistributionId.F: (5.0, 10.0),
    DistributionId.GEOMETRIC: (0.3,),
    DistributionId.HYPERGEOMETRIC: (50.0, 20.0, 10.0),
    DistributionId.BINOMIAL: (20.0, 0.5),
    DistributionId.NEGATIVE_BINOMIAL: (5.0, 0.5),
    DistributionId.POISSON: (4.0,),
    DistributionId.GAMMA: (2.0, 1.0),
    DistributionId.BETA: (2.0, 5.0),
    DistributionId.WEIBULL: (1.5, 1.0),
    DistributionId.RAYLEIGH: (1.0,),
    DistributionId.PARETO: (1.0, 3.0),
    DistributionId.UNIFORM: (0.0, 1.0),
}

st.set_page_config(page_title="Probability Distribution Toolkit", layout="wide")

st.title("Probability Distribution Toolkit")
st.markdown("PDF/CDF evaluation, parameter validation and quantiles")

# Sidebar parameters
st.sidebar.header("Distribution")
descriptors = list_distributions()
descriptor = st.sidebar.selectbox(
    "Distribution",
    descriptors,
    format_func=lambda d: f"{d.name} ({d.category})",
)

st.sidebar.header("Parameters")
params = []
for name, practical, default in zip(
    descriptor.parameter_names, descriptor.practical_ranges, EXAMPLE_PARAMETERS[descriptor.id]
):
    params.append(
        st.sidebar.number_input(
            name,
            value=float(default),
            min_value=float(practical.minimum),
            max_value=float(practical.maximum),
            step=1.0 if descriptor.is_discrete and practical.minimum >= 1.0 else 0.01,
            format="%.4f",
            key=f"{descriptor.id}-{name}",
        )
    )

outcome = validate_parameters(descriptor.id, params)
if not outcome.is_valid:
    st.sidebar.error(outcome.message)
    if outcome.has_suggestion:
        st.sidebar.info(f"Suggested value: {outcome.suggested_value:g}")
    st.stop()

# Main tabs
tab1, tab2, tab3 = st.tabs(["Evaluate", "Plots", "Quantiles"])

with tab1:
    st.header(f"{descriptor.name} distribution")
    st.caption(descriptor.description)

    x = st.number_input("x", value=1.0 if descriptor.is_discrete else 0.5)
    result = evaluate(descriptor.id, x, params)

    col1, col2 = st.columns(2)
    if result.success:
        with col1:
            st.metric(label="PDF" if not descriptor.is_discrete else "PMF", value=f"{result.pdf_value:.6g}")
        with col2:
            st.metric(label="CDF", value=f"{result.cdf_value:.6g}")
    else:
        st.error(result.error_message)

    grid = default_grid(descriptor.id, params)
    table_points = grid[:: max(1, len(grid) // 20)]
    evaluations = [evaluate(descriptor.id, float(point), params) for point in table_points]
    table_df = pd.DataFrame({
        "x": table_points,
        "pdf": [e.pdf_value for e in evaluations],
        "cdf": [e.cdf_value for e in evaluations],
    })
    st.subheader("Values")
    st.dataframe(table_df, use_container_width=True)

with tab2:
    st.header("PDF and CDF")

    grid = default_grid(descriptor.id, params)
    evaluations = [evaluate(descriptor.id, float(point), params) for point in grid]
    pdf_values = np.array([e.pdf_value for e in evaluations])
    cdf_values = np.array([e.cdf_value for e in evaluations])
    # Boundary singularities are not plottable
    pdf_values[~np.isfinite(pdf_values)] = np.nan

    fig_pdf = go.Figure()
    if descriptor.is_discrete:
        fig_pdf.add_trace(go.Bar(x=grid, y=pdf_values, name="PMF"))
    else:
        fig_pdf.add_trace(go.Scatter(x=grid, y=pdf_values, name="PDF"))
    fig_pdf.update_layout(title=f"{descriptor.name} density", xaxis_title="x", yaxis_title="Density")
    st.plotly_chart(fig_pdf, use_container_width=True)

    fig_cdf = go.Figure()
    fig_cdf.add_trace(go.Scatter(
        x=grid,
        y=cdf_values,
        name="CDF",
        line=dict(color="orange", shape="hv" if descriptor.is_discrete else "linear"),
    ))
    fig_cdf.update_layout(title=f"{descriptor.name} CDF", xaxis_title="x", yaxis_title="P(X ≤ x)")
    st.plotly_chart(fig_cdf, use_container_width=True)

with tab3:
    st.header("Quantile Solver")

    probability = st.number_input("Probability", value=0.95, min_value=1e-6, max_value=1.0 - 1e-6, format="%.6f")

    if st.button("Solve for Quantile"):
        try:
            result = quantile(descriptor.id, probability, params)

            if result.success:
                st.success(f"Quantile: {result.value:.6g}")
                st.info(f"Method: {result.method} | Iterations: {result.iterations}")
            else:
                st.error(f"Solver failed: {result.message}")
        except ValueError as e:
            st.error(f"Error: {e}")
