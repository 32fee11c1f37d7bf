"""
Plotly chart factory functions with consistent styling for the dashboard.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st


DEFAULT_TEMPLATE = "plotly_white"
DEFAULT_COLOR_SEQUENCE = [
    "#0088FE",  # blue
    "#FF8042",  # orange
    "#00C49F",  # green
    "#d62728",  # red for reference lines
    "#9467bd",
    "#8c564b",
]
BAR_COLOR = "steelblue"
BAR_MUTED = "#cccccc"
SELECTED_OUTLINE = "#FF0000"
FILTERED_OUT = "#A9A9A9"
FEMALE_LINE = "#FF69B4"
MALE_LINE = "#4169E1"


def _configure_layout(
    fig: go.Figure,
    title: Optional[str] = None,
    yaxis_title: Optional[str] = None,
    xaxis_title: Optional[str] = None,
    height: Optional[int] = None,
) -> go.Figure:
    fig.update_layout(
        template=DEFAULT_TEMPLATE,
        colorway=DEFAULT_COLOR_SEQUENCE,
        title=title,
        margin=dict(l=40, r=20, t=60, b=40),
        clickmode="event+select",
    )
    if height:
        fig.update_layout(height=height)
    if yaxis_title:
        fig.update_yaxes(title=yaxis_title)
    if xaxis_title:
        fig.update_xaxes(title=xaxis_title)
    fig.update_xaxes(showgrid=False)
    fig.update_yaxes(showgrid=True, zeroline=True)
    return fig


def render_plotly(fig: go.Figure, key: Optional[str] = None, selectable: bool = False):
    """Render a figure; selectable charts rerun the script on click and return the event."""
    if selectable:
        return st.plotly_chart(
            fig,
            use_container_width=True,
            config={"displayModeBar": False},
            key=key,
            on_select="rerun",
            selection_mode="points",
        )
    st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False}, key=key)
    return None


def donut_chart(
    df: pd.DataFrame,
    names: str,
    values: str,
    title: Optional[str] = None,
    colors: Optional[Dict[str, str]] = None,
) -> go.Figure:
    fig = px.pie(
        df,
        names=names,
        values=values,
        hole=0.55,
        color=names if colors else None,
        color_discrete_map=colors,
    )
    fig.update_traces(textposition="inside", textinfo="percent+label")
    total = int(df[values].sum()) if not df.empty else 0
    fig = _configure_layout(fig, title)
    fig.update_layout(
        showlegend=True,
        annotations=[dict(text=f"{total:,}", x=0.5, y=0.5, font_size=20, showarrow=False)],
    )
    return fig


def histogram_bars(
    df: pd.DataFrame,
    title: Optional[str] = None,
    average: Optional[float] = None,
    xaxis_title: Optional[str] = None,
    yaxis_title: Optional[str] = "Count",
    height: Optional[int] = None,
) -> go.Figure:
    """Bars over fixed buckets; ``df`` needs low, high, count and selected columns."""
    colors = [BAR_COLOR if sel else BAR_MUTED for sel in df["selected"]] if "selected" in df else BAR_COLOR
    fig = go.Figure(
        go.Bar(
            x=(df["low"] + df["high"]) / 2,
            y=df["count"],
            width=(df["high"] - df["low"]).clip(lower=1e-9),
            marker=dict(color=colors, line=dict(color="#ffffff", width=0.5)),
            customdata=df[["low", "high"]].to_numpy(),
            hovertemplate="%{customdata[0]:.1f}–%{customdata[1]:.1f}<br>Count %{y}<extra></extra>",
        )
    )
    if average is not None:
        fig.add_vline(
            x=average,
            line_dash="dash",
            line_color=DEFAULT_COLOR_SEQUENCE[3],
            annotation_text=f"National avg {average:.1f}",
        )
    fig = _configure_layout(fig, title, yaxis_title, xaxis_title, height)
    fig.update_layout(bargap=0)
    return fig


def category_bars(
    df: pd.DataFrame,
    x: str,
    y: str,
    title: Optional[str] = None,
    yaxis_title: Optional[str] = "Count",
    height: Optional[int] = None,
) -> go.Figure:
    colors = [BAR_COLOR if sel else BAR_MUTED for sel in df["selected"]] if "selected" in df else BAR_COLOR
    fig = go.Figure(
        go.Bar(
            x=df[x],
            y=df[y],
            marker=dict(color=colors),
            customdata=df[[x]].to_numpy(),
            hovertemplate="%{x}<br>Count %{y}<extra></extra>",
        )
    )
    fig = _configure_layout(fig, title, yaxis_title, height=height)
    fig.update_xaxes(tickangle=-45)
    return fig


def ratio_chart(df: pd.DataFrame, title: Optional[str] = None) -> go.Figure:
    fig = go.Figure(
        go.Bar(
            x=df["Eye Color"],
            y=df["Ratio"],
            marker=dict(color=df["color"]),
            hovertemplate="%{x}: %{y:.2f}<extra></extra>",
        )
    )
    fig.add_hline(y=1, line_dash="dot", line_color=DEFAULT_COLOR_SEQUENCE[3])
    fig = _configure_layout(
        fig,
        title,
        yaxis_title="Representation Ratio (Observed / Expected)",
        xaxis_title="Eye Color",
    )
    return fig


def parallel_coordinates(
    df: pd.DataFrame,
    dimensions: Sequence[Any],
    full_df: pd.DataFrame,
    highlighted: Sequence[bool],
    title: Optional[str] = None,
) -> go.Figure:
    """Parallel coordinates over ``df``; axis ranges come from ``full_df``.

    Lines outside the current filter are drawn grey; surviving lines are
    coloured by gender.
    """
    axes: List[Dict[str, Any]] = []
    for dim in dimensions:
        if dim.is_numerical:
            values = pd.to_numeric(df[dim.name], errors="coerce")
            full = pd.to_numeric(full_df[dim.name], errors="coerce")
            axes.append(dict(label=dim.label, values=values, range=[float(full.min()), float(full.max())]))
        else:
            categories = sorted(full_df[dim.name].astype(str).unique().tolist())
            codes = {name: i for i, name in enumerate(categories)}
            axes.append(
                dict(
                    label=dim.label,
                    values=df[dim.name].astype(str).map(codes),
                    tickvals=list(codes.values()),
                    ticktext=categories,
                    range=[-0.5, max(len(categories) - 0.5, 0.5)],
                )
            )
    genders = df["gender"].astype(str).str.lower() if "gender" in df else pd.Series("", index=df.index)
    color_codes = [
        (2 if "female" in gender else 1) if keep else 0
        for gender, keep in zip(genders, highlighted)
    ]
    fig = go.Figure(
        go.Parcoords(
            dimensions=axes,
            line=dict(
                color=color_codes,
                colorscale=[
                    [0.0, FILTERED_OUT],
                    [0.33, FILTERED_OUT],
                    [0.34, MALE_LINE],
                    [0.66, MALE_LINE],
                    [0.67, FEMALE_LINE],
                    [1.0, FEMALE_LINE],
                ],
                cmin=0,
                cmax=2,
            ),
        )
    )
    fig.update_layout(template=DEFAULT_TEMPLATE, title=title, margin=dict(l=60, r=40, t=60, b=30))
    return fig


def choropleth_map(
    df: pd.DataFrame,
    geojson: Dict[str, Any],
    locations: str,
    z: str,
    featureidkey: str = "id",
    selected: Optional[Sequence[bool]] = None,
    custom_columns: Optional[List[str]] = None,
    hovertemplate: Optional[str] = None,
    color_scale: str = "Blues",
    zmax: Optional[float] = None,
    colorbar_title: Optional[str] = None,
    title: Optional[str] = None,
) -> go.Figure:
    selected = list(selected) if selected is not None else [False] * len(df)
    fig = go.Figure(
        go.Choropleth(
            geojson=geojson,
            featureidkey=featureidkey,
            locations=df[locations],
            z=df[z],
            zmin=0,
            zmax=zmax,
            colorscale=color_scale,
            marker_line_color=[SELECTED_OUTLINE if sel else "#ffffff" for sel in selected],
            marker_line_width=[2 if sel else 0.5 for sel in selected],
            customdata=df[custom_columns].to_numpy() if custom_columns else None,
            hovertemplate=hovertemplate,
            colorbar_title=colorbar_title,
        )
    )
    fig.update_geos(scope="usa", visible=False)
    fig.update_layout(
        template=DEFAULT_TEMPLATE,
        title=title,
        margin=dict(l=0, r=0, t=40, b=0),
        height=420,
        clickmode="event+select",
    )
    return fig
