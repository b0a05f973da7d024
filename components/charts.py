"""Plotly chart factory"""
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import plotly.io as pio

from config.settings import COLORS
from data_manager.schema import LoanQuote

pio.templates["coop_loans_light"] = go.layout.Template(
    layout=go.Layout(
        font=dict(family="sans-serif", color="#333"),
        title_font=dict(size=20, color="#333"),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        xaxis=dict(gridcolor="#e0e0e0", linecolor="#e0e0e0", zerolinecolor="#e0e0e0"),
        yaxis=dict(gridcolor="#e0e0e0", linecolor="#e0e0e0", zerolinecolor="#e0e0e0"),
        legend=dict(bgcolor="rgba(255,255,255,0.5)", bordercolor="#e0e0e0", borderwidth=1),
        colorway=px.colors.qualitative.Plotly,
    )
)

pio.templates.default = "coop_loans_light"


def create_deductions_pie(quote: LoanQuote, template: str = "coop_loans_light") -> go.Figure:
    """Where the amortization goes: fees vs. net proceeds"""
    parts = [
        ("Service fee", quote.service_fee, COLORS["service_fee"]),
        ("LRF", quote.lrf, COLORS["lrf"]),
        ("Document stamp", quote.document_stamp, COLORS["document_stamp"]),
        ("Mortgage + notarial", quote.mort_plus_notarial, COLORS["mort_plus_notarial"]),
        ("Net proceeds", quote.estimated_net_proceeds, COLORS["net_proceeds"]),
    ]
    parts = [p for p in parts if p[1] > 0]

    fig = go.Figure(data=[go.Pie(
        labels=[p[0] for p in parts],
        values=[p[1] for p in parts],
        hole=0.45,
        marker_colors=[p[2] for p in parts],
        textinfo="label+percent",
        textposition="outside",
    )])
    fig.update_layout(
        title="Amortization breakdown",
        showlegend=True,
        margin=dict(t=60, b=20, l=20, r=20),
        height=380,
        template=template,
    )
    return fig


def create_remaining_balance_line(schedule: pd.DataFrame, template: str = "coop_loans_light") -> go.Figure:
    """Remaining principal with principal/interest split per period"""
    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=schedule["period"],
        y=schedule["principal"],
        name="Principal",
        marker_color=COLORS["principal"],
        hovertemplate="Period %{x}<br>Principal: ₱%{y:,.2f}<extra></extra>",
    ))
    fig.add_trace(go.Bar(
        x=schedule["period"],
        y=schedule["interest"],
        name="Interest",
        marker_color=COLORS["interest"],
        hovertemplate="Period %{x}<br>Interest: ₱%{y:,.2f}<extra></extra>",
    ))
    fig.add_trace(go.Scatter(
        x=schedule["period"],
        y=schedule["remaining_principal"],
        mode="lines",
        name="Remaining principal",
        yaxis="y2",
        line=dict(color=COLORS["danger"], width=2),
        hovertemplate="Period %{x}<br>Balance: ₱%{y:,.2f}<extra></extra>",
    ))
    fig.update_layout(
        title="Repayment over the term",
        barmode="stack",
        xaxis_title="Period",
        yaxis=dict(title="Payment (₱)"),
        yaxis2=dict(title="Balance (₱)", overlaying="y", side="right", showgrid=False),
        hovermode="x unified",
        margin=dict(t=60, b=60, l=60, r=60),
        height=400,
        template=template,
    )
    return fig
