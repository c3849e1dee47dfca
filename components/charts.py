import logging

import plotly.graph_objects as go

from components.formatting import format_currency

logger = logging.getLogger(__name__)

CHART_TITLE = "Time to Reach Savings Target vs. Annual CTC"
SERIES_NAME = "Months to Reach Target"


def generate_time_to_target_chart(items):
    """Line chart of months-to-target per CTC. Unreachable rows are dropped."""
    reachable = [item for item in items if item.time_to_target_months is not None]
    if not reachable:
        return None

    labels = [format_currency(item.annual_ctc, decimals=0) for item in reachable]
    months = [item.time_to_target_months for item in reachable]

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=labels,
        y=months,
        mode='lines+markers',
        name=SERIES_NAME,
        line=dict(color='rgb(75, 192, 192)', width=3),
        marker=dict(size=6, color='rgba(75, 192, 192, 0.5)'),
        hovertemplate='<b>Annual CTC:</b> %{x}<br><b>' + SERIES_NAME + ':</b> %{y:.0f} months<extra></extra>'
    ))

    fig.update_layout(
        title=CHART_TITLE,
        xaxis_title='Annual CTC',
        yaxis_title=SERIES_NAME,
        height=450,
        plot_bgcolor='rgba(0,0,0,0)',
        paper_bgcolor='rgba(0,0,0,0)',
        hovermode='x',
        legend=dict(orientation='h', yanchor='bottom', y=1.02, xanchor='left', x=0)
    )
    fig.update_yaxes(rangemode='tozero')
    fig.update_xaxes(type='category')

    logger.debug(f"Time-to-target chart built with {len(reachable)} points")
    return fig
