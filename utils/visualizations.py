"""Visualization utilities for the hotel pro-forma."""

import plotly.graph_objects as go
from plotly.subplots import make_subplots


def create_rooms_kpi_chart(kpis):
    """ADR and RevPAR lines with occupancy on a secondary axis."""
    years = kpis.years
    labels = [f'Y{y}' for y in years]
    fig = make_subplots(specs=[[{"secondary_y": True}]])
    fig.add_trace(go.Scatter(
        x=labels,
        y=[kpis.adr[f'y{y}'] for y in years],
        mode='lines+markers',
        name='ADR',
        line=dict(color='blue', width=2)
    ), secondary_y=False)
    fig.add_trace(go.Scatter(
        x=labels,
        y=[kpis.revpar[f'y{y}'] for y in years],
        mode='lines+markers',
        name='RevPAR',
        line=dict(color='green', width=2)
    ), secondary_y=False)
    fig.add_trace(go.Scatter(
        x=labels,
        y=[kpis.occupancy[f'y{y}'] * 100 for y in years],
        mode='lines+markers',
        name='Occupancy %',
        line=dict(color='orange', width=2, dash='dash')
    ), secondary_y=True)
    fig.update_layout(
        title='Rooms KPIs',
        xaxis_title='Year',
        height=400
    )
    fig.update_yaxes(title_text='Rate', secondary_y=False)
    fig.update_yaxes(title_text='Occupancy (%)', secondary_y=True)
    return fig


def create_pl_waterfall_chart(rows, year):
    """USALI waterfall from total revenue down to net income for one year."""
    def total(row_id):
        row = next((r for r in rows if r.id == row_id), None)
        if row is None:
            return 0.0
        return next((c.total for c in row.years if c.year == year), 0.0)

    steps = [
        ('Total Revenue', total('total-revenue'), 'absolute'),
        ('Direct Costs', -total('direct-costs-total'), 'relative'),
        ('GOI', 0, 'total'),
        ('Indirect Costs', -total('undistributed-total'), 'relative'),
        ('GOP', 0, 'total'),
        ('Fixed Charges', -(total('management-fees') + total('property-taxes') + total('insurance')), 'relative'),
        ('Rent', -total('rent'), 'relative'),
        ('EBITDA', 0, 'total'),
        ('Depreciation', -total('depreciation'), 'relative'),
        ('Interest', -total('interest-expense'), 'relative'),
        ('Net Income', 0, 'total'),
    ]
    fig = go.Figure(go.Waterfall(
        x=[s[0] for s in steps],
        y=[s[1] for s in steps],
        measure=[s[2] for s in steps],
        connector=dict(line=dict(color='gray'))
    ))
    fig.update_layout(
        title=f'P&L Waterfall - Year {year}',
        yaxis_title='Amount',
        height=400
    )
    return fig


def create_debt_balance_chart(schedule):
    """Outstanding loan balance by month, with the balloon marked."""
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=[r['month'] for r in schedule.rows],
        y=[r['balance'] for r in schedule.rows],
        mode='lines',
        name='Balance',
        line=dict(color='blue', width=2)
    ))
    if schedule.has_balloon:
        fig.add_hline(y=schedule.balloon_payment, line_dash="dash", line_color="red",
                      annotation_text="Balloon")
    fig.update_layout(
        title='Loan Balance',
        xaxis_title='Month',
        yaxis_title='Balance',
        height=400
    )
    return fig


def create_cashflow_chart(cashflow):
    """Unlevered vs levered cash flow bars by year."""
    years = [f"Y{r['year']}" for r in cashflow.rows]
    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=years,
        y=[r['unlevered_cf'] for r in cashflow.rows],
        name='Unlevered CF',
        marker_color='green'
    ))
    fig.add_trace(go.Bar(
        x=years,
        y=[r['levered_cf'] for r in cashflow.rows],
        name='Levered CF',
        marker_color='blue'
    ))
    fig.add_hline(y=0, line_dash="dash", line_color="gray")
    fig.update_layout(
        title='Cash Flows',
        xaxis_title='Year',
        yaxis_title='Cash Flow',
        barmode='group',
        height=400
    )
    return fig
