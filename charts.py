import os

import pandas as pd
import plotly.graph_objects as go
import plotly.io as pio
from plotly.subplots import make_subplots

from config import CHART_COLORS, OUTPUTS_DIR, DASHBOARD_BASENAME

pio.templates.default = "plotly_white"


def stacked_chart_frame(data_points):
    """Pivot by-service data points into a person x service table of counts"""
    if not data_points:
        return pd.DataFrame()

    df = pd.DataFrame(data_points)
    persons = list(dict.fromkeys(df['person']))
    services = list(dict.fromkeys(df['serviceName']))

    table = df.pivot_table(index='person', columns='serviceName', values='count',
                           aggfunc='sum', fill_value=0)
    return table.reindex(index=persons, columns=services, fill_value=0)


def cumulative_chart_frame(data_points):
    """Pivot by-date data points into a date x person table of running totals"""
    if not data_points:
        return pd.DataFrame()

    df = pd.DataFrame(data_points)
    persons = list(dict.fromkeys(df['person']))

    table = df.pivot_table(index='date', columns='person', values='count',
                           aggfunc='sum', fill_value=0)
    table = table.sort_index().reindex(columns=persons, fill_value=0)
    return table.cumsum()


def _empty_figure(title):
    fig = go.Figure()
    fig.add_annotation(text="No data for the selected filters", showarrow=False,
                       x=0.5, y=0.5, xref='paper', yref='paper',
                       font=dict(size=18, color='#64748b'))
    fig.update_layout(title=title, xaxis=dict(visible=False), yaxis=dict(visible=False))
    return fig


def create_stacked_chart(data_points, colors=CHART_COLORS):
    """Stacked bar chart: one bar per person, one segment per service"""
    title = '<b>Services per Person</b>'
    table = stacked_chart_frame(data_points)
    if table.empty:
        return _empty_figure(title)

    fig = go.Figure()
    for idx, service_name in enumerate(table.columns):
        fig.add_trace(go.Bar(
            x=list(table.index),
            y=list(table[service_name]),
            name=service_name,
            marker=dict(color=colors[idx % len(colors)]),
            hovertemplate=f'<b>%{{x}}</b><br>{service_name}: %{{y:.2f}}<extra></extra>'
        ))

    fig.update_layout(
        title=title,
        barmode='stack',
        xaxis=dict(title='Person'),
        yaxis=dict(title='Count', rangemode='tozero'),
        legend=dict(title='Service')
    )
    return fig


def create_line_chart(data_points, colors=CHART_COLORS):
    """Line chart of each person's cumulative count over the event dates"""
    title = '<b>Cumulative Services per Person</b>'
    table = cumulative_chart_frame(data_points)
    if table.empty:
        return _empty_figure(title)

    fig = go.Figure()
    for idx, person in enumerate(table.columns):
        fig.add_trace(go.Scatter(
            x=list(table.index),
            y=list(table[person]),
            mode='lines+markers',
            name=person,
            line=dict(color=colors[idx % len(colors)], shape='spline', smoothing=0.2),
            hovertemplate=f'<b>{person}</b><br>📅 %{{x}}<br>👥 %{{y:.2f}}<extra></extra>'
        ))

    fig.update_layout(
        title=title,
        xaxis=dict(title='Date', type='category'),
        yaxis=dict(title='Cumulative Count', rangemode='tozero')
    )
    return fig


def _options_summary(options):
    return (f"Calendars {options['calendars']} · Services {options['services']} · "
            f"{options['from_date']:%d %b %Y} - {options['to_date']:%d %b %Y} · "
            f"min. {options['min_services_count']} · "
            f"{getattr(options['aggregation_type'], 'value', options['aggregation_type'])}")


def create_dashboard(by_service, by_date, events_html, options, outputs_dir=OUTPUTS_DIR,
                     save_png=True):
    """Write the charts and the event list into one HTML file (and a PNG of the charts)"""
    print(f"\n📊 Creating serving dashboard...")

    stacked = create_stacked_chart(by_service)
    line = create_line_chart(by_date)

    os.makedirs(outputs_dir, exist_ok=True)
    html_filename = os.path.join(outputs_dir, f"{DASHBOARD_BASENAME}.html")
    png_filename = os.path.join(outputs_dir, f"{DASHBOARD_BASENAME}.png")

    page = f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>Serving Dashboard</title>
<style>
body {{ font-family: Arial, sans-serif; background: #f8f9fa; color: #2c3e50; margin: 2em; }}
.charts {{ display: flex; flex-wrap: wrap; gap: 1em; justify-content: center; }}
.chart {{ width: 600px; height: 400px; background: white; }}
.event-title {{ font-size: 1.1em; margin-bottom: 0.2em; }}
.event-services {{ list-style: none; padding-left: 1em; margin-top: 0; }}
</style>
</head>
<body>
<h1>Serving Dashboard</h1>
<p>{_options_summary(options)}</p>
<h2>Charts</h2>
<div class="charts">
<div class="chart">{stacked.to_html(full_html=False, include_plotlyjs='cdn')}</div>
<div class="chart">{line.to_html(full_html=False, include_plotlyjs=False)}</div>
</div>
<h2>Events</h2>
<div id="eventList">
{events_html}
</div>
</body>
</html>
"""

    try:
        with open(html_filename, 'w', encoding='utf-8') as f:
            f.write(page)
        print(f"✅ Saved HTML: {html_filename}")
    except OSError as e:
        print(f"❌ Failed to save HTML: {e}")
        return None

    if not save_png:
        return html_filename

    try:
        combined = make_subplots(rows=1, cols=2, subplot_titles=(
            'Services per Person', 'Cumulative Services per Person'))
        for trace in stacked.data:
            combined.add_trace(trace, row=1, col=1)
        for trace in line.data:
            combined.add_trace(trace, row=1, col=2)
        combined.update_layout(barmode='stack', showlegend=True)
        combined.write_image(png_filename, width=1600, height=700, scale=2)
        print(f"✅ Saved PNG: {png_filename}")
    except Exception as e:
        print(f"⚠️ PNG save failed: {e}")

    return html_filename
