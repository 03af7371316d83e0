from pyvis.network import Network
import plotly.express as px
import plotly.graph_objects as go
import pandas as pd
from typing import Dict, List, Optional, Sequence, Tuple
from xml.sax.saxutils import escape
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from observatory.constants import (
    EDGE_WIDTH, LABEL_FONT_SIZE, NODE_RADIUS, NODE_STROKE,
)
from observatory.viewport import Viewport


# color scheme - dark observatory theme
BACKGROUND = '#020617'
NODE_FILL = '#020617'
NODE_STROKE_COLOR = '#22d3ee'
LABEL_COLOR = '#94a3b8'
LABEL_BOX = 'rgba(2, 6, 23, 0.7)'

METRIC_COLORS = {
    'Degree': '#22d3ee',
    'Closeness': '#a78bfa',
    'Betweenness': '#f472b6',
    'Eigenvector': '#34d399',
    'Composite': '#facc15',
}


def edge_color(weight: float) -> str:
    # stronger similarity = more opaque
    return f"rgba(34, 211, 238, {weight * 0.8:.3f})"


class GraphViz:
    """
    draws the layout simulator's positions. every drawing method takes the
    current Viewport, positions are never modified here
    """

    def __init__(self, labels: Sequence[str]):
        self.labels = list(labels)

    def network_figure(
        self,
        positions: List[Tuple[float, float]],
        edges: List[Tuple[int, int, float]],
        viewport: Viewport,
        values: Optional[Sequence[float]] = None,
        value_name: str = 'Composite',
    ) -> go.Figure:
        """
        plotly figure in screen pixels. positions go through the viewport,
        marker/line sizes are already screen sized so zoom doesn't change them
        """

        screen = [viewport.to_screen(p) for p in positions]
        fig = go.Figure()

        for i, j, w in edges:
            (x0, y0), (x1, y1) = screen[i], screen[j]
            fig.add_trace(go.Scatter(
                x=[x0, x1], y=[y0, y1],
                mode='lines',
                line=dict(color=edge_color(w), width=EDGE_WIDTH),
                hoverinfo='skip',
                showlegend=False,
            ))

        hover = []
        for idx, label in enumerate(self.labels):
            text = label
            if values is not None:
                text += f"<br>{value_name}: {values[idx]:.3f}"
            hover.append(text)

        show_labels = viewport.labels_visible()
        fig.add_trace(go.Scatter(
            x=[p[0] for p in screen],
            y=[p[1] for p in screen],
            mode='markers+text' if show_labels else 'markers',
            text=self.labels if show_labels else None,
            textposition='middle right',
            textfont=dict(color=LABEL_COLOR, size=LABEL_FONT_SIZE, family='monospace'),
            hovertext=hover,
            hoverinfo='text',
            marker=dict(
                size=NODE_RADIUS * 2,
                color=NODE_FILL,
                line=dict(color=NODE_STROKE_COLOR, width=NODE_STROKE),
            ),
            showlegend=False,
        ))

        fig.update_layout(
            width=int(viewport.width),
            height=int(viewport.height),
            plot_bgcolor=BACKGROUND,
            paper_bgcolor=BACKGROUND,
            margin=dict(l=0, r=0, t=0, b=0),
            dragmode=False,
        )
        # canvas coords: origin top left, y grows downward
        fig.update_xaxes(range=[0, viewport.width], visible=False, fixedrange=True)
        fig.update_yaxes(range=[viewport.height, 0], visible=False, fixedrange=True)
        return fig

    def snapshot_svg(
        self,
        positions: List[Tuple[float, float]],
        edges: List[Tuple[int, int, float]],
        viewport: Viewport,
    ) -> str:
        """
        svg screenshot. drawn in layout coordinates under the same
        pan-then-scale group transform as the canvas, so stroke widths and
        font sizes are divided by the scale to stay constant on screen
        """

        cx, cy = viewport.center
        k = viewport.k
        transform = (f"translate({cx:.2f} {cy:.2f}) translate({viewport.x:.2f} {viewport.y:.2f}) "
                     f"scale({k:.4f}) translate({-cx:.2f} {-cy:.2f})")

        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{viewport.width:.0f}" '
            f'height="{viewport.height:.0f}">',
            f'<rect width="100%" height="100%" fill="{BACKGROUND}"/>',
            f'<g transform="{transform}">',
        ]

        line_w = viewport.stroke_width(EDGE_WIDTH)
        for i, j, w in edges:
            (x0, y0), (x1, y1) = positions[i], positions[j]
            parts.append(
                f'<line x1="{x0:.2f}" y1="{y0:.2f}" x2="{x1:.2f}" y2="{y1:.2f}" '
                f'stroke="{edge_color(w)}" stroke-width="{line_w:.4f}"/>'
            )

        radius = viewport.stroke_width(NODE_RADIUS)
        ring = viewport.stroke_width(NODE_STROKE)
        for x, y in positions:
            parts.append(
                f'<circle cx="{x:.2f}" cy="{y:.2f}" r="{radius:.4f}" fill="{NODE_FILL}" '
                f'stroke="{NODE_STROKE_COLOR}" stroke-width="{ring:.4f}"/>'
            )

        if viewport.labels_visible():
            font = viewport.font_size(LABEL_FONT_SIZE)
            offset = viewport.stroke_width(12)
            for (x, y), label in zip(positions, self.labels):
                parts.append(
                    f'<text x="{x + offset:.2f}" y="{y + viewport.stroke_width(2):.2f}" '
                    f'font-family="monospace" font-size="{font:.4f}" fill="{LABEL_COLOR}">'
                    f'{escape(label)}</text>'
                )

        parts.append('</g></svg>')
        return '\n'.join(parts)

    def create_graph(
        self,
        positions: List[Tuple[float, float]],
        edges: List[Tuple[int, int, float]],
        values: Optional[Sequence[float]] = None,
        height: str = '600px',
    ) -> Network:
        """
        pyvis network pinned to the simulator's current positions.
        vis.js physics stays off, the layout is ours
        """

        net = Network(
            height=height,
            width='100%',
            directed=False,
            notebook=False,
            bgcolor=BACKGROUND,
            font_color=LABEL_COLOR,
        )
        net.set_options('''
        {
            "physics": { "enabled": false },
            "nodes": {
                "font": { "size": 12, "face": "monospace" }
            },
            "interaction": {
                "dragNodes": true,
                "dragView": true,
                "zoomView": true
            }
        }
        ''')

        for idx, label in enumerate(self.labels):
            x, y = positions[idx]
            title = label if values is None else f"{label}\nComposite: {values[idx]:.3f}"
            size = 10 if values is None else 8 + 20 * float(values[idx])
            net.add_node(
                idx,
                label=label,
                title=title,
                x=int(x),
                y=int(y),
                size=size,
                color={'background': NODE_FILL, 'border': NODE_STROKE_COLOR},
                borderWidth=2,
            )

        for i, j, w in edges:
            net.add_edge(i, j, value=w, title=f"{w:.3f}", color=edge_color(w))

        return net


def metric_bar_chart(df: pd.DataFrame, metric: str, top: int = 17) -> go.Figure:

    top_df = df.sort_values(metric, ascending=False).head(top)
    fig = px.bar(top_df, x='City', y=metric, title=f'{metric} Centrality',
                 color_discrete_sequence=[METRIC_COLORS.get(metric, '#22d3ee')])
    fig.update_xaxes(tickangle=-45)
    return fig


def composite_bar_chart(df: pd.DataFrame) -> go.Figure:

    metrics = ['Degree', 'Closeness', 'Betweenness', 'Eigenvector']
    long_df = df.melt(id_vars=['City'], value_vars=metrics, var_name='Metric', value_name='Score')
    fig = px.bar(long_df, x='City', y='Score', color='Metric', barmode='group',
                 title='Centrality by City', color_discrete_map=METRIC_COLORS)
    fig.add_trace(go.Scatter(x=df['City'], y=df['Composite'], mode='lines+markers',
                             name='Composite', line=dict(color=METRIC_COLORS['Composite'])))
    fig.update_xaxes(tickangle=-45)
    return fig


def metric_history_chart(df: pd.DataFrame, city: str) -> go.Figure:

    metrics = [c for c in df.columns if c != 'Month']
    fig = px.line(df, x='Month', y=metrics, title=f'{city} over time', markers=True,
                  color_discrete_map=METRIC_COLORS)
    return fig
