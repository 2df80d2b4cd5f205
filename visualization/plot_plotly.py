# visualization/plot_plotly.py

import plotly.graph_objects as go
from models.states import EpidemicState
from visualization.plot_matplotlib import STATE_COLORS

def discrete_colorscale():
    """
    Escala de colores por tramos para un Heatmap con zmin=S.value y zmax=V.value.
    """
    states = sorted(EpidemicState, key=lambda st: st.value)
    lo, hi = states[0].value - 0.5, states[-1].value + 0.5
    scale = []
    for st in states:
        color = "rgb({}, {}, {})".format(*STATE_COLORS[st])
        scale.append([(st.value - 0.5 - lo) / (hi - lo), color])
        scale.append([(st.value + 0.5 - lo) / (hi - lo), color])
    return scale, lo, hi


def _heatmap(codes, colorscale, lo, hi):
    return go.Heatmap(
        z=codes,
        colorscale=colorscale,
        zmin=lo, zmax=hi,
        showscale=False,
    )


def plot_interactive(snapshots, show=True):
    """
    Animacion de la grilla. 'snapshots' es una lista de (step, codes).
    """
    if not snapshots:
        raise ValueError("plot_interactive necesita al menos una foto de la grilla")
    colorscale, lo, hi = discrete_colorscale()
    frames = [
        go.Frame(data=[_heatmap(codes, colorscale, lo, hi)], name=str(step))
        for step, codes in snapshots
    ]

    fig = go.Figure(
        data=frames[0].data,
        layout=go.Layout(
            title="Distribución Espacial de Estados Epidemiológicos",
            xaxis=dict(title="Columna"),
            yaxis=dict(title="Fila", scaleanchor="x", scaleratio=1, autorange="reversed"),
            updatemenus=[dict(
                type="buttons",
                showactive=False,
                buttons=[dict(label="Play",
                              method="animate",
                              args=[None, {"frame": {"duration": 300, "redraw": True},
                                           "fromcurrent": True, "transition": {"duration": 0}}])]
            )]
        ),
        frames=frames
    )

    # Trazas vacias para que los estados aparezcan en la leyenda
    for state in EpidemicState:
        fig.add_trace(go.Scatter(
            x=[None], y=[None], mode='markers', name=state.label,
            marker=dict(size=10, color="rgb({}, {}, {})".format(*STATE_COLORS[state]))
        ))

    if show:
        fig.show()
    return fig
