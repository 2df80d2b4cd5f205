# visualization/plot_matplotlib.py

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import BoundaryNorm, ListedColormap
from matplotlib.patches import Patch
from models.states import EpidemicState

# Paleta pastel del modelo original (RGB 0-255)
STATE_COLORS = {
    EpidemicState.S: (255, 239, 186),  # amarillo
    EpidemicState.I: (255, 182, 193),  # rosado
    EpidemicState.R: (173, 216, 230),  # azul
    EpidemicState.V: (152, 251, 152),  # verde
}

BACKGROUND = (40, 40, 40)


def to_mpl_color(rgb):
    return tuple(c / 255.0 for c in rgb)


def state_colormap():
    """
    Colormap discreto indexado por EpidemicState.value.
    Un codigo fuera de los cuatro estados no tiene color.
    """
    states = sorted(EpidemicState, key=lambda st: st.value)
    cmap = ListedColormap([to_mpl_color(STATE_COLORS[st]) for st in states])
    bounds = [states[0].value - 0.5] + [st.value + 0.5 for st in states]
    return cmap, BoundaryNorm(bounds, cmap.N)


def render_frame(codes, counts, step, path=None):
    """
    Dibuja la grilla con su leyenda (conteos por estado y paso actual).
    Si 'path' se da, guarda la imagen y cierra la figura.
    """
    cmap, norm = state_colormap()
    fig, ax = plt.subplots(figsize=(10, 8))
    fig.patch.set_facecolor(to_mpl_color(BACKGROUND))
    ax.imshow(np.asarray(codes), cmap=cmap, norm=norm, interpolation='nearest')
    ax.set_xticks([])
    ax.set_yticks([])

    handles = [
        Patch(color=to_mpl_color(STATE_COLORS[st]), label=f"{st.label} : {count}")
        for st, count in zip(EpidemicState, counts)
    ]
    legend = ax.legend(handles=handles, title=f"Step: {step}",
                       loc='upper left', bbox_to_anchor=(1.02, 1.0),
                       facecolor=to_mpl_color(BACKGROUND), labelcolor='white')
    legend.get_title().set_color('white')
    fig.tight_layout()

    if path is not None:
        fig.savefig(path, facecolor=fig.get_facecolor())
        plt.close(fig)
    return fig


def plot_state_counts(rows, path=None):
    """
    Serie de tiempo de los cuatro conteos. 'rows' es una lista de (step, StateCounts).
    """
    steps = [step for step, _ in rows]
    fig = plt.figure(figsize=(12, 6))
    for idx, state in enumerate(EpidemicState):
        values = [counts[idx] for _, counts in rows]
        plt.plot(steps, values, label=state.label, color=to_mpl_color(STATE_COLORS[state]))

    plt.title("Simulación SIRV en grilla")
    plt.xlabel("Tiempo (pasos)")
    plt.ylabel("Número de individuos")
    plt.legend(loc='upper right')
    plt.grid(True)
    plt.tight_layout()

    if path is not None:
        plt.savefig(path)
        plt.close(fig)
    else:
        plt.show()
    return fig
