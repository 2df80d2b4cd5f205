# main.py

import argparse
import csv
import os
from services.population_grid import PopulationGrid
from utils.config import default_config, load_config, validate_config
from utils.logger import get_logger
from visualization.plot_matplotlib import plot_state_counts, render_frame
from visualization.plot_plotly import plot_interactive

CSV_FIELDS = ['step', 'susceptible', 'infected', 'recovered', 'vaccinated']


def build_grid(config):
    """
    Crea la grilla y siembra el bloque inicial de infectados.
    """
    grid = PopulationGrid(config.grid_size, params=config.params, seed=config.seed)
    seeded = grid.seed_block(config.seed_start, config.seed_end, config.seed_probability)
    grid.logger.info(
        f"Grilla {grid.size()}x{grid.size()} con {seeded} infectados iniciales "
        f"en [{config.seed_start}, {config.seed_end})."
    )
    return grid


def run_simulation(config):
    """
    Ejecuta una corrida completa y retorna la lista de (step, StateCounts).
    La fila del paso 0 refleja la grilla sembrada, antes de cualquier update.
    """
    logger = get_logger()
    grid = build_grid(config)

    if config.frame_interval > 0:
        os.makedirs(config.frames_dir, exist_ok=True)

    rows = [(0, grid.count_states())]
    snapshots = []

    def save_frame(step, counts):
        codes = grid.state_array()
        snapshots.append((step, codes))
        path = os.path.join(config.frames_dir, f"frame_{step:04d}.png")
        render_frame(codes, counts, step, path)
        logger.debug(f"Saved {path}")

    if config.frame_interval > 0:
        save_frame(0, rows[0][1])
    else:
        snapshots.append((0, grid.state_array()))

    csvfile = open(config.counts_csv, "w", newline='') if config.counts_csv else None
    try:
        writer = None
        if csvfile is not None:
            writer = csv.writer(csvfile)
            writer.writerow(CSV_FIELDS)
            writer.writerow([0, *rows[0][1]])

        for step in range(1, config.max_steps + 1):
            grid.step()
            counts = grid.count_states()
            rows.append((step, counts))
            if writer is not None:
                writer.writerow([step, *counts])

            if config.frame_interval > 0 and step % config.frame_interval == 0:
                save_frame(step, counts)

            if step % config.log_interval == 0 or step == config.max_steps:
                logger.info(
                    f"Step={step} => "
                    f"S={counts.susceptible}, I={counts.infected}, "
                    f"R={counts.recovered}, V={counts.vaccinated}, "
                    f"Vacunados={counts.vaccinated / counts.total:.2%}"
                )
    finally:
        if csvfile is not None:
            csvfile.close()

    if config.plot:
        if config.frame_interval == 0:
            snapshots.append((grid.t, grid.state_array()))
        plot_state_counts(rows)
        plot_interactive(snapshots)

    return rows


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Simulación SIRV en grilla (cadena de Markov por celda).")
    parser.add_argument("--config", help="Archivo YAML de configuración")
    parser.add_argument("--steps", type=int, help="Número de pasos a simular")
    parser.add_argument("--size", type=int, help="Lado n de la grilla n x n")
    parser.add_argument("--seed", type=int, help="Semilla del generador aleatorio")
    parser.add_argument("--counts-csv", help="Archivo CSV de conteos por paso")
    parser.add_argument("--frames-dir", help="Directorio para los cuadros PNG")
    parser.add_argument("--frame-interval", type=int, help="Guardar un cuadro cada N pasos (0 = nunca)")
    parser.add_argument("--plot", action="store_true", help="Mostrar gráficos al terminar")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log a nivel DEBUG")
    return parser.parse_args(argv)


def config_from_args(args):
    overrides = {}
    for attr, key in [("steps", "max_steps"), ("size", "grid_size"), ("seed", "seed"),
                      ("counts_csv", "counts_csv"), ("frames_dir", "frames_dir"),
                      ("frame_interval", "frame_interval")]:
        value = getattr(args, attr)
        if value is not None:
            overrides[key] = value
    if args.plot:
        overrides["plot"] = True

    if args.config:
        return load_config(args.config, overrides)

    config = default_config()
    for key, value in overrides.items():
        setattr(config, key, value)
    if "grid_size" in overrides and config.seed_end > config.grid_size:
        # El bloque por defecto cubre la mitad central de la grilla
        config.seed_start = config.grid_size // 4
        config.seed_end = 3 * config.grid_size // 4
    validate_config(config)
    return config


def main(argv=None):
    args = parse_args(argv)
    if args.verbose:
        get_logger(level="DEBUG")
    config = config_from_args(args)
    return run_simulation(config)

if __name__ == "__main__":
    main()
