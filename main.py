# main.py
"""
Main entry point for the Falling Sand simulation.

This script orchestrates the entire simulation lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Sets up the grid, the simulator and the window.
4. Runs the main loop: input, one simulation frame, drawing.
5. Handles clean shutdown.
"""
import logging
from utils import setup_logging, load_config, validate_config
import cProfile
import pstats
import io

def main():
    """
    The main function to run the simulation.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Falling Sand Simulation Starting ---")

    config = validate_config(config)
    sim_params = config['simulation_parameters']
    run_params = config['run_control']
    vis_params = config['visualization']

    from grid import Grid
    from simulation import Simulator
    from visualization import Visualizer

    # --- Component Initialization ---
    grid = Grid(sim_params['grid_width'], sim_params['grid_height'])
    sim = Simulator(sim_params)
    visualizer = Visualizer(grid.width, grid.height, vis_params)

    profiler = cProfile.Profile()

    log_throttle = run_params['log_throttle_steps']
    max_steps = run_params['max_steps']

    running = True
    step_num = 0

    profiler.enable()
    while running:
        # Painting happens before the frame so new particles take part in it.
        if not visualizer.handle_events(grid, sim):
            break

        moves = sim.step(grid)
        step_num += 1
        visualizer.draw(grid)

        # Rule 2.4: Hot loops must throttle logs
        if step_num % log_throttle == 0:
            logging.info(f"Simulation step {step_num}/{max_steps}")
            logging.debug(f"Step {step_num} | Particles: {grid.count()} | Moved: {moves}")

        if step_num >= max_steps:
            logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
            running = False
    profiler.disable()

    visualizer.close()
    logging.info("Simulation loop finished.")

    logging.info("--- Performance Profile ---")
    s = io.StringIO()
    # Sort by cumulative time spent in the function
    stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
    stats.print_stats(20)
    logging.info(f"\n{s.getvalue()}")

    logging.info("--- Falling Sand Simulation Shutting Down ---")


if __name__ == "__main__":
    main()
