# main.py
import os
import time
import logging
import cProfile
import argparse  # For command line arguments (frame count, seed, profiling)

import psutil  # For memory monitoring

from config import config, ConfigurationError  # Use the global config instance
from simulation import OrrerySimulation, SimulationClock


def run_headless(simulation: OrrerySimulation, frames: int, fps: float, realtime: bool = False) -> None:
    """Advances the simulation for `frames` frames of `1 / fps` real seconds each.

    Memory usage is sampled every `config.Monitoring.MEMORY_CHECK_INTERVAL_FRAMES`
    frames and a warning is logged above `MEMORY_USAGE_WARN_MB`.
    """
    process = psutil.Process(os.getpid())
    real_dt = 1.0 / fps
    for frame in range(frames):
        simulation.advance(real_dt)

        if frame > 0 and frame % config.Monitoring.MEMORY_CHECK_INTERVAL_FRAMES == 0:
            try:
                memory_mb = process.memory_info().rss / (1024 * 1024)
                if memory_mb > config.Monitoring.MEMORY_USAGE_WARN_MB:
                    logging.warning(f"High memory usage: {memory_mb:.2f} MB at frame {frame}")
                else:
                    logging.debug(f"Memory usage: {memory_mb:.2f} MB at frame {frame}")
            except psutil.Error as e_psutil:
                logging.error(f"Could not retrieve memory usage: {e_psutil}", exc_info=True)

        if realtime:
            time.sleep(real_dt)


def report_body(simulation: OrrerySimulation, name: str) -> None:
    solar_system = simulation.solar_system
    body = solar_system.get(name)
    world = solar_system.world_position(name)
    print(f"{body.name} ({body.body_type}) at t={simulation.clock.sim_time_days:.3f} days")
    print(f"  local position : {body.position.round(6).tolist()}")
    print(f"  world position : {world.round(6).tolist()}")
    print(f"  rotation angle : {body.rotation_angle_rad:.6f} rad")
    print(f"  visual radius  : {body.scaled_radius:.4f}")
    if body.description:
        print(f"  {body.description}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the Keplerian orrery headlessly.")
    parser.add_argument("--frames", type=int, default=600, help="Number of frames to simulate.")
    parser.add_argument("--fps", type=float, default=config.Time.DEFAULT_FPS,
                        help="Frames per real second; each frame advances 1/fps real seconds.")
    parser.add_argument("--time-scale", type=float, default=config.Time.DEFAULT_TIME_SCALE,
                        help="Simulated days per real second. Negative runs time backward, 0 pauses.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for belt generation and epoch phases.")
    parser.add_argument("--body", default="Earth", help="Body whose position is reported at the end.")
    parser.add_argument("--no-belt", action="store_true", help="Skip asteroid belt generation.")
    parser.add_argument("--randomize-moons", action="store_true",
                        help="Draw random epoch phases for moons instead of the catalog values.")
    parser.add_argument("--realtime", action="store_true", help="Sleep between frames to run at --fps.")
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Enable profiling for the simulation. Statistics will be saved to 'simulation_profile.prof'."
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.fps <= 0:
        logging.error(f"--fps must be positive (got {args.fps}).")
        return 2

    profiler = None
    if args.profile:
        profiler = cProfile.Profile()
        profiler.enable()
        logging.info("cProfile profiling enabled. Output will be saved to simulation_profile.prof upon completion.")

    exit_code = 0
    try:
        simulation = OrrerySimulation(SimulationClock(time_scale=args.time_scale))
        simulation.build(seed=args.seed, include_belt=not args.no_belt,
                         randomize_epoch_phase=True if args.randomize_moons else None)
        if args.body not in simulation.solar_system:
            logging.error(f"Unknown body '{args.body}'. Available: {', '.join(b.name for b in simulation.solar_system)}")
            return 2

        logging.info(f"Running {args.frames} frames at {args.fps} fps, time scale {args.time_scale} days/s.")
        run_headless(simulation, args.frames, args.fps, realtime=args.realtime)
        report_body(simulation, args.body)
    except ConfigurationError as e_config_main:
        logging.critical(f"Orrery could not be initialized due to a ConfigurationError: {e_config_main}", exc_info=True)
        print(f"FATAL CONFIGURATION ERROR: {e_config_main}. Simulation cannot start. Check logs for details.")
        exit_code = 1
    finally:
        if profiler:
            profiler.disable()
            stats_file = "simulation_profile.prof"
            try:
                profiler.dump_stats(stats_file)
                logging.info(f"Profiling data successfully saved to {stats_file}")
            except OSError as e_profile_dump:
                logging.error(f"Failed to save profiling data to {stats_file}: {e_profile_dump}", exc_info=True)
        logging.info("Orrery simulation terminated.")
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
