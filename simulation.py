# simulation.py
import logging
import random
from typing import List, Optional, Tuple

from config import config, ConfigurationError
from solarsystem import SolarSystem, CelestialBody, build_catalog
from asteroid_belt import AsteroidBelt


class SimulationClock:
    """Owns simulated time.

    Simulated days advance by `real_dt * time_scale` per tick unless the clock
    is paused. A negative time scale runs time backward; a zero time scale is
    treated as paused.

    Attributes:
        sim_time_days (float): Total simulated time since the epoch, in days.
        paused (bool): Whether ticks currently advance time.
    """

    def __init__(self, time_scale: Optional[float] = None, paused: Optional[bool] = None):
        self._time_scale = config.Time.DEFAULT_TIME_SCALE if time_scale is None else float(time_scale)
        self.paused = config.Time.START_PAUSED if paused is None else paused
        if self._time_scale == 0:
            self.paused = True
        self.sim_time_days = 0.0

    @property
    def time_scale(self) -> float:
        return self._time_scale

    def set_time_scale(self, value: float) -> float:
        """Sets simulated days per real second. Zero pauses; other values leave the pause state alone."""
        self._time_scale = float(value)
        if self._time_scale == 0:
            self.paused = True
        return self._time_scale

    def toggle_pause(self) -> bool:
        """Flips the pause state. Un-pausing with a zero time scale keeps the clock paused."""
        self.paused = not self.paused
        if not self.paused and self._time_scale == 0:
            self.paused = True
        logging.info(f"Simulation {'paused' if self.paused else 'resumed'} at t={self.sim_time_days:.2f} days.")
        return self.paused

    def tick(self, real_dt_seconds: float) -> Tuple[float, float]:
        """Advances simulated time.

        Returns:
            Tuple[float, float]: (sim_time_days, delta_days). `delta_days` is
            0.0 while paused.
        """
        if self.paused:
            return self.sim_time_days, 0.0
        delta_days = real_dt_seconds * self._time_scale
        self.sim_time_days += delta_days
        return self.sim_time_days, delta_days

    def reset(self) -> None:
        self.sim_time_days = 0.0


class OrrerySimulation:
    """Ties the catalog, the asteroid belt and the clock into a frame loop.

    `build()` assembles the `SolarSystem` once; `advance()` is called per
    frame with the real elapsed time and updates every body.

    Attributes:
        solar_system (SolarSystem): The body hierarchy, None until built.
        asteroid_belt (AsteroidBelt): The belt generator, None if disabled.
        clock (SimulationClock): Simulated time.
        frame_count (int): Frames advanced since the last reset.
    """

    def __init__(self, clock: Optional[SimulationClock] = None):
        self.clock = clock or SimulationClock()
        self.solar_system: Optional[SolarSystem] = None
        self.asteroid_belt: Optional[AsteroidBelt] = None
        self.frame_count = 0

    def build(self, seed: Optional[int] = None, include_belt: bool = True,
              randomize_epoch_phase: Optional[bool] = None) -> SolarSystem:
        """Creates the catalog bodies and (optionally) the asteroid belt.

        Args:
            seed: Seeds a single `random.Random` shared by epoch-phase
                randomization and belt generation. None falls back to
                `config.AsteroidBelt.SEED`.
            include_belt: Whether to generate the asteroid belt.
            randomize_epoch_phase: Overrides `config.SolarSystem.RANDOMIZE_EPOCH_PHASE`.

        Raises:
            ConfigurationError: If the catalog or belt configuration is invalid.
        """
        if seed is None:
            seed = config.AsteroidBelt.SEED
        rng = random.Random(seed)

        bodies: List[CelestialBody] = build_catalog(randomize_epoch_phase=randomize_epoch_phase, rng=rng)
        if include_belt:
            self.asteroid_belt = AsteroidBelt(rng=rng, parent=config.SolarSystem.ROOT_BODY)
            bodies.extend(self.asteroid_belt.generate())
        else:
            self.asteroid_belt = None

        try:
            self.solar_system = SolarSystem(bodies)
        except ConfigurationError as e_config:
            logging.critical(f"Could not assemble the solar system: {e_config}", exc_info=True)
            raise
        self.frame_count = 0
        self.clock.reset()
        return self.solar_system

    def advance(self, real_dt_seconds: float) -> Tuple[float, float]:
        """Runs one frame. Paused frames leave every body untouched."""
        if self.solar_system is None:
            raise RuntimeError("OrrerySimulation.advance() called before build().")
        sim_time_days, delta_days = self.clock.tick(real_dt_seconds)
        if not self.clock.paused:
            self.solar_system.update_all(sim_time_days, delta_days)
        self.frame_count += 1
        return sim_time_days, delta_days

    def reset(self) -> None:
        """Returns simulated time to zero and re-evaluates every body there."""
        self.clock.reset()
        self.frame_count = 0
        if self.solar_system is not None:
            self.solar_system.update_all(0.0, 0.0)
        logging.info("Simulation time reset to 0.")
