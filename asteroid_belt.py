# asteroid_belt.py
import logging
import random
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from config import config, ConfigurationError, AU_KM, DAYS_PER_YEAR
from physics_utils import clamp, kepler_period_days
from solarsystem import CelestialBody, OrbitalElements

BACKGROUND_FAMILY = 'Background'


@dataclass(frozen=True)
class GapDescriptor:
    """A Kirkwood gap: an annulus around `center_km` cleared by a Jupiter resonance."""
    center_km: float
    width_km: float
    name: str = ""

    def contains(self, a_km: float) -> bool:
        return abs(a_km - self.center_km) < self.width_km / 2.0


@dataclass(frozen=True)
class OrbitalSpread:
    mean: float
    spread: float


@dataclass(frozen=True)
class FamilyDescriptor:
    name: str
    center_km: float
    spread_km: float
    count: int
    color: Tuple[int, int, int]
    inclination: OrbitalSpread  # degrees
    eccentricity: OrbitalSpread


@dataclass(frozen=True)
class DensityZone:
    center_km: float
    width_km: float
    density: float

    def contains(self, a_km: float) -> bool:
        return abs(a_km - self.center_km) < self.width_km / 2.0


@dataclass(frozen=True)
class BeltConfig:
    """All parameters of one belt generation run, with distances in km."""
    count: int
    inner_radius_km: float
    outer_radius_km: float
    min_size_km: float
    max_size_km: float
    inclination_range_deg: Tuple[float, float]
    eccentricity_range: Tuple[float, float]
    base_color: Tuple[int, int, int]
    color_variation: Tuple[int, int, int]
    gaps: Tuple[GapDescriptor, ...] = ()
    families: Tuple[FamilyDescriptor, ...] = ()
    density_zones: Tuple[DensityZone, ...] = ()
    family_eccentricity_limits: Tuple[float, float] = (0.01, 0.4)
    family_inclination_limits_deg: Tuple[float, float] = (0.0, 25.0)
    background_density: float = 0.3
    acceptance_scale: float = 0.8
    family_attempt_factor: int = 20
    background_attempt_factor: int = 5

    def __post_init__(self):
        if self.count < 0:
            raise ConfigurationError(f"Asteroid belt count cannot be negative ({self.count}).")
        if not (0 < self.inner_radius_km < self.outer_radius_km):
            raise ConfigurationError(
                f"Asteroid belt radii (Inner: {self.inner_radius_km}, Outer: {self.outer_radius_km}) "
                "must be positive and ordered correctly."
            )
        if not (0 < self.min_size_km <= self.max_size_km):
            raise ConfigurationError("Asteroid size range must be positive and ordered.")
        e_low, e_high = self.eccentricity_range
        if not (0 <= e_low <= e_high < 1):
            raise ConfigurationError(f"Asteroid eccentricity range {self.eccentricity_range} must lie in [0, 1).")
        f_low, f_high = self.family_eccentricity_limits
        if not (0 <= f_low <= f_high < 1):
            raise ConfigurationError(
                f"Family eccentricity limits {self.family_eccentricity_limits} must lie in [0, 1)."
            )
        if self.family_attempt_factor <= 0 or self.background_attempt_factor <= 0:
            raise ConfigurationError("Asteroid belt attempt factors must be positive.")

    @classmethod
    def from_config(cls, belt_cfg=None) -> 'BeltConfig':
        """Builds a `BeltConfig` from `config.AsteroidBelt` (or a compatible object), converting AU to km."""
        if belt_cfg is None:
            belt_cfg = config.AsteroidBelt
        try:
            gaps = tuple(
                GapDescriptor(center_km=gap['center_au'] * AU_KM, width_km=gap['width_au'] * AU_KM,
                              name=gap.get('name', ""))
                for gap in belt_cfg.KIRKWOOD_GAPS
            )
            families = tuple(
                FamilyDescriptor(
                    name=family['name'],
                    center_km=family['center_au'] * AU_KM,
                    spread_km=family['spread_au'] * AU_KM,
                    count=int(family['count']),
                    color=tuple(family.get('color', belt_cfg.BASE_COLOR)),
                    inclination=OrbitalSpread(**family['inclination']),
                    eccentricity=OrbitalSpread(**family['eccentricity']),
                )
                for family in belt_cfg.FAMILIES
            )
            zones = tuple(
                DensityZone(center_km=zone['center_au'] * AU_KM, width_km=zone['width_au'] * AU_KM,
                            density=zone['density'])
                for zone in belt_cfg.DENSITY_ZONES
            )
            return cls(
                count=belt_cfg.COUNT,
                inner_radius_km=belt_cfg.INNER_RADIUS_AU * AU_KM,
                outer_radius_km=belt_cfg.OUTER_RADIUS_AU * AU_KM,
                min_size_km=belt_cfg.MIN_SIZE_KM,
                max_size_km=belt_cfg.MAX_SIZE_KM,
                inclination_range_deg=(belt_cfg.MIN_INCLINATION_DEG, belt_cfg.MAX_INCLINATION_DEG),
                eccentricity_range=(belt_cfg.MIN_ECCENTRICITY, belt_cfg.MAX_ECCENTRICITY),
                base_color=tuple(belt_cfg.BASE_COLOR),
                color_variation=tuple(belt_cfg.COLOR_VARIATION),
                gaps=gaps,
                families=families,
                density_zones=zones,
                family_eccentricity_limits=tuple(belt_cfg.FAMILY_ECCENTRICITY_LIMITS),
                family_inclination_limits_deg=tuple(belt_cfg.FAMILY_INCLINATION_LIMITS_DEG),
                background_density=belt_cfg.BACKGROUND_DENSITY,
                acceptance_scale=belt_cfg.ACCEPTANCE_SCALE,
                family_attempt_factor=belt_cfg.FAMILY_ATTEMPT_FACTOR,
                background_attempt_factor=belt_cfg.BACKGROUND_ATTEMPT_FACTOR,
            )
        except (KeyError, TypeError, AttributeError) as e_cfg:
            raise ConfigurationError(f"Invalid asteroid belt configuration: {e_cfg}") from e_cfg


class AsteroidBelt:
    """
    Procedural main-belt generator.

    Generation runs in two passes. The family pass scatters each family's
    members around its center with a peaked offset distribution and clamps
    their eccentricity and inclination to the family limits. The background
    pass fills the remainder uniformly between the inner and outer radius,
    thinning it out according to the density zones. Both passes reject any
    semi-major axis that falls inside a Kirkwood gap, and both run on a bounded
    number of draws, so the belt may come out smaller than `count` but never
    larger.

    Attributes:
        belt_config (BeltConfig): Parameters of this belt.
        rng (random.Random): Random source; seed it for reproducible belts.
        parent (str): Name of the body every asteroid orbits.
        asteroids (List[CelestialBody]): Result of the last `generate()` call.
    """

    def __init__(self, belt_config: Optional[BeltConfig] = None, rng: Optional[random.Random] = None,
                 parent: Optional[str] = None):
        self.belt_config = belt_config or BeltConfig.from_config()
        if rng is None:
            rng = random.Random(config.AsteroidBelt.SEED)
        self.rng = rng
        self.parent = parent or config.SolarSystem.ROOT_BODY
        self.asteroids: List[CelestialBody] = []

    # --- Distribution helpers ---

    def is_in_gap(self, a_km: float) -> bool:
        return any(gap.contains(a_km) for gap in self.belt_config.gaps)

    def density_multiplier(self, a_km: float) -> float:
        """Density of the first zone containing `a_km`, or the background density."""
        for zone in self.belt_config.density_zones:
            if zone.contains(a_km):
                return zone.density
        return self.belt_config.background_density

    def acceptance_probability(self, a_km: float) -> float:
        return clamp(self.density_multiplier(a_km) * self.belt_config.acceptance_scale, 0.0, 1.0)

    def _jitter_color(self, color: Sequence[int], amount_factor: float) -> Tuple[int, int, int]:
        offset = self.rng.random() - 0.5
        return tuple(
            int(round(clamp(channel + offset * variation * amount_factor, 0, 255)))
            for channel, variation in zip(color, self.belt_config.color_variation)
        )

    def _make_asteroid(self, name: str, family: str, elements: OrbitalElements, color: Tuple[int, int, int],
                       description: str, fun_fact: str, radius_km: float) -> CelestialBody:
        return CelestialBody(
            name=name,
            body_type='asteroid',
            radius_km=radius_km,
            parent=self.parent,
            orbital_elements=elements,
            rotation_period_hours=8.0 + self.rng.random() * 16.0,
            axial_tilt_deg=self.rng.random() * 180.0,
            color=color,
            family=family,
            description=description,
            fun_fact=fun_fact,
        )

    def _random_angles(self) -> Tuple[float, float, float]:
        return self.rng.random() * 360.0, self.rng.random() * 360.0, self.rng.random() * 360.0

    def _random_radius(self) -> float:
        cfg = self.belt_config
        return cfg.min_size_km + self.rng.random() * (cfg.max_size_km - cfg.min_size_km)

    # --- Generation passes ---

    def _generate_family(self, family: FamilyDescriptor, next_index: int) -> List[CelestialBody]:
        cfg = self.belt_config
        members: List[CelestialBody] = []
        max_attempts = family.count * cfg.family_attempt_factor
        attempts = 0
        e_low, e_high = cfg.family_eccentricity_limits
        i_low, i_high = cfg.family_inclination_limits_deg

        while len(members) < family.count and attempts < max_attempts and next_index + len(members) <= cfg.count:
            attempts += 1
            rng = self.rng
            # Sum of two uniforms peaks the offset toward the family center.
            a_km = family.center_km + (rng.random() - 0.5) * family.spread_km * (rng.random() + rng.random())
            if self.is_in_gap(a_km):
                continue

            e = clamp(family.eccentricity.mean + (rng.random() - 0.5) * family.eccentricity.spread * 2, e_low, e_high)
            i_deg = clamp(family.inclination.mean + (rng.random() - 0.5) * family.inclination.spread * 2, i_low, i_high)
            m0_deg, w_deg, omega_deg = self._random_angles()
            period_days = kepler_period_days(a_km / AU_KM, DAYS_PER_YEAR)
            radius_km = self._random_radius()
            color = self._jitter_color(family.color, 0.5)

            elements = OrbitalElements(a_km=a_km, e=e, i_deg=i_deg, m0_deg=m0_deg, w_deg=w_deg,
                                       omega_deg=omega_deg, period_days=period_days)
            members.append(self._make_asteroid(
                name=f"{family.name}-{len(members) + 1}",
                family=family.name,
                elements=elements,
                color=color,
                description=(f"A {family.name} family asteroid, part of a cluster formed from the "
                             f"breakup of a larger parent body."),
                fun_fact=(f"This {family.name} family member orbits the Sun every "
                          f"{period_days / DAYS_PER_YEAR:.1f} years, sharing similar orbital "
                          f"characteristics with its family."),
                radius_km=radius_km,
            ))

        if config.Debug.ASTEROID_BELT:
            logging.debug(f"Family {family.name}: {len(members)}/{family.count} generated in {attempts} attempts.")
        return members

    def _generate_background(self, first_index: int) -> List[CelestialBody]:
        cfg = self.belt_config
        rng = self.rng
        background_count = cfg.count - (first_index - 1)
        max_attempts = background_count * cfg.background_attempt_factor
        attempts = 0
        members: List[CelestialBody] = []
        i_low, i_high = cfg.inclination_range_deg
        e_low, e_high = cfg.eccentricity_range

        while len(members) < background_count and attempts < max_attempts:
            attempts += 1
            a_km = cfg.inner_radius_km + rng.random() * (cfg.outer_radius_km - cfg.inner_radius_km)
            if self.is_in_gap(a_km):
                continue
            if rng.random() > self.acceptance_probability(a_km):
                continue

            e = e_low + rng.random() * (e_high - e_low)
            i_deg = i_low + rng.random() * (i_high - i_low)
            m0_deg, w_deg, omega_deg = self._random_angles()
            period_days = kepler_period_days(a_km / AU_KM, DAYS_PER_YEAR)
            radius_km = self._random_radius()
            color = self._jitter_color(cfg.base_color, 1.0)

            elements = OrbitalElements(a_km=a_km, e=e, i_deg=i_deg, m0_deg=m0_deg, w_deg=w_deg,
                                       omega_deg=omega_deg, period_days=period_days)
            members.append(self._make_asteroid(
                name=f"Asteroid-{first_index + len(members)}",
                family=BACKGROUND_FAMILY,
                elements=elements,
                color=color,
                description=("A small rocky body in the asteroid belt, avoiding the Kirkwood gaps "
                             "cleared by Jupiter's gravitational resonances."),
                fun_fact=(f"This asteroid orbits in a stable region at {a_km / AU_KM:.2f} AU, "
                          f"completing one orbit every {period_days / DAYS_PER_YEAR:.1f} Earth years."),
                radius_km=radius_km,
            ))

        if config.Debug.ASTEROID_BELT:
            logging.debug(f"Background: {len(members)}/{background_count} generated in {attempts} attempts.")
        return members

    def generate(self) -> List[CelestialBody]:
        """
        Runs both generation passes and returns the new asteroids.

        Asteroid names are `{Family}-{n}` for family members (n counts within
        the family, from 1) and `Asteroid-{k}` for background members, where k
        counts every asteroid generated so far in this run, families included.

        Returns:
            List[CelestialBody]: At most `belt_config.count` asteroids, family
            members first. Also stored on `self.asteroids`.
        """
        asteroids: List[CelestialBody] = []
        for family in self.belt_config.families:
            asteroids.extend(self._generate_family(family, next_index=len(asteroids) + 1))
        asteroids.extend(self._generate_background(first_index=len(asteroids) + 1))
        self.asteroids = asteroids

        counts = self.family_counts()
        in_families = len(asteroids) - counts.get(BACKGROUND_FAMILY, 0)
        logging.info(f"Generated {len(asteroids)} asteroids ({in_families} in families, "
                     f"{counts.get(BACKGROUND_FAMILY, 0)} background) of {self.belt_config.count} requested.")
        logging.info(f"Kirkwood gaps: {', '.join(gap.name for gap in self.belt_config.gaps)}")
        return asteroids

    def family_counts(self) -> Dict[str, int]:
        """Number of generated asteroids per family name, background included."""
        return dict(Counter(asteroid.family for asteroid in self.asteroids))
