# solarsystem.py
import math
import logging
import random
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import numpy as np

from config import config, ConfigurationError, AU_KM, HOURS_PER_DAY, BODY_TYPES
from physics_utils import PhysicsError, TWO_PI, clamp, normalize_vector, wrap_angle

# Used when a moon's computed direction collapses to the parent's center.
DEFAULT_DIRECTION = np.array([1.0, 0.0, 0.0])


@dataclass(frozen=True)
class OrbitalElements:
    """Classical Keplerian elements of a body around its parent.

    Frozen: catalog elements never change during a session.
    """
    a_km: float  # Semi-major axis in km
    e: float  # Eccentricity, 0 <= e < 1
    i_deg: float  # Inclination in degrees
    m0_deg: float  # Mean anomaly at epoch in degrees (M0)
    w_deg: float  # Argument of periapsis in degrees (ω)
    omega_deg: float  # Longitude of ascending node in degrees (Ω)
    period_days: float  # Signed: negative means retrograde orbital motion

    @classmethod
    def from_dict(cls, data: Mapping) -> 'OrbitalElements':
        return cls(
            a_km=float(data['semi_major_axis_km']),
            e=float(data['eccentricity']),
            i_deg=float(data['inclination_deg']),
            m0_deg=float(data['mean_anomaly_at_epoch_deg']),
            w_deg=float(data['argument_of_periapsis_deg']),
            omega_deg=float(data['longitude_of_ascending_node_deg']),
            period_days=float(data['orbital_period_days']),
        )

    @property
    def a_au(self) -> float:
        return self.a_km / AU_KM


@dataclass
class CelestialBody:
    name: str
    body_type: str  # 'star' | 'planet' | 'moon' | 'asteroid'
    radius_km: float
    parent: Optional[str] = None  # Name of the body it orbits, None for the root star
    orbital_elements: Optional[OrbitalElements] = None
    rotation_period_hours: float = 0.0  # Signed: negative means retrograde spin
    axial_tilt_deg: float = 0.0
    color: Tuple[int, int, int] = (255, 255, 255)

    # Descriptive fields, mostly for generated asteroids
    family: Optional[str] = None
    description: str = ""
    fun_fact: str = ""

    # Runtime state, owned by SolarSystem. position is relative to the parent,
    # in scene units; it is recomputed every frame and never persisted.
    position: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=np.float64))
    rotation_angle_rad: float = 0.0
    scaled_radius: float = field(default=0.0, repr=False)
    base_scaled_radius: float = field(default=0.0, repr=False)

    def __post_init__(self):
        if self.body_type not in BODY_TYPES:
            raise ConfigurationError(f"Celestial body '{self.name}' has unknown type '{self.body_type}'.")
        if not isinstance(self.position, np.ndarray):
            self.position = np.array(self.position, dtype=np.float64)

    @property
    def is_moon(self) -> bool:
        return self.body_type == 'moon'

    @property
    def has_orbit(self) -> bool:
        return self.orbital_elements is not None and self.parent is not None


def compute_scaled_radius(body: CelestialBody, size_scale: float = 1.0) -> float:
    """On-screen radius of a body, in scene units.

    The star has a fixed display radius. Everything else is its physical
    radius times `Scale.PLANET_SIZE_SCALE`, floored at a per-type minimum;
    asteroids are boosted further so they remain visible. The session
    body-size multiplier is applied last.
    """
    scale_cfg = config.Scale
    if body.body_type == 'star':
        base = scale_cfg.SUN_DISPLAY_RADIUS
    elif body.body_type == 'asteroid':
        base = max(scale_cfg.ASTEROID_MIN_VISUAL_RADIUS,
                   body.radius_km * scale_cfg.PLANET_SIZE_SCALE * scale_cfg.ASTEROID_SIZE_BOOST)
    elif body.body_type == 'moon':
        base = max(scale_cfg.MOON_MIN_VISUAL_RADIUS, body.radius_km * scale_cfg.PLANET_SIZE_SCALE)
    else:
        base = max(scale_cfg.MIN_VISUAL_RADIUS, body.radius_km * scale_cfg.PLANET_SIZE_SCALE)
    return base * size_scale


def slider_to_size_scale(slider_value: float) -> float:
    """Maps a 0..100 slider position linearly onto the 1x..10x body-size range."""
    low, high = config.Scale.BODY_SIZE_SCALE_RANGE
    return low + (clamp(slider_value, 0.0, 100.0) / 100.0) * (high - low)


def build_catalog(body_data: Optional[Mapping[str, Mapping]] = None,
                  randomize_epoch_phase: Optional[bool] = None,
                  rng: Optional[random.Random] = None,
                  randomized_types: Optional[Iterable[str]] = None) -> List[CelestialBody]:
    """Creates `CelestialBody` instances from a catalog mapping.

    Args:
        body_data: name -> descriptor mapping. Defaults to
            `config.SolarSystem.BODY_DATA`.
        randomize_epoch_phase: If True, bodies whose type is in
            `randomized_types` get their epoch mean anomaly, argument of
            periapsis and ascending node drawn uniformly from [0, 360).
            Defaults to `config.SolarSystem.RANDOMIZE_EPOCH_PHASE` (off).
        rng: Random source for the phase draws. Only consulted when
            randomizing; a fresh unseeded `random.Random` is used if omitted.
        randomized_types: Defaults to `config.SolarSystem.RANDOMIZED_PHASE_TYPES`.

    Returns:
        List[CelestialBody]: Bodies in catalog order (parents before children).

    Raises:
        ConfigurationError: If a descriptor is missing required keys.
    """
    if body_data is None:
        body_data = config.SolarSystem.BODY_DATA
    if randomize_epoch_phase is None:
        randomize_epoch_phase = config.SolarSystem.RANDOMIZE_EPOCH_PHASE
    if randomized_types is None:
        randomized_types = config.SolarSystem.RANDOMIZED_PHASE_TYPES
    randomized_types = frozenset(randomized_types)
    if randomize_epoch_phase and rng is None:
        rng = random.Random()

    bodies: List[CelestialBody] = []
    for name, data in body_data.items():
        try:
            orbit = data.get('orbit')
            elements = OrbitalElements.from_dict(orbit) if orbit is not None else None
            if elements is not None and randomize_epoch_phase and data['type'] in randomized_types:
                elements = replace(elements,
                                   m0_deg=rng.uniform(0.0, 360.0),
                                   w_deg=rng.uniform(0.0, 360.0),
                                   omega_deg=rng.uniform(0.0, 360.0))
            bodies.append(CelestialBody(
                name=name,
                body_type=data['type'],
                radius_km=float(data['radius_km']),
                parent=data.get('parent'),
                orbital_elements=elements,
                rotation_period_hours=float(data.get('rotation_period_hours', 0.0)),
                axial_tilt_deg=float(data.get('axial_tilt_deg', 0.0)),
                color=tuple(data.get('color', (255, 255, 255))),
                family=data.get('family'),
                description=data.get('description', ""),
                fun_fact=data.get('fun_fact', ""),
            ))
        except KeyError as e_key:
            raise ConfigurationError(f"Catalog entry '{name}' is missing required key {e_key}") from e_key

    if randomize_epoch_phase:
        logging.info(f"Randomized epoch phase for body types: {sorted(randomized_types)}")
    return bodies


class OrbitalMechanics:
    """Two-body Keplerian propagation and the orbital-plane to scene transform.

    Every method is a pure function of its arguments; the instance only holds
    the solver settings and the distance scale.
    """

    def __init__(self, distance_scale: Optional[float] = None, max_iterations: Optional[int] = None,
                 tolerance: Optional[float] = None, derivative_epsilon: Optional[float] = None):
        self.distance_scale = config.Scale.DISTANCE_SCALE if distance_scale is None else distance_scale
        self.max_iterations = config.Kepler.MAX_ITERATIONS if max_iterations is None else max_iterations
        self.tolerance = config.Kepler.TOLERANCE if tolerance is None else tolerance
        self.derivative_epsilon = (config.Kepler.DERIVATIVE_EPSILON
                                   if derivative_epsilon is None else derivative_epsilon)

    def solve_kepler_equation(self, M_rad: float, e: float) -> float:
        """
        Solves Kepler's Equation M = E - e * sin(E) for eccentric anomaly E using Newton-Raphson.

        Starts from E = M and stops after `max_iterations` steps, once the step
        size drops below `tolerance`, or early if the derivative 1 - e*cos(E)
        becomes too small to divide by. A NaN input yields a NaN result, which
        callers treat as "skip this frame".

        Args:
            M_rad: Mean anomaly in radians (any real value).
            e: Eccentricity (0 <= e < 1).

        Returns:
            Eccentric anomaly E in radians.

        Raises:
            PhysicsError: If eccentricity is outside [0, 1).
        """
        if e < 0.0 or e >= 1.0:
            raise PhysicsError(f"Eccentricity e={e} is out of bounds [0, 1) for Kepler's equation solver.")

        E_rad = M_rad
        for _ in range(self.max_iterations):
            E_prev = E_rad
            f_E = E_rad - e * math.sin(E_rad) - M_rad
            f_prime_E = 1.0 - e * math.cos(E_rad)
            if abs(f_prime_E) < self.derivative_epsilon:
                if config.Debug.KEPLER_SOLVER:
                    logging.debug(f"Kepler solver derivative near zero for M={M_rad}, e={e}, E={E_rad}")
                break
            E_rad = E_rad - f_E / f_prime_E
            if abs(E_rad - E_prev) < self.tolerance:
                break
        else:
            if config.Debug.KEPLER_SOLVER:
                logging.debug(f"Kepler solver hit {self.max_iterations} iterations for M={M_rad}, e={e}. Last E={E_rad}")
        return E_rad

    @staticmethod
    def propagate_mean_anomaly(m0_deg: float, period_days: float, t_days: float) -> float:
        """Mean anomaly at simulated time `t_days`, normalized to [0, 2*pi).

        A negative period reverses the direction of motion.

        Raises:
            PhysicsError: If the period is zero.
        """
        if period_days == 0:
            raise PhysicsError("Cannot propagate mean anomaly with a zero orbital period.")
        n_rad_per_day = TWO_PI / period_days
        return wrap_angle(math.radians(m0_deg) + n_rad_per_day * t_days)

    @staticmethod
    def true_anomaly(E_rad: float, e: float) -> float:
        return 2.0 * math.atan2(math.sqrt(1.0 + e) * math.sin(E_rad / 2.0),
                                math.sqrt(1.0 - e) * math.cos(E_rad / 2.0))

    @staticmethod
    def orbital_radius(a: float, e: float, E_rad: float) -> float:
        return a * (1.0 - e * math.cos(E_rad))

    @staticmethod
    def perifocal_basis(i_deg: float, omega_deg: float, w_deg: float) -> Tuple[np.ndarray, np.ndarray]:
        """
        Direction-cosine vectors of the orbital plane in the parent's reference frame.

        P points at periapsis, Q is perpendicular to it within the orbital plane.
        Together they are the first two columns of Rz(Ω) · Rx(i) · Rz(ω).
        """
        i = math.radians(i_deg)
        Omega = math.radians(omega_deg)
        w = math.radians(w_deg)
        cos_w, sin_w = math.cos(w), math.sin(w)
        cos_O, sin_O = math.cos(Omega), math.sin(Omega)
        cos_i, sin_i = math.cos(i), math.sin(i)

        P = np.array([
            cos_w * cos_O - sin_w * sin_O * cos_i,
            cos_w * sin_O + sin_w * cos_O * cos_i,
            sin_w * sin_i,
        ])
        Q = np.array([
            -sin_w * cos_O - cos_w * sin_O * cos_i,
            -sin_w * sin_O + cos_w * cos_O * cos_i,
            cos_w * sin_i,
        ])
        return P, Q

    def reference_frame_position(self, elements: OrbitalElements, E_rad: float) -> np.ndarray:
        """Parent-centered position in km for a solved eccentric anomaly."""
        nu_rad = self.true_anomaly(E_rad, elements.e)
        r = self.orbital_radius(elements.a_km, elements.e, E_rad)
        x_orb = r * math.cos(nu_rad)
        y_orb = r * math.sin(nu_rad)
        P, Q = self.perifocal_basis(elements.i_deg, elements.omega_deg, elements.w_deg)
        return P * x_orb + Q * y_orb

    def reference_to_world(self, reference_position: np.ndarray) -> np.ndarray:
        """Scales km to scene units and swaps axes so the reference XY plane
        becomes the scene's horizontal XZ plane (reference Z is scene up)."""
        scaled = np.asarray(reference_position, dtype=np.float64) * self.distance_scale
        return np.array([scaled[0], scaled[2], scaled[1]])

    @staticmethod
    def moon_visual_position(world_position: np.ndarray, parent_visual_radius: float,
                             moon_visual_radius: float, gap: Optional[float] = None) -> np.ndarray:
        """
        Re-derives a moon's rendered distance from its parent.

        Keeps the direction of the physical position but places the moon at
        parent radius + moon radius + gap, so it always orbits outside the
        parent's rendered surface no matter how exaggerated body sizes are.
        """
        if gap is None:
            gap = config.Scale.MOON_VISUAL_ORBIT_GAP
        direction = normalize_vector(world_position, fallback=DEFAULT_DIRECTION)
        return direction * (parent_visual_radius + moon_visual_radius + gap)

    def position_at_time(self, elements: OrbitalElements, t_days: float) -> Optional[np.ndarray]:
        """Scene-space position relative to the parent at absolute time `t_days`.

        Returns:
            np.ndarray or None: None when the period is zero or the solver
            produced NaN; callers keep the previous position in that case.
        """
        if elements.period_days == 0:
            return None
        M_rad = self.propagate_mean_anomaly(elements.m0_deg, elements.period_days, t_days)
        E_rad = self.solve_kepler_equation(M_rad, elements.e)
        if math.isnan(E_rad):
            return None
        return self.reference_to_world(self.reference_frame_position(elements, E_rad))

    def orbit_path_points(self, elements: OrbitalElements, segments: Optional[int] = None,
                          scaled_a: Optional[float] = None) -> np.ndarray:
        """
        Samples the full orbital ellipse for drawing orbit lines.

        The ellipse is centered on the parent (at the focus), oriented with the
        same P/Q basis as body positions and expressed in scene coordinates.

        Args:
            elements: Orbital elements of the body.
            segments: Number of segments; `segments + 1` points are returned so
                      the path closes on itself.
            scaled_a: Semi-major axis in scene units. Defaults to the physical
                      axis times the distance scale; moons pass their visual
                      orbit radius instead.

        Returns:
            np.ndarray: Array of shape (segments + 1, 3).
        """
        if segments is None:
            segments = config.Kepler.ORBIT_PATH_SEGMENTS
        if scaled_a is None:
            scaled_a = elements.a_km * self.distance_scale
        e = elements.e
        scaled_b = scaled_a * math.sqrt(max(0.0, 1.0 - e * e))

        E_samples = np.linspace(0.0, TWO_PI, segments + 1)
        # Shift by the focal distance so the parent sits at the origin.
        x_orb = scaled_a * np.cos(E_samples) - scaled_a * e
        y_orb = scaled_b * np.sin(E_samples)

        P, Q = self.perifocal_basis(elements.i_deg, elements.omega_deg, elements.w_deg)
        reference = np.outer(x_orb, P) + np.outer(y_orb, Q)
        return reference[:, [0, 2, 1]]


class SolarSystem:
    """The body hierarchy plus the per-frame motion updater.

    Bodies are held in an arena (`bodies`, in insertion order) with an
    immutable name lookup and an explicit parent/children tree. Positions are
    stored relative to each body's parent; `world_position()` walks the chain
    up to the root to get an absolute position.

    Attributes:
        orbital_mechanics (OrbitalMechanics): Solver and transform.
        body_size_scale (float): Session body-size multiplier.
        bodies_by_name (Mapping[str, CelestialBody]): Read-only name lookup.
    """

    def __init__(self, bodies: Iterable[CelestialBody], orbital_mechanics: Optional[OrbitalMechanics] = None,
                 body_size_scale: Optional[float] = None):
        """Builds the hierarchy and evaluates every body at t = 0.

        Raises:
            ConfigurationError: On duplicate names, a missing or repeated root,
                unknown parents, or a cyclic parent chain.
        """
        self.orbital_mechanics = orbital_mechanics or OrbitalMechanics()
        self._bodies: Tuple[CelestialBody, ...] = tuple(bodies)

        lookup: Dict[str, CelestialBody] = {}
        for body in self._bodies:
            if body.name in lookup:
                raise ConfigurationError(f"Duplicate celestial body name '{body.name}'.")
            lookup[body.name] = body
        self.bodies_by_name: Mapping[str, CelestialBody] = MappingProxyType(lookup)

        roots = [body for body in self._bodies if body.parent is None]
        if len(roots) != 1:
            raise ConfigurationError(
                f"Expected exactly one root body, found {len(roots)}: {[b.name for b in roots]}"
            )
        self.root = roots[0]

        children: Dict[str, List[str]] = {body.name: [] for body in self._bodies}
        for body in self._bodies:
            if body.parent is None:
                continue
            if body.parent not in lookup:
                raise ConfigurationError(f"Parent '{body.parent}' for '{body.name}' not found.")
            children[body.parent].append(body.name)
        self._children = {name: tuple(names) for name, names in children.items()}

        for body in self._bodies:
            self._ancestors(body.name)  # raises on cycles

        if body_size_scale is None:
            body_size_scale = config.Scale.DEFAULT_BODY_SIZE_SCALE
        self.body_size_scale = 1.0
        for body in self._bodies:
            body.base_scaled_radius = compute_scaled_radius(body)
        self._apply_body_size_scale(body_size_scale)

        self.update_all(0.0, 0.0)
        logging.info(f"SolarSystem initialized with {len(self._bodies)} celestial bodies "
                     f"(root: {self.root.name}).")

    # --- Hierarchy ---

    @property
    def bodies(self) -> Tuple[CelestialBody, ...]:
        return self._bodies

    def __len__(self):
        return len(self._bodies)

    def __iter__(self):
        return iter(self._bodies)

    def __contains__(self, name):
        return name in self.bodies_by_name

    def get(self, name: str) -> CelestialBody:
        try:
            return self.bodies_by_name[name]
        except KeyError:
            raise PhysicsError(f"Unknown celestial body '{name}'.") from None

    def parent_of(self, body: CelestialBody) -> Optional[CelestialBody]:
        if body.parent is None:
            return None
        return self.bodies_by_name[body.parent]

    def children_of(self, name: str) -> Tuple[str, ...]:
        return self._children[self.get(name).name]

    def _ancestors(self, name: str) -> List[str]:
        chain = []
        current = self.bodies_by_name[name].parent
        while current is not None:
            chain.append(current)
            if len(chain) > len(self._bodies):
                raise ConfigurationError(f"Parent chain of '{name}' contains a cycle.")
            current = self.bodies_by_name[current].parent
        return chain

    def world_position(self, name: str) -> np.ndarray:
        """Absolute scene position: the body's offset plus every ancestor's."""
        body = self.get(name)
        total = body.position.copy()
        for ancestor in self._ancestors(name):
            total += self.bodies_by_name[ancestor].position
        return total

    # --- Per-frame update ---

    def update_body(self, body: CelestialBody, sim_time_days: float, delta_sim_days: float) -> None:
        """Advances one body's spin and recomputes its orbital position.

        Rotation is incremental (`delta_sim_days`); position is a pure function
        of the absolute simulated time, so repeated calls with the same
        `sim_time_days` produce identical positions. A zero rotation period
        skips the spin, a zero orbital period or a NaN solution leaves the
        position untouched.
        """
        if body.rotation_period_hours != 0:
            rotation_period_days = body.rotation_period_hours / HOURS_PER_DAY
            body.rotation_angle_rad = wrap_angle(
                body.rotation_angle_rad + (TWO_PI / rotation_period_days) * delta_sim_days
            )

        if not body.has_orbit:
            return

        position = self.orbital_mechanics.position_at_time(body.orbital_elements, sim_time_days)
        if position is None:
            if config.Debug.ORBITAL_MECHANICS:
                logging.debug(f"Skipped position update for {body.name} at t={sim_time_days} days.")
            return

        if body.is_moon:
            parent = self.bodies_by_name[body.parent]
            position = self.orbital_mechanics.moon_visual_position(
                position, parent.scaled_radius, body.scaled_radius
            )
        body.position = position

        if config.Debug.ORBITAL_MECHANICS:
            logging.debug(f"{body.name}: t={sim_time_days:.4f} d, pos={body.position.tolist()}")

    def update_all(self, sim_time_days: float, delta_sim_days: float) -> None:
        for body in self._bodies:
            self.update_body(body, sim_time_days, delta_sim_days)

    # --- Presentation helpers ---

    def _apply_body_size_scale(self, scale: float) -> None:
        low, high = config.Scale.BODY_SIZE_SCALE_RANGE
        self.body_size_scale = clamp(scale, low, high)
        for body in self._bodies:
            body.scaled_radius = body.base_scaled_radius * self.body_size_scale

    def set_body_size_scale(self, scale: float) -> float:
        """Rescales every body and pushes moons out to keep the visual gap.

        Returns:
            float: The multiplier actually applied (clamped to the allowed range).
        """
        self._apply_body_size_scale(scale)
        for body in self._bodies:
            if not body.is_moon or body.parent is None:
                continue
            parent = self.bodies_by_name[body.parent]
            current_distance = np.linalg.norm(body.position)
            if current_distance > 0:
                target = parent.scaled_radius + body.scaled_radius + config.Scale.MOON_VISUAL_ORBIT_GAP
                body.position = body.position * (target / current_distance)
        logging.info(f"Celestial body size scale updated to: {self.body_size_scale:.1f}x")
        return self.body_size_scale

    def visual_orbit_radius(self, body: CelestialBody) -> float:
        """Rendered semi-major axis: physical for planets/asteroids, visual for moons."""
        if body.is_moon:
            parent = self.bodies_by_name[body.parent]
            return parent.scaled_radius + body.scaled_radius + config.Scale.MOON_VISUAL_ORBIT_GAP
        return body.orbital_elements.a_km * self.orbital_mechanics.distance_scale

    def orbit_path(self, name: str, segments: Optional[int] = None) -> Optional[np.ndarray]:
        """Orbit line for a body, relative to its parent. Asteroids and the root get none."""
        body = self.get(name)
        if not body.has_orbit or body.body_type == 'asteroid':
            return None
        return self.orbital_mechanics.orbit_path_points(
            body.orbital_elements, segments=segments, scaled_a=self.visual_orbit_radius(body)
        )

    def focus_distance(self, name: str) -> float:
        """Camera distance used when focusing on a body."""
        body = self.get(name)
        visual_radius = body.scaled_radius or config.Scale.MIN_VISUAL_RADIUS
        factor = {'star': 4, 'planet': 8, 'moon': 10}.get(body.body_type, 6)
        distance = visual_radius * factor
        distance = max(distance, visual_radius + 0.2)
        return max(distance, 0.5)
