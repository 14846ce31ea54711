# config.py
import logging

# Configure basic logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(module)s - %(message)s')

# Fundamental constants (used across different config sections)
AU_KM = 149.6e6  # Astronomical Unit in kilometers, as used by the body catalog
HOURS_PER_DAY = 24.0
DAYS_PER_YEAR = 365.25  # Julian year, used for Kepler's third law periods

# Scene scale constants
DISTANCE_SCALE_FACTOR = 50.0  # Scene units per AU
EARTH_RADIUS_KM = 6371.0
EARTH_RADIUS_SCENE_UNITS = 0.3


class ConfigurationError(Exception):
    """Custom exception for orrery configuration errors.

    Raised by `SimulationConfig.validate()` and by components that build
    themselves from configuration (catalog construction, asteroid belt setup)
    when settings are invalid, inconsistent, or missing.

    Attributes:
        message (str): A human-readable explanation of the configuration error.
                       This is the first argument passed to the exception constructor.
    """
    pass


class SimulationConfig:
    """Centralized, hierarchical configuration for the orrery core.

    All parameters live in nested static classes (`SimulationConfig.Scale`,
    `SimulationConfig.Kepler`, `SimulationConfig.SolarSystem`, ...). An
    instance named `config` is created at the end of this module, making it
    available via `from config import config`.

    `__init__` invokes `validate()`, which checks every section for valid
    ranges and consistent cross references and raises `ConfigurationError`
    if anything is wrong.

    Example Usage:
        >>> from config import config
        >>> print(f"Scene units per km: {config.Scale.DISTANCE_SCALE}")
        >>> print(f"Belt size: {config.AsteroidBelt.COUNT}")
    """

    # --- Scale Configuration ---
    class Scale:
        """Conversions from physical units to scene units.

        Distances and body sizes are scaled independently: orbits use
        `DISTANCE_SCALE` while bodies use `PLANET_SIZE_SCALE`, which makes
        bodies hugely exaggerated relative to their orbits.

        Attributes:
            DISTANCE_SCALE (float): Scene units per km for orbital distances.
            PLANET_SIZE_SCALE (float): Scene units per km for body radii.
            SUN_DISPLAY_RADIUS (float): Fixed scene radius of the star.
            MIN_VISUAL_RADIUS (float): Smallest scene radius for planets and asteroids.
            MOON_MIN_VISUAL_RADIUS (float): Smallest scene radius for moons.
            ASTEROID_MIN_VISUAL_RADIUS (float): Smallest scene radius for asteroids.
            MOON_VISUAL_ORBIT_GAP (float): Gap between a parent's surface and its
                                           moons' rendered orbits, in scene units.
            ASTEROID_SIZE_BOOST (float): Extra size multiplier so asteroids stay visible.
            DEFAULT_BODY_SIZE_SCALE (float): Session body-size multiplier applied at startup.
            BODY_SIZE_SCALE_RANGE (Tuple[float, float]): Allowed range of the multiplier.
        """
        DISTANCE_SCALE = DISTANCE_SCALE_FACTOR / AU_KM
        PLANET_SIZE_SCALE = EARTH_RADIUS_SCENE_UNITS / EARTH_RADIUS_KM
        SUN_DISPLAY_RADIUS = 2.0
        MIN_VISUAL_RADIUS = 0.05
        MOON_MIN_VISUAL_RADIUS = 0.08
        ASTEROID_MIN_VISUAL_RADIUS = 0.1
        MOON_VISUAL_ORBIT_GAP = 0.05
        ASTEROID_SIZE_BOOST = 5.0
        DEFAULT_BODY_SIZE_SCALE = 5.0
        BODY_SIZE_SCALE_RANGE = (1.0, 10.0)

    # --- Kepler Solver Configuration ---
    class Kepler:
        """Newton-Raphson settings for Kepler's equation.

        Attributes:
            MAX_ITERATIONS (int): Hard cap on Newton steps per solve.
            TOLERANCE (float): Stop once |delta E| drops below this (radians).
            DERIVATIVE_EPSILON (float): Stop early if |f'(E)| falls below this.
            ORBIT_PATH_SEGMENTS (int): Segments used when sampling an orbit path.
        """
        MAX_ITERATIONS = 10
        TOLERANCE = 1e-7
        DERIVATIVE_EPSILON = 1e-10
        ORBIT_PATH_SEGMENTS = 128

    # --- Time Configuration ---
    class Time:
        """Simulated time progression.

        Attributes:
            DEFAULT_TIME_SCALE (float): Simulated days per real second at startup.
                                        Negative values run time backward.
            START_PAUSED (bool): Whether the clock starts paused.
            DEFAULT_FPS (int): Frame rate assumed by the headless runner.
        """
        DEFAULT_TIME_SCALE = 1.0
        START_PAUSED = False
        DEFAULT_FPS = 60

    # --- Solar System Configuration ---
    class SolarSystem:
        """Static catalog of bodies and their Keplerian elements.

        `BODY_DATA` maps body names to descriptors. Parents are listed before
        their children. Orbital elements use km for the semi-major axis,
        degrees for angles and days for the period; a negative period encodes
        retrograde orbital motion and a negative rotation period encodes
        retrograde spin.

        Attributes:
            ROOT_BODY (str): Name of the star at the root of the hierarchy.
            RANDOMIZE_EPOCH_PHASE (bool): If True, the epoch mean anomaly,
                argument of periapsis and ascending node of bodies whose type is
                in `RANDOMIZED_PHASE_TYPES` are drawn uniformly from [0, 360).
                Off by default so every run starts from the same phase.
            RANDOMIZED_PHASE_TYPES (Tuple[str, ...]): Body types affected by
                `RANDOMIZE_EPOCH_PHASE`.
            BODY_DATA (Dict[str, Dict]): The catalog itself.
        """
        ROOT_BODY = 'Sun'
        RANDOMIZE_EPOCH_PHASE = False
        RANDOMIZED_PHASE_TYPES = ('moon',)

        BODY_DATA = {
            'Sun': {
                'type': 'star', 'radius_km': 695700.0, 'color': (255, 255, 0),
                'rotation_period_hours': 25.38 * 24, 'axial_tilt_deg': 7.25, 'parent': None,
                'description': "The star at the center of the Solar System, a nearly perfect ball of hot plasma."
            },
            'Mercury': {
                'type': 'planet', 'radius_km': 2439.7, 'color': (156, 136, 122), 'parent': 'Sun',
                'rotation_period_hours': 58.646 * 24, 'axial_tilt_deg': 0.03,
                'orbit': {'semi_major_axis_km': 0.387098 * AU_KM, 'eccentricity': 0.20563, 'inclination_deg': 7.005,
                          'mean_anomaly_at_epoch_deg': 174.796, 'argument_of_periapsis_deg': 29.124,
                          'longitude_of_ascending_node_deg': 48.331, 'orbital_period_days': 87.969}
            },
            'Venus': {
                'type': 'planet', 'radius_km': 6051.8, 'color': (216, 192, 163), 'parent': 'Sun',
                'rotation_period_hours': -243.025 * 24, 'axial_tilt_deg': 177.36,
                'orbit': {'semi_major_axis_km': 0.723332 * AU_KM, 'eccentricity': 0.006772, 'inclination_deg': 3.39458,
                          'mean_anomaly_at_epoch_deg': 50.416, 'argument_of_periapsis_deg': 54.884,
                          'longitude_of_ascending_node_deg': 76.68, 'orbital_period_days': 224.701}
            },
            'Earth': {
                'type': 'planet', 'radius_km': 6371.0, 'color': (51, 153, 255), 'parent': 'Sun',
                'rotation_period_hours': 23.9345, 'axial_tilt_deg': 23.4392811,
                'orbit': {'semi_major_axis_km': 1.0 * AU_KM, 'eccentricity': 0.0167086, 'inclination_deg': 0.00005,
                          'mean_anomaly_at_epoch_deg': 358.617, 'argument_of_periapsis_deg': 114.20783,
                          'longitude_of_ascending_node_deg': -11.26064, 'orbital_period_days': 365.25636}
            },
            'Moon': {
                'type': 'moon', 'radius_km': 1737.4, 'color': (204, 204, 204), 'parent': 'Earth',
                'rotation_period_hours': 27.321661 * 24, 'axial_tilt_deg': 6.68,
                'orbit': {'semi_major_axis_km': 384748.0, 'eccentricity': 0.0549, 'inclination_deg': 5.145,
                          'mean_anomaly_at_epoch_deg': 135.27, 'argument_of_periapsis_deg': 318.06,
                          'longitude_of_ascending_node_deg': 125.08, 'orbital_period_days': 27.321661}
            },
            'Mars': {
                'type': 'planet', 'radius_km': 3389.5, 'color': (193, 68, 14), 'parent': 'Sun',
                'rotation_period_hours': 24.6229, 'axial_tilt_deg': 25.19,
                'orbit': {'semi_major_axis_km': 1.523679 * AU_KM, 'eccentricity': 0.0934006, 'inclination_deg': 1.85,
                          'mean_anomaly_at_epoch_deg': 19.39, 'argument_of_periapsis_deg': 286.502,
                          'longitude_of_ascending_node_deg': 49.558, 'orbital_period_days': 686.98}
            },
            'Phobos': {
                'type': 'moon', 'radius_km': 11.2667, 'color': (85, 85, 85), 'parent': 'Mars',
                'rotation_period_hours': 0.31891 * 24, 'axial_tilt_deg': 0.0,
                'orbit': {'semi_major_axis_km': 9376.0, 'eccentricity': 0.0151, 'inclination_deg': 1.075,
                          'mean_anomaly_at_epoch_deg': 0.0, 'argument_of_periapsis_deg': 0.0,
                          'longitude_of_ascending_node_deg': 0.0, 'orbital_period_days': 0.31891}
            },
            'Deimos': {
                'type': 'moon', 'radius_km': 6.2, 'color': (119, 119, 119), 'parent': 'Mars',
                'rotation_period_hours': 1.263 * 24, 'axial_tilt_deg': 0.0,
                'orbit': {'semi_major_axis_km': 23463.2, 'eccentricity': 0.00033, 'inclination_deg': 0.93,
                          'mean_anomaly_at_epoch_deg': 180.0, 'argument_of_periapsis_deg': 0.0,
                          'longitude_of_ascending_node_deg': 0.0, 'orbital_period_days': 1.263}
            },
            'Jupiter': {
                'type': 'planet', 'radius_km': 69911.0, 'color': (200, 160, 96), 'parent': 'Sun',
                'rotation_period_hours': 9.925 * 24, 'axial_tilt_deg': 3.13,
                'orbit': {'semi_major_axis_km': 5.2038 * AU_KM, 'eccentricity': 0.0489, 'inclination_deg': 1.303,
                          'mean_anomaly_at_epoch_deg': 19.677, 'argument_of_periapsis_deg': 273.867,
                          'longitude_of_ascending_node_deg': 100.464, 'orbital_period_days': 4332.589}
            },
            'Io': {
                'type': 'moon', 'radius_km': 1821.6, 'color': (255, 248, 181), 'parent': 'Jupiter',
                'rotation_period_hours': 1.769138 * 24, 'axial_tilt_deg': 0.0,
                'orbit': {'semi_major_axis_km': 421700.0, 'eccentricity': 0.0041, 'inclination_deg': 0.05,
                          'mean_anomaly_at_epoch_deg': 0.0, 'argument_of_periapsis_deg': 0.0,
                          'longitude_of_ascending_node_deg': 0.0, 'orbital_period_days': 1.769138}
            },
            'Europa': {
                'type': 'moon', 'radius_km': 1560.8, 'color': (212, 201, 184), 'parent': 'Jupiter',
                'rotation_period_hours': 3.551181 * 24, 'axial_tilt_deg': 0.1,
                'orbit': {'semi_major_axis_km': 671034.0, 'eccentricity': 0.0094, 'inclination_deg': 0.471,
                          'mean_anomaly_at_epoch_deg': 100.0, 'argument_of_periapsis_deg': 0.0,
                          'longitude_of_ascending_node_deg': 0.0, 'orbital_period_days': 3.551181}
            },
            'Ganymede': {
                'type': 'moon', 'radius_km': 2634.1, 'color': (160, 160, 160), 'parent': 'Jupiter',
                'rotation_period_hours': 7.154553 * 24, 'axial_tilt_deg': 0.0,
                'orbit': {'semi_major_axis_km': 1070412.0, 'eccentricity': 0.0013, 'inclination_deg': 0.204,
                          'mean_anomaly_at_epoch_deg': 200.0, 'argument_of_periapsis_deg': 0.0,
                          'longitude_of_ascending_node_deg': 0.0, 'orbital_period_days': 7.154553}
            },
            'Callisto': {
                'type': 'moon', 'radius_km': 2410.3, 'color': (96, 80, 64), 'parent': 'Jupiter',
                'rotation_period_hours': 16.689018 * 24, 'axial_tilt_deg': 0.0,
                'orbit': {'semi_major_axis_km': 1882709.0, 'eccentricity': 0.0074, 'inclination_deg': 0.205,
                          'mean_anomaly_at_epoch_deg': 300.0, 'argument_of_periapsis_deg': 0.0,
                          'longitude_of_ascending_node_deg': 0.0, 'orbital_period_days': 16.689018}
            },
            'Saturn': {
                'type': 'planet', 'radius_km': 58232.0, 'color': (208, 176, 128), 'parent': 'Sun',
                'rotation_period_hours': 10.656 * 24, 'axial_tilt_deg': 26.73,
                'orbit': {'semi_major_axis_km': 9.5826 * AU_KM, 'eccentricity': 0.0565, 'inclination_deg': 2.485,
                          'mean_anomaly_at_epoch_deg': 320.347, 'argument_of_periapsis_deg': 339.392,
                          'longitude_of_ascending_node_deg': 113.665, 'orbital_period_days': 10759.22}
            },
            'Mimas': {
                'type': 'moon', 'radius_km': 198.2, 'color': (186, 186, 186), 'parent': 'Saturn',
                'rotation_period_hours': 0.942422 * 24, 'axial_tilt_deg': 0.0,
                'orbit': {'semi_major_axis_km': 185539.0, 'eccentricity': 0.0196, 'inclination_deg': 1.574,
                          'mean_anomaly_at_epoch_deg': 0.0, 'argument_of_periapsis_deg': 0.0,
                          'longitude_of_ascending_node_deg': 0.0, 'orbital_period_days': 0.942422}
            },
            'Enceladus': {
                'type': 'moon', 'radius_km': 252.1, 'color': (248, 248, 248), 'parent': 'Saturn',
                'rotation_period_hours': 1.370218 * 24, 'axial_tilt_deg': 0.0,
                'orbit': {'semi_major_axis_km': 237948.0, 'eccentricity': 0.0047, 'inclination_deg': 0.009,
                          'mean_anomaly_at_epoch_deg': 60.0, 'argument_of_periapsis_deg': 0.0,
                          'longitude_of_ascending_node_deg': 0.0, 'orbital_period_days': 1.370218}
            },
            'Tethys': {
                'type': 'moon', 'radius_km': 533.0, 'color': (218, 218, 218), 'parent': 'Saturn',
                'rotation_period_hours': 1.887802 * 24, 'axial_tilt_deg': 0.0,
                'orbit': {'semi_major_axis_km': 294619.0, 'eccentricity': 0.0001, 'inclination_deg': 1.12,
                          'mean_anomaly_at_epoch_deg': 120.0, 'argument_of_periapsis_deg': 0.0,
                          'longitude_of_ascending_node_deg': 0.0, 'orbital_period_days': 1.887802}
            },
            'Dione': {
                'type': 'moon', 'radius_km': 561.4, 'color': (211, 211, 211), 'parent': 'Saturn',
                'rotation_period_hours': 2.736915 * 24, 'axial_tilt_deg': 0.0,
                'orbit': {'semi_major_axis_km': 377420.0, 'eccentricity': 0.0022, 'inclination_deg': 0.019,
                          'mean_anomaly_at_epoch_deg': 180.0, 'argument_of_periapsis_deg': 0.0,
                          'longitude_of_ascending_node_deg': 0.0, 'orbital_period_days': 2.736915}
            },
            'Rhea': {
                'type': 'moon', 'radius_km': 763.8, 'color': (190, 190, 190), 'parent': 'Saturn',
                'rotation_period_hours': 4.518212 * 24, 'axial_tilt_deg': 0.0,
                'orbit': {'semi_major_axis_km': 527108.0, 'eccentricity': 0.001, 'inclination_deg': 0.345,
                          'mean_anomaly_at_epoch_deg': 240.0, 'argument_of_periapsis_deg': 0.0,
                          'longitude_of_ascending_node_deg': 0.0, 'orbital_period_days': 4.518212}
            },
            'Titan': {
                'type': 'moon', 'radius_km': 2574.7, 'color': (255, 165, 0), 'parent': 'Saturn',
                'rotation_period_hours': 15.945 * 24, 'axial_tilt_deg': 0.0,
                'orbit': {'semi_major_axis_km': 1221870.0, 'eccentricity': 0.0288, 'inclination_deg': 0.34854,
                          'mean_anomaly_at_epoch_deg': 300.0, 'argument_of_periapsis_deg': 0.0,
                          'longitude_of_ascending_node_deg': 0.0, 'orbital_period_days': 15.945}
            },
            'Iapetus': {
                'type': 'moon', 'radius_km': 734.5, 'color': (144, 128, 112), 'parent': 'Saturn',
                'rotation_period_hours': 79.3215 * 24, 'axial_tilt_deg': 0.0,
                'orbit': {'semi_major_axis_km': 3560820.0, 'eccentricity': 0.02925, 'inclination_deg': 15.47,
                          'mean_anomaly_at_epoch_deg': 30.0, 'argument_of_periapsis_deg': 0.0,
                          'longitude_of_ascending_node_deg': 0.0, 'orbital_period_days': 79.3215}
            },
            'Uranus': {
                'type': 'planet', 'radius_km': 25362.0, 'color': (160, 208, 208), 'parent': 'Sun',
                'rotation_period_hours': -17.24 * 24, 'axial_tilt_deg': 97.77,
                'orbit': {'semi_major_axis_km': 19.2184 * AU_KM, 'eccentricity': 0.0457, 'inclination_deg': 0.772,
                          'mean_anomaly_at_epoch_deg': 142.238, 'argument_of_periapsis_deg': 98.999,
                          'longitude_of_ascending_node_deg': 74.006, 'orbital_period_days': 30688.5}
            },
            'Miranda': {
                'type': 'moon', 'radius_km': 235.8, 'color': (170, 170, 170), 'parent': 'Uranus',
                'rotation_period_hours': 1.413479 * 24, 'axial_tilt_deg': 0.0,
                'orbit': {'semi_major_axis_km': 129390.0, 'eccentricity': 0.0013, 'inclination_deg': 4.232,
                          'mean_anomaly_at_epoch_deg': 0.0, 'argument_of_periapsis_deg': 0.0,
                          'longitude_of_ascending_node_deg': 0.0, 'orbital_period_days': 1.413479}
            },
            'Ariel': {
                'type': 'moon', 'radius_km': 578.9, 'color': (192, 192, 192), 'parent': 'Uranus',
                'rotation_period_hours': 2.520379 * 24, 'axial_tilt_deg': 0.0,
                'orbit': {'semi_major_axis_km': 191020.0, 'eccentricity': 0.0012, 'inclination_deg': 0.26,
                          'mean_anomaly_at_epoch_deg': 72.0, 'argument_of_periapsis_deg': 0.0,
                          'longitude_of_ascending_node_deg': 0.0, 'orbital_period_days': 2.520379}
            },
            'Umbriel': {
                'type': 'moon', 'radius_km': 584.7, 'color': (90, 90, 90), 'parent': 'Uranus',
                'rotation_period_hours': 4.144177 * 24, 'axial_tilt_deg': 0.0,
                'orbit': {'semi_major_axis_km': 266000.0, 'eccentricity': 0.0039, 'inclination_deg': 0.2,
                          'mean_anomaly_at_epoch_deg': 144.0, 'argument_of_periapsis_deg': 0.0,
                          'longitude_of_ascending_node_deg': 0.0, 'orbital_period_days': 4.144177}
            },
            'Titania': {
                'type': 'moon', 'radius_km': 788.4, 'color': (176, 224, 230), 'parent': 'Uranus',
                'rotation_period_hours': 8.706234 * 24, 'axial_tilt_deg': 0.0,
                'orbit': {'semi_major_axis_km': 435910.0, 'eccentricity': 0.0011, 'inclination_deg': 0.34,
                          'mean_anomaly_at_epoch_deg': 216.0, 'argument_of_periapsis_deg': 0.0,
                          'longitude_of_ascending_node_deg': 0.0, 'orbital_period_days': 8.706234}
            },
            'Oberon': {
                'type': 'moon', 'radius_km': 761.4, 'color': (119, 136, 153), 'parent': 'Uranus',
                'rotation_period_hours': 13.463234 * 24, 'axial_tilt_deg': 0.0,
                'orbit': {'semi_major_axis_km': 583520.0, 'eccentricity': 0.0014, 'inclination_deg': 0.058,
                          'mean_anomaly_at_epoch_deg': 288.0, 'argument_of_periapsis_deg': 0.0,
                          'longitude_of_ascending_node_deg': 0.0, 'orbital_period_days': 13.463234}
            },
            'Neptune': {
                'type': 'planet', 'radius_km': 24622.0, 'color': (64, 96, 176), 'parent': 'Sun',
                'rotation_period_hours': 16.11 * 24, 'axial_tilt_deg': 28.32,
                'orbit': {'semi_major_axis_km': 30.11 * AU_KM, 'eccentricity': 0.0113, 'inclination_deg': 1.77,
                          'mean_anomaly_at_epoch_deg': 267.767, 'argument_of_periapsis_deg': 272.846,
                          'longitude_of_ascending_node_deg': 131.783, 'orbital_period_days': 60182.0}
            },
            'Triton': {
                'type': 'moon', 'radius_km': 1353.4, 'color': (255, 240, 224), 'parent': 'Neptune',
                'rotation_period_hours': -5.876854 * 24, 'axial_tilt_deg': 0.0,
                'description': "Neptune's largest moon and the only large moon with a retrograde orbit.",
                'orbit': {'semi_major_axis_km': 354759.0, 'eccentricity': 0.000016, 'inclination_deg': 156.885,
                          'mean_anomaly_at_epoch_deg': 0.0, 'argument_of_periapsis_deg': 0.0,
                          'longitude_of_ascending_node_deg': 0.0, 'orbital_period_days': -5.876854}
            },
            'Nereid': {
                'type': 'moon', 'radius_km': 170.0, 'color': (136, 136, 153), 'parent': 'Neptune',
                'rotation_period_hours': 0.475 * 24, 'axial_tilt_deg': 0.0,
                'description': "One of the most eccentric moon orbits known.",
                'orbit': {'semi_major_axis_km': 5513818.0, 'eccentricity': 0.7507, 'inclination_deg': 7.09,
                          'mean_anomaly_at_epoch_deg': 180.0, 'argument_of_periapsis_deg': 0.0,
                          'longitude_of_ascending_node_deg': 0.0, 'orbital_period_days': 360.1362}
            },
        }

    # --- Asteroid Belt Configuration ---
    class AsteroidBelt:
        """Parameters for the procedurally generated main belt.

        Radii and widths are in AU here; `BeltConfig.from_config()` converts
        them to km. Kirkwood gaps are annuli where no asteroid may be placed,
        families are clustered sampling distributions, and density zones bias
        the acceptance rate of background asteroids.

        Attributes:
            COUNT (int): Upper bound on the number of generated asteroids.
            INNER_RADIUS_AU (float): Inner edge of the background distribution.
            OUTER_RADIUS_AU (float): Outer edge of the background distribution.
            MIN_SIZE_KM (float), MAX_SIZE_KM (float): Radius range for asteroids.
            MIN_INCLINATION_DEG (float), MAX_INCLINATION_DEG (float): Background inclination range.
            MIN_ECCENTRICITY (float), MAX_ECCENTRICITY (float): Background eccentricity range.
            FAMILY_ECCENTRICITY_LIMITS (Tuple[float, float]): Clamp range for family eccentricities.
            FAMILY_INCLINATION_LIMITS_DEG (Tuple[float, float]): Clamp range for family inclinations.
            BASE_COLOR (Tuple[int, int, int]): Background asteroid RGB color.
            COLOR_VARIATION (Tuple[int, int, int]): Full per-channel color jitter.
            KIRKWOOD_GAPS (List[Dict]): `{'center_au', 'width_au', 'name'}` descriptors.
            FAMILIES (List[Dict]): Family descriptors (center, spread, count, color,
                                   inclination and eccentricity mean/spread).
            DENSITY_ZONES (List[Dict]): `{'center_au', 'width_au', 'density'}` descriptors.
            BACKGROUND_DENSITY (float): Density multiplier outside every zone.
            ACCEPTANCE_SCALE (float): Multiplier turning a density into an acceptance
                                      probability (clamped to [0, 1]).
            FAMILY_ATTEMPT_FACTOR (int): Draw budget per family, times its count.
            BACKGROUND_ATTEMPT_FACTOR (int): Draw budget for the background, times
                                             the number of background asteroids wanted.
            SEED (Optional[int]): Default seed for the generator's random source.
                                  None draws from system entropy.
        """
        COUNT = 150
        INNER_RADIUS_AU = 2.1
        OUTER_RADIUS_AU = 3.4
        MIN_SIZE_KM = 0.5
        MAX_SIZE_KM = 50.0
        MIN_INCLINATION_DEG = 0.0
        MAX_INCLINATION_DEG = 25.0
        MIN_ECCENTRICITY = 0.05
        MAX_ECCENTRICITY = 0.3
        FAMILY_ECCENTRICITY_LIMITS = (0.01, 0.4)
        FAMILY_INCLINATION_LIMITS_DEG = (0.0, 25.0)
        BASE_COLOR = (139, 115, 85)
        COLOR_VARIATION = (51, 51, 51)

        KIRKWOOD_GAPS = [
            {'center_au': 2.06, 'width_au': 0.08, 'name': '4:1 resonance'},
            {'center_au': 2.5, 'width_au': 0.12, 'name': '3:1 resonance'},
            {'center_au': 2.82, 'width_au': 0.08, 'name': '5:2 resonance'},
            {'center_au': 2.96, 'width_au': 0.06, 'name': '7:3 resonance'},
            {'center_au': 3.28, 'width_au': 0.1, 'name': '2:1 resonance'},
        ]

        FAMILIES = [
            {'name': 'Flora', 'center_au': 2.25, 'spread_au': 0.15, 'count': 25, 'color': (160, 133, 107),
             'inclination': {'mean': 5.5, 'spread': 3.0}, 'eccentricity': {'mean': 0.15, 'spread': 0.08}},
            {'name': 'Vesta', 'center_au': 2.35, 'spread_au': 0.12, 'count': 18, 'color': (154, 133, 112),
             'inclination': {'mean': 7.1, 'spread': 2.5}, 'eccentricity': {'mean': 0.12, 'spread': 0.06}},
            {'name': 'Eunomia', 'center_au': 2.65, 'spread_au': 0.18, 'count': 20, 'color': (138, 120, 101),
             'inclination': {'mean': 11.7, 'spread': 4.0}, 'eccentricity': {'mean': 0.18, 'spread': 0.09}},
            {'name': 'Koronis', 'center_au': 2.87, 'spread_au': 0.14, 'count': 15, 'color': (122, 107, 88),
             'inclination': {'mean': 2.1, 'spread': 1.5}, 'eccentricity': {'mean': 0.06, 'spread': 0.04}},
            {'name': 'Eos', 'center_au': 3.01, 'spread_au': 0.16, 'count': 22, 'color': (107, 92, 73),
             'inclination': {'mean': 10.9, 'spread': 3.5}, 'eccentricity': {'mean': 0.11, 'spread': 0.07}},
        ]

        DENSITY_ZONES = [
            {'center_au': 2.2, 'width_au': 0.2, 'density': 1.5},   # Inner belt
            {'center_au': 2.7, 'width_au': 0.3, 'density': 2.0},   # Middle belt
            {'center_au': 3.15, 'width_au': 0.2, 'density': 1.2},  # Outer belt
        ]

        BACKGROUND_DENSITY = 0.3
        ACCEPTANCE_SCALE = 0.8
        FAMILY_ATTEMPT_FACTOR = 20
        BACKGROUND_ATTEMPT_FACTOR = 5
        SEED = None

    # --- Monitoring Configuration ---
    class Monitoring:
        """Resource monitoring for the headless runner.

        Attributes:
            MEMORY_CHECK_INTERVAL_FRAMES (int): Frames between memory usage checks.
            MEMORY_USAGE_WARN_MB (float): Resident memory above which a warning is logged.
        """
        MEMORY_CHECK_INTERVAL_FRAMES = 600
        MEMORY_USAGE_WARN_MB = 1024.0

    # --- Debug Configuration ---
    class Debug:
        """Verbose logging toggles.

        Attributes:
            ORBITAL_MECHANICS (bool): Per-frame position updates and skipped frames.
            KEPLER_SOLVER (bool): Solver early exits and non-convergence.
            ASTEROID_BELT (bool): Per-family generation statistics.
        """
        ORBITAL_MECHANICS = False
        KEPLER_SOLVER = False
        ASTEROID_BELT = False

    def __init__(self):
        """Initializes the configuration and runs `validate()`.

        Raises:
            ConfigurationError: If any configuration setting is invalid.
        """
        self.validate()

    def validate(self):
        """Validates all configuration parameters for consistency and correctness.

        -   **Scale**: all scales and radii positive, size-scale range ordered
            and containing the default.
        -   **Kepler**: positive iteration cap, tolerances and path segments.
        -   **SolarSystem**: exactly one root (`ROOT_BODY`, type 'star', no
            parent and no orbit); every other body has a known type, a parent
            that exists and is not itself, non-negative radius and complete
            orbital elements with 0 <= e < 1 and a >= 0. The parent graph must
            be acyclic.
        -   **AsteroidBelt**: ordered radii, ordered size/inclination/eccentricity
            ranges, non-negative count, positive gap/zone widths, complete
            family descriptors and positive attempt factors.

        Raises:
            ConfigurationError: If any validation check fails.
        """
        # Scale
        for name in ('DISTANCE_SCALE', 'PLANET_SIZE_SCALE', 'SUN_DISPLAY_RADIUS', 'MIN_VISUAL_RADIUS',
                     'MOON_MIN_VISUAL_RADIUS', 'ASTEROID_MIN_VISUAL_RADIUS', 'ASTEROID_SIZE_BOOST',
                     'DEFAULT_BODY_SIZE_SCALE'):
            if getattr(self.Scale, name) <= 0:
                raise ConfigurationError(f"Scale.{name} must be positive.")
        if self.Scale.MOON_VISUAL_ORBIT_GAP < 0:
            raise ConfigurationError("Scale.MOON_VISUAL_ORBIT_GAP cannot be negative.")
        low, high = self.Scale.BODY_SIZE_SCALE_RANGE
        if not (0 < low <= self.Scale.DEFAULT_BODY_SIZE_SCALE <= high):
            raise ConfigurationError(
                f"Scale.DEFAULT_BODY_SIZE_SCALE ({self.Scale.DEFAULT_BODY_SIZE_SCALE}) must lie within "
                f"BODY_SIZE_SCALE_RANGE {self.Scale.BODY_SIZE_SCALE_RANGE}."
            )

        # Kepler
        if not (isinstance(self.Kepler.MAX_ITERATIONS, int) and self.Kepler.MAX_ITERATIONS > 0):
            raise ConfigurationError("Kepler.MAX_ITERATIONS must be a positive integer.")
        if self.Kepler.TOLERANCE <= 0 or self.Kepler.DERIVATIVE_EPSILON <= 0:
            raise ConfigurationError("Kepler.TOLERANCE and Kepler.DERIVATIVE_EPSILON must be positive.")
        if self.Kepler.ORBIT_PATH_SEGMENTS <= 0:
            raise ConfigurationError("Kepler.ORBIT_PATH_SEGMENTS must be positive.")

        # Time
        if self.Time.DEFAULT_FPS <= 0:
            raise ConfigurationError("Time.DEFAULT_FPS must be positive.")

        # Monitoring
        if self.Monitoring.MEMORY_CHECK_INTERVAL_FRAMES <= 0 or self.Monitoring.MEMORY_USAGE_WARN_MB <= 0:
            raise ConfigurationError("Monitoring interval and memory threshold must be positive.")

        validate_body_data(self.SolarSystem.BODY_DATA, self.SolarSystem.ROOT_BODY)

        # Asteroid belt
        belt = self.AsteroidBelt
        if not (isinstance(belt.COUNT, int) and belt.COUNT >= 0):
            raise ConfigurationError("AsteroidBelt.COUNT must be a non-negative integer.")
        if not (0 < belt.INNER_RADIUS_AU < belt.OUTER_RADIUS_AU):
            raise ConfigurationError(
                f"Asteroid belt radii (Inner: {belt.INNER_RADIUS_AU}, Outer: {belt.OUTER_RADIUS_AU}) "
                "must be positive and ordered correctly."
            )
        if not (0 < belt.MIN_SIZE_KM <= belt.MAX_SIZE_KM):
            raise ConfigurationError("AsteroidBelt size range must be positive and ordered.")
        if not (0 <= belt.MIN_INCLINATION_DEG <= belt.MAX_INCLINATION_DEG <= 180):
            raise ConfigurationError("AsteroidBelt inclination range must be ordered within [0, 180] degrees.")
        if not (0 <= belt.MIN_ECCENTRICITY <= belt.MAX_ECCENTRICITY < 1):
            raise ConfigurationError("AsteroidBelt eccentricity range must be ordered within [0, 1).")
        for gap in belt.KIRKWOOD_GAPS:
            if gap.get('width_au', 0) <= 0 or 'center_au' not in gap:
                raise ConfigurationError(f"Kirkwood gap {gap.get('name', '?')} needs a center and a positive width.")
        for zone in belt.DENSITY_ZONES:
            if zone.get('width_au', 0) <= 0 or zone.get('density', -1) < 0 or 'center_au' not in zone:
                raise ConfigurationError(f"Density zone {zone} needs a center, a positive width and a non-negative density.")
        required_family_keys = ('name', 'center_au', 'spread_au', 'count', 'inclination', 'eccentricity')
        for family in belt.FAMILIES:
            missing = [key for key in required_family_keys if key not in family]
            if missing:
                raise ConfigurationError(f"Asteroid family {family.get('name', '?')} is missing keys: {missing}")
            if family['count'] < 0 or family['spread_au'] < 0:
                raise ConfigurationError(f"Asteroid family {family['name']} needs a non-negative count and spread.")
        if belt.FAMILY_ATTEMPT_FACTOR <= 0 or belt.BACKGROUND_ATTEMPT_FACTOR <= 0:
            raise ConfigurationError("AsteroidBelt attempt factors must be positive.")
        if not (0 <= belt.BACKGROUND_DENSITY and 0 < belt.ACCEPTANCE_SCALE):
            raise ConfigurationError("AsteroidBelt.BACKGROUND_DENSITY must be >= 0 and ACCEPTANCE_SCALE > 0.")

        logging.info("Configuration validated successfully.")


BODY_TYPES = ('star', 'planet', 'moon', 'asteroid')
ORBIT_KEYS = ('semi_major_axis_km', 'eccentricity', 'inclination_deg', 'mean_anomaly_at_epoch_deg',
              'argument_of_periapsis_deg', 'longitude_of_ascending_node_deg', 'orbital_period_days')


def validate_body_data(body_data, root_name):
    """Checks a body catalog for a well formed, single-rooted, acyclic hierarchy.

    Raises:
        ConfigurationError: On the first problem found.
    """
    if root_name not in body_data:
        raise ConfigurationError(f"Root body '{root_name}' missing from the body catalog.")

    for name, data in body_data.items():
        body_type = data.get('type')
        if body_type not in BODY_TYPES:
            raise ConfigurationError(f"Celestial body '{name}' has unknown type '{body_type}'.")
        if data.get('radius_km', -1.0) < 0:
            raise ConfigurationError(f"Radius of celestial body '{name}' cannot be negative.")

        parent = data.get('parent')
        if name == root_name:
            if parent is not None or data.get('orbit') is not None:
                raise ConfigurationError(f"Root body '{name}' cannot have a parent or orbital elements.")
            continue
        if parent is None:
            raise ConfigurationError(f"Celestial body '{name}' (which is not the root) must have a 'parent' defined.")
        if parent == name:
            raise ConfigurationError(f"Celestial body '{name}' cannot orbit itself.")
        if parent not in body_data:
            raise ConfigurationError(f"Parent '{parent}' for '{name}' not found in the body catalog.")

        orbit = data.get('orbit')
        if orbit is None:
            raise ConfigurationError(f"Celestial body '{name}' has a parent but no orbital elements.")
        missing = [key for key in ORBIT_KEYS if key not in orbit]
        if missing:
            raise ConfigurationError(f"Orbital elements of '{name}' are missing keys: {missing}")
        if orbit['semi_major_axis_km'] < 0:
            raise ConfigurationError(f"Semi-major axis of celestial body '{name}' cannot be negative.")
        if not (0.0 <= orbit['eccentricity'] < 1.0):
            raise ConfigurationError(
                f"Eccentricity of celestial body '{name}' ({orbit['eccentricity']}) must be >= 0 and < 1."
            )

    # Walk every parent chain; a chain longer than the catalog means a cycle.
    for name in body_data:
        current, steps = name, 0
        while current != root_name:
            current = body_data[current]['parent']
            steps += 1
            if steps > len(body_data):
                raise ConfigurationError(f"Parent chain of '{name}' contains a cycle.")


# --- Instantiate the configuration ---
# This makes the config object available for import and runs validation.
# e.g., from config import config
try:
    config = SimulationConfig()
except ConfigurationError as e:
    logging.error(f"FATAL CONFIGURATION ERROR: {e}", exc_info=True)
    raise
