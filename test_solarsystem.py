import math
import random
import unittest

import numpy as np

from config import config, ConfigurationError, AU_KM
from physics_utils import PhysicsError, TWO_PI
from solarsystem import (CelestialBody, OrbitalElements, OrbitalMechanics, SolarSystem,
                         build_catalog, compute_scaled_radius, slider_to_size_scale)


def circular_elements(a_km=1.0e6, period_days=10.0, m0_deg=0.0, i_deg=0.0, e=0.0):
    return OrbitalElements(a_km=a_km, e=e, i_deg=i_deg, m0_deg=m0_deg, w_deg=0.0, omega_deg=0.0,
                           period_days=period_days)


def small_system(moon_period=10.0, planet_period=100.0):
    sun = CelestialBody(name='Star', body_type='star', radius_km=695700.0)
    planet = CelestialBody(name='World', body_type='planet', radius_km=6371.0, parent='Star',
                           orbital_elements=circular_elements(a_km=AU_KM, period_days=planet_period),
                           rotation_period_hours=24.0)
    moon = CelestialBody(name='Satellite', body_type='moon', radius_km=1737.4, parent='World',
                         orbital_elements=circular_elements(a_km=384400.0, period_days=moon_period))
    return SolarSystem([sun, planet, moon])


class TestKeplerSolver(unittest.TestCase):

    def setUp(self):
        self.mechanics = OrbitalMechanics()

    def test_zero_eccentricity_returns_mean_anomaly_exactly(self):
        for M in (0.0, 0.3, 1.0, math.pi, 5.9):
            self.assertEqual(self.mechanics.solve_kepler_equation(M, 0.0), M)

    def test_residual_small_over_eccentricity_and_anomaly_grid(self):
        for e in np.linspace(0.0, 0.9, 10):
            for M in np.linspace(0.0, TWO_PI, 200):
                E = self.mechanics.solve_kepler_equation(M, e)
                residual = abs(E - e * math.sin(E) - M)
                self.assertLess(residual, 1e-6, msg=f"e={e}, M={M}")

    def test_high_eccentricity_moon(self):
        e = 0.7507  # Nereid
        for M in (0.01, 0.5, 2.0, 4.0, 6.2):
            E = self.mechanics.solve_kepler_equation(M, e)
            self.assertAlmostEqual(E - e * math.sin(E), M, places=9)

    def test_nan_mean_anomaly_propagates(self):
        self.assertTrue(math.isnan(self.mechanics.solve_kepler_equation(float('nan'), 0.1)))

    def test_invalid_eccentricity_raises(self):
        with self.assertRaises(PhysicsError):
            self.mechanics.solve_kepler_equation(1.0, 1.0)
        with self.assertRaises(PhysicsError):
            self.mechanics.solve_kepler_equation(1.0, -0.1)


class TestMeanAnomaly(unittest.TestCase):

    def test_epoch_value_in_radians(self):
        M = OrbitalMechanics.propagate_mean_anomaly(90.0, 365.0, 0.0)
        self.assertAlmostEqual(M, math.pi / 2)

    def test_result_normalized(self):
        for t in (-1000.0, -3.3, 0.0, 12.5, 1e6):
            M = OrbitalMechanics.propagate_mean_anomaly(350.0, 7.0, t)
            self.assertGreaterEqual(M, 0.0)
            self.assertLess(M, TWO_PI)

    def test_negative_period_runs_backward(self):
        prograde = OrbitalMechanics.propagate_mean_anomaly(10.0, 5.0, 1.0)
        retrograde = OrbitalMechanics.propagate_mean_anomaly(10.0, -5.0, 1.0)
        self.assertAlmostEqual(prograde, math.radians(10.0) + TWO_PI / 5.0)
        self.assertAlmostEqual(retrograde, math.radians(10.0) - TWO_PI / 5.0 + TWO_PI)

    def test_zero_period_raises(self):
        with self.assertRaises(PhysicsError):
            OrbitalMechanics.propagate_mean_anomaly(0.0, 0.0, 1.0)


class TestOrbitalTransform(unittest.TestCase):

    def setUp(self):
        self.mechanics = OrbitalMechanics()

    def test_true_anomaly_at_periapsis_and_apoapsis(self):
        self.assertAlmostEqual(OrbitalMechanics.true_anomaly(0.0, 0.5), 0.0)
        self.assertAlmostEqual(abs(OrbitalMechanics.true_anomaly(math.pi, 0.5)), math.pi)

    def test_orbital_radius_extremes(self):
        self.assertAlmostEqual(OrbitalMechanics.orbital_radius(10.0, 0.2, 0.0), 8.0)
        self.assertAlmostEqual(OrbitalMechanics.orbital_radius(10.0, 0.2, math.pi), 12.0)

    def test_basis_is_orthonormal(self):
        P, Q = OrbitalMechanics.perifocal_basis(23.0, 110.0, 47.0)
        self.assertAlmostEqual(np.linalg.norm(P), 1.0)
        self.assertAlmostEqual(np.linalg.norm(Q), 1.0)
        self.assertAlmostEqual(float(np.dot(P, Q)), 0.0)

    def test_planar_circular_orbit_lies_in_horizontal_plane(self):
        a_km = 2.0 * AU_KM
        elements = circular_elements(a_km=a_km, period_days=100.0)
        scale = config.Scale.DISTANCE_SCALE
        for t in (0.0, 12.5, 25.0, 60.0):
            M = TWO_PI * t / 100.0
            position = self.mechanics.position_at_time(elements, t)
            expected = np.array([a_km * math.cos(M), 0.0, a_km * math.sin(M)]) * scale
            np.testing.assert_allclose(position, expected, atol=1e-9)

    def test_reference_to_world_swaps_y_and_z(self):
        world = self.mechanics.reference_to_world(np.array([AU_KM, 2 * AU_KM, 3 * AU_KM]))
        np.testing.assert_allclose(world, [50.0, 150.0, 100.0])

    def test_earth_regression_fixture(self):
        earth = OrbitalElements.from_dict(config.SolarSystem.BODY_DATA['Earth']['orbit'])
        M = OrbitalMechanics.propagate_mean_anomaly(earth.m0_deg, earth.period_days, 0.0)
        E = self.mechanics.solve_kepler_equation(M, earth.e)
        self.assertAlmostEqual(M, 6.259047403624505, places=12)
        self.assertAlmostEqual(E, 6.258637281678813, places=10)
        self.assertAlmostEqual(OrbitalMechanics.true_anomaly(E, earth.e), 6.258223676529221, places=10)
        self.assertAlmostEqual(OrbitalMechanics.orbital_radius(earth.a_km, earth.e, E), 147101146.540581, delta=1e-3)

        reference = self.mechanics.reference_frame_position(earth, E)
        np.testing.assert_allclose(reference, [-29370004.720700, 144139342.777208, 118.358952], atol=1e-2)

        world = self.mechanics.position_at_time(earth, 0.0)
        np.testing.assert_allclose(world, [-9.816178048362, 0.000039558473, 48.174914029815], atol=1e-8)
        self.assertAlmostEqual(float(np.linalg.norm(world)), 49.164821704740, places=8)

    def test_position_is_periodic(self):
        elements = OrbitalElements(a_km=5.0e6, e=0.3, i_deg=12.0, m0_deg=40.0, w_deg=30.0, omega_deg=80.0,
                                   period_days=17.0)
        for t in (0.0, 3.1, 9.9):
            np.testing.assert_allclose(self.mechanics.position_at_time(elements, t),
                                       self.mechanics.position_at_time(elements, t + 17.0), atol=1e-9)

    def test_zero_period_gives_no_position(self):
        self.assertIsNone(self.mechanics.position_at_time(circular_elements(period_days=0.0), 5.0))

    def test_retrograde_orbit_moves_clockwise(self):
        prograde = circular_elements(period_days=20.0)
        retrograde = circular_elements(period_days=-20.0)
        start = self.mechanics.position_at_time(prograde, 0.0)
        forward = self.mechanics.position_at_time(prograde, 1.0)
        backward = self.mechanics.position_at_time(retrograde, 1.0)
        # World x/z is the reference x/y plane; sign of the cross product gives the sense of motion.
        cross_forward = start[0] * forward[2] - start[2] * forward[0]
        cross_backward = start[0] * backward[2] - start[2] * backward[0]
        self.assertGreater(cross_forward, 0.0)
        self.assertLess(cross_backward, 0.0)

    def test_moon_visual_position_sets_length(self):
        position = OrbitalMechanics.moon_visual_position(np.array([3.0, 0.0, 4.0]), 1.0, 0.2)
        self.assertAlmostEqual(float(np.linalg.norm(position)), 1.25)
        np.testing.assert_allclose(position / np.linalg.norm(position), [0.6, 0.0, 0.8])

    def test_moon_visual_position_zero_direction_uses_x_axis(self):
        position = OrbitalMechanics.moon_visual_position(np.zeros(3), 1.0, 0.2)
        np.testing.assert_allclose(position, [1.25, 0.0, 0.0])

    def test_orbit_path_points(self):
        elements = OrbitalElements(a_km=AU_KM, e=0.5, i_deg=0.0, m0_deg=0.0, w_deg=0.0, omega_deg=0.0,
                                   period_days=365.0)
        points = self.mechanics.orbit_path_points(elements, segments=64)
        self.assertEqual(points.shape, (65, 3))
        np.testing.assert_allclose(points[0], points[-1], atol=1e-12)
        # Periapsis at a(1 - e), apoapsis at a(1 + e), parent at the focus.
        np.testing.assert_allclose(points[0], [25.0, 0.0, 0.0], atol=1e-9)
        np.testing.assert_allclose(points[32], [-75.0, 0.0, 0.0], atol=1e-9)

    def test_orbit_path_default_segments(self):
        points = self.mechanics.orbit_path_points(circular_elements(), scaled_a=2.0)
        self.assertEqual(len(points), config.Kepler.ORBIT_PATH_SEGMENTS + 1)
        np.testing.assert_allclose(np.linalg.norm(points, axis=1), 2.0)


class TestScaledRadius(unittest.TestCase):

    def test_star_has_fixed_radius(self):
        sun = CelestialBody(name='Sun', body_type='star', radius_km=695700.0)
        self.assertEqual(compute_scaled_radius(sun), config.Scale.SUN_DISPLAY_RADIUS)
        self.assertEqual(compute_scaled_radius(sun, 5.0), 5.0 * config.Scale.SUN_DISPLAY_RADIUS)

    def test_earth_radius_maps_to_scene_units(self):
        earth = CelestialBody(name='Earth', body_type='planet', radius_km=6371.0)
        self.assertAlmostEqual(compute_scaled_radius(earth), 0.3)

    def test_minimum_radii(self):
        phobos = CelestialBody(name='Phobos', body_type='moon', radius_km=11.0)
        rock = CelestialBody(name='Rock', body_type='asteroid', radius_km=1.0)
        dwarf = CelestialBody(name='Dwarf', body_type='planet', radius_km=1.0)
        self.assertAlmostEqual(compute_scaled_radius(phobos), 0.08)
        self.assertAlmostEqual(compute_scaled_radius(rock), 0.1)
        self.assertAlmostEqual(compute_scaled_radius(dwarf), 0.05)

    def test_slider_mapping(self):
        self.assertAlmostEqual(slider_to_size_scale(0), 1.0)
        self.assertAlmostEqual(slider_to_size_scale(50), 5.5)
        self.assertAlmostEqual(slider_to_size_scale(100), 10.0)
        self.assertAlmostEqual(slider_to_size_scale(150), 10.0)


class TestBuildCatalog(unittest.TestCase):

    def test_default_catalog(self):
        bodies = build_catalog()
        types = [body.body_type for body in bodies]
        self.assertEqual(types.count('star'), 1)
        self.assertEqual(types.count('planet'), 8)
        self.assertEqual(types.count('moon'), 21)
        triton = next(body for body in bodies if body.name == 'Triton')
        self.assertLess(triton.orbital_elements.period_days, 0)

    def test_elements_are_frozen(self):
        earth = next(body for body in build_catalog() if body.name == 'Earth')
        with self.assertRaises(AttributeError):
            earth.orbital_elements.e = 0.5

    def test_fixed_phase_by_default(self):
        first = {b.name: b.orbital_elements for b in build_catalog()}
        second = {b.name: b.orbital_elements for b in build_catalog()}
        self.assertEqual(first, second)

    def test_randomized_phase_only_touches_moons(self):
        fixed = {b.name: b for b in build_catalog()}
        randomized = build_catalog(randomize_epoch_phase=True, rng=random.Random(7))
        again = build_catalog(randomize_epoch_phase=True, rng=random.Random(7))
        for body, repeat in zip(randomized, again):
            self.assertEqual(body.orbital_elements, repeat.orbital_elements)
            if body.orbital_elements is None:
                continue
            original = fixed[body.name].orbital_elements
            self.assertEqual(body.orbital_elements.a_km, original.a_km)
            self.assertEqual(body.orbital_elements.period_days, original.period_days)
            if body.body_type == 'planet':
                self.assertEqual(body.orbital_elements, original)
            else:
                self.assertTrue(0.0 <= body.orbital_elements.m0_deg < 360.0)

    def test_missing_key_raises(self):
        with self.assertRaises(ConfigurationError):
            build_catalog({'Sun': {'type': 'star'}})


class TestSolarSystem(unittest.TestCase):

    def setUp(self):
        self.system = SolarSystem(build_catalog())

    def test_name_lookup_is_read_only(self):
        with self.assertRaises(TypeError):
            self.system.bodies_by_name['Pluto'] = None
        self.assertIs(self.system.get('Earth'), self.system.bodies_by_name['Earth'])
        with self.assertRaises(PhysicsError):
            self.system.get('Pluto')

    def test_hierarchy(self):
        self.assertEqual(self.system.root.name, 'Sun')
        self.assertIn('Moon', self.system.children_of('Earth'))
        self.assertEqual(set(self.system.children_of('Mars')), {'Phobos', 'Deimos'})
        self.assertIsNone(self.system.parent_of(self.system.root))
        self.assertEqual(self.system.parent_of(self.system.get('Titan')).name, 'Saturn')
        self.assertEqual(len(self.system), 30)

    def test_initial_state_is_time_zero(self):
        np.testing.assert_allclose(self.system.get('Earth').position,
                                   [-9.816178048362, 0.000039558473, 48.174914029815], atol=1e-8)
        np.testing.assert_array_equal(self.system.get('Sun').position, np.zeros(3))

    def test_update_is_idempotent_for_same_time(self):
        self.system.update_all(123.456, 0.0)
        first = {body.name: body.position.copy() for body in self.system}
        self.system.update_all(123.456, 0.0)
        for body in self.system:
            np.testing.assert_array_equal(body.position, first[body.name])

    def test_moons_sit_outside_parent_surface(self):
        self.system.update_all(42.0, 1.0)
        for body in self.system:
            if not body.is_moon:
                continue
            parent = self.system.parent_of(body)
            expected = parent.scaled_radius + body.scaled_radius + config.Scale.MOON_VISUAL_ORBIT_GAP
            self.assertAlmostEqual(float(np.linalg.norm(body.position)), expected)

    def test_world_position_adds_parent_chain(self):
        self.system.update_all(10.0, 0.0)
        expected = self.system.get('Earth').position + self.system.get('Moon').position
        np.testing.assert_allclose(self.system.world_position('Moon'), expected)

    def test_rotation_advances_with_delta(self):
        earth = self.system.get('Earth')
        start = earth.rotation_angle_rad
        self.system.update_body(earth, 0.5, 0.5)
        expected = (start + TWO_PI / (23.9345 / 24.0) * 0.5) % TWO_PI
        self.assertAlmostEqual(earth.rotation_angle_rad, expected)
        self.assertLess(earth.rotation_angle_rad, TWO_PI)

    def test_retrograde_spin_stays_normalized(self):
        venus = self.system.get('Venus')
        self.system.update_body(venus, 1.0, 1.0)
        self.assertGreaterEqual(venus.rotation_angle_rad, 0.0)
        self.assertLess(venus.rotation_angle_rad, TWO_PI)
        self.assertGreater(venus.rotation_angle_rad, math.pi)

    def test_default_body_size_scale(self):
        self.assertEqual(self.system.body_size_scale, config.Scale.DEFAULT_BODY_SIZE_SCALE)
        self.assertAlmostEqual(self.system.get('Earth').scaled_radius, 0.3 * 5.0)

    def test_set_body_size_scale_clamps_and_moves_moons(self):
        self.assertEqual(self.system.set_body_size_scale(20.0), 10.0)
        earth, moon = self.system.get('Earth'), self.system.get('Moon')
        self.assertAlmostEqual(earth.scaled_radius, 3.0)
        expected = earth.scaled_radius + moon.scaled_radius + config.Scale.MOON_VISUAL_ORBIT_GAP
        self.assertAlmostEqual(float(np.linalg.norm(moon.position)), expected)
        self.assertEqual(self.system.set_body_size_scale(0.0), 1.0)

    def test_orbit_path(self):
        self.assertIsNone(self.system.orbit_path('Sun'))
        path = self.system.orbit_path('Moon', segments=16)
        self.assertEqual(path.shape, (17, 3))
        earth_path = self.system.orbit_path('Earth')
        self.assertEqual(earth_path.shape, (config.Kepler.ORBIT_PATH_SEGMENTS + 1, 3))

    def test_focus_distance(self):
        self.assertAlmostEqual(self.system.focus_distance('Sun'), 2.0 * 5.0 * 4)
        self.assertAlmostEqual(self.system.focus_distance('Earth'), 0.3 * 5.0 * 8)
        phobos = self.system.get('Phobos')
        self.assertAlmostEqual(self.system.focus_distance('Phobos'), max(phobos.scaled_radius * 10, 0.5))


class TestSolarSystemEdgeCases(unittest.TestCase):

    def test_zero_period_leaves_position(self):
        system = small_system(moon_period=0.0)
        moon = system.get('Satellite')
        moon.position = np.array([1.0, 2.0, 3.0])
        system.update_all(50.0, 1.0)
        np.testing.assert_array_equal(moon.position, [1.0, 2.0, 3.0])

    def test_nan_time_skips_frame(self):
        system = small_system()
        before = system.get('World').position.copy()
        system.update_all(float('nan'), 0.0)
        np.testing.assert_array_equal(system.get('World').position, before)

    def test_moon_override_length(self):
        system = small_system()
        system.set_body_size_scale(1.0)
        system.update_all(3.0, 0.0)
        world, moon = system.get('World'), system.get('Satellite')
        self.assertAlmostEqual(float(np.linalg.norm(moon.position)),
                               world.scaled_radius + moon.scaled_radius + 0.05)

    def test_duplicate_names_rejected(self):
        sun = CelestialBody(name='Star', body_type='star', radius_km=1.0)
        twin = CelestialBody(name='Star', body_type='planet', radius_km=1.0, parent='Star',
                             orbital_elements=circular_elements())
        with self.assertRaises(ConfigurationError):
            SolarSystem([sun, twin])

    def test_unknown_parent_rejected(self):
        sun = CelestialBody(name='Star', body_type='star', radius_km=1.0)
        lost = CelestialBody(name='Lost', body_type='planet', radius_km=1.0, parent='Nowhere',
                             orbital_elements=circular_elements())
        with self.assertRaises(ConfigurationError):
            SolarSystem([sun, lost])

    def test_cycle_rejected(self):
        sun = CelestialBody(name='Star', body_type='star', radius_km=1.0)
        a = CelestialBody(name='A', body_type='planet', radius_km=1.0, parent='B', orbital_elements=circular_elements())
        b = CelestialBody(name='B', body_type='planet', radius_km=1.0, parent='A', orbital_elements=circular_elements())
        with self.assertRaises(ConfigurationError):
            SolarSystem([sun, a, b])

    def test_requires_single_root(self):
        with self.assertRaises(ConfigurationError):
            SolarSystem([CelestialBody(name='A', body_type='star', radius_km=1.0),
                         CelestialBody(name='B', body_type='star', radius_km=1.0)])

    def test_unknown_body_type_rejected(self):
        with self.assertRaises(ConfigurationError):
            CelestialBody(name='Comet', body_type='comet', radius_km=1.0)


if __name__ == '__main__':
    unittest.main(argv=['first-arg-is-ignored'], exit=False)
