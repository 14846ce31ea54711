import copy
import unittest

from config import config, SimulationConfig, ConfigurationError, AU_KM, validate_body_data


class TestSimulationConfig(unittest.TestCase):

    def test_default_config_is_valid(self):
        config.validate()

    def test_derived_scales(self):
        self.assertAlmostEqual(config.Scale.DISTANCE_SCALE * AU_KM, 50.0)
        self.assertAlmostEqual(config.Scale.PLANET_SIZE_SCALE * 6371.0, 0.3)

    def test_catalog_contents(self):
        body_data = config.SolarSystem.BODY_DATA
        self.assertEqual(len(body_data), 30)
        self.assertIsNone(body_data['Sun']['parent'])
        self.assertEqual(body_data['Moon']['parent'], 'Earth')
        self.assertEqual(body_data['Nereid']['orbit']['eccentricity'], 0.7507)

    def test_invalid_scale_rejected(self):
        class BadScale(SimulationConfig.Scale):
            DEFAULT_BODY_SIZE_SCALE = 50.0

        class BadConfig(SimulationConfig):
            Scale = BadScale

        with self.assertRaises(ConfigurationError):
            BadConfig()

    def test_invalid_belt_rejected(self):
        class BadBelt(SimulationConfig.AsteroidBelt):
            INNER_RADIUS_AU = 3.5

        class BadConfig(SimulationConfig):
            AsteroidBelt = BadBelt

        with self.assertRaises(ConfigurationError):
            BadConfig()


class TestValidateBodyData(unittest.TestCase):

    def setUp(self):
        self.body_data = copy.deepcopy(config.SolarSystem.BODY_DATA)

    def test_catalog_passes(self):
        validate_body_data(self.body_data, 'Sun')

    def test_missing_root(self):
        with self.assertRaises(ConfigurationError):
            validate_body_data(self.body_data, 'Vega')

    def test_unknown_parent(self):
        self.body_data['Moon']['parent'] = 'Theia'
        with self.assertRaises(ConfigurationError):
            validate_body_data(self.body_data, 'Sun')

    def test_self_parent(self):
        self.body_data['Moon']['parent'] = 'Moon'
        with self.assertRaises(ConfigurationError):
            validate_body_data(self.body_data, 'Sun')

    def test_cycle(self):
        self.body_data['Earth']['parent'] = 'Moon'
        with self.assertRaises(ConfigurationError):
            validate_body_data(self.body_data, 'Sun')

    def test_unbound_eccentricity(self):
        self.body_data['Mars']['orbit']['eccentricity'] = 1.0
        with self.assertRaises(ConfigurationError):
            validate_body_data(self.body_data, 'Sun')

    def test_missing_orbit_key(self):
        del self.body_data['Io']['orbit']['orbital_period_days']
        with self.assertRaises(ConfigurationError):
            validate_body_data(self.body_data, 'Sun')

    def test_unknown_type(self):
        self.body_data['Ceres'] = {'type': 'dwarf', 'radius_km': 470.0, 'parent': 'Sun'}
        with self.assertRaises(ConfigurationError):
            validate_body_data(self.body_data, 'Sun')

    def test_root_with_orbit(self):
        self.body_data['Sun']['orbit'] = dict(self.body_data['Earth']['orbit'])
        with self.assertRaises(ConfigurationError):
            validate_body_data(self.body_data, 'Sun')


if __name__ == '__main__':
    unittest.main(argv=['first-arg-is-ignored'], exit=False)
