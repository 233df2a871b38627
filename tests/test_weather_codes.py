import unittest

from app.weather_codes import Icon, Theme, UNKNOWN_DESCRIPTION, classify, description_for, icon_for, theme_for


class TestWeatherCodes(unittest.TestCase):
    def test_every_code_gets_exactly_one_theme(self):
        for code in range(100):
            result = classify(code)
            self.assertIn(result.theme, set(Theme))
            self.assertIsInstance(result.icon, Icon)
            self.assertIsInstance(result.description, str)

    def test_theme_groups(self):
        self.assertEqual(theme_for(0), Theme.SUNNY)
        self.assertEqual(theme_for(2), Theme.SUNNY)
        self.assertEqual(theme_for(3), Theme.DEFAULT)
        self.assertEqual(theme_for(61), Theme.RAIN)
        self.assertEqual(theme_for(82), Theme.RAIN)
        self.assertEqual(theme_for(86), Theme.SNOW)
        self.assertEqual(theme_for(95), Theme.DEFAULT)

    def test_icons_are_finer_grained_than_themes(self):
        self.assertEqual(icon_for(0), Icon.CLEAR)
        self.assertEqual(icon_for(1), Icon.MAINLY_CLEAR)
        self.assertEqual(icon_for(2), Icon.PARTLY_CLOUDY)
        self.assertEqual(icon_for(3), Icon.OVERCAST)
        self.assertEqual(icon_for(48), Icon.FOG)
        self.assertEqual(icon_for(53), Icon.RAIN)
        self.assertEqual(icon_for(75), Icon.SNOW)
        self.assertEqual(icon_for(99), Icon.THUNDERSTORM)
        self.assertEqual(icon_for(42), Icon.NOT_AVAILABLE)
        self.assertEqual(Icon.THUNDERSTORM.value, "wi-thunderstorm")

    def test_descriptions(self):
        self.assertEqual(description_for(0), "Clear")
        self.assertEqual(description_for(48), "Rime fog")
        self.assertEqual(description_for(95), "Thunderstorm")
        # 96 has an icon but no description
        self.assertEqual(description_for(96), UNKNOWN_DESCRIPTION)
        self.assertEqual(UNKNOWN_DESCRIPTION, "—")

    def test_unknown_and_odd_inputs_use_default_arm(self):
        for code in (-1, 1000, None, "61", 61.5, True):
            result = classify(code)
            self.assertEqual(result.theme, Theme.DEFAULT)
            self.assertEqual(result.icon, Icon.NOT_AVAILABLE)
            self.assertEqual(result.description, UNKNOWN_DESCRIPTION)

    def test_integral_float_is_accepted(self):
        result = classify(61.0)
        self.assertEqual(result.theme, Theme.RAIN)
        self.assertEqual(result.description, "Light rain")


if __name__ == "__main__":
    unittest.main()
