import json
import os
import tempfile
import unittest
from unittest.mock import patch

from superterminal.config import Config, config_dir, config_path
from superterminal.errors import ConfigError, ConfigIOError, InvalidInput, MissingApiKey


class TestConfig(unittest.TestCase):
    """Test cases for the Config class."""

    def setUp(self):
        """Point the config directory at a fresh temporary directory."""
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.path = os.path.join(self.tmpdir.name, "config.json")

    def write_config(self, data):
        with open(self.path, "w") as f:
            json.dump(data, f)

    def test_default_values(self):
        """Test that default values are set correctly."""
        config = Config()

        self.assertEqual(config.api_key, "")
        self.assertEqual(config.model, "gpt-4")
        self.assertEqual(config.max_tokens, 150)
        self.assertEqual(config.temperature, 0.3)

    def test_load_or_default_without_file(self):
        """Test that defaults are built from the environment when no file exists."""
        with patch.dict(os.environ, {"OPENAI_API_KEY": "test_key"}, clear=True):
            config = Config.load_or_default(self.path)

        self.assertEqual(config, Config(api_key="test_key", model="gpt-4", max_tokens=150, temperature=0.3))
        # The default is persisted for the next run
        with open(self.path) as f:
            self.assertEqual(json.load(f)["api_key"], "test_key")

    def test_load_or_default_missing_api_key(self):
        """Test that an error is raised when neither file nor API key exist."""
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(MissingApiKey):
                Config.load_or_default(self.path)

    def test_load_or_default_reads_file(self):
        self.write_config({"api_key": "file_key", "model": "gpt-4o", "max_tokens": 300, "temperature": 1.1})

        with patch.dict(os.environ, {}, clear=True):
            config = Config.load_or_default(self.path)

        self.assertEqual(config.api_key, "file_key")
        self.assertEqual(config.model, "gpt-4o")
        self.assertEqual(config.max_tokens, 300)
        self.assertEqual(config.temperature, 1.1)

    def test_load_or_default_malformed_file_falls_back(self):
        with open(self.path, "w") as f:
            f.write("{not json")

        with patch.dict(os.environ, {"OPENAI_API_KEY": "env_key"}, clear=True):
            config = Config.load_or_default(self.path)

        self.assertEqual(config.api_key, "env_key")
        self.assertEqual(config.model, "gpt-4")

    def test_load_or_default_swallows_save_failure(self):
        with patch.dict(os.environ, {"OPENAI_API_KEY": "env_key"}, clear=True):
            with patch.object(Config, "save", side_effect=ConfigIOError("read-only")):
                config = Config.load_or_default(self.path)

        self.assertEqual(config.api_key, "env_key")

    def test_load_or_default_non_utf8_file_falls_back(self):
        """Test that undecodable bytes count as a malformed file."""
        with open(self.path, "wb") as f:
            f.write(b'{"api_key": "\xff\xfe"}')

        with patch.dict(os.environ, {"OPENAI_API_KEY": "env_key"}, clear=True):
            config = Config.load_or_default(self.path)

        self.assertEqual(config, Config(api_key="env_key"))

    def test_load_rejects_non_utf8(self):
        with open(self.path, "wb") as f:
            f.write(b'{"api_key": "\xff"}')
        with self.assertRaises(ConfigError):
            Config.load(self.path)

    def test_load_rejects_wrong_types(self):
        """Test that values of the wrong JSON type are rejected, never coerced."""
        valid = {"api_key": "k", "model": "gpt-4", "max_tokens": 150, "temperature": 0.3}
        bad_values = [
            ("api_key", None),
            ("api_key", 123),
            ("model", None),
            ("model", ["gpt-4"]),
            ("max_tokens", True),
            ("max_tokens", 1.9),
            ("max_tokens", "150"),
            ("max_tokens", -1),
            ("temperature", "0.3"),
            ("temperature", False),
            ("temperature", None),
        ]
        for key, value in bad_values:
            with self.subTest(key=key, value=value):
                self.write_config(dict(valid, **{key: value}))
                with self.assertRaises(ConfigError):
                    Config.load(self.path)

    def test_load_or_default_null_api_key_uses_env(self):
        self.write_config({"api_key": None, "model": "gpt-4", "max_tokens": 150, "temperature": 0.3})

        with patch.dict(os.environ, {"OPENAI_API_KEY": "env_key"}, clear=True):
            config = Config.load_or_default(self.path)

        self.assertEqual(config.api_key, "env_key")

    def test_load_accepts_integer_temperature(self):
        self.write_config({"api_key": "k", "model": "gpt-4", "max_tokens": 150, "temperature": 1})
        config = Config.load(self.path)
        self.assertEqual(config.temperature, 1.0)
        self.assertIsInstance(config.temperature, float)

    def test_load_or_default_ignores_unknown_fields(self):
        """Test that an extra key keeps the stored settings instead of resetting them."""
        stored = {"api_key": "mine", "model": "gpt-4o", "max_tokens": 500, "temperature": 1.2, "note": "x"}
        self.write_config(stored)

        with patch.dict(os.environ, {"OPENAI_API_KEY": "env_key"}, clear=True):
            config = Config.load_or_default(self.path)

        self.assertEqual(config, Config(api_key="mine", model="gpt-4o", max_tokens=500, temperature=1.2))
        with open(self.path) as f:
            self.assertEqual(json.load(f), stored)

    def test_load_rejects_missing_fields(self):
        self.write_config({"api_key": "k", "model": "gpt-4"})
        with self.assertRaises(ConfigError):
            Config.load(self.path)

    def test_load_missing_file(self):
        with self.assertRaises(ConfigIOError):
            Config.load(self.path)

    def test_save_creates_parent_directories(self):
        path = os.path.join(self.tmpdir.name, "nested", "dir", "config.json")
        Config(api_key="k").save(path)

        with open(path) as f:
            content = f.read()
        self.assertIn("\n  ", content)  # pretty-printed
        self.assertEqual(json.loads(content)["max_tokens"], 150)

    def test_update_fields(self):
        config = Config(api_key="k")

        self.assertTrue(config.update(model="gpt-4o-mini", max_tokens=64, temperature=0.0))
        self.assertEqual(config.model, "gpt-4o-mini")
        self.assertEqual(config.max_tokens, 64)
        self.assertEqual(config.temperature, 0.0)

    def test_update_nothing(self):
        config = Config(api_key="k")
        self.assertFalse(config.update())
        self.assertEqual(config, Config(api_key="k"))

    def test_update_rejects_temperature_out_of_range(self):
        """Test that an invalid temperature leaves every field untouched."""
        config = Config(api_key="k", temperature=0.7)

        for value in (3.0, -0.1, 2.01):
            with self.assertRaises(InvalidInput):
                config.update(model="other-model", temperature=value)

        self.assertEqual(config.temperature, 0.7)
        self.assertEqual(config.model, "gpt-4")

    def test_update_accepts_temperature_bounds(self):
        config = Config(api_key="k")
        config.update(temperature=2.0)
        self.assertEqual(config.temperature, 2.0)
        config.update(temperature=0.0)
        self.assertEqual(config.temperature, 0.0)

    def test_update_rejects_non_positive_max_tokens(self):
        config = Config(api_key="k")
        with self.assertRaises(InvalidInput):
            config.update(max_tokens=0)
        self.assertEqual(config.max_tokens, 150)

    def test_masked_api_key(self):
        self.assertEqual(Config(api_key="sk-1234567890abcd").masked_api_key, "sk-1...abcd")
        self.assertEqual(Config(api_key="short").masked_api_key, "****")
        self.assertNotIn("1234567890", str(Config(api_key="sk-1234567890abcd")))

    def test_config_dir_override(self):
        with patch.dict(os.environ, {"SUPERTERMINAL_CONFIG_DIR": self.tmpdir.name}, clear=True):
            self.assertEqual(config_dir(), self.tmpdir.name)
            self.assertEqual(config_path(), self.path)

    @patch("superterminal.config.platform.system", return_value="Linux")
    def test_config_dir_xdg(self, _mock_system):
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": "/xdg"}, clear=True):
            self.assertEqual(config_dir(), os.path.join("/xdg", "superterminal"))


if __name__ == "__main__":
    unittest.main()
