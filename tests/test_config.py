import os
import shutil
import tempfile
import toml
import unittest
from click.testing import CliRunner
from rdkbuilder import config
from rdkbuilder.commands.config import config as config_command
from rdkbuilder.errors import InvalidConfigFile, InvalidConfigValue
import json

class TestConfig(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.config_path = os.path.join(self.test_dir, config.CONFIG_FILE)
        self.sample_config = {
            "build": {
                "features": ["ssl", "zstd"],
                "jobs": 4
            },
            "owner": "Test Author"
        }
        config.save_config(self.sample_config, path=self.test_dir)

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_load_config_not_found(self):
        """Test that loading a non-existent config returns an empty dict."""
        os.remove(self.config_path)
        cfg = config.load_config(path=self.test_dir)
        self.assertEqual(cfg, {})

    def test_save_and_load_config(self):
        """Test saving a config and then loading it back."""
        self.assertTrue(os.path.exists(self.config_path))
        loaded_config = config.load_config(path=self.test_dir)
        self.assertEqual(loaded_config, self.sample_config)
        with open(self.config_path, "r") as f:
            toml_content = toml.load(f)
        self.assertEqual(toml_content, self.sample_config)

    def test_load_invalid_toml(self):
        """Test that a malformed file is reported and treated as empty."""
        with open(self.config_path, "w") as f:
            f.write("[build\nfeatures = ")
        self.assertEqual(config.load_config(path=self.test_dir), {})

    def test_read_config_file_rejects_invalid_toml(self):
        """Test that the resolution path refuses a malformed file."""
        with open(self.config_path, "w") as f:
            f.write("[build]\nfeatures = [\"ssl-vendored\", \"zstd\"]\njobs = = 4\n")
        with self.assertRaises(InvalidConfigFile) as ctx:
            config.read_config_file(path=self.test_dir)
        self.assertEqual(ctx.exception.path, self.config_path)
        with self.assertRaises(InvalidConfigFile):
            config.load_build_config(self.test_dir)

    def test_set_leaves_invalid_file_untouched(self):
        """Test that config set does not overwrite a file it cannot parse."""
        broken = "[build\nfeatures = "
        with open(self.config_path, "w") as f:
            f.write(broken)
        runner = CliRunner()
        result = runner.invoke(config_command, ['set', 'build.jobs', '2'], obj={"path": self.test_dir})
        self.assertIn("Fix the file", result.output)
        with open(self.config_path, "r") as f:
            self.assertEqual(f.read(), broken)

    def test_get_value(self):
        """Test getting a value from the config via the CLI."""
        runner = CliRunner()
        result = runner.invoke(config_command, ['get', 'owner'], obj={"path": self.test_dir})
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.output.strip(), 'Test Author')

    def test_get_nested_value(self):
        """Test getting a nested list from the config via the CLI."""
        runner = CliRunner()
        result = runner.invoke(config_command, ['get', 'build.features'], obj={"path": self.test_dir})
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(json.loads(result.output.strip()), ["ssl", "zstd"])

    def test_get_non_existent_value(self):
        """Test getting a non-existent value from the config via the CLI."""
        runner = CliRunner()
        result = runner.invoke(config_command, ['get', 'build.nonexistent'], obj={"path": self.test_dir})
        self.assertEqual(result.exit_code, 0)
        self.assertIn("Error: Key 'build.nonexistent' not found", result.output)

    def test_set_value(self):
        """Test setting a value in the config via the CLI."""
        runner = CliRunner()
        result = runner.invoke(config_command, ['set', 'owner', 'New Author'], obj={"path": self.test_dir})
        self.assertEqual(result.exit_code, 0)
        loaded_config = config.load_config(path=self.test_dir)
        self.assertEqual(loaded_config['owner'], 'New Author')

    def test_set_features_and_typed_values(self):
        """Test that features become a list and numbers and booleans keep their type."""
        runner = CliRunner()
        runner.invoke(config_command, ['set', 'build.features', 'ssl, gssapi libz-static'], obj={"path": self.test_dir})
        runner.invoke(config_command, ['set', 'build.default-features', 'false'], obj={"path": self.test_dir})
        runner.invoke(config_command, ['set', 'build.probe-timeout', '2.5'], obj={"path": self.test_dir})
        build = config.load_config(path=self.test_dir)['build']
        self.assertEqual(build['features'], ['ssl', 'gssapi', 'libz-static'])
        self.assertIs(build['default-features'], False)
        self.assertEqual(build['probe-timeout'], 2.5)
        self.assertEqual(build['jobs'], 4)

    def test_set_creates_the_file(self):
        """Test that setting a value creates rdkbuilder.toml when it is missing."""
        os.remove(self.config_path)
        runner = CliRunner()
        result = runner.invoke(config_command, ['set', 'build.jobs', '2'], obj={"path": self.test_dir})
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(config.load_config(path=self.test_dir), {"build": {"jobs": 2}})

    def test_unset_nested_value(self):
        """Test unsetting a nested value in the config via the CLI."""
        runner = CliRunner()
        result = runner.invoke(config_command, ['unset', 'build.jobs'], obj={"path": self.test_dir})
        self.assertEqual(result.exit_code, 0)
        loaded_config = config.load_config(path=self.test_dir)
        self.assertNotIn('jobs', loaded_config['build'])

    def test_list_config(self):
        """Test listing all config values via the CLI."""
        runner = CliRunner()
        result = runner.invoke(config_command, ['list'], obj={"path": self.test_dir})
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(json.loads(result.output.strip()), self.sample_config)


class TestBuildConfig(unittest.TestCase):

    def test_defaults(self):
        conf = config.BuildConfig.from_dict({}, path="/project")
        self.assertEqual(conf.requested_flags, ("libz",))
        self.assertEqual(conf.source_dir, "/project/librdkafka")
        self.assertEqual(conf.out_dir, "/project/target/rdkafka")
        self.assertEqual(conf.vendor_dir, "/project/vendor")
        self.assertEqual(conf.probe_timeout, 10.0)
        self.assertGreaterEqual(conf.jobs, 1)

    def test_build_table(self):
        conf = config.BuildConfig.from_dict({
            "build": {
                "features": ["ssl", "cmake-build"],
                "default-features": False,
                "source-dir": "/opt/librdkafka",
                "vendor-dir": "third_party",
                "probe-timeout": 3,
                "jobs": 2,
            }
        }, path="/project")
        self.assertEqual(conf.requested_flags, ("ssl", "cmake-build"))
        self.assertEqual(conf.source_dir, "/opt/librdkafka")
        self.assertEqual(conf.vendor_dir, "/project/third_party")
        self.assertEqual(conf.vendored_prefix("zstd"), "/project/third_party/zstd")
        self.assertEqual(conf.probe_timeout, 3.0)
        self.assertEqual(conf.jobs, 2)

    def test_feature_table_declares_disabled_flags(self):
        conf = config.BuildConfig.from_dict({"build": {"features": {"ssl": True, "curl": False}}})
        self.assertEqual(conf.features, ("ssl",))
        self.assertEqual(conf.declared_features, ("ssl", "curl"))
        self.assertEqual(conf.all_declared_flags, ("ssl", "curl", "libz"))

    def test_command_line_wins(self):
        conf = config.BuildConfig.from_dict(
            {"build": {"features": ["ssl"], "out-dir": "build"}},
            path="/project", features="zstd,gssapi", default_features=False, out_dir="/tmp/out",
        )
        self.assertEqual(conf.requested_flags, ("zstd", "gssapi"))
        self.assertEqual(conf.out_dir, "/tmp/out")

    def test_feature_table_values_must_be_booleans(self):
        with self.assertRaises(InvalidConfigValue) as ctx:
            config.BuildConfig.from_dict({"build": {"features": {"ssl": "false"}}})
        self.assertEqual(ctx.exception.key, "build.features.ssl")

    def test_default_features_must_be_a_boolean(self):
        with self.assertRaises(InvalidConfigValue) as ctx:
            config.BuildConfig.from_dict({"build": {"default-features": "false"}})
        self.assertEqual(ctx.exception.key, "build.default-features")

    def test_malformed_settings_are_rejected(self):
        cases = (
            ("build.features", {"features": 3}),
            ("build.features", {"features": ["ssl", 1]}),
            ("build.jobs", {"jobs": 0}),
            ("build.jobs", {"jobs": True}),
            ("build.probe-timeout", {"probe-timeout": "fast"}),
            ("build.out-dir", {"out-dir": 5}),
        )
        for key, build in cases:
            with self.subTest(key=key, build=build):
                with self.assertRaises(InvalidConfigValue) as ctx:
                    config.BuildConfig.from_dict({"build": build})
                self.assertEqual(ctx.exception.key, key)

    def test_falsy_command_line_values_win(self):
        conf = config.BuildConfig.from_dict({"build": {"probe-timeout": 30}}, probe_timeout=0.0)
        self.assertEqual(conf.probe_timeout, 0.0)

    def test_load_build_config_without_defaults(self):
        tmp = tempfile.mkdtemp()
        try:
            config.save_config({"build": {"features": ["zstd"]}}, path=tmp)
            conf = config.load_build_config(tmp, no_default_features=True)
            self.assertEqual(conf.requested_flags, ("zstd",))
        finally:
            shutil.rmtree(tmp)

if __name__ == "__main__":
    unittest.main()
