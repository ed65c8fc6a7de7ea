import unittest
from unittest.mock import patch
from rdkbuilder.prober import EnvironmentProber, ProbeStatus
from rdkbuilder.utils.command_executor import COMMAND_NOT_FOUND, COMMAND_TIMED_OUT


def pkg_config(answers):
    """Fake run_shell_command answering pkg-config calls from a dict keyed by (argument, module)."""
    def _run(command, timeout=None, **kwargs):
        key = (command[1], command[2])
        if key in answers:
            return answers[key]
        return "", f"Package {command[2]} was not found in the pkg-config search path.", 1
    return _run


OPENSSL = {
    ("--modversion", "openssl"): ("3.0.2\n", "", 0),
    ("--variable=includedir", "openssl"): ("/usr/include\n", "", 0),
    ("--variable=libdir", "openssl"): ("/usr/lib/x86_64-linux-gnu\n", "", 0),
}


class TestEnvironmentProber(unittest.TestCase):

    @patch("rdkbuilder.prober.os.path.isdir", return_value=True)
    @patch("rdkbuilder.prober.run_shell_command", side_effect=pkg_config(OPENSSL))
    def test_probe_found(self, mock_run, mock_isdir):
        result = EnvironmentProber(pkg_config="pkg-config").probe("openssl")

        self.assertIs(result.status, ProbeStatus.FOUND)
        self.assertTrue(result.found)
        self.assertEqual(result.version, "3.0.2")
        self.assertEqual(result.include_path, "/usr/include")
        self.assertEqual(result.lib_path, "/usr/lib/x86_64-linux-gnu")

    @patch("rdkbuilder.prober.logger")
    @patch("rdkbuilder.prober.os.path.isdir", return_value=False)
    @patch("rdkbuilder.prober.run_shell_command", side_effect=pkg_config(OPENSSL))
    def test_reported_directories_must_exist(self, mock_run, mock_isdir, mock_logger):
        result = EnvironmentProber(pkg_config="pkg-config").probe("openssl")
        self.assertTrue(result.found)
        self.assertIsNone(result.include_path)
        self.assertIsNone(result.lib_path)
        self.assertEqual(mock_logger.warning.call_count, 2)

    @patch("rdkbuilder.prober.run_shell_command", side_effect=pkg_config({}))
    def test_probe_not_found(self, mock_run):
        result = EnvironmentProber(pkg_config="pkg-config").probe("zlib")
        self.assertIs(result.status, ProbeStatus.NOT_FOUND)
        self.assertIn("zlib", result.detail)

    @patch("rdkbuilder.prober.run_shell_command", return_value=("", "No such file", COMMAND_NOT_FOUND))
    def test_missing_pkg_config_is_unavailable(self, mock_run):
        result = EnvironmentProber(pkg_config="pkg-config").probe("librdkafka")
        self.assertIs(result.status, ProbeStatus.UNAVAILABLE)
        self.assertEqual(result.pkg_config_name, "rdkafka")

    @patch("rdkbuilder.prober.run_shell_command", return_value=("", "timed out", COMMAND_TIMED_OUT))
    def test_timeout_is_unavailable(self, mock_run):
        result = EnvironmentProber(timeout=0.5, pkg_config="pkg-config").probe("zstd")
        self.assertIs(result.status, ProbeStatus.UNAVAILABLE)
        self.assertIn("timed out", result.detail)
        timeout = mock_run.call_args.kwargs["timeout"]
        self.assertGreater(timeout, 0)
        self.assertLessEqual(timeout, 0.5)

    @patch("rdkbuilder.prober.logger")
    @patch("rdkbuilder.prober.time.monotonic", side_effect=[0.0, 0.0, 5.0, 5.0])
    @patch("rdkbuilder.prober.run_shell_command", side_effect=pkg_config(OPENSSL))
    def test_one_deadline_covers_all_calls(self, mock_run, mock_clock, mock_logger):
        result = EnvironmentProber(timeout=2.0, pkg_config="pkg-config").probe("openssl")

        self.assertTrue(result.found)
        self.assertEqual(result.version, "3.0.2")
        self.assertIsNone(result.include_path)
        self.assertIsNone(result.lib_path)
        self.assertEqual(mock_run.call_count, 1)
        self.assertEqual(mock_run.call_args.kwargs["timeout"], 2.0)
        self.assertEqual(mock_logger.warning.call_count, 2)

    @patch("rdkbuilder.prober.logger")
    @patch("rdkbuilder.prober.run_shell_command", side_effect=[
        ("3.0.2\n", "", 0),
        ("", "timed out", COMMAND_TIMED_OUT),
        ("", "", 0),
    ])
    def test_timed_out_path_is_reported(self, mock_run, mock_logger):
        result = EnvironmentProber(pkg_config="pkg-config").probe("openssl")

        self.assertTrue(result.found)
        self.assertIsNone(result.include_path)
        mock_logger.warning.assert_called_once()
        self.assertIn("includedir", mock_logger.warning.call_args.args[0])

    @patch("rdkbuilder.prober.run_shell_command")
    def test_non_probeable_dependency(self, mock_run):
        result = EnvironmentProber().probe("lz4")
        self.assertIs(result.status, ProbeStatus.UNAVAILABLE)
        mock_run.assert_not_called()

    @patch("rdkbuilder.prober.os.path.isdir", return_value=True)
    @patch("rdkbuilder.prober.run_shell_command", side_effect=pkg_config(OPENSSL))
    def test_results_are_cached(self, mock_run, mock_isdir):
        prober = EnvironmentProber(pkg_config="pkg-config")
        first = prober.probe("openssl")
        calls = mock_run.call_count
        second = prober.probe("openssl")
        self.assertIs(first, second)
        self.assertEqual(mock_run.call_count, calls)

    @patch("rdkbuilder.prober.os.path.isdir", return_value=True)
    @patch("rdkbuilder.prober.run_shell_command", side_effect=pkg_config(OPENSSL))
    def test_probe_all(self, mock_run, mock_isdir):
        prober = EnvironmentProber(pkg_config="pkg-config")
        results = prober.probe_all(["openssl", "zlib", "openssl"])

        self.assertEqual(list(results), ["openssl", "zlib"])
        self.assertTrue(results["openssl"].found)
        self.assertIs(results["zlib"].status, ProbeStatus.NOT_FOUND)
        self.assertIs(prober.probe("zlib"), results["zlib"])

    @patch("rdkbuilder.prober.run_shell_command", side_effect=RuntimeError("boom"))
    def test_probe_all_isolates_failures(self, mock_run):
        results = EnvironmentProber(pkg_config="pkg-config").probe_all(["zlib", "libcurl"])
        for name in ("zlib", "libcurl"):
            self.assertIs(results[name].status, ProbeStatus.UNAVAILABLE)
            self.assertIn("boom", results[name].detail)

    def test_unknown_library(self):
        with self.assertRaises(KeyError):
            EnvironmentProber().probe("libfoo")

if __name__ == "__main__":
    unittest.main()
