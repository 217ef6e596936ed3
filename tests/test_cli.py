import io
import os
import shutil
import tempfile
import unittest
from unittest.mock import patch

import xlf_auto_translate_cli as cli
from core.options import SKIP_MARKER
from core.settings_manager import SettingsManager
from fakes import v1


class TestCli(unittest.TestCase):
    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.input_path = os.path.join(self.test_dir, "messages.xlf")
        self.output_path = os.path.join(self.test_dir, "messages.fr.xlf")
        self.config_path = config_path = os.path.join(self.test_dir, "config.json")

        patches = [
            patch("xlf_auto_translate_cli.setup_exception_hook"),
            patch("xlf_auto_translate_cli.SettingsManager", lambda: SettingsManager(config_path=config_path)),
        ]
        for p in patches:
            p.start()
            self.addCleanup(p.stop)

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def write_input(self, content):
        with open(self.input_path, "w", encoding="utf-8") as f:
            f.write(content)

    def run_cli(self, *extra):
        argv = ["-i", self.input_path, "-o", self.output_path, "-f", "en", "-t", "fr", *extra]
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            code = cli.main(argv)
        return code, out.getvalue()

    def read_output(self):
        with open(self.output_path, "r", encoding="utf-8") as f:
            return f.read()

    def test_parser_accepts_long_aliases(self):
        args = cli.build_arg_parser().parse_args([
            "--in", "a.xlf", "--out", "b.xlf", "--from", "en", "--to", "de",
            "--autoProxy", "--clearState", "--addApprovedToStateFinal",
        ])
        self.assertTrue(args.auto_proxy)
        self.assertTrue(args.clear_state)
        self.assertTrue(args.add_approved)
        self.assertEqual(args.rate, 500)
        self.assertEqual(args.concurrent, 4)

    def test_verbose_and_quiet_are_exclusive(self):
        with patch("sys.stderr", new_callable=io.StringIO):
            with self.assertRaises(SystemExit):
                cli.build_arg_parser().parse_args(["-i", "a", "-o", "b", "-f", "en", "-t", "de", "-v", "-q"])

    def test_skip_mode_writes_boilerplate(self):
        self.write_input(v1('<trans-unit id="1"><source>Hello</source></trans-unit>'))
        code, out = self.run_cli("--skip")

        self.assertEqual(code, 0)
        self.assertIn("Finished translating 1 messages", out)
        self.assertIn(SKIP_MARKER, self.read_output())

    def test_mock_provider(self):
        self.write_input(v1('<trans-unit id="1"><source>Hello</source></trans-unit>'))
        code, _ = self.run_cli("--provider", "mock", "--rate", "0", "--cs")

        self.assertEqual(code, 0)
        written = self.read_output()
        self.assertIn("[Mock] Hello", written)
        self.assertIn('target-language="fr"', written)

    def test_malformed_input_writes_nothing(self):
        self.write_input("<xliff><file>")
        code, out = self.run_cli("--skip")

        self.assertEqual(code, 1)
        self.assertIn("Something went wrong", out)
        self.assertFalse(os.path.exists(self.output_path))

    def test_missing_input_file(self):
        code, out = self.run_cli("--skip")
        self.assertEqual(code, 1)
        self.assertIn("Something went wrong", out)

    def test_translation_flags_required_without_settings_action(self):
        with patch("sys.stderr", new_callable=io.StringIO) as err:
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["-i", self.input_path])
        self.assertEqual(ctx.exception.code, 2)
        self.assertIn("-o/--out", err.getvalue())

    def test_keep_select_leaves_select_units_alone(self):
        select = "{VAR_SELECT, select, male {he} female {she}}"
        self.write_input(v1(f'<trans-unit id="1"><source>{select}</source></trans-unit>'))
        code, _ = self.run_cli("--provider", "mock", "--rate", "0", "--cs", "--keep-select")

        self.assertEqual(code, 0)
        written = self.read_output()
        self.assertNotIn("[Mock]", written)
        self.assertIn('state="needs-translation"', written)

    def test_set_default_provider(self):
        with patch("sys.stdout", new_callable=io.StringIO):
            code = cli.main(["--set-default-provider", "mock"])

        self.assertEqual(code, 0)
        self.assertEqual(SettingsManager(config_path=self.config_path).get_active_provider(), "mock")

    def test_set_api_key_stores_in_keyring(self):
        with patch("xlf_auto_translate_cli.getpass.getpass", return_value=" sk-typed "), \
                patch("core.settings_manager.keyring") as kr, \
                patch("sys.stdout", new_callable=io.StringIO) as out:
            kr.get_password.return_value = None
            code = cli.main(["--set-api-key", "llm"])

        self.assertEqual(code, 0)
        kr.set_password.assert_called_once_with("xlf_auto_translate_providers", "llm", "sk-typed")
        self.assertIn("Stored the API key for llm", out.getvalue())
        self.assertFalse(os.path.exists(self.output_path))

    def test_empty_api_key_is_rejected(self):
        with patch("xlf_auto_translate_cli.getpass.getpass", return_value=""), \
                patch("core.settings_manager.keyring") as kr, \
                patch("sys.stdout", new_callable=io.StringIO):
            code = cli.main(["--set-api-key", "llm"])

        self.assertEqual(code, 1)
        kr.set_password.assert_not_called()


if __name__ == "__main__":
    unittest.main()
