import io
import unittest
from unittest import mock

from devinstaller import cli
from devinstaller.model import AbortedOnFailure, Completed, SelectionResult
from devinstaller.registry import build_registry


class CliTests(unittest.TestCase):
    def test_parser_defaults(self):
        args = cli.parse_args([])
        self.assertEqual(args.log_level.upper(), "INFO")
        self.assertFalse(args.yes)
        self.assertFalse(args.dry_run)
        self.assertIsNone(args.exit_delay)
        self.assertIsNone(args.settings)
        self.assertFalse(args.list)

    def test_list_prints_registry_and_exits_cleanly(self):
        with mock.patch("devinstaller.cli.console") as console:
            cli.main(["--list", "--settings", "/nonexistent/devinstaller.json"])
        console.print.assert_called_once()

    def test_non_linux_exits_with_error(self):
        with mock.patch("devinstaller.cli.is_linux", return_value=False), \
                mock.patch("devinstaller.cli.console"):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["--settings", "/nonexistent/devinstaller.json"])
        self.assertEqual(ctx.exception.code, 1)

    def _run_with(self, selection, outcome=None):
        patches = [
            mock.patch("devinstaller.cli.console"),
            mock.patch("devinstaller.cli.check_disk_space", return_value=True),
            mock.patch("devinstaller.cli.current_is_root", return_value=True),
            mock.patch("devinstaller.cli.SelectionMenu"),
            mock.patch("devinstaller.cli.InstallOrchestrator"),
        ]
        mocks = [p.start() for p in patches]
        for p in patches:
            self.addCleanup(p.stop)
        menu_cls, orchestrator_cls = mocks[3], mocks[4]
        menu_cls.return_value.open.return_value = selection
        if outcome is not None:
            orchestrator_cls.return_value.run.return_value = outcome
        cli.main(["--skip-os-check", "--settings", "/nonexistent/devinstaller.json"])
        return orchestrator_cls

    def test_cancelled_menu_installs_nothing(self):
        orchestrator_cls = self._run_with(SelectionResult.cancelled())
        orchestrator_cls.return_value.run.assert_not_called()

    def test_confirmed_empty_installs_nothing(self):
        orchestrator_cls = self._run_with(SelectionResult.confirmed(()))
        orchestrator_cls.return_value.run.assert_not_called()

    def test_completed_run_exits_zero(self):
        actions = build_registry()[:2]
        orchestrator_cls = self._run_with(SelectionResult.confirmed(actions), Completed(2))
        orchestrator_cls.return_value.run.assert_called_once_with(tuple(actions))

    def test_failure_exits_with_command_code(self):
        action = build_registry()[0]
        outcome = AbortedOnFailure(0, action, 100, "apt-get install -y git")
        with self.assertRaises(SystemExit) as ctx:
            self._run_with(SelectionResult.confirmed([action]), outcome)
        self.assertEqual(ctx.exception.code, 100)

    def test_keyboard_interrupt_exits_130(self):
        with mock.patch("devinstaller.cli.run_installer", side_effect=KeyboardInterrupt), \
                mock.patch("devinstaller.cli.console"):
            with self.assertRaises(SystemExit) as ctx:
                cli.main([])
        self.assertEqual(ctx.exception.code, 130)

    def test_init_settings_writes_file(self):
        with mock.patch("devinstaller.cli.save_settings", return_value=True) as save, \
                mock.patch("devinstaller.cli.console"):
            cli.main(["--init-settings", "--yes", "--settings", "/tmp/devinstaller-test.json"])
        saved = save.call_args[0][0]
        self.assertTrue(saved.assume_yes)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
