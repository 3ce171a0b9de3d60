import unittest
from unittest import mock

from conftest import make_action

from devinstaller import privilege
from devinstaller.model import Privilege


class PrivilegeTests(unittest.TestCase):
    def setUp(self):
        self.root_action = make_action(1, "docker", Privilege.ROOT)
        self.user_action = make_action(2, "nvm", Privilege.USER)

    def test_current_is_root_reads_effective_uid(self):
        with mock.patch("devinstaller.privilege.os.geteuid", return_value=0, create=True):
            self.assertTrue(privilege.current_is_root())
        with mock.patch("devinstaller.privilege.os.geteuid", return_value=1000, create=True):
            self.assertFalse(privilege.current_is_root())

    def test_single_action_matches_session_tier(self):
        self.assertTrue(privilege.is_satisfiable(self.root_action, True))
        self.assertFalse(privilege.is_satisfiable(self.root_action, False))
        self.assertTrue(privilege.is_satisfiable(self.user_action, False))
        self.assertFalse(privilege.is_satisfiable(self.user_action, True))

    def test_mixed_selection_never_satisfiable(self):
        mixed = [self.root_action, self.user_action]
        self.assertTrue(privilege.is_mixed(mixed))
        self.assertFalse(privilege.selection_is_satisfiable(mixed, True))
        self.assertFalse(privilege.selection_is_satisfiable(mixed, False))

    def test_homogeneous_selection_needs_matching_session(self):
        roots = [self.root_action, make_action(3, "vscode", Privilege.ROOT)]
        self.assertTrue(privilege.selection_is_satisfiable(roots, True))
        self.assertFalse(privilege.selection_is_satisfiable(roots, False))
        self.assertEqual(privilege.required_tiers(roots), [Privilege.ROOT])

    def test_empty_selection_is_satisfiable(self):
        self.assertTrue(privilege.selection_is_satisfiable([], False))

    def test_first_unsatisfiable_keeps_order(self):
        later_root = make_action(4, "vagrant", Privilege.ROOT)
        found = privilege.first_unsatisfiable([self.user_action, self.root_action, later_root], False)
        self.assertIs(found, self.root_action)
        self.assertIsNone(privilege.first_unsatisfiable([self.user_action], False))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
