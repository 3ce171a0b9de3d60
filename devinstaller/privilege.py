"""Root / regular-user session checks."""

from __future__ import annotations

import os
from typing import Iterable, List, Optional

from .model import PackageAction, Privilege


def current_is_root() -> bool:
    """Return True when running with an effective uid of 0."""
    geteuid = getattr(os, 'geteuid', None)
    if not callable(geteuid):
        return False
    return geteuid() == 0


def session_privilege(is_root: bool) -> Privilege:
    return Privilege.ROOT if is_root else Privilege.USER


def is_satisfiable(action: PackageAction, is_root: bool) -> bool:
    """True iff the action's tier matches the current session."""
    return action.privilege is session_privilege(is_root)


def selection_is_satisfiable(actions: Iterable[PackageAction], is_root: bool) -> bool:
    """True iff a single run under this session can perform every action.

    A selection spanning both tiers is never satisfiable: it has to be split
    across a root and a non-root invocation.
    """
    return all(is_satisfiable(action, is_root) for action in actions)


def required_tiers(actions: Iterable[PackageAction]) -> List[Privilege]:
    tiers = {action.privilege for action in actions}
    return [tier for tier in Privilege if tier in tiers]


def is_mixed(actions: Iterable[PackageAction]) -> bool:
    return len(required_tiers(actions)) > 1


def first_unsatisfiable(actions: Iterable[PackageAction], is_root: bool) -> Optional[PackageAction]:
    for action in actions:
        if not is_satisfiable(action, is_root):
            return action
    return None
