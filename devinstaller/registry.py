"""Static table of installable packages."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .errors import RegistryError
from .model import Handler, PackageAction, Privilege, Recipe
from .recipes import RECIPES

ROOT = Privilege.ROOT
USER = Privilege.USER

# (display name, privilege, handler, params) in menu order
PACKAGE_TABLE: Tuple[Tuple[str, Privilege, Handler, Tuple[str, ...]], ...] = (
    ('Git with configuration', ROOT, Handler.GIT, ()),
    ('Composer', ROOT, Handler.COMPOSER, ()),
    ('PHP', ROOT, Handler.PHP, ()),
    ('Modules PHP', ROOT, Handler.PHP_MODULES, ()),
    ('PHPStorm', USER, Handler.PHPSTORM, ()),
    ('OpenSSL', ROOT, Handler.APT_PACKAGE, ('openssl',)),
    ('Git Flow', ROOT, Handler.APT_PACKAGE, ('git-flow',)),
    ('VirtualBox', ROOT, Handler.VIRTUALBOX, ()),
    ('Vagrant', ROOT, Handler.VAGRANT, ()),
    ('PostgreSQL Client', ROOT, Handler.APT_PACKAGE, ('postgresql-client',)),
    ('cURL', ROOT, Handler.APT_PACKAGE, ('curl',)),
    ('Docker', ROOT, Handler.DOCKER, ()),
    ('NVM', USER, Handler.NVM, ()),
    ('PNPM', USER, Handler.PNPM, ()),
    ('VSCode', ROOT, Handler.VSCODE, ()),
)


def build_registry(
    table: Sequence[Tuple[str, Any, Any, Sequence[str]]] = PACKAGE_TABLE,
    recipes: Optional[Mapping[Handler, Recipe]] = None,
) -> List[PackageAction]:
    """Resolve every table row to a :class:`PackageAction`.

    Raises :class:`RegistryError` when a row names an unknown handler, a
    handler without a recipe, or an invalid privilege.
    """
    recipes = RECIPES if recipes is None else recipes
    actions: List[PackageAction] = []
    for key, (name, privilege, handler, params) in enumerate(table, start=1):
        if not isinstance(privilege, Privilege):
            raise RegistryError(f"{name}: invalid privilege {privilege!r}")
        if not isinstance(handler, Handler):
            raise RegistryError(f"{name}: unknown handler {handler!r}")
        recipe = recipes.get(handler)
        if recipe is None:
            raise RegistryError(f"{name}: no install routine for {handler.value}")
        actions.append(PackageAction(
            key=key,
            name=name,
            privilege=privilege,
            handler=handler,
            recipe=recipe,
            params=tuple(str(p) for p in params),
        ))
    return actions


def describe(actions: Sequence[PackageAction]) -> List[Dict[str, Any]]:
    """Plain rows for listing the registry."""
    return [
        {
            'key': a.key,
            'name': a.name,
            'privilege': a.privilege.value,
            'handler': a.handler.value,
            'params': list(a.params),
        }
        for a in actions
    ]
