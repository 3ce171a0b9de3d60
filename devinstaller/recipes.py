"""Install routines for every package the registry offers.

Each routine takes an :class:`~devinstaller.orchestrator.InstallContext`
first, followed by the action parameters. Routines never catch command
failures: any :class:`~devinstaller.errors.InstallerError` ends the run.
"""

from __future__ import annotations

import os
import shlex
import shutil
from pathlib import Path
from typing import Dict

from devinstaller_lib.download import verify_digest

from . import constants as c
from . import logger
from .model import Handler, Recipe
from .system import version_codename


def _source_list(name: str) -> Path:
    return Path(c.SOURCES_LIST_DIR) / f"{name}.list"


def _add_dearmored_key(ctx, url: str, keyring: str) -> None:
    key_file = ctx.download(url, ctx.workdir / Path(keyring).with_suffix('.asc').name)
    ctx.execute(f"gpg --yes --dearmor --output {shlex.quote(keyring)} {shlex.quote(str(key_file))}")


# --- plain apt packages ---

def apt_package_present(ctx, package: str) -> bool:
    return ctx.package_installed(package)


def install_apt_package(ctx, package: str) -> None:
    ctx.apt_install(package)


# --- git ---

def git_present(ctx) -> bool:
    return ctx.package_installed(c.GIT_PACKAGE)


def install_git(ctx) -> None:
    ctx.apt_install(c.GIT_PACKAGE)
    ctx.execute(f"git config --global init.defaultBranch {shlex.quote(ctx.settings.git_default_branch)}")
    for key, value in c.GIT_GLOBAL_CONFIG:
        ctx.execute(f"git config --global {key} {value}")

    email = ctx.ask("What is your email address? (leave empty to skip user.email)")
    if email:
        ctx.execute(f"git config --global user.email {shlex.quote(email)}")

    name = ctx.ask("What is your git user.name? (leave empty to skip user.name)")
    if name:
        ctx.execute(f"git config --global user.name {shlex.quote(name)}")


# --- composer ---

def composer_present(ctx) -> bool:
    return Path(c.COMPOSER_BINARY).exists()


def update_composer(ctx) -> None:
    if ctx.confirm("Update composer?", default=False):
        ctx.execute("composer self-update")


def install_composer(ctx) -> None:
    installer = ctx.download(c.COMPOSER_INSTALLER_URL, ctx.workdir / 'composer-setup.php')
    expected = ctx.fetch_text(c.COMPOSER_SIGNATURE_URL).strip()

    if not ctx.dry_run and not verify_digest(installer, expected):
        ctx.notice("Installer corrupt; skipping composer", style="red")
        installer.unlink()
        return

    ctx.notice("Installer verified", style="green")
    ctx.execute(
        f"php {shlex.quote(str(installer))} --quiet "
        f"--install-dir={os.path.dirname(c.COMPOSER_BINARY)} --filename={os.path.basename(c.COMPOSER_BINARY)}"
    )


# --- php ---

def php_version(ctx) -> str:
    """PHP version for this run, asked at most once."""
    if ctx.settings.php_version:
        ctx.run.answers.setdefault('php_version', ctx.settings.php_version)
    version = ctx.remembered(
        'php_version',
        "Enter the PHP version (e.g. 8.3)",
        default=c.PHP_DEFAULT_VERSION,
    )
    return version[3:] if version.startswith('php') else version


def php_present(ctx) -> bool:
    return ctx.package_installed(f"php{php_version(ctx)}")


def install_php(ctx) -> None:
    ctx.execute(f"add-apt-repository -y {c.PHP_PPA}")
    ctx.refresh_index(force=True)
    ctx.apt_install(f"php{php_version(ctx)}")


def install_php_modules(ctx) -> None:
    version = php_version(ctx)
    for module in c.PHP_MODULES:
        package = f"php{version}-{module}"
        ctx.check_message(package)
        if ctx.package_installed(package):
            ctx.already_installed(package)
            continue
        ctx.apt_install(package)


# --- phpstorm ---

def phpstorm_present(ctx) -> bool:
    return (ctx.home / c.TOOLBOX_DIR).is_dir()


def install_phpstorm(ctx) -> None:
    archive = ctx.download(ctx.settings.toolbox_url, ctx.workdir / 'jetbrains-toolbox.tar.gz')
    target = ctx.home / 'jetbrains-toolbox'
    ctx.execute(
        f"mkdir -p {shlex.quote(str(target))} && "
        f"tar -xzf {shlex.quote(str(archive))} -C {shlex.quote(str(target))} --strip-components=1"
    )
    ctx.execute(f"nohup {shlex.quote(str(target / 'jetbrains-toolbox'))} > /dev/null 2>&1 &")
    ctx.notice("JetBrains Toolbox started; install PHPStorm from its window")


# --- virtualbox ---

def virtualbox_present(ctx) -> bool:
    return ctx.package_installed(c.VIRTUALBOX_PACKAGE)


def install_virtualbox(ctx) -> None:
    _add_dearmored_key(ctx, c.VIRTUALBOX_KEY_URL, c.VIRTUALBOX_KEYRING)
    ctx.write_file(
        _source_list('virtualbox'),
        c.VIRTUALBOX_SOURCE.format(keyring=c.VIRTUALBOX_KEYRING, codename=version_codename()) + "\n",
    )
    ctx.refresh_index(force=True)
    ctx.apt_install(c.VIRTUALBOX_PACKAGE)


# --- vagrant ---

def vagrant_present(ctx) -> bool:
    return ctx.package_installed(c.VAGRANT_PACKAGE)


def configure_fpm_pool(ctx) -> None:
    """Let php-fpm run as vagrant (shared folders) or back as www-data."""
    version = ctx.run.answers.get('php_version') or ctx.settings.php_version or c.PHP_DEFAULT_VERSION
    if version.startswith('php'):
        version = version[3:]
    pool = c.PHP_FPM_POOL.format(version=version)
    if not Path(pool).exists():
        logger.debug("No php-fpm pool at %s", pool)
        return
    choice = ctx.ask(f"php-fpm pool user in {pool}", default="skip", choices=c.FPM_POOL_USERS + ("skip",))
    if choice not in c.FPM_POOL_USERS:
        return
    other = next(user for user in c.FPM_POOL_USERS if user != choice)
    ctx.replace_in_file(pool, (
        (f"user = {other}", f"user = {choice}"),
        (f"group = {other}", f"group = {choice}"),
    ))
    ctx.notice(f"php-fpm pool now runs as {choice}")


def install_vagrant(ctx) -> None:
    _add_dearmored_key(ctx, c.HASHICORP_KEY_URL, c.HASHICORP_KEYRING)
    ctx.write_file(
        _source_list('hashicorp'),
        c.HASHICORP_SOURCE.format(keyring=c.HASHICORP_KEYRING, codename=version_codename()) + "\n",
    )
    ctx.refresh_index(force=True)
    ctx.apt_install(c.VAGRANT_PACKAGE)

    configure_fpm_pool(ctx)

    if ctx.confirm(f"Install {c.VAGRANT_PLUGIN}?", default=False):
        ctx.execute(f"vagrant plugin install {c.VAGRANT_PLUGIN}")


# --- docker ---

def docker_present(ctx) -> bool:
    return ctx.package_installed(c.DOCKER_PACKAGE)


def install_docker(ctx) -> None:
    username = ctx.ask("Which user should join the docker group?", default=os.environ.get('SUDO_USER', ''))
    if not username:
        ctx.notice("Username is required to install Docker", style="yellow")
        return

    ctx.apt_install('ca-certificates', 'curl')
    ctx.download(c.DOCKER_KEY_URL, c.DOCKER_KEYRING)
    ctx.execute(f"chmod a+r {c.DOCKER_KEYRING}")

    arch = ctx.execute("dpkg --print-architecture").strip()
    ctx.write_file(
        _source_list('docker'),
        c.DOCKER_SOURCE.format(arch=arch, keyring=c.DOCKER_KEYRING, codename=version_codename()) + "\n",
    )
    ctx.refresh_index(force=True)
    ctx.apt_install(*c.DOCKER_PACKAGES)

    ctx.execute("getent group docker > /dev/null || groupadd docker")
    ctx.execute(f"usermod -aG docker {shlex.quote(username)}")
    for service in c.DOCKER_SERVICES:
        ctx.execute(f"systemctl enable {service}")
    ctx.notice(f"Log out and back in so {username} picks up the docker group")


# --- nvm / pnpm ---

def nvm_dir(ctx) -> Path:
    if os.environ.get('NVM_DIR'):
        return Path(os.environ['NVM_DIR'])
    xdg = os.environ.get('XDG_CONFIG_HOME')
    return Path(xdg) / 'nvm' if xdg else ctx.home / '.nvm'


def nvm_present(ctx) -> bool:
    return (nvm_dir(ctx) / 'nvm.sh').exists()


def install_nvm(ctx) -> None:
    script = ctx.download(ctx.settings.nvm_install_url, ctx.workdir / 'nvm-install.sh')
    ctx.execute(f"bash {shlex.quote(str(script))}")
    ctx.notice("NVM installed, restart the terminal to use it", style="green")


def pnpm_present(ctx) -> bool:
    return bool(shutil.which('pnpm')) or (ctx.home / '.local/share/pnpm/pnpm').exists()


def install_pnpm(ctx) -> None:
    script = ctx.download(ctx.settings.pnpm_install_url, ctx.workdir / 'pnpm-install.sh')
    shell = shutil.which('sh') or '/bin/sh'
    rc_file = ctx.home / '.bashrc'
    ctx.execute(
        f"ENV={shlex.quote(str(rc_file))} SHELL={shlex.quote(shell)} "
        f"{shlex.quote(shell)} {shlex.quote(str(script))}"
    )


# --- vscode ---

def vscode_present(ctx) -> bool:
    return ctx.package_installed(c.VSCODE_PACKAGE)


def install_vscode(ctx) -> None:
    ctx.apt_install(*c.VSCODE_PREREQUISITES)
    ctx.download(c.MICROSOFT_KEY_URL, c.VSCODE_KEYRING)
    ctx.execute(f"chmod 644 {c.VSCODE_KEYRING}")
    ctx.write_file(_source_list('vscode'), c.VSCODE_SOURCE.format(keyring=c.VSCODE_KEYRING) + "\n")
    ctx.refresh_index(force=True)
    ctx.apt_install(c.VSCODE_PACKAGE)


RECIPES: Dict[Handler, Recipe] = {
    Handler.APT_PACKAGE: Recipe(install_apt_package, probe=apt_package_present, needs_index=True),
    Handler.GIT: Recipe(install_git, probe=git_present, needs_index=True, target=c.GIT_PACKAGE),
    Handler.COMPOSER: Recipe(install_composer, probe=composer_present, when_present=update_composer,
                             target='composer'),
    Handler.PHP: Recipe(install_php, probe=php_present, needs_index=True),
    Handler.PHP_MODULES: Recipe(install_php_modules, needs_index=True),
    Handler.PHPSTORM: Recipe(install_phpstorm, probe=phpstorm_present, target='PHPStorm'),
    Handler.VIRTUALBOX: Recipe(install_virtualbox, probe=virtualbox_present, needs_index=True,
                               target=c.VIRTUALBOX_PACKAGE),
    Handler.VAGRANT: Recipe(install_vagrant, probe=vagrant_present, needs_index=True, target=c.VAGRANT_PACKAGE),
    Handler.DOCKER: Recipe(install_docker, probe=docker_present, needs_index=True, target=c.DOCKER_PACKAGE),
    Handler.NVM: Recipe(install_nvm, probe=nvm_present, target='NVM'),
    Handler.PNPM: Recipe(install_pnpm, probe=pnpm_present, target='PNPM'),
    Handler.VSCODE: Recipe(install_vscode, probe=vscode_present, needs_index=True, target='VSCode'),
}
