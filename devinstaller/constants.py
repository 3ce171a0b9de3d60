"""Vendor URLs, paths and package names used by the install recipes."""

from __future__ import annotations

from typing import Tuple

APT_KEYRINGS_DIR = '/etc/apt/keyrings'
SOURCES_LIST_DIR = '/etc/apt/sources.list.d'
SHARED_KEYRINGS_DIR = '/usr/share/keyrings'

GIT_PACKAGE = 'git'
GIT_GLOBAL_CONFIG: Tuple[Tuple[str, str], ...] = (
    ('pull.rebase', 'true'),
    ('color.branch', 'auto'),
    ('core.autocrlf', 'input'),
)

COMPOSER_BINARY = '/usr/local/bin/composer'
COMPOSER_INSTALLER_URL = 'https://getcomposer.org/installer'
COMPOSER_SIGNATURE_URL = 'https://composer.github.io/installer.sig'

PHP_PPA = 'ppa:ondrej/php'
PHP_DEFAULT_VERSION = '8.3'
PHP_MODULES: Tuple[str, ...] = (
    'cli',
    'gd',
    'xml',
    'mbstring',
    'common',
    'bcmath',
    'sqlite3',
    'pgsql',
    'zip',
    'fpm',
    'redis',
    'intl',
    'curl',
    'gmp',
)
PHP_FPM_POOL = '/etc/php/{version}/fpm/pool.d/www.conf'
FPM_POOL_USERS = ('vagrant', 'www-data')

TOOLBOX_DIR = '.local/share/JetBrains/Toolbox'

VIRTUALBOX_PACKAGE = 'virtualbox-7.0'
VIRTUALBOX_KEY_URL = 'https://www.virtualbox.org/download/oracle_vbox_2016.asc'
VIRTUALBOX_KEYRING = f'{SHARED_KEYRINGS_DIR}/oracle-virtualbox-2016.gpg'
VIRTUALBOX_SOURCE = (
    'deb [arch=amd64 signed-by={keyring}] https://download.virtualbox.org/virtualbox/debian {codename} contrib'
)

VAGRANT_PACKAGE = 'vagrant'
VAGRANT_PLUGIN = 'vagrant-hostsupdater'
HASHICORP_KEY_URL = 'https://apt.releases.hashicorp.com/gpg'
HASHICORP_KEYRING = f'{SHARED_KEYRINGS_DIR}/hashicorp-archive-keyring.gpg'
HASHICORP_SOURCE = 'deb [signed-by={keyring}] https://apt.releases.hashicorp.com {codename} main'

DOCKER_PACKAGE = 'docker-ce'
DOCKER_PACKAGES: Tuple[str, ...] = (
    'docker-ce',
    'docker-ce-cli',
    'containerd.io',
    'docker-buildx-plugin',
    'docker-compose-plugin',
)
DOCKER_KEY_URL = 'https://download.docker.com/linux/ubuntu/gpg'
DOCKER_KEYRING = f'{APT_KEYRINGS_DIR}/docker.asc'
DOCKER_SOURCE = 'deb [arch={arch} signed-by={keyring}] https://download.docker.com/linux/ubuntu {codename} stable'
DOCKER_SERVICES = ('docker.service', 'containerd.service')

VSCODE_PACKAGE = 'code'
VSCODE_PREREQUISITES: Tuple[str, ...] = (
    'dirmngr',
    'software-properties-common',
    'apt-transport-https',
    'curl',
)
MICROSOFT_KEY_URL = 'https://packages.microsoft.com/keys/microsoft.asc'
VSCODE_KEYRING = f'{SHARED_KEYRINGS_DIR}/microsoft.asc'
VSCODE_SOURCE = 'deb [arch=amd64 signed-by={keyring}] https://packages.microsoft.com/repos/vscode stable main'
