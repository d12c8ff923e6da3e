"""Alembic command shortcuts exposed as project scripts."""

import subprocess
import sys
from pathlib import Path

from src.platform.logging.loguru_io import Logger


ALEMBIC_INI = Path(__file__).parent / 'alembic.ini'


def run_alembic(args: list[str]) -> int:
    cmd = ['alembic', '-c', str(ALEMBIC_INI)] + args
    return subprocess.call(cmd)


def upgrade() -> int:
    Logger.base.info('🗄️ [ALEMBIC] Upgrading database to head')
    return run_alembic(['upgrade', 'head'])


def downgrade() -> int:
    Logger.base.info('↩️ [ALEMBIC] Rolling back one migration')
    return run_alembic(['downgrade', '-1'])


def make_migration() -> int:
    if len(sys.argv) < 2:
        Logger.base.error("Usage: make-migration 'migration message'")
        return 1

    message = ' '.join(sys.argv[1:])
    Logger.base.info(f'📝 [ALEMBIC] Creating migration: {message}')
    return run_alembic(['revision', '--autogenerate', '-m', message])


def history() -> int:
    return run_alembic(['history'])


def current() -> int:
    return run_alembic(['current'])
