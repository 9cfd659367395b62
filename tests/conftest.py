import os
from io import StringIO
from pathlib import Path
from unittest import mock

import pytest

from ram_workbench.session import Sink


def stub(directory: Path, name: str, exit_code: int = 0, *lines: str) -> Path:
    """Creates an executable shell script that runs ``lines``
    and exits with ``exit_code``.
    """
    path = directory / name
    path.write_text('#!/bin/sh\n{}\nexit {}\n'.format('\n'.join(lines), exit_code))
    path.chmod(0o755)
    return path


@pytest.fixture()
def bin_dir(tmp_path: Path, monkeypatch) -> Path:
    """A folder at the front of PATH where to place stubs."""
    directory = tmp_path / 'bin'
    directory.mkdir()
    monkeypatch.setenv('PATH', '{}{}{}'.format(directory, os.pathsep, os.environ.get('PATH', '')))
    return directory


@pytest.fixture()
def sink(tmp_path: Path) -> Sink:
    """A sink over a log file and a StringIO console."""
    s = Sink((tmp_path / 'run.log').open('w', encoding='utf-8'), StringIO())
    yield s
    s.close()


@pytest.fixture()
def root():
    with mock.patch('ram_workbench.workbench.os.geteuid', return_value=0) as geteuid:
        yield geteuid


@pytest.fixture()
def not_root():
    with mock.patch('ram_workbench.workbench.os.geteuid', return_value=1000) as geteuid:
        yield geteuid
