import logging
from datetime import datetime
from io import StringIO
from pathlib import Path

from colorama import Fore

from ram_workbench.session import Session, Sink, log_path


def test_log_path_is_deterministic():
    when = datetime(2024, 1, 2, 3, 4, 5)
    path = log_path('/var/log/ram', 'ram_inspection', when)
    assert path == Path('/var/log/ram/ram_inspection_20240102_030405.log')
    assert log_path('/var/log/ram', 'ram_inspection', when) == path


def test_session_open_creates_dir(tmp_path: Path):
    console = StringIO()
    log_dir = tmp_path / 'logs' / 'nested'
    when = datetime(2024, 5, 6, 7, 8, 9)
    with Session.open(log_dir, 'ram_inspection', when, console) as sink:
        assert sink.path == log_dir / 'ram_inspection_20240506_070809.log'
    assert log_dir.is_dir()
    text = sink.path.read_text(encoding='utf-8')
    assert 'Log file: {}'.format(sink.path) in text
    assert text == console.getvalue()


def test_session_without_console(tmp_path: Path):
    with Session.open(tmp_path, 'x', datetime(2024, 1, 1)) as sink:
        sink.print('only in the log')
    assert 'only in the log' in sink.path.read_text(encoding='utf-8')


def test_sink_keeps_order(sink: Sink):
    """Every line reaches the log in the same order as the console."""
    sink.banner('Step 1')
    for i in range(100):
        sink.print('line', i)
        if i % 10 == 0:
            sink.warning('warning {}'.format(i))
    sink.write('partial ')
    sink.write('line\n')
    sink.done('Finished')
    sink.close()
    assert sink.path.read_text(encoding='utf-8') == sink.console.getvalue()
    lines = sink.console.getvalue().splitlines()
    assert lines.index('line 10') < lines.index('[WARN] warning 10') < lines.index('line 11')
    assert 'partial line' in lines


def test_sink_no_color_without_terminal(sink: Sink):
    assert not sink.color
    sink.info('hello')
    assert sink.console.getvalue() == '[INFO] hello\n'


def test_sink_color(tmp_path: Path):
    console = StringIO()
    sink = Sink((tmp_path / 'c.log').open('w', encoding='utf-8'), console, color=True)
    sink.danger('bad')
    sink.close()
    assert Fore.RED in console.getvalue()
    assert (tmp_path / 'c.log').read_text(encoding='utf-8') == console.getvalue()


def test_sink_as_logging_stream(sink: Sink):
    logger = logging.getLogger('ram_workbench.test')
    handler = logging.StreamHandler(sink)
    logger.addHandler(handler)
    try:
        logger.warning('through the sink')
    finally:
        logger.removeHandler(handler)
    assert 'through the sink' in sink.console.getvalue()


def test_session_same_second_keeps_both_runs(tmp_path: Path):
    when = datetime(2024, 1, 1, 12, 0, 0)
    with Session.open(tmp_path, 'p', when) as first:
        first.print('first run results')
    with Session.open(tmp_path, 'p', when) as second:
        second.print('second run results')
    assert first.path == second.path
    text = second.path.read_text(encoding='utf-8')
    assert text.index('first run results') < text.index('second run results')
