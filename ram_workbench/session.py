from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO, Union

from colorama import Fore, Style

BANNER_WIDTH = 78


def log_path(log_dir: Union[str, Path], prefix: str, when: datetime) -> Path:
    """The log of a run started at ``when``:
    ``<log_dir>/<prefix>_<YYYYmmdd_HHMMSS>.log``.
    """
    return Path(log_dir) / '{}_{:%Y%m%d_%H%M%S}.log'.format(prefix, when)


class Sink:
    """Writes everything both to the console and to the log file.

    This is the only writer of the run: every component that outputs
    text receives it, so the console and the log get the same
    lines in the same order.

    Colors are only used when the console is a terminal. The log
    receives the very same text so ``less -R`` shows it as seen.
    """

    def __init__(self, file: TextIO, console: Optional[TextIO] = None,
                 color: Optional[bool] = None) -> None:
        self.file = file
        self.console = console
        if color is None:
            color = bool(console and console.isatty())
        self.color = color

    @property
    def path(self) -> Path:
        return Path(self.file.name)

    def write(self, text: str) -> int:
        if self.console:
            self.console.write(text)
            self.console.flush()
        self.file.write(text)
        self.file.flush()
        return len(text)

    def flush(self):
        if self.console:
            self.console.flush()
        self.file.flush()

    def close(self):
        self.file.close()

    def __enter__(self) -> 'Sink':
        return self

    def __exit__(self, *exc):
        self.close()

    def print(self, *values, sep=' ', end='\n'):
        self.write(sep.join(str(v) for v in values) + end)

    def style(self, text: str, *codes: str) -> str:
        if not self.color:
            return text
        return ''.join(codes) + text + Style.RESET_ALL

    def banner(self, title: str):
        line = '=' * BANNER_WIDTH
        self.print()
        self.print(self.style(line, Fore.CYAN, Style.BRIGHT))
        self.print(self.style('  {}'.format(title), Fore.CYAN, Style.BRIGHT))
        self.print(self.style(line, Fore.CYAN, Style.BRIGHT))

    def info(self, message):
        self.print(self.style('[INFO]', Fore.BLUE, Style.BRIGHT), message)

    def warning(self, message):
        self.print(self.style('[WARN]', Fore.YELLOW, Style.BRIGHT), message)

    def done(self, message):
        self.print(self.style('[ OK ]', Fore.GREEN, Style.BRIGHT), message)

    def danger(self, message):
        self.print(self.style('ERROR:', Fore.RED, Style.BRIGHT), message)

    def dim(self, message):
        self.print(self.style(str(message), Style.DIM))


class Session:
    """Opens the log of a run."""

    @staticmethod
    def open(log_dir: Union[str, Path],
             prefix: str,
             when: Optional[datetime] = None,
             console: Optional[TextIO] = None) -> Sink:
        """Creates ``log_dir`` if needed and returns a :class:`Sink`
        writing to a new log in it and to ``console``.

        The path of the log is announced right away.
        """
        path = log_path(log_dir, prefix, when or datetime.now())
        path.parent.mkdir(parents=True, exist_ok=True)
        # Append: two runs in the same second share the file
        sink = Sink(path.open('a', encoding='utf-8'), console)
        sink.dim('Log file: {}'.format(path))
        return sink
