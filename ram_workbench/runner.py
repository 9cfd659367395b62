import logging
import shlex
from subprocess import PIPE, STDOUT, Popen, SubprocessError, run
from typing import Mapping, Optional

from ram_workbench.session import Sink

NOT_FOUND = 127
NOT_EXECUTABLE = 126


class StepRunner:
    """Runs external tools, showing their output live through a
    :class:`Sink` and reporting how they ended.

    A failing tool never stops the run: :meth:`run` returns the
    exit code and callers decide what to do with it.
    """

    def __init__(self, sink: Sink, env: Optional[Mapping[str, str]] = None) -> None:
        self.sink = sink
        self.env = env

    def run(self, title: str, *command) -> int:
        """Runs ``command`` and returns its exit code.

        stdout and stderr of the tool share a pipe so their lines
        reach the sink in the order the tool writes them.
        """
        command = tuple(str(c) for c in command)
        self.sink.banner(title)
        self.sink.info('Command: {}'.format(' '.join(shlex.quote(c) for c in command)))
        self.sink.print()

        returncode = self._execute(command)

        self.sink.print()
        if returncode == 0:
            self.sink.done('Finished: {} (exit code {})'.format(title, returncode))
        else:
            self.sink.warning('Finished: {} (exit code {}) - check output above'
                              .format(title, returncode))
        return returncode

    def output(self, *command, timeout: int = 10) -> Optional[str]:
        """Runs ``command`` quietly and returns what it printed, or
        ``None`` if it could not run. For short queries like versions.
        """
        command = tuple(str(c) for c in command)
        logging.debug('Query %s', command)
        try:
            return run(command,
                       stdout=PIPE,
                       stderr=STDOUT,
                       universal_newlines=True,
                       encoding='utf-8',
                       errors='replace',
                       env=self.env,
                       timeout=timeout).stdout
        except (OSError, SubprocessError) as e:
            logging.debug('Query %s failed: %s', command, e)
            return None

    def _execute(self, command) -> int:
        logging.debug('Execute %s', command)
        try:
            process = Popen(command,
                            stdout=PIPE,
                            stderr=STDOUT,
                            universal_newlines=True,
                            encoding='utf-8',
                            errors='replace',
                            env=self.env)
        except FileNotFoundError:
            self.sink.warning('{} not found.'.format(command[0]))
            return NOT_FOUND
        except PermissionError:
            self.sink.warning('{} is not executable.'.format(command[0]))
            return NOT_EXECUTABLE
        with process:
            for line in process.stdout:
                self.sink.write(line)
        logging.debug('%s exited with %s', command[0], process.returncode)
        return process.returncode
