import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence, TextIO

import click

from ram_workbench import __version__
from ram_workbench.config import WorkbenchConfig
from ram_workbench.locator import admin_path, find_command
from ram_workbench.runner import StepRunner
from ram_workbench.session import Session, Sink
from ram_workbench.steps import Phase, Stage, VERSION_FLAGS, default_phases, summary_lines


class NotRoot(EnvironmentError):
    def __str__(self) -> str:
        return 'Please run as root. Example: sudo ramwb'


def require_root():
    """Raises :class:`NotRoot` unless we are root."""
    if os.geteuid() != 0:
        raise NotRoot()


class Workbench:
    """Inspect a RAM kit: identity of the memory modules, a
    capacity and stability test and a throughput benchmark.

    Everything shown is saved in a timestamped log. Pauses between
    steps let you read the output before the next step
    scrolls it away. Failed steps are reported and the inspection
    goes on: you judge the results with the final checklist.

    You must run this software as root / sudo.
    """

    def __init__(self,
                 log_dir: Path = None,
                 log_prefix: str = None,
                 install: bool = None,
                 packages: Sequence[str] = None,
                 vm_workers: int = None,
                 vm_bytes: str = None,
                 verify_timeout: str = None,
                 mbw_size: int = None,
                 mbw_runs: int = None,
                 sysbench_threads: int = None,
                 sysbench_total_size: str = None,
                 expected_ram_gb: int = None,
                 expected_dimms: int = None,
                 expected_speed_mts: int = None,
                 pause: bool = None,
                 debug: bool = None,
                 phases: List[Phase] = None,
                 console: Optional[TextIO] = None):
        """
        Configures this Workbench. Values not passed-in come from
        :class:`ram_workbench.config.WorkbenchConfig`.

        :param log_dir: Folder where to save the log of the run.
        :param install: Whether to install the tools with apt-get.
        :param vm_workers: stress-ng workers stressing the memory.
        :param vm_bytes: Memory each stress-ng run allocates, as
                         stress-ng understands it (ex. '90%').
        :param verify_timeout: How long stress-ng runs (ex. '5m').
        :param mbw_size: Buffer size in MB for mbw.
        :param mbw_runs: Times mbw repeats each test.
        :param expected_ram_gb: Size of the kit, shown in the checklists.
        :param expected_dimms: Modules in the kit.
        :param expected_speed_mts: Rated speed of the kit in MT/s.
        :param pause: Wait for a key between steps?
        :param phases: Phases to run instead of the default ones.
        :param console: Where to show the output. Defaults to stdout.
        """
        require_root()

        self.log_dir = Path(log_dir or WorkbenchConfig.WB_LOG_DIR)
        self.log_prefix = log_prefix or WorkbenchConfig.WB_LOG_PREFIX
        self.install = WorkbenchConfig.WB_INSTALL if install is None else install
        self.packages = tuple(packages or WorkbenchConfig.WB_PACKAGES)
        self.vm_workers = vm_workers or WorkbenchConfig.WB_VM_WORKERS
        self.vm_bytes = vm_bytes or WorkbenchConfig.WB_VM_BYTES
        self.verify_timeout = verify_timeout or WorkbenchConfig.WB_VERIFY_TIMEOUT
        self.mbw_size_mb = mbw_size or WorkbenchConfig.WB_MBW_SIZE_MB
        self.mbw_runs = mbw_runs or WorkbenchConfig.WB_MBW_RUNS
        self.sysbench_threads = sysbench_threads or WorkbenchConfig.WB_SYSBENCH_THREADS
        self.sysbench_total_size = sysbench_total_size or WorkbenchConfig.WB_SYSBENCH_TOTAL_SIZE
        self.expected_ram_gb = expected_ram_gb or WorkbenchConfig.WB_EXPECTED_RAM_GB
        self.expected_dimms = expected_dimms or WorkbenchConfig.WB_EXPECTED_DIMMS
        self.expected_speed_mts = expected_speed_mts or WorkbenchConfig.WB_EXPECTED_SPEED_MTS
        self.pause = WorkbenchConfig.WB_PAUSE if pause is None else pause
        self.debug = WorkbenchConfig.WB_DEBUG if debug is None else debug
        self.console = console
        self.phases = default_phases(self) if phases is None else phases
        self.stage = Stage.NotStarted
        # Child processes find administrative tools too
        self.env = dict(os.environ, PATH=admin_path())
        self.sink = None  # type: Sink
        self.runner = None  # type: StepRunner

    def run(self) -> int:
        """Executes every phase in order and prints the summary.

        Returns 0: failed steps are reported, not escalated.
        """
        with Session.open(self.log_dir, self.log_prefix,
                          console=self.console or sys.stdout) as sink:
            self.sink = sink
            self.runner = StepRunner(sink, self.env)
            handler = logging.StreamHandler(sink)
            handler.setLevel(logging.DEBUG if self.debug else logging.WARNING)
            handler.setFormatter(logging.Formatter('%(levelname)s %(name)s: %(message)s'))
            logger = logging.getLogger()
            logger.addHandler(handler)
            level = logger.level
            if self.debug:
                logger.setLevel(logging.DEBUG)
            try:
                self._run()
            except Exception as e:
                logging.error('Run failed:')
                logging.exception(e)
                sink.danger('The inspection had an error and stopped. Check {}'.format(sink.path))
                raise
            else:
                logging.info('Run finished successfully.')
            finally:
                logger.removeHandler(handler)
                logger.setLevel(level)
        return 0

    def _run(self):
        self.sink.banner('RAM Inspection {} - START'.format(__version__))
        self.sink.info('Running on: {:%c}'.format(datetime.now()))
        self.sink.info('PATH: {}'.format(self.env['PATH']))
        self.wait()

        for phase in self.phases:
            self.enter(phase.stage)
            if phase.stage == Stage.Installing and not self.install:
                self.sink.banner(phase.title)
                self.sink.warning('Package installation disabled. Skipping it.')
            else:
                self.run_phase(phase)
                if phase.stage == Stage.Installing:
                    self.tool_versions()
            self.wait()

        self.enter(Stage.Summarizing)
        self.summary()
        self.enter(Stage.Done)

    def enter(self, stage: Stage):
        logging.debug('Stage %s -> %s', self.stage, stage)
        self.stage = stage

    def run_phase(self, phase: Phase):
        """Runs the steps of the phase and then shows its hints."""
        self.sink.banner(phase.title)
        for line in phase.intro:
            self.sink.print(line)
        for step in phase.steps:
            paths = self.locate(step.tools)
            missing = [tool for tool in step.tools if tool not in paths]
            if missing:
                self.sink.warning('{} not found. Skipping {}.'.format(', '.join(missing),
                                                                      step.title))
                continue
            # Failed steps are only reported
            returncode = self.runner.run(step.title, *step.command(paths))
            logging.info('%s finished with %s', step.title, returncode)
        if phase.hints:
            self.sink.banner(phase.hints_title)
            for line in phase.hints:
                self.sink.print(line)

    def locate(self, tools: Sequence[str]) -> Dict[str, str]:
        """The path of each tool that can be found."""
        paths = {}
        for tool in tools:
            path = find_command(tool, self.env['PATH'])
            if path:
                paths[tool] = path
        return paths

    def tool_versions(self):
        self.sink.print()
        self.sink.done('Installed tools:')
        for tool, flag in VERSION_FLAGS:
            self.sink.print('  {:<10} {}'.format(tool + ':', self._version(tool, flag)))

    def _version(self, tool: str, flag: Optional[str]) -> str:
        path = find_command(tool, self.env['PATH'])
        if not path:
            return 'not found'
        args = (path, flag) if flag else (path,)
        output = self.runner.output(*args)
        if output is None:
            return 'unknown'
        return next((line.strip() for line in output.splitlines() if line.strip()), 'unknown')

    def summary(self):
        self.sink.banner('Final Summary')
        self.sink.done('Log file saved at: {}'.format(self.sink.path))
        self.sink.print()
        for line in summary_lines(self):
            self.sink.print(line)
        self.sink.print()
        self.sink.dim('View the full log anytime:')
        self.sink.print('  less -R "{}"'.format(self.sink.path))

    def wait(self):
        """Waits for the user to press a key, so the output can be
        read before the next step.
        """
        if not self.pause:
            return
        self.sink.print()
        self.sink.write('Press any key to continue...')
        # Only stdin decides: the output may be piped to a file
        if sys.stdin.isatty():
            click.getchar()
        else:
            sys.stdin.readline()
        self.sink.print()
