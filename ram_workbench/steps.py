"""The ordered table of what a RAM inspection does.

Each :class:`Phase` is a stage of the inspection holding the
:class:`Step` that run external tools, plus the text that helps
reading their output.
"""
import shlex
from enum import Enum, unique
from typing import Callable, Dict, Iterable, List, Sequence, Tuple

import inflection

ToolPaths = Dict[str, str]


@unique
class Stage(Enum):
    NotStarted = 0
    Installing = 1
    CollectingIdentity = 2
    StabilityTesting = 3
    ThroughputTesting = 4
    Summarizing = 5
    Done = 6

    def __str__(self):
        return inflection.titleize(self.name)


class Step:
    """An external command to run.

    :param title: Shown in the banners around the output.
    :param command: Builds the argv from the resolved path of
                    each tool in ``tools``.
    :param tools: The tools the command needs. The step is skipped
                  when any of them cannot be found.
    """

    def __init__(self,
                 title: str,
                 command: Callable[[ToolPaths], Sequence[str]],
                 tools: Iterable[str] = ()) -> None:
        self.title = title
        self._command = command
        self.tools = tuple(tools)

    @classmethod
    def tool(cls, title: str, tool: str, *args) -> 'Step':
        """A step running ``tool`` with fixed ``args``."""
        return cls(title, lambda paths: (paths[tool],) + tuple(str(a) for a in args), (tool,))

    def command(self, paths: ToolPaths) -> Tuple[str, ...]:
        return tuple(self._command(paths))

    def __repr__(self) -> str:
        return '<Step {}>'.format(self.title)


class Phase:
    def __init__(self,
                 stage: Stage,
                 title: str,
                 steps: Sequence[Step],
                 intro: Sequence[str] = (),
                 hints: Sequence[str] = (),
                 hints_title: str = 'How to interpret') -> None:
        self.stage = stage
        self.title = title
        self.steps = tuple(steps)
        self.intro = tuple(intro)
        self.hints = tuple(hints)
        self.hints_title = hints_title

    def __repr__(self) -> str:
        return '<Phase {}>'.format(self.stage.name)


VERSION_FLAGS = (
    ('stress-ng', '--version'),
    ('dmidecode', '--version'),
    ('hwinfo', '--version'),
    ('lshw', '-version'),
    ('mbw', None),  # mbw has no version flag, its usage goes first
    ('sysbench', '--version'),
)
"""How to ask each installed tool for its version."""

MEMINFO_FIELDS = 'MemTotal|MemFree|MemAvailable|SwapTotal|SwapFree'
SPEED_LINES = 'Configured Memory Speed|Speed:'


def _speed_lines(paths: ToolPaths) -> Tuple[str, ...]:
    pipeline = '{} -t memory | {} -E {} || true'.format(shlex.quote(paths['dmidecode']),
                                                        shlex.quote(paths['grep']),
                                                        shlex.quote(SPEED_LINES))
    return paths['sh'], '-c', pipeline


def install_phase(wb) -> Phase:
    return Phase(Stage.Installing, 'Step 0: Install required packages', (
        Step.tool('0.1 Update package lists', 'apt-get', 'update', '-y'),
        Step.tool('0.2 Install packages: {}'.format(' '.join(wb.packages)),
                  'apt-get', 'install', '-y', *wb.packages),
    ))


def identity_phase(wb) -> Phase:
    return Phase(
        Stage.CollectingIdentity,
        'Step 1: Identity / memory configuration (includes configured speed)',
        (
            Step.tool('1.1 CPU info (lscpu)', 'lscpu'),
            Step.tool('1.2 Memory totals (/proc/meminfo)',
                      'grep', '-E', MEMINFO_FIELDS, '/proc/meminfo'),
            Step.tool('1.3 SMBIOS Memory (dmidecode -t memory)', 'dmidecode', '-t', 'memory'),
            Step('1.4 Highlight RAM speed lines', _speed_lines, ('sh', 'dmidecode', 'grep')),
            Step.tool('1.5 hwinfo memory summary', 'hwinfo', '--memory'),
            Step.tool('1.6 lshw memory summary', 'lshw', '-class', 'memory'),
        ),
        hints_title='What you should confirm now',
        hints=(
            '  • Total RAM is ~{}GB (MemTotal).'.format(wb.expected_ram_gb),
            '  • {} DIMMs are present (dmidecode/lshw).'.format(wb.expected_dimms),
            '  • Configured speed: {} MT/s if XMP/EXPO enabled '
            '(dmidecode speed lines).'.format(wb.expected_speed_mts),
            '  • DDR5 serial may be unavailable via software; that is common.',
        )
    )


def stability_phase(wb) -> Phase:
    return Phase(
        Stage.StabilityTesting,
        'Step 2: Capacity + stability test (stress-ng --verify)',
        (
            Step.tool('2.1 stress-ng verify test', 'stress-ng',
                      '--vm', wb.vm_workers,
                      '--vm-bytes', wb.vm_bytes,
                      '--vm-method', 'all',
                      '--verify',
                      '--timeout', wb.verify_timeout,
                      '--metrics-brief'),
        ),
        intro=(
            'Allocates ~{} of RAM, stresses patterns, and verifies correctness.'
            .format(wb.vm_bytes),
            'This is the key step to catch fake capacity and unstable RAM.',
        ),
        hints=(
            "  ✅ PASS: completes with no 'fail/error' lines.",
            '  ❌ FAIL: any verify errors, crashes, or reboots → do not buy.',
        )
    )


def throughput_phase(wb) -> Phase:
    return Phase(
        Stage.ThroughputTesting,
        'Step 3: Practical RAM SPEED test (mbw, sysbench)',
        (
            Step.tool('3.1 mbw speed test', 'mbw', '-n', wb.mbw_runs, wb.mbw_size_mb),
            Step.tool('3.2 sysbench memory test', 'sysbench', 'memory',
                      '--threads={}'.format(wb.sysbench_threads),
                      '--memory-block-size=1M',
                      '--memory-total-size={}'.format(wb.sysbench_total_size),
                      'run'),
        ),
        intro=(
            'This is a REAL timing test: it allocates a large buffer and measures '
            'copy/read/write throughput.',
            '',
            'Config:',
            '  - Buffer size: {} MB'.format(wb.mbw_size_mb),
            '  - Runs:        {}'.format(wb.mbw_runs),
        ),
        hints=(
            '  - Look at the AVG lines (MiB/s). Higher is better.',
            '  - sysbench reports the transfer rate in MiB/sec.',
            '  - If XMP/EXPO is OFF (e.g., 4800 MT/s), numbers will be lower.',
            '  - If the kit is running single-channel, numbers will be much lower.',
        )
    )


def summary_lines(wb) -> List[str]:
    """The static buy / don't buy checklist. The reader decides."""
    return [
        "Buy / Don't Buy quick rule:",
        '  ✅ BUY if:',
        '     - Total RAM ~{}GB'.format(wb.expected_ram_gb),
        '     - stress-ng verify test shows ZERO errors',
        '     - mbw completes cleanly and throughput looks reasonable',
        '',
        "  ❌ DON'T BUY if:",
        '     - Any stress-ng verification errors',
        '     - System crashes/reboots during tests',
    ]


def default_phases(wb) -> List[Phase]:
    """The phases of an inspection in the order they run,
    parameterized by the settings of the Workbench ``wb``.
    """
    return [
        install_phase(wb),
        identity_phase(wb),
        stability_phase(wb),
        throughput_phase(wb),
    ]
