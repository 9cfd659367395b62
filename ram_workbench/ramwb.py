import sys

import click
from colorama import Fore, Style

from ram_workbench.workbench import NotRoot, Workbench

EPILOG = """\b
Ex. sudo ramwb --no-install --vm-workers 4 --verify-timeout 10m

will skip installing the tools, run the stability test with 4
workers for 10 minutes and keep the rest of the settings.
Settings are also read from a settings.ini or .env file in the
working directory, or from WB_* environment variables.
"""


@click.command(help=Workbench.__doc__, epilog=EPILOG)
@click.option('--log-dir', '-l',
              type=click.Path(file_okay=False, resolve_path=True),
              help='Folder where to save the log. It is created if needed.')
@click.option('--log-prefix',
              help='Start of the log file name.')
@click.option('--install/--no-install',
              default=None,
              help='Install the tools with apt-get before inspecting.')
@click.option('--package', '-p', 'packages',
              multiple=True,
              help='Package to install, instead of the default list. Repeat it for several.')
@click.option('--vm-workers', '-w',
              type=click.IntRange(min=1),
              help='Number of stress-ng workers stressing the memory.')
@click.option('--vm-bytes', '-vb',
              help='Memory stress-ng allocates, ex. 90%.')
@click.option('--verify-timeout', '-t',
              help='Duration of the stability test, ex. 5m.')
@click.option('--mbw-size', '-s',
              type=click.IntRange(min=1),
              help='Buffer size in MB of the mbw speed test.')
@click.option('--mbw-runs', '-n',
              type=click.IntRange(min=1),
              help='Times mbw repeats each test.')
@click.option('--sysbench-threads',
              type=click.IntRange(min=1),
              help='Threads of the sysbench memory test.')
@click.option('--sysbench-total-size',
              help='Data sysbench transfers, ex. 50G.')
@click.option('--expected-ram-gb',
              type=click.IntRange(min=1),
              help='Size in GB the kit should report.')
@click.option('--expected-dimms',
              type=click.IntRange(min=1),
              help='Number of modules of the kit.')
@click.option('--expected-speed-mts',
              type=click.IntRange(min=1),
              help='Rated speed of the kit in MT/s.')
@click.option('--pause/--no-pause',
              default=None,
              help='Wait for a key between steps.')
@click.option('--debug/--no-debug',
              default=None,
              help='Show debug information of the inspection itself.')
def ramwb(**kwargs):
    try:
        workbench = Workbench(**kwargs)
    except NotRoot as e:
        click.echo('{}{}ERROR:{} {}'.format(Fore.RED, Style.BRIGHT, Style.RESET_ALL, e), err=True)
        sys.exit(1)
    workbench.run()


if __name__ == '__main__':
    ramwb()
