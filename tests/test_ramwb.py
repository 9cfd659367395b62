from unittest import mock

from click.testing import CliRunner

from ram_workbench.ramwb import ramwb


def test_not_root(not_root):
    with mock.patch('ram_workbench.workbench.Workbench.run') as run:
        result = CliRunner().invoke(ramwb, [])
    assert result.exit_code == 1
    assert 'Please run as root. Example: sudo ramwb' in result.output
    assert not run.called


def test_options_reach_workbench(root):
    with mock.patch('ram_workbench.ramwb.Workbench') as Workbench:
        result = CliRunner().invoke(ramwb, ['--no-install', '-w', '4', '--verify-timeout', '10m',
                                            '--mbw-size', '1000', '--no-pause'])
    assert result.exit_code == 0, result.output
    kwargs = Workbench.call_args[1]
    assert kwargs['install'] is False
    assert kwargs['vm_workers'] == 4
    assert kwargs['verify_timeout'] == '10m'
    assert kwargs['mbw_size'] == 1000
    assert kwargs['pause'] is False
    assert kwargs['debug'] is None
    assert Workbench.return_value.run.called


def test_every_setting_has_an_option(root):
    with mock.patch('ram_workbench.ramwb.Workbench') as Workbench:
        result = CliRunner().invoke(ramwb, ['--log-prefix', 'kit-a',
                                            '-p', 'stress-ng', '-p', 'mbw',
                                            '--sysbench-threads', '8',
                                            '--sysbench-total-size', '10G',
                                            '--expected-ram-gb', '32',
                                            '--expected-dimms', '4',
                                            '--expected-speed-mts', '5600'])
    assert result.exit_code == 0, result.output
    kwargs = Workbench.call_args[1]
    assert kwargs['log_prefix'] == 'kit-a'
    assert kwargs['packages'] == ('stress-ng', 'mbw')
    assert kwargs['sysbench_threads'] == 8
    assert kwargs['sysbench_total_size'] == '10G'
    assert kwargs['expected_ram_gb'] == 32
    assert kwargs['expected_dimms'] == 4
    assert kwargs['expected_speed_mts'] == 5600


def test_failed_steps_keep_exit_code(tmp_path, bin_dir, root):
    from ram_workbench.steps import Phase, Stage, Step
    from tests.conftest import stub
    stub(bin_dir, 'ramwb-fail', 3)
    failing = [Phase(Stage.StabilityTesting, 'Failing', [Step.tool('Fail', 'ramwb-fail')])]
    with mock.patch('ram_workbench.workbench.default_phases', return_value=failing):
        result = CliRunner().invoke(ramwb, ['--log-dir', str(tmp_path / 'logs'), '--no-pause'])
    assert result.exit_code == 0, result.output
    assert '(exit code 3)' in result.output


def test_invalid_workers():
    result = CliRunner().invoke(ramwb, ['--vm-workers', '0'])
    assert result.exit_code == 2
