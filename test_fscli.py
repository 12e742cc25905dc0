import os
import shutil
import sys
import tempfile
from unittest import mock

import pytest

from copyup_harness import CopyupSuite, ScenarioOutcome, Status, seed_base_layer, start_harness
from copyup_harness.fixtures import COPYUP_FIXTURES
from copyup_harness.main import SCENARIOS, cli, describe_mount, parse_options, split_escaped


@pytest.fixture
def base_dir():
    """A directory seeded with every fixture."""
    temp_dir = tempfile.mkdtemp()
    seed_base_layer(temp_dir)
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


class FailingWriteSuite(CopyupSuite):
    def write(self, path):
        return ScenarioOutcome.failed('copyup/write', 'forced failure')


class SkippingSuite(CopyupSuite):
    def __getattribute__(self, name):
        if name in {s.method for s in SCENARIOS}:
            return lambda path: ScenarioOutcome.skipped(name, 'forced skip')
        return super().__getattribute__(name)


def test_seed_base_layer(base_dir):
    names = set(os.listdir(base_dir))
    assert set(COPYUP_FIXTURES) <= names
    assert 'test.txt' in names
    assert len(COPYUP_FIXTURES) == 9


def test_catalog_order():
    assert [s.name for s in SCENARIOS] == [
        'copyup/write',
        'copyup/truncate',
        'copyup/chmod',
        'copyup/chown',
        'copyup/rename',
        'copyup/link',
        'copyup/utimes',
        'copyup/xattr',
        'copyup/fallocate',
        'getdents64',
    ]


def test_run_full_suite(base_dir, capsys):
    suite = CopyupSuite(base_dir)
    assert suite.run() == 0
    assert len(suite.outcomes) == len(SCENARIOS)
    assert all(o.status is not Status.FAILED for o in suite.outcomes)
    out = capsys.readouterr().out
    assert 'PASS copyup/write' in out
    assert 'PASS copyup/rename' in out


def test_first_failure_stops_the_run(base_dir, capsys):
    suite = FailingWriteSuite(base_dir)
    assert suite.run() == 1
    assert [o.name for o in suite.outcomes] == ['copyup/write']
    captured = capsys.readouterr()
    assert 'FAIL copyup/write' in captured.out
    assert 'forced failure' in captured.err
    #nothing after the failing scenario touched its fixture
    assert os.path.exists(os.path.join(base_dir, 'copyup_rename_test.txt'))


def test_skips_do_not_stop_the_run(base_dir, capsys):
    suite = SkippingSuite(base_dir)
    assert suite.run() == 0
    assert len(suite.outcomes) == len(SCENARIOS)
    assert all(o.status is Status.SKIPPED for o in suite.outcomes)
    assert 'forced skip' in capsys.readouterr().out


def test_patterns_select_scenarios(base_dir):
    suite = CopyupSuite(base_dir, patterns=['copyup/ch*'])
    assert suite.run() == 0
    selected = [o.name for o in suite.outcomes if o.reason != 'not selected']
    assert selected == ['copyup/chmod', 'copyup/chown']
    #unselected fixtures are untouched
    assert os.path.exists(os.path.join(base_dir, 'copyup_rename_test.txt'))


def test_start_harness_rejects_missing_base_path():
    with pytest.raises(ValueError):
        start_harness(os.path.join(tempfile.gettempdir(), 'copyup_harness_nonexistent_dir'))
    with pytest.raises(ValueError):
        start_harness('')


def test_describe_mount():
    description = describe_mount(os.path.abspath(os.sep))
    assert description.startswith(os.sep)


@pytest.mark.parametrize("options,expected", [
    ('debug=True', {'debug': 'True'}),
    ('debug=False,log_in_file=/tmp/copyup.log', {'debug': 'False', 'log_in_file': '/tmp/copyup.log'}),
    ('patterns=copyup/*:getdents64', {'patterns': 'copyup/*:getdents64'}),
    (r'log_in_file=/tmp/a\,b.log', {'log_in_file': '/tmp/a,b.log'}),
])
def test_parse_options(options, expected):
    assert parse_options(options) == expected


def test_split_escaped():
    assert split_escaped(':', 'copyup/*:getdents64') == ['copyup/*', 'getdents64']
    assert split_escaped(':', r'copyup/a\:b:getdents64') == ['copyup/a:b', 'getdents64']


def test_cli_exit_code(base_dir, capsys):
    with mock.patch.object(sys, 'argv', ['copyup_harness', base_dir, '-o', 'patterns=copyup/write:getdents64']):
        with pytest.raises(SystemExit) as ctx:
            cli()
    assert ctx.value.code == 0
    assert 'PASS copyup/write' in capsys.readouterr().out


def test_cli_reports_failure(base_dir):
    with mock.patch('copyup_harness.main.CopyupSuite.write', lambda self, path: ScenarioOutcome.failed('copyup/write', 'forced failure')):
        with mock.patch.object(sys, 'argv', ['copyup_harness', base_dir]):
            with pytest.raises(SystemExit) as ctx:
                cli()
    assert ctx.value.code == 1


@pytest.mark.parametrize("bad_options", ['debug', 'unknown_option=1'])
def test_cli_rejects_bad_options(base_dir, bad_options):
    with mock.patch.object(sys, 'argv', ['copyup_harness', base_dir, '-o', bad_options]):
        with pytest.raises(SystemExit) as ctx:
            cli()
    assert ctx.value.code == 2


def test_cli_rejects_missing_directory():
    missing = os.path.join(tempfile.gettempdir(), 'copyup_harness_nonexistent_dir')
    with mock.patch.object(sys, 'argv', ['copyup_harness', missing]):
        with pytest.raises(SystemExit) as ctx:
            cli()
    assert ctx.value.code == 2


def test_cli_rejects_unwritable_log_file(base_dir):
    log_file = os.path.join(base_dir, 'no_such_dir', 'copyup.log')
    with mock.patch.object(sys, 'argv', ['copyup_harness', base_dir, '-o', f'debug=True,log_in_file={log_file}']):
        with pytest.raises(SystemExit) as ctx:
            cli()
    assert ctx.value.code == 2
