#!/usr/bin/env python3

import os
import re
import sys
import argparse
import traceback
import warnings
from pathlib import Path
from typing import Any, Dict, List, Optional

import psutil
from globmatch import glob_match
with warnings.catch_warnings(action="ignore"):
    from str2type import str2type

from .dirent_check import SCENARIO as DIRENT_SCENARIO, getdents64_operation
from .identity_oracle import IdentityOracle
from .invariant_checker import InvariantCheckerMixIn
from .logging_mixin import LoggingMixIn
from .outcome import InvariantViolation, ScenarioOutcome, Status
from .trigger_operations import (
    COPYUP_SCENARIOS,
    Scenario,
    write_operation,
    truncate_operation,
    chmod_operation,
    chown_operation,
    rename_operation,
    link_operation,
    utimens_operation,
    xattr_operation,
    fallocate_operation,
)

# Fixed run order; the enumeration check runs last and uses the base directory itself
SCENARIOS: List[Scenario] = COPYUP_SCENARIOS + [Scenario(DIRENT_SCENARIO, 'getdents64', None)]


def describe_mount(path: str) -> str:
    """Name the device and filesystem type mounted at (or above) path."""
    best = None
    for partition in psutil.disk_partitions(all=True):
        mountpoint = partition.mountpoint
        if path == mountpoint or path.startswith(mountpoint.rstrip(os.sep) + os.sep):
            if best is None or len(mountpoint) > len(best.mountpoint):
                best = partition
    if best is None:
        return f"{path} (mount not found)"
    return f"{path} on {best.device} type {best.fstype} (mounted at {best.mountpoint})"


class CopyupSuite(InvariantCheckerMixIn, LoggingMixIn):
    def __init__(self, base_path, patterns=None, debug=False, log_in_file=None, log_in_console=True, log_in_syslog=False, oracle: Optional[IdentityOracle] = None):

        LoggingMixIn.__init__(self, enable=debug, log_in_file=log_in_file, log_in_console=log_in_console, log_in_syslog=log_in_syslog)
        # Absolute so no scenario depends on the working directory
        self.base_path: str = os.path.abspath(base_path)
        self.patterns: Optional[list[str]] = patterns
        self.oracle: IdentityOracle = oracle if oracle is not None else IdentityOracle()
        self.outcomes: list[ScenarioOutcome] = []

    # Scenarios
    def write(self, path):
        return write_operation(self, path)

    def truncate(self, path):
        return truncate_operation(self, path)

    def chmod(self, path):
        return chmod_operation(self, path)

    def chown(self, path):
        return chown_operation(self, path)

    def rename(self, path):
        return rename_operation(self, path)

    def link(self, path):
        return link_operation(self, path)

    def utimens(self, path):
        return utimens_operation(self, path)

    def xattr(self, path):
        return xattr_operation(self, path)

    def fallocate(self, path):
        return fallocate_operation(self, path)

    def getdents64(self, path):
        return getdents64_operation(self, path)

    def get_fixture_path(self, fixture: Optional[str]) -> str:
        if fixture is None:
            return self.base_path
        return str(Path(self.base_path) / fixture)

    def is_selected(self, name: str) -> bool:
        if not self.patterns:
            return True
        return glob_match(name, self.patterns)

    def run_scenario(self, scenario: Scenario) -> ScenarioOutcome:
        """
        Run one scenario and turn what it raises into its outcome.

        InvariantViolation and any OSError the scenario did not classify
        itself end the scenario as Failed.
        """
        try:
            return self(scenario.method, self.get_fixture_path(scenario.fixture))
        except InvariantViolation as e:
            return ScenarioOutcome.failed(scenario.name, str(e))
        except OSError as e:
            self.log.error('%s raised an unexpected error:\n%s', scenario.name, traceback.format_exc())
            return ScenarioOutcome.failed(scenario.name, f"unexpected error: {e}")

    def report(self, outcome: ScenarioOutcome) -> None:
        print(outcome, flush=True)
        if outcome.status is Status.FAILED:
            print(f"  {outcome.reason}", file=sys.stderr, flush=True)

    def run(self) -> int:
        """
        Run every scenario in catalog order, stopping at the first failure.

        Returns:
            int: 0 if every scenario passed or was skipped, 1 otherwise.
        """
        self.log.info('Testing %s', describe_mount(self.base_path))
        self.outcomes = []
        for scenario in SCENARIOS:
            if self.is_selected(scenario.name):
                outcome = self.run_scenario(scenario)
            else:
                outcome = ScenarioOutcome.skipped(scenario.name, 'not selected')
            self.outcomes.append(outcome)
            self.report(outcome)
            if outcome.status is Status.FAILED:
                return 1
        return 0


def start_harness(base_path: str, patterns: None | list[str] = None, debug: bool = False, log_in_file: str | bool | None = None, log_in_console: bool = True, log_in_syslog: bool = False) -> int:
    if not base_path:
        raise ValueError("Base path must be specified")
    if not os.path.isdir(base_path):
        raise ValueError(f"Base path {base_path} is not a directory")
    if patterns:
        print("Selected scenarios: ", patterns)

    if debug:
        print("Verbose mode enabled", flush=True)

    suite = CopyupSuite(base_path, patterns, debug=debug, log_in_file=log_in_file, log_in_console=log_in_console, log_in_syslog=log_in_syslog)
    return suite.run()

def parse_options(options: str) -> Dict[str, str]:
    """Parse options string with escaping"""
    options_dict: Dict[str, str] = {}
    for opt in re.split(r'(?<!\\),', options):
        key, value = re.split(r'(?<!\\)=', opt, maxsplit=1)
        options_dict[key] = value.replace('\\,', ',').replace('\\=', '=').replace('\\ ', ' ')
    return options_dict

def split_escaped(separator: str, value: str) -> List[str]:
    """Split a string on a separator, handling escaping"""
    return [part.replace(f'\\{separator}', separator) for part in re.split(rf'(?<!\\){separator}', value)]

def cli() -> None:
    parser = argparse.ArgumentParser(description="Copy-up inode stability harness for overlay filesystems")
    parser.add_argument("base_path", help="Mount point (or a directory inside it) holding the base layer fixtures")
    parser.add_argument("-o", "--options", help="Harness options")
    args = parser.parse_args()

    try:
        options: Dict[str, Any] = parse_options(args.options) if args.options else {}
        # Pass each options value to the right type using str2type () except for patterns
        for key in options:
            if key != 'patterns':
                options[key] = str2type(options[key].replace('\\:', ':').replace('\\,', ',').replace('\\=', '=').replace('\\ ', ' '), decode_escape=False)

        if 'patterns' in options:
            # Split patterns to list[str] based on the separator ':' but support escaping the separator
            options['patterns'] = split_escaped(':', options['patterns'].replace('\\ ', ' '))

        code = start_harness(args.base_path, **options)
    except (TypeError, ValueError, OSError) as e:
        parser.error(str(e))
    sys.exit(code)

if __name__ == "__main__":
    cli()
