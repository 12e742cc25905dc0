import logging
import os
from typing import Any
from appdirs import user_log_dir
from syslog2 import SysLogHandler


def default_log_file() -> str:
    log_dir = user_log_dir("CopyupHarness")
    os.makedirs(log_dir, exist_ok=True)
    return os.path.join(log_dir, 'copyup_harness.log')


class LoggingMixIn:
    """Mixin for logging operations."""

    def __init__(self, enable: bool, log_in_file: str | bool | None, log_in_console: bool, log_in_syslog: bool) -> None:

        self.log: logging.Logger = logging.getLogger('copyup_harness')
        self.log.setLevel(logging.DEBUG)  # Set the logging level to DEBUG
        # Handlers from a previous suite in the same process would duplicate every line
        for handler in list(self.log.handlers):
            self.log.removeHandler(handler)
            handler.close()
        if not enable:
            #Create a dummy logger
            self.log.addHandler(logging.NullHandler())
            return
        log_format = logging.Formatter('%(asctime)s %(levelname)s - %(message)s')

        if log_in_syslog:
            syslog_handler = SysLogHandler(program=self.log.name)
            syslog_handler.setFormatter(log_format)
            self.log.addHandler(syslog_handler)

        if log_in_file:
            if log_in_file is True:
                log_in_file = default_log_file()
            file_handler = logging.FileHandler(log_in_file)
            file_handler.setFormatter(log_format)
            self.log.addHandler(file_handler)

        if log_in_console:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(log_format)
            self.log.addHandler(console_handler)

    def __call__(self, op: str, path: str, *args: Any) -> Any:
        """
        Call the given scenario with logging.

        Args:
            op (str): Scenario method name.
            path (str): Fixture path handed to the scenario.
            *args: Additional arguments.

        Returns:
            Any: Scenario result.

        Raises:
            OSError: If an OSError occurred.
        """
        ret = '[Unhandled Exception]'
        try:
            ret = getattr(self, op)(path, *args)
            return ret
        except OSError as e:
            ret = str(e)
            raise
        finally:
            self.log.debug('%s(p=%s, %s) => %s', op, path, repr(args), ret)
