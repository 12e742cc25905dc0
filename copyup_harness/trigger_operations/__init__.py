from dataclasses import dataclass
from typing import List, Optional

from . import (
    write_operation as write_module,
    truncate_operation as truncate_module,
    chmod_operation as chmod_module,
    chown_operation as chown_module,
    rename_operation as rename_module,
    link_operation as link_module,
    utimens_operation as utimens_module,
    xattr_operation as xattr_module,
    fallocate_operation as fallocate_module,
)
from .write_operation import write_operation
from .truncate_operation import truncate_operation
from .chmod_operation import chmod_operation
from .chown_operation import chown_operation
from .rename_operation import rename_operation
from .link_operation import link_operation
from .utimens_operation import utimens_operation
from .xattr_operation import xattr_operation
from .fallocate_operation import fallocate_operation


@dataclass(frozen=True)
class Scenario:
    """A catalog entry: report name, CopyupSuite method and fixture file name."""
    name: str
    method: str
    fixture: Optional[str]


COPYUP_SCENARIOS: List[Scenario] = [
    Scenario(write_module.SCENARIO, 'write', write_module.FIXTURE),
    Scenario(truncate_module.SCENARIO, 'truncate', truncate_module.FIXTURE),
    Scenario(chmod_module.SCENARIO, 'chmod', chmod_module.FIXTURE),
    Scenario(chown_module.SCENARIO, 'chown', chown_module.FIXTURE),
    Scenario(rename_module.SCENARIO, 'rename', rename_module.FIXTURE),
    Scenario(link_module.SCENARIO, 'link', link_module.FIXTURE),
    Scenario(utimens_module.SCENARIO, 'utimens', utimens_module.FIXTURE),
    Scenario(xattr_module.SCENARIO, 'xattr', xattr_module.FIXTURE),
    Scenario(fallocate_module.SCENARIO, 'fallocate', fallocate_module.FIXTURE),
]

__all__ = [
    'Scenario',
    'COPYUP_SCENARIOS',
    'write_operation',
    'truncate_operation',
    'chmod_operation',
    'chown_operation',
    'rename_operation',
    'link_operation',
    'utimens_operation',
    'xattr_operation',
    'fallocate_operation',
]
