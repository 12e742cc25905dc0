import os
from typing import List

from .dirent_check import FIXTURE as DIRENT_FIXTURE
from .trigger_operations import COPYUP_SCENARIOS

# Longer than every truncate length the scenarios use
FIXTURE_CONTENT = b"copy-up fixture: original base layer content\n"
DIRENT_FIXTURE_CONTENT = b"test"

COPYUP_FIXTURES: List[str] = [scenario.fixture for scenario in COPYUP_SCENARIOS if scenario.fixture]


def seed_base_layer(directory: str) -> List[str]:
    """
    Create every fixture in a directory that will become the base layer.

    Meant for whatever prepares the lower layer before the filesystem under
    test is mounted on top of it.

    Returns:
        list[str]: Paths of the created files.
    """
    os.makedirs(directory, exist_ok=True)
    created = []
    for name in COPYUP_FIXTURES:
        path = os.path.join(directory, name)
        with open(path, 'wb') as f:
            f.write(FIXTURE_CONTENT)
        created.append(path)
    path = os.path.join(directory, DIRENT_FIXTURE)
    with open(path, 'wb') as f:
        f.write(DIRENT_FIXTURE_CONTENT)
    created.append(path)
    return created
