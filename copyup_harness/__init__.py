from .main import CopyupSuite, SCENARIOS, cli, start_harness
from .fixtures import seed_base_layer
from .identity_oracle import Identity, IdentityOracle, identity_of, identity_of_link, identity_of_open
from .outcome import InvariantViolation, ScenarioOutcome, Status, TriggerResult, TriggerStatus

__all__ = [
    'CopyupSuite',
    'SCENARIOS',
    'cli',
    'start_harness',
    'seed_base_layer',
    'Identity',
    'IdentityOracle',
    'identity_of',
    'identity_of_link',
    'identity_of_open',
    'InvariantViolation',
    'ScenarioOutcome',
    'Status',
    'TriggerResult',
    'TriggerStatus',
]
