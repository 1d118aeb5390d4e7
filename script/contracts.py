from functools import lru_cache
from pathlib import Path

import boa
from boa.contracts.vyper.vyper_contract import VyperDeployer

from script.errors import ConfigurationError

# the contracts live beside script/ in the checkout, so installs must be editable
CONTRACTS_DIR = Path(__file__).resolve().parent.parent / "src"

RAFFLE = CONTRACTS_DIR / "raffle.vy"
VRF_COORDINATOR_MOCK = CONTRACTS_DIR / "mocks" / "vrf_coordinator_v2_mock.vy"
REJECTING_PLAYER = CONTRACTS_DIR / "mocks" / "rejecting_player.vy"


@lru_cache(maxsize=None)
def _deployer(path: str) -> VyperDeployer:
    if not Path(path).is_file():
        raise ConfigurationError(f"Contract source not found: {path} (install with `pip install -e .`)")
    return boa.load_partial(path)


def raffle_deployer() -> VyperDeployer:
    return _deployer(str(RAFFLE))


def vrf_coordinator_mock_deployer() -> VyperDeployer:
    return _deployer(str(VRF_COORDINATOR_MOCK))


def rejecting_player_deployer() -> VyperDeployer:
    return _deployer(str(REJECTING_PLAYER))
