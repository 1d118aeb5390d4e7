import boa
import pytest

from script.deploy_mocks import deploy_mocks
from script.deploy_raffle import deploy_raffle
from script.helper_config import resolve_network_config

STARTING_BALANCE = 10**20


@pytest.fixture(autouse=True)
def isolation():
    """Roll the in-memory chain back after every test"""
    with boa.env.anchor():
        yield


@pytest.fixture
def network_config():
    return resolve_network_config("pyevm")


@pytest.fixture
def deployer():
    boa.env.set_balance(boa.env.eoa, STARTING_BALANCE)
    return boa.env.eoa


@pytest.fixture
def vrf_coordinator(network_config, deployer):
    return deploy_mocks(network_config)


@pytest.fixture
def deployment(network_config, vrf_coordinator):
    return deploy_raffle(network_config, vrf_coordinator)


@pytest.fixture
def raffle(deployment):
    return deployment.raffle


@pytest.fixture
def entrance_fee(raffle):
    return raffle.getEntranceFee()


@pytest.fixture
def interval(raffle):
    return raffle.getInterval()


@pytest.fixture
def players():
    """Funded accounts other than the deployer"""
    accounts = [boa.env.generate_address() for _ in range(5)]
    for account in accounts:
        boa.env.set_balance(account, STARTING_BALANCE)
    return accounts


@pytest.fixture
def frontend_files(tmp_path, monkeypatch):
    contracts_file = tmp_path / "constants" / "contractAddresses.json"
    abi_file = tmp_path / "constants" / "abi.json"
    monkeypatch.setenv("FRONTEND_CONTRACTS_FILE", str(contracts_file))
    monkeypatch.setenv("FRONTEND_ABI_FILE", str(abi_file))
    return contracts_file, abi_file
