"""Full deployment: mocks, raffle, verification, front end.

Steps run strictly in order and each one is handed what the previous steps
produced, so a later step never has to look anything up by name.
"""
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

from moccasin.boa_tools import VyperContract
from moccasin.config import get_active_network
from web3 import Web3

from script.deploy_mocks import deploy_mocks
from script.deploy_raffle import RaffleDeployment, deploy_raffle, wait_for_confirmations
from script.helper_config import FUND_AMOUNT, NetworkConfig, resolve_network_config
from script.logger import get_logger
from script.update_frontend import publish_raffle
from script.verify import verify_raffle

logger = get_logger(__name__)


@dataclass
class DeploymentResult:
    network_config: NetworkConfig
    coordinator: Optional[VyperContract]
    deployment: RaffleDeployment
    verified: bool = False
    frontend_updated: bool = False

    @property
    def raffle(self) -> VyperContract:
        return self.deployment.raffle


def deploy_all(
    network: Union[str, int],
    overrides: Optional[Mapping[str, Any]] = None,
    active_network=None,
    get_block_number: Optional[Callable[[], int]] = None,
    update_frontend: Optional[bool] = None,
    fund_amount: int = FUND_AMOUNT,
) -> DeploymentResult:
    # configuration errors surface here, before any transaction is sent
    network_config = resolve_network_config(network, overrides)
    logger.info("Deploying to %s (chain id %s)", network_config.name, network_config.chain_id)

    coordinator = deploy_mocks(network_config)
    deployment = deploy_raffle(network_config, coordinator, fund_amount)

    verified = False
    if not network_config.is_local:
        if get_block_number is not None:
            start_block = get_block_number()
            wait_for_confirmations(get_block_number, start_block, network_config.block_confirmations)
        if active_network is not None:
            verified = verify_raffle(active_network, deployment.raffle, deployment.constructor_args)

    frontend_updated = publish_raffle(deployment.raffle, network_config.chain_id, enabled=update_frontend)

    return DeploymentResult(
        network_config=network_config,
        coordinator=coordinator,
        deployment=deployment,
        verified=verified,
        frontend_updated=frontend_updated,
    )


def _block_number_reader(active_network) -> Optional[Callable[[], int]]:
    url = getattr(active_network, "url", None)
    if not url:
        return None
    w3 = Web3(Web3.HTTPProvider(url, request_kwargs={"timeout": 60}))
    return lambda: w3.eth.block_number


def moccasin_main() -> VyperContract:
    active_network = get_active_network()
    result = deploy_all(
        active_network.name,
        overrides=active_network.extra_data,
        active_network=active_network,
        get_block_number=_block_number_reader(active_network),
    )
    return result.raffle
