from typing import Optional

from moccasin.boa_tools import VyperContract
from moccasin.config import get_active_network

from script.contracts import vrf_coordinator_mock_deployer
from script.helper_config import BASE_FEE, GAS_PRICE_LINK, NetworkConfig, resolve_network_config
from script.logger import get_logger

logger = get_logger(__name__)


def deploy_mocks(network_config: NetworkConfig) -> Optional[VyperContract]:
    """Deploy the VRF coordinator mock on local networks; public networks get ``None``."""
    if not network_config.is_local:
        logger.info("Network %s uses a live coordinator, no mocks needed", network_config.name)
        return None

    logger.info("Local network detected! Deploying mocks")
    mock = vrf_coordinator_mock_deployer().deploy(BASE_FEE, GAS_PRICE_LINK)
    logger.info("Mock VRF Coordinator at: %s", mock.address)
    return mock


def moccasin_main() -> Optional[VyperContract]:
    active_network = get_active_network()
    return deploy_mocks(resolve_network_config(active_network.name, active_network.extra_data))
