import time
from dataclasses import dataclass
from typing import Callable, Optional

from moccasin.boa_tools import VyperContract

from script.contracts import raffle_deployer
from script.errors import ConfigurationError, EventTimeoutError
from script.helper_config import FUND_AMOUNT, NetworkConfig
from script.logger import get_logger
from script.subscription import add_consumer, create_and_fund_subscription

logger = get_logger(__name__)


@dataclass
class RaffleDeployment:
    raffle: VyperContract
    vrf_coordinator: str
    subscription_id: int
    constructor_args: tuple


def _resolve_coordinator(network_config: NetworkConfig, coordinator: Optional[VyperContract], fund_amount: int):
    if network_config.is_local:
        if coordinator is None:
            raise ConfigurationError(
                f"Network {network_config.name!r} is local but no coordinator mock was deployed"
            )
        return coordinator.address, create_and_fund_subscription(coordinator, fund_amount)
    return network_config.vrf_coordinator_v2, network_config.subscription_id


def deploy_raffle(
    network_config: NetworkConfig,
    coordinator: Optional[VyperContract] = None,
    fund_amount: int = FUND_AMOUNT,
) -> RaffleDeployment:
    vrf_coordinator, subscription_id = _resolve_coordinator(network_config, coordinator, fund_amount)
    args = network_config.constructor_args(vrf_coordinator, subscription_id)

    logger.info("----------------------------------------------------")
    raffle = raffle_deployer().deploy(*args)
    logger.info("Raffle deployed at: %s", raffle.address)

    # without this the raffle's randomness requests are rejected
    if network_config.is_local:
        add_consumer(coordinator, subscription_id, raffle.address)

    return RaffleDeployment(
        raffle=raffle,
        vrf_coordinator=vrf_coordinator,
        subscription_id=subscription_id,
        constructor_args=args,
    )


def wait_for_confirmations(
    get_block_number: Callable[[], int],
    start_block: int,
    confirmations: int,
    poll_interval: float = 2.0,
    timeout: Optional[float] = None,
) -> int:
    """Block until ``start_block`` has ``confirmations`` blocks on top of it.

    The block holding the transaction counts as the first confirmation.
    Returns the block number that satisfied the wait.
    """
    target = start_block + max(confirmations, 1) - 1
    deadline = None if timeout is None else time.monotonic() + timeout
    while True:
        current = get_block_number()
        if current >= target:
            return current
        if deadline is not None and time.monotonic() >= deadline:
            raise EventTimeoutError(
                f"Block {start_block} reached {current - start_block + 1} of {confirmations} confirmations"
            )
        logger.debug("Waiting for confirmations: block %s of %s", current, target)
        time.sleep(poll_interval)
