"""Local VRF subscription bookkeeping against the coordinator mock.

On live networks the subscription is created and funded out of band and its
id comes from the network configuration instead.
"""
from moccasin.boa_tools import VyperContract

from script.helper_config import FUND_AMOUNT
from script.logger import get_logger

logger = get_logger(__name__)


def create_subscription(coordinator: VyperContract) -> int:
    sub_id = coordinator.createSubscription()
    logger.info("Created VRF subscription %s", sub_id)
    return sub_id


def fund_subscription(coordinator: VyperContract, sub_id: int, amount: int = FUND_AMOUNT) -> None:
    # the mock only books the amount, no LINK changes hands
    coordinator.fundSubscription(sub_id, amount)
    logger.info("Funded subscription %s with %s", sub_id, amount)


def create_and_fund_subscription(coordinator: VyperContract, amount: int = FUND_AMOUNT) -> int:
    sub_id = create_subscription(coordinator)
    fund_subscription(coordinator, sub_id, amount)
    return sub_id


def add_consumer(coordinator: VyperContract, sub_id: int, consumer: str) -> None:
    """Authorise ``consumer`` to request randomness billed to ``sub_id``."""
    coordinator.addConsumer(sub_id, consumer)
    logger.info("Added consumer %s to subscription %s", consumer, sub_id)
