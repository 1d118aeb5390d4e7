from moccasin.boa_tools import VyperContract

from script.errors import VerificationError
from script.logger import get_logger

logger = get_logger(__name__)

ALREADY_VERIFIED = "already verified"


def verify_raffle(network, contract: VyperContract, constructor_args: tuple) -> bool:
    """Submit ``contract`` to the network's block explorer.

    Returns True when the explorer accepted (or already had) the source and
    False when the network has nothing to verify against. Any other explorer
    error is raised as ``VerificationError``.
    """
    if network.is_local_or_forked_network() or not network.has_explorer():
        logger.info("Skipping verification on %s", network.name)
        return False

    logger.info("Verifying %s with args %s", contract.address, constructor_args)
    try:
        result = network.moccasin_verify(contract)
        result.wait_for_verification()
    except Exception as e:
        if ALREADY_VERIFIED in str(e).lower():
            logger.info("Already verified!")
            return True
        logger.error("Verification of %s failed: %s", contract.address, e)
        raise VerificationError(str(e)) from e
    logger.info("Verified %s", contract.address)
    return True
