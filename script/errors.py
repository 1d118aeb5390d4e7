class RaffleDeployError(Exception):
    """Base class for failures raised by the deploy tooling."""


class ConfigurationError(RaffleDeployError):
    """A network is unknown or is missing a field the deployment needs."""


class VerificationError(RaffleDeployError):
    """The block explorer rejected a verification request."""


class EventTimeoutError(RaffleDeployError, TimeoutError):
    """An awaited event or block confirmation never arrived."""
