"""Per-network deployment parameters.

``resolve_network_config`` is the only way the deploy scripts read this
table: it fills in defaults, checks that every field the target network
needs is present and hands back a frozen ``NetworkConfig``.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from eth_utils import is_address, to_checksum_address, to_wei

from script.errors import ConfigurationError

# Opaque oracle parameters handed to the coordinator mock.
BASE_FEE = to_wei(0.25, "ether")  # 0.25 LINK
GAS_PRICE_LINK = 10**9  # LINK per gas

FUND_AMOUNT = to_wei(1, "ether")  # 1 LINK
VERIFICATION_BLOCK_CONFIRMATIONS = 6

LOCAL_NETWORKS = ("pyevm", "anvil", "localhost")
LOCAL_CHAIN_ID = 31337

FRONTEND_CONTRACTS_FILE = Path("../frontend-nextjs-lottery/constants/contractAddresses.json")
FRONTEND_ABI_FILE = Path("../frontend-nextjs-lottery/constants/abi.json")

GAS_LANE_30_GWEI = "0x474e34a077df58807dbe9c96d3c009b23b3c6d0cce433e59bbf5b34f823bc56c"

DEFAULT_CONFIG: Dict[str, Any] = {
    "keepers_update_interval": 30,
    "callback_gas_limit": 500_000,
}

_LOCAL_ENTRY: Dict[str, Any] = {
    "chain_id": LOCAL_CHAIN_ID,
    "subscription_id": 3124,
    "gas_lane": GAS_LANE_30_GWEI,
    "keepers_update_interval": 30,
    "raffle_entrance_fee": to_wei(0.1, "ether"),
    "callback_gas_limit": 500_000,
}

NETWORK_CONFIG: Dict[str, Dict[str, Any]] = {
    "pyevm": dict(_LOCAL_ENTRY),
    "anvil": dict(_LOCAL_ENTRY),
    "localhost": dict(_LOCAL_ENTRY),
    "sepolia": {
        "chain_id": 11155111,
        "subscription_id": 3124,
        "gas_lane": GAS_LANE_30_GWEI,
        "keepers_update_interval": 30,
        "raffle_entrance_fee": to_wei(0.1, "ether"),
        "callback_gas_limit": 500_000,
        "vrf_coordinator_v2": "0x8103B0A8A00be2DDC778e6e7eaa21791Cd364625",
    },
    "mainnet": {
        "chain_id": 1,
        "keepers_update_interval": 30,
    },
}

# camelCase keys as they appear in moccasin.toml extra_data
_FIELD_ALIASES = {
    "chainId": "chain_id",
    "subscriptionId": "subscription_id",
    "gasLane": "gas_lane",
    "keepersUpdateInterval": "keepers_update_interval",
    "raffleEntranceFee": "raffle_entrance_fee",
    "callbackGasLimit": "callback_gas_limit",
    "vrfCoordinatorV2": "vrf_coordinator_v2",
}


@dataclass(frozen=True)
class NetworkConfig:
    name: str
    chain_id: int
    gas_lane: bytes
    keepers_update_interval: int
    raffle_entrance_fee: int
    callback_gas_limit: int
    subscription_id: Optional[int] = None
    vrf_coordinator_v2: Optional[str] = None

    @property
    def is_local(self) -> bool:
        return self.name in LOCAL_NETWORKS

    @property
    def block_confirmations(self) -> int:
        if self.is_local:
            return 1
        return int(os.getenv("VERIFICATION_BLOCK_CONFIRMATIONS", VERIFICATION_BLOCK_CONFIRMATIONS))

    def constructor_args(self, vrf_coordinator: str, subscription_id: int) -> tuple:
        """Raffle constructor arguments, in deployment order."""
        return (
            vrf_coordinator,
            subscription_id,
            self.gas_lane,
            self.keepers_update_interval,
            self.raffle_entrance_fee,
            self.callback_gas_limit,
        )


def _find_entry(network: Union[str, int]) -> tuple:
    if isinstance(network, str) and not network.isdigit():
        if network not in NETWORK_CONFIG:
            raise ConfigurationError(f"No configuration for network {network!r}")
        return network, NETWORK_CONFIG[network]

    chain_id = int(network)
    for name, entry in NETWORK_CONFIG.items():
        if entry.get("chain_id") == chain_id:
            return name, entry
    raise ConfigurationError(f"No configuration for chain id {chain_id}")


def _normalise(values: Mapping[str, Any]) -> Dict[str, Any]:
    return {_FIELD_ALIASES.get(k, k): v for k, v in values.items()}


def _to_bytes32(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    else:
        text = str(value)
        try:
            raw = bytes.fromhex(text[2:] if text.startswith("0x") else text)
        except ValueError as e:
            raise ConfigurationError(f"gas_lane is not hex: {value!r}") from e
    if len(raw) != 32:
        raise ConfigurationError(f"gas_lane must be 32 bytes, got {len(raw)}")
    return raw


def _to_int(name: str, value: Any) -> int:
    try:
        result = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e
    if result < 0:
        raise ConfigurationError(f"{name} must not be negative, got {result}")
    return result


def resolve_network_config(
    network: Union[str, int], overrides: Optional[Mapping[str, Any]] = None
) -> NetworkConfig:
    """Look up ``network`` by name or chain id and validate it.

    ``overrides`` (for example a moccasin network's ``extra_data``) are layered
    on top of the static entry. Raises ``ConfigurationError`` when a field the
    network needs is missing, before anything touches the chain.
    """
    name, entry = _find_entry(network)
    values = dict(DEFAULT_CONFIG)
    values.update(entry)
    if overrides:
        values.update(_normalise(overrides))

    is_local = name in LOCAL_NETWORKS
    required = ["chain_id", "gas_lane", "raffle_entrance_fee"]
    if not is_local:
        required += ["subscription_id", "vrf_coordinator_v2"]
    missing = [k for k in required if values.get(k) is None]
    if missing:
        raise ConfigurationError(f"Network {name!r} is missing {', '.join(missing)}")

    coordinator = values.get("vrf_coordinator_v2")
    if coordinator is not None:
        if not is_address(coordinator):
            raise ConfigurationError(f"vrf_coordinator_v2 is not an address: {coordinator!r}")
        coordinator = to_checksum_address(coordinator)

    subscription_id = values.get("subscription_id")

    return NetworkConfig(
        name=name,
        chain_id=_to_int("chain_id", values["chain_id"]),
        gas_lane=_to_bytes32(values["gas_lane"]),
        keepers_update_interval=_to_int("keepers_update_interval", values["keepers_update_interval"]),
        raffle_entrance_fee=_to_int("raffle_entrance_fee", values["raffle_entrance_fee"]),
        callback_gas_limit=_to_int("callback_gas_limit", values["callback_gas_limit"]),
        subscription_id=None if subscription_id is None else _to_int("subscription_id", subscription_id),
        vrf_coordinator_v2=coordinator,
    )


def update_frontend_enabled() -> bool:
    return os.getenv("UPDATE_FRONTEND", "").strip().lower() not in ("", "0", "false", "no")


def frontend_contracts_file() -> Path:
    return Path(os.getenv("FRONTEND_CONTRACTS_FILE", FRONTEND_CONTRACTS_FILE))


def frontend_abi_file() -> Path:
    return Path(os.getenv("FRONTEND_ABI_FILE", FRONTEND_ABI_FILE))
