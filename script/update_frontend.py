import json
from pathlib import Path
from typing import Dict, List, Optional, Union

from moccasin.boa_tools import VyperContract

from script.helper_config import (
    frontend_abi_file,
    frontend_contracts_file,
    update_frontend_enabled,
)
from script.logger import get_logger

logger = get_logger(__name__)


def _read_addresses(path: Path) -> Dict[str, List[str]]:
    if not path.exists():
        return {}
    text = path.read_text(encoding="utf-8").strip()
    return json.loads(text) if text else {}


def update_contract_addresses(address: str, chain_id: Union[int, str], path: Optional[Path] = None) -> Dict[str, List[str]]:
    """Record ``address`` under ``chain_id``; an address already listed is left alone."""
    path = Path(path) if path is not None else frontend_contracts_file()
    contract_addresses = _read_addresses(path)
    chain_key = str(chain_id)
    address = str(address)

    addresses = contract_addresses.setdefault(chain_key, [])
    if address not in addresses:
        addresses.append(address)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(contract_addresses), encoding="utf-8")
    return contract_addresses


def update_abi(abi: list, path: Optional[Path] = None) -> None:
    path = Path(path) if path is not None else frontend_abi_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(abi), encoding="utf-8")


def update_frontend(
    address: str,
    abi: list,
    chain_id: Union[int, str],
    enabled: Optional[bool] = None,
    contracts_file: Optional[Path] = None,
    abi_file: Optional[Path] = None,
) -> bool:
    if enabled is None:
        enabled = update_frontend_enabled()
    if not enabled:
        return False

    logger.info("Writing to front end...")
    update_contract_addresses(address, chain_id, contracts_file)
    update_abi(abi, abi_file)
    logger.info("Front end written!")
    return True


def publish_raffle(raffle: VyperContract, chain_id: Union[int, str], enabled: Optional[bool] = None, **kwargs) -> bool:
    if enabled is None:
        enabled = update_frontend_enabled()
    if not enabled:
        return False
    return update_frontend(raffle.address, raffle.abi, chain_id, enabled=True, **kwargs)
