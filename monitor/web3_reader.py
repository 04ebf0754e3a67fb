"""
ERC-20 total supply reader backed by web3.

Implements the TokenSupplyReader capability used by monitor.sampler.
Every failure (connection, revert, non-contract target, bad return data)
is raised as ReadFailureError.
"""

from __future__ import annotations

import logging
from typing import Optional

from web3 import Web3

from core.exceptions import MissingConfigError, ReadFailureError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15

ERC20_TOTAL_SUPPLY_ABI = [
    {
        "constant": True,
        "inputs": [],
        "name": "totalSupply",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    }
]


class Web3SupplyReader:
    """Read ``totalSupply()`` of an ERC-20 token over JSON-RPC."""

    def __init__(
        self,
        rpc_url: Optional[str] = None,
        web3: Optional[Web3] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        if web3 is None:
            if not rpc_url:
                raise MissingConfigError(
                    "rpc url not configured. Set SUPPLYWATCH_RPC_URL or `rpc.url` in base.yaml."
                )
            web3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout_seconds}))
        self.web3 = web3
        self.rpc_url = rpc_url

    def total_supply(self, token: str) -> int:
        try:
            contract = self.web3.eth.contract(
                address=Web3.to_checksum_address(token),
                abi=ERC20_TOTAL_SUPPLY_ABI,
            )
            supply = contract.functions.totalSupply().call()
        except Exception as e:
            raise ReadFailureError(
                "totalSupply() call failed",
                context={"token": token, "rpc_url": self.rpc_url},
                cause=e,
            ) from e

        logger.debug(f"totalSupply({token}) = {supply}")
        return supply
