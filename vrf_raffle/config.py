"""
Raffle Configuration
Network parameters and environment overrides for the raffle contract
"""

import os
from dataclasses import dataclass
from decimal import Decimal

from dotenv import load_dotenv

from .exceptions import InvalidConfig

load_dotenv()

WEI_PER_ETHER = 10 ** 18


def to_wei(amount_ether):
    """Convert an ether amount (str/int/Decimal) to integer wei"""
    return int(Decimal(str(amount_ether)) * WEI_PER_ETHER)


# Randomness request parameters (fixed by the contract)
REQUEST_CONFIRMATIONS = 3
NUM_WORDS = 1

# Local deployment parameters
DEVELOPMENT_CHAINS = ("hardhat", "localhost")
VRF_SUB_FUND_AMOUNT = to_wei("5")

# Per-network parameters, keyed by chain id
NETWORK_CONFIG = {
    31337: {
        "name": "hardhat",
        "entranceFee": to_wei("0.01"),
        "gasLane": "0xd89b2bf150e3b9e13446986e571fb9cab24b13cea0a43ea20a6049a85cc807cc",
        "callbackGasLimit": 500000,
        "interval": 30,
    },
    4: {
        "name": "rinkeby",
        "vrfCoordinatorV2": "0x6168499c0cFfCaCD319c818142124B7A15E857ab",
        "entranceFee": to_wei("0.01"),
        "gasLane": "0xd89b2bf150e3b9e13446986e571fb9cab24b13cea0a43ea20a6049a85cc807cc",
        "subscriptionId": 0,
        "callbackGasLimit": 500000,
        "interval": 30,
    },
    5: {
        "name": "goerli",
        "vrfCoordinatorV2": "0x2Ca8E0C643bDe4C2E08ab1fA0da3401AdAD7734D",
        "entranceFee": to_wei("0.01"),
        "gasLane": "0x79d3d8832d904592c0bf9818b621522c988bb8b0c05cdc3b15aea1b6e8db0c15",
        "subscriptionId": 0,
        "callbackGasLimit": 500000,
        "interval": 30,
    },
}

NETWORK_CHAIN_IDS = {"hardhat": 31337, "localhost": 31337, "rinkeby": 4, "goerli": 5}

# Environment overrides
RAFFLE_NETWORK = os.getenv("RAFFLE_NETWORK", "hardhat").lower()
RAFFLE_ENTRANCE_FEE_WEI = os.getenv("RAFFLE_ENTRANCE_FEE_WEI")
RAFFLE_INTERVAL_SECONDS = os.getenv("RAFFLE_INTERVAL_SECONDS")
RAFFLE_CALLBACK_GAS_LIMIT = os.getenv("RAFFLE_CALLBACK_GAS_LIMIT")
RAFFLE_GAS_LANE = os.getenv("RAFFLE_GAS_LANE")
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///raffle.db")


@dataclass(frozen=True)
class RaffleConfig:
    """Immutable construction parameters of a raffle instance"""

    entrance_fee: int
    vrf_coordinator: str
    gas_lane: str
    subscription_id: int
    callback_gas_limit: int
    interval: int

    def __post_init__(self):
        if self.entrance_fee < 0:
            raise InvalidConfig(f"entrance_fee must be >= 0, got {self.entrance_fee}")
        if self.interval <= 0:
            raise InvalidConfig(f"interval must be > 0 seconds, got {self.interval}")
        if self.callback_gas_limit <= 0:
            raise InvalidConfig(f"callback_gas_limit must be > 0, got {self.callback_gas_limit}")
        if not self.vrf_coordinator:
            raise InvalidConfig("vrf_coordinator address is required")


def get_network_config(network):
    """
    Resolve network parameters with environment overrides applied

    Args:
        network: Network name (hardhat, localhost, rinkeby, goerli)

    Returns:
        dict: Copy of the network entry plus 'chainId'
    """
    chain_id = NETWORK_CHAIN_IDS.get(network)
    if chain_id is None:
        raise InvalidConfig(f"Unknown network '{network}'")

    params = dict(NETWORK_CONFIG[chain_id])
    params["chainId"] = chain_id

    if RAFFLE_ENTRANCE_FEE_WEI:
        params["entranceFee"] = int(RAFFLE_ENTRANCE_FEE_WEI)
    if RAFFLE_INTERVAL_SECONDS:
        params["interval"] = int(RAFFLE_INTERVAL_SECONDS)
    if RAFFLE_CALLBACK_GAS_LIMIT:
        params["callbackGasLimit"] = int(RAFFLE_CALLBACK_GAS_LIMIT)
    if RAFFLE_GAS_LANE:
        params["gasLane"] = RAFFLE_GAS_LANE

    return params
