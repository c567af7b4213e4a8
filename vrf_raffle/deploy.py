"""
Local Deployment
Wires a VRF coordinator mock, a funded subscription and a raffle on a development chain
"""

import logging

from .config import DEVELOPMENT_CHAINS, VRF_SUB_FUND_AMOUNT, RaffleConfig, get_network_config
from .coordinator import VRFCoordinatorMock
from .exceptions import UnsupportedNetwork
from .raffle import Raffle

logger = logging.getLogger(__name__)


def deploy_mocks(chain, deployer, server_seed=None):
    """
    Deploy the VRF coordinator mock

    Args:
        chain: LocalChain to deploy on
        deployer: Deployer address (logged only)
        server_seed: Optional fixed seed for derived random words

    Returns:
        VRFCoordinatorMock
    """
    logger.info("Local network detected! Deploying mocks...")
    coordinator = VRFCoordinatorMock(chain, server_seed=server_seed)
    logger.info(f"Mocks deployed by {deployer}")
    logger.info("------------------------------------------------")
    return coordinator


def deploy_raffle(chain, deployer, network="hardhat", coordinator=None, **overrides):
    """
    Deploy a raffle on a development chain

    Creates and funds a subscription on the coordinator mock and registers the
    raffle as its consumer.

    Args:
        chain: LocalChain to deploy on
        deployer: Address owning the subscription
        network: Network name whose parameters are used
        coordinator: Existing coordinator mock (None = deploy one)
        **overrides: RaffleConfig fields overriding the network parameters

    Returns:
        tuple: (Raffle, VRFCoordinatorMock)
    """
    if network not in DEVELOPMENT_CHAINS:
        raise UnsupportedNetwork(network)

    params = get_network_config(network)

    if coordinator is None:
        coordinator = deploy_mocks(chain, deployer)

    subscription_id = coordinator.create_subscription(deployer)
    coordinator.fund_subscription(subscription_id, VRF_SUB_FUND_AMOUNT)

    settings = {
        "entrance_fee": params["entranceFee"],
        "vrf_coordinator": coordinator.address,
        "gas_lane": params["gasLane"],
        "subscription_id": subscription_id,
        "callback_gas_limit": params["callbackGasLimit"],
        "interval": params["interval"],
    }
    settings.update(overrides)
    config = RaffleConfig(**settings)

    raffle = Raffle(chain, config, coordinator)
    coordinator.add_consumer(subscription_id, raffle.address)

    logger.info(f"✅ Raffle deployed on {network} (subscription {subscription_id})")
    logger.info("------------------------------")
    return raffle, coordinator
