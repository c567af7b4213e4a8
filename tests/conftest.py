"""
Shared fixtures: a local chain with a deployed raffle and funded players
"""

import pytest

from vrf_raffle.chain import LocalChain
from vrf_raffle.config import to_wei
from vrf_raffle.deploy import deploy_mocks, deploy_raffle

GENESIS = 1_700_000_000
SERVER_SEED = "a" * 64


@pytest.fixture
def chain():
    return LocalChain(genesis_timestamp=GENESIS)


@pytest.fixture
def deployer(chain):
    return chain.create_account(balance=to_wei("100"), label="deployer")


@pytest.fixture
def coordinator(chain, deployer):
    return deploy_mocks(chain, deployer, server_seed=SERVER_SEED)


@pytest.fixture
def deployment(chain, deployer, coordinator):
    return deploy_raffle(chain, deployer, network="hardhat", coordinator=coordinator)


@pytest.fixture
def raffle(deployment):
    return deployment[0]


@pytest.fixture
def players(chain):
    return [chain.create_account(balance=to_wei("10"), label=f"player{i}") for i in range(4)]


@pytest.fixture
def ready_raffle(chain, raffle, deployer):
    """Raffle with one entry and the interval already elapsed"""
    raffle.enter_raffle(deployer, raffle.get_entrance_fee())
    chain.increase_time(raffle.get_interval() + 1)
    chain.mine()
    return raffle
