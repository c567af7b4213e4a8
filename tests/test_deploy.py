"""
Deployment and simulation tests
Local wiring of mocks and raffle, and the command-line simulation
"""

import logging
from dataclasses import replace

import pytest

from utils.logging_config import setup_logging
from vrf_raffle.__main__ import main, simulate
from vrf_raffle.config import get_network_config
from vrf_raffle.deploy import deploy_raffle
from vrf_raffle.exceptions import InvalidConfig, UnsupportedNetwork
from vrf_raffle.raffle import Raffle
from vrf_raffle.rounds import RaffleState


def test_deploy_uses_network_parameters(raffle, coordinator):
    params = get_network_config("hardhat")

    assert raffle.get_entrance_fee() == params["entranceFee"]
    assert raffle.config.gas_lane == params["gasLane"]
    assert raffle.config.callback_gas_limit == params["callbackGasLimit"]
    assert raffle.config.vrf_coordinator == coordinator.address


def test_deploy_deploys_mocks_when_missing(chain, deployer):
    raffle, coordinator = deploy_raffle(chain, deployer, network="localhost")

    assert raffle.config.vrf_coordinator == coordinator.address
    assert raffle.address in coordinator.get_subscription(raffle.config.subscription_id).consumers


def test_deploy_refuses_live_networks(chain, deployer):
    with pytest.raises(UnsupportedNetwork):
        deploy_raffle(chain, deployer, network="goerli")


def test_raffle_rejects_mismatched_coordinator(chain, raffle, coordinator):
    config = replace(raffle.config, vrf_coordinator="0x" + "0" * 40)
    with pytest.raises(InvalidConfig):
        Raffle(chain, config, coordinator)


def test_simulate_plays_rounds(tmp_path, capsys):
    results = simulate(players=3, rounds=2, network="hardhat",
                       database_url=f"sqlite:///{tmp_path / 'sim.db'}")

    assert [draw.round_number for draw in results] == [1, 2]
    assert all(draw.total_participants == 3 for draw in results)
    output = capsys.readouterr().out
    assert "Round 1: winner" in output
    assert "Draws recorded: 2" in output


def test_main_exit_codes(capsys):
    assert main(["simulate", "--players", "2", "--rounds", "1", "--log-level", "WARNING"]) == 0
    assert main(["simulate", "--network", "goerli", "--log-level", "CRITICAL"]) == 1

    with pytest.raises(SystemExit):
        main(["simulate", "--players", "0"])


def test_state_is_open_after_simulation_round(chain, deployer):
    raffle, coordinator = deploy_raffle(chain, deployer)
    raffle.enter_raffle(deployer, raffle.get_entrance_fee())
    chain.increase_time(raffle.get_interval())

    request_id = raffle.perform_upkeep()
    coordinator.fulfill_random_words(request_id, raffle)

    assert raffle.get_raffle_state() == RaffleState.OPEN
    assert raffle.get_recent_winner() == deployer


def test_setup_logging_reads_level_from_environment(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    logger = setup_logging("vrf_raffle.test_cli")

    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 1
    assert not logger.propagate

    assert setup_logging("vrf_raffle.test_cli", "debug").level == logging.DEBUG
    assert len(logger.handlers) == 1
