"""
Local raffle simulation
Deploys on a development chain and plays rounds end to end

Usage:
    python -m vrf_raffle simulate --players 4 --rounds 3
"""

import argparse
import logging
import sys

from sqlalchemy import create_engine

from utils.logging_config import log_error, setup_logging

from .chain import LocalChain
from .config import DATABASE_URL, RAFFLE_NETWORK, to_wei
from .database import DrawHistory, setup_raffle_database
from .deploy import deploy_raffle
from .exceptions import RaffleError


def simulate(players, rounds, network, database_url=None, logger=None):
    """
    Play `rounds` complete rounds with `players` entries each

    Returns:
        list: RecentWinner record of every settled round
    """
    logger = logger or logging.getLogger(__name__)
    chain = LocalChain()
    deployer = chain.create_account(balance=to_wei("100"), label="deployer")
    raffle, coordinator = deploy_raffle(chain, deployer, network=network)

    history = None
    if database_url:
        engine = create_engine(database_url)
        if setup_raffle_database(engine):
            history = DrawHistory(engine)
            history.attach(raffle.events)

    accounts = [chain.create_account(balance=to_wei("10"), label=f"player{i}") for i in range(players)]
    fee = raffle.get_entrance_fee()
    results = []

    for _ in range(rounds):
        for account in accounts:
            raffle.enter_raffle(account, fee)

        chain.increase_time(raffle.get_interval() + 1)
        chain.mine()

        upkeep_needed, _ = raffle.check_upkeep()
        if not upkeep_needed:
            logger.warning("Upkeep not needed, stopping simulation")
            break

        request_id = raffle.perform_upkeep()
        fulfillment = coordinator.fulfill_random_words(request_id, raffle)
        if not fulfillment.success:
            logger.error(f"Round stuck after failed fulfillment: {fulfillment.error}")
            break

        draw = raffle.get_recent_draw()
        results.append(draw)
        print(f"Round {draw.round_number}: winner {draw.winner} "
              f"(entry #{draw.winner_index} of {draw.total_participants}), prize {draw.prize} wei")

    if history:
        print(f"Draws recorded: {len(history.get_draw_history(limit=rounds))}")

    return results


def main(argv=None):
    parser = argparse.ArgumentParser(prog='vrf_raffle')
    subparsers = parser.add_subparsers(dest='command', required=True)

    sim = subparsers.add_parser('simulate', help='Play raffle rounds on a local chain')
    sim.add_argument('--players', dest='players', type=int, default=4)
    sim.add_argument('--rounds', dest='rounds', type=int, default=1)
    sim.add_argument('--network', dest='network', default=RAFFLE_NETWORK)
    sim.add_argument('--database-url', dest='database_url', default=None,
                     help=f'Record draws (e.g. {DATABASE_URL})')
    sim.add_argument('--log-level', dest='log_level', default=None)
    args = parser.parse_args(argv)

    logger = setup_logging('vrf_raffle', args.log_level)

    if args.players < 1:
        parser.error('--players must be at least 1')

    try:
        results = simulate(args.players, args.rounds, args.network, args.database_url, logger)
    except RaffleError as e:
        log_error(logger, e, "Simulation failed")
        return 1

    return 0 if len(results) == args.rounds else 1


if __name__ == '__main__':
    sys.exit(main())
