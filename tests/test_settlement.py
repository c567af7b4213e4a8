"""
Settlement tests
Winner selection, payout and the all-or-nothing reset
"""

import pytest

from vrf_raffle import events
from vrf_raffle.deploy import deploy_raffle
from vrf_raffle.exceptions import TransferFailed
from vrf_raffle.rounds import RaffleState
from vrf_raffle.settlement import pick_winner_index


@pytest.fixture
def small_fee_raffle(chain, deployer, coordinator, players):
    """Raffle with fee 100 wei, four entries A-D and the interval elapsed"""
    raffle, _ = deploy_raffle(chain, deployer, coordinator=coordinator, entrance_fee=100, interval=30)
    for player in players:
        raffle.enter_raffle(player, 100)
    chain.increase_time(31)
    return raffle


def test_pick_winner_index():
    assert pick_winner_index(17, 4) == 1
    assert pick_winner_index(0, 4) == 0
    assert pick_winner_index(2 ** 256 - 1, 1) == 0

    with pytest.raises(ValueError):
        pick_winner_index(5, 0)


def test_random_word_17_picks_second_entry(chain, small_fee_raffle, coordinator, players):
    raffle = small_fee_raffle
    winner_start = chain.balance_of(players[1])
    request_id = raffle.perform_upkeep()

    draw = raffle.raw_fulfill_random_words(request_id, [17], sender=coordinator.address)

    assert draw.winner_index == 1
    assert raffle.get_recent_winner() == players[1]
    assert raffle.get_pool_balance() == 0
    assert raffle.get_players() == ()
    assert raffle.get_raffle_state() == RaffleState.OPEN
    assert chain.balance_of(players[1]) == winner_start + 400
    assert draw.prize == 400
    assert draw.request_id == request_id
    assert draw.timestamp == chain.timestamp
    assert raffle.get_latest_timestamp() == draw.timestamp


def test_only_first_random_word_is_used(small_fee_raffle, coordinator, players):
    raffle = small_fee_raffle
    request_id = raffle.perform_upkeep()

    raffle.raw_fulfill_random_words(request_id, [2, 1], sender=coordinator.address)

    assert raffle.get_recent_winner() == players[2]


def test_winner_picked_emitted_after_commit(small_fee_raffle, coordinator):
    raffle = small_fee_raffle
    observed = []

    def on_winner(event):
        observed.append((event["winner"], raffle.get_raffle_state(), raffle.get_number_of_players()))

    raffle.events.on(events.WINNER_PICKED, on_winner)
    request_id = raffle.perform_upkeep()
    raffle.raw_fulfill_random_words(request_id, [17], sender=coordinator.address)

    assert observed == [(raffle.get_recent_winner(), RaffleState.OPEN, 0)]


def test_rejected_payout_leaves_round_calculating(chain, small_fee_raffle, coordinator, players):
    raffle = small_fee_raffle
    chain.set_accepts_value(players[1], False)
    request_id = raffle.perform_upkeep()
    start_time = raffle.get_latest_timestamp()

    with pytest.raises(TransferFailed) as exc_info:
        raffle.raw_fulfill_random_words(request_id, [17], sender=coordinator.address)

    assert exc_info.value.winner == players[1]
    assert exc_info.value.amount == 400
    assert raffle.get_raffle_state() == RaffleState.CALCULATING
    assert raffle.get_number_of_players() == 4
    assert raffle.get_pool_balance() == 400
    assert chain.balance_of(raffle.address) == 400
    assert raffle.get_recent_winner() is None
    assert raffle.get_latest_timestamp() == start_time
    assert raffle.get_pending_request_id() == request_id
    assert raffle.events.last(events.WINNER_PICKED) is None


def test_rejected_payout_through_coordinator_reports_failure(chain, small_fee_raffle, coordinator, players):
    raffle = small_fee_raffle
    chain.set_accepts_value(players[1], False)
    request_id = raffle.perform_upkeep()

    fulfillment = coordinator.fulfill_random_words(request_id, raffle, words=[17])

    assert not fulfillment.success
    assert "TransferFailed" in fulfillment.error
    assert raffle.get_raffle_state() == RaffleState.CALCULATING
    assert coordinator.events.last(events.RANDOM_WORDS_FULFILLED)["success"] is False


def test_consecutive_rounds_keep_invariants(chain, small_fee_raffle, coordinator, players):
    raffle = small_fee_raffle
    for word in (17, 6, 3):
        request_id = raffle.perform_upkeep()
        coordinator.fulfill_random_words(request_id, raffle, words=[word])
        assert raffle.get_recent_winner() == players[word % 4]

        for player in players:
            raffle.enter_raffle(player, 100)
        assert raffle.get_pool_balance() == 100 * raffle.get_number_of_players()
        chain.increase_time(31)

    assert raffle.get_round_number() == 4
