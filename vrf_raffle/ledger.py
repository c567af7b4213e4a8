"""
Round Ledger
Participants and pooled balance of the active round
"""


class Ledger:
    """
    Ordered entries of the current round

    The same address may appear several times; every entry is one weighted
    chance in the draw.
    """

    def __init__(self):
        self._players = []
        self.pool_balance = 0

    def record_entry(self, player, value):
        self._players.append(player)
        self.pool_balance += value

    def clear(self):
        self._players = []
        self.pool_balance = 0

    def get_player(self, index):
        if index < 0 or index >= len(self._players):
            raise IndexError(f"No player at index {index} ({len(self._players)} entries)")
        return self._players[index]

    @property
    def players(self):
        return tuple(self._players)

    @property
    def num_players(self):
        return len(self._players)

    def entries_for(self, player):
        return self._players.count(player)

    def win_probability(self, player):
        """
        Share of entries held by a player

        Returns:
            dict: Entry count, total entries, percentage and odds, or None when
            the player holds no entry
        """
        entries = self.entries_for(player)
        if entries == 0:
            return None

        total = len(self._players)
        return {
            "entries": entries,
            "total_entries": total,
            "probability_percent": entries / total * 100,
            "odds": f"{entries}/{total}",
        }
