"""
Database Schema and Draw History for the Raffle
Persists every entry and every settled draw as an audit trail
"""

from sqlalchemy import inspect, text
import logging

from . import events

logger = logging.getLogger(__name__)

# SQL schema for the raffle audit trail
RAFFLE_SCHEMA_SQL = """
-- ============================================
-- RAFFLE AUDIT TRAIL
-- ============================================

-- One row per entry (duplicates allowed, each is a chance)
CREATE TABLE IF NOT EXISTS raffle_entries (
    id INTEGER PRIMARY KEY,
    raffle_address TEXT NOT NULL,
    round_number INTEGER NOT NULL,
    player TEXT NOT NULL,
    amount_wei TEXT NOT NULL,        -- wei does not fit in 64 bits
    entered_at INTEGER NOT NULL,     -- block timestamp
    block_number INTEGER NOT NULL
);

-- One row per settled round
CREATE TABLE IF NOT EXISTS raffle_draws (
    id INTEGER PRIMARY KEY,
    raffle_address TEXT NOT NULL,
    round_number INTEGER NOT NULL,
    request_id INTEGER NOT NULL UNIQUE,
    winner TEXT NOT NULL,
    winner_index INTEGER NOT NULL,
    random_word TEXT NOT NULL,       -- 256-bit value
    prize_wei TEXT NOT NULL,
    total_participants INTEGER NOT NULL,
    drawn_at INTEGER NOT NULL,       -- block timestamp
    block_number INTEGER NOT NULL
);

-- ============================================
-- INDICES
-- ============================================

CREATE INDEX IF NOT EXISTS idx_raffle_entries_round ON raffle_entries(raffle_address, round_number);
CREATE INDEX IF NOT EXISTS idx_raffle_entries_player ON raffle_entries(player);
CREATE INDEX IF NOT EXISTS idx_raffle_draws_winner ON raffle_draws(winner);
"""

REQUIRED_TABLES = ['raffle_entries', 'raffle_draws']


def setup_raffle_database(engine):
    """
    Create all raffle audit tables and indices

    Args:
        engine: SQLAlchemy engine instance

    Returns:
        bool: True if successful, False otherwise
    """
    try:
        logger.info("Setting up raffle database schema...")

        with engine.begin() as conn:
            # SQLite executes one statement at a time
            statements = []
            current_statement = []

            for line in RAFFLE_SCHEMA_SQL.split('\n'):
                stripped = line.strip()
                if not stripped or stripped.startswith('--'):
                    continue

                current_statement.append(line)

                if stripped.endswith(';'):
                    statements.append('\n'.join(current_statement))
                    current_statement = []

            for statement in statements:
                conn.execute(text(statement))

        logger.info("✅ Raffle database schema created successfully")
        return True

    except Exception as e:
        logger.error(f"❌ Failed to setup raffle database: {e}")
        return False


def verify_raffle_schema(engine):
    """
    Verify that all required tables exist

    Returns:
        dict: Status of each table (True/False)
    """
    inspector = inspect(engine)
    return {table: inspector.has_table(table) for table in REQUIRED_TABLES}


class DrawHistory:
    """Records raffle notifications into the audit tables"""

    def __init__(self, engine):
        self.engine = engine

    def attach(self, event_log):
        """Subscribe to a raffle's entry and winner notifications"""
        event_log.on(events.ENTERED_ROUND, self.record_entry)
        event_log.on(events.WINNER_PICKED, self.record_draw)

    def record_entry(self, event):
        """
        Store one EnteredRound event

        Returns:
            bool: True if stored
        """
        try:
            with self.engine.begin() as conn:
                conn.execute(text("""
                    INSERT INTO raffle_entries
                        (raffle_address, round_number, player, amount_wei, entered_at, block_number)
                    VALUES
                        (:raffle_address, :round_number, :player, :amount_wei, :entered_at, :block_number)
                """), {
                    'raffle_address': event.emitter,
                    'round_number': event['round_number'],
                    'player': event['player'],
                    'amount_wei': str(event['value']),
                    'entered_at': event.timestamp,
                    'block_number': event.block_number,
                })
            return True

        except Exception as e:
            logger.error(f"Failed to record entry of {event.args.get('player')}: {e}")
            return False

    def record_draw(self, event):
        """
        Store one WinnerPicked event

        Returns:
            bool: True if stored
        """
        try:
            with self.engine.begin() as conn:
                conn.execute(text("""
                    INSERT INTO raffle_draws
                        (raffle_address, round_number, request_id, winner, winner_index,
                         random_word, prize_wei, total_participants, drawn_at, block_number)
                    VALUES
                        (:raffle_address, :round_number, :request_id, :winner, :winner_index,
                         :random_word, :prize_wei, :total_participants, :drawn_at, :block_number)
                """), {
                    'raffle_address': event.emitter,
                    'round_number': event['round_number'],
                    'request_id': event['request_id'],
                    'winner': event['winner'],
                    'winner_index': event['winner_index'],
                    'random_word': str(event['random_word']),
                    'prize_wei': str(event['prize']),
                    'total_participants': event['total_participants'],
                    'drawn_at': event.timestamp,
                    'block_number': event.block_number,
                })

            logger.info(f"📝 Recorded draw for round {event['round_number']} (request {event['request_id']})")
            return True

        except Exception as e:
            logger.error(f"Failed to record draw for request {event.args.get('request_id')}: {e}")
            return False

    def get_draw_history(self, limit=5):
        """
        Get recent draws, newest first

        Returns:
            list: List of draw dicts
        """
        try:
            with self.engine.begin() as conn:
                result = conn.execute(text("""
                    SELECT round_number, request_id, winner, winner_index, random_word,
                           prize_wei, total_participants, drawn_at, raffle_address
                    FROM raffle_draws
                    ORDER BY drawn_at DESC, id DESC
                    LIMIT :limit
                """), {'limit': limit})

                return [self._draw_from_row(row) for row in result]

        except Exception as e:
            logger.error(f"Failed to get draw history: {e}")
            return []

    def get_draw(self, request_id):
        """
        Get the draw settled by a randomness request

        Returns:
            dict: Draw info or None
        """
        try:
            with self.engine.begin() as conn:
                result = conn.execute(text("""
                    SELECT round_number, request_id, winner, winner_index, random_word,
                           prize_wei, total_participants, drawn_at, raffle_address
                    FROM raffle_draws
                    WHERE request_id = :request_id
                """), {'request_id': request_id})

                row = result.fetchone()
                return self._draw_from_row(row) if row else None

        except Exception as e:
            logger.error(f"Failed to get draw for request {request_id}: {e}")
            return None

    def get_round_entries(self, round_number, raffle_address=None):
        """
        Get the entries of one round in entry order

        Returns:
            list: List of entry dicts
        """
        query = """
            SELECT player, amount_wei, entered_at, raffle_address
            FROM raffle_entries
            WHERE round_number = :round_number
        """
        params = {'round_number': round_number}
        if raffle_address:
            query += " AND raffle_address = :raffle_address"
            params['raffle_address'] = raffle_address
        query += " ORDER BY id"

        try:
            with self.engine.begin() as conn:
                result = conn.execute(text(query), params)
                return [
                    {
                        'player': row[0],
                        'amount_wei': int(row[1]),
                        'entered_at': row[2],
                        'raffle_address': row[3],
                    }
                    for row in result
                ]

        except Exception as e:
            logger.error(f"Failed to get entries for round {round_number}: {e}")
            return []

    @staticmethod
    def _draw_from_row(row):
        return {
            'round_number': row[0],
            'request_id': row[1],
            'winner': row[2],
            'winner_index': row[3],
            'random_word': int(row[4]),
            'prize_wei': int(row[5]),
            'total_participants': row[6],
            'drawn_at': row[7],
            'raffle_address': row[8],
        }
