# SQL schema for the FlashDeck database

SCHEMA_VERSION = 1

DECKS_SCHEMA_SQL = """
-- Decks
CREATE TABLE IF NOT EXISTS decks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name VARCHAR(64) NOT NULL UNIQUE,
    description VARCHAR(255) NOT NULL DEFAULT '',
    creation_date TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
    modification_date TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
    last_study_date TEXT,
    total_cards INTEGER NOT NULL DEFAULT 0
);
"""

# Card IDs are numbered per deck, hence the composite key.
# SQLite rejects 'now' inside CHECK constraints, so the review-time rule is a trigger.
CARDS_SCHEMA_SQL = """
-- Cards
CREATE TABLE IF NOT EXISTS cards (
    id INTEGER NOT NULL,
    deck_id INTEGER NOT NULL,
    content TEXT NOT NULL,
    creation_time TEXT NOT NULL,
    modification_time TEXT NOT NULL,
    next_review_time TEXT NOT NULL,
    retention_level INTEGER NOT NULL DEFAULT 0 CHECK(retention_level >= 0),
    flag INTEGER NOT NULL DEFAULT 0 CHECK(flag BETWEEN 0 AND 9),
    source TEXT NOT NULL DEFAULT '',
    PRIMARY KEY (deck_id, id),
    CHECK(modification_time >= creation_time),
    FOREIGN KEY (deck_id) REFERENCES decks (id) ON DELETE CASCADE
);

CREATE TRIGGER IF NOT EXISTS cards_next_review_not_past BEFORE INSERT ON cards
WHEN julianday(NEW.next_review_time) < julianday('now')
BEGIN
    SELECT RAISE(ABORT, 'next_review_time is in the past');
END;

CREATE INDEX IF NOT EXISTS idx_cards_next_review ON cards (deck_id, next_review_time);
"""
