"""
Fingerprint persistence.

Stores identifier -> fingerprint in a SQL table, keeping insertion order so
the collection loaded back builds the same tree.
"""

import logging

from sqlalchemy import create_engine, text

from . import config
from .engine import MwisdFingerprint

logger = logging.getLogger(__name__)


class FingerprintStore:
    """
    Fingerprint database backed by SQLAlchemy

    Identifiers are stored as text; fingerprints as their byte form.
    """
    def __init__(self, url=None, fingerprint_class=MwisdFingerprint):
        self.engine = create_engine(url or config.DATABASE_URL)
        self.fingerprint_class = fingerprint_class

        with self.engine.begin() as conn:
            conn.execute(text("""
                CREATE TABLE IF NOT EXISTS fingerprints (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    identifier TEXT NOT NULL UNIQUE,
                    fingerprint BLOB NOT NULL
                )
            """))

    def save(self, collection):
        """Insert or replace (by identifier) every (identifier, fingerprint) pair"""
        rows = [
            {'identifier': identifier, 'fingerprint': fingerprint.as_bytes()}
            for identifier, fingerprint in collection
        ]
        if not rows:
            return

        with self.engine.begin() as conn:
            conn.execute(text("""
                INSERT INTO fingerprints (identifier, fingerprint)
                VALUES (:identifier, :fingerprint)
                ON CONFLICT(identifier) DO UPDATE SET fingerprint = excluded.fingerprint
            """), rows)
        logger.info("Saved %d fingerprints", len(rows))

    def load(self):
        """Return the stored collection in insertion order"""
        with self.engine.connect() as conn:
            result = conn.execute(text("""
                SELECT identifier, fingerprint FROM fingerprints
                ORDER BY id
            """))
            data = result.fetchall()

        return [(row[0], self.fingerprint_class.from_bytes(row[1])) for row in data]

    def as_mapping(self):
        """identifier -> fingerprint, the backing store used during search"""
        return dict(self.load())

    def clear(self):
        with self.engine.begin() as conn:
            conn.execute(text("DELETE FROM fingerprints"))

    def __len__(self):
        with self.engine.connect() as conn:
            return conn.execute(text("SELECT COUNT(*) FROM fingerprints")).scalar()
