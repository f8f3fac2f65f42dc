# ABOUTME: SQL DDL statements for the local readtrack record store.
# ABOUTME: One JSON document per (user_id, book_id), plus a schema version table.

SCHEMA_VERSION = 1

SCHEMA_V1 = """
-- Book documents, namespaced by owner
CREATE TABLE books (
    user_id     TEXT NOT NULL,
    id          TEXT NOT NULL,
    document    TEXT NOT NULL,
    created     TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    modified    TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    PRIMARY KEY (user_id, id)
);

CREATE INDEX idx_books_user ON books(user_id);

-- Schema versioning for future migrations
CREATE TABLE schema_version (
    version    INTEGER NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

INSERT INTO schema_version (version) VALUES (1);
"""
