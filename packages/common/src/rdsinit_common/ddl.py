"""
The Versioned Initialization Script.

The script creates the `sampledb` namespace and the `sampledb.users` table if
they are absent and seeds one well-known row. All three statements run inside
a single server-side `DO` block with a nested exception handler, so a failure
in any of them aborts the whole group and is re-raised with the original error
text embedded (`Error: <SQLERRM>`).

The seed insertion is keyed on the natural key `username`, which makes the
script fully idempotent: running it N times leaves exactly one seed row.

The header comment carries the job version and change description. Both are
explicit parameters of `build_init_script`.
"""

from __future__ import annotations

SCHEMA_NAME = "sampledb"
USERS_TABLE = "users"
SEED_USERNAME = "lambdainit"
SEED_EMAIL = "lambdainit@sampledb.com"

SCHEMA_CREATION_DDL = f"CREATE SCHEMA IF NOT EXISTS {SCHEMA_NAME};"

TABLE_CREATION_DDL = f"""CREATE TABLE IF NOT EXISTS {SCHEMA_NAME}.{USERS_TABLE} (
            id SERIAL PRIMARY KEY,
            username VARCHAR(10) NOT NULL,
            email VARCHAR(50) NOT NULL,
            last_updated TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );"""

SEED_INSERT_DML = f"""INSERT INTO {SCHEMA_NAME}.{USERS_TABLE} (username, email)
        SELECT '{SEED_USERNAME}', '{SEED_EMAIL}'
        WHERE NOT EXISTS (
            SELECT 1 FROM {SCHEMA_NAME}.{USERS_TABLE} WHERE username = '{SEED_USERNAME}'
        );"""


def _single_line(value: str) -> str:
    # A line comment ends at the first newline; keep caller text inside it.
    return " ".join(value.split())


def build_init_script(job_version: str, change_description: str) -> str:
    """
    Builds the initialization script for one job invocation.

    Args:
        job_version: Version or build tag of the job, written into the header.
        change_description: What this version of the script does.

    Returns:
        The SQL text, ready to be sent to the server as a single statement.
    """
    header = f"-- rdsinit {_single_line(job_version)}: {_single_line(change_description)}"
    return f"""{header}
DO $$
BEGIN
    BEGIN
        {SCHEMA_CREATION_DDL}
        {TABLE_CREATION_DDL}
        {SEED_INSERT_DML}
    EXCEPTION
        WHEN others THEN
            RAISE EXCEPTION 'Error: %', SQLERRM;
    END;
END $$;"""
