import psycopg
from psycopg.rows import dict_row


def get_connection(database_url: str):
    if not database_url:
        raise RuntimeError("DATABASE_URL env var not set for host process")
    return psycopg.connect(
        database_url,
        row_factory=dict_row,
        connect_timeout=3,
        keepalives=1,
        keepalives_idle=30,
        keepalives_interval=10,
        keepalives_count=3,
    )
