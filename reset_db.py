import psycopg2
from psycopg2.extensions import ISOLATION_LEVEL_AUTOCOMMIT
from catalog.config import get_db_components

TERMINATE_SESSIONS_SQL = """
    SELECT pg_terminate_backend(pid)
    FROM pg_stat_activity
    WHERE datname = %s AND pid <> pg_backend_pid();
"""


def reset_database():
    """Wipe the catalog database: entity types, entities, users and pending codes."""
    components = get_db_components()
    if components["backend"] != "postgresql":
        print(f"Reset is only supported on PostgreSQL (configured backend: {components['backend']}).")
        return

    db_name = components["db_name"]
    print(f"Resetting catalog database '{db_name}'...")

    conn = psycopg2.connect(components["db_url_without_name"])
    conn.set_isolation_level(ISOLATION_LEVEL_AUTOCOMMIT)
    cursor = conn.cursor()
    try:
        # Open sessions block DROP DATABASE
        cursor.execute(TERMINATE_SESSIONS_SQL, (db_name,))
        # Identifier, not a parameter; validated by get_db_components()
        cursor.execute(f'DROP DATABASE IF EXISTS "{db_name}"')
        cursor.execute(f'CREATE DATABASE "{db_name}"')
    finally:
        cursor.close()
        conn.close()

    print(f"Catalog database '{db_name}' is empty.")
    print("Start the API with 'python run.py' to recreate tables and the default entity types.")


if __name__ == "__main__":
    answer = input("Every entity type, entity and user will be deleted. Continue? (y/n): ")
    if answer.strip().lower() == "y":
        reset_database()
    else:
        print("Reset cancelled.")
