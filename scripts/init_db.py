import os
import sys

# Ensure the project root is on the path to import tzscraps
sys.path.append(os.getcwd())

from tzscraps.db.database import SCHEMA_SQL
from tzscraps.config import Config


def main():
    print("--- DATABASE SCHEMA ---")
    print(f"Environment: {Config.ENVIRONMENT.upper()}")
    print("Run the statements below in the SQL editor of the hosted project.\n")

    # Optional output file, e.g. scripts/init_db.py schema.sql
    if len(sys.argv) > 1:
        target = sys.argv[1]
        try:
            with open(target, "w", encoding="utf-8") as f:
                f.write(SCHEMA_SQL)
            print(f"Schema written to: {target}")
        except OSError as e:
            print(f"Error writing schema: {e}")
            sys.exit(1)
    else:
        print(SCHEMA_SQL)


if __name__ == "__main__":
    main()
