"""
API entrypoint.

Operator notes:
- This file should remain extremely small and boring.
- Runtime configuration (DATABASE_URL, ADMIN_PRINCIPALS, ...) is read by votehub.config.
- If this file crashes, the error should be immediately obvious to the operator.
"""

import logging
import sys

from votehub.main import run


def main() -> None:
    try:
        run()
    except Exception:
        logging.basicConfig(level=logging.ERROR)
        logging.exception("Ledger API failed to start.")
        print("\nLedger API failed to start.")
        print("   See error above. Most common causes:")
        print("   - Database path/URL invalid (DATABASE_URL or DB_PATH)")
        print("   - Port already in use (PORT)")
        print("   - Missing dependencies / broken venv\n")
        sys.exit(1)


if __name__ == "__main__":
    main()
