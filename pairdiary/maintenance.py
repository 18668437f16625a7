"""Out-of-band maintenance tasks.

Run with ``python -m pairdiary.maintenance purge-sessions``.
"""

import argparse
import logging

from sqlmodel import Session

from pairdiary.database import engine, init_db
from pairdiary.services.session_service import session_manager_for

logger = logging.getLogger(__name__)


def purge_sessions() -> int:
    """Delete every expired session row."""
    init_db()
    with Session(engine) as session:
        return session_manager_for(session).purge_expired()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="pairdiary.maintenance")
    parser.add_argument("task", choices=["purge-sessions"])
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if args.task == "purge-sessions":
        removed = purge_sessions()
        print(f"Removed {removed} expired session(s)")


if __name__ == "__main__":
    main()
