"""
Transporter Backend — Process Entry Point
===========================================

What:  `python -m transporter` / the `transporter` console script.
How:   logging → configuration → database → app → server → database close.

Exit status:
    0  clean shutdown after SIGINT/SIGTERM
    1  configuration error, database unreachable, listener could not start,
       listener failed, or the graceful shutdown window was exceeded
"""

import asyncio
import logging
import sys
from typing import Optional

from transporter.config import Settings, load_settings
from transporter.database import Database
from transporter.exceptions import ConfigurationError, DatabaseError
from transporter.main import create_app, setup_logging
from transporter.server import ServerLifecycle

logger = logging.getLogger("transporter")


async def serve(settings: Settings) -> int:
    """Connect the database, serve until stopped, always close the database."""
    database = Database.from_settings(settings)
    try:
        await database.connect()
    except DatabaseError as e:
        logger.critical("Error DB: %s", e.message)
        await database.close()
        return 1

    try:
        app = create_app(database, settings)
        lifecycle = ServerLifecycle.from_settings(app, settings)
        return await lifecycle.run()
    finally:
        await database.close()


def main(env_file: Optional[str] = ".env") -> int:
    setup_logging()

    try:
        settings = load_settings(env_file)
    except ConfigurationError as e:
        logger.critical("Error ENV: %s", e.message)
        return 1

    setup_logging(settings.log_level)
    return asyncio.run(serve(settings))


if __name__ == "__main__":
    sys.exit(main())
