"""
Job Board Main Entry Point

Initializes logging and the database connection, then serves the HTTP API
with uvicorn.
"""

import sys
from typing import Optional


def main(host: Optional[str] = None, port: Optional[int] = None, reload: bool = False) -> int:
    """
    Main entry point for the job board API server.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    try:
        # Initialize logging first
        from jobboard.utils.logger import setup_logging, log

        setup_logging()
        log.info("Starting job board API...")

        from jobboard.utils.config import get_settings

        settings = get_settings()
        log.info(f"Environment: {settings.environment}")
        log.info(f"Debug mode: {settings.debug}")

        log.info("Initializing database connection...")
        from jobboard.data.database import get_database_manager

        db_manager = get_database_manager()
        if db_manager.check_sync_connection():
            log.info("Database connection established")
        else:
            log.warning(
                "Could not connect to MongoDB. "
                "Requests will fail until it is reachable. Run 'jobboard init-db' to initialize."
            )
        if not settings.database.replica_set:
            log.warning("DB_REPLICA_SET is not set; status changes need a replica set for transactions")

        import uvicorn

        uvicorn.run(
            "jobboard.api.app:app",
            host=host or settings.api.host,
            port=port or settings.api.port,
            reload=reload,
        )
        return 0

    except KeyboardInterrupt:
        print("\nServer interrupted by user.")
        return 130
    except Exception as e:
        print(f"Fatal error: {e}")
        import traceback

        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
