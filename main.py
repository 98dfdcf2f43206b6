import argparse

import uvicorn

from config import Settings, configure_logging


# =========================
# MAIN / CLI
# =========================
def main() -> None:
    settings = Settings.from_env()

    parser = argparse.ArgumentParser(description="Showcase site server (projects + components)")
    parser.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Port (default: {settings.port})")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    parser.add_argument("--log-level", default=settings.log_level, help="Log level (default: from LOG_LEVEL)")
    args = parser.parse_args()

    configure_logging(args.log_level)
    uvicorn.run("app:app", host=args.host, port=args.port, reload=args.reload, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()
