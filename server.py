import logging

import uvicorn

from linkminder.config import load_settings


def main():
    """
    Run the LinkMinder API via uvicorn in this process.
    Settings come from LINKMINDER_* environment variables.
    """
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print(f"[server] State file: {settings.state_file}")
    print(f"[server] Serving http://{settings.host}:{settings.port}/api/links")

    config = uvicorn.Config(
        "linkminder.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )
    server = uvicorn.Server(config)
    try:
        server.run()
    except KeyboardInterrupt:
        print("\n[server] Shutting down.")


if __name__ == "__main__":
    main()
