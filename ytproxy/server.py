import uvicorn
from ytproxy.config.settings import config
from ytproxy.core.logging import setup_logging
from ytproxy.main import create_app

def main() -> None:
    """Bind, serve until SIGINT/SIGTERM, then shut down gracefully"""
    setup_logging(config.logging)

    server = uvicorn.Server(uvicorn.Config(
        create_app(),
        host=config.server.host,
        port=config.server.port,
        log_level=config.logging.level.lower(),
    ))
    server.run()

if __name__ == "__main__":
    main()
