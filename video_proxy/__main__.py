import argparse

import uvicorn

from .config import load_settings
from .main import create_app


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run the streaming video proxy.")
    parser.add_argument("--host", help="Bind address (default: VIDEO_PROXY_HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port (default: VIDEO_PROXY_PORT or 8000)")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ERROR")
    args = parser.parse_args(argv)

    settings = load_settings(host=args.host, port=args.port, log_level=args.log_level)
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
