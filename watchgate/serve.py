"""Console entry point: serve the API with uvicorn.

  $ watchgate            # host/port from HOST / PORT or .env
"""
import uvicorn

from watchgate.config import get_settings


def main() -> None:
    settings = get_settings()
    # A single worker: the gate lives in one process and one event loop.
    uvicorn.run("watchgate.main:app", host=settings.host, port=settings.port, workers=1)


if __name__ == "__main__":
    main()
