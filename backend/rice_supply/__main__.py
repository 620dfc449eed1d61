"""Run the API with uvicorn: `python -m rice_supply`."""

import uvicorn

from rice_supply.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "rice_supply.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
