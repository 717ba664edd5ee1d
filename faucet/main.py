import uvicorn

from faucet.core.app_factory import create_app
from faucet.core.config import settings

app = create_app()


def run() -> None:
    uvicorn.run("faucet.main:app", host="0.0.0.0", port=settings.faucet.http_port)


if __name__ == "__main__":
    run()
