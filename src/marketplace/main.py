from __future__ import annotations

import uvicorn

from marketplace.config import Settings


def main() -> None:
    settings = Settings()
    uvicorn.run(
        "marketplace.bootstrap:create_asgi_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=False,
    )


if __name__ == "__main__":
    main()
