from __future__ import annotations

from marketplace.bootstrap import create_asgi_app

app = create_asgi_app()
