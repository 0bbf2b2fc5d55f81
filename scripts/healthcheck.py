"""Container healthcheck: verify HTTP /healthz endpoint.

Uses stdlib only. Exit code 0 indicates healthy.
"""

from __future__ import annotations

import json
import os
import sys
from typing import Final
from urllib.request import Request, urlopen

DEFAULT_URL: Final[str] = "http://127.0.0.1:8080"


def health_url() -> str:
    base = os.getenv("MCP_HTTP_URL", "").strip() or DEFAULT_URL
    base = base.replace("://0.0.0.0", "://127.0.0.1")
    return base.rstrip("/") + "/healthz"


def main() -> int:
    url = health_url()
    try:
        req = Request(url, headers={"User-Agent": "oracle-mcp/healthcheck"})  # noqa: S310
        with urlopen(req, timeout=4) as resp:  # noqa: S310 - local http only
            if resp.status != 200:
                print(f"unexpected status: {resp.status}", file=sys.stderr)
                return 1
            data = json.loads(resp.read().decode("utf-8"))
            if data.get("ok") is not True:
                print(f"payload not healthy: {data}", file=sys.stderr)
                return 1
            return 0
    except Exception as exc:
        print(f"healthcheck error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - used by Docker
    raise SystemExit(main())
