#!/usr/bin/env python3
"""Send a few events and profile updates. Set MIXPANEL_TOKEN (and MIXPANEL_KEY for imports)."""
import asyncio
import os
import sys
from datetime import datetime, timedelta

from mixpanel_events import init
from mixpanel_events.logging_config import configure_logging, get_logger


def report(err):
    if err:
        get_logger().error("request_failed", error=str(err))


async def main() -> int:
    token = os.environ.get("MIXPANEL_TOKEN")
    if not token:
        print("MIXPANEL_TOKEN is not set", file=sys.stderr)
        return 1
    configure_logging(level="DEBUG")
    mp = init(token, {"debug": True, "test": True, "api_key": os.environ.get("MIXPANEL_KEY")})
    tasks = [
        mp.track("demo_pageview", {"page": "examples", "source": "send_events.py"}, report),
        mp.people.set("demo_user", {"plan": "premium", "company": "acme"}, report),
        mp.people.increment("demo_user", "runs", callback=report),
    ]
    if mp.config.api_key:
        yesterday = datetime.now() - timedelta(days=1)
        tasks.append(mp.track("demo_import", {"time": yesterday}, report))
    results = await asyncio.gather(*tasks)
    print("Sent", len(results), "requests,", sum(1 for r in results if r), "failed")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
