from __future__ import annotations

"""Manage the Telegram webhook by hand.

Usage:
  python scripts/set_webhook.py            # register <WEBHOOK_URL>/telegram-webhook
  python scripts/set_webhook.py --info     # show current webhook info
  python scripts/set_webhook.py --delete   # remove the webhook

The server registers the webhook on startup already; this is for fixing a
failed registration without a restart. Auto-loads `.env` from the project
root (or parent dirs) using python-dotenv.

Requires env BOT_TOKEN, and WEBHOOK_URL for registration.
"""

import argparse
import os
import sys

import httpx
from dotenv import load_dotenv, find_dotenv


WEBHOOK_PATH = "/telegram-webhook"


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0] if __doc__ else None)
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--info", action="store_true", help="print getWebhookInfo")
    group.add_argument("--delete", action="store_true", help="call deleteWebhook")
    args = parser.parse_args()

    # Auto-load .env (search upwards)
    load_dotenv(find_dotenv(), override=False)

    token = os.environ.get("BOT_TOKEN")
    if not token:
        print("Please set BOT_TOKEN", file=sys.stderr)
        sys.exit(1)
    api = f"https://api.telegram.org/bot{token}"

    if args.info:
        resp = httpx.get(f"{api}/getWebhookInfo")
    elif args.delete:
        resp = httpx.post(f"{api}/deleteWebhook")
    else:
        base = os.environ.get("WEBHOOK_URL")
        if not base:
            print("Please set WEBHOOK_URL", file=sys.stderr)
            sys.exit(1)
        url = f"{base.rstrip('/')}{WEBHOOK_PATH}"
        resp = httpx.post(f"{api}/setWebhook", json={"url": url})
    print(resp.status_code, resp.text)
    if resp.is_error:
        sys.exit(1)


if __name__ == "__main__":
    main()
