"""
Send a signed slash command to a locally running aqibot server.

Usage:
    # Run the server
    SLACK_SIGNATURE_SECRET=dev-secret AIRVISUAL_API_KEY=... aqibot-server

    # Send a command the way Slack would
    SLACK_SIGNATURE_SECRET=dev-secret python examples/send_command.py 'city "Los Angeles" California USA'

Environment variables:
    SLACK_SIGNATURE_SECRET - Secret shared with the server
    AQIBOT_URL - Server URL (default: http://localhost:8080/)
"""

import os
import sys
import time
from urllib.parse import urlencode

import httpx

from aqibot.signature import SIGNATURE_HEADER, TIMESTAMP_HEADER, sign_request

SECRET = os.getenv("SLACK_SIGNATURE_SECRET", "dev-secret")
URL = os.getenv("AQIBOT_URL", "http://localhost:8080/")


def main() -> None:
    text = " ".join(sys.argv[1:]) or "sf"
    body = urlencode({
        "command": "/aqi",
        "text": text,
        "user_id": "U0LOCAL",
        "user_name": "local",
    }).encode("utf-8")
    timestamp = str(int(time.time()))

    response = httpx.post(
        URL,
        content=body,
        headers={
            "Content-Type": "application/x-www-form-urlencoded",
            TIMESTAMP_HEADER: timestamp,
            SIGNATURE_HEADER: sign_request(SECRET.encode("utf-8"), timestamp, body),
        },
    )
    print(response.status_code, response.json())


if __name__ == "__main__":
    main()
