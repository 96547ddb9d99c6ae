"""Completion notifications pushed to external services.

Every configured channel is tried independently. A failing channel is
reported on the console and never affects the job outcome.
"""

from __future__ import annotations

import httpx

from msub.core.config import NotifyChannel, NotifyConfig
from msub.core.models import CompletedRecord
from msub.utils.console import console

SUBJECT = "Video processed"

_DEFAULT_URLS = {
    "telegram": "https://api.telegram.org",
    "pushplus": "http://www.pushplus.plus/send",
    "wxpusher": "https://wxpusher.zjiecode.com/api/send/message",
    "resend": "https://api.resend.com/emails",
}


def format_message(record: CompletedRecord) -> str:
    languages = ", ".join(record.languages) or "none"
    return (
        f"{SUBJECT}: {record.original_file} ==> {record.output_file} : "
        f"{record.duration:.1f}s (subtitles: {languages})"
    )


def build_request(channel: NotifyChannel, message: str) -> tuple[str, dict, dict]:
    """Return the URL, headers and JSON body for one channel.

    Raises:
        ValueError: If the channel kind is unknown or a required field is missing.
    """
    kind = channel.kind
    url = channel.url or _DEFAULT_URLS.get(kind)
    headers: dict = {}

    if kind == "webhook":
        if not url:
            raise ValueError("webhook channel needs a url")
        body: dict = {"title": SUBJECT, "text": message}
    elif kind == "telegram":
        if not channel.token or not channel.chat_id:
            raise ValueError("telegram channel needs token and chat_id")
        url = f"{url.rstrip('/')}/bot{channel.token}/sendMessage"
        body = {"chat_id": channel.chat_id, "text": message}
    elif kind == "pushplus":
        if not channel.token:
            raise ValueError("pushplus channel needs a token")
        body = {"token": channel.token, "title": SUBJECT, "content": message}
    elif kind == "wxpusher":
        if not channel.token:
            raise ValueError("wxpusher channel needs a token")
        body = {"appToken": channel.token, "content": message, "summary": SUBJECT, "contentType": 1}
        if channel.to:
            body["uids"] = [uid.strip() for uid in channel.to.split(",") if uid.strip()]
    elif kind == "resend":
        if not channel.token or not channel.to or not channel.from_address:
            raise ValueError("resend channel needs token, to and from_address")
        headers["Authorization"] = f"Bearer {channel.token}"
        body = {
            "from": channel.from_address,
            "to": channel.to,
            "subject": SUBJECT,
            "html": f"<p>{message}</p>",
        }
    else:
        raise ValueError(f"Unknown notification kind: '{kind}'")

    return url, headers, body


def send_notifications(
    record: CompletedRecord,
    config: NotifyConfig,
    http: httpx.Client | None = None,
) -> int:
    """Post the completion message to every enabled channel.

    Returns:
        Number of channels that accepted the message.
    """
    channels = [c for c in config.channels if c.enabled]
    if not channels:
        return 0

    message = format_message(record)
    client = http or httpx.Client(timeout=config.timeout)
    sent = 0
    try:
        for channel in channels:
            try:
                url, headers, body = build_request(channel, message)
                response = client.post(url, json=body, headers=headers)
                response.raise_for_status()
            except (httpx.HTTPError, ValueError) as e:
                console.print(f"[yellow]Notification '{channel.name}' failed:[/yellow] {e}")
                continue
            sent += 1
            console.print(f"[dim]Notification sent: {channel.name} ({response.status_code})[/dim]")
    finally:
        if http is None:
            client.close()
    return sent
