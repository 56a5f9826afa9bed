#
# Copyright 2026 ABSA Group Limited
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#

"""Microsoft Teams delivery of the audit summary via an Incoming Webhook.

The Markdown summary is sent as-is in an Adaptive Card ``TextBlock``; Teams
renders only bold, italic, links, simple lists and line breaks there.
"""

from typing import Any, Dict, List

import requests


class TeamsDeliveryError(RuntimeError):
    pass


def _text_block(text: str, **kwargs: Any) -> Dict[str, Any]:
    block: Dict[str, Any] = {
        "type": "TextBlock",
        "text": text,
        "wrap": True,
    }
    block.update(kwargs)
    return block


def build_payload(body: str, title: str, failed: bool) -> Dict[str, Any]:
    """Build the webhook JSON payload (Adaptive Card message)."""
    header: List[Dict[str, Any]] = [
        _text_block(title, weight="Bolder", size="Large", color="Attention" if failed else "Good"),
    ]
    return {
        "type": "message",
        "attachments": [
            {
                "contentType": "application/vnd.microsoft.card.adaptive",
                "contentUrl": None,
                "content": {
                    "$schema": "http://adaptivecards.io/schemas/adaptive-card.json",
                    "type": "AdaptiveCard",
                    "version": "1.5",
                    "body": [
                        {"type": "Container", "style": "accent", "bleed": True, "items": header},
                        {"type": "Container", "separator": True, "items": [_text_block(body)]},
                    ],
                },
            }
        ],
    }


def send_to_teams(webhook_url: str, payload: Dict[str, Any]) -> None:
    """POST *payload* to the webhook; raise :class:`TeamsDeliveryError` on failure."""
    try:
        resp = requests.post(
            webhook_url,
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=30,
        )
    except requests.RequestException as exc:
        raise TeamsDeliveryError(f"Teams webhook request failed: {exc}") from exc

    # Teams webhooks return 200 with body "1" on success.
    if resp.status_code != 200 or resp.text.strip() not in ("1", ""):
        raise TeamsDeliveryError(
            f"Teams webhook request failed.\n"
            f"  Status : {resp.status_code}\n"
            f"  Body   : {resp.text}"
        )
