"""Chat widget session: relays messages through the API's chat proxy."""

import secrets
import string
from dataclasses import dataclass
from typing import Optional

from src.client.api import ApiError, BakeriesApi
from src.client.state import AppState
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

FALLBACK_REPLY = "Sorry, I couldn't connect to the server."
LOGIN_REQUIRED_REPLY = "Please login to send a message."

_SESSION_ALPHABET = string.digits + string.ascii_lowercase


def new_session_id() -> str:
    return "session-" + "".join(secrets.choice(_SESSION_ALPHABET) for _ in range(9))


@dataclass
class ChatEntry:
    sender: str  # "user" or "bot"
    text: str


class ChatSession:
    def __init__(self, api: BakeriesApi, session_id: Optional[str] = None):
        self.api = api
        self.session_id = session_id or new_session_id()
        self.history: list[ChatEntry] = []

    async def send(self, state: AppState, text: str) -> Optional[str]:
        """
        Send one message and return the bot's reply.

        Blank input is ignored (returns None). Failures never raise; the
        caller gets a fallback reply that is also recorded in the history.
        """
        text = (text or "").strip()
        if not text:
            return None

        self.history.append(ChatEntry("user", text))
        if not state.is_authenticated:
            return self._reply(LOGIN_REQUIRED_REPLY)

        try:
            payload = await self.api.chat(state.token, text, self.session_id)
        except ApiError as e:
            logger.warning("Chat relay failed", status_code=e.status_code, session_id=self.session_id)
            return self._reply(FALLBACK_REPLY)
        return self._reply(payload["data"]["reply"])

    def _reply(self, text: str) -> str:
        self.history.append(ChatEntry("bot", text))
        return text
