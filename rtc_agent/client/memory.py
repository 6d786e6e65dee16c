"""
Conversation history store.

A flat key-value store of conversation records, optionally persisted to a JSON
file. The session layer only creates/resumes records and appends finalized
messages; listing and deleting are there for history browsing.
"""

import json
import logging
import secrets
import string
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import ValidationError

from rtc_agent.config.constants import (
    CONVERSATION_TITLE_LENGTH,
    DEFAULT_CONVERSATION_TITLE,
    LOGGER_NAME,
)
from rtc_agent.models.chat import ConversationRecord, Message, now_ms

logger = logging.getLogger(LOGGER_NAME)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def random_token(length: int = 9) -> str:
    """Short lowercase alphanumeric token used in generated ids."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


def generate_conversation_id() -> str:
    return f"conv_{now_ms()}_{random_token()}"


def make_title(content: str) -> str:
    if len(content) > CONVERSATION_TITLE_LENGTH:
        return content[:CONVERSATION_TITLE_LENGTH] + "..."
    return content


class JsonConversationStore:
    """In-memory conversation records, mirrored to a JSON file when a path is given."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else None
        self._conversations: Dict[str, ConversationRecord] = {}
        self._load()

    def _load(self) -> None:
        if self.path is None or not self.path.exists():
            return
        try:
            records = json.loads(self.path.read_text(encoding="utf-8"))
            for record in records:
                conversation = ConversationRecord(**record)
                self._conversations[conversation.id] = conversation
            logger.info(f"Loaded {len(self._conversations)} conversations from {self.path}")
        except (OSError, ValueError, TypeError, ValidationError) as e:
            logger.error(f"Failed to load conversations from {self.path}: {e}")

    def _save(self) -> None:
        if self.path is None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            records = [
                conversation.model_dump(by_alias=True)
                for conversation in self._conversations.values()
            ]
            self.path.write_text(json.dumps(records, indent=2), encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to save conversations to {self.path}: {e}")

    def create_or_get(self, conversation_id: Optional[str] = None) -> ConversationRecord:
        """Return the existing record for the id, or create a new empty one."""
        conversation_id = conversation_id or generate_conversation_id()

        existing = self._conversations.get(conversation_id)
        if existing is not None:
            return existing

        conversation = ConversationRecord(id=conversation_id, title=DEFAULT_CONVERSATION_TITLE)
        self._conversations[conversation_id] = conversation
        self._save()
        return conversation

    def add_message(self, conversation_id: str, message: Message) -> None:
        """Append a message and update the derived metadata. Unknown ids are ignored."""
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            logger.warning(f"Cannot archive message: unknown conversation {conversation_id}")
            return

        conversation.messages.append(message)
        conversation.updated_at = now_ms()
        conversation.metadata.total_messages += 1

        if message.sender == "ai":
            conversation.metadata.last_ai_response = message.content

        if len(conversation.messages) == 1 and message.sender == "user":
            conversation.title = make_title(message.content)

        self._save()

    def get(self, conversation_id: str) -> Optional[ConversationRecord]:
        return self._conversations.get(conversation_id)

    def list_conversations(self) -> List[ConversationRecord]:
        """All records, most recently updated first."""
        return sorted(
            self._conversations.values(), key=lambda c: c.updated_at, reverse=True
        )

    def delete(self, conversation_id: str) -> None:
        if self._conversations.pop(conversation_id, None) is not None:
            self._save()
