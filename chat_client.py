"""
Console chat client for the RTC agent.

Starts a session through the backend proxy, joins the room through the room
gateway, and prints the agent's streamed answers as they complete.

Usage:
    python chat_client.py --gateway ws://localhost:9000/room [--api http://localhost:8080]
        [--conversation CONVERSATION_ID] [--speak]

Commands:
    /voice   toggle speech playback
    /quit    end the session
"""

import argparse
import asyncio
import sys

from rtc_agent.client.memory import JsonConversationStore
from rtc_agent.client.reconciler import MessageStreamReconciler
from rtc_agent.client.session import SessionStateMachine
from rtc_agent.client.transport import WebSocketRoomTransport
from rtc_agent.config.logging_config import configure_logging
from rtc_agent.config.settings import ClientSettings
from rtc_agent.models.chat import Message
from rtc_agent.services.agent_api import AgentAPIClient

logger = configure_logging()


def parse_args():
    settings = ClientSettings.from_env()
    parser = argparse.ArgumentParser(description="Chat with the RTC agent from the console")
    parser.add_argument("--api", default=settings.agent_api_base_url, help="Backend proxy URL")
    parser.add_argument(
        "--gateway",
        default=settings.room_gateway_url,
        required=settings.room_gateway_url is None,
        help="Room gateway WebSocket URL (default: ROOM_GATEWAY_URL env var)",
    )
    parser.add_argument(
        "--history",
        default=settings.conversations_file or "conversations.json",
        help="JSON file holding the conversation history",
    )
    parser.add_argument("--conversation", default=None, help="Conversation id to resume")
    parser.add_argument("--speak", action="store_true", help="Speak answers with pyttsx3")
    return parser.parse_args()


def print_message(message: Message) -> None:
    if message.sender == "ai" and not message.is_streaming:
        print(f"\nAI: {message.content}\n> ", end="", flush=True)


async def main():
    args = parse_args()

    synthesizer = None
    if args.speak:
        from rtc_agent.client.audio import Pyttsx3Synthesizer

        synthesizer = Pyttsx3Synthesizer()

    store = JsonConversationStore(args.history)
    session = SessionStateMachine(
        transport=WebSocketRoomTransport(args.gateway),
        agent_api=AgentAPIClient(args.api),
        store=store,
        reconciler=MessageStreamReconciler(store, synthesizer, on_change=print_message),
    )

    if not await session.start(args.conversation):
        print(f"Could not start a session: {session.last_error}")
        sys.exit(1)

    print(f"Connected (conversation {session.session.conversation_id}). Type /quit to exit.")
    try:
        while True:
            line = await asyncio.to_thread(input, "> ")
            if line.strip() == "/quit":
                break
            if line.strip() == "/voice":
                enabled = session.toggle_voice_enabled()
                print(f"Speech playback {'on' if enabled else 'off'}")
                continue
            await session.send_text_message(line)
    except (EOFError, KeyboardInterrupt):
        pass
    finally:
        await session.end()


if __name__ == "__main__":
    asyncio.run(main())
