"""Message-send path: moderation in front of a publish/subscribe transport."""

from chatmod.chat.publisher import InMemoryPublisher, Publisher
from chatmod.chat.sender import MessageSender, SendResult

__all__ = ["InMemoryPublisher", "MessageSender", "Publisher", "SendResult"]
