"""Slack integration module."""

from .client import SlackNotifier
from .event_extractor import EventExtractor, ExtractedMessage

__all__ = ["SlackNotifier", "EventExtractor", "ExtractedMessage"]
