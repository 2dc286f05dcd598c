"""Notifications for completed recorded content mutations"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


class RecordedEventType(Enum):
    """Kinds of recorded content mutations"""
    DELETE_RECORDED = "delete_recorded"
    CHANGE_PROTECT = "change_protect"
    ADD_VIDEO_FILE = "add_video_file"
    DELETE_VIDEO_FILE = "delete_video_file"
    UPDATE_VIDEO_FILE_SIZE = "update_video_file_size"


class RecordedEventRecord:
    """A single emitted event"""

    def __init__(self, event_type: RecordedEventType, payload: Any):
        self.event_type = event_type
        self.payload = payload
        self.timestamp = datetime.now()

    def to_dict(self) -> Dict:
        payload = self.payload.to_dict() if hasattr(self.payload, 'to_dict') else self.payload
        return {
            'type': self.event_type.value,
            'payload': payload,
            'timestamp': self.timestamp.isoformat()
        }


class RecordedEventHandler:
    """Base class for event handlers"""

    def handle(self, event: RecordedEventRecord):
        raise NotImplementedError


class LogEventHandler(RecordedEventHandler):
    """Log events at debug level"""

    def handle(self, event: RecordedEventRecord):
        logger.debug(f"[{event.event_type.value}] {event.payload}")


class RecordedEvent:
    """Fire-and-forget event sink

    Handler failures are logged and never reach the emitter.
    """

    def __init__(self, max_events: int = 100):
        self.handlers: List[RecordedEventHandler] = []
        self.events: List[RecordedEventRecord] = []
        self.max_events = max_events

        self.add_handler(LogEventHandler())

    def add_handler(self, handler: RecordedEventHandler):
        self.handlers.append(handler)
        logger.info(f"Added event handler: {handler.__class__.__name__}")

    def emit(self, event_type: RecordedEventType, payload: Any = None) -> None:
        event = RecordedEventRecord(event_type, payload)

        self.events.append(event)
        if len(self.events) > self.max_events:
            self.events.pop(0)

        for handler in self.handlers:
            try:
                handler.handle(event)
            except Exception as e:
                logger.error(f"Event handler {handler.__class__.__name__} failed: {e}")

    def emit_delete_recorded(self, recorded) -> None:
        self.emit(RecordedEventType.DELETE_RECORDED, recorded)

    def emit_change_protect(self, recorded_id: int, is_protect: bool) -> None:
        self.emit(RecordedEventType.CHANGE_PROTECT, {'recorded_id': recorded_id, 'is_protect': is_protect})

    def emit_add_video_file(self, video_file_id: int) -> None:
        self.emit(RecordedEventType.ADD_VIDEO_FILE, {'video_file_id': video_file_id})

    def emit_delete_video_file(self, video_file_id: int) -> None:
        self.emit(RecordedEventType.DELETE_VIDEO_FILE, {'video_file_id': video_file_id})

    def emit_update_video_file_size(self, video_file_id: int) -> None:
        self.emit(RecordedEventType.UPDATE_VIDEO_FILE_SIZE, {'video_file_id': video_file_id})

    def get_events(self, event_type: RecordedEventType = None) -> List[RecordedEventRecord]:
        if event_type is None:
            return list(self.events)
        return [e for e in self.events if e.event_type == event_type]
