from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List


@dataclass
class Event:
	type: str
	payload: Dict[str, Any]
	seq: int


class EventBus:
	def __init__(self) -> None:
		self.subscribers: Dict[str, List[Callable[[Event], None]]] = {}
		self.log: List[Event] = []

	def subscribe(self, event_type: str, handler: Callable[[Event], None]) -> None:
		# "*" receives every event
		self.subscribers.setdefault(event_type, []).append(handler)

	def publish(self, event_type: str, payload: Dict[str, Any]) -> Event:
		evt = Event(event_type, payload, len(self.log) + 1)
		self.log.append(evt)
		for handler in self.subscribers.get(evt.type, []) + self.subscribers.get("*", []):
			handler(evt)
		return evt

	def records(self) -> List[Dict[str, Any]]:
		return [{"seq": e.seq, "type": e.type, **e.payload} for e in self.log]
