from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, Iterator, Optional

from towerops.core.errors import ResourceConflictError


class WaitingQueue:
	"""Strict FIFO of flight ids circling for a free runway."""

	def __init__(self, flight_ids: Iterable[str] = ()) -> None:
		self._ids: Deque[str] = deque()
		for fid in flight_ids:
			self.enqueue(fid)

	def enqueue(self, flight_id: str) -> None:
		if flight_id in self._ids:
			raise ResourceConflictError(f"Flight {flight_id} is already circling")
		self._ids.append(flight_id)

	def dequeue_front(self) -> Optional[str]:
		if not self._ids:
			return None
		return self._ids.popleft()

	def remove(self, flight_id: str) -> bool:
		try:
			self._ids.remove(flight_id)
		except ValueError:
			return False
		return True

	def __contains__(self, flight_id: object) -> bool:
		return flight_id in self._ids

	def __len__(self) -> int:
		return len(self._ids)

	def __iter__(self) -> Iterator[str]:
		return iter(list(self._ids))
