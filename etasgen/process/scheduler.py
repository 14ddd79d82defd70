"""Event schedule merging the background and descendant streams.

The schedule keeps exactly one pending candidate per open stream: the
background stream is a single float, each descendant stream is a
``DescendantStream`` value in a binary heap keyed on its candidate time.
"""

from __future__ import annotations

import heapq
from typing import NamedTuple, Optional

from .kernel import (
    ProcessParameters,
    draw_magnitude,
    next_background_occurrence,
    next_descendant_occurrence,
)
from ..rng import UniformStream


class DescendantStream(NamedTuple):
    """Open triggering process of one ancestor.

    Field order matters: heap ordering compares ``next_time`` first and
    falls back to the ancestor fields on exact ties.
    """
    next_time: float
    ancestor_time: float
    ancestor_magnitude: float


class Event(NamedTuple):
    """One catalog entry."""
    time: float
    magnitude: float


class EventSchedule:
    """Chronological merge of all open event streams.

    Each call to ``next_event`` consumes uniform variates in a fixed order:
    one to refresh the stream that fired (background or descendant), one
    for the magnitude, one for the first child of the new event.

    Example:
        >>> params = ProcessParameters.create(1.0, 2.0, 7.0, 2.3, 1.2, 1.0, 0.5)
        >>> schedule = EventSchedule(params, UniformStream(seed=42))
        >>> event = schedule.next_event()

    Args:
        params: Validated process parameters
        uniforms: Random stream owned by this schedule
        start_time: Time of the empty initial history

    Attributes:
        time: Time of the most recently emitted event
        next_background: Pending background candidate
        descendants: Heap of open descendant streams
        emitted: Number of events emitted so far
    """

    def __init__(
        self,
        params: ProcessParameters,
        uniforms: UniformStream,
        start_time: float = 0.0,
    ):
        self.params = params
        self.uniforms = uniforms
        self.time = float(start_time)
        self.emitted = 0
        self.descendants: list[DescendantStream] = []
        self.next_background = float(
            next_background_occurrence(uniforms.draw(), self.time, params.mu_0)
        )

    def __len__(self) -> int:
        """Number of open descendant streams."""
        return len(self.descendants)

    def peek_time(self) -> float:
        """Candidate time of the next event without consuming it."""
        if self.descendants and self.descendants[0].next_time <= self.next_background:
            return self.descendants[0].next_time
        return self.next_background

    def _first_child(self, time: float, magnitude: float) -> Optional[DescendantStream]:
        next_time = next_descendant_occurrence(
            self.uniforms.draw(), time, magnitude, time, self.params
        )
        if next_time is None:
            return None
        return DescendantStream(next_time, time, magnitude)

    def next_event(self) -> Event:
        """Emit the next event in time order and update the streams."""
        params = self.params
        draw = self.uniforms.draw

        if not self.descendants or self.next_background < self.descendants[0].next_time:
            t = self.next_background
            self.next_background = float(
                next_background_occurrence(draw(), t, params.mu_0)
            )
        else:
            stream = heapq.heappop(self.descendants)
            t = stream.next_time
            next_time = next_descendant_occurrence(
                draw(), stream.ancestor_time, stream.ancestor_magnitude, t, params
            )
            if next_time is not None:
                heapq.heappush(self.descendants, stream._replace(next_time=next_time))

        magnitude = float(
            draw_magnitude(draw(), params.magnitude_min, params.magnitude_max, params.beta)
        )

        child = self._first_child(t, magnitude)
        if child is not None:
            heapq.heappush(self.descendants, child)

        self.time = t
        self.emitted += 1
        return Event(t, magnitude)

    def snapshot(self) -> dict:
        """Current schedule state as plain Python values."""
        return {
            'time': self.time,
            'emitted': self.emitted,
            'next_background': self.next_background,
            'descendants': sorted(self.descendants),
            'draws': self.uniforms.draws,
        }
