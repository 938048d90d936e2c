"""
Lazily evaluated, possibly infinite sequences.

A LazySequence node is at once a sequence and a cursor into its own
unevaluated continuation. Each node owns a head cell and a tail cell;
each cell runs its computation at most once and caches the result.

Filtering never removes nodes. A node produced by ``filter`` stays in the
chain and carries a verdict that is resolved on first query; every
consumer skips nodes whose verdict is "filtered".
"""

import logging
from typing import Any, Callable, Generic, Iterator, List, Optional, TypeVar

from models import FilterState, MapFilterPropagation, SequenceSettings

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")
U = TypeVar("U")

_UNRESOLVED = object()

_settings = SequenceSettings()


class InvalidStateError(Exception):
    """Raised when head() or tail() is called on the empty sequence."""
    pass


def get_settings() -> SequenceSettings:
    """Return the active settings."""
    return _settings


def configure(**overrides) -> SequenceSettings:
    """Validate and install new settings; fields not given keep their current value."""
    global _settings
    _settings = SequenceSettings(**{**_settings.model_dump(), **overrides})
    logger.info("LazySequence settings updated: %s", overrides)
    return _settings


def reset_settings() -> SequenceSettings:
    """Restore the default settings."""
    global _settings
    _settings = SequenceSettings()
    return _settings


class _Memo:
    """One-shot memoization cell. The thunk runs at most once."""

    __slots__ = ("_thunk", "_value", "_label")

    def __init__(self, thunk=None, value=_UNRESOLVED, label="value"):
        self._thunk = thunk
        self._value = value
        self._label = label

    @property
    def resolved(self) -> bool:
        return self._value is not _UNRESOLVED

    @property
    def value(self):
        return self._value

    def resolve(self):
        if self._value is _UNRESOLVED:
            # A raising thunk leaves the cell unresolved.
            value = self._thunk()
            self._value = value
            self._thunk = None
            if _settings.trace_evaluations:
                logger.debug("resolved %s -> %r", self._label, value)
        return self._value


class LazySequence(Generic[T]):
    """
    A lazy, possibly infinite, immutable sequence.

    Build one with generate(), iterate() or empty(), then chain map(),
    filter(), limit() and take_while(). Nothing is computed until a
    terminal operation (reduce, count, to_list, find_first, for_each)
    or iteration demands it.
    """

    __slots__ = ("_head", "_tail", "_filter_state", "_predicate", "_verdict_source")

    def __init__(self, head: _Memo, tail: _Memo,
                 filter_state: FilterState = FilterState.UNKNOWN,
                 predicate: Optional[Callable[[T], bool]] = None,
                 verdict_source: Optional["LazySequence"] = None):
        self._head = head
        self._tail = tail
        self._filter_state = filter_state
        self._predicate = predicate
        self._verdict_source = verdict_source

    # --------- head / tail access ----------
    def head(self) -> T:
        """Return the head, evaluating and caching it on first access."""
        return self._head.resolve()

    def tail(self) -> "LazySequence[T]":
        """Return the rest of the sequence, evaluating and caching it on first access."""
        return self._tail.resolve()

    def is_filtered(self) -> bool:
        """Return True if this node's element is excluded from the output.

        The verdict is resolved once, on first query, and then cached.
        """
        if self._filter_state is FilterState.UNKNOWN:
            if self._verdict_source is not None:
                filtered = self._verdict_source.is_filtered()
            elif self._predicate is None:
                filtered = False
            else:
                filtered = not self._predicate(self.head())
            self._filter_state = FilterState.FILTERED if filtered else FilterState.KEPT
            self._verdict_source = None
            if _settings.trace_evaluations:
                logger.debug("resolved filter verdict -> %s", self._filter_state.value)
        return self._filter_state is FilterState.FILTERED

    def is_empty(self) -> bool:
        """True once every remaining element is filtered out or the chain ends."""
        return isinstance(self._first_visible(), _Empty)

    # --------- chainable operators (lazy) ----------
    def map(self, mapper: Callable[[T], R]) -> "LazySequence[R]":
        return self._map(mapper, _settings.map_filter_propagation)

    def _map(self, mapper, propagation: MapFilterPropagation) -> "LazySequence":
        # The propagation mode is fixed for the whole mapped chain.
        state = self._filter_state
        source = None
        if state is FilterState.UNKNOWN and propagation is MapFilterPropagation.DEFERRED:
            source = self
        return LazySequence(
            _Memo(lambda: mapper(self.head()), label="head"),
            _Memo(lambda: self.tail()._map(mapper, propagation), label="tail"),
            state,
            verdict_source=source)

    def filter(self, predicate: Callable[[T], bool]) -> "LazySequence[T]":
        # An element excluded upstream stays excluded; the new predicate never sees it.
        state = FilterState.FILTERED if self.is_filtered() else FilterState.UNKNOWN
        return LazySequence(
            self._head,
            _Memo(lambda: self.tail().filter(predicate), label="tail"),
            state,
            predicate=predicate)

    def limit(self, n: int) -> "LazySequence[T]":
        """Truncate to at most n unfiltered elements. Filtered elements are free."""
        if n <= 0:
            return empty()
        if self.is_filtered():
            return LazySequence(
                self._head,
                _Memo(lambda: self.tail().limit(n), label="tail"),
                FilterState.FILTERED)
        if n == 1:
            tail = _Memo(empty, label="tail")
        else:
            tail = _Memo(lambda: self.tail().limit(n - 1), label="tail")
        return LazySequence(self._head, tail, FilterState.KEPT)

    def take_while(self, predicate: Callable[[T], bool]) -> "LazySequence[T]":
        """Keep elements until the first unfiltered one that fails predicate."""
        if self.is_filtered():
            return LazySequence(
                self._head,
                _Memo(lambda: self.tail().take_while(predicate), label="tail"),
                FilterState.FILTERED)
        head = self.head()
        if not predicate(head):
            return empty()
        return LazySequence(
            _Memo(value=head, label="head"),
            _Memo(lambda: self.tail().take_while(predicate), label="tail"),
            FilterState.KEPT)

    def zip_with(self, other: "LazySequence[U]",
                 combiner: Callable[[T, U], R]) -> "LazySequence[R]":
        """Pair up unfiltered elements of both sequences, stopping at the shorter.

        Only the first node of each side is inspected at call time. While
        either side sits on a filtered node the pair is a filtered node whose
        tail advances that side alone.
        """
        if isinstance(other, _Empty):
            return empty()
        left_filtered = self.is_filtered()
        right_filtered = other.is_filtered()
        if left_filtered or right_filtered:
            return LazySequence(
                self._head if left_filtered else other._head,
                _Memo(lambda: (self.tail() if left_filtered else self).zip_with(
                    other.tail() if right_filtered else other, combiner), label="tail"),
                FilterState.FILTERED)
        return LazySequence(
            _Memo(lambda: combiner(self.head(), other.head()), label="head"),
            _Memo(lambda: self.tail().zip_with(other.tail(), combiner), label="tail"),
            FilterState.KEPT)

    # --------- terminal operations (force evaluation) ----------
    def find_first(self, predicate: Callable[[T], bool], default=None):
        """Return the first unfiltered element matching predicate, or default."""
        for item in self:
            if predicate(item):
                return item
        return default

    def reduce(self, identity: U, accumulator: Callable[[U, T], U]) -> U:
        result = identity
        for item in self:
            result = accumulator(result, item)
        return result

    def count(self) -> int:
        count = 0
        for _ in self:
            count += 1
        return count

    def to_list(self) -> List[T]:
        return list(self)

    def to_array(self) -> List[T]:
        """Alias for to_list()"""
        return self.to_list()

    def for_each(self, action: Callable[[T], Any]) -> None:
        for item in self:
            action(item)

    # --------- iterator protocol ----------
    def __iter__(self) -> Iterator[T]:
        seq = self._first_visible()
        while not isinstance(seq, _Empty):
            yield seq.head()
            seq = seq.tail()._first_visible()

    def __str__(self):
        s = _settings
        parts = []
        seq = self
        while True:
            if isinstance(seq, _Empty):
                parts.append(s.empty_marker)
                break
            parts.append(str(seq._head.value) if seq._head.resolved else s.unevaluated_marker)
            if not seq._tail.resolved:
                parts.append(s.unevaluated_marker)
                break
            seq = seq._tail.value
        return s.separator.join(parts)

    def __repr__(self):
        return f"<LazySequence {self}>"

    # --------- helpers ----------
    def _first_visible(self) -> "LazySequence[T]":
        """Skip the filtered prefix; returns the empty terminal if nothing is left."""
        seq = self
        while not isinstance(seq, _Empty) and seq.is_filtered():
            seq = seq.tail()
        return seq


class _Empty(LazySequence):
    """The empty terminal. It has no head, no tail and no filter state."""

    __slots__ = ()

    def __init__(self):
        pass

    def head(self):
        logger.debug("head() called on empty sequence")
        raise InvalidStateError("calling head() on empty sequence")

    def tail(self):
        logger.debug("tail() called on empty sequence")
        raise InvalidStateError("calling tail() on empty sequence")

    def is_filtered(self):
        return False

    def is_empty(self):
        return True

    def map(self, mapper):
        return self

    def _map(self, mapper, propagation):
        return self

    def filter(self, predicate):
        return self

    def limit(self, n):
        return self

    def take_while(self, predicate):
        return self

    def zip_with(self, other, combiner):
        return self

    def _first_visible(self):
        return self


_EMPTY = _Empty()


def empty() -> LazySequence:
    """Return the empty sequence."""
    return _EMPTY


def generate(supplier: Callable[[], T]) -> LazySequence[T]:
    """Infinite sequence whose every element is supplier()."""
    return LazySequence(
        _Memo(supplier, label="head"),
        _Memo(lambda: generate(supplier), label="tail"))


def iterate(initial: T, next_fn: Callable[[T], T]) -> LazySequence[T]:
    """Infinite sequence initial, next_fn(initial), next_fn(next_fn(initial)), ..."""
    return LazySequence(
        _Memo(value=initial, label="head"),
        _Memo(lambda: iterate(next_fn(initial), next_fn), label="tail"))


LazySequence.empty = staticmethod(empty)
LazySequence.generate = staticmethod(generate)
LazySequence.iterate = staticmethod(iterate)
