"""Tests for the buffer kinds."""

import random

import pytest

import combichain as cc


class _CountingProducer:
    """Yields `range(size)`, recording how many times it was pulled."""

    def __init__(self, size: int) -> None:
        self.pulls = 0
        self._it = iter(range(size))

    def __iter__(self) -> "_CountingProducer":
        return self

    def __next__(self) -> int:
        self.pulls += 1
        return next(self._it)


class _NonFused:
    """Signals exhaustion once, then would start yielding again."""

    def __init__(self) -> None:
        self.calls = 0

    def __iter__(self) -> "_NonFused":
        return self

    def __next__(self) -> int:
        self.calls += 1
        if self.calls == 3:
            raise StopIteration
        return self.calls


class TestLazyBuffer:
    """Test `LazyBuffer` against a fully drained producer."""

    def test_random_access_matches_full_materialization(self) -> None:
        """Reads in arbitrary order give the same values as indexing the whole input."""
        rng = random.Random(7)
        full = list(range(30))
        buf = cc.LazyBuffer.from_source(iter(full))
        for index in [rng.randrange(40) for _ in range(100)]:
            expected = cc.Some(full[index]) if index < len(full) else cc.NONE
            assert buf.get(index) == expected

    def test_pulls_never_exceed_highest_index(self) -> None:
        """The producer is pulled at most highest index + 1 times."""
        producer = _CountingProducer(100)
        buf = cc.LazyBuffer(producer)
        highest = -1
        for index in (3, 1, 10, 7, 10, 0, 25):
            buf.get(index)
            highest = max(highest, index)
            assert producer.pulls == highest + 1
            assert len(buf) == highest + 1

    def test_cached_reads_do_not_pull(self) -> None:
        """Already-cached indices are pure reads."""
        producer = _CountingProducer(10)
        buf = cc.LazyBuffer(producer)
        buf.get(4)
        for index in range(5):
            buf.get(index)
        assert producer.pulls == 5

    def test_exhaustion_is_recorded(self) -> None:
        """Once the producer ends, it is never pulled again."""
        producer = _NonFused()
        buf = cc.LazyBuffer(producer)
        assert buf.get(5).is_none()
        assert buf.is_exhausted()
        assert producer.calls == 3
        assert buf.get(10).is_none()
        assert not buf.get_next()
        assert producer.calls == 3
        assert buf.get(1) == cc.Some(2)

    def test_negative_index(self) -> None:
        buf = cc.LazyBuffer.from_source([1, 2, 3])
        assert buf.get(-1).is_none()

    def test_getitem_reads_cache_only(self) -> None:
        """Indexing never pulls, and fails past the cache."""
        buf = cc.LazyBuffer.from_source(iter("abc"))
        buf.get(0)
        assert buf[0] == "a"
        with pytest.raises(IndexError):
            buf[1]
        assert len(buf) == 1

    def test_prefill(self) -> None:
        buf = cc.LazyBuffer.from_source(iter(range(3)))
        buf.prefill(2)
        assert len(buf) == 2
        assert not buf.is_exhausted()
        buf.prefill(10)
        assert len(buf) == 3
        assert buf.is_exhausted()

    def test_iteration_restarts_from_start(self) -> None:
        """Iterating a buffer replays the producer from its first value."""
        buf = cc.LazyBuffer.from_source(x * 2 for x in range(4))
        first = iter(buf)
        assert next(first) == 0
        assert list(buf) == [0, 2, 4, 6]
        assert list(first) == [2, 4, 6]
        assert list(buf) == [0, 2, 4, 6]

    def test_count_remaining(self) -> None:
        """Draining counts what was left without caching it."""
        buf = cc.LazyBuffer.from_source(iter(range(10)))
        buf.get(3)
        assert buf.count_remaining() == 6
        assert len(buf) == 4
        assert buf.is_exhausted()
        assert buf.count_remaining() == 0

    def test_size_hint(self) -> None:
        buf = cc.LazyBuffer.from_source(iter([1, 2, 3]))
        assert buf.size_hint() == cc.SizeHint.exact(3)
        buf.get(1)
        assert buf.size_hint() == cc.SizeHint.exact(3)
        gen = cc.LazyBuffer.from_source(x for x in range(3))
        gen.get(1)
        assert gen.size_hint() == cc.SizeHint(2, cc.NONE)
        gen.get(5)
        assert gen.size_hint() == cc.SizeHint.exact(3)

    def test_repr(self) -> None:
        buf = cc.LazyBuffer.from_source(iter([1, 2]))
        assert repr(buf) == "LazyBuffer(exhausted=False)"
        buf.get(2)
        assert repr(buf) == "LazyBuffer(1, 2, exhausted=True)"


class TestSizedBuffers:
    """Test the buffers whose length is known upfront."""

    def test_seq_buffer_reads_in_place(self) -> None:
        data = [1, 2, 3]
        buf = cc.SeqBuffer.from_source(data)
        data[0] = 10
        assert buf.get(0) == cc.Some(10)
        assert len(buf) == 3
        assert buf.get(3).is_none()

    def test_seq_buffer_over_range(self) -> None:
        buf = cc.SeqBuffer.from_source(range(5, 50, 5))
        assert len(buf) == 9
        assert buf.get(8) == cc.Some(45)
        assert buf.get(9).is_none()

    def test_seq_buffer_rejects_iterators(self) -> None:
        with pytest.raises(TypeError):
            cc.SeqBuffer.from_source(iter([1, 2]))

    def test_eager_buffer_drains_upfront(self) -> None:
        producer = _CountingProducer(4)
        buf = cc.EagerBuffer.from_source(producer)
        assert producer.pulls == 5
        assert len(buf) == 4
        assert buf.get(2) == cc.Some(2)
        assert isinstance(buf, cc.SizedBuffer)
