import pytest
from lazy import LazySequence, InvalidStateError, generate, iterate, empty


class TestConstraints:
    """Test error conditions and edge cases"""

    def test_head_on_empty_raises(self):
        """head() on the empty sequence is an invalid state"""
        with pytest.raises(InvalidStateError):
            empty().head()

    def test_tail_on_empty_raises(self):
        """tail() on the empty sequence is an invalid state"""
        with pytest.raises(InvalidStateError):
            empty().tail()

    def test_walking_off_the_end_raises(self, naturals):
        """Structural access past the last element reaches the empty terminal"""
        last = naturals.limit(1).tail()
        assert last.is_empty()
        with pytest.raises(InvalidStateError, match="head"):
            last.head()

    def test_empty_reports_empty(self):
        """The empty terminal is empty and has no filter verdict to exclude anything"""
        assert empty().is_empty() is True
        assert empty().is_filtered() is False

    def test_infinite_sequence_is_not_empty(self, naturals):
        """Generated and iterated sequences are never empty"""
        assert generate(lambda: None).is_empty() is False
        assert naturals.is_empty() is False

    def test_zero_limit(self, naturals):
        """limit(0) is the empty sequence"""
        assert naturals.limit(0) is empty()
        assert naturals.limit(0).to_list() == []

    def test_negative_limit(self, naturals):
        """A negative limit is treated like zero"""
        assert naturals.limit(-1).to_list() == []
        assert naturals.limit(-10).count() == 0

    def test_limit_larger_than_sequence(self, naturals):
        """limit() on a shorter sequence returns all of it"""
        assert naturals.limit(3).limit(100).to_list() == [1, 2, 3]

    def test_operations_on_empty(self):
        """Combinators on the empty sequence stay empty"""
        assert empty().map(lambda x: x * 2).to_list() == []
        assert empty().filter(lambda x: True).to_list() == []
        assert empty().limit(5).to_list() == []
        assert empty().take_while(lambda x: True).to_list() == []
        assert list(empty()) == []

    def test_none_elements(self):
        """None is an ordinary element value"""
        result = generate(lambda: None).limit(3).to_list()
        assert result == [None, None, None]

    def test_none_element_with_find_first_default(self):
        """find_first can tell a found None from no match via default"""
        missing = object()
        assert generate(lambda: None).find_first(lambda x: True, default=missing) is None

    def test_callback_errors_propagate(self, naturals):
        """Exceptions from mappers and predicates reach the caller unchanged"""
        def broken(x):
            raise ValueError(f"bad element {x}")

        with pytest.raises(ValueError, match="bad element 1"):
            naturals.map(broken).to_list()

        with pytest.raises(ValueError, match="bad element 1"):
            naturals.filter(broken).count()

    def test_long_filtered_run(self, naturals):
        """Long runs of excluded elements are walked without recursion limits"""
        result = naturals.filter(lambda x: x % 5000 == 0).limit(2).to_list()
        assert result == [5000, 10000], f"Unexpected result: {result}"

    def test_static_constructors(self):
        """Factories are also reachable from the class"""
        assert LazySequence.empty() is empty()
        assert LazySequence.iterate(1, lambda x: x * 2).limit(4).to_list() == [1, 2, 4, 8]
        assert LazySequence.generate(lambda: "x").limit(2).to_list() == ["x", "x"]
