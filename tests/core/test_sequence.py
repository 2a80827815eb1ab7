from concurrent.futures import ThreadPoolExecutor

from sqlfactories import Sequence, sequence, use_sequence
from sqlfactories.core.sequence import current_sequence, get_default_sequence


def test_sequence_values_differ():
    assert sequence(lambda i: f"unique-string-{i}") != sequence(lambda i: f"unique-string-{i}")


def test_sequence_uses_process_wide_counter():
    first = sequence(lambda i: i)
    second = get_default_sequence()(lambda i: i)

    assert second > first


def test_counter_starts_after_start():
    counter = Sequence()

    assert counter(lambda i: i) == 1
    assert counter(lambda i: i) == 2
    assert Sequence(10).next() == 11


def test_explicit_counter():
    counter = Sequence()

    assert sequence(str, counter=counter) == "1"
    assert sequence(str, counter=counter) == "2"


def test_use_sequence():
    with use_sequence() as counter:
        assert current_sequence.get() is counter
        assert sequence(lambda i: i) == 1
        assert sequence(lambda i: i) == 2

    assert current_sequence.get() is None


def test_use_sequence_nested():
    outer = Sequence(100)
    inner = Sequence(200)

    with use_sequence(outer):
        assert sequence(lambda i: i) == 101
        with use_sequence(inner):
            assert sequence(lambda i: i) == 201
        assert sequence(lambda i: i) == 102


def test_sequence_is_unique_across_threads():
    counter = Sequence()

    def work():
        return [counter(lambda i: i) for _ in range(1000)]

    with ThreadPoolExecutor(max_workers=8) as executor:
        futures = [executor.submit(work) for _ in range(8)]
        values = [value for future in futures for value in future.result()]

    assert len(values) == 8000
    assert set(values) == set(range(1, 8001))


def test_process_wide_sequence_is_unique_across_threads():
    def work():
        return [sequence(lambda i: f"user-{i}@example.com") for _ in range(500)]

    with ThreadPoolExecutor(max_workers=4) as executor:
        futures = [executor.submit(work) for _ in range(4)]
        values = [value for future in futures for value in future.result()]

    assert len(set(values)) == 2000


def test_repr():
    assert repr(Sequence(3)) == "Sequence(start=3)"
