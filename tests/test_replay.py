import pytest

from wgcore.replay import WINDOW_SIZE, Filter

REJECT_AFTER_MESSAGES = (1 << 64) - (1 << 13) - 1
T_LIM = WINDOW_SIZE + 1


def check(replay_filter, counter, expected):
    assert replay_filter.validate_counter(counter, REJECT_AFTER_MESSAGES) is expected, (
        counter,
        expected,
    )


@pytest.fixture
def replay_filter():
    f = Filter()
    f.reset()
    return f


def test_sequence(replay_filter):
    cases = [
        (0, True),
        (1, True),
        (1, False),
        (9, True),
        (8, True),
        (7, True),
        (7, False),
        (T_LIM, True),
        (T_LIM - 1, True),
        (T_LIM - 1, False),
        (T_LIM - 2, True),
        (2, True),
        (2, False),
        (T_LIM + 16, True),
        (3, False),
        (T_LIM + 16, False),
        (T_LIM * 4, True),
        (T_LIM * 4 - (T_LIM - 1), True),
        (10, False),
        (T_LIM * 4 - T_LIM, False),
        (T_LIM * 4 - (T_LIM + 1), False),
        (T_LIM * 4 - (T_LIM - 2), True),
        (T_LIM * 4 + 1 - T_LIM, False),
        (0, False),
        (REJECT_AFTER_MESSAGES, False),
        (REJECT_AFTER_MESSAGES - 1, True),
        (REJECT_AFTER_MESSAGES, False),
        (REJECT_AFTER_MESSAGES - 1, False),
        (REJECT_AFTER_MESSAGES - 2, True),
        (REJECT_AFTER_MESSAGES + 1, False),
        (REJECT_AFTER_MESSAGES + 2, False),
        (REJECT_AFTER_MESSAGES - 2, False),
        (REJECT_AFTER_MESSAGES - 3, True),
        (0, False),
    ]
    for counter, expected in cases:
        check(replay_filter, counter, expected)


def test_bulk_1(replay_filter):
    for i in range(1, WINDOW_SIZE + 1):
        check(replay_filter, i, True)
    check(replay_filter, 0, True)
    check(replay_filter, 0, False)


def test_bulk_2(replay_filter):
    for i in range(2, WINDOW_SIZE + 2):
        check(replay_filter, i, True)
    check(replay_filter, 1, True)
    check(replay_filter, 0, False)


def test_bulk_3(replay_filter):
    for i in range(WINDOW_SIZE + 1, 0, -1):
        check(replay_filter, i, True)


def test_bulk_4(replay_filter):
    for i in range(WINDOW_SIZE + 2, 1, -1):
        check(replay_filter, i, True)
    check(replay_filter, 0, False)


def test_bulk_5(replay_filter):
    for i in range(WINDOW_SIZE, 0, -1):
        check(replay_filter, i, True)
    check(replay_filter, WINDOW_SIZE + 1, True)
    check(replay_filter, 0, False)


def test_bulk_6(replay_filter):
    for i in range(WINDOW_SIZE, 0, -1):
        check(replay_filter, i, True)
    check(replay_filter, 0, True)
    check(replay_filter, WINDOW_SIZE + 1, True)


def test_limit_is_exclusive():
    f = Filter()
    assert f.validate_counter(5, 5) is False
    assert f.validate_counter(4, 5) is True