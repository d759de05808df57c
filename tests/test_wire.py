import pytest

from wgcore.wire import PADDING_MULTIPLE, calculate_padding_size


def test_unlimited_mtu_pins():
    assert calculate_padding_size(0, 0) == 0
    assert calculate_padding_size(1, 0) == 15
    assert calculate_padding_size(16, 0) == 0


@pytest.mark.parametrize("size", range(0, 200))
def test_unlimited_mtu_rounds_to_multiple(size):
    pad = calculate_padding_size(size, 0)
    assert 0 <= pad < PADDING_MULTIPLE
    assert (size + pad) % PADDING_MULTIPLE == 0


@pytest.mark.parametrize("mtu", [1280, 1420, 1500])
def test_within_mtu_never_exceeds_it(mtu):
    for size in range(mtu - 40, mtu + 1):
        pad = calculate_padding_size(size, mtu)
        assert 0 <= pad < PADDING_MULTIPLE
        assert size + pad <= mtu
        assert (size + pad) % PADDING_MULTIPLE == 0 or size + pad == mtu


def test_capped_at_mtu_just_below():
    assert calculate_padding_size(1419, 1420) == 1
    assert calculate_padding_size(1420, 1420) == 0


@pytest.mark.parametrize("mtu", [1280, 1420])
def test_oversized_packet_uses_last_unit(mtu):
    for size in range(mtu + 1, mtu * 3, 37):
        assert calculate_padding_size(size, mtu) == calculate_padding_size(size % mtu, mtu)


@pytest.mark.parametrize("multiple", [2, 3])
def test_exact_multiple_of_mtu_needs_no_padding(multiple):
    assert calculate_padding_size(1420 * multiple, 1420) == 0


def test_matches_unlimited_when_far_below_mtu():
    for size in range(0, 500):
        assert calculate_padding_size(size, 1420) == calculate_padding_size(size, 0)