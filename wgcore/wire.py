"""Sizing rules for transport messages on the wire."""

PADDING_MULTIPLE = 16


def calculate_padding_size(packet_size: int, mtu: int) -> int:
    """Return how many zero bytes to append before encrypting a packet.

    Content is padded up to a multiple of ``PADDING_MULTIPLE``. The padded
    last unit never exceeds ``mtu``. An ``mtu`` of 0 means no limit.
    """
    last_unit = packet_size
    if mtu == 0:
        return ((last_unit + PADDING_MULTIPLE - 1) & ~(PADDING_MULTIPLE - 1)) - last_unit
    if last_unit > mtu:
        last_unit %= mtu
    padded_size = min((last_unit + PADDING_MULTIPLE - 1) & ~(PADDING_MULTIPLE - 1), mtu)
    return padded_size - last_unit