from __future__ import annotations

import numpy as np
import pytest

from biski64.core import WEYL_INCREMENT, InvalidArgumentError, seed
from biski64.splitmix import MASK64
from biski64.streams import StreamBank, StreamFamily, derive_seed, seed_for_stream, stream_offset

STREAM_FIRST_OUTPUTS_67890 = [
    (4202040779644952251, 9275925132021407108),
    (6747326080462715569, 8720415341947046824),
    (14199403063284931790, 13010870225388129714),
    (10399043221154521286, 2970520977494937169),
]


def test_four_streams_reference_outputs() -> None:
    for index, expected in enumerate(STREAM_FIRST_OUTPUTS_67890):
        state = seed_for_stream(67890, index, 4)
        assert (state.next_u64(), state.next_u64()) == expected


def test_four_streams_first_outputs_are_pairwise_distinct() -> None:
    firsts = [seed_for_stream(123456789, i, 4).next_u64() for i in range(4)]

    assert len(set(firsts)) == 4


def test_single_stream_matches_plain_seed() -> None:
    assert seed_for_stream(67890, 0, 1) == seed(67890)
    assert seed_for_stream(12345, 0, 1).next_u64() == seed(12345).next_u64()


def test_stream_offsets_are_evenly_spaced_on_weyl_cycle() -> None:
    assert stream_offset(0, 4) == 0
    assert stream_offset(1, 4) == 0xA666666666666667
    assert stream_offset(2, 4) == 0x4CCCCCCCCCCCCCCE
    assert stream_offset(3, 4) == 0xF333333333333335

    spacing = ((MASK64 // 4) * WEYL_INCREMENT) & MASK64
    for index in range(3):
        gap = (stream_offset(index + 1, 4) - stream_offset(index, 4)) & MASK64
        assert gap == spacing


def test_streams_share_mix_words_and_differ_in_weyl_component() -> None:
    # All streams start from the same mix/loop_mix; only fast_loop is offset.
    a = seed_for_stream(99, 0, 3)
    b = seed_for_stream(99, 2, 3)

    assert a != b
    assert a.fast_loop != b.fast_loop


def test_interleaved_streams_match_isolated_streams() -> None:
    isolated = []
    for index in range(3):
        state = seed_for_stream(2024, index, 3)
        isolated.append([state.next_u64() for _ in range(50)])

    states = [seed_for_stream(2024, index, 3) for index in range(3)]
    interleaved: list[list[int]] = [[], [], []]
    for _ in range(50):
        for index in (2, 0, 1):
            interleaved[index].append(states[index].next_u64())

    assert interleaved == isolated


def test_stream_index_out_of_range_fails() -> None:
    with pytest.raises(InvalidArgumentError):
        seed_for_stream(42, 2, 2)

    assert seed_for_stream(42, 1, 2) is not None


@pytest.mark.parametrize(
    "stream_index, total_streams",
    [(0, 0), (-1, 2), (0, -3), (5, 5), (1, 1), (0, 1 << 63)],
)
def test_invalid_stream_arguments(stream_index: int, total_streams: int) -> None:
    with pytest.raises(InvalidArgumentError):
        seed_for_stream(42, stream_index, total_streams)


def test_stream_arguments_must_be_integers() -> None:
    with pytest.raises(InvalidArgumentError):
        seed_for_stream(42, 0.0, 2)
    with pytest.raises(ValueError):
        stream_offset(True, 2)


def test_stream_bank_matches_scalar_streams() -> None:
    bank = StreamBank.from_seed(67890, 4)
    taken = bank.take(32)

    assert taken.shape == (32, 4)
    assert taken.dtype == np.uint64
    for index in range(4):
        state = seed_for_stream(67890, index, 4)
        assert [int(v) for v in taken[:, index]] == [state.next_u64() for _ in range(32)]


def test_stream_bank_single_stream_matches_seed() -> None:
    bank = StreamBank.from_seed(12345, 1)
    state = seed(12345)

    assert [int(bank.next_u64()[0]) for _ in range(5)] == [state.next_u64() for _ in range(5)]


def test_stream_bank_round_trips_states() -> None:
    states = [seed_for_stream(5, i, 6) for i in range(6)]
    bank = StreamBank.from_states([s.copy() for s in states])

    assert len(bank) == 6
    assert bank.state(3) == states[3]

    step = bank.next_u64()
    assert [int(v) for v in step] == [s.next_u64() for s in states]
    assert bank.state(5) == states[5]


def test_stream_bank_rejects_bad_input() -> None:
    with pytest.raises(ValueError):
        StreamBank.from_states([])
    with pytest.raises(ValueError):
        StreamBank(np.zeros(2), np.zeros(3), np.zeros(2))
    with pytest.raises(InvalidArgumentError):
        StreamBank.from_seed(1, 0)
    with pytest.raises(InvalidArgumentError):
        StreamBank.from_seed(1, 2).take(-1)


def test_stream_family_states_and_bank_agree() -> None:
    family = StreamFamily(777, 3)
    bank = family.bank()

    assert family.states() == [seed_for_stream(777, i, 3) for i in range(3)]
    assert [int(v) for v in bank.next_u64()] == [s.next_u64() for s in family.states()]


def test_stream_family_fork_is_deterministic() -> None:
    family = StreamFamily(777, 2)

    a = family.fork("workers")
    b = family.fork("workers")
    c = family.fork("checks")

    assert a == b
    assert a.seed != c.seed
    assert a.total_streams == 2
    assert a.seed == derive_seed(777, "workers")
    assert a.state(1) == b.state(1)

    with pytest.raises(ValueError):
        family.fork("")


def test_unseeded_streams_differ_and_keep_spacing() -> None:
    a = seed_for_stream(None, 1, 4)
    b = seed_for_stream(None, 1, 4)

    assert a != b
    assert a.fast_loop == b.fast_loop


def test_unseeded_stream_checks_arguments_before_drawing_entropy(monkeypatch) -> None:
    def _fail(salt: int = 0) -> int:
        raise AssertionError("entropy drawn before argument checks")

    monkeypatch.setattr("biski64.streams.entropy_seed", _fail)

    with pytest.raises(InvalidArgumentError):
        seed_for_stream(None, 2, 2)
    with pytest.raises(InvalidArgumentError):
        seed_for_stream(None, 0, 0)


def test_stream_bank_take_requires_integer_steps() -> None:
    bank = StreamBank.from_seed(1, 2)
    before = bank.state(0)

    with pytest.raises(InvalidArgumentError):
        bank.take(2.0)
    with pytest.raises(InvalidArgumentError):
        bank.take(True)
    assert bank.state(0) == before
