import random

import pytest

from cadence.application.utils.shuffle import fisher_yates_shuffle, shuffle_with_answer


def test_shuffle_is_permutation():
    items = list(range(20))
    shuffled = fisher_yates_shuffle(items, random.Random(1))
    assert sorted(shuffled) == items


def test_shuffle_does_not_mutate_input():
    items = ["a", "b", "c", "d"]
    fisher_yates_shuffle(items, random.Random(3))
    assert items == ["a", "b", "c", "d"]


def test_shuffle_seeded_is_repeatable():
    items = list("abcdefgh")
    assert fisher_yates_shuffle(items, random.Random(42)) == fisher_yates_shuffle(
        items, random.Random(42)
    )


def test_shuffle_trivial_inputs():
    assert fisher_yates_shuffle([]) == []
    assert fisher_yates_shuffle(["only"]) == ["only"]


def test_shuffle_with_answer_tracks_correct_option():
    options = ["Paris", "Lyon", "Nice", "Lille"]
    for seed in range(10):
        shuffled, index = shuffle_with_answer(options, 0, random.Random(seed))
        assert shuffled[index] == "Paris"
        assert sorted(shuffled) == sorted(options)


def test_shuffle_with_answer_handles_duplicate_labels():
    options = ["same", "same", "same"]
    _, index = shuffle_with_answer(options, 2, random.Random(5))
    assert 0 <= index < 3


def test_shuffle_with_answer_rejects_bad_index():
    with pytest.raises(IndexError):
        shuffle_with_answer(["a", "b"], 2)
