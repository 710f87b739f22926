import pytest

from lyricsync.core.syllables import count_syllables, distribute_time_by_syllables


class TestCountSyllables:
    @pytest.mark.parametrize(
        "word,expected",
        [
            ("a", 1),
            ("la", 1),
            ("the", 1),
            ("make", 1),
            ("hello", 2),
            ("table", 2),
            ("beautiful", 3),
            ("cooperate", 3),
            ("rhythm", 1),
        ],
    )
    def test_common_words(self, word, expected):
        assert count_syllables(word) == expected

    def test_ignores_case_and_punctuation(self):
        assert count_syllables("Hello,") == count_syllables("hello")
        assert count_syllables("(HELLO!)") == 2

    def test_non_letters_only_counts_as_one(self):
        assert count_syllables("1234") == 1
        assert count_syllables("") == 1
        assert count_syllables("...") == 1

    def test_accented_vowels_are_vowels(self):
        assert count_syllables("café") == 2
        assert count_syllables("corazón") == 3

    def test_diphthong_weight_is_partial(self):
        # Default weight keeps "oo" from dropping a whole syllable
        assert count_syllables("cooperate", diphthong_weight=1.0) == 2
        assert count_syllables("cooperate", diphthong_weight=0.0) == 3

    def test_never_below_one(self):
        assert count_syllables("queue", diphthong_weight=1.0) >= 1

    def test_longer_words_weigh_more(self):
        assert count_syllables("fantasy") > count_syllables("real")
        assert count_syllables("sympathy") > count_syllables("boy")


class TestDistributeTime:
    def test_empty(self):
        assert distribute_time_by_syllables([], 0.0, 3.0) == []

    def test_single_word_spans_line(self):
        words = distribute_time_by_syllables(["a"], 10.0, 14.0)
        assert len(words) == 1
        assert (words[0].text, words[0].start_time, words[0].end_time) == ("a", 10.0, 14.0)

    def test_equal_syllables_split_evenly(self):
        words = distribute_time_by_syllables(["la", "la", "la"], 0.0, 3.0)
        assert [w.start_time for w in words] == pytest.approx([0.0, 1.0, 2.0])
        assert [w.end_time for w in words] == pytest.approx([1.0, 2.0, 3.0])

    def test_weighted_by_syllables(self):
        words = distribute_time_by_syllables(["hello", "la"], 0.0, 3.0)
        assert words[0].text == "hello"
        assert words[0].end_time == pytest.approx(2.0)
        assert words[1].start_time == pytest.approx(2.0)

    def test_contiguous_and_pinned_to_line_end(self):
        words = distribute_time_by_syllables(
            ["a", "beautiful", "day", "outside"], 1.1, 2.3
        )
        assert words[0].start_time == 1.1
        assert words[-1].end_time == 2.3
        for prev, nxt in zip(words, words[1:]):
            assert nxt.start_time == prev.end_time
            assert prev.start_time <= prev.end_time

    def test_zero_length_line(self):
        words = distribute_time_by_syllables(["a", "b"], 5.0, 5.0)
        assert all(w.start_time == 5.0 and w.end_time == 5.0 for w in words)
