import threading

from pytest import mark, raises

from .tally import KeywordTally, count_keywords

class TestCountKeywords:
    def test_counts_each_keyword(self):
        assert count_keywords("dog eats cat food", ["cat", "dog"]) == {"cat": 1, "dog": 1}

    def test_overlapping_matches_count_once(self):
        assert count_keywords("aaa", ["aa"]) == {"aa": 1}
        assert count_keywords("aaaa", ["aa"]) == {"aa": 2}

    @mark.parametrize("line", ["cat", "CAT", "CaT", "a cAt!"])
    def test_case_insensitive(self, line):
        assert count_keywords(line, ["Cat"]) == {"Cat": 1}

    def test_substrings_inside_words(self):
        assert count_keywords("concatenate cats", ["cat"]) == {"cat": 2}

    def test_no_keywords(self):
        assert count_keywords("anything", []) == {}

    def test_duplicate_keywords_collapse(self):
        assert count_keywords("cat cat", ["cat", "cat"]) == {"cat": 2}

@mark.usefixtures("threading_backend")
class TestKeywordTally:
    def test_starts_at_zero(self):
        tally = KeywordTally(["cat", "dog"])
        assert tally.counts() == {"cat": 0, "dog": 0}
        assert tally.total == 0

    def test_merge_adds_counts_and_total(self):
        tally = KeywordTally(["cat", "dog"])
        tally.merge({"cat": 2, "dog": 1})
        tally.merge({"cat": 1, "dog": 0})
        assert tally.counts() == {"cat": 3, "dog": 1}
        assert tally.total == 4
        assert tally.count("cat") == 3

    def test_unknown_keyword_changes_nothing(self):
        tally = KeywordTally(["cat"])
        with raises(KeyError):
            tally.merge({"cat": 1, "bird": 1})
        assert tally.snapshot() == ({"cat": 0}, 0)

    def test_duplicates_share_a_counter(self):
        tally = KeywordTally(["cat", "dog", "cat"])
        assert tally.keywords == ["cat", "dog"]
        tally.merge({"cat": 1})
        assert tally.counts() == {"cat": 1, "dog": 0}

    def test_concurrent_merges_lose_nothing(self):
        tally = KeywordTally(["cat", "dog"])

        def merge_many():
            for _ in range(2000):
                tally.merge({"cat": 1, "dog": 2})

        threads = [threading.Thread(target=merge_many) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        counts, total = tally.snapshot()
        assert counts == {"cat": 16000, "dog": 32000}
        assert total == sum(counts.values())
