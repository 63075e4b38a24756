import math
import unittest

from leadradar.core.similarity import jaccard_similarity, title_similarity, tokenize


SAMPLES = [
    "",
    "Need Facebook Ads Help",
    "need facebook ads help!!",
    "Google Ads Specialist Needed",
    "Looking for a Shopify developer, budget $5k/month",
    "a an of to",
    "PPC expert wanted for ecommerce brand",
]


class TokenizeTests(unittest.TestCase):
    def test_lowercases_and_strips_punctuation(self):
        self.assertEqual(tokenize("Need Facebook-Ads HELP!"), ["need", "facebook", "ads", "help"])

    def test_drops_short_tokens(self):
        self.assertEqual(tokenize("we are a big co in LA"), ["are", "big"])

    def test_splits_on_whitespace_runs(self):
        self.assertEqual(tokenize("  shopify\n\tstore   owner "), ["shopify", "store", "owner"])

    def test_punctuation_becomes_separator(self):
        self.assertEqual(tokenize("$5k/month"), ["month"])
        self.assertEqual(tokenize("e-commerce"), ["commerce"])

    def test_empty_and_missing_inputs(self):
        self.assertEqual(tokenize(""), [])
        self.assertEqual(tokenize(None), [])
        self.assertEqual(tokenize(42), [])

    def test_keeps_repeated_tokens(self):
        self.assertEqual(tokenize("ads ads ads"), ["ads", "ads", "ads"])


class JaccardSimilarityTests(unittest.TestCase):
    def test_identical_text_scores_one(self):
        for text in SAMPLES:
            if tokenize(text):
                self.assertEqual(jaccard_similarity(text, text), 1.0)

    def test_two_empty_strings_score_zero_not_nan(self):
        score = jaccard_similarity("", "")
        self.assertFalse(math.isnan(score))
        self.assertEqual(score, 0.0)

    def test_tokenless_inputs_score_zero(self):
        self.assertEqual(jaccard_similarity("a an of", "to be"), 0.0)
        self.assertEqual(jaccard_similarity(None, None), 0.0)

    def test_one_empty_side_scores_zero(self):
        self.assertEqual(jaccard_similarity("Need Facebook Ads Help", ""), 0.0)

    def test_symmetric(self):
        for a in SAMPLES:
            for b in SAMPLES:
                self.assertEqual(jaccard_similarity(a, b), jaccard_similarity(b, a))

    def test_range(self):
        for a in SAMPLES:
            for b in SAMPLES:
                score = jaccard_similarity(a, b)
                self.assertGreaterEqual(score, 0.0)
                self.assertLessEqual(score, 1.0)

    def test_set_semantics_collapse_repeats(self):
        self.assertEqual(jaccard_similarity("ads ads ads help", "ads help"), 1.0)

    def test_known_ratio(self):
        # {need, google, ads, help, asap} vs the same plus {now}
        self.assertAlmostEqual(
            jaccard_similarity("Need Google Ads Help ASAP", "Need Google Ads Help ASAP Now"),
            5 / 6,
        )

    def test_case_and_punctuation_insensitive(self):
        self.assertEqual(jaccard_similarity("Need Facebook Ads Help", "need facebook ads help!!"), 1.0)

    def test_title_similarity_matches_jaccard(self):
        self.assertEqual(
            title_similarity("Google Ads Specialist Needed", "Need Facebook Ads Help"),
            jaccard_similarity("Google Ads Specialist Needed", "Need Facebook Ads Help"),
        )


if __name__ == "__main__":
    unittest.main()
