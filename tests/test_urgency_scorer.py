from voice2action.services.sentiment import (
    AfinnUrgencyScorer,
    MockUrgencyScorer,
    build_urgency_scorer,
)
from voice2action.services.sentiment import registry


class TestMockScorer:
    def test_sums_word_weights(self):
        scorer = MockUrgencyScorer()
        assert scorer.score("Dangerous broken road") == -5
        assert scorer.score("Thanks, it is fixed") == 4

    def test_unknown_and_blank_text_score_zero(self):
        scorer = MockUrgencyScorer()
        assert scorer.score("street light") == 0
        assert scorer.score("") == 0
        assert scorer.score(None) == 0

    def test_custom_weights(self):
        scorer = MockUrgencyScorer(weights={"pothole": -4})
        assert scorer.score("pothole pothole") == -8
        assert scorer.score("dangerous") == 0


class TestAfinnScorer:
    def test_negative_text_scores_below_positive_text(self):
        scorer = AfinnUrgencyScorer()
        assert scorer.score("This is terrible and dangerous") < 0
        assert scorer.score("Good work, thank you") > 0

    def test_blank_text_scores_zero(self):
        assert AfinnUrgencyScorer().score("   ") == 0

    def test_model_info(self):
        info = AfinnUrgencyScorer().get_model_info()
        assert info["name"] == "afinn"
        assert info["language"] == "en"


class TestRegistry:
    def test_mock_provider(self):
        assert isinstance(build_urgency_scorer("mock"), MockUrgencyScorer)

    def test_afinn_provider(self):
        assert isinstance(build_urgency_scorer("AFINN"), AfinnUrgencyScorer)

    def test_unknown_provider_uses_afinn(self):
        assert isinstance(build_urgency_scorer("vader"), AfinnUrgencyScorer)

    def test_falls_back_to_mock_when_lexicon_missing(self, monkeypatch):
        def _missing(language="en"):
            raise OSError("lexicon file not found")

        monkeypatch.setattr(registry, "AfinnUrgencyScorer", _missing)
        assert isinstance(build_urgency_scorer("afinn"), MockUrgencyScorer)
