"""
Tests for the news and social sentiment classifiers.
"""
import pytest

from defiresearchagent.reports.sentiment import (
    NewsSentiment,
    SocialSentiment,
    classify_news_sentiment,
    classify_social_sentiment,
    mean_sentiment,
)


class TestNewsSentiment:
    """News scale: strict thresholds at +/-0.2."""

    @pytest.mark.parametrize("score,expected", [
        (0.25, NewsSentiment.POSITIVE),
        (-0.25, NewsSentiment.NEGATIVE),
        (0.0, NewsSentiment.NEUTRAL),
        (0.2, NewsSentiment.NEUTRAL),
        (-0.2, NewsSentiment.NEUTRAL),
        (1.0, NewsSentiment.POSITIVE),
        (-1.0, NewsSentiment.NEGATIVE),
    ])
    def test_classification(self, score, expected):
        assert classify_news_sentiment(score) is expected

    def test_label_text(self):
        assert NewsSentiment.POSITIVE.value == "Positive"
        assert NewsSentiment.NEUTRAL.value == "Neutral"
        assert NewsSentiment.NEGATIVE.value == "Negative"


class TestSocialSentiment:
    """Social scale: strict bands at 0.7 / 0.6 / 0.4."""

    @pytest.mark.parametrize("score,expected", [
        (0.71, SocialSentiment.VERY_POSITIVE),
        (0.65, SocialSentiment.POSITIVE),
        (0.45, SocialSentiment.NEUTRAL),
        (0.39, SocialSentiment.NEGATIVE),
        (0.7, SocialSentiment.POSITIVE),
        (0.6, SocialSentiment.NEUTRAL),
        (0.4, SocialSentiment.NEGATIVE),
        (1.0, SocialSentiment.VERY_POSITIVE),
        (0.0, SocialSentiment.NEGATIVE),
    ])
    def test_classification(self, score, expected):
        assert classify_social_sentiment(score) is expected

    def test_label_text(self):
        assert SocialSentiment.VERY_POSITIVE.value == "very positive"
        assert SocialSentiment.NEGATIVE.value == "negative"


class TestMeanSentiment:

    def test_mean(self):
        assert mean_sentiment([0.5, 0.25, -0.15]) == pytest.approx(0.2)

    def test_empty_is_zero(self):
        assert mean_sentiment([]) == 0.0

    def test_accepts_generators(self):
        assert mean_sentiment(x for x in (1.0, 0.0)) == 0.5
