"""Tests for genre and region tagging."""

from samachar.core.classifier import (
    DEFAULT_GENRE,
    GENRE_CANDIDATES,
    REGION_INDIA,
    REGION_INTERNATIONAL,
    REGION_UTTARAKHAND,
    GENRE_RULES,
    classify,
    detect_genre,
    detect_region,
)
from samachar.core.images import GENERIC_IMAGE, GENRE_IMAGES, REGION_IMAGES, default_image


class TestDetectGenre:
    """Tests for detect_genre."""

    def test_hindi_keyword(self) -> None:
        """Devanagari keywords match as substrings."""
        assert detect_genre("पंचायत चुनाव घोषित") == "Politics"
        assert detect_genre("देहरादून में भारी बारिश") == "Weather"

    def test_latin_keyword_needs_word_boundary(self) -> None:
        """Latin keywords do not match inside other words."""
        assert detect_genre("Visit to Taipei museum") == DEFAULT_GENRE
        assert detect_genre("New AI model released") == "Technology"

    def test_rule_order_breaks_ties(self) -> None:
        """Text matching several genres takes the earliest rule."""
        assert detect_genre("Police arrest minister after election rally") == "Crime"
        assert detect_genre("Minister opens new cricket stadium") == "Politics"

    def test_every_genre_is_a_candidate(self) -> None:
        """Rules only produce known genres."""
        assert all(genre in GENRE_CANDIDATES for genre, _ in GENRE_RULES)
        assert DEFAULT_GENRE in GENRE_CANDIDATES

    def test_candidates_follow_rule_order(self) -> None:
        """Candidate genres list the rules in evaluation order, default last."""
        assert GENRE_CANDIDATES == [genre for genre, _ in GENRE_RULES] + [DEFAULT_GENRE]


class TestDetectRegion:
    """Tests for detect_region."""

    def test_regional_tier_first(self) -> None:
        """Uttarakhand places beat national keywords."""
        assert detect_region("दिल्ली से हरिद्वार तक यात्रा") == REGION_UTTARAKHAND

    def test_national_tier(self) -> None:
        """National keywords map to india."""
        assert detect_region("Delhi metro fares revised") == REGION_INDIA

    def test_source_host_counts(self) -> None:
        """The source host is checked alongside the text."""
        assert detect_region("Local fair", "uttarakhand.example.com") == REGION_UTTARAKHAND

    def test_default_international(self) -> None:
        """No match means international."""
        assert detect_region("Summit in Paris", "world.example.com") == REGION_INTERNATIONAL


class TestClassify:
    """Tests for classify."""

    def test_deterministic(self) -> None:
        """The same input always yields the same tags."""
        text = "नैनीताल में क्रिकेट मैच"
        first = classify(text)
        assert all(classify(text) == first for _ in range(5))
        assert first.genre == "Sports"
        assert first.region == REGION_UTTARAKHAND


class TestDefaultImage:
    """Tests for default_image."""

    def test_genre_then_region_then_generic(self) -> None:
        """Genre images take precedence over region images."""
        assert default_image("Politics", "india") == GENRE_IMAGES["Politics"]
        assert default_image("Other", "india") == REGION_IMAGES["india"]
        assert default_image("Other", "mars") == GENERIC_IMAGE
