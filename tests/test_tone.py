"""
Tests for tone normalization.
"""

import pytest

from comment_generator.services import normalize_tone
from comment_generator.services.tone import DEFAULT_TONE, TONE_DESCRIPTIONS


@pytest.mark.parametrize("key", list(TONE_DESCRIPTIONS))
def test_known_keys(key):
    """Test every known key maps to its own description."""
    assert normalize_tone(key) == TONE_DESCRIPTIONS[key]


@pytest.mark.parametrize(
    "alias, key",
    [("enthusiastic", "热情"), ("Humorous", "幽默"), (" professional ", "专业"), ("NORMAL", "正常")],
)
def test_english_aliases(alias, key):
    """Test English aliases resolve case-insensitively."""
    assert normalize_tone(alias) == TONE_DESCRIPTIONS[key]


@pytest.mark.parametrize("key", [None, "", "   ", "sarcastic", "愤怒"])
def test_unknown_keys_fall_back_to_default(key):
    """Test missing or unknown keys yield the default tone."""
    assert normalize_tone(key) == TONE_DESCRIPTIONS[DEFAULT_TONE]


def test_descriptions_are_distinct():
    """Test no two tones share a description."""
    assert len(set(TONE_DESCRIPTIONS.values())) == len(TONE_DESCRIPTIONS)
