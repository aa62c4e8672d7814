"""
Tests for prompt construction.
"""

from comment_generator.services import build_prompt
from comment_generator.services.prompts import max_tokens_for
from comment_generator.services.tone import TONE_DESCRIPTIONS


def test_prompt_with_labels():
    """Test recognized dishes are listed and the category and length appear."""
    prompt = build_prompt("美食", 150, labels=["寿司", "刺身"], tone="热情")

    assert "分类：美食" in prompt
    assert "约 150 字" in prompt
    assert "图片中识别到的菜品：寿司、刺身" in prompt
    assert "围绕识别到的菜品（寿司、刺身）" in prompt
    assert TONE_DESCRIPTIONS["热情"] in prompt


def test_prompt_with_keyword():
    """Test a keyword is used as the theme when no dishes were recognized."""
    prompt = build_prompt("火锅", 120, keyword="牛油锅底")

    assert "关键词/主题：牛油锅底" in prompt
    assert "图片中识别到的菜品" not in prompt
    assert "紧扣关键词" in prompt


def test_broad_category_forbids_specific_dishes():
    """Test umbrella categories without labels ask for a generic review."""
    prompt = build_prompt("亲子", 120, keyword="周末遛娃")
    assert "“亲子”是大分类" in prompt


def test_reference_text_included():
    """Test reference text is quoted, and marked absent otherwise."""
    assert "参考文案：服务很好" in build_prompt("美食", 80, keyword="x", reference=" 服务很好 ")
    assert "参考文案：无" in build_prompt("美食", 80, keyword="x")


def test_formatting_constraints():
    """Test the prompt forbids emoji and list formatting."""
    prompt = build_prompt("美食", 120, labels=["寿司"])
    assert "不使用 Emoji" in prompt
    assert "不要输出条目列表或小标题" in prompt


def test_default_tone_used_when_missing():
    """Test the default tone is applied when no tone is given."""
    assert TONE_DESCRIPTIONS["正常"] in build_prompt("美食", 120, keyword="x")


def test_max_tokens_bounds():
    """Test the token budget scales with length within fixed bounds."""
    assert max_tokens_for(50) == 128
    assert max_tokens_for(150) == 300
    assert max_tokens_for(800) == 1600
    assert max_tokens_for(5000) == 2048
