"""Prompt construction for review generation."""

from comment_generator.services.tone import normalize_tone

SYSTEM_PROMPT = (
    "你是资深大众点评文案策划，擅长写真实、具体、有温度的好评文案，"
    "能够根据不同需求调整语气风格。输出纯文本，不要解释，不要加前后引号。"
)

# Umbrella categories: the review must stay generic unless dishes were recognized
BROAD_CATEGORIES = frozenset(
    {"美食", "亲子", "旅游/出行", "休闲娱乐", "丽人", "结婚", "运动健身", "购物", "生活服务", "酒店"}
)


def max_tokens_for(words: int) -> int:
    """Output token budget for a target word count."""
    return min(2048, max(128, round(words * 2)))


def build_prompt(
    category_name: str,
    words: int,
    labels: list[str] | None = None,
    keyword: str | None = None,
    reference: str | None = None,
    tone: str | None = None,
) -> str:
    """Build the user instruction for one review.

    Args:
        category_name: Resolved category name
        words: Clamped target length
        labels: Recognized dish names, if images were supplied
        keyword: Free-text keyword, used when there are no labels
        reference: Optional reference text to draw on
        tone: Tone key, see ``normalize_tone``

    Returns:
        The complete instruction
    """
    tone_description = normalize_tone(tone)
    subject = "、".join(labels) if labels else (keyword or "").strip()

    lines = [
        f"你是一名资深大众点评老用户，请根据以下信息写一段走心好评文案，约 {words} 字左右。",
        "",
        "【语气要求（最重要）】",
        tone_description,
        "",
        "【基础信息】",
        f"- 分类：{category_name}",
    ]
    if labels:
        lines.append(f"- 图片中识别到的菜品：{subject}")
    else:
        lines.append(f"- 关键词/主题：{subject or category_name}")
    lines.append(f"- 参考文案：{(reference or '').strip() or '无'}")

    lines += [
        "",
        "【内容要求】",
        "1. 贴地气，语言自然真实，像真实用户写的好评，不要像广告。",
        "2. 尽量包含具体细节（环境、服务、口味、性价比等），让人能“脑补出画面”。",
    ]
    if labels:
        lines.append(f"3. 围绕识别到的菜品（{subject}）展开描写，不要编造其他具体菜名。")
    elif category_name in BROAD_CATEGORIES or not subject or subject == category_name:
        lines.append(
            f"3. “{category_name}”是大分类，不要出现具体菜名或特别细的项目，只写通用体验。"
        )
    else:
        lines.append("3. 紧扣关键词展开，细节要合理，不要凭空编造明显不存在的项目。")
    lines += [
        "4. 可以参考以下结构自由发挥（不必全部使用）：场景与店铺亮点、具体体验细节、"
        "推荐的菜/项目以及推荐理由、适合的人群和小建议、温暖结尾或轻微安利。",
        "",
        "【限制】",
        "- 不使用 Emoji 和任何装饰性符号。",
        "- 避免特别夸张和空洞的形容（如“超级无敌”“一生推”“YYDS”等）。",
        "- 不要输出条目列表或小标题，只输出一整段自然连贯的中文好评。",
        "",
        "现在请按照以上要求，直接输出最终成品文案，不要添加任何额外说明。",
    ]
    return "\n".join(lines)
