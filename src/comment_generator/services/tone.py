"""Tone normalization.

Maps a caller's tone key to the instruction fragment placed in the prompt.
"""

DEFAULT_TONE = "正常"

TONE_DESCRIPTIONS: dict[str, str] = {
    "正常": "语气自然真诚，像普通顾客分享真实体验，不刻意煽情，也不过分平淡。",
    "热情": "语气热情洋溢、积极正面，多用感叹和真诚的赞美，让人感受到满满的推荐意愿。",
    "幽默": "语气轻松幽默，可以适当调侃和俏皮比喻，读起来有趣但不油腻、不低俗。",
    "文艺": "语气细腻文艺，注重氛围和感受的描写，用词优美但不矫揉造作。",
    "简洁": "语气简洁干脆，句子短、信息密度高，直接说清楚亮点，不堆砌形容词。",
    "专业": "语气客观专业，像资深美食/生活博主，从品质、细节、性价比等角度有理有据地评价。",
}

TONE_ALIASES: dict[str, str] = {
    "normal": "正常",
    "enthusiastic": "热情",
    "humorous": "幽默",
    "funny": "幽默",
    "literary": "文艺",
    "concise": "简洁",
    "professional": "专业",
}


def normalize_tone(tone_key: str | None = None) -> str:
    """Return the prompt fragment for a tone key.

    Recognized keys are the Chinese names in ``TONE_DESCRIPTIONS`` and their
    English aliases, matched case-insensitively. Anything else, including
    None, yields the default tone.
    """
    key = (tone_key or "").strip()
    key = TONE_ALIASES.get(key.lower(), key)
    return TONE_DESCRIPTIONS.get(key, TONE_DESCRIPTIONS[DEFAULT_TONE])
