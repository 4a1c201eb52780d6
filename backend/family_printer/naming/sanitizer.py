"""
文件名规范化 - 将类型名转为文件系统安全的文件名

规则：
1. 变音/特殊字母按固定表转写为ASCII（ä→ae, ß→ss, Ø→D ...）
2. 名称含方向短语（"von oben nach unten" 等）或电动旋转标记时，
   整个名称中的空格全部替换为下划线；否则空格保持不变

纯函数、幂等：sanitize(sanitize(x)) == sanitize(x)
"""

from __future__ import annotations

# 顺序即替换顺序
TRANSLITERATION_TABLE: tuple[tuple[str, str], ...] = (
    ("Ø", "D"),
    ("Ä", "AE"),
    ("Ö", "OE"),
    ("ö", "oe"),
    ("Ü", "UE"),
    ("ä", "ae"),
    ("ß", "ss"),
    ("ü", "ue"),
)

DIRECTIONAL_PHRASES: tuple[str, ...] = (
    "von oben nach unten",
    "von unten nach oben",
    "von oben",
    "nach oben",
    "von unten",
    "nach unten",
    "von ob nach un",
    "von un nach ob",
    "nach unten von oben",
    "SCHWENKBAR MIT MOTORZOOM",
)


def transliterate(name: str) -> str:
    """按转写表替换特殊字母"""
    for source, target in TRANSLITERATION_TABLE:
        name = name.replace(source, target)
    return name


def has_directional_phrase(name: str) -> bool:
    return any(phrase in name for phrase in DIRECTIONAL_PHRASES)


def sanitize(raw_name: str) -> str:
    """规范化文件名"""
    name = transliterate(raw_name)
    if has_directional_phrase(raw_name) or has_directional_phrase(name):
        name = name.replace(" ", "_")
    return name
