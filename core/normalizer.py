"""
文本规范化与关键词提取。

目录中既有带变音符的正文（Absauggeräte），也有全大写的 ASCII 转写（ABSAUGGERAETE），
规范化后两种写法须得到相同的词流。
"""

from __future__ import annotations

import re

# 关键词最短长度（字符数）
MIN_KEYWORD_LENGTH = 4

_DIACRITICS = {
    "ä": "ae", "ö": "oe", "ü": "ue", "Ä": "Ae", "Ö": "Oe", "Ü": "Ue", "ß": "ss",
    "é": "e", "è": "e", "ê": "e", "ë": "e", "É": "E", "È": "E", "Ê": "E", "Ë": "E",
    "à": "a", "â": "a", "À": "A", "Â": "A",
    "î": "i", "ï": "i", "ì": "i", "Î": "I", "Ï": "I", "Ì": "I",
    "ô": "o", "ò": "o", "Ô": "O", "Ò": "O",
    "ù": "u", "û": "u", "Ù": "U", "Û": "U",
    "ç": "c", "Ç": "C",
}
_DIACRITIC_TABLE = str.maketrans(_DIACRITICS)

_SPLIT_RE = re.compile(r"[\W_]+")

# 德/法/意/英 虚词及目录常见填充词（均为规范化、小写后的形式）
STOP_WORDS: frozenset[str] = frozenset(
    {
        # de
        "fuer", "und", "oder", "mit", "ohne", "eine", "einer", "eines", "einem", "einen",
        "dies", "diese", "dieser", "dieses", "sowie", "auch", "nach", "durch", "ueber",
        "unter", "beim", "bzw", "inkl", "inklusive", "alle", "andere", "anderen", "weitere",
        "sind", "wird", "werden", "kann", "nicht", "nur", "zum", "zur", "pro", "gemaess",
        "stueck", "miete", "kauf", "mietpreis", "kaufpreis", "jahr", "monat", "tage",
        # fr
        "pour", "avec", "sans", "dans", "une", "des", "les", "aux", "leur", "leurs",
        "cette", "autre", "autres", "selon", "plus", "sont", "etre", "chez", "entre",
        "piece", "location", "achat", "prix", "annee", "mois", "jours",
        # it
        "per", "con", "senza", "della", "delle", "degli", "dello", "nella", "nelle",
        "alla", "alle", "oppure", "sono", "essere", "altri", "altre", "secondo", "questo",
        "questa", "pezzo", "noleggio", "acquisto", "prezzo", "anno", "mese", "giorni",
        # en
        "with", "without", "from", "that", "this", "other", "others", "each", "into",
        "only", "also", "incl", "including", "piece", "pieces", "rental", "purchase",
        "price", "year", "month", "days",
    }
)


def normalize(text: str) -> str:
    """将德语变音、ß、法/意重音及软音符替换为 ASCII 形式；大小写由调用方处理。"""
    return text.translate(_DIACRITIC_TABLE)


def extract_keywords(text: str | None) -> set[str]:
    """
    从文本首行提取关键词：规范化、小写、按非字母数字切分，
    丢弃短于 4 个字符的词与停用词，返回去重后的集合。后续行视为附注，不参与匹配。
    """
    if not text:
        return set()
    lines = text.splitlines()
    normalized = normalize(lines[0] if lines else "").lower()
    return {
        token
        for token in _SPLIT_RE.split(normalized)
        if len(token) >= MIN_KEYWORD_LENGTH and token not in STOP_WORDS
    }
