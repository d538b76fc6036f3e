KEYWORD_STRIP_CHARS = ".,!?:;\"'"
MIN_KEYWORD_LENGTH = 4


def extract_keywords(content: str) -> frozenset[str]:
    """Return the lowercase words of `content` longer than three characters, edge punctuation removed."""
    if not content:
        return frozenset()
    keywords = set()
    for word in content.split():
        word = word.strip(KEYWORD_STRIP_CHARS).lower()
        if len(word) >= MIN_KEYWORD_LENGTH:
            keywords.add(word)
    return frozenset(keywords)
