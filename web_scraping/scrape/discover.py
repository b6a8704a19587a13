import re
from typing import List, Sequence, Union

URL_RE = re.compile(r"https?://\S+")
# sentence punctuation that tends to stick to pasted links
TRAILING_PUNCT_RE = re.compile(r"[.,;)]+$")


def extract_urls_from_text(text: str) -> List[str]:
    return [TRAILING_PUNCT_RE.sub("", m) for m in URL_RE.findall(text)]


def discover(raw: Union[str, Sequence[str]]) -> List[str]:
    """
    Pull candidate URLs out of one block of free text or a list of blocks.

    Order is first-seen across all blocks and duplicates are dropped. Nothing is
    validated here; a malformed URL fails later at fetch time.
    """
    blocks = [raw] if isinstance(raw, str) else list(raw or [])

    seen = set()
    urls: List[str] = []
    for block in blocks:
        if not isinstance(block, str):
            continue
        for url in extract_urls_from_text(block):
            if url and url not in seen:
                seen.add(url)
                urls.append(url)
    return urls
