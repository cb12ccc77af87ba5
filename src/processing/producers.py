import re
from typing import Any, Dict, Iterable, List, Optional

PRODUCER_KEYWORDS = ("produced by", "producer:", "프로듀서:", "제작:")
MAX_PRODUCER_NAME_LENGTH = 50

_DELIMITERS = re.compile(r",|\s+and\s+|\s*&\s*", re.IGNORECASE)


def _candidates(text: str) -> Iterable[str]:
    lowered = text.lower()
    for keyword in PRODUCER_KEYWORDS:
        if keyword not in lowered:
            continue
        parts = re.split(re.escape(keyword), text, maxsplit=1, flags=re.IGNORECASE)
        if len(parts) < 2:
            continue
        name = _DELIMITERS.split(parts[1])[0].strip()
        name = re.sub(r"\.$", "", name).strip()
        if name and len(name) < MAX_PRODUCER_NAME_LENGTH:
            yield name


def extract_producers(
    copyrights: Iterable[str] = (),
    label: Optional[str] = None,
) -> List[str]:
    """
    Scan copyright notices, then the label, for producer credits.
    Names are de-duplicated and kept in encounter order.
    """
    producers: Dict[str, None] = {}
    texts = [text for text in copyrights if text]
    if label:
        texts.append(label)
    for text in texts:
        for name in _candidates(text):
            producers.setdefault(name, None)
    return list(producers)


def producers_from_album(album: Dict[str, Any]) -> List[str]:
    copyrights = [
        entry.get("text", "")
        for entry in album.get("copyrights") or []
        if isinstance(entry, dict)
    ]
    return extract_producers(copyrights, album.get("label"))
