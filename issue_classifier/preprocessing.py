import re
from typing import Iterable, List

_URL_RE = re.compile(r"https?://\S+|www\.\S+")
_WS_RE = re.compile(r"\s+")


def normalize(text: str) -> str:
    text = str(text).strip()
    text = _URL_RE.sub("[URL]", text)
    text = _WS_RE.sub(" ", text)
    return text


def normalize_texts(texts: Iterable[str]) -> List[str]:
    # Runs inside the fitted pipeline, so a reloaded model normalizes the same way
    return [normalize(t) for t in texts]
