"""Plain-text cleanup for model replies.

The widget renders replies with ``textContent``, so anything markdown-ish the
model emits despite its instructions shows up literally. ``sanitize`` strips
that decoration with a fixed sequence of regex passes and keeps the words,
URLs and line structure.
"""

from __future__ import annotations

import re
from typing import Any, List


# URLs are swapped for these while the marker passes run.
_URL_OPEN = "\ue000"
_URL_CLOSE = "\ue001"
_PLACEHOLDER = re.compile(_URL_OPEN + r"(\d+)" + _URL_CLOSE)

_LINK = re.compile(r"\[([^\[\]\n]+)\]\(((?:[^()\s]|\([^()\s]*\))+)\)")
_BARE_URL = re.compile(
    r"https?://(?:[^\s()<>\[\]*`" + _URL_OPEN + _URL_CLOSE + r"]|\([^\s()<>*`]*\))+"
)

_CODE_FENCE = re.compile(r"```[\s\S]*?```")
_FENCE_MARKER = re.compile(r"```[\w-]*[ \t]*\n?")
_BACKTICKS = re.compile(r"`+")

_HEADING = re.compile(r"^[ \t]{0,3}#{1,6}[ \t]+", re.MULTILINE)

_BOLD_STAR = re.compile(r"\*\*(?=[^\s*])(.+?)(?<=[^\s*])\*\*")
_BOLD_UNDERSCORE = re.compile(r"(?<!\w)__(?=[^\s_])(.+?)(?<=[^\s_])__(?!\w)")
_ITALIC_STAR = re.compile(r"(?<!\w)\*(?=\S)([^*\n]+?)(?<=\S)\*(?!\w)")
_ITALIC_UNDERSCORE = re.compile(r"(?<!\S)_(?=\S)([^_\n]+?)(?<=\S)_(?!\w)")
# Unclosed bold, e.g. a reply cut off mid-phrase.
_DOUBLE_MARKER = re.compile(r"\*{2,}|_{2,}")

_BLOCKQUOTE = re.compile(r"^[ \t]{0,3}>[ \t]*", re.MULTILINE)

_HORIZONTAL_RULE = re.compile(r"^[ \t]*([-*_])(?:[ \t]*\1){2,}[ \t]*$", re.MULTILINE)

_BULLET = re.compile(r"^[ \t]*[-*+•][ \t]+", re.MULTILINE)
_NUMBERED = re.compile(r"^([ \t]*)(\d{1,3})\.[ \t]+", re.MULTILINE)

_STRAY_SYMBOLS = re.compile(r"[#•]")

_BLANK_RUN = re.compile(r"\n(?:[ \t]*\n){2,}")


def _unfence(match: "re.Match[str]") -> str:
    block = match.group(0)
    return _FENCE_MARKER.sub("", block).replace("```", "").strip()


def _sanitize_once(text: str) -> str:
    urls: List[str] = []

    def stash(url: str) -> str:
        urls.append(url)
        return f"{_URL_OPEN}{len(urls) - 1}{_URL_CLOSE}"

    text = _LINK.sub(lambda m: f"[{m.group(1)}]({stash(m.group(2))})", text)
    text = _BARE_URL.sub(lambda m: stash(m.group(0)), text)

    text = _CODE_FENCE.sub(_unfence, text)
    text = _BACKTICKS.sub("", text)

    text = _HEADING.sub("", text)

    text = _BOLD_STAR.sub(r"\1", text)
    text = _BOLD_UNDERSCORE.sub(r"\1", text)
    text = _ITALIC_STAR.sub(r"\1", text)
    text = _ITALIC_UNDERSCORE.sub(r"\1", text)
    text = _DOUBLE_MARKER.sub("", text)

    text = _LINK.sub(r"\1 (\2)", text)

    text = _BLOCKQUOTE.sub("", text)

    # Rules first: "* * *" would otherwise lose one marker per pass as a bullet.
    text = _HORIZONTAL_RULE.sub("", text)

    text = _BULLET.sub("", text)
    text = _NUMBERED.sub(r"\1\2) ", text)

    text = _STRAY_SYMBOLS.sub("", text)

    text = _BLANK_RUN.sub("\n\n", text)
    text = text.strip()
    return _PLACEHOLDER.sub(lambda m: urls[int(m.group(1))], text)


def sanitize(raw_text: Any) -> str:
    """Return ``raw_text`` with markdown decoration removed.

    Numbered items are kept and rewritten as ``1)`` so they match the list
    style the model is asked for. URLs, bare or inside links, come through
    untouched. Passes repeat until nothing changes; removing one marker can
    expose another (``-#-#-`` turns into a rule).
    """
    if raw_text is None:
        return ""
    text = raw_text if isinstance(raw_text, str) else str(raw_text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = text.replace(_URL_OPEN, "").replace(_URL_CLOSE, "")

    while True:
        cleaned = _sanitize_once(text)
        if cleaned == text:
            return cleaned
        text = cleaned
