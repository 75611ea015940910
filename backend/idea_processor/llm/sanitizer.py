import re

# Opening fence with an optional language hint: ```json, ```JSON, ```js ...
_OPEN_FENCE = re.compile(r"^```[A-Za-z0-9_+.\-]*[ \t]*(?:\r?\n)?")
_CLOSE_FENCE = re.compile(r"(?:\r?\n)?[ \t]*```$")


def _strip_once(text: str) -> str:
    text = text.strip()
    text = _OPEN_FENCE.sub("", text, count=1)
    text = _CLOSE_FENCE.sub("", text, count=1)
    return text.strip()


def sanitize(raw: str) -> str:
    """
    Strip markdown code fences and surrounding whitespace from model output.

    Best effort, NEVER throws. Fences are peeled until nothing changes, so
    sanitize(sanitize(s)) == sanitize(s) holds even for nested fences.
    """
    if not raw or not isinstance(raw, str):
        return ""

    text = raw
    while True:
        cleaned = _strip_once(text)
        if cleaned == text:
            return cleaned
        text = cleaned
