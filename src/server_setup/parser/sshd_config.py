"""sshd_config handling.

Directive rewriting follows the classic `sed -i 's/^#\\?Key\\s.*/Key value/'`
idiom, one line at a time: every active or commented-out occurrence of the
directive is replaced by the new line. A directive that does not occur at
all is added so the file states it explicitly, ahead of the first `Match`
block so it stays global.
"""

import re

# First active Match line; everything after it is conditional
_MATCH_RE = re.compile(r"^[ \t]*Match[ \t]", re.MULTILINE | re.IGNORECASE)


def _directive_re(key: str) -> re.Pattern[str]:
    return re.compile(rf"^#?{re.escape(key)}[ \t].*$", re.MULTILINE)


def set_directives(content: str, directives: dict[str, str] | tuple[tuple[str, str], ...]) -> str:
    """Return `content` with every directive forced to the given value.

    Args:
        content: Current file content.
        directives: Mapping (or ordered pairs) of directive -> value.

    Returns:
        The rewritten content. Untouched lines are preserved byte for byte.
    """
    pairs = directives.items() if isinstance(directives, dict) else directives
    missing: list[str] = []

    for key, value in pairs:
        line = f"{key} {value}"
        content, count = _directive_re(key).subn(line, content)
        if count == 0:
            missing.append(line)

    if not missing:
        return content

    block = "\n".join(missing) + "\n"
    match = _MATCH_RE.search(content)
    if match:
        return content[: match.start()] + block + content[match.start() :]
    if content and not content.endswith("\n"):
        content += "\n"
    return content + block


def read_directives(content: str) -> dict[str, str]:
    """Parse active directives into a lower-cased key -> value mapping.

    sshd honours the first occurrence of a keyword, so later duplicates
    are ignored. `Match` blocks end the global section.
    """
    values: dict[str, str] = {}
    for raw in content.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        parts = line.split(None, 1)
        if len(parts) < 2:
            continue
        key = parts[0].lower()
        if key == "match":
            break
        values.setdefault(key, parts[1].strip().lower())
    return values
