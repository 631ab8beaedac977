"""Convert standard markdown to Slack mrkdwn."""

import re
from typing import List, Tuple

# Use unique placeholders that won't be matched by markdown patterns
_CODE_BLOCK_PLACEHOLDER = "\x00CB\x00"
_INLINE_CODE_PLACEHOLDER = "\x00IC\x00"
_BOLD_MARKER = "\x00B\x00"

SLACK_MAX_LENGTH = 3900


def escape_mrkdwn(text: str) -> str:
    """Escape the three characters Slack treats as control sequences."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def markdown_to_slack_mrkdwn(text: str) -> str:
    """
    Convert standard markdown to Slack mrkdwn.

    Slack differences from markdown:
    - *bold* instead of **bold**
    - _italic_ instead of *italic*
    - ~strike~ instead of ~~strike~~
    - <url|text> links
    - no headers (rendered as bold lines)

    Args:
        text: Standard markdown text

    Returns:
        Slack mrkdwn text
    """
    if not text:
        return text

    code_blocks: List[Tuple[str, str]] = []
    inline_codes: List[Tuple[str, str]] = []

    def preserve_code_block(match: re.Match) -> str:
        placeholder = f"{_CODE_BLOCK_PLACEHOLDER}{len(code_blocks)}{_CODE_BLOCK_PLACEHOLDER}"
        code = match.group(2)
        # Slack ignores the language tag
        code_blocks.append((placeholder, f"```{escape_mrkdwn(code)}```"))
        return placeholder

    text = re.sub(r"```(\w*)\n?(.*?)```", preserve_code_block, text, flags=re.DOTALL)

    def preserve_inline_code(match: re.Match) -> str:
        placeholder = f"{_INLINE_CODE_PLACEHOLDER}{len(inline_codes)}{_INLINE_CODE_PLACEHOLDER}"
        inline_codes.append((placeholder, f"`{escape_mrkdwn(match.group(1))}`"))
        return placeholder

    text = re.sub(r"`([^`]+)`", preserve_inline_code, text)

    text = escape_mrkdwn(text)

    # Headers become bold lines
    text = re.sub(
        r"^#{1,6}\s+(.+)$", lambda m: f"{_BOLD_MARKER}{m.group(1)}{_BOLD_MARKER}", text, flags=re.MULTILINE
    )

    # Lists before italics so "* item" isn't read as an italic marker
    text = re.sub(r"^(\s*)[\-\*]\s+", r"\1• ", text, flags=re.MULTILINE)

    # Bold goes through a marker so the italic pass doesn't see it
    text = re.sub(r"\*\*(.+?)\*\*", lambda m: f"{_BOLD_MARKER}{m.group(1)}{_BOLD_MARKER}", text)
    text = re.sub(r"__(.+?)__", lambda m: f"{_BOLD_MARKER}{m.group(1)}{_BOLD_MARKER}", text)

    text = re.sub(r"(?<!\w)\*([^*\n]+?)\*(?!\w)", r"_\1_", text)

    text = re.sub(r"~~(.+?)~~", r"~\1~", text)

    text = re.sub(r"\[([^\]]+)\]\(([^)]+)\)", r"<\2|\1>", text)

    text = text.replace(_BOLD_MARKER, "*")

    for placeholder, replacement in code_blocks:
        text = text.replace(placeholder, replacement)

    for placeholder, replacement in inline_codes:
        text = text.replace(placeholder, replacement)

    return text


def split_message(text: str, max_length: int = SLACK_MAX_LENGTH) -> List[str]:
    """
    Split a long message into chunks Slack will render in full.

    Tries to split at natural boundaries (newlines, sentences, spaces) and
    never inside a <url|text> link.

    Args:
        text: The text to split
        max_length: Maximum length per chunk

    Returns:
        List of message chunks
    """
    if len(text) <= max_length:
        return [text]

    chunks = []
    remaining = text

    while remaining:
        if len(remaining) <= max_length:
            chunks.append(remaining)
            break

        split_point = max_length

        newline_pos = remaining.rfind("\n", 0, max_length)
        if newline_pos > max_length // 2:
            split_point = newline_pos + 1
        else:
            for punct in [". ", "! ", "? "]:
                punct_pos = remaining.rfind(punct, 0, max_length)
                if punct_pos > max_length // 2:
                    split_point = punct_pos + len(punct)
                    break
            else:
                space_pos = remaining.rfind(" ", 0, max_length)
                if space_pos > max_length // 2:
                    split_point = space_pos + 1

        last_open = remaining.rfind("<", 0, split_point)
        if last_open > 0:
            last_close = remaining.find(">", last_open, split_point)
            if last_close == -1:
                split_point = last_open

        chunks.append(remaining[:split_point])
        remaining = remaining[split_point:]

    return chunks
