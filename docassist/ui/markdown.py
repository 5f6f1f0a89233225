"""Minimal markdown to HTML conversion for assistant replies."""

import re

_LIST_STYLES = {
    "ul": (r"^[-*]\s+", "list-disc list-inside my-2 space-y-1"),
    "ol": (r"^\d+\.\s+", "list-decimal list-inside my-2 space-y-1"),
}


def _wrap_lists(text: str, tag: str) -> str:
    """Group consecutive list lines into a single <ul> or <ol> element."""
    pattern, css = _LIST_STYLES[tag]
    result: list[str] = []
    in_list = False
    for line in text.split("\n"):
        stripped = line.strip()
        if re.match(pattern, stripped):
            if not in_list:
                result.append(f'<{tag} class="{css}">')
                in_list = True
            result.append(f"<li>{re.sub(pattern, '', stripped)}</li>")
            continue
        if in_list:
            result.append(f"</{tag}>")
            in_list = False
        result.append(line)
    if in_list:
        result.append(f"</{tag}>")
    return "\n".join(result)


def markdown_to_html(text: str) -> str:
    """Convert markdown to HTML for chat display.

    Supports: **bold**, *italic*, inline code, code blocks, links, lists.
    Underscores are never markup, so names like ``unit_price`` or
    ``__init__`` render as written.
    """
    text = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")

    text = re.sub(
        r"```(\w*)\n?([\s\S]*?)```",
        r'<pre class="bg-gray-800 text-gray-100 rounded-lg p-3 my-2 overflow-x-auto text-xs"><code>\2</code></pre>',
        text,
    )
    text = re.sub(
        r"`([^`]+)`",
        r'<code class="bg-gray-200 text-pink-600 px-1.5 py-0.5 rounded text-xs">\1</code>',
        text,
    )

    text = re.sub(r"\*\*(.+?)\*\*", r"<strong>\1</strong>", text)
    text = re.sub(r"\*([^*\n]+)\*", r"<em>\1</em>", text)

    text = re.sub(
        r"\[([^\]]+)\]\(([^)]+)\)",
        r'<a href="\2" class="text-blue-600 underline" target="_blank">\1</a>',
        text,
    )

    text = _wrap_lists(text, "ul")
    text = _wrap_lists(text, "ol")

    return text.replace("\n", "<br>")
