"""
Markdown-ish to HTML for chat bubbles.

A fixed chain of regex substitutions applied in order (headers, bold, italic, inline code,
fenced code, bullets, numbered items, paragraphs, line breaks). Not a markdown parser:
inline code runs before fenced blocks, so backtick fences inside a line are consumed as inline code.
The output is not HTML-escaped; callers render trusted assistant text only.
"""
import re

_RULES: list[tuple[re.Pattern, str]] = [
    (re.compile(r"^# (.*)$", re.M), r'<h1 class="text-xl font-bold mb-3 text-gray-900 dark:text-gray-100">\1</h1>'),
    (re.compile(r"^## (.*)$", re.M), r'<h2 class="text-lg font-semibold mb-2 text-gray-800 dark:text-gray-200">\1</h2>'),
    (re.compile(r"^### (.*)$", re.M), r'<h3 class="text-md font-medium mb-2 text-gray-700 dark:text-gray-300">\1</h3>'),
    (re.compile(r"\*\*(.*?)\*\*"), r'<strong class="font-semibold">\1</strong>'),
    (re.compile(r"\*(.*?)\*"), r'<em class="italic">\1</em>'),
    (re.compile(r"`(.*?)`"), r'<code class="bg-gray-100 dark:bg-gray-700 px-1.5 py-0.5 rounded text-sm font-mono">\1</code>'),
    (
        re.compile(r"```([\s\S]*?)```"),
        r'<pre class="bg-gray-100 dark:bg-gray-800 p-3 rounded-lg overflow-x-auto my-2"><code class="text-sm font-mono">\1</code></pre>',
    ),
    (re.compile(r"^- (.*)$", re.M), r'<li class="ml-4 mb-1">• \1</li>'),
    (re.compile(r"^\d+\. (.*)$", re.M), r'<li class="ml-4 mb-1 list-decimal">\1</li>'),
    (re.compile(r"\n\n"), '</p><p class="mb-3">'),
    (re.compile(r"\n"), "<br>"),
]


def format_message(content: str) -> str:
    for pattern, replacement in _RULES:
        content = pattern.sub(replacement, content)
    return content
