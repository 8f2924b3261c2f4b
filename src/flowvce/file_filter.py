"""Language tags, binary detection, and file browser search patterns."""

from __future__ import annotations

import re

DEFAULT_LANGUAGE = "text"

# Extensions that are never opened in the editor
BINARY_EXTENSIONS: frozenset[str] = frozenset({
    # Images
    ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".ico", ".webp", ".avif",
    # Fonts
    ".ttf", ".otf", ".woff", ".woff2", ".eot",
    # Media
    ".mp3", ".mp4", ".wav", ".ogg", ".webm", ".mov",
    # Archives
    ".zip", ".tar", ".gz", ".br", ".wasm",
    # Documents
    ".pdf",
})

# Extension -> editor / code-fence language
LANGUAGE_MAP: dict[str, str] = {
    ".html": "html",
    ".htm": "html",
    ".css": "css",
    ".scss": "scss",
    ".sass": "sass",
    ".less": "less",
    ".js": "javascript",
    ".mjs": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".json": "json",
    ".md": "markdown",
    ".svg": "xml",
    ".xml": "xml",
    ".txt": "text",
    ".py": "python",
    ".java": "java",
    ".c": "c",
    ".cpp": "cpp",
    ".php": "php",
    ".rb": "ruby",
    ".go": "go",
    ".rs": "rust",
    ".swift": "swift",
    ".kt": "kotlin",
    ".dart": "dart",
    ".vue": "vue",
    ".svelte": "svelte",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
}

FILENAME_LANGUAGE_MAP: dict[str, str] = {
    "Dockerfile": "dockerfile",
    "Makefile": "makefile",
    "CNAME": "text",
    ".gitignore": "gitignore",
    ".nojekyll": "text",
}


def is_binary_by_extension(path: str) -> bool:
    """Check if a file is likely binary based on its extension."""
    dot_pos = path.rfind(".")
    if dot_pos == -1:
        return False
    return path[dot_pos:].lower() in BINARY_EXTENSIONS


def is_binary_by_content(data: bytes) -> bool:
    """Check if content is binary by looking for null bytes in the first 8KB."""
    return b"\x00" in data[:8192]


def get_language_hint(path: str) -> str:
    """Return the language tag for *path*, ``"text"`` when unknown."""
    filename = path.rsplit("/", maxsplit=1)[-1]

    if filename in FILENAME_LANGUAGE_MAP:
        return FILENAME_LANGUAGE_MAP[filename]

    dot_pos = filename.rfind(".")
    if dot_pos == -1:
        return DEFAULT_LANGUAGE
    return LANGUAGE_MAP.get(filename[dot_pos:].lower(), DEFAULT_LANGUAGE)


# ---------------------------------------------------------------------------
# File browser search
# ---------------------------------------------------------------------------


def parse_pattern_input(raw: str) -> list[str]:
    """Split a comma-separated search string into patterns.

    Whitespace around each pattern is stripped. Empty segments are ignored.
    """
    if not raw or not raw.strip():
        return []
    return [p.strip() for p in raw.split(",") if p.strip()]


def validate_patterns(patterns: list[str]) -> list[str]:
    """Return an error message per invalid regex; empty when all are valid."""
    errors: list[str] = []
    for p in patterns:
        try:
            re.compile(p)
        except re.error as exc:
            errors.append(f"`{p}`: {exc}")
    return errors


def compile_patterns(patterns: list[str]) -> list[re.Pattern[str]]:
    """Compile search patterns, skipping invalid ones."""
    compiled: list[re.Pattern[str]] = []
    for p in patterns:
        try:
            compiled.append(re.compile(p))
        except re.error:
            continue
    return compiled


def matches_any_pattern(path: str, compiled: list[re.Pattern[str]]) -> bool:
    """Return True if *path* matches any pattern, or when there are none."""
    if not compiled:
        return True
    return any(pat.search(path) for pat in compiled)
