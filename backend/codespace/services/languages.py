from __future__ import annotations

PLAINTEXT = "plaintext"

EXTENSION_LANGUAGES: dict[str, str] = {
    "js": "javascript",
    "ts": "typescript",
    "jsx": "javascript",
    "tsx": "typescript",
    "html": "html",
    "htm": "html",
    "css": "css",
    "scss": "scss",
    "less": "less",
    "json": "json",
    "md": "markdown",
    "markdown": "markdown",
    "py": "python",
    "java": "java",
    "c": "c",
    "cpp": "cpp",
    "cc": "cpp",
    "h": "c",
    "hpp": "cpp",
    "cs": "csharp",
    "php": "php",
    "rb": "ruby",
    "go": "go",
    "rs": "rust",
    "swift": "swift",
    "kt": "kotlin",
    "kts": "kotlin",
    "dart": "dart",
    "sql": "sql",
    "sh": "shell",
    "bash": "shell",
    "yaml": "yaml",
    "yml": "yaml",
    "xml": "xml",
    "txt": PLAINTEXT,
}


def language_for_filename(name: str) -> str:
    base = str(name or "")
    if "." not in base:
        return PLAINTEXT
    ext = base.rsplit(".", 1)[-1].lower()
    return EXTENSION_LANGUAGES.get(ext, PLAINTEXT)


def display_language(language: str | None) -> str:
    lang = str(language or "")
    if not lang:
        return "Plain Text"
    return lang[:1].upper() + lang[1:]
