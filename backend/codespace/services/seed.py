from __future__ import annotations

import logging

from ..models.entries import Project
from ..models.schema import FileCreate, ProjectCreate
from ..repositories.factory import RepositoryFactory
from . import files as file_service

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_NAME = "my-project"

_INDEX_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>My Web Project</title>
    <link rel="stylesheet" href="styles.css">
</head>
<body>
    <div id="app">
        <h1>Hello, World!</h1>
        <p>This is a sample project.</p>
    </div>
    <script src="index.js"></script>
</body>
</html>"""

_INDEX_JS = """// Main JavaScript file
console.log('Hello from JavaScript!');

document.addEventListener('DOMContentLoaded', () => {
  const app = document.getElementById('app');
  const button = document.createElement('button');
  button.textContent = 'Click me!';
  button.addEventListener('click', () => {
    alert('Button clicked!');
  });
  app.appendChild(button);
});"""

_STYLES_CSS = """/* Main stylesheet */
body {
  font-family: Arial, sans-serif;
  line-height: 1.6;
  max-width: 800px;
  margin: 0 auto;
  padding: 20px;
}

h1 {
  color: #0F9D58;
}

button {
  background-color: #0F9D58;
  color: white;
  border: none;
  padding: 8px 16px;
  border-radius: 4px;
  cursor: pointer;
}"""

_README_MD = """# My Project

This is a simple web project.

## Features

- HTML, CSS, and JavaScript files
- Simple interactive button
- Clean styling

## Getting Started

Open index.html in your browser to see the project in action."""

SAMPLE_FILES: tuple[tuple[str, str, str], ...] = (
    ("index.html", _INDEX_HTML, "html"),
    ("index.js", _INDEX_JS, "javascript"),
    ("styles.css", _STYLES_CSS, "css"),
    ("README.md", _README_MD, "markdown"),
)


async def ensure_default_project(repos: RepositoryFactory) -> Project | None:
    """Create the sample project when the store holds no projects yet."""
    if await repos.projects.count_projects() > 0:
        return None
    project = await repos.projects.create_project(
        ProjectCreate(name=DEFAULT_PROJECT_NAME, description="A sample project", isPublic=True)
    )
    for name, content, language in SAMPLE_FILES:
        await file_service.create_entry(
            repos.files,
            repos.projects,
            FileCreate(
                projectId=project.id,
                name=name,
                path=f"/{name}",
                content=content,
                kind="file",
                language=language,
            ),
        )
    logger.info("seed.default_project id=%s files=%s", project.id, len(SAMPLE_FILES))
    return project
