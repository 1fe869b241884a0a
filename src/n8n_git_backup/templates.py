"""Default files written into a new backup repository."""

from datetime import datetime
from pathlib import Path

README_TEMPLATE = """\
# N8N Workflows

This repository contains n8n workflow backups.

## Structure

- `workflows/` - Contains exported n8n workflows
- `credentials/` - Contains exported credentials (if included)

## Usage

Workflows are exported in JSON format and can be imported back into n8n using the CLI or web interface.

Last updated: {updated}
"""

GITIGNORE = """\
# N8N specific
.n8n/
*.log
node_modules/

# OS specific
.DS_Store
Thumbs.db

# Editor specific
.vscode/
.idea/

# Temporary files
*.tmp
*.temp
"""


def write_readme_if_missing(repo: Path, now: datetime | None = None) -> Path | None:
    """
    Create README.md from the default template if it doesn't exist.

    An existing README is never touched, so operators can edit it freely.

    Args:
        repo: Repository root.
        now: Timestamp for the "Last updated" line. Defaults to the current time.

    Returns:
        Path to the README if it was written, None if one already existed.
    """
    readme = repo / "README.md"
    if readme.exists():
        return None

    updated = (now or datetime.now()).strftime("%a %b %d %H:%M:%S %Y")
    readme.write_text(README_TEMPLATE.format(updated=updated))
    return readme


def write_gitignore(repo: Path) -> Path:
    """Write the default .gitignore, replacing any existing one."""
    gitignore = repo / ".gitignore"
    gitignore.write_text(GITIGNORE)
    return gitignore
