"""cwquery.cli - cwq 명령줄 도구"""

from .app import cli, main

__all__ = ["cli", "main"]
