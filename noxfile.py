"""noxfile.py - Nox sessions for PromptDeck.

Updates:
  v0.4.0 - 2026-09-22 - Install the project into nox-managed environments; add a CLI smoke session.
  v0.3.0 - 2025-12-12 - Align sessions with Ruff/Pyright/Pytest quality gates.

Sessions:
- format: rewrite sources with ruff
- lint: ruff checks plus a formatting diff
- typecheck: pyright against pyproject.toml settings
- tests: pytest with coverage (extra arguments are forwarded)
- smoke: run the installed ``promptdeck`` entry point against a throwaway database
"""

from __future__ import annotations

import nox

PYTHON_VERSIONS = ["3.12", "3.13"]
SOURCES = ["main.py", "cli", "config", "core", "models", "tests"]
COVERAGE_TARGETS = ["--cov=core", "--cov=models", "--cov=cli"]

nox.options.sessions = ["lint", "typecheck", "tests"]
nox.options.reuse_existing_virtualenvs = True


def _install_dev(session: nox.Session) -> None:
    session.install("-e", ".[dev]")


@nox.session(python=PYTHON_VERSIONS[0])
def format(session: nox.Session) -> None:
    """Format code using ruff."""
    session.install("ruff")
    session.run("ruff", "format", *SOURCES)
    session.run("ruff", "check", "--fix", *SOURCES)


@nox.session(python=PYTHON_VERSIONS[0])
def lint(session: nox.Session) -> None:
    session.install("ruff")
    session.run("ruff", "check", *SOURCES)
    session.run("ruff", "format", "--check", *SOURCES)


@nox.session(python=PYTHON_VERSIONS[0])
def typecheck(session: nox.Session) -> None:
    _install_dev(session)
    session.run("pyright")


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run pytest in parallel with a coverage floor.

    Usage: `nox -s tests -- -k search`
    """
    _install_dev(session)
    session.run(
        "pytest",
        "-n",
        "auto",
        *COVERAGE_TARGETS,
        "--cov-report=term-missing",
        "--cov-fail-under=80",
        *session.posargs,
    )


@nox.session(python=PYTHON_VERSIONS[0])
def smoke(session: nox.Session) -> None:
    """Exercise the CLI end to end without touching the user's database."""
    _install_dev(session)
    db_path = session.create_tmp() + "/smoke.db"
    env = {"PROMPTDECK_DB_PATH": db_path}
    session.run("promptdeck", "--print-settings", env=env)
    session.run(
        "promptdeck",
        "add",
        "--title",
        "Smoke test",
        "--content",
        "Say hello.",
        "--category",
        "writing",
        env=env,
    )
    session.run("promptdeck", "search", "smoke", env=env)
    session.run("promptdeck", "sync", "status", env=env)
