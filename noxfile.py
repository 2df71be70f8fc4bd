import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13", "3.14"]

# The PostgreSQL extra pulls in a compiled driver; reinstall it per interpreter
# so a cached wheel built for another Python is never reused.
_C_EXT_PACKAGES = ["psycopg2-binary"]


def _install(session: nox.Session) -> None:
    """Install the ordering service with the test group and the postgresql extra."""
    session.run(
        "poetry",
        "install",
        "--with",
        "test",
        "--all-extras",
        external=True,
    )
    session.run(
        "pip",
        "install",
        "--force-reinstall",
        "--no-cache-dir",
        *_C_EXT_PACKAGES,
    )


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run every test: domain, application, API and scenarios."""
    _install(session)
    session.run("pytest")


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Run the aggregate and template tests selected by the domain marker."""
    _install(session)
    session.run("pytest", "-m", "domain")


@nox.session(python=PYTHON_VERSIONS)
def tests_scenarios(session: nox.Session) -> None:
    """Run the pytest-bdd checkout and lifecycle scenarios."""
    _install(session)
    session.run("pytest", "tests/ordering/bdd/")
