import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]

CONTEXTS = ["catalogue", "ordering", "delivery", "payments"]

# psycopg2 ships a compiled extension; a cached wheel may target another interpreter.
_REBUILD = ["psycopg2-binary"]


def _install(session: nox.Session) -> None:
    session.run("poetry", "install", "--all-extras", external=True)
    session.run("pip", "install", "--force-reinstall", "--no-cache-dir", *_REBUILD)


def _layer(layer: str) -> list[str]:
    return [f"tests/{context}/{layer}/" for context in CONTEXTS]


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Whole suite against in-memory providers and fake adapters."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Aggregates, value objects and pure services only."""
    _install(session)
    session.run("pytest", *_layer("domain"), *session.posargs)


@nox.session(python="3.13")
def tests_checkout(session: nox.Session) -> None:
    """Checkout end to end: flow, BDD scenarios and the storefront API."""
    _install(session)
    session.run(
        "pytest",
        "tests/ordering/application/test_checkout_flow.py",
        "tests/ordering/bdd/",
        "tests/ordering/integration/test_checkout_api.py",
        *session.posargs,
    )


@nox.session(python="3.13")
def tests_postgres(session: nox.Session) -> None:
    """Whole suite with the production overlay (PostgreSQL and Redis must be running)."""
    _install(session)
    session.run("python", "src/manage.py", "setup-db", env={"PROTEAN_ENV": "production"})
    session.run("pytest", "--env", "production", *session.posargs)
