import nox

nox.options.reuse_existing_virtualenvs = True


@nox.session
def run(session):
    session.install(".")
    session.run("python", "-m", "datadesk_index", *session.posargs)


@nox.session
def stamp(session):
    session.install(".")
    session.run("python", "-m", "datadesk_index.stamp", *session.posargs)


@nox.session
def test(session):
    session.install(".[test]")
    session.run("pytest", "-v", *session.posargs)


@nox.session
def typing(session):
    session.install(".")
    session.install("mypy", "types-requests")
    session.run("mypy", "src/datadesk_index")
