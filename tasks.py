from typing import Optional

from invoke import Context  # type: ignore
from invoke import run  # type: ignore
from invoke import task  # type: ignore


@task
def autoformat(ctx):
    # type: (Context) -> None
    run("black .", echo=True)
    run("isort -sl .", echo=True)


@task
def lint(ctx):
    # type: (Context) -> None
    run("black --check .", echo=True)
    run("isort -sl --check-only .", echo=True)
    run("flake8 .", echo=True)
    run("mypy .", echo=True)


@task
def build(ctx):
    # type: (Context) -> None
    from website.main import build_or_exit

    site = build_or_exit()
    print(f"Built {len(site.posts)} posts for {site.config.origin}")
    for post in site.posts:
        print(f"{post.date}  {post.link}  {post.title}")


@task
def serve(ctx):
    # type: (Context) -> None
    from website.main import run as run_server

    run_server()


@task
def tests(ctx, k=None):
    # type: (Context, Optional[str]) -> None
    pytest_args = " -vvv"
    if k:
        pytest_args += f" -k {k}"
    run(f"pytest tests{pytest_args}", pty=True, echo=True)
