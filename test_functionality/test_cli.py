"""
Admin CLI

- create-admin registers an ADMIN account and refuses duplicates or bad input.
- seed inserts the demo catalog and one order, and is safe to re-run.
- stats reports users and sales from the same database.
"""
import asyncio
import dataclasses

import pytest
from typer.testing import CliRunner

from messhub.adapters.cli.main import app
from messhub.application.dto import LoginRequest
from messhub.factory import ServiceFactory

runner = CliRunner()


@pytest.fixture
def db(tmp_path):
    return str(tmp_path / "cli.db")


def _cli(db, *args):
    return runner.invoke(app, ["--db", db, *args])


def _login_role(settings, db, email, password):
    async def _run():
        factory = ServiceFactory(dataclasses.replace(settings, db_path=db))
        await factory.initialize()
        result = await factory.create_authentication_service().login(
            LoginRequest(email=email, password=password),
        )
        return result.account.role

    return asyncio.run(_run())


def test_create_admin(settings, db):
    result = _cli(db, "create-admin", "--name", "Site Admin",
                  "--email", "admin@example.com", "--password", "secret123")
    assert result.exit_code == 0, result.output
    assert "Admin created." in result.output
    assert _login_role(settings, db, "admin@example.com", "secret123") == "ADMIN"


def test_create_admin_twice_fails(db):
    args = ("create-admin", "--name", "Site Admin",
            "--email", "admin@example.com", "--password", "secret123")
    assert _cli(db, *args).exit_code == 0
    again = _cli(db, *args)
    assert again.exit_code == 1
    assert "already exists" in again.output


def test_create_admin_rejects_bad_input(db):
    result = _cli(db, "create-admin", "--name", "Al",
                  "--email", "not-an-email", "--password", "123")
    assert result.exit_code == 1
    assert "Invalid input" in result.output


def test_seed_then_stats(db):
    seeded = _cli(db, "seed")
    assert seeded.exit_code == 0, seeded.output
    assert "Seed complete." in seeded.output

    stats = _cli(db, "stats")
    assert stats.exit_code == 0, stats.output
    assert "Users" in stats.output
    assert "160.00" in stats.output


def test_seed_is_safe_to_rerun(db):
    assert _cli(db, "seed").exit_code == 0
    again = _cli(db, "seed")
    assert again.exit_code == 0
    assert "skipping catalog" in again.output
