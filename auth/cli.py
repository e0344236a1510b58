"""
Create a dashboard account from the command line.

    invoices-create-user admin@example.com "Admin"

The password is prompted for twice and never taken from argv.
"""

import argparse
import getpass
import logging
import sys

import psycopg2

from auth.config import AuthConfig
from auth.database import AuthDatabase
from auth.service import AuthService
from auth.session import SessionManager
from clients.postgres_client import PostgresClient
from clients.valkey_client import ValkeyClient
from clients.vault_client import get_database_url, get_valkey_url

def _build_service() -> AuthService:
    config = AuthConfig()
    postgres = PostgresClient(get_database_url())
    session_manager = SessionManager(ValkeyClient(get_valkey_url()), config)
    return AuthService(config, AuthDatabase(postgres), session_manager)


def _read_password() -> str | None:
    password = getpass.getpass("Password: ")
    if getpass.getpass("Repeat password: ") != password:
        return None
    return password


def main(argv: list[str] | None = None, auth_service: AuthService | None = None) -> int:
    """Entry point. Returns the process exit code."""
    parser = argparse.ArgumentParser(prog="invoices-create-user", description="Create a dashboard account")
    parser.add_argument("email")
    parser.add_argument("name")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    password = _read_password()
    if password is None:
        print("Error: passwords do not match", file=sys.stderr)
        return 1

    service = auth_service if auth_service is not None else _build_service()
    try:
        user = service.create_user(args.email, args.name, password)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except psycopg2.IntegrityError:
        print(f"Error: an account for {args.email} already exists", file=sys.stderr)
        return 1

    print(f"Created user {user.id} ({user.email})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
