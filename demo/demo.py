#!/usr/bin/env python3
"""
Demonstration of the autowire runtime.

This demo shows:
1. Automatic construction of a dependency graph
2. Binding interfaces to implementations, closures and methods
3. Shared bindings and forced fresh instances
4. Data dependencies and data providers
5. Lazy property injection
"""

import logging
from abc import ABC, abstractmethod
from typing import Annotated

from autowire.runtime import Container, Data, Inject, data

# Example domain: A simple web service with different components


class Database(ABC):
    """Abstract database interface."""

    @abstractmethod
    def query(self, sql: str) -> str:
        pass


class PostgresDB(Database):
    """PostgreSQL implementation configured from the data store."""

    @data("db.dsn", "connection_string")
    def __init__(self, connection_string: str):
        self.connection_string = connection_string

    def query(self, sql: str) -> str:
        return f"PostgreSQL[{self.connection_string}]: {sql}"


class InMemoryDB(Database):
    """In-memory database for testing."""

    def query(self, sql: str) -> str:
        return f"InMemoryDB: {sql}"


class Config:
    """Application configuration."""

    def __init__(self, app_name: Annotated[str, Data("app.name")], debug: Annotated[bool, Data("app.debug")] = False):
        self.app_name = app_name
        self.debug = debug


class Logger:
    """Simple logger."""

    def __init__(self, config: Config):
        self.config = config

    def log(self, message: str) -> None:
        prefix = f"[{self.config.app_name}]"
        if self.config.debug:
            prefix += "[DEBUG]"
        print(f"{prefix} {message}")


class Clock:
    def now(self) -> str:
        return "2024-01-01T00:00:00"


class UserService:
    """Service for managing users."""

    clock: Annotated[Clock, Inject()] = None  # type: ignore[assignment]

    def __init__(self, database: Database, logger: Logger):
        self.database = database
        self.logger = logger

    def create_user(self, username: str) -> str:
        self.logger.log(f"Creating user {username} at {self.clock.now()}")
        return self.database.query(f"INSERT INTO users (name) VALUES ('{username}')")


class ReportBuilder:
    def build(self, title: str) -> str:
        return f"== {title} =="


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    print("=== Autowiring a graph ===")
    container = Container({"app": {"name": "UserApp", "debug": True}, "db": {"dsn": "postgresql://localhost/prod"}})
    container.bind(Database, PostgresDB, shared=True)

    service = container.make(UserService)
    print(service.create_user("alice"))
    print(f"Database shared: {service.database is container.make(Database)}")

    print("\n=== Test configuration ===")
    test_container = Container({"app": {"name": "TestApp"}})
    test_container.bind(Database, lambda c: InMemoryDB())
    print(test_container.make(UserService).create_user("bob"))

    print("\n=== Fresh instances ===")
    first = container.make(ReportBuilder, shared=True)
    second = container.make(ReportBuilder)
    fresh = container.make(ReportBuilder, new=True)
    print(f"Same shared instance: {first is second}, fresh differs: {fresh is not first}")

    print("\n=== Data providers ===")
    store = container.data()
    store.provide("app.version", lambda key, default, c: "1.2.3")
    store.provide("env", lambda key, default, c: key.upper(), shared=False)
    print(f"app.version -> {store.get('app.version')}, cached: {store.has('app.version')}")
    print(f"env -> {store.get('env')}")
    print(f"app -> {store.get('app')}")

    print("\n=== Calling callables ===")
    print(container.call((ReportBuilder, "build"), {"title": "Users"}))
    print(container.call(lambda c, greeting: f"{greeting} from {c.make(Config).app_name}", ["Hello"]))


if __name__ == "__main__":
    main()
