#!/usr/bin/env python3
"""
Development scripts for the autowire-runtime project.

Every check is run through uv so the dev extra is always in place:

    python scripts.py test | lint | typecheck | demos | readme | check
"""

import subprocess
import sys
from collections.abc import Callable
from pathlib import Path

PACKAGE_DIR = "src/autowire/runtime/"


def run_command(cmd: list[str], description: str) -> bool:
    """Run a command and return True if it exited cleanly."""
    print(f"\n🔄 {description}: {' '.join(cmd)}")

    try:
        subprocess.run(cmd, check=True)
    except subprocess.CalledProcessError as e:
        print(f"❌ {description} failed with exit code {e.returncode}")
        return False
    except FileNotFoundError:
        print(f"❌ Command not found: {cmd[0]}")
        return False

    print(f"✅ {description} passed")
    return True


def run_all(commands: list[tuple[list[str], str]]) -> int:
    results = [run_command(cmd, description) for cmd, description in commands]
    return 0 if all(results) else 1


def run_tests() -> int:
    return run_all([(["uv", "run", "pytest", "-v"], "Tests")])


def run_lint() -> int:
    status = run_all(
        [
            (["uv", "run", "ruff", "check", "."], "Ruff linting"),
            (["uv", "run", "ruff", "format", "--check", "."], "Ruff formatting"),
        ]
    )
    if status:
        print("\n💡 Try: uv run ruff format . && uv run ruff check --fix .")
    return status


def run_typecheck() -> int:
    return run_all(
        [
            (["uv", "run", "mypy", PACKAGE_DIR], "MyPy type checking"),
            (["uv", "run", "pyright", PACKAGE_DIR], "Pyright type checking"),
        ]
    )


def run_demos() -> int:
    """Execute every public script under demo/."""
    demos = sorted(p for p in Path("demo").glob("*.py") if not p.name.startswith("_"))
    if not demos:
        print("⚠️  No demo scripts found")
        return 0
    return run_all([(["uv", "run", "python", str(demo)], f"Demo {demo.name}") for demo in demos])


def run_readme_validation() -> int:
    """Turn the README code blocks into a test module and run it."""
    test_file = Path("test_readme.py")
    try:
        if not run_command(["uv", "run", "phmdoctest", "README.md", "--outfile", str(test_file)], "README extraction"):
            return 1
        return run_all([(["uv", "run", "pytest", str(test_file), "-v"], "README examples")])
    finally:
        test_file.unlink(missing_ok=True)


COMMANDS: dict[str, Callable[[], int]] = {
    "test": run_tests,
    "lint": run_lint,
    "typecheck": run_typecheck,
    "demos": run_demos,
    "readme": run_readme_validation,
}


def check_all() -> int:
    """Run every command and print a summary."""
    results = {name: command() == 0 for name, command in COMMANDS.items()}

    print(f"\n{'=' * 20} SUMMARY {'=' * 20}")
    for name, passed in results.items():
        print(f"{name:<15} {'✅ PASS' if passed else '❌ FAIL'}")

    return 0 if all(results.values()) else 1


if __name__ == "__main__":
    available = [*COMMANDS, "check"]
    if len(sys.argv) != 2 or sys.argv[1] not in available:
        print(f"Usage: python scripts.py <{'|'.join(available)}>")
        sys.exit(1)

    command = sys.argv[1]
    sys.exit(check_all() if command == "check" else COMMANDS[command]())
