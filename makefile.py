#!/usr/bin/env python3
"""
makefile.py - Task runner for the redisbank project.

Usage:
    python makefile.py <target>

Requires the dev and examples extras: pip install -e .[test,dev,examples]
"""

import os
import shutil
import subprocess
import sys

from colorama import Fore, Style
from colorama import init as colorama_init

colorama_init(autoreset=True)


def print_header(title):
    bar = Fore.CYAN + Style.BRIGHT + "=" * 52 + Style.RESET_ALL
    label = Fore.CYAN + Style.BRIGHT + f"  {title}" + Style.RESET_ALL
    print(f"\n{bar}\n{label}\n{bar}")


def print_step(msg):
    print(f"{Fore.YELLOW}-->{Style.RESET_ALL} {msg}")


def print_success(msg):
    print(f"{Fore.GREEN}[OK]{Style.RESET_ALL} {msg}")


def print_warn(msg):
    print(f"{Fore.YELLOW}[WARN]{Style.RESET_ALL} {msg}")


def run_cmd(args, allow_failure=False):
    """
    Run a command as a subprocess, streaming output directly to the terminal.
    Exits with the subprocess exit code on failure unless allow_failure=True.
    """
    try:
        result = subprocess.run(args)
    except FileNotFoundError:
        print(f"{Fore.RED}[ERROR]{Style.RESET_ALL} Command not found: '{args[0]}'")
        if not allow_failure:
            sys.exit(127)
        return 127
    if result.returncode != 0 and not allow_failure:
        sys.exit(result.returncode)
    return result.returncode


def target_install():
    print_header("Installing redisbank (editable, with test, dev and examples extras)")
    run_cmd([sys.executable, "-m", "pip", "install", "-e", ".[test,dev,examples]"])


def target_test():
    print_header("Running All Tests")
    run_cmd([sys.executable, "-m", "pytest", "-v"])


def target_test_storage():
    print_header("Running Storage Tests")
    run_cmd([sys.executable, "-m", "pytest", "tests/test_storage", "-v"])


def target_test_query():
    print_header("Running Query Tests")
    run_cmd([sys.executable, "-m", "pytest", "tests/test_query", "tests/test_index", "-v"])


def target_test_coverage():
    print_header("Running Tests with Coverage")
    run_cmd([sys.executable, "-m", "pytest", "--cov=redisbank", "--cov-report=term-missing"])


def target_coverage_html():
    print_header("Generating HTML Coverage Report")
    run_cmd([sys.executable, "-m", "pytest", "--cov=redisbank", "--cov-report=html"])
    print_success("Coverage report written to htmlcov/index.html")


def target_examples():
    print_header("Running Widget Example")
    run_cmd([sys.executable, os.path.join("examples", "widget_example.py")])


def target_clean():
    print_header("Cleaning Caches")
    for path in (".pytest_cache", "htmlcov", ".coverage"):
        if not os.path.exists(path):
            continue
        try:
            if os.path.isdir(path):
                shutil.rmtree(path)
            else:
                os.remove(path)
            print_step(f"Removed {path}")
        except OSError as exc:
            print_warn(f"Could not remove {path}: {exc}")

    for root, dirs, _ in os.walk("."):
        if "__pycache__" in dirs:
            shutil.rmtree(os.path.join(root, "__pycache__"), ignore_errors=True)
            dirs.remove("__pycache__")
    print_success("Clean")


def target_check():
    print_header("Full Check: tests + example")
    target_test()
    target_examples()


TARGETS = {
    "install": (target_install, "pip install -e .[test,dev,examples]", "Tools"),
    "test": (target_test, "Run all tests", "Testing"),
    "test-storage": (target_test_storage, "Run record store and backend tests", "Testing"),
    "test-query": (target_test_query, "Run index and query tests", "Testing"),
    "test-coverage": (target_test_coverage, "Run tests with coverage", "Testing"),
    "coverage-html": (target_coverage_html, "Generate htmlcov/ report", "Testing"),
    "examples": (target_examples, "Run the widget walkthrough", "Run"),
    "check": (target_check, "tests + example", "Run"),
    "clean": (target_clean, "Remove caches and coverage output", "Tools"),
    "help": (None, "Show this help message", "Meta"),
}


def target_help():
    from collections import defaultdict

    title = Fore.CYAN + Style.BRIGHT + "redisbank - Available Commands" + Style.RESET_ALL
    print(f"\n{title}\n")
    groups = defaultdict(list)
    for name, (_, desc, group) in TARGETS.items():
        groups[group].append((name, desc))
    for group in ["Testing", "Run", "Tools", "Meta"]:
        if group not in groups:
            continue
        print(Fore.YELLOW + Style.BRIGHT + f"{group}:" + Style.RESET_ALL)
        for name, desc in groups[group]:
            print(f"  {Fore.GREEN}{name.ljust(16)}{Style.RESET_ALL}  {desc}")
        print()


TARGETS["help"] = (target_help, "Show this help message", "Meta")


def main():
    if len(sys.argv) < 2:
        target_help()
        sys.exit(0)

    name = sys.argv[1]

    if name not in TARGETS:
        print(f"{Fore.RED}[ERROR]{Style.RESET_ALL} Unknown target: '{name}'")
        print("  Run:  python makefile.py help  to list all available targets.")
        sys.exit(1)

    func, _, _ = TARGETS[name]
    func()


if __name__ == "__main__":
    main()
