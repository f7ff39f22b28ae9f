#!/usr/bin/env python3
# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
"""
Run test suite locally with proper environment setup.
"""
import os
import sys
import subprocess
from pathlib import Path


def setup_test_env():
    """Set up test environment variables."""
    env = os.environ.copy()
    env.update({
        "MOCK_MODE": "false",
        "NETWORK": "solana-devnet",
        "KORA_RPC_URL": "http://kora.test/",
        "KORA_API_KEY": "test-api-key",
        "LOG_LEVEL": "DEBUG",
    })
    return env


def run_command(cmd: list[str], env: dict) -> int:
    """Run a command with the given environment."""
    print(f"\n🚀 Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, env=env)
    return result.returncode


def main():
    """Run the test suite."""
    project_root = Path(__file__).parent.parent
    os.chdir(project_root)

    env = setup_test_env()

    print("\n📦 Installing project with test extras...")
    run_command([sys.executable, "-m", "pip", "install", "-e", ".[test]"], env)

    if len(sys.argv) > 1:
        cmd = [sys.executable, "-m", "pytest"] + sys.argv[1:]
    else:
        cmd = [sys.executable, "-m", "pytest", "tests/", "-v", "--cov=x402_facilitator", "--cov-report=term"]

    exit_code = run_command(cmd, env)

    if exit_code == 0:
        print("\n✅ All tests passed!")
    else:
        print(f"\n❌ Tests failed with exit code {exit_code}")

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
