#!/usr/bin/env python3
# Area: Shared
"""
ZK Trap Grid - Configuration Setup Script
=========================================

Interactive script to generate config.json and .env files.

Usage:
    python setup_config.py
"""

import json
from pathlib import Path

VARIANTS = ("position_only", "commitment_bound", "merkle_bound")
POLICIES = ("hit_ratio", "hit_threshold", "move_count")


def prompt(question: str, default: str = "", required: bool = True, choices=None) -> str:
    """Prompt user for input with optional default value."""
    if default:
        display = f"{question} [{default}]: "
    else:
        display = f"{question}: "

    while True:
        value = input(display).strip()
        if not value and default:
            value = default
        if value and choices and value not in choices:
            print(f"  Choose one of: {', '.join(choices)}")
            continue
        if value:
            return value
        if not required:
            return ""
        print("  This field is required. Please enter a value.")


def print_header():
    """Print welcome header."""
    print()
    print("=" * 60)
    print("  ZK Trap Grid - Configuration Setup")
    print("=" * 60)
    print()
    print("This script will help you create config.json and .env files.")
    print("Press Enter to accept default values shown in [brackets].")
    print()


def print_section(title: str):
    """Print section header."""
    print()
    print(f"--- {title} ---")
    print()


def get_config_values() -> dict:
    """Interactively collect configuration values."""
    config = {}

    print_section("Circuit")
    print("The circuit variant must match the verification key your verifier uses.")
    print()
    config["circuit_variant"] = prompt("Circuit variant", default="merkle_bound", choices=VARIANTS)
    config["grid_size"] = int(prompt("Grid size N", default="8"))
    config["game_contract_id"] = prompt("Game contract id", default="trap-grid")

    print_section("Verifier")
    print("Use {proof} and {public_inputs} where the file paths go, e.g.")
    print("  bb verify -k vk -p {proof} -i {public_inputs}")
    print("Leave empty to use the transparent test gateway (local runs only).")
    print()
    command = prompt("Verifier command", required=False)
    if command:
        config["verifier_command"] = command
        timeout = prompt("Verifier timeout in seconds", default="60", required=False)
        if timeout:
            config["verifier_timeout_seconds"] = float(timeout)
    else:
        config["use_transparent_gateway"] = True

    print_section("Winner Policy")
    config["winner_policy"] = prompt("Policy", default="hit_ratio", choices=POLICIES)
    if config["winner_policy"] != "move_count":
        config["winner_threshold"] = float(prompt("Threshold", default="0.5"))
    config["tie_winner"] = prompt("Tie winner", default="holder", choices=("holder", "prober"))

    print_section("Storage and Logging")
    config["db_path"] = prompt("Database path", default="trap_grid.db")
    config["log_file"] = prompt("Log file", default="trap_grid.log")
    config["log_level"] = prompt("Log level", default="INFO")

    return config


def write_config_json(config: dict, path: Path) -> None:
    """Write config.json file."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=4)
    print(f"  Created: {path}")


def write_env_file(config: dict, path: Path) -> None:
    """Write .env file with the deployment-specific settings."""
    env_mapping = {
        "db_path": "TRAP_GRID_DB_PATH",
        "log_level": "TRAP_GRID_LOG_LEVEL",
        "verifier_command": "TRAP_GRID_VERIFIER_COMMAND",
        "verifier_timeout_seconds": "TRAP_GRID_VERIFIER_TIMEOUT",
    }

    lines = []
    for config_key, env_key in env_mapping.items():
        if config_key in config and config[config_key]:
            lines.append(f"{env_key}={config[config_key]}")

    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")
    print(f"  Created: {path}")


def main():
    """Main entry point."""
    print_header()

    try:
        config = get_config_values()
    except KeyboardInterrupt:
        print("\n\nSetup cancelled.")
        return 1

    print_section("Generating Files")

    base_path = Path.cwd()
    write_config_json(config, base_path / "config.json")
    write_env_file(config, base_path / ".env")

    print()
    print("=" * 60)
    print("  Setup Complete!")
    print("=" * 60)
    print()
    print("Next steps:")
    print()
    print("  1. Commit to your grid:")
    print("     python -m trap_grid --config config.json commit --grid grid.json --show-salt")
    print()
    print("  2. Play a local game to check your setup:")
    print("     python -m trap_grid --config config.json demo")
    print()
    return 0


if __name__ == "__main__":
    exit(main())
