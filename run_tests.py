#!/usr/bin/env python3
"""Test runner script for the Graylog → Jira bridge."""

import sys
import subprocess
from pathlib import Path

# Group name -> test modules under tests/unit
GROUPS = {
    "engine": ["test_engine.py", "test_detector.py", "test_context.py", "test_lazy.py"],
    "jira": ["test_jira_client.py", "test_query.py", "test_counter.py", "test_history.py",
             "test_metadata.py", "test_payload_builder.py"],
    "config": ["test_config.py", "test_engine_config.py", "test_healthcheck.py", "test_main.py",
               "test_logger.py"],
}


def main():
    """Run tests with pytest."""
    project_root = Path(__file__).parent

    # Check if pytest is available
    try:
        import pytest  # noqa: F401
    except ImportError:
        print("❌ pytest is not installed. Please install it with:")
        print("   pip install -e '.[test]'")
        sys.exit(1)

    targets = [str(project_root / "tests")]
    if len(sys.argv) > 1:
        group = sys.argv[1]
        if group not in GROUPS:
            print(f"❌ Unknown test group '{group}'. Choose from: {', '.join(GROUPS)}")
            sys.exit(1)
        targets = [str(project_root / "tests" / "unit" / name) for name in GROUPS[group]]

    cmd = [
        sys.executable,
        "-m",
        "pytest",
        *targets,
        "-v",
        "--tb=short",
        "--color=yes",
    ]

    print(f"🧪 Running tests: {' '.join(cmd)}")

    try:
        result = subprocess.run(cmd, cwd=project_root)
        sys.exit(result.returncode)
    except KeyboardInterrupt:
        print("\n⏹️  Tests interrupted by user")
        sys.exit(1)
    except OSError as e:
        print(f"❌ Error running tests: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
