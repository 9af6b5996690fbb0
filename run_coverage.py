"""
Coverage runner script for gdbcapture.

Runs the unit tests under pytest-cov. Pass ``--open`` to view the HTML report
afterwards; any other arguments are forwarded to pytest.
"""

import subprocess
import sys
import webbrowser
from pathlib import Path


def run_coverage(argv):
    """Run the unit tests with coverage and write term, HTML and XML reports."""
    open_report = "--open" in argv
    extra_args = [arg for arg in argv if arg != "--open"]

    cmd = [
        sys.executable,
        "-m",
        "pytest",
        "tests/unit",
        "--cov=gdbcapture",
        "--cov-branch",
        "--cov-report=term-missing",
        "--cov-report=html",
        "--cov-report=xml",
        *extra_args,
    ]

    project_dir = Path(__file__).resolve().parent
    result = subprocess.run(cmd, check=False, cwd=str(project_dir))
    if result.returncode != 0:
        sys.exit(result.returncode)

    html_path = project_dir / "htmlcov" / "index.html"
    if open_report and html_path.exists():
        webbrowser.open(html_path.as_uri())


if __name__ == "__main__":
    run_coverage(sys.argv[1:])
