"""Kubernetes Job entry point for the roster diff.

The job spec sets REPARTEE_DISTRICT_ID; REPARTEE_WRITE_JSON=true also keeps
the JSON report in the container's working directory.

Usage:
  REPARTEE_DISTRICT_ID=5327a245c79f90670e001b78 python -m scripts.repartee.entrypoints.gke_job
"""

from __future__ import annotations

import os
import sys

from scripts.repartee.cli import main as cli_main


def main() -> int:
    district_id = os.environ.get("REPARTEE_DISTRICT_ID", "")
    if not district_id:
        # Logging is configured by the CLI, so report this one on stderr directly
        print("REPARTEE_DISTRICT_ID env var is required", file=sys.stderr)
        return 1

    argv = ["diff", "--district", district_id]
    if os.environ.get("REPARTEE_WRITE_JSON", "").lower() == "true":
        argv.append("--json")
    return cli_main(argv)


if __name__ == "__main__":
    sys.exit(main())
