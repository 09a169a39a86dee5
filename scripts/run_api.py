#!/usr/bin/env python
"""
Run the quote API with uvicorn.

Usage:
    python scripts/run_api.py [port]

Set DUCT_QUOTE_ADMIN_PASSWORD before exposing the admin routes.
"""
import os
import subprocess
import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / 'src'))

from duct_quote.config.settings import get_settings


def main(args: list[str]):
    port = args[0] if args else "8000"
    settings = get_settings()

    if settings.admin_password == "change-me":
        print("WARNING: admin password is the default, set DUCT_QUOTE_ADMIN_PASSWORD")

    env = os.environ.copy()
    src_path = str(project_root / 'src')
    env['PYTHONPATH'] = os.pathsep.join(p for p in (src_path, env.get('PYTHONPATH')) if p)

    print(f"Starting Duct Quote API on port {port} (tables: {settings.data_dir})")
    try:
        subprocess.run([
            sys.executable, "-m", "uvicorn",
            "duct_quote.api.main:app",
            "--host", "0.0.0.0",
            "--port", port,
            "--log-level", settings.log_level.lower(),
            "--reload",
        ], cwd=str(project_root), env=env)
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main(sys.argv[1:])
