"""
Run the MessHub admin CLI.

Usage:
    python run_cli.py [--db PATH] COMMAND [OPTIONS]

Commands:
    init-db       Create the database tables
    create-admin  Create an ADMIN account
    seed          Insert demo customer, owner, messes and meals
    stats         Show user, sales and contact figures

Examples:
    python run_cli.py init-db
    python run_cli.py create-admin --name "Site Admin" --email admin@example.com
    python run_cli.py --db demo.db seed
"""

import sys
from pathlib import Path

# Ensure src/ is importable without an editable install
sys.path.insert(0, str(Path(__file__).parent / "src"))

from messhub.adapters.cli.main import app

if __name__ == "__main__":
    app()
