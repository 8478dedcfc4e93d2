import argparse
from pathlib import Path

from inventory_tracker.config import get_settings
from inventory_tracker.core.errors import GatewayError
from inventory_tracker.core.logging import setup_logging
from inventory_tracker.database import session_scope
from inventory_tracker.services.persistence_gateway import PersistenceGateway
from inventory_tracker.services.report_service import EXPORTS, export_csv, export_workbook


def parse_args():
    parser = argparse.ArgumentParser(description="Write the CSV and XLSX reports to a folder.")
    parser.add_argument("--out", default="reports", help="Output directory.")
    parser.add_argument("--user", default=None, help="User id (default: DEFAULT_USER_ID).")
    parser.add_argument("--xlsx", action="store_true", help="Also write estoque.xlsx.")
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()
    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)

    with session_scope() as db:
        gateway = PersistenceGateway(db, args.user or get_settings().DEFAULT_USER_ID)
        try:
            for collection in EXPORTS:
                filename, content = export_csv(gateway, collection)
                (out_dir / filename).write_bytes(content)
                print("Wrote {}".format(out_dir / filename))
            if args.xlsx:
                (out_dir / "estoque.xlsx").write_bytes(export_workbook(gateway))
                print("Wrote {}".format(out_dir / "estoque.xlsx"))
        except GatewayError as exc:
            raise SystemExit("Export failed: {}".format(exc.message)) from exc


if __name__ == "__main__":
    main()
