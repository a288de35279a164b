"""DEV mode storage: save reports to data/dev/ for inspection."""
import logging
import re
from pathlib import Path
from typing import Any, Optional

import orjson

from company_intel.config import DATA_DIR
from company_intel.parse.models import CompanyReport

logger = logging.getLogger(__name__)

DEV_DIR = DATA_DIR / "dev"


def slugify(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")
    return slug or "company"


class DevStorage:
    """Stores company reports in DEV mode for inspection."""

    def __init__(self, base_dir: Optional[Path] = None):
        self.dev_dir = base_dir or DEV_DIR
        self.dev_dir.mkdir(parents=True, exist_ok=True)

    def save_report(self, report: CompanyReport) -> Path:
        """Write result.json and summary.md under a directory named after the query."""
        report_dir = self.dev_dir / slugify(report.result.query)
        report_dir.mkdir(exist_ok=True)

        result_path = report_dir / "result.json"
        with open(result_path, "wb") as f:
            f.write(orjson.dumps(report.to_dict(), option=orjson.OPT_INDENT_2))
        logger.info(f"Saved result to {result_path}")

        summary_path = report_dir / "summary.md"
        with open(summary_path, "w", encoding="utf-8") as f:
            f.write(f"# {report.result.query}\n\n{report.summary}\n")
        logger.info(f"Saved summary to {summary_path}")
        return report_dir

    def save_json(self, name: str, data: dict[str, Any]) -> Path:
        """Dump an arbitrary payload (e.g. a strategy comparison)."""
        path = self.dev_dir / f"{slugify(name)}.json"
        with open(path, "wb") as f:
            f.write(orjson.dumps(data, option=orjson.OPT_INDENT_2))
        logger.info(f"Saved {path}")
        return path
