"""Export processed transactions to CSV or JSON."""

import csv
import io
import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from .models import ProcessedTransaction
from .summary import summarize

logger = logging.getLogger(__name__)


class TransactionExporter:
    """Write processed transactions out for spreadsheets and reports."""

    def _rows(self, processed: Sequence[ProcessedTransaction]) -> List[Dict[str, Any]]:
        if not processed:
            raise ValueError("No data available to export.")
        return [t.to_dict() for t in processed]

    def export_csv(
        self,
        processed: Sequence[ProcessedTransaction],
        output_path: Optional[str] = None,
    ) -> str:
        """Export transactions to CSV.

        Columns are the union of every row's fields in first-seen order, so
        single-agent and coach rows can be mixed.

        Returns: Path to exported file or CSV string if no path specified.
        """
        rows = self._rows(processed)

        columns: List[str] = []
        for row in rows:
            for key in row:
                if key not in columns:
                    columns.append(key)

        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=columns, quoting=csv.QUOTE_ALL)
        writer.writeheader()
        for row in rows:
            writer.writerow({key: "" if row.get(key) is None else row[key] for key in columns})

        csv_content = output.getvalue()

        if output_path:
            with open(output_path, 'w', newline='', encoding='utf-8') as f:
                f.write(csv_content)
            logger.info(f"Exported {len(rows)} transactions to {output_path}")
            return output_path
        return csv_content

    def export_json(
        self,
        processed: Sequence[ProcessedTransaction],
        output_path: Optional[str] = None,
        pretty: bool = True,
    ) -> str:
        """Export transactions and their totals to JSON."""
        rows = self._rows(processed)

        data = {
            "exported_at": datetime.now().isoformat(),
            "total": len(rows),
            "summary": summarize(processed).to_dict(),
            "transactions": rows,
        }
        json_content = json.dumps(data, indent=2 if pretty else None)

        if output_path:
            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(json_content)
            logger.info(f"Exported {len(rows)} transactions to {output_path}")
            return output_path
        return json_content
