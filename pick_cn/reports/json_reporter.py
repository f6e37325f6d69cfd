"""JSON output: the phrase mapping and an optional extraction report."""

import json
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Dict

from ..__version__ import __version__

if TYPE_CHECKING:
    from ..core.pipeline import PipelineResult


class JSONReporter:
    """Write mapping and report files."""

    @staticmethod
    def _dump(data, output_path: Path, pretty: bool = True) -> Path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', encoding='utf-8') as f:
            if pretty:
                json.dump(data, f, indent=2, ensure_ascii=False)
            else:
                json.dump(data, f, ensure_ascii=False)
            f.write('\n')

        return output_path

    @staticmethod
    def write_mapping(mapping: Dict[str, str], output_path: Path) -> Path:
        """
        Write the phrase mapping as a flat JSON object.

        Keys keep their insertion (extraction) order.

        Raises:
            OSError: If the file cannot be written
        """
        return JSONReporter._dump(dict(mapping), output_path)

    @staticmethod
    def generate(result: 'PipelineResult', output_path: Path, pretty: bool = True) -> Path:
        """
        Write a JSON report describing one pipeline run.

        Args:
            result: Pipeline result
            output_path: Report file path
            pretty: Pretty print JSON

        Returns:
            Path to generated report
        """
        report = {
            'metadata': {
                'generated_at': datetime.now().isoformat(),
                'version': __version__,
                'method': result.method,
                'dedup_policy': result.dedup_policy,
                'source': str(result.source_dir),
                'mapping_file': str(result.output_path) if result.output_path else None,
            },
            'summary': {
                'files_scanned': result.files_scanned,
                'files_skipped': len(result.skipped_files),
                'raw_phrases': result.raw_phrase_count,
                'unique_phrases': len(result.phrases),
                'translated': result.translated_count,
                'placeholders': result.placeholder_count,
            },
            'skipped_files': [
                {'file': path, 'reason': reason}
                for path, reason in result.skipped_files.items()
            ],
            'phrases': list(result.phrases),
        }
        return JSONReporter._dump(report, output_path, pretty=pretty)

    @staticmethod
    def load(report_path: Path) -> dict:
        """Load a mapping or report file."""
        with open(report_path, 'r', encoding='utf-8') as f:
            return json.load(f)
