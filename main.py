from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from claimreport.config import get_settings
from claimreport.content.classifier import classify, group_sections
from claimreport.engine import render_docx, render_html, render_pdf
from claimreport.storage import save_render_result
from claimreport.types import METADATA_FIELDS, RenderResult, ReportMetadata

FORMATS = ('docx', 'pdf', 'html')


def _print_json(payload: dict) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _configure_logging() -> None:
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


def _read_input(source: str) -> str:
    if source == '-':
        return sys.stdin.read()
    return Path(source).expanduser().read_text(encoding='utf-8')


def _load_metadata(args: argparse.Namespace) -> ReportMetadata:
    payload: dict = {}
    if args.metadata_json:
        payload.update(json.loads(Path(args.metadata_json).expanduser().read_text(encoding='utf-8')))
    for field in METADATA_FIELDS:
        value = getattr(args, field, None)
        if value is not None:
            payload[field] = value
    return ReportMetadata.model_validate(payload)


async def _render_formats(formats: list[str], metadata: ReportMetadata, raw_text: str) -> dict[str, RenderResult]:
    jobs = {
        'docx': lambda: asyncio.to_thread(render_docx, metadata, raw_text),
        'pdf': lambda: render_pdf(metadata, raw_text),
        'html': lambda: asyncio.to_thread(render_html, metadata, raw_text),
    }
    results = await asyncio.gather(*(jobs[fmt]() for fmt in formats))
    return dict(zip(formats, results))


def cmd_render(args: argparse.Namespace) -> int:
    try:
        raw_text = _read_input(args.input)
    except OSError as exc:
        _print_json({'status': 'error', 'message': f'Cannot read input: {exc}'})
        return 2

    try:
        metadata = _load_metadata(args)
    except (OSError, ValueError, ValidationError) as exc:
        _print_json({'status': 'error', 'message': f'Invalid metadata: {exc}'})
        return 2

    formats = list(FORMATS) if args.format == 'all' else [args.format]
    results = asyncio.run(_render_formats(formats, metadata, raw_text))

    outputs: list[dict] = []
    failed = False
    for fmt, result in results.items():
        if not result.success:
            failed = True
            outputs.append({'format': fmt, 'success': False, 'error': result.error})
            continue
        path = save_render_result(result, args.output_dir)
        outputs.append({'format': fmt, 'success': True, 'file_name': result.file_name, 'path': str(path)})

    _print_json({'status': 'error' if failed else 'ok', 'outputs': outputs})
    return 2 if failed else 0


def cmd_outline(args: argparse.Namespace) -> int:
    try:
        raw_text = _read_input(args.input)
    except OSError as exc:
        _print_json({'status': 'error', 'message': f'Cannot read input: {exc}'})
        return 2

    sections = group_sections(classify(raw_text))
    _print_json(
        {
            'status': 'ok',
            'sections': [
                {
                    'title': section.title,
                    'blocks': [
                        {
                            'kind': block.kind.value,
                            'text': block.text,
                            **({'index': block.index} if block.index is not None else {}),
                        }
                        for block in section.blocks
                        if block.text
                    ],
                }
                for section in sections
            ],
        }
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Render generated claim report text to DOCX, PDF and HTML')
    sub = parser.add_subparsers(dest='command', required=True)

    render = sub.add_parser('render', help='Render report text into one or all output formats')
    render.add_argument('--input', required=True, help="Path to the report text, or '-' for stdin")
    render.add_argument('--format', choices=[*FORMATS, 'all'], default='all')
    render.add_argument('--output-dir', required=False, help='Directory for rendered files')
    render.add_argument('--metadata-json', required=False, help='JSON file with claim metadata')
    for field in METADATA_FIELDS:
        render.add_argument(f"--{field.replace('_', '-')}", dest=field, required=False)
    render.set_defaults(func=cmd_render)

    outline = sub.add_parser('outline', help='Print the classified sections of report text')
    outline.add_argument('--input', required=True, help="Path to the report text, or '-' for stdin")
    outline.set_defaults(func=cmd_outline)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging()
    return int(args.func(args))


if __name__ == '__main__':
    raise SystemExit(main())
