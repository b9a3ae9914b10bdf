from __future__ import annotations

import argparse
import asyncio
import json
import mimetypes
import sys
from pathlib import Path

from humanizer_ai.core.logging import configure_logging
from humanizer_ai.schemas.humanize import TONES, VOICES
from humanizer_ai.ui.session import HumanizerSession


def _add_humanize_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--text", default=None, help="Text to humanize.")
    parser.add_argument("--input-file", default=None, help="A .docx, .pdf or .txt file to humanize.")
    parser.add_argument("--tone", choices=TONES, default="professional")
    parser.add_argument("--voice", choices=VOICES, default="first-person")
    parser.add_argument("--expand", action="store_true", help="Let the rewrite elaborate on the text.")
    parser.add_argument(
        "--format",
        choices=["docx", "pdf"],
        default=None,
        help="Also export the rewritten text in this format.",
    )
    parser.add_argument("--output-dir", default=".", help="Where the exported file is written.")
    parser.add_argument("--output-name", default=None, help="Base name of the exported file.")


def _add_serve_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="humanizer-ai",
        description="Rewrite AI-generated text so it reads naturally, and export the result.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_humanize = sub.add_parser("humanize", help="Rewrite text or a document and print the changes.")
    _add_humanize_args(p_humanize)

    p_serve = sub.add_parser("serve", help="Run the HTTP API.")
    _add_serve_args(p_serve)

    return parser


async def _humanize_from_args(args: argparse.Namespace, session: HumanizerSession) -> dict:
    if args.text and args.input_file:
        raise ValueError("Use either --text or --input-file, not both.")
    if not args.text and not args.input_file:
        raise ValueError("Provide --text or --input-file.")

    if args.input_file:
        path = Path(args.input_file)
        if not path.exists():
            raise FileNotFoundError(f"Input file not found: {path}")
        content_type, _ = mimetypes.guess_type(path.name)
        if not await session.load_file(path.name, content_type, path.read_bytes()):
            raise RuntimeError(session.state.error)
    else:
        session.set_input(args.text)

    session.set_options(tone=args.tone, voice=args.voice, expand=args.expand)
    if not await session.rewrite():
        raise RuntimeError(session.state.error)

    state = session.state
    summary: dict = {
        "text": state.output_text,
        "changes": [change.model_dump(by_alias=True) for change in state.changes],
        "stats": state.stats.model_dump(by_alias=True) if state.stats else None,
    }

    if args.format:
        state.output_format = args.format
        if args.output_name:
            state.file_name = args.output_name
        artifact = await session.download()
        if artifact is None:
            raise RuntimeError(state.error or "Nothing to export.")
        out_path = Path(args.output_dir) / artifact.filename
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_bytes(artifact.data)
        summary["exported"] = str(out_path)

    return summary


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        import uvicorn

        uvicorn.run("humanizer_ai.main:app", host=args.host, port=args.port, reload=args.reload)
        return 0

    if args.command == "humanize":
        configure_logging(stream=sys.stderr)
        session = HumanizerSession()
        try:
            summary = asyncio.run(_humanize_from_args(args, session))
        except (ValueError, FileNotFoundError, RuntimeError) as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
        finally:
            session.close()
        print(json.dumps(summary, ensure_ascii=False, indent=2))
        return 0

    raise RuntimeError(f"Unknown command: {args.command}")


if __name__ == "__main__":
    sys.exit(main())
