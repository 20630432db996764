"""
Command-line client

Usage:
    python -m app.cli chat --user <id> "मेरो तलब आएको छैन"
    python -m app.cli scan --user <id> contract.pdf
    python -m app.cli translate --from ne --to en "नमस्ते"
    python -m app.cli seed-contacts contacts.json --replace
    python -m app.cli token --user <id>
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from app.core import localization
from app.core.config import settings
from app.core.database import SessionLocal, engine
from app.models import Base
from app.schemas.directory import ContactSeed
from app.services.auth import JWTService
from app.services.chat_controller import ChatSessionController, SqlChatStore
from app.services.chat_transport import RagChatTransport
from app.services.document_analyzer import GatewayDocumentAnalyzer
from app.services.ingestion_pipeline import (
    DocumentIngestionPipeline,
    PipelineStep,
    SqlDocumentStore,
    UploadedFile,
)
from app.services.notifications import CollectingNotifier
from app.services.ocr_extractor import OcrExtractor
from app.services.repositories import ContactRepository
from app.services.translation_flow import TranslationSession
from app.services.translator import GatewayTranslator, LANGUAGES

logger = logging.getLogger(__name__)

DATABASE_COMMANDS = {"chat", "scan", "seed-contacts"}


async def run_chat(args) -> int:
    db = SessionLocal()
    try:
        notifier = CollectingNotifier()
        controller = ChatSessionController(
            SqlChatStore(db), RagChatTransport(db), args.user, notifier=notifier, chat_id=args.chat_id
        )
        if args.chat_id:
            await controller.load_messages(args.chat_id)
        state = await controller.send(args.message)

        for message in state.messages[-2:]:
            print(f"[{message.role}] {message.content}")
        print(f"chat: {state.current_chat_id}")
        return 1 if notifier.last_error() else 0
    finally:
        db.close()


async def run_scan(args) -> int:
    path = Path(args.path)
    if not path.is_file():
        logger.error(f"File not found: {path}")
        return 1

    db = SessionLocal()
    try:
        notifier = CollectingNotifier()
        pipeline = DocumentIngestionPipeline(
            OcrExtractor(), GatewayDocumentAnalyzer(), SqlDocumentStore(db), args.user, notifier=notifier
        )
        state = await pipeline.process(UploadedFile(filename=path.name, content=path.read_bytes()))
        if state.step != PipelineStep.RESULT:
            print(state.error)
            return 1

        analysis = state.analysis
        print(f"{localization.doc_type_name(analysis.doc_type)} ({analysis.clarity_score}/100)")
        print(analysis.summary)
        for flag in analysis.red_flags:
            print(f"  ! {flag}")
        for question in analysis.questions_to_ask:
            print(f"  ? {question}")
        if state.document_id:
            print(f"document: {state.document_id}")
        return 0
    finally:
        db.close()


async def run_translate(args) -> int:
    notifier = CollectingNotifier()
    session = TranslationSession(GatewayTranslator(), notifier=notifier, from_lang=args.from_lang, to_lang=args.to_lang)
    translation = await session.translate(args.text)
    if translation is None:
        print(notifier.last_error() or localization.TRANSLATION_FAILED)
        return 1
    print(translation)
    return 0


def run_seed_contacts(args) -> int:
    try:
        rows = json.loads(Path(args.path).read_text(encoding="utf-8"))
        seeds = [ContactSeed(**row).model_dump() for row in rows]
    except (OSError, ValueError, TypeError, ValidationError) as e:
        logger.error(f"Could not read contacts from {args.path}: {e}")
        return 1

    db = SessionLocal()
    try:
        count = ContactRepository(db).bulk_load(seeds, replace=args.replace)
        logger.info(f"Seeded {count} contacts")
        return 0
    finally:
        db.close()


def run_token(args) -> int:
    print(JWTService.create_access_token(args.user))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Migrant Legal Guide command-line client")
    subparsers = parser.add_subparsers(dest="command", required=True)

    chat = subparsers.add_parser("chat", help="Send a message to the legal assistant")
    chat.add_argument("message", type=str)
    chat.add_argument("--user", required=True, help="User id that owns the chat")
    chat.add_argument("--chat-id", default=None, help="Continue an existing chat")

    scan = subparsers.add_parser("scan", help="OCR and analyze a photo or PDF")
    scan.add_argument("path", type=str)
    scan.add_argument("--user", required=True)

    translate = subparsers.add_parser("translate", help="Translate text")
    translate.add_argument("text", type=str)
    translate.add_argument("--from", dest="from_lang", choices=sorted(LANGUAGES), default="ne")
    translate.add_argument("--to", dest="to_lang", choices=sorted(LANGUAGES), default="en")

    seed = subparsers.add_parser("seed-contacts", help="Load emergency contacts from a JSON list")
    seed.add_argument("path", type=str)
    seed.add_argument("--replace", action="store_true", help="Replace existing contacts of the same countries")

    token = subparsers.add_parser("token", help="Issue a bearer token signed with SECRET_KEY")
    token.add_argument("--user", required=True)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.command in DATABASE_COMMANDS:
        Base.metadata.create_all(bind=engine)

    if args.command == "chat":
        return asyncio.run(run_chat(args))
    if args.command == "scan":
        return asyncio.run(run_scan(args))
    if args.command == "translate":
        return asyncio.run(run_translate(args))
    if args.command == "seed-contacts":
        return run_seed_contacts(args)
    return run_token(args)


if __name__ == "__main__":
    sys.exit(main())
