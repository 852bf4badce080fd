"""
Command-line interface for text translation
"""
import sys
import argparse
import asyncio
import logging

from polyglot.config import (
    API_ENDPOINT,
    DATABASE_PATH,
    DEFAULT_MODEL,
    DEFAULT_SOURCE_LANGUAGE,
    DEFAULT_TARGET_LANGUAGE,
    LIVE_TRANSLATE_DELAY_MS,
)
from polyglot.core.coordinator import LiveTranslationCoordinator
from polyglot.core.credentials import CredentialStore
from polyglot.core.events import Event, EventBus, EventType
from polyglot.core.languages import LANGUAGE_NAMES
from polyglot.core.llm.exceptions import TranslationError
from polyglot.core.llm.providers.openai import OpenAICompatibleProvider
from polyglot.core.models import TranslationRequest, TranslationStatus
from polyglot.core.pipeline import RequestPipeline
from polyglot.persistence.database import Database
from polyglot.persistence.history import HistoryStore

logger = logging.getLogger("translate")

LIVE_HELP = """Live mode: type text and pause to translate.
Commands: :swap  :src <code>  :tgt <code>  :now  :clear  :history  :quit"""


def build_parser() -> argparse.ArgumentParser:
    codes = ", ".join(LANGUAGE_NAMES)
    parser = argparse.ArgumentParser(description="Translate text or detect its language using an LLM.")
    parser.add_argument("text", nargs="?", default=None, help="Text to translate (reads stdin if omitted).")
    parser.add_argument("-i", "--input", default=None, help="Read the text from a file.")
    parser.add_argument("-sl", "--source_lang", default=DEFAULT_SOURCE_LANGUAGE, help=f"Source language code ({codes}; default: {DEFAULT_SOURCE_LANGUAGE}).")
    parser.add_argument("-tl", "--target_lang", default=DEFAULT_TARGET_LANGUAGE, help=f"Target language code (default: {DEFAULT_TARGET_LANGUAGE}).")
    parser.add_argument("-m", "--model", default=DEFAULT_MODEL, help=f"LLM model (default: {DEFAULT_MODEL}).")
    parser.add_argument("--api_endpoint", default=API_ENDPOINT, help=f"Chat completions endpoint (default: {API_ENDPOINT}).")
    parser.add_argument("--api_key", default=None, help="API key (defaults to the saved key or OPENAI_API_KEY).")
    parser.add_argument("--db", default=DATABASE_PATH, help=f"History database (default: {DATABASE_PATH}).")
    parser.add_argument("--detect", action="store_true", help="Detect the language instead of translating.")
    parser.add_argument("--live", action="store_true", help="Interactive live translation from stdin.")
    parser.add_argument("--no-history", action="store_true", help="Do not record the translation in history.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging.")
    return parser


def read_text(args) -> str:
    if args.input:
        with open(args.input, encoding="utf-8") as f:
            return f.read()
    if args.text is not None:
        return args.text
    return sys.stdin.read()


async def run_once(args, pipeline: RequestPipeline, api_key: str, history: HistoryStore) -> int:
    text = read_text(args).strip()
    try:
        if args.detect:
            print(await pipeline.detect_language(text, api_key))
            return 0

        request = TranslationRequest(
            source_text=text,
            source_language=args.source_lang,
            target_language=args.target_lang,
            language_names=LANGUAGE_NAMES
        )
        translation = await pipeline.translate(request, api_key)
    except TranslationError as e:
        logger.error(f"Failed: {e.message}")
        return 1

    print(translation)
    if not args.no_history:
        history.add(text, translation, args.source_lang, args.target_lang)
    return 0


def _print_event(event: Event) -> None:
    if event.type == EventType.TRANSLATION_COMPLETED:
        print(f"[{event.data['target_language']}] {event.data['translation']}")
    elif event.type == EventType.TRANSLATION_FAILED:
        print(f"! {event.data['message']}")
    elif event.type == EventType.LANGUAGE_DETECTED:
        print(f"  (detected: {event.data['language']})")


async def run_live(args, pipeline: RequestPipeline, credentials: CredentialStore,
                   history: HistoryStore) -> int:
    event_bus = EventBus()
    event_bus.subscribe_multiple([
        EventType.TRANSLATION_COMPLETED,
        EventType.TRANSLATION_FAILED,
        EventType.LANGUAGE_DETECTED,
    ], _print_event)
    if not args.no_history:
        history.attach(event_bus)

    coordinator = LiveTranslationCoordinator(
        pipeline,
        credential_provider=lambda: args.api_key or credentials.get_api_key(),
        event_bus=event_bus,
        source_language=args.source_lang,
        target_language=args.target_lang,
        live_mode=True,
        debounce_delay=LIVE_TRANSLATE_DELAY_MS / 1000
    )

    print(LIVE_HELP)
    loop = asyncio.get_running_loop()
    try:
        while True:
            line = await loop.run_in_executor(None, sys.stdin.readline)
            if not line:
                break
            line = line.rstrip("\n")
            command, _, argument = line.partition(" ")
            try:
                if command == ":quit":
                    break
                elif command == ":swap":
                    coordinator.swap_languages()
                elif command == ":src":
                    coordinator.set_source_language(argument.strip())
                elif command == ":tgt":
                    coordinator.set_target_language(argument.strip())
                elif command == ":now":
                    await coordinator.translate_now()
                elif command == ":clear":
                    coordinator.clear()
                elif command == ":history":
                    for entry in history.list():
                        print(f"  {entry.id}: {entry.source_lang}: {entry.source_text} -> "
                              f"{entry.target_lang}: {entry.translation}")
                else:
                    coordinator.set_source_text(line)
            except TranslationError as e:
                print(f"! {e.message}")
        await coordinator.wait_idle()
    finally:
        await coordinator.close()
    return 1 if coordinator.status == TranslationStatus.FAILED else 0


async def main(args) -> int:
    database = Database(args.db)
    credentials = CredentialStore(database)
    history = HistoryStore(database)
    pipeline = RequestPipeline(OpenAICompatibleProvider(api_endpoint=args.api_endpoint, model=args.model))
    try:
        if args.live:
            return await run_live(args, pipeline, credentials, history)
        return await run_once(args, pipeline, args.api_key or credentials.get_api_key(), history)
    finally:
        await pipeline.close()
        database.close()


if __name__ == "__main__":
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.source_lang not in LANGUAGE_NAMES:
        parser.error(f"unsupported source language: {args.source_lang}")
    if args.target_lang not in LANGUAGE_NAMES or args.target_lang == "auto":
        parser.error(f"unsupported target language: {args.target_lang}")

    sys.exit(asyncio.run(main(args)))
