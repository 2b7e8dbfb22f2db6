import argparse
import asyncio
import json
import sys
import threading
import time

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from config.config import Config
from models.search_result import FocusCategory
from orchestrator.core import SearchOrchestrator


def show_loading_animation(stop_event: threading.Event) -> None:
    """Spin on stderr until ``stop_event`` is set, keeping stdout clean for JSON."""
    while not stop_event.is_set():
        for char in '|/-\\':
            if stop_event.is_set():
                break
            sys.stderr.write(f'\r\033[93mSearching {char}\033[0m')
            sys.stderr.flush()
            time.sleep(0.1)
    sys.stderr.write('\r' + ' ' * 20 + '\r')
    sys.stderr.flush()


async def _search_once(orchestrator: SearchOrchestrator, args: argparse.Namespace):
    try:
        return await orchestrator.search(args.query, args.language, args.focus)
    finally:
        await orchestrator.aclose()


def build_parser()-> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ask the search assistant one question")
    parser.add_argument("query", help="Search query")
    parser.add_argument("--language", default="zh-TW", help="Preferred answer language (e.g. zh-TW, zh-CN, en)")
    parser.add_argument(
        "--focus",
        default=FocusCategory.ALL.value,
        choices=[c.value for c in FocusCategory],
        help="Search focus category",
    )
    parser.add_argument("--answer-only", action="store_true", help="Print only the answer text")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    config = Config()
    if not config.validate():
        return 2

    orchestrator = SearchOrchestrator.from_config(config.to_search_config())

    stop_animation = threading.Event()
    loading_thread = None
    if sys.stderr.isatty():
        loading_thread = threading.Thread(target=show_loading_animation, args=(stop_animation,))
        loading_thread.daemon = True
        loading_thread.start()

    try:
        result = asyncio.run(_search_once(orchestrator, args))
    except KeyboardInterrupt:
        print("\nExiting...", file=sys.stderr)
        return 130
    finally:
        stop_animation.set()
        if loading_thread is not None:
            loading_thread.join()

    if args.answer_only:
        print(result.answer)
    else:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    return 0 if result.has_results else 1


if __name__ == "__main__":
    sys.exit(main())
