#!/usr/bin/env python3
""" Command line front end: runs one operation and prints JSON or an error envelope """

from __future__ import annotations

import json
import logging
from typing import Any, List, Optional

from pydantic import BaseModel

from suno_utilities.args import BaseArgumentParser, parse_arguments
from suno_utilities.configuration import load_configuration
from suno_utilities.credentials import Credential, JsonCredentialStore
from suno_utilities.logging_utils import setup_logging

from .failover import CreditFailover
from .operations import SunoOperations


class FailoverArgumentParser(BaseArgumentParser):
    """ Adds one sub command per operation """

    def add_additional_arguments(self) -> None:
        """ Register the operation sub commands """
        commands = self.parser.add_subparsers(dest="command", required=True)

        generate = commands.add_parser("generate", help="Generate from a description")
        generate.add_argument("--prompt", required=True)
        generate.add_argument("--make-instrumental", action="store_true")
        generate.add_argument("--model", default=None)
        generate.add_argument("--wait-audio", action="store_true")

        custom = commands.add_parser("custom-generate", help="Generate from lyrics, tags and title")
        custom.add_argument("--prompt", required=True)
        custom.add_argument("--tags", required=True)
        custom.add_argument("--title", required=True)
        custom.add_argument("--make-instrumental", action="store_true")
        custom.add_argument("--model", default=None)
        custom.add_argument("--wait-audio", action="store_true")
        custom.add_argument("--negative-tags", default=None)

        extend = commands.add_parser("extend", help="Extend an existing clip")
        extend.add_argument("--audio-id", required=True)
        extend.add_argument("--prompt", default="")
        extend.add_argument("--continue-at", default="0")
        extend.add_argument("--tags", default="")
        extend.add_argument("--title", default="")
        extend.add_argument("--model", default=None)

        concat = commands.add_parser("concat", help="Concatenate an extended clip into a whole song")
        concat.add_argument("--clip-id", required=True)

        lyrics = commands.add_parser("lyrics", help="Generate lyrics")
        lyrics.add_argument("--prompt", required=True)

        get = commands.add_parser("get", help="Fetch clip status")
        get.add_argument("--ids", default=None, help="Comma separated clip ids (whole feed when omitted)")

        clip = commands.add_parser("clip", help="Fetch one raw clip")
        clip.add_argument("--id", required=True)

        commands.add_parser("limit", help="Show the active account's credits")

        chat = commands.add_parser("chat", help="Generate an instrumental and render it as markdown")
        chat.add_argument("--prompt", required=True)


def split_ids(ids: Optional[str]) -> Optional[List[str]]:
    """ Turn "a,b" into ["a", "b"], None or blank into None """
    if not ids:
        return None
    parts = [part.strip() for part in ids.split(",") if part.strip()]
    return parts or None


def render_chat_reply(operations: SunoOperations, prompt: str) -> str:
    """ Markdown summary of the first generated clip """
    audios = operations.generate(prompt, True, None, True)
    if not audios:
        raise ValueError("Generation returned no clips")
    audio = audios[0]
    return (
        f"## Song Title: {audio.title}\n"
        f"![Song Cover]({audio.image_url})\n"
        f"### Lyrics:\n{audio.lyric}\n"
        f"### Listen to the song: {audio.audio_url}"
    )


def run_command(operations: SunoOperations, args: Any) -> Any:
    """ Dispatch the parsed sub command to its operation """
    command = args.command
    if command == "generate":
        return operations.generate(args.prompt, args.make_instrumental, args.model, args.wait_audio)
    if command == "custom-generate":
        return operations.custom_generate(
            args.prompt, args.tags, args.title, args.make_instrumental,
            args.model, args.wait_audio, args.negative_tags
        )
    if command == "extend":
        return operations.extend_audio(
            args.audio_id, args.prompt, args.continue_at, args.tags, args.title, args.model
        )
    if command == "concat":
        return operations.concatenate(args.clip_id)
    if command == "lyrics":
        return operations.generate_lyrics(args.prompt)
    if command == "get":
        return operations.get(split_ids(args.ids))
    if command == "clip":
        return operations.get_clip(args.id)
    if command == "limit":
        return operations.get_limit()
    if command == "chat":
        return render_chat_reply(operations, args.prompt)
    raise ValueError(f"Unknown command '{command}'")


def to_jsonable(result: Any) -> Any:
    """ Dump pydantic models (and lists of them) to plain JSON values """
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json")
    if isinstance(result, list):
        return [to_jsonable(item) for item in result]
    return result


def main(argv: Optional[List[str]] = None) -> int:
    """ Main entry point """
    args = parse_arguments("Suno client with credit failover", FailoverArgumentParser, argv)
    logger = logging.getLogger("suno_failover")

    try:
        config_data = load_configuration(args.config).data
        logger = setup_logging(
            log_file=args.log_file,
            debug=config_data.debug,
            script_name="suno_failover"
        )
        logger.header(f"Running {args.command}")

        store = JsonCredentialStore(args.credentials or config_data.credentials_file)
        credential = Credential(account="command line", secret=args.cookie) if args.cookie else None
        failover = CreditFailover.bootstrap(store, config_data, credential)

        output = to_jsonable(run_command(SunoOperations(failover), args))
    except Exception as exc:
        # Nothing escapes: callers always get JSON back
        logger.error("%s failed: %s", args.command, exc)
        output = {"error": str(exc)}

    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
