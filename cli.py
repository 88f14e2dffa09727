import argparse
import asyncio
import json
import logging
import os
import sys
import threading
from pathlib import Path
from typing import Callable

import requests

from catalog import make_test_ref
from core.logging_setup import setup_console_logging
from exam_client import DEFAULT_API_URL, ExamApiClient, ExamApiError, HttpQuestionProvider, HttpResultSink
from models import ExamResult, TestRef, TestType, UserIdentity
from serialization import QuestionBankError, format_duration, parse_question_bank
from session_controller import NoQuestionsAvailable, SessionController

OPTION_LABELS = "ABCD"

HELP_TEXT = "A-D answer, n next, p previous, j N jump to question N, s submit, q quit"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="CBDA exam simulator client")
    sub = parser.add_subparsers(dest="command", required=True)

    validate = sub.add_parser("validate", help="Check a question bank file offline")
    validate.add_argument("file", type=Path)
    validate.add_argument("--type", dest="test_type", choices=[t.value for t in TestType], required=True)

    def add_server_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--server", default=os.environ.get("CBDA_API_URL", DEFAULT_API_URL))
        p.add_argument("--email", default=os.environ.get("CBDA_EMAIL"))
        p.add_argument("--password", default=os.environ.get("CBDA_PASSWORD"))
        p.add_argument("--type", dest="test_type", choices=[t.value for t in TestType], required=True)
        p.add_argument("--id", dest="test_id", required=True)

    upload = sub.add_parser("upload", help="Upload a question bank (admin)")
    upload.add_argument("file", type=Path)
    add_server_args(upload)

    take = sub.add_parser("take", help="Take a timed exam in the terminal")
    add_server_args(take)
    take.add_argument("--name", help="Test name shown on the result")

    args = parser.parse_args(argv)
    if args.command != "validate" and not (args.email and args.password):
        parser.error("credentials required: --email/--password or CBDA_EMAIL/CBDA_PASSWORD")
    return args


def validate_command(args: argparse.Namespace) -> int:
    try:
        data = json.loads(args.file.read_text(encoding="utf-8"))
        questions = parse_question_bank(data, TestType(args.test_type))
    except (OSError, json.JSONDecodeError, QuestionBankError) as exc:
        print(f"Invalid question bank: {exc}")
        return 1
    print(f"OK: {len(questions)} questions")
    return 0


def upload_command(args: argparse.Namespace, client: ExamApiClient) -> int:
    client.login(args.email, args.password)
    response = client.upload_bank(args.file, TestType(args.test_type), args.test_id)
    print(response.get("message", "Uploaded"))
    return 0


def render_question(controller: SessionController, out: Callable[[str], None] = print) -> None:
    session = controller.session
    question = session.questions[session.current_index]
    chosen = session.answers.get(question.id)
    out("")
    out(
        f"Question {session.current_index + 1}/{len(session.questions)}"
        f"  [{format_duration(session.remaining_seconds)} left,"
        f" {len(session.answers)} answered]"
    )
    out(question.question)
    for index, option in enumerate(question.options):
        marker = "*" if index == chosen else " "
        out(f" {marker}{OPTION_LABELS[index]}. {option}")


def apply_command(controller: SessionController, line: str, out: Callable[[str], None] = print) -> bool:
    """Apply one line of input. Returns False when the user quits."""
    session = controller.session
    command = line.strip().lower()
    if not command:
        return True
    if command == "q":
        controller.abandon()
        return False
    if command == "s":
        controller.complete()
    elif command == "n":
        controller.advance(1)
    elif command == "p":
        controller.advance(-1)
    elif command.startswith("j"):
        target = command[1:].strip()
        if not target.isdigit() or not controller.jump_to(int(target) - 1):
            out("No such question")
    elif len(command) == 1 and command.upper() in OPTION_LABELS:
        question = session.questions[session.current_index]
        controller.record_answer(question.id, OPTION_LABELS.index(command.upper()))
    else:
        out(HELP_TEXT)
    return True


def start_stdin_reader(queue: asyncio.Queue) -> None:
    """Feed stdin lines into queue from a daemon thread; None marks EOF."""
    loop = asyncio.get_running_loop()

    def _read() -> None:
        for line in sys.stdin:
            loop.call_soon_threadsafe(queue.put_nowait, line.rstrip("\n"))
        loop.call_soon_threadsafe(queue.put_nowait, None)

    threading.Thread(target=_read, name="stdin-reader", daemon=True).start()


async def run_exam(
    controller: SessionController,
    test: TestRef,
    lines: asyncio.Queue,
    out: Callable[[str], None] = print,
) -> ExamResult | None:
    """
    Drive one attempt from queued input lines until it completes.
    Returns the result as soon as it is scored, without waiting for the
    result sink, or None when the user quit or input ran out.
    """
    await controller.start(test)
    out(f"{test.name}: {len(controller.session.questions)} questions, "
        f"{format_duration(controller.session.duration_seconds)}")
    out(HELP_TEXT)

    completion = asyncio.ensure_future(controller.wait_for_completion())
    try:
        while not controller.is_completed:
            render_question(controller, out)
            next_line = asyncio.ensure_future(lines.get())
            done, _ = await asyncio.wait(
                {next_line, completion}, return_when=asyncio.FIRST_COMPLETED
            )
            if completion in done:
                next_line.cancel()
                out("Time is up.")
                break
            line = next_line.result()
            if line is None:
                controller.abandon()
                return None
            if not apply_command(controller, line, out):
                return None
    finally:
        completion.cancel()

    return controller.result


def report(controller: SessionController, out: Callable[[str], None] = print) -> None:
    result = controller.result
    verdict = "PASSED" if result.passed else "FAILED"
    out("")
    out(f"Score: {result.score}% ({result.correct_answers}/{result.total_questions}) {verdict}")
    out(f"Time taken: {result.time_taken}")


def report_submission(controller: SessionController, out: Callable[[str], None] = print) -> None:
    if controller.submission_error is not None:
        out(f"Warning: result could not be saved ({controller.submission_error})")
    elif controller.submission is not None:
        out("Result saved.")


async def take_exam(args: argparse.Namespace, client: ExamApiClient) -> int:
    user = client.login(args.email, args.password)
    controller = SessionController(
        HttpQuestionProvider(client),
        HttpResultSink(client),
        UserIdentity(id=str(user["id"]), name=user["name"], email=user["email"]),
    )
    test = make_test_ref(TestType(args.test_type), args.test_id, args.name)
    lines: asyncio.Queue = asyncio.Queue()
    start_stdin_reader(lines)
    try:
        result = await run_exam(controller, test, lines)
    except NoQuestionsAvailable as exc:
        print(exc)
        return 1
    if result is None:
        print("Exam abandoned; no result was saved.")
        return 1
    report(controller)
    await controller.wait_for_submission()
    report_submission(controller)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_console_logging(logging.WARNING)
    if args.command == "validate":
        return validate_command(args)

    client = ExamApiClient(args.server)
    try:
        if args.command == "upload":
            return upload_command(args, client)
        return asyncio.run(take_exam(args, client))
    except ExamApiError as exc:
        print(f"Server error: {exc}")
        return 1
    except requests.RequestException as exc:
        print(f"Cannot reach server: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
