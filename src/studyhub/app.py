"""Interactive CLI application."""
import argparse
import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.prompt import Confirm, IntPrompt, Prompt

from studyhub.db import DEFAULT_DB_PATH
from studyhub.flashcards import StudySession
from studyhub.progress import get_mastery_color, get_mastery_label
from studyhub.quiz import QUESTION_FORMAT, AnswerFeedback, Complete, Presenting, QuizSession
from studyhub.scheduling import Rating
from studyhub.seed import SUBJECTS, get_subject
from studyhub.service import Result, StudyService

console = Console()

RATING_CHOICES = {"easy": Rating.EASY, "good": Rating.GOOD, "hard": Rating.HARD}


def show_welcome():
    console.print(Panel(
        "[bold]A Level Study Hub[/bold]\n[dim]Notes, quizzes, flashcards and past papers[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu(subject_id: str):
    console.print(f"\n[bold]Subject:[/bold] {get_subject(subject_id).name}")
    console.print("[bold]Commands:[/bold]")
    commands = [
        ("subject", "Switch subject"),
        ("notes", "Write, read and export notes"),
        ("quiz", "Create or play a quiz"),
        ("flashcards", "Add cards or study the deck"),
        ("papers", "Save and analyze past papers"),
        ("progress", "Mastery per subject"),
        ("import", "Add study material from a file"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def check(result: Result) -> bool:
    """Print a failed result. Storage failures end the program."""
    if result.ok:
        return True
    if result.fatal:
        console.print(f"[red]Storage error: {result.message}[/red]")
        raise SystemExit(1)
    console.print(f"[yellow]{result.message}[/yellow]")
    return False


def choose_subject() -> str:
    for i, subject in enumerate(SUBJECTS, 1):
        console.print(f"  [cyan]{i}[/cyan]) {subject.name}")
    choice = IntPrompt.ask("Select subject", choices=[str(i) for i in range(1, len(SUBJECTS) + 1)])
    return SUBJECTS[choice - 1].id


def pick(items: list, describe, prompt: str):
    """Let the user pick one of ``items`` by number. Returns None if there are none."""
    if not items:
        return None
    for i, item in enumerate(items, 1):
        console.print(f"  [cyan]{i}[/cyan]) {describe(item)}")
    choice = IntPrompt.ask(prompt, choices=[str(i) for i in range(1, len(items) + 1)])
    return items[choice - 1]


def run_quiz_session(service: StudyService, session: QuizSession) -> None:
    console.print(f"\n[bold]{session.quiz.title}[/bold] — {session.total} questions\n")
    while True:
        while isinstance(session.state, Presenting):
            index = session.state.index
            question = session.current_question
            console.print(f"[bold]Q{index + 1}:[/bold] {question.q}\n")
            for i, choice in enumerate(question.choices, 1):
                console.print(f"  [cyan]{i})[/cyan] {choice}")
            picked = IntPrompt.ask("\nYour answer", choices=[str(i) for i in range(1, len(question.choices) + 1)])
            result = service.answer_question(session, question.choices[picked - 1])
            if not check(result):
                return
            for effect in result.value.effects:
                if isinstance(effect, AnswerFeedback):
                    if effect.correct:
                        console.print("[green]Correct![/green]\n")
                    else:
                        console.print(f"[red]Wrong![/red] Answer: [green]{effect.answer}[/green]\n")
        state = session.state
        if not isinstance(state, Complete):
            return
        console.print(Panel(f"Your score: [bold]{state.score} / {state.total}[/bold]", title="Quiz complete"))
        action = Prompt.ask("Finish or retry?", choices=["finish", "retry"], default="finish")
        if action == "retry":
            if not check(service.retry_session(session)):
                return
            continue
        if check(service.finish_session(session)):
            console.print("[green]Progress saved.[/green]")
        return


def run_flashcard_session(service: StudyService, session: StudySession) -> None:
    total = len(session.cards)
    console.print(f"\n[bold]Flashcard Session[/bold] — {total} cards\n")
    while session.current_card is not None:
        card = session.current_card
        position = session.state.position
        console.print(Panel(card.front, title=f"Card {position + 1}/{total}", border_style="cyan"))
        action = Prompt.ask("[dim]Flip or skip?[/dim]", choices=["flip", "skip"], default="flip")
        if action == "skip":
            if not check(service.skip_card(session)):
                return
            continue
        if not check(service.reveal_card(session)):
            return
        console.print(Panel(card.back, border_style="green"))
        rating = Prompt.ask("Rate yourself", choices=list(RATING_CHOICES), default="good")
        if not check(service.rate_card(session, RATING_CHOICES[rating])):
            return
        console.print()
    console.print(
        f"[green]Session complete.[/green] Rated {session.reviewed}, skipped {session.skipped}."
    )


def cmd_notes(service: StudyService, subject_id: str):
    action = Prompt.ask("Notes", choices=["add", "summary", "view", "delete", "export"], default="view")
    if action == "add":
        text = Prompt.ask("Note text")
        if check(service.create_note(subject_id, text)):
            console.print("[green]Note saved.[/green]")
    elif action == "summary":
        result = service.summarize_note(Prompt.ask("Text to summarize"))
        if check(result):
            console.print(Panel(result.value, title="Summary"))
    elif action in ("view", "delete"):
        result = service.list_notes(subject_id)
        if not check(result):
            return
        if not result.value:
            console.print("[yellow]No notes yet.[/yellow]")
            return
        note = pick(result.value, lambda n: f"{n.created[:16]}  {n.text[:60]}", "Select note")
        if action == "view":
            console.print(Panel(note.text, title=note.created[:16]))
        elif check(service.delete_note(subject_id, note.id)):
            console.print("[green]Note deleted.[/green]")
    elif action == "export":
        result = service.export_notes(subject_id)
        if check(result):
            target = Path(f"{subject_id}-notes.txt")
            target.write_text(result.value)
            console.print(f"[green]Notes written to {target}[/green]")


def cmd_quiz(service: StudyService, subject_id: str):
    action = Prompt.ask("Quiz", choices=["play", "create", "delete"], default="play")
    if action == "create":
        title = Prompt.ask("Title", default="")
        console.print(f"[dim]One question per line: {QUESTION_FORMAT}. Empty line to finish.[/dim]")
        lines = []
        while True:
            line = Prompt.ask("", default="")
            if not line.strip():
                break
            lines.append(line)
        result = service.create_quiz(subject_id, title, "\n".join(lines))
        if check(result):
            console.print(f"[green]Quiz saved with {len(result.value.questions)} questions.[/green]")
        return
    result = service.list_quizzes(subject_id)
    if not check(result):
        return
    quiz = pick(result.value, lambda q: f"{q.title} ({len(q.questions)} questions)", "Select quiz")
    if action == "delete":
        if quiz is None:
            console.print("[yellow]No quizzes yet.[/yellow]")
        elif check(service.delete_quiz(subject_id, quiz.id)):
            console.print("[green]Quiz deleted.[/green]")
        return
    started = service.start_quiz_session(subject_id, quiz.id if quiz else None)
    if check(started):
        run_quiz_session(service, started.value)


def cmd_flashcards(service: StudyService, subject_id: str):
    action = Prompt.ask("Flashcards", choices=["study", "add", "decks"], default="study")
    if action == "add":
        front = Prompt.ask("Front")
        back = Prompt.ask("Back")
        if check(service.create_card(subject_id, front, back)):
            console.print("[green]Card added.[/green]")
    elif action == "decks":
        result = service.list_decks(subject_id)
        if not check(result):
            return
        if not result.value:
            console.print("[yellow]No flashcards yet.[/yellow]")
        for deck in result.value:
            console.print(f"  [bold]{deck.name}[/bold] [dim]{len(deck.cards)} cards[/dim]")
    else:
        started = service.start_study_session(subject_id)
        if check(started):
            run_flashcard_session(service, started.value)


def cmd_papers(service: StudyService, subject_id: str):
    action = Prompt.ask("Past papers", choices=["save", "analyze", "view", "delete"], default="view")
    if action == "save":
        if check(service.save_past_paper(subject_id, Prompt.ask("Past paper text"))):
            console.print("[green]Past paper saved.[/green]")
        return
    if action == "analyze":
        result = service.analyze_past_paper(Prompt.ask("Past paper text"))
        if check(result):
            console.print("Detected topics / keywords: " + ", ".join(result.value))
        return
    result = service.list_past_papers(subject_id)
    if not check(result):
        return
    if not result.value:
        console.print("[yellow]No past papers saved.[/yellow]")
        return
    paper = pick(result.value, lambda p: f"{p.created[:16]}  {p.text[:60]}", "Select paper")
    if action == "view":
        console.print(Panel(paper.text, title=paper.created[:16]))
    elif check(service.delete_past_paper(subject_id, paper.id)):
        console.print("[green]Past paper deleted.[/green]")


def cmd_progress(service: StudyService, subject_id: str):
    result = service.get_progress()
    if not check(result):
        return
    table = Table(title="Progress")
    table.add_column("Subject", style="cyan")
    table.add_column("Attempts", justify="right")
    table.add_column("Correct", justify="right")
    table.add_column("Mastery", justify="right")
    table.add_column("Status")
    for subject, record in result.value:
        color = get_mastery_color(record.mastery)
        bar_filled = record.mastery // 5
        bar = f"[{color}]{'█' * bar_filled}{'░' * (20 - bar_filled)}[/{color}]"
        table.add_row(
            subject.name, str(record.attempts), str(record.correct),
            f"{record.mastery}% {bar}", f"[{color}]{get_mastery_label(record.mastery)}[/{color}]",
        )
    console.print(table)
    if Confirm.ask(f"Reset progress for {get_subject(subject_id).name}?", default=False):
        if check(service.reset_progress(subject_id)):
            console.print("[green]Progress reset.[/green]")


def cmd_import(service: StudyService, subject_id: str):
    file_path = Prompt.ask("File path")
    if not Path(file_path).exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        return
    target = Prompt.ask("Import as", choices=["note", "pastpaper"], default="note")
    auto = Confirm.ask("Detect subject automatically?", default=False)
    result = service.import_file(file_path, None if auto else subject_id, target)
    if check(result):
        info = result.value
        console.print(
            f"[green]Imported {info['filename']} ({info['length']} chars) → "
            f"{get_subject(info['subject_id']).name}[/green]"
        )


COMMANDS = {
    "notes": cmd_notes,
    "quiz": cmd_quiz,
    "flashcards": cmd_flashcards,
    "papers": cmd_papers,
    "progress": cmd_progress,
    "import": cmd_import,
}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="studyhub", description="A Level study hub")
    parser.add_argument("--db", default=DEFAULT_DB_PATH, help="path of the study database")
    parser.add_argument("--verbose", action="store_true", help="show informational log messages")
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    service = StudyService(args.db)
    show_welcome()
    subject_id = SUBJECTS[0].id

    while True:
        show_menu(subject_id)
        choice = Prompt.ask("\n[bold]>[/bold]", default="quiz").strip().lower()
        try:
            if choice == "subject":
                subject_id = choose_subject()
            elif choice in COMMANDS:
                COMMANDS[choice](service, subject_id)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Good luck with your exams![/dim]")
                return 0
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    raise SystemExit(main())
