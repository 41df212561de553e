"""Interactive CLI application."""
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from facta import goals as goal_tracker
from facta import levels
from facta.content import ContentProvider, filter_favorites
from facta.db import DEFAULT_DB_PATH, init_db
from facta.models import BoolAnswer, ChoiceAnswer, Fact, Goal, QuizMode, QuizQuestion, QuizResult
from facta.profile import load_profile, mark_fact_read
from facta.quiz import ChallengeStage, Phase, QuizSession
from facta.settings import (
    THEMES, StoreScheduler, finish_onboarding, set_display_name, set_theme,
    toggle_daily_fact, toggle_quiz_reminders,
)
from facta.store import ProgressStore
from facta.streak import challenge_key
from facta.timer import Ticker

console = Console()


class SessionExitRequested(Exception):
    """Raised when the user types 'q' or 'menu' inside a session."""


EXIT_WORDS = ("q", "menu")


def session_prompt(prompt: str, **kwargs) -> str:
    if kwargs.get("choices"):
        kwargs["choices"] = list(kwargs["choices"]) + list(EXIT_WORDS)
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def session_int_prompt(prompt: str, choices: list[str]) -> int:
    answer = Prompt.ask(prompt, choices=choices + list(EXIT_WORDS), show_choices=False)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return int(answer)


@dataclass
class AppContext:
    store: ProgressStore
    provider: ContentProvider
    scheduler: StoreScheduler
    daily_goals: list[Goal] = field(default_factory=goal_tracker.daily_goals)
    weekly_goals: list[Goal] = field(default_factory=goal_tracker.weekly_goals)
    @property
    def goals(self) -> list[Goal]:
        return self.daily_goals + self.weekly_goals


def make_session(ctx: AppContext) -> QuizSession:
    session = QuizSession(ctx.provider, ctx.store)
    session.on_timer_start = lambda token: Ticker(session.tick, token).start()
    return session


def announce_goals(completed: list[Goal]) -> None:
    for goal in completed:
        console.print(f"[green]Goal complete: {goal.description} (+{goal.reward_xp} XP)[/green]")


def show_welcome(ctx: AppContext):
    name = ctx.store.load_user_settings().display_name
    console.print(Panel(
        f"[bold]Facta[/bold]\n[dim]Hi {name}! One fact a day, and a quiz to prove it.[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("today", "Today's fact + discovery feed"),
        ("quiz", "Play a quiz"),
        ("favorites", "Saved facts"),
        ("history", "Past quiz results"),
        ("profile", "Level, XP, streak and badges"),
        ("goals", "Daily and weekly goals"),
        ("settings", "Name, theme and reminders"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def run_onboarding(ctx: AppContext) -> None:
    console.print(Panel(
        "Read a new fact every day, keep your streak alive, and test yourself\n"
        "with quizzes to earn XP and badges.",
        title="Getting started", border_style="magenta",
    ))
    name = Prompt.ask("What should we call you?", default="")
    set_display_name(ctx.store, name)
    wants = Prompt.ask("Remind you about the daily fact at 09:00?", choices=["y", "n"], default="y")
    enabled = wants == "y"
    when = finish_onboarding(ctx.store, ctx.scheduler, notifications_granted=enabled, daily_fact_enabled=enabled)
    if when:
        console.print(f"[green]Daily reminder set for {when:%Y-%m-%d %H:%M}.[/green]")


def show_fact(fact: Fact, title: str) -> None:
    tags = "  ".join(f"{t.emoji} {t.label}" for t in fact.tags)
    console.print(Panel(
        f"[bold]{fact.title}[/bold]\n\n{fact.content}\n\n[dim]{fact.category}  {tags}[/dim]",
        title=title, border_style="cyan",
    ))


def read_fact(ctx: AppContext, fact: Fact) -> None:
    mark_fact_read(ctx.store, fact.id, datetime.now())
    announce_goals(goal_tracker.record_fact_read(ctx.goals))


def save_favorite(ctx: AppContext, fact: Fact) -> None:
    if any(f.id == fact.id for f in ctx.store.load_favorites()):
        console.print("[dim]Already in favorites.[/dim]")
        return
    ctx.store.save_favorite(fact)
    console.print("[green]Saved to favorites.[/green]")
    announce_goals(goal_tracker.record_favorite_saved(ctx.goals))


def cmd_today(ctx: AppContext):
    fact = ctx.provider.daily_fact()
    show_fact(fact, "Fact of the day")
    read_fact(ctx, fact)
    discovery = ctx.provider.discovery_facts()
    index = -1  # still on the fact of the day
    while True:
        action = session_prompt("[s]ave, [n]ext fact, [r]eshuffle", choices=["s", "n", "r"], default="n")
        if action == "s":
            save_favorite(ctx, fact)
            continue
        if action == "r":
            discovery = ctx.provider.discovery_facts()
            index = 0
        elif index + 1 >= len(discovery):
            console.print("[yellow]That's all for today![/yellow]")
            return
        else:
            index += 1
        if not discovery:
            return
        fact = discovery[index]
        show_fact(fact, f"Discover {index + 1}/{len(discovery)}")
        read_fact(ctx, fact)


def correct_answer_text(question: QuizQuestion) -> str:
    key = question.answer
    if isinstance(key, ChoiceAnswer):
        return key.options[key.correct_index]
    if isinstance(key, BoolAnswer):
        return "True" if key.correct else "False"
    return key.correct_text


def ask_answer(question: QuizQuestion):
    key = question.answer
    if isinstance(key, ChoiceAnswer):
        if key.image_name:
            console.print(f"[dim]Picture: {key.image_name}[/dim]")
        for i, option in enumerate(key.options, 1):
            console.print(f"  [cyan]{i})[/cyan] {option}")
        choices = [str(i) for i in range(1, len(key.options) + 1)]
        return session_int_prompt("\nYour answer", choices=choices) - 1
    if isinstance(key, BoolAnswer):
        return session_prompt("\nTrue or false", choices=["t", "f"]) == "t"
    while True:
        text = session_prompt("\nFill in the blank")
        if text.strip():
            return text
        console.print("[yellow]Type an answer first.[/yellow]")


def show_result(session: QuizSession) -> None:
    if session.mode == QuizMode.CHALLENGE:
        winner = session.winner
        verdict = "It's a tie!" if winner == "tie" else f"{'Player 1' if winner == 'player1' else 'Player 2'} wins!"
        console.print(Panel(
            f"Player 1: [bold]{session.player_one_score}[/bold]   Player 2: [bold]{session.player_two_score}[/bold]\n{verdict}",
            title="Challenge result", border_style="magenta",
        ))
        return
    result = session.last_result
    if result is None:
        return
    lines = [
        f"Score: [bold]{result.score}/{result.total} ({result.percentage}%)[/bold]",
        f"Best streak: [bold]{result.best_streak}[/bold]",
    ]
    if session.bonus_xp:
        lines.append(f"[green]Challenge bonus: +{session.bonus_xp} XP[/green]")
    console.print(Panel("\n".join(lines), title=result.mode.display_name, border_style="green"))


def run_quiz_session(session: QuizSession, mode: QuizMode) -> QuizResult | None:
    session.start(mode)
    if not session.questions:
        console.print("[yellow]No questions available![/yellow]")
    console.print(f"\n[bold]{mode.display_name}[/bold]: {len(session.questions)} questions\n")
    try:
        while session.phase == Phase.PLAYING:
            question = session.current_question
            if question is None:
                session.next()
                continue
            stage = ""
            if session.stage is not None:
                stage = f"[magenta]{'Player 1' if session.stage == ChallengeStage.PLAYER1 else 'Player 2'}[/magenta]  "
            console.print(
                f"{stage}[bold]Q{session.index + 1}/{len(session.questions)}.[/bold] "
                f"{question.question}  [dim]({session.time_left}s left)[/dim]"
            )
            value = ask_answer(question)
            if session.phase != Phase.PLAYING:
                console.print("[red]Time's up![/red]")
                break
            correct = session.answer(value)
            if correct is None:
                console.print(f"[red]Time's up.[/red] Answer: [green]{correct_answer_text(question)}[/green]")
            elif correct:
                console.print("[green]Correct![/green]")
            else:
                console.print(f"[red]Incorrect.[/red] Answer: [green]{correct_answer_text(question)}[/green]")
            if question.explanation:
                console.print(f"[dim]{question.explanation}[/dim]")
            console.print()
            if session.phase == Phase.PLAYING:
                before = session.stage
                session.next()
                if before == ChallengeStage.PLAYER1 and session.stage == ChallengeStage.PLAYER2:
                    console.print(Panel("Hand over to player 2!", border_style="magenta"))
    except SessionExitRequested:
        session.back_to_overview()
        raise
    show_result(session)
    return session.last_result


def cmd_quiz(ctx: AppContext):
    console.print("\n[bold]Quiz modes:[/bold]")
    modes = list(QuizMode)
    completed = ctx.store.load_completed_challenges()
    today = datetime.now().date()
    for i, mode in enumerate(modes, 1):
        done = ""
        if mode in (QuizMode.DAILY, QuizMode.WEEKLY) and challenge_key(mode, today) in completed:
            done = "  [green]✓ done, replay without bonus[/green]"
        console.print(f"  [cyan]{i})[/cyan] {mode.display_name}{done}")
    choice = session_int_prompt("Select mode", choices=[str(i) for i in range(1, len(modes) + 1)])
    session = make_session(ctx)
    result = run_quiz_session(session, modes[choice - 1])
    if result is not None:
        announce_goals(goal_tracker.record_quiz_finished(ctx.goals, result))
    session.back_to_overview()


def cmd_history(ctx: AppContext):
    history = QuizSession(ctx.provider, ctx.store).show_history()
    if not history:
        console.print("[yellow]No quizzes played yet.[/yellow]")
        return
    table = Table(title="Quiz History")
    table.add_column("Date")
    table.add_column("Mode", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Best streak", justify="right")
    for r in reversed(history):
        table.add_row(f"{r.date:%Y-%m-%d %H:%M}", r.mode.display_name, f"{r.score}/{r.total} ({r.percentage}%)", str(r.best_streak))
    console.print(table)


def cmd_favorites(ctx: AppContext):
    query = Prompt.ask("Search (blank for all)", default="")
    category = Prompt.ask("Category (blank for all)", default="")
    favorites = filter_favorites(ctx.store.load_favorites(), query, category or None)
    if not favorites:
        console.print("[yellow]No favorites found.[/yellow]")
        return
    table = Table(title="Favorites")
    table.add_column("#", justify="right")
    table.add_column("Title", style="cyan")
    table.add_column("Category")
    for i, fact in enumerate(favorites, 1):
        table.add_row(str(i), fact.title, fact.category)
    console.print(table)
    remove = Prompt.ask("Remove # (blank to keep all)", default="")
    if remove.isdigit() and 1 <= int(remove) <= len(favorites):
        fact = favorites[int(remove) - 1]
        ctx.store.remove_favorite(fact.id)
        console.print(f"[dim]Removed {fact.title}.[/dim]")


def cmd_profile(ctx: AppContext):
    profile = load_profile(ctx.store, datetime.now())
    stats = profile.stats
    announce_goals(goal_tracker.record_streak(ctx.goals, stats.streak_days))

    console.print(Panel(
        f"[bold]Level {stats.level}[/bold] · {levels.level_title(stats.level)}\n"
        f"{stats.total_xp} XP · {levels.xp_for_next_level(stats.total_xp)} XP to next level",
        title=ctx.store.load_user_settings().display_name, border_style="blue",
    ))
    if stats.has_leveled_up:
        console.print(f"[bold green]Level up! {stats.previous_level} → {stats.level}[/bold green]")
    if profile.daily_reward_xp:
        console.print(f"[green]Daily reward: +{profile.daily_reward_xp} XP[/green]")
    if profile.milestone_xp:
        console.print(f"[green]Streak milestone bonus: +{profile.milestone_xp} XP[/green]")

    progress = levels.xp_progress(stats.total_xp)
    filled = progress // 5
    console.print(f"  [blue]{'█' * filled}{'░' * (20 - filled)}[/blue] {progress}/100\n")
    console.print(f"  Streak: [bold]{stats.streak_days}[/bold] days (longest {profile.streak.longest_streak})  |  "
                  f"Facts: [bold]{stats.total_facts_read}[/bold]  |  "
                  f"Quizzes: [bold]{stats.total_quizzes}[/bold]  |  "
                  f"Avg Quiz: [bold]{stats.avg_quiz_score}%[/bold]")
    if stats.favorite_category:
        console.print(f"  Favorite category: [cyan]{stats.favorite_category}[/cyan]")

    table = Table(title=f"Badges ({stats.badges_unlocked}/{len(profile.badges)})")
    table.add_column("")
    table.add_column("Badge", style="cyan")
    table.add_column("How")
    table.add_column("Status")
    for badge in profile.badges:
        status = "[green]Unlocked[/green]" if badge.is_unlocked else "[dim]Locked[/dim]"
        table.add_row(badge.icon, badge.name, badge.description, status)
    console.print(table)


def cmd_goals(ctx: AppContext):
    for title, goals in (("Daily goals", ctx.daily_goals), ("Weekly goals", ctx.weekly_goals)):
        table = Table(title=title)
        table.add_column("")
        table.add_column("Goal", style="cyan")
        table.add_column("Progress", justify="right")
        table.add_column("Reward", justify="right")
        for goal in goals:
            if goal.is_completed:
                progress = "[green]Done[/green]"
            else:
                color = "yellow" if goal_tracker.is_near_completion(goal) else "white"
                progress = f"[{color}]{min(goal.progress, goal.target)}/{goal.target}[/{color}]"
            table.add_row(goal.icon, goal.description, progress, f"{goal.reward_xp} XP")
        console.print(table)


def cmd_settings(ctx: AppContext):
    settings = ctx.store.load_user_settings()
    console.print(f"  Name: [cyan]{settings.display_name}[/cyan]  Theme: [cyan]{settings.theme}[/cyan]  "
                  f"Daily fact reminder: [cyan]{'on' if settings.daily_fact_notifications else 'off'}[/cyan]  "
                  f"Quiz reminder: [cyan]{'on' if settings.quiz_reminders else 'off'}[/cyan]")
    choice = Prompt.ask("Change", choices=["name", "theme", "daily", "quiz", "done"], default="done")
    if choice == "name":
        set_display_name(ctx.store, Prompt.ask("Display name", default=""))
    elif choice == "theme":
        set_theme(ctx.store, Prompt.ask("Theme", choices=list(THEMES), default=settings.theme))
    elif choice == "daily":
        toggle_daily_fact(ctx.store, ctx.scheduler, not settings.daily_fact_notifications)
    elif choice == "quiz":
        toggle_quiz_reminders(ctx.store, ctx.scheduler, not settings.quiz_reminders)


def main():
    logging.basicConfig(
        level=logging.DEBUG if os.environ.get("FACTA_DEBUG") else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    db_path = os.environ.get("FACTA_DB_PATH", DEFAULT_DB_PATH)
    init_db(db_path)
    store = ProgressStore(db_path)
    ctx = AppContext(store=store, provider=ContentProvider(), scheduler=StoreScheduler(store))

    if not store.is_onboarding_complete():
        run_onboarding(ctx)

    show_welcome(ctx)
    commands = {
        "today": cmd_today,
        "quiz": cmd_quiz,
        "favorites": cmd_favorites,
        "history": cmd_history,
        "profile": cmd_profile,
        "goals": cmd_goals,
        "settings": cmd_settings,
    }

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="today").strip().lower()
        try:
            if choice in commands:
                commands[choice](ctx)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]See you tomorrow. Keep the streak going![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except SessionExitRequested:
            console.print("[dim]Back to the menu.[/dim]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
