"""Interactive CLI application."""
import logging
from datetime import datetime
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from study_tracker.calendar_view import month_due_dates, month_grid
from study_tracker.config import Settings, load_settings
from study_tracker.dashboard import get_group_rows, get_group_summary
from study_tracker.datemath import DAY_NAMES, MONTH_NAMES, format_date_label
from study_tracker.db import init_db
from study_tracker.logging_config import setup_logging
from study_tracker.models import IMPORTANT, PRACTICE, THEORY, TaskGroup
from study_tracker.names import CANONICAL_NAMES
from study_tracker.seed import seed_all
from study_tracker.store import get_subject
from study_tracker.sync import (
    SyncTimer, add_important_task, add_subject, delete_important_task, find_group,
    rename_important_task, reset_subjects, resync, set_days_remaining, set_pdf_count,
    set_progress, set_subject_date,
)

console = Console()
logger = logging.getLogger(__name__)

EXIT_WORDS = ("q", "menu")


class SessionExitRequested(Exception):
    """Raised when the user leaves a multi-step prompt early."""


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer is not None and answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def session_int_prompt(prompt: str, default: Optional[int] = None, choices: Optional[list] = None) -> int:
    while True:
        kwargs = {"choices": choices} if choices else {}
        if default is not None:
            kwargs["default"] = str(default)
        answer = session_prompt(prompt, **kwargs)
        try:
            return int(answer)
        except (TypeError, ValueError):
            console.print("[red]Introduce un número.[/red]")


def show_welcome():
    console.print(Panel(
        "[bold]Seguimiento de estudio[/bold]\n[dim]Álgebra · Cálculo · Poo[/dim]",
        title="Bienvenido", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Comandos:[/bold]")
    commands = [
        ("tracker", "Tablas de Teoría, Práctica e Importante"),
        ("progress", "Actualizar PDFs leídos"),
        ("days", "Cambiar días restantes"),
        ("tasks", "Gestionar tareas importantes"),
        ("calendar", "Ver fechas del mes"),
        ("setup", "Configurar PDFs y fechas"),
        ("add", "Añadir materia"),
        ("reset", "Reiniciar materias"),
        ("quit", "Salir"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<10}[/cyan] {desc}")


def render_group(group: TaskGroup) -> None:
    summary = get_group_summary(group)
    table = Table(title=f"{summary['title']} (media {summary['average']}%)")
    table.add_column("#", justify="right")
    table.add_column("Tarea", style="cyan")
    table.add_column("Progreso", justify="right")
    table.add_column("%", justify="right")
    table.add_column("Días", justify="right")
    table.add_column("Faltan", justify="right")
    for i, row in enumerate(get_group_rows(group), 1):
        color = row["color"]
        missing = f"[red]{row['units_needed']}[/red]" if row["below_average"] else ""
        table.add_row(
            str(i),
            row["text"],
            f"{row['numerator']}/{row['denominator']}",
            f"{row['percentage']:.0f}%",
            f"[{color}]{row['days_remaining']}d[/{color}]",
            missing,
        )
    console.print(table)


def pick_group(groups: list[TaskGroup], allow_important: bool = True) -> TaskGroup:
    options = [THEORY, PRACTICE] + ([IMPORTANT] if allow_important else [])
    for i, session_type in enumerate(options, 1):
        console.print(f"  [cyan]{i}[/cyan]) {find_group(groups, session_type).title}")
    choice = session_int_prompt("Tabla", choices=[str(i) for i in range(1, len(options) + 1)])
    return find_group(groups, options[choice - 1])


def pick_task(group: TaskGroup):
    if not group.tasks:
        console.print("[yellow]No hay tareas en esta tabla.[/yellow]")
        return None
    render_group(group)
    index = session_int_prompt("Número de tarea", choices=[str(i) for i in range(1, len(group.tasks) + 1)])
    return group.tasks[index - 1]


def cmd_tracker(groups: list[TaskGroup]):
    for group in groups:
        render_group(group)


def cmd_progress(db_path: str, groups: list[TaskGroup], local_path: Optional[str] = None):
    group = pick_group(groups)
    task = pick_task(group)
    if task is None:
        return
    numerator = session_int_prompt("Completados", default=task.fraction.numerator)
    denominator = session_int_prompt("Total", default=task.fraction.denominator)
    updated = set_progress(db_path, group, task.id, numerator, denominator, local_path=local_path)
    console.print(f"[green]{updated.text}: {updated.fraction.numerator}/{updated.fraction.denominator}[/green]")


def cmd_days(db_path: str, groups: list[TaskGroup], local_path: Optional[str] = None):
    group = pick_group(groups)
    task = pick_task(group)
    if task is None:
        return
    days = session_int_prompt("Días restantes", default=task.days_remaining or 0)
    updated = set_days_remaining(db_path, group, task.id, days, local_path=local_path)
    console.print(f"[green]{updated.text}: faltan {updated.days_remaining} días[/green]")


def cmd_tasks(db_path: str, groups: list[TaskGroup], local_path: str):
    group = find_group(groups, IMPORTANT)
    render_group(group)
    action = session_prompt("Acción", choices=["add", "rename", "delete"], default="add")
    if action == "add":
        text = session_prompt("Texto")
        due = session_prompt("Fecha (YYYY-MM-DD o Nd)", default="7d")
        url = session_prompt("Enlace (opcional)", default="") or None
        raw_topics = session_prompt("Subtemas separados por comas (opcional)", default="")
        subtopics = [t.strip() for t in raw_topics.split(",") if t.strip()]
        task = add_important_task(
            db_path, group, text, due=due, url=url, subtopics=subtopics, local_path=local_path,
        )
        console.print(f"[green]Añadida: {task.text} ({task.days_remaining}d)[/green]")
    elif action == "rename":
        task = pick_task(group)
        if task:
            text = session_prompt("Nuevo texto", default=task.text)
            rename_important_task(db_path, group, task.id, text, local_path=local_path)
    else:
        task = pick_task(group)
        if task and delete_important_task(db_path, group, task.id, local_path=local_path):
            console.print(f"[green]Eliminada: {task.text}[/green]")


def cmd_calendar(groups: list[TaskGroup], today: Optional[datetime] = None):
    today = today or datetime.now()
    due = month_due_dates(groups, today.year, today.month, today)
    table = Table(title=f"{MONTH_NAMES[today.month - 1]} {today.year}")
    for name in DAY_NAMES:
        table.add_column(name[:2], justify="right")
    cells = []
    for day in month_grid(today.year, today.month):
        if day is None:
            cells.append("")
        elif day in due:
            cells.append(f"[bold magenta]{day}*[/bold magenta]")
        elif day == today.day:
            cells.append(f"[reverse]{day}[/reverse]")
        else:
            cells.append(str(day))
    for start in range(0, len(cells), 7):
        week = cells[start:start + 7]
        table.add_row(*(week + [""] * (7 - len(week))))
    console.print(table)
    for day, labels in sorted(due.items()):
        console.print(f"  [magenta]{day:>2}[/magenta] {', '.join(labels)}")


def cmd_setup(db_path: str):
    for name in CANONICAL_NAMES:
        console.print(f"\n[bold]{name}[/bold]")
        subject = get_subject(db_path, name)
        count = session_int_prompt("Número de PDFs", default=subject.pdf_count if subject else 0)
        set_pdf_count(db_path, name, count)
        for session_type, label in ((THEORY, "Teoría"), (PRACTICE, "Práctica")):
            value = session_prompt(f"Próxima clase de {label} (YYYY-MM-DD o Nd, vacío = horario)", default="")
            if value:
                stored = set_subject_date(db_path, name, session_type, value)
                if stored:
                    console.print(f"  [green]{label}: {format_date_label(stored)}[/green]")
                else:
                    console.print("  [yellow]Fecha no válida, se usa el horario fijo.[/yellow]")


def cmd_add_subject(db_path: str, groups: list[TaskGroup]):
    name = session_prompt("Nombre")
    count = session_int_prompt("Número de PDFs", default=1)
    if name.strip():
        add_subject(db_path, groups, name, max(count, 1))


def cmd_reset(db_path: str):
    if session_prompt("¿Reiniciar PDFs y progreso?", choices=["y", "n"], default="n") == "y":
        reset_subjects(db_path)
        console.print("[green]Materias reiniciadas.[/green]")


def main(settings: Optional[Settings] = None):
    settings = settings or load_settings()
    setup_logging(settings.log_level, settings.log_file)
    db_path = init_db(settings.db_path)
    seed_all(db_path)

    show_welcome()
    timer = SyncTimer(settings.sync_interval)
    groups: list[TaskGroup] = []

    while True:
        if timer.due():
            groups = resync(db_path, settings.local_cache_path)
            timer.mark()
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="tracker").strip().lower()
        try:
            if choice == "tracker":
                cmd_tracker(groups)
            elif choice == "progress":
                cmd_progress(db_path, groups, settings.local_cache_path)
            elif choice == "days":
                cmd_days(db_path, groups, settings.local_cache_path)
            elif choice == "tasks":
                cmd_tasks(db_path, groups, settings.local_cache_path)
            elif choice == "calendar":
                cmd_calendar(groups)
            elif choice == "setup":
                cmd_setup(db_path)
                groups = resync(db_path, settings.local_cache_path)
            elif choice == "add":
                cmd_add_subject(db_path, groups)
            elif choice == "reset":
                cmd_reset(db_path)
                groups = resync(db_path, settings.local_cache_path)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]¡A estudiar![/dim]")
                break
            else:
                console.print("[red]Comando desconocido.[/red]")
        except SessionExitRequested:
            console.print("[dim]Volviendo al menú.[/dim]")
        except KeyboardInterrupt:
            console.print("\n[dim]Usa 'quit' para salir.[/dim]")
        except Exception as e:
            logger.exception("Command %s failed", choice)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
