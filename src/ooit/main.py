"""
Ooit Gedacht - CLI Entry Point.

Usage:
    ooit wizard              Run the intake wizard in the terminal
    ooit dashboard           Show the saved dashboard handoff
    ooit reset               Forget saved wizard progress
    ooit health              Check configuration
    ooit --help              Show help
"""

import asyncio
import logging
import sys

import typer
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.spinner import Spinner
from rich.table import Table

app = typer.Typer(
    name="ooit",
    help="Ooit Gedacht - Design your dream home in 13 questions.",
    add_completion=False,
)
console = Console()

BACK = "b"


def setup_logging(level: str = "INFO", verbose: bool = False) -> None:
    """Setup logging to stderr so it doesn't mix with the wizard prompts."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    # Quiet down noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    from ooit.config import get_settings

    setup_logging(get_settings().log_level, verbose)


def build_engine(fake: bool = False, language: str | None = None):
    """Wire a WizardEngine from settings."""
    from intake.engine import WizardEngine
    from intake.persistence import JsonFileStore, SessionStore
    from ooit.config import get_settings
    from ooit.llm.client import generate_dream_home, generate_placeholder_home

    settings = get_settings()
    store = SessionStore(
        JsonFileStore(settings.session_dir),
        ttl_hours=settings.session_expire_hours,
    )
    return WizardEngine(
        store,
        generate_placeholder_home if fake else generate_dream_home,
        language=language or settings.language,
        min_result_length=settings.min_result_length,
        progress_scale=settings.progress_scale,
        grace_delay_ms=settings.grace_delay_ms,
    )


# =============================================================================
# Step prompts
# =============================================================================


def _ask_choice(question: str, choices: list[str], default: str) -> str | None:
    answer = Prompt.ask(
        f"{question} [dim]({BACK} = terug)[/dim]",
        choices=[*choices, BACK],
        default=default,
        console=console,
    )
    return None if answer == BACK else answer


def _ask_int(question: str, default: int) -> int | None:
    """Whole number, or None if the user typed BACK."""
    while True:
        raw = Prompt.ask(f"{question} [dim]({BACK} = terug)[/dim]", default=str(default), console=console)
        raw = raw.strip().replace(".", "").replace(",", "")
        if raw == BACK:
            return None
        if raw.isdigit():
            return int(raw)
        console.print("[yellow]Vul een getal in.[/yellow]")


def _ask_list(question: str, options: list[str], current: list[str]) -> list[str] | None:
    console.print(f"{question} [dim](komma-gescheiden, leeg = geen, {BACK} = terug)[/dim]")
    for i, option in enumerate(options, 1):
        marker = "[green]✓[/green]" if option in current else " "
        console.print(f"  {marker} {i}. {option}")
    raw = Prompt.ask("Keuze", default=",".join(str(options.index(c) + 1) for c in current if c in options), console=console)
    if raw.strip() == BACK:
        return None
    picked = []
    for part in raw.split(","):
        part = part.strip()
        if part.isdigit() and 1 <= int(part) <= len(options):
            picked.append(options[int(part) - 1])
    return picked


def _ask_step(engine) -> bool:
    """Ask the question for the current step. Returns False if the user went back."""
    from intake.catalog import EXTRAS_BY_CATEGORY, SIZE_OPTIONS, STYLE_OPTIONS
    from intake.state import BUDGET_MAX, BUDGET_MIN, AppState

    prefs = engine.preferences
    state = engine.state

    if state is AppState.WIZARD_STEP_TYPE:
        answer = _ask_choice(
            "Met wie ga je wonen?",
            ["single", "couple", "family", "multi_gen", "other"],
            prefs.household.type,
        )
        if answer is None:
            return False
        engine.complete_type(answer)

    elif state is AppState.WIZARD_STEP_BEDROOMS:
        bedrooms = _ask_int("Hoeveel slaapkamers?", prefs.household.bedrooms)
        if bedrooms is None:
            return False
        wfh = Confirm.ask("Werk je thuis?", default=prefs.household.work_from_home, console=console)
        engine.complete_bedrooms(bedrooms, work_from_home=wfh)

    elif state is AppState.WIZARD_STEP_BUDGET:
        total = _ask_int(f"Totaalbudget in euro ({BUDGET_MIN:,} - {BUDGET_MAX:,})", prefs.budget.total)
        if total is None:
            return False
        engine.complete_budget(min(max(total, BUDGET_MIN), BUDGET_MAX))

    elif state is AppState.WIZARD_STEP_TIMELINE:
        answer = _ask_choice(
            "Wanneer wil je bouwen?",
            ["asap", "within_year", "1-2_years", "flexible"],
            prefs.budget.timeline,
        )
        if answer is None:
            return False
        engine.complete_timeline(answer)

    elif state is AppState.WIZARD_STEP_LOCATION:
        query = Prompt.ask(
            f"Waar wil je wonen? [dim]({BACK} = terug)[/dim]",
            default=prefs.location.search_query or "Utrecht, Utrecht",
            console=console,
        )
        if query.strip() == BACK:
            return False
        engine.complete_location(query.strip())

    elif state is AppState.WIZARD_STEP_STYLE:
        tags = _ask_list("Welke stijlen spreken je aan?", [s.tag for s in STYLE_OPTIONS], prefs.style.mood_board_selections)
        if tags is None:
            return False
        if not tags:
            console.print("[yellow]Kies minstens één stijl.[/yellow]")
            return True
        engine.complete_style(tags)
        console.print(
            f"[dim]Dak: {engine.preferences.style.inferred_roof_style}, "
            f"materiaal: {engine.preferences.style.inferred_material_affinity}[/dim]"
        )

    elif state is AppState.WIZARD_STEP_SIZE:
        answer = _ask_choice("Hoe groot?", [s.value for s in SIZE_OPTIONS], prefs.config.size)
        if answer is None:
            return False
        engine.complete_size(answer)

    elif state is AppState.WIZARD_STEP_MATERIAL:
        answer = _ask_choice("Welk gevelmateriaal?", ["wood", "brick", "concrete", "mixed"], prefs.config.material)
        if answer is None:
            return False
        engine.complete_material(answer)

    elif state is AppState.WIZARD_STEP_ENERGY:
        answer = _ask_choice(
            "Welk energieniveau?",
            ["standard", "aplus", "neutral", "positive"],
            prefs.config.energy_level,
        )
        if answer is None:
            return False
        engine.complete_energy(answer)

    elif state in (
        AppState.WIZARD_STEP_EXTRAS_ENERGY,
        AppState.WIZARD_STEP_EXTRAS_OUTDOOR,
        AppState.WIZARD_STEP_EXTRAS_COMFORT,
    ):
        category = {
            AppState.WIZARD_STEP_EXTRAS_ENERGY: "energy",
            AppState.WIZARD_STEP_EXTRAS_OUTDOOR: "outdoor",
            AppState.WIZARD_STEP_EXTRAS_COMFORT: "comfort",
        }[state]
        extras = _ask_list(f"Extra's ({category})?", list(EXTRAS_BY_CATEGORY[category]), prefs.config.extras)
        if extras is None:
            return False
        engine.complete_extras(category, extras)

    elif state is AppState.WIZARD_STEP_VIBE:
        vibe = _ask_int("Sfeer van 0 (modern) tot 100 (knus)", prefs.config.vibe)
        if vibe is None:
            return False
        engine.complete_vibe(min(max(vibe, 0), 100))

    return True


# =============================================================================
# Wizard loop
# =============================================================================


async def _run_generation(engine) -> None:
    from intake.orchestrator import GenerationStatus

    await engine.start()
    with Live(Spinner("dots", text="..."), console=console, transient=True) as live:
        while engine.orchestrator.status is GenerationStatus.RUNNING:
            view = engine.view
            live.update(Spinner(
                "dots",
                text=f"[{view.generation_step + 1}/{engine.orchestrator.total_steps}] {view.generation_message}",
            ))
            await asyncio.sleep(0.1)
    await engine.wait_for_generation()


def _print_summary(engine) -> None:
    prefs = engine.preferences
    table = Table(show_header=False, box=None)
    table.add_row("Huishouden", f"{prefs.household.type}, {prefs.household.bedrooms} slaapkamers")
    table.add_row("Budget", f"€{prefs.budget.total:,} ({prefs.budget.timeline})")
    table.add_row("Locatie", prefs.location.search_query or "-")
    table.add_row("Stijl", ", ".join(prefs.style.mood_board_selections) or "-")
    table.add_row("Dak / materiaal", f"{prefs.style.inferred_roof_style} / {prefs.config.material}")
    table.add_row("Grootte", f"{prefs.config.size} ({prefs.config.sqm} m²)")
    table.add_row("Energie", prefs.config.energy_level)
    table.add_row("Extra's", ", ".join(prefs.config.extras) or "-")
    table.add_row("Sfeer", str(prefs.config.vibe))
    console.print(table)


async def _wizard_loop(engine) -> None:
    from intake.sequencer import is_intake_step
    from intake.messages import get_generation_error_tip
    from intake.state import AppState

    while True:
        state = engine.state
        view = engine.view

        if state is AppState.LANDING:
            console.print("\n[dim]Tot ziens! 👋[/dim]")
            return

        if is_intake_step(state):
            console.print(f"\n[bold blue]Stap {view.current_step_index + 1}/{view.total_steps}[/bold blue]")
            if not _ask_step(engine):
                engine.back()
            continue

        if state is AppState.GENERATING:
            await _run_generation(engine)
            view = engine.view
            if view.generation_error:
                console.print(f"\n[red]{view.generation_error}[/red]")
                console.print(f"[dim]{get_generation_error_tip(engine.language)}[/dim]")
                if Confirm.ask("Opnieuw proberen?", default=True, console=console):
                    engine.retry_generation()
                else:
                    engine.go_back_from_error()
            continue

        if state is AppState.RESULTS_LOCKED:
            console.print(Panel.fit("[bold green]Je droomhuis staat klaar![/bold green]", border_style="green"))
            _print_summary(engine)
            if Confirm.ask("Naar je dashboard?", default=True, console=console):
                engine.open_dashboard()
            else:
                engine.unlock_results()
            continue

        if state is AppState.RESULTS_UNLOCKED:
            image = view.generated_image or ""
            console.print(f"\n[green]Resultaat ontgrendeld.[/green] [dim]{image[:60]}...[/dim]")
            return

        if state is AppState.DASHBOARD:
            _print_dashboard(engine.dashboard())
            return


def _print_dashboard(snapshot) -> None:
    prefs = snapshot.to_preferences()
    console.print(Panel.fit(
        f"[bold]Dashboard[/bold]\n"
        f"{', '.join(prefs.style.mood_board_selections)} · {prefs.config.sqm} m² · "
        f"€{prefs.budget.total:,}\n"
        f"[dim]{prefs.location.search_query}[/dim]\n"
        f"[dim]{snapshot.image[:60]}[/dim]",
        border_style="blue",
    ))


@app.command()
def wizard(
    lang: str = typer.Option(None, "--lang", help="Language for messages (nl or en)"),
    fake: bool = typer.Option(False, "--fake", help="Use an offline placeholder instead of the image API"),
    log_prompts: bool = typer.Option(False, "--log-prompts", "-l", help="Log generation prompts to prompt_logs/"),
) -> None:
    """Run the intake wizard. Progress is saved and resumed automatically."""
    from ooit.config import get_settings
    from ooit.llm.prompt_logger import enable_prompt_logging, get_session_log_dir

    log_prompts = log_prompts or get_settings().ooit_log_prompts
    if log_prompts:
        enable_prompt_logging(True)
        console.print("[dim]📝 Prompt logging enabled. Check prompt_logs/ after the session.[/dim]")

    engine = build_engine(fake=fake, language=lang)

    console.print(
        Panel.fit(
            "[bold green]Ooit Gedacht[/bold green]\n"
            "Ontwerp je droomhuis in 13 vragen.\n\n"
            "[dim]Ctrl+C om te stoppen, je voortgang blijft bewaard.[/dim]",
            title="Welkom",
            border_style="green",
        )
    )

    try:
        asyncio.run(_wizard_loop(engine))
    except KeyboardInterrupt:
        console.print("\n\n[dim]Gestopt. Je voortgang is bewaard. 👋[/dim]")
    finally:
        engine.close()

    if log_prompts:
        log_dir = get_session_log_dir()
        if log_dir:
            console.print(f"\n[dim]📝 Prompts logged to: {log_dir}[/dim]")


@app.command()
def dashboard(
    as_json: bool = typer.Option(False, "--json", help="Print the raw snapshot"),
) -> None:
    """Show the dashboard handoff (or the demo dashboard)."""
    from intake.handoff import DashboardHandoff
    from intake.persistence import JsonFileStore, SessionStore, dump_snapshot
    from ooit.config import get_settings

    store = SessionStore(JsonFileStore(get_settings().session_dir))
    snapshot = DashboardHandoff(store).load()
    if as_json:
        console.print_json(dump_snapshot(snapshot))
    else:
        _print_dashboard(snapshot)


@app.command()
def reset() -> None:
    """Forget saved wizard progress."""
    from intake.persistence import JsonFileStore, SessionStore
    from ooit.config import get_settings

    SessionStore(JsonFileStore(get_settings().session_dir)).clear()
    console.print("✅ Wizard progress cleared")


@app.command()
def health() -> None:
    """Check configuration."""
    from ooit.config import get_settings

    console.print("\n[bold]Ooit Gedacht Health Check[/bold]\n")

    try:
        settings = get_settings()
        console.print("✅ Configuration loaded")
        console.print(f"   Environment: {settings.ooit_env}")
        if settings.is_development:
            console.print("   Prompt logging available (--log-prompts)")
        console.print(f"   Log level: {settings.log_level}")
        console.print(f"   Session dir: {settings.session_dir}")

        if settings.openai_api_key and settings.openai_api_key.startswith("sk-"):
            console.print(f"✅ OpenAI API key configured (model: {settings.image_model})")
        else:
            console.print("⚠️  OpenAI API key missing; use `ooit wizard --fake` to run offline")

    except Exception as e:
        console.print(f"\n[red]❌ Configuration error: {e}[/red]")
        console.print("[dim]Check your .env file.[/dim]")
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    from ooit import __version__

    console.print(f"Ooit Gedacht version {__version__}")


if __name__ == "__main__":
    app()
