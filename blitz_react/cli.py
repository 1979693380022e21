"""Command line interface for blitz-react.

Usage::

    blitz-react my-app --template react-ts
    blitz-react my-app -t react-js --no-install --no-git
    python -m blitz_react            # fully interactive
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.prompt import Confirm, Prompt

from blitz_react import __version__
from blitz_react.config import Config
from blitz_react.errors import ScaffoldError, TargetExistsError
from blitz_react.scaffolder import (
    TEMPLATES,
    GenerateOptions,
    GenerationResult,
    ProjectGenerator,
    TemplateVariant,
)
from blitz_react.tooling import check_environment, cleanup_failed_project
from blitz_react.utils import (
    console,
    print_banner,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    validate_project_name,
)

DEFAULT_PROJECT_NAME = "my-app"


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blitz-react",
        description="Create a new React project with minimal setup",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  blitz-react my-app\n"
            "  blitz-react my-app --template react-ts\n"
            "  blitz-react my-app -t react-js --no-install --no-git\n"
        ),
    )
    parser.add_argument("project_name", nargs="?", default=None, metavar="project-name")
    parser.add_argument(
        "-t", "--template",
        default=None,
        help=f"Template to use ({', '.join(v.value for v in TemplateVariant)})",
    )
    parser.add_argument(
        "--no-install",
        dest="install",
        action="store_false",
        help="Skip installing dependencies",
    )
    parser.add_argument(
        "--no-git",
        dest="git",
        action="store_false",
        help="Skip git initialization",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Directory the project folder is created in (default: current directory)",
    )
    parser.add_argument(
        "--registry",
        choices=["npm", "http"],
        default=None,
        help="How package versions are looked up (default: npm)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


# ---------------------------------------------------------------------------
# Interactive prompts
# ---------------------------------------------------------------------------


def prompt_user(
    project_name: str | None = None,
    install_deps: bool = True,
    init_git: bool = True,
) -> GenerateOptions:
    """Ask for whatever the command line did not specify."""
    while not project_name:
        answer = Prompt.ask("What is your project named?", default=DEFAULT_PROJECT_NAME)
        valid, reason = validate_project_name(answer)
        if valid:
            project_name = answer
        else:
            print_error(reason or "Invalid project name")

    for variant, spec in TEMPLATES.items():
        console.print(f"  [cyan]{variant.value}[/cyan]  {spec.display_name}")
    template = Prompt.ask(
        "Which template would you like to use?",
        choices=[v.value for v in TemplateVariant],
        default=TemplateVariant.REACT_JS.value,
    )

    if install_deps:
        install_deps = Confirm.ask("Would you like to install dependencies?", default=True)
    if init_git:
        init_git = Confirm.ask("Would you like to initialize a git repository?", default=True)

    return GenerateOptions(
        project_name=project_name,
        template_variant=TemplateVariant(template),
        install_deps=install_deps,
        init_git=init_git,
    )


# ---------------------------------------------------------------------------
# Project creation
# ---------------------------------------------------------------------------


def create_project(options: GenerateOptions, config: Config) -> int:
    """Run the generator and report the outcome.  Returns the exit code."""
    print_banner("Blitz React")
    console.print("Let's set up your new project!\n")

    target = config.target_dir(options.project_name)
    generator = ProjectGenerator(config)

    try:
        result = asyncio.run(generator.generate(options))
    except TargetExistsError as exc:
        print_error(f"Error: {exc}")
        return 1
    except ScaffoldError as exc:
        print_error(f"Error creating project: {exc}")
        if target.exists():
            print_warning("\nProject was partially created.")
            if Confirm.ask(
                "Would you like to clean up the partially created project?", default=True
            ):
                asyncio.run(cleanup_failed_project(target))
            else:
                print_warning(f"You can manually complete the setup in: {target}")
        return 1

    _print_next_steps(result, options)
    return 0


def _print_next_steps(result: GenerationResult, options: GenerateOptions) -> None:
    print_summary_table(
        {**result.dependencies, **result.dev_dependencies},
        title="Resolved dependencies",
    )
    if result.fallback_packages:
        print_warning(
            "Some versions could not be resolved and were written as 'latest': "
            + ", ".join(result.fallback_packages)
        )

    print_success("\nProject created successfully!")
    console.print("\nNext steps:")
    console.print(f"[cyan]  cd {options.project_name}[/cyan]")
    if not result.installed:
        console.print("[cyan]  npm install[/cyan]")
    console.print("[cyan]  npm run dev[/cyan]")


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``blitz-react`` and ``python -m blitz_react``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = Config.from_env()
    except (ValueError, ValidationError) as exc:
        print_error(f"Error: invalid BLITZ_* environment setting: {exc}")
        sys.exit(1)
    if args.output:
        config.output_dir = Path(args.output)
    if args.registry:
        config.registry.backend = args.registry

    try:
        available = asyncio.run(
            check_environment(
                require_npm=args.install or config.registry.backend == "npm"
            )
        )
    except ScaffoldError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)

    init_git = args.git and available.get("git", False)

    if args.project_name:
        valid, reason = validate_project_name(args.project_name)
        if not valid:
            print_error(f"Error: {reason}")
            sys.exit(1)

    if args.template and args.template not in {v.value for v in TemplateVariant}:
        print_error(f'Error: Template "{args.template}" does not exist.')
        console.print("[cyan]Available templates:[/cyan]")
        for variant, spec in TEMPLATES.items():
            console.print(f"  - {variant.value} ({spec.display_name})")
        sys.exit(1)

    try:
        if args.template:
            options = GenerateOptions(
                project_name=args.project_name or DEFAULT_PROJECT_NAME,
                template_variant=TemplateVariant(args.template),
                install_deps=args.install,
                init_git=init_git,
            )
        else:
            options = prompt_user(args.project_name, install_deps=args.install, init_git=init_git)
    except ValidationError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)

    sys.exit(create_project(options, config))


if __name__ == "__main__":
    main()
