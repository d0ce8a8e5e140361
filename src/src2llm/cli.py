"""Command-line interface for src2llm."""
import os
import sys
import logging
from typing import List, Optional

import click
from dotenv import load_dotenv
from rich.markup import escape

from . import __version__
from .core.config_loader import default_config, load_config_file, select_config
from .core.errors import Src2LLMError
from .core.models import OUTPUT_FORMATS, RunResult, SourceConfig
from .core.runner import BundleRunner
from .core.stats import format_bytes, format_number
from .core.tokenizer import TokenCounter
from .utils.console import THEMES, ConsoleManager
from .utils.tree_builder import SizeTreeBuilder

# SRC2LLM_* defaults may come from a .env file
load_dotenv()


def setup_logging(debug: bool) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else logging.WARNING
    format_string = '[%(levelname)s] %(message)s'

    logging.basicConfig(
        level=level,
        format=format_string,
        handlers=[logging.StreamHandler(sys.stderr)]
    )


def choose_config(configs: List[SourceConfig], config_id: Optional[str],
                  console: ConsoleManager) -> SourceConfig:
    """Pick the configuration to run, prompting when it is ambiguous."""
    if config_id:
        return select_config(configs, config_id)
    if len(configs) == 1:
        return configs[0]

    console.print("[info]Available configurations:[/info]")
    for config in configs:
        console.print(f"  [highlight]{escape(config.id)}[/highlight]  {escape(config.display_name)}")
    selected = click.prompt("Configuration", type=click.Choice([c.id for c in configs]))
    return select_config(configs, selected)


def print_report(result: RunResult, console: ConsoleManager) -> None:
    """Print the processing report."""
    stats = result.stats

    console.print("")
    console.print_separator("═")
    console.print("[highlight]PROCESSING REPORT[/highlight]")
    console.print_separator("═")
    console.print_field("Output file:", os.path.relpath(result.output_path))
    console.print_field("Visualization data:", os.path.relpath(result.visualization_path))
    console.print_separator()
    console.print_field("Output format:", result.output_format.upper())
    console.print_field("Total files processed:", format_number(stats.total_files))
    console.print_field("Total source size:", format_bytes(stats.total_source_size))
    console.print_field("Output file size:", format_bytes(stats.output_file_size))
    console.print_field("Estimated tokens:", format_number(stats.estimated_tokens))
    if result.exact_tokens is not None:
        console.print_field("Tokenizer count:", format_number(result.exact_tokens))

    largest = SizeTreeBuilder.directory_sizes(result.tree, top_n=5)
    if largest:
        console.print_separator()
        console.print("[info]Largest directories:[/info]")
        for path, size in largest.items():
            console.print(f"  {format_bytes(size):>12}  {escape(path)}/")

    for path in result.skipped_paths:
        console.print_warning(f"Skipped missing path: {path}")
    console.print_separator("═")


@click.command()
@click.argument('config_file', required=False, envvar='SRC2LLM_CONFIG',
                type=click.Path(dir_okay=False))
@click.option('--config-id', '-c', help='Id of the configuration to run')
@click.option('--format', '-f', 'output_format', type=click.Choice(OUTPUT_FORMATS),
              help='Override the output format of the configuration')
@click.option('--output-dir', '-o', envvar='SRC2LLM_OUTPUT_DIR',
              help='Override the output directory of the configuration')
@click.option('--list', 'list_only', is_flag=True, help='List configurations and exit')
@click.option('--count-tokens', is_flag=True, help='Also count tokens with tiktoken')
@click.option('--theme', '-t', type=click.Choice(list(THEMES)), default='manhattan',
              help='Terminal color theme')
@click.option('--plain', is_flag=True, help='Disable colored output')
@click.option('--debug', is_flag=True, help='Enable debug logging and tracebacks')
@click.version_option(version=__version__, prog_name='src2llm')
def main(config_file: Optional[str], config_id: Optional[str], output_format: Optional[str],
         output_dir: Optional[str], list_only: bool, count_tokens: bool, theme: str,
         plain: bool, debug: bool) -> None:
    """
    Bundle source files into a single JSON, YAML or TOON document.

    CONFIG_FILE is a JSON or YAML definition file holding one or more
    configurations. Without it, the current directory is bundled with the
    default rules.

    Examples:

        src2llm configs.yaml

        src2llm configs.yaml --config-id web --format toon

        src2llm configs.json --list
    """
    console = ConsoleManager(theme=theme, force_plain=plain)
    setup_logging(debug)

    try:
        configs = load_config_file(config_file) if config_file else [default_config()]

        if list_only:
            for config in configs:
                console.print(f"[highlight]{escape(config.id)}[/highlight]  "
                              f"{escape(config.display_name)}  [dim]({config.output_format})[/dim]")
            return

        config = choose_config(configs, config_id, console)

        overrides = {}
        if output_format:
            overrides['output_format'] = output_format
        if output_dir:
            overrides['output_dir'] = output_dir
        if overrides:
            config = config.model_copy(update=overrides)

        console.print_info(f"Running configuration: {config.id}")
        token_counter = TokenCounter() if count_tokens else None
        runner = BundleRunner(config, token_counter=token_counter, show_progress=not plain)
        result = runner.run()

        print_report(result, console)
        console.print_success("Done")

    except KeyboardInterrupt:
        console.print_error("Interrupted")
        sys.exit(1)

    except (Src2LLMError, OSError) as e:
        console.print_error(str(e))
        if debug:
            console.print_exception()
        sys.exit(1)


if __name__ == '__main__':
    main()
