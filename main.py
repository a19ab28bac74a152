#!/usr/bin/env python3
"""
FeatureGen - Cucumber Feature Generator

Generate Gherkin feature files from user stories with an LLM and keep their
complexity analysis aligned with the scenarios they contain.
"""

import click
import json
import os
import logging
import sys
from pathlib import Path

from featuregen.config import Config
from featuregen.llm_client import LLMClient
from featuregen.gherkin import extract_scenario_titles
from featuregen.models import ComplexityAnalysis
from featuregen.reconciler import needs_reanalysis, normalize_analysis_to_text
from featuregen.complexity_analyzer import ComplexityAnalyzer
from featuregen.feature_generator import FeatureGenerator
from featuregen.exceptions import FeatureGenError


def setup_logging(verbose: bool = False):
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO

    # Console handler (stderr keeps stdout clean for command output)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    console_handler.setFormatter(formatter)

    # Configure root logger
    logger = logging.getLogger()
    logger.setLevel(level)
    logger.addHandler(console_handler)

    # Reduce noise from external libraries
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('openai').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)


def load_config(ctx) -> Config:
    """Load and validate configuration; exits on errors"""
    try:
        config = Config(ctx.obj['config_path'])
        if not config.validate():
            sys.exit(1)
    except Exception as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    return config


def create_llm_client(ctx) -> LLMClient:
    return LLMClient(load_config(ctx).get_llm_config())


def read_feature_file(path: str) -> str:
    return Path(path).read_text(encoding='utf-8')


@click.group()
@click.option('--config', '-c', default='config.yaml', help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx, config, verbose):
    """FeatureGen - Cucumber Feature Generator"""
    setup_logging(verbose)
    ctx.obj = {'config_path': config}


@cli.command()
@click.argument('feature_file', type=click.Path(exists=True, dir_okay=False))
def headings(feature_file):
    """List the scenario headings of a feature file"""
    titles = extract_scenario_titles(read_feature_file(feature_file))
    for index, title in enumerate(titles, 1):
        click.echo(f"{index}. {title}")
    if not titles:
        click.echo("No scenario headings found", err=True)


@cli.command()
@click.argument('feature_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--analysis', 'analysis_file', required=True, type=click.Path(exists=True, dir_okay=False),
              help='Stored complexity analysis (JSON)')
@click.option('--hint', type=int, default=None, help='Declared scenario count')
@click.option('--normalize', is_flag=True, help='Print the analysis aligned to the headings')
def check(feature_file, analysis_file, hint, normalize):
    """Check whether a stored analysis still matches a feature file"""
    content = read_feature_file(feature_file)
    analysis = ComplexityAnalysis.from_json(Path(analysis_file).read_text(encoding='utf-8'))

    if needs_reanalysis(content, analysis):
        click.echo("❌ Analysis is out of date - re-analysis needed")
        exit_code = 1
    else:
        click.echo("✅ Analysis matches the scenario headings")
        exit_code = 0

    if normalize:
        aligned = normalize_analysis_to_text(analysis, content, hint)
        click.echo(json.dumps(aligned.to_storage_dict(), indent=2))

    sys.exit(exit_code)


@cli.command()
@click.argument('feature_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--hint', type=int, default=None, help='Declared scenario count')
@click.pass_context
def analyze(ctx, feature_file, hint):
    """Score a feature file's complexity with the LLM"""
    content = read_feature_file(feature_file)
    analyzer = ComplexityAnalyzer(create_llm_client(ctx))

    try:
        analysis = normalize_analysis_to_text(analyzer.analyze(content), content, hint)
    except FeatureGenError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    click.echo(json.dumps(analysis.to_storage_dict(), indent=2))


@cli.command()
@click.option('--title', required=True, help='Feature title')
@click.option('--story', required=True, help='User story')
@click.option('--count', 'scenario_count', default=3, type=click.IntRange(1, 10), help='Number of scenarios')
@click.option('--domain', default='generic', help='Domain used to specialise the scenarios')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Write the feature to this file')
@click.pass_context
def generate(ctx, title, story, scenario_count, domain, output):
    """Generate a feature file from a user story"""
    generator = FeatureGenerator(create_llm_client(ctx))

    try:
        content = generator.generate_feature(title, story, scenario_count, domain)
    except FeatureGenError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    if output:
        Path(output).write_text(content + "\n", encoding='utf-8')
        click.echo(f"✅ Feature written to {output}")
    else:
        click.echo(content)


@cli.command()
@click.option('--host', default='0.0.0.0', help='Bind address')
@click.option('--port', default=8000, type=int, help='Port')
@click.option('--reload', is_flag=True, help='Reload on code changes (development)')
@click.pass_context
def serve(ctx, host, port, reload):
    """Run the HTTP API"""
    import uvicorn

    os.environ.setdefault('FEATUREGEN_CONFIG', ctx.obj['config_path'])
    uvicorn.run("api.main:app", host=host, port=port, reload=reload, log_level="info")


@cli.command()
@click.pass_context
def test(ctx):
    """Test the LLM connection"""
    if create_llm_client(ctx).test_connection():
        click.echo("✅ LLM connection successful")
    else:
        click.echo("❌ LLM connection failed - check configuration")
        sys.exit(1)


@cli.command('hash-password')
@click.password_option(help='Password to hash')
def hash_password_command(password):
    """Print the SHA-256 hash to use as AUTH_PASSWORD_HASH"""
    from api.auth import hash_password
    click.echo(hash_password(password))


if __name__ == '__main__':
    cli()
