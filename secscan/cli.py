import click
import sys
import yaml
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .config import ConfigManager, setup_logging
from .models import AppConfig
from .security.exceptions import ConfigurationError
from .security.models import (
    ComplianceScan,
    OpenScapOptions,
    RunStatus,
    SignatureScan,
    YaraOptions,
)
from .security.orchestrator import ScanOrchestrator


def _load_config(ctx) -> AppConfig:
    if 'app_config' not in ctx.obj:
        try:
            config = ConfigManager(ctx.obj['config']).get_config()
        except FileNotFoundError as e:
            raise click.ClickException(str(e))
        except (yaml.YAMLError, ValidationError) as e:
            raise click.ClickException(f"Invalid configuration: {e}")
        setup_logging(config)
        ctx.obj['app_config'] = config
    return ctx.obj['app_config']


def _make_orchestrator(ctx) -> ScanOrchestrator:
    config = _load_config(ctx)
    return ScanOrchestrator(config=config.as_runtime_dict())


def _run_scan(ctx, orchestrator: ScanOrchestrator, show_findings: bool) -> RunStatus:
    try:
        orchestrator.launch_scan()
    except ConfigurationError as e:
        orchestrator.shutdown()
        click.echo(f"Error: {e}", err=True)
        ctx.exit(2)

    status = orchestrator.wait()
    orchestrator.shutdown()
    click.echo(status.output)

    result = status.result
    if show_findings and result is not None and result.findings:
        click.echo(f"\nFindings ({result.findings_count}):")
        for finding in result.findings:
            click.echo(f"  [{finding.severity.value}] {finding.title} - {finding.target}")
    return status


@click.group()
@click.option('--config', '-c', default=None, help='Configuration file path')
@click.pass_context
def cli(ctx, config):
    """Security Scanner GUI - OpenSCAP and YARA front-end"""
    ctx.ensure_object(dict)
    ctx.obj['config'] = config


@cli.command()
@click.pass_context
def gui(ctx):
    """Start the desktop interface"""
    config = _load_config(ctx)
    from .gui.app import run_gui

    sys.exit(run_gui(config))


@cli.group()
def scan():
    """Run a scan and print the tool output"""
    pass


@scan.command()
@click.argument('content', required=False, type=click.Path(dir_okay=False))
@click.option('--results', type=click.Path(dir_okay=False, path_type=Path), help='OVAL results file')
@click.option('--report', type=click.Path(dir_okay=False, path_type=Path), help='HTML report file')
@click.option('--skip-valid', is_flag=True, help='Skip content validation')
@click.option('--verbose', is_flag=True, help='Verbose oscap output')
@click.option('--oval-results', is_flag=True, help='Save OVAL results')
@click.option('--dont-send-results', is_flag=True, help='Do not send results')
@click.option('--findings/--no-findings', default=False, help='Print parsed findings')
@click.pass_context
def compliance(ctx, content, results, report, skip_valid, verbose, oval_results,
               dont_send_results, findings):
    """Evaluate an OVAL definitions file with OpenSCAP"""
    config = _load_config(ctx)
    orchestrator = _make_orchestrator(ctx)
    orchestrator.configure(ComplianceScan(
        content_path=content,
        results_path=results or Path(config.results_path),
        report_path=report or Path(config.report_path),
        options=OpenScapOptions(
            skip_valid=skip_valid,
            verbose=verbose,
            oval_results=oval_results,
            dont_send_results=dont_send_results,
        ),
    ))
    _run_scan(ctx, orchestrator, findings)


@scan.command()
@click.argument('rules', required=False, type=click.Path(dir_okay=False))
@click.argument('target', required=False, type=click.Path())
@click.option('--recursive', '-r', is_flag=True, help='Recurse into directories')
@click.option('--fast-scan', '-f', is_flag=True, help='Fast matching mode')
@click.option('--no-warnings', '-w', is_flag=True, help='Disable warnings')
@click.option('--print-tags', '-t', is_flag=True, help='Print rule tags')
@click.option('--findings/--no-findings', default=False, help='Print parsed findings')
@click.pass_context
def signature(ctx, rules, target, recursive, fast_scan, no_warnings, print_tags, findings):
    """Scan a file or folder with YARA rules"""
    orchestrator = _make_orchestrator(ctx)
    orchestrator.configure(SignatureScan(
        rules_path=rules,
        target_path=target,
        options=YaraOptions(
            recursive=recursive,
            fast_scan=fast_scan,
            no_warnings=no_warnings,
            print_tags=print_tags,
        ),
    ))
    _run_scan(ctx, orchestrator, findings)


@cli.command()
@click.option('--url', '-u', default=None, help='Definitions URL')
@click.option('--output', '-o', required=True, type=click.Path(dir_okay=False, path_type=Path),
              help='Where to save the XML file')
@click.pass_context
def download(ctx, url, output):
    """Download the OVAL definitions XML file"""
    orchestrator = _make_orchestrator(ctx)
    orchestrator.launch_download(lambda: output, url=url)
    status = orchestrator.wait()
    orchestrator.shutdown()

    click.echo(status.output)
    if orchestrator.last_download is None or not orchestrator.last_download.ok:
        ctx.exit(1)


@cli.command()
@click.option('--version/--no-version', 'show_version', default=False, help='Query tool versions')
@click.pass_context
def tools(ctx, show_version):
    """Show scanner availability"""
    orchestrator = _make_orchestrator(ctx)
    tool_manager = orchestrator.tool_manager
    orchestrator.shutdown()

    click.echo("Scanner tools:")
    click.echo("==============")
    for name, info in tool_manager.check_all_tools().items():
        state = f"installed at {info.path}" if info.installed else "not found"
        line = f"{info.display_name} ({info.exe_name}): {state}"
        if show_version and info.installed:
            version = tool_manager.get_tool_version(name)
            if version:
                line += f" [{version}]"
        if info.installed and info.expected_hash:
            verified = tool_manager.verify_tool_integrity(name)
            line += " (hash verified)" if verified else " (HASH MISMATCH)"
        click.echo(line)


@cli.group()
def report():
    """HTML report actions"""
    pass


def _report_orchestrator(ctx, report_path: Optional[Path]) -> ScanOrchestrator:
    orchestrator = _make_orchestrator(ctx)
    if report_path is not None:
        orchestrator.configure(ComplianceScan(report_path=report_path))
    return orchestrator


@report.command('open')
@click.option('--report', 'report_path', type=click.Path(dir_okay=False, path_type=Path),
              help='Report file (defaults to the configured report path)')
@click.pass_context
def open_(ctx, report_path):
    """Open the report with the default application"""
    orchestrator = _report_orchestrator(ctx, report_path)
    click.echo(orchestrator.open_report())
    orchestrator.shutdown()


@report.command()
@click.argument('destination', type=click.Path(dir_okay=False, path_type=Path))
@click.option('--report', 'report_path', type=click.Path(dir_okay=False, path_type=Path),
              help='Report file (defaults to the configured report path)')
@click.pass_context
def copy(ctx, destination, report_path):
    """Copy the report to DESTINATION"""
    orchestrator = _report_orchestrator(ctx, report_path)
    click.echo(orchestrator.copy_report(destination))
    orchestrator.shutdown()


@cli.group()
def config():
    """Configuration management"""
    pass


@config.command()
@click.pass_context
def show(ctx):
    """Show current configuration"""
    config_path = ctx.obj['config']
    app_config = _load_config(ctx)

    click.echo(f"Configuration ({config_path or 'defaults'}):")
    click.echo("=" * 40)
    for key, value in app_config.model_dump(exclude_none=True).items():
        click.echo(f"{key}: {value}")


if __name__ == '__main__':
    cli()
