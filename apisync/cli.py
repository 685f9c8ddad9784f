import sys

import click
import yaml

from .config import DOC_API_KEY_ENV, PM_API_KEY_ENV, PM_WORKSPACE_ID_ENV
from .sync.config import SyncConfig, SyncParams
from .sync.error_tracker import ConfigurationError
from .sync.logging_manager import LoggingManager
from .sync.orchestrator import SyncOrchestrator


def load_config(config_file):
    """Load the sync configuration, falling back to the built-in Module Set."""
    if not config_file:
        return SyncConfig.default()
    try:
        return SyncConfig.from_yaml(config_file)
    except (ConfigurationError, OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigurationError(f"invalid config file {config_file}: {e}")


@click.group()
def cli():
    """API sync tool that imports OpenAPI documentation to Postman collections."""
    pass

@cli.command(name='sync')
@click.option('--doc-api-key', envvar=DOC_API_KEY_ENV, help='The OpenAPI doc API key')
@click.option('--pm-api-key', envvar=PM_API_KEY_ENV, help='The Postman API key')
@click.option('--pm-workspace-id', envvar=PM_WORKSPACE_ID_ENV, help='The Postman workspace ID')
@click.option('--config-file', type=click.Path(dir_okay=False), default=None, help='YAML file overriding modules and endpoints')
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False), default=None, help='Log level (overrides the config file)')
@click.option('--log-file', type=click.Path(dir_okay=False), default=None, help='Also write JSON logs to this file')
def sync(doc_api_key, pm_api_key, pm_workspace_id, config_file, log_level, log_file):
    """Replace each module's Postman collection with its current OpenAPI document."""
    try:
        params = SyncParams(doc_api_key, pm_api_key, pm_workspace_id).validate()
        config = load_config(config_file)
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    LoggingManager.configure(log_level=log_level or config.log_level, log_file=log_file or config.log_file)
    orchestrator = SyncOrchestrator.from_params(params, config)
    try:
        summary = orchestrator.sync_all(params.pm_workspace_id)
    except Exception as e:
        click.echo(f"Sync error: {e}", err=True)
        suggestion = getattr(e, "recovery_suggestion", None)
        if suggestion:
            click.echo(f"Hint: {suggestion}", err=True)
        sys.exit(1)
    finally:
        orchestrator.cleanup()

    orchestrator.print_summary(summary)
    click.echo("Successfully imported to Postman!")

@cli.command(name='modules')
@click.option('--config-file', type=click.Path(dir_okay=False), default=None, help='YAML file overriding modules and endpoints')
def modules(config_file):
    """List the configured modules and their collection names."""
    try:
        config = load_config(config_file)
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    for module, collection_name in config.modules.items():
        click.echo(f"{module}: {collection_name}")

def main():
    cli()

if __name__ == '__main__':
    main()
