"""Helper functions for CLI commands."""

import click

from docsyrag.errors import ConfigurationError
from docsyrag.rag.models import SearchResult
from docsyrag.service.database import (
    RavenDBConfig,
    create_database,
    database_exists,
)
from docsyrag.service.rag_service import RAGService


def ensure_database_exists(create_if_missing: bool = False) -> bool:
    """Check if database exists, optionally create it.

    Args:
        create_if_missing: If True, attempt to create the database

    Returns:
        True if database exists (or was created)

    Raises:
        click.Abort: If database doesn't exist and can't be created
    """
    if database_exists():
        return True

    if create_if_missing:
        click.echo("Database does not exist. Creating database...")
        try:
            create_database()
            click.echo("✓ Database created successfully!")
            return True
        except Exception as e:
            click.echo(f"✗ Failed to create database: {e}", err=True)
            click.echo("\nPlease ensure RavenDB is running and accessible.", err=True)
            raise click.Abort()

    click.echo("✗ Error: Database does not exist!", err=True)
    click.echo("\nPlease create the database first using:", err=True)
    click.echo("  docsyrag-init --create-database", err=True)
    raise click.Abort()


def require_configuration() -> None:
    """Abort with a readable message when RAVENDB_URL is missing."""
    if not RavenDBConfig.is_configured():
        click.echo("✗ Error: RAVENDB_URL not configured", err=True)
        click.echo("\nSet RAVENDB_URL in the environment or in a .env file.", err=True)
        raise click.Abort()


def build_service() -> RAGService:
    """Build the RAG service from the environment for a CLI command.

    Raises:
        click.Abort: If the configuration is incomplete or invalid
    """
    require_configuration()
    try:
        return RAGService.from_env()
    except (ConfigurationError, ValueError) as e:
        click.echo(f"✗ Configuration error: {e}", err=True)
        raise click.Abort()


def format_search_result(index: int, result: SearchResult, max_length: int = 200) -> str:
    """Format a search result for display.

    Args:
        index: Result number (1-based)
        result: Search result with provenance
        max_length: Maximum content length before truncation

    Returns:
        Formatted string for display
    """
    display_content = (
        result.content[:max_length] + "..." if len(result.content) > max_length else result.content
    )
    location = f"chunk #{result.chunk_index}"
    if result.page_number:
        location += f", page {result.page_number}"

    lines = [
        f"{index}. [{result.document_name or result.document_id} - {location}] "
        f"(score: {result.score:.4f})",
        f"   chars {result.start_char}-{result.end_char}: {display_content}",
        "",
    ]
    return "\n".join(lines)
