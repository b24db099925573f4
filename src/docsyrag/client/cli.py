"""Command-line interface for docsyrag using Click."""

import asyncio
import logging
import os
from pathlib import Path

import click
from dotenv import load_dotenv

from docsyrag.client.cli_helpers import (
    build_service,
    ensure_database_exists,
    format_search_result,
    require_configuration,
)
from docsyrag.constants import SEARCH_RESULT_LIMIT
from docsyrag.errors import DocsyRAGError
from docsyrag.rag.models import ChunkFilter
from docsyrag.service.database import (
    RavenDBConfig,
    VectorIndexClient,
    database_exists,
    delete_database,
)

# Load environment variables
load_dotenv()

logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


@click.command()
@click.option(
    "--create-database",
    "create_database_flag",
    is_flag=True,
    default=False,
    help="Create the RavenDB database if it doesn't exist",
)
def init(create_database_flag: bool) -> None:
    """Provision the database and the vector index.

    Example:
        docsyrag-init
        docsyrag-init --create-database
    """
    require_configuration()
    ensure_database_exists(create_if_missing=create_database_flag)

    try:
        with VectorIndexClient() as index_client:
            index_client.ensure_collection()
    except DocsyRAGError as e:
        click.echo(f"✗ Error provisioning vector index: {e}", err=True)
        raise click.Abort()
    click.echo("✓ Vector index ready")


async def _index(file_text: str, document_id: str, notebook_id: str, name: str | None):
    async with build_service() as rag:
        return await rag.index_document(document_id, notebook_id, file_text, name)


@click.command()
@click.argument(
    "file",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path),
)
@click.option("--document-id", required=True, help="Id of the document being indexed")
@click.option("--notebook-id", required=True, help="Notebook the document belongs to")
@click.option("--name", default=None, help="Display name (default: the file name)")
def index(file: Path, document_id: str, notebook_id: str, name: str | None) -> None:
    """Chunk, embed, and store the extracted text in FILE.

    Any chunks previously stored for the document are replaced.

    Example:
        docsyrag-index paper.txt --document-id doc-1 --notebook-id nb-1
    """
    require_configuration()
    ensure_database_exists()

    text = file.read_text(encoding="utf-8")
    click.echo(f"📄 Indexing {file.name} ({len(text)} characters)...")
    try:
        result = asyncio.run(_index(text, document_id, notebook_id, name or file.name))
    except (DocsyRAGError, ValueError) as e:
        click.echo(f"✗ Error indexing document: {e}", err=True)
        raise click.Abort()

    click.echo(f"✓ Indexing complete! Stored {result.chunks_stored} chunks for {document_id}.")


async def _search(query: str, notebook_id: str, limit: int, document_ids: list[str]):
    async with build_service() as rag:
        return await rag.search(query, notebook_id, limit, document_ids)


@click.command()
@click.argument("query", type=str)
@click.option("--notebook-id", required=True, help="Notebook to search")
@click.option(
    "--limit",
    type=int,
    default=SEARCH_RESULT_LIMIT,
    help=f"Number of results to return (default: {SEARCH_RESULT_LIMIT})",
)
@click.option(
    "--document-id",
    "document_ids",
    multiple=True,
    help="Restrict the search to this document (repeatable)",
)
def search(query: str, notebook_id: str, limit: int, document_ids: tuple[str, ...]) -> None:
    """Search the chunks of a notebook.

    QUERY is the text to search for.

    Example:
        docsyrag-search "attention mechanism" --notebook-id nb-1
        docsyrag-search "results" --notebook-id nb-1 --document-id doc-1 --limit 3
    """
    require_configuration()
    ensure_database_exists()

    click.echo(f"🔍 Searching for: '{query}'")
    click.echo(f"   Returning top {limit} results...\n")

    try:
        results = asyncio.run(_search(query, notebook_id, limit, list(document_ids)))
    except ValueError as e:
        click.echo(f"✗ Error: {e}", err=True)
        raise click.Abort()
    except DocsyRAGError as e:
        click.echo(f"✗ Error searching: {e}", err=True)
        click.echo("\nPlease ensure the embedding service and RavenDB are running.", err=True)
        raise click.Abort()

    if not results:
        click.echo("No results found.")
        return

    click.echo(f"✅ Found {len(results)} result(s):\n")
    for i, result in enumerate(results, 1):
        click.echo(format_search_result(i, result))


@click.command()
@click.option("--document-id", default=None, help="Delete the chunks of this document")
@click.option("--notebook-id", default=None, help="Delete the chunks of every document in this notebook")
def delete(document_id: str | None, notebook_id: str | None) -> None:
    """Delete indexed chunks of a document or a whole notebook.

    Example:
        docsyrag-delete --document-id doc-1
        docsyrag-delete --notebook-id nb-1
    """
    if bool(document_id) == bool(notebook_id):
        click.echo("✗ Error: pass exactly one of --document-id or --notebook-id", err=True)
        raise click.Abort()

    require_configuration()
    chunk_filter = ChunkFilter(document_id=document_id, notebook_id=notebook_id)
    try:
        with VectorIndexClient() as index_client:
            deleted = index_client.delete_by_filter(chunk_filter)
    except DocsyRAGError as e:
        click.echo(f"✗ Error deleting chunks: {e}", err=True)
        raise click.Abort()

    target = f"document {document_id}" if document_id else f"notebook {notebook_id}"
    click.echo(f"🗑️  Deleted {deleted} chunk(s) for {target}")


@click.command()
@click.option("--notebook-id", default=None, help="Only count chunks of this notebook")
@click.option("--document-id", default=None, help="Only count chunks of this document")
def count(notebook_id: str | None, document_id: str | None) -> None:
    """Show the number of indexed chunks.

    Example:
        docsyrag-count
        docsyrag-count --notebook-id nb-1
    """
    require_configuration()
    ensure_database_exists()

    chunk_filter = ChunkFilter(notebook_id=notebook_id, document_id=document_id)
    try:
        with VectorIndexClient() as index_client:
            total = index_client.count(chunk_filter)
    except DocsyRAGError as e:
        click.echo(f"✗ Error counting chunks: {e}", err=True)
        raise click.Abort()

    click.echo(f"📊 Index contains {total} chunk(s)")


@click.command()
@click.option("--yes", "-y", is_flag=True, default=False, help="Skip confirmation prompt")
def delete_db(yes: bool) -> None:
    """Delete the RavenDB database and all indexed chunks.

    WARNING: This is irreversible.

    Example:
        docsyrag-delete-db          # Will prompt for confirmation
        docsyrag-delete-db --yes    # Skip confirmation
    """
    require_configuration()
    url = RavenDBConfig.get_url()
    db_name = RavenDBConfig.get_database_name()

    if not database_exists():
        click.echo(f"✓ Database '{db_name}' does not exist at {url}")
        return

    if not yes:
        click.echo(f"⚠️  WARNING: You are about to delete the database '{db_name}'")
        click.echo(f"   Location: {url}\n")
        if not click.confirm("Are you sure you want to proceed?", default=False):
            click.echo("Deletion cancelled.")
            return

    click.echo(f"🗑️  Deleting database '{db_name}'...")
    try:
        delete_database()
    except Exception as e:
        click.echo(f"✗ Error deleting database: {e}", err=True)
        raise click.Abort()
    click.echo(f"✓ Database '{db_name}' successfully deleted!")
    click.echo("\nTo create a new database, run:")
    click.echo("  docsyrag-init --create-database")


if __name__ == "__main__":
    index()
