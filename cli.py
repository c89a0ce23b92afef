#!/usr/bin/env python
"""CLI entry point for the computeless RAG pipelines."""

import asyncio
import logging
from typing import Optional

import click
from dotenv import load_dotenv

from computeless_rag.config import LOG_LEVEL
from computeless_rag.errors import CollaboratorError, PipelineError
from computeless_rag.http_pool import close_http_clients, init_http_clients
from computeless_rag.loader import load_pipeline_config
from computeless_rag.pipeline.rag_pipeline import QueryPipeline, StorePipeline

load_dotenv()


def _run(coro_factory):
    """Run a pipeline coroutine with the HTTP pool open for its duration."""

    async def run():
        await init_http_clients()
        try:
            return await coro_factory()
        finally:
            await close_http_clients()

    try:
        return asyncio.run(run())
    except CollaboratorError as e:
        raise click.ClickException(
            f"{e.collaborator} returned HTTP {e.status_code} in {e.step}:\n{e.body}"
        )
    except PipelineError as e:
        raise click.ClickException(str(e))


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log every pipeline step")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Pipeline YAML (default: PIPELINE_CONFIG_PATH or the packaged one)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Optional[str]):
    """Computeless RAG - answer questions from stored texts."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = load_pipeline_config(config_path)


@cli.command()
@click.argument("query")
@click.pass_obj
def ask(config, query: str):
    """Answer QUERY (embed -> retrieve -> prompt -> generate)."""
    pipeline = QueryPipeline(config=config)
    answer = _run(lambda: pipeline.run(query))
    click.echo(answer)


@cli.command()
@click.argument("text")
@click.pass_obj
def store(config, text: str):
    """Embed TEXT and upsert it into the vector store."""
    pipeline = StorePipeline(config=config)
    ack = _run(lambda: pipeline.run(text))
    click.echo(f"✅ Stored vector {ack.vector_id} in namespace '{ack.namespace}'")


if __name__ == "__main__":
    cli()
