# SPDX-FileCopyrightText: 2019-2025 Valéry Febvre
# SPDX-License-Identifier: GPL-3.0-or-later

import json
import logging

import click

from multisrc import __version__
from multisrc.consts import LOG_DATE_FORMAT
from multisrc.consts import LOG_FORMAT
from multisrc.servers.utils import get_allowed_servers_list
from multisrc.servers.utils import get_server_by_id
from multisrc.utils import log_error_traceback


def echo_json(data):
    click.echo(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def call_server(id, method, *args):
    server = get_server_by_id(id)
    if server is None:
        raise click.ClickException(f'Unknown server: {id}')

    try:
        data = getattr(server, method)(*args)
    except Exception as e:
        raise click.ClickException(log_error_traceback(e) or str(e))

    if data is None:
        raise click.ClickException('No data (server down or unexpected response)')

    echo_json(data)


@click.group()
@click.version_option(__version__)
@click.option('-v', '--verbose', is_flag=True, help='Enable debug logging')
def cli(verbose):
    """Browse manga servers (Madara, MangaStream, ReaderFront) from the command line."""
    logging.basicConfig(
        format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT,
        level=logging.DEBUG if verbose else logging.INFO
    )


@cli.command()
@click.option('-l', '--lang', 'languages', multiple=True, help='Filter by language (repeatable)')
@click.option('--nsfw/--no-nsfw', default=False, show_default=True, help='Include servers with NSFW content')
def servers(languages, nsfw):
    """List available servers."""
    for server_data in get_allowed_servers_list(languages=languages, nsfw=nsfw):
        click.echo('{0:<20} {1:<8} {2}'.format(server_data['id'], server_data['lang'], server_data['name']))


@cli.command()
@click.argument('id')
def latest(id):
    """Latest updated manga of server ID."""
    call_server(id, 'get_latest_updates')


@cli.command()
@click.argument('id')
def popular(id):
    """Most popular manga of server ID."""
    call_server(id, 'get_most_populars')


@cli.command()
@click.argument('id')
@click.argument('term')
def search(id, term):
    """Search manga by TERM in server ID."""
    call_server(id, 'search', term)


@cli.command()
@click.argument('id')
@click.argument('slug')
def manga(id, slug):
    """Details and chapters of manga SLUG."""
    call_server(id, 'get_manga_data', dict(slug=slug))


@cli.command()
@click.argument('id')
@click.argument('slug')
@click.argument('chapter_slug')
def chapter(id, slug, chapter_slug):
    """Pages of chapter CHAPTER_SLUG of manga SLUG."""
    call_server(id, 'get_manga_chapter_data', slug, None, chapter_slug, None)
