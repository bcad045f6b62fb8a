# SPDX-FileCopyrightText: 2019-2025 Valéry Febvre
# SPDX-License-Identifier: GPL-3.0-or-later
# Author: Valéry Febvre <vfebvre@easter-eggs.com>

import datetime
import logging
import re

import pytest
from pytest_steps import test_steps

from . import do_server_test
from . import fake_mime_type
from . import FakeResponse
from . import FakeSession
from multisrc.servers.exceptions import ApiError

logging.basicConfig(level=logging.DEBUG)

BASE_URL = 'https://ravens-scans.com'
API_URL = 'https://api.ravens-scans.com'

WORKS = [
    dict(id=1, name='Tales of Demons', stub='tales-of-demons', uniqid='a1', thumbnail_path='works/a1/thumb.png'),
    dict(id=2, name='Mercenary Enrollment', stub='mercenary-enrollment', uniqid='b2', thumbnail_path=None),
]

WORK = dict(
    id=1,
    name='Tales of Demons',
    stub='tales-of-demons',
    uniqid='a1',
    thumbnail_path='works/a1/thumb.png',
    description='A demon spiritualist returns to his youth.',
    adult=True,
    type='Manhua',
    licensed=False,
    status_name='on_going',
    demographic_name='Shounen',
    genres=[1, 7, 999],
    authors=['Mad Snail'],
    artists=['Jiang Ruotai', 'Mad Snail'],
)

RELEASES = [
    dict(id=12, chapter=2, subchapter=5, volume=1, name='Awakening', releaseDate='2020-05-02T10:00:00.000Z'),
    dict(id=10, chapter=1, subchapter=0, volume=0, name='', releaseDate='2020-05-01T10:00:00.000Z'),
]

CHAPTER = dict(
    id=10,
    uniqid='c3',
    work=dict(uniqid='a1', stub='tales-of-demons'),
    pages=[
        dict(filename='01.png', width=800, height=1200),
        dict(filename='02.png', width=None, height=1200),
    ],
)


def graphql_api(**kwargs):
    """Minimal ReaderFront API: dispatches on the operation name of the query"""
    query = kwargs['params']['query']
    operation = re.match(r'\{(\w+)\(', query).group(1)

    if operation == 'works':
        return FakeResponse(dict(data=dict(works=WORKS)))
    if operation == 'work':
        if '"tales-of-demons"' not in query:
            return FakeResponse(dict(data=dict(work=None)))
        return FakeResponse(dict(data=dict(work=WORK)))
    if operation == 'chaptersByWork':
        return FakeResponse(dict(data=dict(chaptersByWork=RELEASES)))
    if operation == 'chapterById':
        if 'id:10' not in query:
            return FakeResponse(dict(errors=[dict(message='Chapter not found')], data=dict(chapterById=None)))
        return FakeResponse(dict(data=dict(chapterById=CHAPTER)))

    return FakeResponse(status_code=400)


@pytest.fixture
def ravensscans_server(monkeypatch):
    from multisrc.servers.ravensscans import Ravensscans

    monkeypatch.setattr('multisrc.servers.multi.readerfront.get_buffer_mime_type', fake_mime_type)

    server = Ravensscans()
    server.session = FakeSession({('GET', API_URL): graphql_api})

    return server


@pytest.fixture
def ravensscans_es_server():
    from multisrc.servers.ravensscans import Ravensscans_es

    server = Ravensscans_es()
    server.session = FakeSession({('GET', API_URL): graphql_api})

    return server


def last_query(server):
    return server.session.calls[-1][2]['params']['query']


def test_ravensscans_config(ravensscans_server, ravensscans_es_server):
    assert ravensscans_server.api_url == API_URL
    assert ravensscans_server.language_id == 2
    assert ravensscans_es_server.language_id == 1
    assert ravensscans_server.get_manga_url('tales-of-demons', None) == BASE_URL + '/work/en/tales-of-demons'
    assert ravensscans_es_server.get_manga_url('tales-of-demons', None) == BASE_URL + '/work/es/tales-of-demons'


def test_ravensscans_image_cdn(ravensscans_server):
    url = ravensscans_server.get_image_cdn('works/a1/thumb.png')
    assert re.fullmatch(r'https://i[012]\.wp\.com/ravens-scans\.com/works/a1/thumb\.png\?strip=all&quality=100&w=350', url)

    # Same path, same host
    assert ravensscans_server.get_image_cdn('works/a1/thumb.png') == url
    assert ravensscans_server.get_image_cdn('works/a1/thumb.png', 800).endswith('&w=800')


def test_ravensscans_most_populars_query(ravensscans_server):
    ravensscans_server.get_most_populars(page=2)

    query = last_query(ravensscans_server)
    assert query.startswith('{works(languages:[2],orderBy:"ASC",sortBy:"stub",first:120,offset:120)')


def test_ravensscans_api_error(ravensscans_server):
    with pytest.raises(ApiError) as excinfo:
        ravensscans_server.get_manga_chapter_data('tales-of-demons', None, '99', None)

    assert excinfo.value.message == 'Error: Chapter not found'


def test_ravensscans_invalid_chapter_slug(ravensscans_server):
    assert ravensscans_server.get_manga_chapter_data('tales-of-demons', None, 'chapter-1', None) is None
    assert ravensscans_server.session.calls == []


def test_ravensscans_manga_not_found(ravensscans_server):
    assert ravensscans_server.get_manga_data(dict(slug='unknown')) is None


def test_ravensscans_server_down(ravensscans_server):
    ravensscans_server.session.routes[('GET', API_URL)] = FakeResponse('<html>Bad Gateway</html>', status_code=502)

    assert ravensscans_server.get_latest_updates() is None
    assert ravensscans_server.search('tales') is None


def test_ravensscans_es_genres(ravensscans_es_server):
    response = ravensscans_es_server.get_manga_data(dict(slug='tales-of-demons'))

    assert response['genres'] == ['18+', 'Shounen', 'Acción', 'Fantasía', 'Manhua']
    assert 'language:1' in ravensscans_es_server.session.calls[0][2]['params']['query']


@do_server_test
@test_steps('get_latest_updates', 'search', 'get_manga_data', 'get_chapter_data', 'get_page_image')
def test_ravensscans(ravensscans_server):
    # Get latest updates
    print('Get latest updates')
    response = ravensscans_server.get_latest_updates()
    assert [item['slug'] for item in response] == ['tales-of-demons', 'mercenary-enrollment']
    assert response[0]['cover'].split('.wp.com/')[-1] == 'ravens-scans.com/works/a1/thumb.png?strip=all&quality=100&w=350'
    assert response[1]['cover'] is None
    assert 'sortBy:"updatedAt"' in last_query(ravensscans_server)
    assert 'first:12,offset:0' in last_query(ravensscans_server)
    yield

    # Search
    print('Search')
    response = ravensscans_server.search('DEMONS')
    assert [item['name'] for item in response] == ['Tales of Demons']
    slug = response[0]['slug']
    yield

    # Get manga data
    print('Get manga data')
    response = ravensscans_server.get_manga_data(dict(slug=slug))
    assert response['name'] == 'Tales of Demons'
    assert response['authors'] == ['Mad Snail', 'Jiang Ruotai']
    assert response['genres'] == ['18+', 'Shounen', 'Action', 'Fantasy', 'Manhua']
    assert response['status'] == 'ongoing'
    assert response['synopsis'] == 'A demon spiritualist returns to his youth.'
    assert response['server_id'] == 'ravensscans'
    assert response['chapters'] == [
        dict(slug='10', title='Ch. 1', num='1', num_volume=None, date=datetime.date(2020, 5, 1)),
        dict(slug='12', title='Vol. 1 Ch. 2.5: Awakening', num='2.5', num_volume='1', date=datetime.date(2020, 5, 2)),
    ]
    chapter_slug = response['chapters'][0]['slug']
    yield

    # Get chapter data
    print('Get chapter data')
    response = ravensscans_server.get_manga_chapter_data(slug, None, chapter_slug, None)
    assert last_query(ravensscans_server).startswith('{chapterById(id:10)')
    assert len(response['pages']) == 2
    assert response['pages'][0]['index'] == 1
    assert response['pages'][0]['image'].split('.wp.com/')[-1] == 'ravens-scans.com/works/a1/c3/01.png?strip=all&quality=100&w=800'
    assert response['pages'][1]['image'].endswith('/works/a1/c3/02.png?strip=all&quality=100&w=350')
    page = response['pages'][0]
    yield

    # Get page image
    print('Get page image')
    ravensscans_server.session.routes[('GET', page['image'])] = FakeResponse(b'\xff\xd8\xff\xe0image')

    response = ravensscans_server.get_manga_chapter_page_image(slug, None, chapter_slug, page)
    assert response['buffer'] == b'\xff\xd8\xff\xe0image'
    assert response['name'] == '001.jpeg'
    yield


@pytest.mark.parametrize('status_name, licensed, status', [
    ('on_going', False, 'ongoing'),
    ('completed', False, 'complete'),
    ('completed', True, 'suspended'),
    ('dropped', False, None),
])
def test_ravensscans_status(ravensscans_server, status_name, licensed, status):
    work = dict(WORK, status_name=status_name, licensed=licensed)
    ravensscans_server.session.routes[('GET', API_URL)] = lambda **kwargs: (
        FakeResponse(dict(data=dict(work=work))) if '{work(' in kwargs['params']['query']
        else FakeResponse(dict(data=dict(chaptersByWork=[])))
    )

    response = ravensscans_server.get_manga_data(dict(slug='tales-of-demons'))
    assert response['status'] == status
    assert response['chapters'] == []
