# SPDX-FileCopyrightText: 2019-2025 Valéry Febvre
# SPDX-License-Identifier: GPL-3.0-or-later
# Author: Valéry Febvre <vfebvre@easter-eggs.com>

# ReaderFront - Manga reader with a GraphQL API

# Supported servers:
# Ravens Scans [EN/ES]

from abc import abstractmethod
import json
import logging

from multisrc.servers import Server
from multisrc.servers.exceptions import ApiError
from multisrc.servers.utils import convert_date_string
from multisrc.utils import get_buffer_mime_type
from multisrc.utils import remove_number_leading_zero

logger = logging.getLogger('multisrc.servers.readerfront')

LATEST_UPDATES_PER_PAGE = 12
MOST_POPULARS_PER_PAGE = 120

# ReaderFront numeric IDs of languages
LANGUAGES_IDS = dict(
    es=1,
    en=2,
)

# ReaderFront numeric IDs of genres
GENRES = {
    1: dict(en='Action', es='Acción'),
    2: dict(en='Adventure', es='Aventura'),
    3: dict(en='Comedy', es='Comedia'),
    4: dict(en='Drama', es='Drama'),
    5: dict(en='Slice of Life', es='Recuentos de la vida'),
    6: dict(en='Ecchi', es='Ecchi'),
    7: dict(en='Fantasy', es='Fantasía'),
    8: dict(en='Magic', es='Magia'),
    9: dict(en='Supernatural', es='Sobrenatural'),
    10: dict(en='Horror', es='Horror'),
    11: dict(en='Mystery', es='Misterio'),
    12: dict(en='Psychological', es='Psicológico'),
    13: dict(en='Romance', es='Romance'),
    14: dict(en='Sci-Fi', es='Ciencia ficción'),
    15: dict(en='Thriller', es='Suspenso'),
    16: dict(en='Sports', es='Deportes'),
    17: dict(en='Girls Love', es='Girls Love'),
    18: dict(en='Boys Love', es='Boys Love'),
    19: dict(en='Harem', es='Harem'),
    20: dict(en='Mecha', es='Mecha'),
    21: dict(en='Survival', es='Supervivencia'),
    22: dict(en='Reincarnation', es='Reencarnación'),
    23: dict(en='Gore', es='Gore'),
    24: dict(en='Apocalyptic', es='Apocalíptico'),
    25: dict(en='Tragedy', es='Tragedia'),
    26: dict(en='School Life', es='Vida escolar'),
    27: dict(en='History', es='Historia'),
    28: dict(en='Military', es='Militar'),
    29: dict(en='Police', es='Policial'),
    30: dict(en='Crime', es='Crimen'),
    31: dict(en='Superpowers', es='Superpoderes'),
    32: dict(en='Vampires', es='Vampiros'),
    33: dict(en='Martial Arts', es='Artes marciales'),
    34: dict(en='Samurai', es='Samurái'),
    35: dict(en='Gender Bender', es='Cambio de género'),
    36: dict(en='Virtual Reality', es='Realidad virtual'),
    37: dict(en='Cyberpunk', es='Cyberpunk'),
    38: dict(en='Music', es='Música'),
    39: dict(en='Parody', es='Parodia'),
    40: dict(en='Animation', es='Animación'),
    41: dict(en='Demons', es='Demonios'),
    42: dict(en='Family', es='Familia'),
    43: dict(en='Foreign', es='Extranjero'),
    44: dict(en='Kids', es='Niños'),
    45: dict(en='Reality', es='Realidad'),
    46: dict(en='Soap Opera', es='Telenovela'),
    47: dict(en='War', es='Guerra'),
    48: dict(en='Western', es='Western'),
    49: dict(en='Traps', es='Trampas'),
}

WORK_FIELDS = 'id,name,stub,uniqid,thumbnail_path'
WORK_DETAILS_FIELDS = WORK_FIELDS + ',description,adult,type,licensed,status_name,demographic_name,genres,authors,artists'
RELEASE_FIELDS = 'id,chapter,subchapter,volume,name,releaseDate'
CHAPTER_FIELDS = 'id,uniqid,work{uniqid,stub},pages{filename,width,height}'


def chapter_by_id_query(id):
    return '{chapterById(id:%d){%s}}' % (id, CHAPTER_FIELDS)


def chapters_by_work_query(language, stub):
    return '{chaptersByWork(language:%d,workStub:%s){%s}}' % (language, json.dumps(stub), RELEASE_FIELDS)


def work_query(language, stub):
    return '{work(language:%d,stub:%s){%s}}' % (language, json.dumps(stub), WORK_DETAILS_FIELDS)


def works_query(language, sort_by, order_by, page, count):
    return '{works(languages:[%d],orderBy:"%s",sortBy:"%s",first:%d,offset:%d){%s}}' % (
        language, order_by, sort_by, count, (page - 1) * count, WORK_FIELDS
    )


class ReaderFront(Server):
    base_url: str
    api_url: str = None
    manga_url: str = None

    def __init__(self):
        if self.api_url is None:
            self.api_url = self.base_url.replace('://', '://api.', 1)

        if self.manga_url is None:
            self.manga_url = self.base_url + '/work/' + self.lang + '/{0}'

        self.language_id = LANGUAGES_IDS[self.lang]

        if self.session is None:
            self.session = self.new_session()

    @abstractmethod
    def get_image_cdn(self, path, width=350):
        """Returns absolute URL of an image (cover or page) from its path"""

    def get_genre_name(self, id):
        if genre := GENRES.get(id):
            return genre.get(self.lang, genre['en'])

        return None

    def get_manga_data(self, initial_data):
        """
        Returns manga data using GraphQL API

        Initial data should contain at least manga's slug (provided by search)
        """
        assert 'slug' in initial_data, 'Manga slug is missing in initial data'

        work = self.query('work', work_query(self.language_id, initial_data['slug']))
        if work is None:
            return None

        data = initial_data.copy()
        data.update(self.work_to_result(work))
        data.update(dict(
            authors=[],
            scanlators=[],
            genres=[],
            status=None,
            synopsis=work.get('description') or None,
            chapters=[],
            server_id=self.id,
        ))

        for name in (work.get('authors') or []) + (work.get('artists') or []):
            if name and name not in data['authors']:
                data['authors'].append(name)

        if work.get('adult'):
            data['genres'].append('18+')
        if work.get('demographic_name'):
            data['genres'].append(work['demographic_name'])
        for id in work.get('genres') or []:
            if name := self.get_genre_name(id):
                data['genres'].append(name)
        if work.get('type'):
            data['genres'].append(work['type'])

        if work.get('licensed'):
            data['status'] = 'suspended'
        elif work.get('status_name') == 'on_going':
            data['status'] = 'ongoing'
        elif work.get('status_name') == 'completed':
            data['status'] = 'complete'

        # Chapters
        releases = self.query('chaptersByWork', chapters_by_work_query(self.language_id, work['stub']))
        for release in sorted(releases or [], key=lambda r: (r.get('chapter') or 0, r.get('subchapter') or 0)):
            data['chapters'].append(self.release_to_chapter(release))

        return data

    def get_manga_chapter_data(self, manga_slug, manga_name, chapter_slug, chapter_url):
        """
        Returns manga chapter data using GraphQL API

        Currently, only pages are expected.
        """
        if not str(chapter_slug).isdigit():
            return None

        chapter = self.query('chapterById', chapter_by_id_query(int(chapter_slug)))
        if chapter is None:
            return None

        data = dict(
            pages=[],
        )
        for index, page in enumerate(chapter['pages'], start=1):
            path = 'works/{0}/{1}/{2}'.format(chapter['work']['uniqid'], chapter['uniqid'], page['filename'])
            data['pages'].append(dict(
                slug=None,
                image=self.get_image_cdn(path, page.get('width') or 350),
                index=index,
            ))

        return data

    def get_manga_chapter_page_image(self, manga_slug, manga_name, chapter_slug, page):
        """
        Returns chapter page scan (image) content
        """
        r = self.session_get(
            page['image'],
            headers={
                'Accept': 'image/avif,image/webp,*/*',
                'Referer': f'{self.base_url}/',
            }
        )
        if r.status_code != 200:
            return None

        mime_type = get_buffer_mime_type(r.content)
        if not mime_type.startswith('image'):
            return None

        return dict(
            buffer=r.content,
            mime_type=mime_type,
            name='{0:03d}.{1}'.format(page['index'], mime_type.split('/')[-1]),
        )

    def get_manga_url(self, slug, url):
        """
        Returns manga absolute URL
        """
        return self.manga_url.format(slug)

    def get_latest_updates(self, page=1):
        """
        Returns list of latest updated manga
        """
        works = self.query(
            'works', works_query(self.language_id, 'updatedAt', 'DESC', page, LATEST_UPDATES_PER_PAGE)
        )
        if works is None:
            return None

        return [self.work_to_result(work) for work in works]

    def get_most_populars(self, page=1):
        """
        Returns list of all manga in alphabetical order

        API doesn't provide a popularity order.
        """
        works = self.query(
            'works', works_query(self.language_id, 'stub', 'ASC', page, MOST_POPULARS_PER_PAGE)
        )
        if works is None:
            return None

        return [self.work_to_result(work) for work in works]

    def query(self, operation, query):
        """
        Sends a GraphQL query and returns the payload of the operation

        :param operation: Name of the GraphQL operation, i.e. key of the payload in `data`
        :type operation: str

        :param query: The GraphQL query
        :type query: str

        :raises ApiError: if the response contains errors
        """
        r = self.session_get(
            self.api_url,
            params=dict(query=query),
            headers={
                'Accept': 'application/json',
                'Referer': f'{self.base_url}/',
            }
        )

        try:
            resp_data = r.json()
        except ValueError:
            logger.debug('Invalid JSON response (status %s) to query: %s', r.status_code, query)
            return None

        if 'errors' in resp_data:
            errors = resp_data['errors']
            raise ApiError(errors[0]['message'] if errors else 'Unknown error')

        if r.status_code != 200 or not resp_data.get('data'):
            return None

        return resp_data['data'].get(operation)

    def release_to_chapter(self, release):
        chapter = release.get('chapter') or 0
        subchapter = release.get('subchapter') or 0
        volume = release.get('volume') or 0
        num = remove_number_leading_zero(f'{chapter}.{subchapter}')

        title = []
        if volume > 0:
            title.append(f'Vol. {volume}')
        title.append(f'Ch. {num}')
        title = ' '.join(title)
        if release.get('name'):
            title = f'{title}: {release["name"]}'

        if release_date := release.get('releaseDate'):
            date = convert_date_string(release_date.split('T')[0], format='%Y-%m-%d')
        else:
            date = None

        return dict(
            slug=str(release['id']),
            title=title,
            num=num,
            num_volume=str(volume) if volume > 0 else None,
            date=date,
        )

    def search(self, term):
        results = self.get_most_populars()
        if results is None:
            return None

        term = term.lower()

        return [result for result in results if term in result['name'].lower()]

    def work_to_result(self, work):
        return dict(
            slug=work['stub'],
            name=work['name'],
            cover=self.get_image_cdn(work['thumbnail_path']) if work.get('thumbnail_path') else None,
        )
