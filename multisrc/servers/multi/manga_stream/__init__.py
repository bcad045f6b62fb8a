# SPDX-FileCopyrightText: 2019-2025 Valéry Febvre
# SPDX-License-Identifier: GPL-3.0-or-later
# Author: Valéry Febvre <vfebvre@easter-eggs.com>

# Manga Stream/Manga Reader/Manga Themesia - WordPress Themes for read manga

# Supported servers:
# Fênix Scanlator [pt_BR]

import json
import logging
import re

from bs4 import BeautifulSoup

from multisrc.servers import Server
from multisrc.servers.utils import ALT_NAMES_PLACEHOLDERS
from multisrc.servers.utils import convert_date_string
from multisrc.servers.utils import get_soup_element_inner_text
from multisrc.utils import get_buffer_mime_type

logger = logging.getLogger('multisrc.servers.manga_stream')

STATUSES_LABELS = dict(
    ongoing=(
        'ongoing',
        'coming soon',
        'mass released',
        'daily release',
        'en curso',  # es
        'en cours',  # fr
        'em andamento',  # pt
        'em lançamento',  # pt
    ),
    complete=(
        'completed',
        'completo',  # es, pt
        'concluído',  # pt
        'finalizado',  # es, pt
        'fini',  # fr
        'terminé',  # fr
    ),
    hiatus=(
        'hiatus',
        'hiato',  # pt
        'en pause',  # fr
    ),
    suspended=(
        'cancelled',
        'cancelado',  # es, pt
        'dropped',
    ),
)


class MangaStream(Server):
    base_url: str
    api_url: str = None
    manga_list_url: str = None
    manga_url: str = None
    chapter_url: str = None

    chapters_order: str = 'desc'
    date_format: str = '%B %d, %Y'
    series_name: str = 'manga'
    slug_position: int = -2
    chapter_images_re = r'\"images\":(.*?)}'

    alt_name: str = None  # label prepended to alternative names appended to synopsis

    name_selector: str = '.entry-title'
    thumbnail_selector: str = '.thumb img'
    alt_names_selector: str = '.alternative, .wd-full:-soup-contains("Alt") span, .alter, .seriestualt'
    authors_selector: str = '.tsinfo .imptdt:-soup-contains("Author") i, .tsinfo .imptdt:-soup-contains("Artist") i'
    genres_selector: str = '.info-desc .mgen a'
    scanlators_selector: str = None
    status_selector: str = '.tsinfo .imptdt:-soup-contains("Status") i'
    synopsis_selector: str = '[itemprop="description"]'
    chapter_pages_selector: str = '#readerarea img'

    def __init__(self):
        if self.api_url is None:
            self.api_url = self.base_url + '/wp-admin/admin-ajax.php'

        if self.manga_list_url is None:
            self.manga_list_url = self.base_url + '/' + self.series_name + '/'

        if self.manga_url is None:
            self.manga_url = self.base_url + '/' + self.series_name + '/{0}/'

        if self.chapter_url is None:
            self.chapter_url = self.base_url + '/{chapter_slug}/'

        if self.session is None:
            self.session = self.new_session()

    @staticmethod
    def compute_status(label):
        if not label:
            return None

        label = label.strip()
        for status, labels in STATUSES_LABELS.items():
            if re.search('|'.join(labels), label, re.IGNORECASE):
                return status

        return None

    @staticmethod
    def fix_url(url):
        if url and url.startswith('//'):
            return f'https:{url}'  # noqa: E231

        return url

    def get_manga_data(self, initial_data):
        """
        Returns manga data by scraping manga HTML page content

        Initial data should contain at least manga's slug (provided by search)
        """
        assert 'slug' in initial_data, 'Manga slug is missing in initial data'

        r = self.session_get(self.manga_url.format(initial_data['slug']))
        if r.status_code != 200:
            return None

        mime_type = get_buffer_mime_type(r.content)
        if mime_type != 'text/html':
            return None

        soup = BeautifulSoup(r.text, 'lxml')

        data = initial_data.copy()
        data.update(dict(
            authors=[],
            scanlators=[],
            genres=[],
            status=None,
            synopsis=None,
            chapters=[],
            server_id=self.id,
        ))

        # Name & cover
        data['name'] = soup.select_one(self.name_selector).text.strip()

        if element := soup.select_one(self.thumbnail_selector):
            data['cover'] = element.get('data-src')
            if not data['cover']:
                data['cover'] = element.get('data-lazy-src')
                if not data['cover']:
                    data['cover'] = element.get('src')
            data['cover'] = self.fix_url(data['cover'])

        # Details
        if self.authors_selector:
            for element in soup.select(self.authors_selector):
                author = get_soup_element_inner_text(element).strip('-')
                if author and author not in data['authors']:
                    data['authors'].append(author)
        if self.genres_selector:
            data['genres'] = [element.text.strip() for element in soup.select(self.genres_selector)]
        if self.scanlators_selector:
            for element in soup.select(self.scanlators_selector):
                if scanlator := get_soup_element_inner_text(element).strip('-'):
                    data['scanlators'].append(scanlator)
        if self.status_selector:
            if element := soup.select_one(self.status_selector):
                data['status'] = self.compute_status(get_soup_element_inner_text(element))
        if self.synopsis_selector:
            if element := soup.select_one(self.synopsis_selector):
                data['synopsis'] = element.text.strip() or None

        if self.alt_name and self.alt_names_selector:
            if element := soup.select_one(self.alt_names_selector):
                alt_names = element.text.strip()
                if alt_names not in ALT_NAMES_PLACEHOLDERS:
                    alt_names = self.alt_name + alt_names
                    data['synopsis'] = f'{data["synopsis"]}\n\n{alt_names}' if data['synopsis'] else alt_names

        # Chapters
        data['chapters'] = self.get_manga_chapters_data(soup)

        return data

    def get_manga_chapters_data(self, soup):
        chapters = []

        li_elements = soup.select('#chapterlist ul li')
        if self.chapters_order == 'desc':
            li_elements = reversed(li_elements)

        for li_element in li_elements:
            a_element = li_element.select_one('a')

            slug = a_element.get('href').rstrip('/').split('/')[-1]
            title = li_element.select_one('.chapternum').text.strip().replace('\n', ' ')
            if date_element := li_element.select_one('.chapterdate'):
                date = convert_date_string(date_element.text.strip(), format=self.date_format, languages=[self.lang])
            else:
                date = None

            num = li_element.get('data-num')

            chapters.append(dict(
                slug=slug,
                title=title,
                num=num.strip() if num else None,
                date=date,
            ))

        return chapters

    def get_manga_chapter_data(self, manga_slug, manga_name, chapter_slug, chapter_url):
        """
        Returns manga chapter data by scraping chapter HTML page content

        Currently, only pages are expected.
        """
        r = self.session_get(
            self.chapter_url.format(manga_slug=manga_slug, chapter_slug=chapter_slug),
            headers={
                'Referer': self.manga_url.format(manga_slug),
            })
        if r.status_code != 200:
            return None

        mime_type = get_buffer_mime_type(r.content)
        if mime_type != 'text/html':
            return None

        soup = BeautifulSoup(r.text, 'lxml')

        data = dict(
            pages=[],
        )

        img_elements = soup.select(self.chapter_pages_selector)
        if not img_elements:
            # Pages images are loaded via javascript
            for script_element in soup.find_all('script'):
                script = script_element.string
                if script is None:
                    continue

                for line in script.split('\n'):
                    line = line.strip()
                    if not line.startswith('ts_reader'):
                        continue

                    if matches := re.compile(self.chapter_images_re).search(line):
                        for image in json.loads(matches.group(1)):
                            data['pages'].append(dict(
                                slug=None,
                                image=image,
                            ))
                        break
        else:
            for img_element in img_elements:
                image = img_element.get('data-src') or img_element.get('src')
                if not image:
                    continue

                image = self.fix_url(image.strip())
                data['pages'].append(dict(
                    slug=None,
                    image=image,
                ))

        return data

    def get_manga_chapter_page_image(self, manga_slug, manga_name, chapter_slug, page):
        """
        Returns chapter page scan (image) content
        """
        r = self.session_get(
            page['image'],
            headers={
                'Referer': self.chapter_url.format(manga_slug=manga_slug, chapter_slug=chapter_slug),
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
            name=page['image'].split('/')[-1],
        )

    def get_manga_url(self, slug, url):
        """
        Returns manga absolute URL
        """
        return self.manga_url.format(slug)

    def get_manga_list(self, title=None, type=None, orderby=None):
        r = self.session_get(
            self.manga_list_url,
            params=dict(
                status='',
                type=type or '',
                order=orderby or '',
                title=title or '',
            )
        )
        if r.status_code != 200:
            return None

        soup = BeautifulSoup(r.text, 'lxml')

        results = []
        for a_element in soup.select('.listupd .bs a'):
            name = a_element.get('title')
            if not name:
                continue

            if cover_element := a_element.select_one('img.ts-post-image'):
                cover = cover_element.get('data-lazy-src') or cover_element.get('data-src') or cover_element.get('src')
            else:
                cover = None

            results.append(dict(
                slug=a_element.get('href').split('/')[self.slug_position],
                name=name,
                cover=self.fix_url(cover),
            ))

        return results

    def get_latest_updates(self, type=None):
        return self.get_manga_list(type=type, orderby='update')

    def get_most_populars(self, type=None):
        return self.get_manga_list(type=type, orderby='popular')

    def search(self, term, type=None):
        return self.get_manga_list(title=term, type=type)
