# SPDX-FileCopyrightText: 2019-2025 Valéry Febvre
# SPDX-License-Identifier: GPL-3.0-or-later
# Author: Valéry Febvre <vfebvre@easter-eggs.com>

# Madara – WordPress Theme for Manga

# Supported servers:
# Momo no Hana Scan [pt_BR]

import datetime
import logging
import re

from bs4 import BeautifulSoup

from multisrc.servers import Server
from multisrc.servers.utils import ALT_NAMES_PLACEHOLDERS
from multisrc.servers.utils import convert_date_string
from multisrc.servers.utils import get_soup_element_inner_text
from multisrc.servers.utils import remove_emoji_from_string
from multisrc.utils import get_buffer_mime_type

logger = logging.getLogger('multisrc.servers.madara')

STATUSES_COMPLETE = (
    'Completed', 'Terminé', 'Completé', 'Completo', 'Finalizado', 'Concluído', 'Concluido', 'Tamamlandı',
)
STATUSES_ONGOING = (
    'OnGoing', 'Ongoing', 'En Cours', 'En cours', 'Updating', 'Em Lançamento', 'Em lançamento', 'Em andamento',
    'Em Andamento', 'En Emision', 'En emisión', 'En Emisión',
)
STATUSES_SUSPENDED = ('Canceled', 'Cancelled', 'Cancelada', 'Cancelado')
STATUSES_HIATUS = ('On Hold', 'En pause', 'En Hiatus', 'Hiato', 'Pausado')


class Madara(Server):
    base_url: str = None
    chapter_url: str = None
    chapters_url: str = None

    date_format: str = '%B %d, %Y'
    medium: str = 'manga'
    series_name: str = 'manga'
    use_new_chapter_endpoint: bool = False

    alt_name: str = None  # label prepended to alternative names appended to synopsis

    popular_selector = 'div.page-item-detail'
    results_selector = '.row'
    result_name_slug_selector = '.post-title a'
    result_cover_selector = '.tab-thumb img, .item-thumb img'

    details_name_selector = 'h1'
    details_cover_selector = '.summary_image > a > img'
    details_alt_names_selector = '.post-content_item:-soup-contains("Alt") .summary-content'
    details_authors_selector = '.author-content a, .artist-content a'
    details_scanlators_selector = None
    details_genres_selector = '.genres-content a'
    details_status_selector = '.post-status .summary-content'
    details_synopsis_selector = '.summary__content'

    chapters_list_selector = '#manga-chapters-holder'
    chapters_selector = '.wp-manga-chapter'
    chapters_order = 'desc'

    def __init__(self):
        self.api_url = self.base_url + '/wp-admin/admin-ajax.php'
        self.manga_url = self.base_url + '/' + self.series_name + '/{0}/'
        if self.chapter_url is None:
            self.chapter_url = self.base_url + '/' + self.series_name + '/{0}/{1}/?style=list'
        if self.chapters_url is None and self.use_new_chapter_endpoint:
            self.chapters_url = self.manga_url + 'ajax/chapters/'

        if self.session is None:
            self.session = self.new_session()

    @staticmethod
    def extract_chapter_nums_from_slug(slug):
        re_nums = r'((\w+)\-(\d+)-)?(\w+)-(\d+)([-_](\d+))?.*'

        if matches := re.search(re_nums, slug):
            if num := matches.group(5):
                num = f'{int(num)}'

                if num_dec := matches.group(7):
                    num = f'{num}.{int(num_dec)}'

                if num_volume := matches.group(3):
                    num_volume = f'{int(num_volume)}'

                return num, num_volume

        return None, None

    @staticmethod
    def extract_image_url(element):
        if element is None:
            return None

        url = element.get('data-src')
        if url is None:
            url = element.get('data-lazy-src')
            if url is None:
                url = element.get('data-lazy-srcset')
                if url:
                    # data-lazy-srcset can contain several images with sizes: url1 size1 url2 size2...
                    url = url.split()[0]
                else:
                    url = element.get('src')

        return url.strip() if url else None

    @staticmethod
    def compute_status(label):
        # Remove emoji
        label = remove_emoji_from_string(label)

        if label in STATUSES_COMPLETE:
            return 'complete'
        if label in STATUSES_ONGOING:
            return 'ongoing'
        if label in STATUSES_SUSPENDED:
            return 'suspended'
        if label in STATUSES_HIATUS:
            return 'hiatus'

        return None

    def get_manga_data(self, initial_data):
        """
        Returns manga data by scraping manga HTML page content

        Initial data should contain at least manga's slug (provided by search)
        """
        assert 'slug' in initial_data, 'Manga slug is missing in initial data'

        r = self.session_get(
            self.manga_url.format(initial_data['slug']),
            headers={
                'Referer': self.base_url,
            }
        )
        if r.status_code != 200:
            return None

        mime_type = get_buffer_mime_type(r.content)
        if mime_type not in ('text/html', 'text/plain'):
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
        if r.history and r.history[-1].status_code == 301:
            # Slug has changed
            data['slug'] = r.url.split('/')[-2]

        data['name'] = get_soup_element_inner_text(soup.select_one(self.details_name_selector))
        data['cover'] = self.extract_image_url(soup.select_one(self.details_cover_selector))

        # Details
        for element in soup.select(self.details_authors_selector):
            author = element.text.strip()
            if author not in data['authors']:
                data['authors'].append(author)

        if self.details_scanlators_selector:
            for element in soup.select(self.details_scanlators_selector):
                data['scanlators'].append(element.text.strip())

        for element in soup.select(self.details_genres_selector):
            genre = element.text.strip()
            if genre not in data['genres']:
                data['genres'].append(genre)

        if self.details_status_selector:
            if elements := soup.select(self.details_status_selector):
                element = elements[-1]  # get last element (release date is sometimes shown just before)
                data['status'] = self.compute_status(element.text.strip())

        if self.details_synopsis_selector:
            if summary_container := soup.select_one(self.details_synopsis_selector):
                if p_elements := summary_container.select('p'):
                    synopsis = []
                    for p_element in p_elements:
                        if paragraph := p_element.text.strip():
                            synopsis.append(paragraph)
                    data['synopsis'] = '\n\n'.join(synopsis) if synopsis else None
                else:
                    data['synopsis'] = summary_container.text.strip()

        if self.alt_name and self.details_alt_names_selector:
            if element := soup.select_one(self.details_alt_names_selector):
                alt_names = element.text.strip()
                if alt_names not in ALT_NAMES_PLACEHOLDERS:
                    alt_names = self.alt_name + alt_names
                    data['synopsis'] = f'{data["synopsis"]}\n\n{alt_names}' if data['synopsis'] else alt_names

        # Chapters
        if chapters_container := soup.select_one(self.chapters_list_selector):
            # Chapters list is empty and is loaded via an Ajax call
            soup = self.get_manga_chapters_soup(data['slug'], chapters_container)

        data['chapters'] = self.get_manga_chapters_data(soup)

        return data

    def get_manga_chapters_data(self, soup):
        chapters = []

        elements = soup.select(self.chapters_selector)
        if self.chapters_order == 'desc':
            elements = reversed(elements)

        for element in elements:
            if element.select_one('i.fa-lock'):
                # Skip premium chapter
                continue

            a_element = element.a
            if date_element := element.find(class_='chapter-release-date'):
                date_element = date_element.extract()
            if view_element := element.find(class_='view'):
                view_element.extract()

            if date_element and (date := date_element.text.strip()):
                date = convert_date_string(date, format=self.date_format, languages=[self.lang])
            else:
                date = datetime.date.today()

            slug = a_element.get('href').rstrip('/').split('/')[-1]
            num, num_volume = self.extract_chapter_nums_from_slug(slug)

            chapters.append(dict(
                slug=slug,
                title=a_element.text.strip(),
                num=num,
                num_volume=num_volume,
                date=date,
            ))

        return chapters

    def get_manga_chapters_soup(self, slug, chapters_container):
        headers = {
            'Origin': self.base_url,
            'Referer': self.manga_url.format(slug),
            'X-Requested-With': 'XMLHttpRequest',
        }

        if self.chapters_url:
            r = self.session_post(self.chapters_url.format(slug), headers=headers)
        else:
            r = self.session_post(
                self.api_url,
                data=dict(
                    action='manga_get_chapters',
                    manga=chapters_container.get('data-id'),
                ),
                headers=headers
            )

        return BeautifulSoup(r.text, 'lxml')

    def get_manga_chapter_data(self, manga_slug, manga_name, chapter_slug, chapter_url):
        """
        Returns manga chapter data by scraping chapter HTML page content

        Currently, only pages are expected.
        """
        r = self.session_get(
            self.chapter_url.format(manga_slug, chapter_slug),
            headers={
                'Referer': self.manga_url.format(manga_slug),
            }
        )
        if r.status_code != 200:
            return None

        mime_type = get_buffer_mime_type(r.content)
        if mime_type != 'text/html':
            return None

        soup = BeautifulSoup(r.text, 'lxml')

        data = dict(
            pages=[],
        )
        container = soup.select_one('.read-container, .reading-content')
        if container is None:
            return data

        for img_element in container.select('img.wp-manga-chapter-img'):
            if img_element.parent.name == 'noscript':
                # In case server uses a second <img> encapsulated in a <noscript> element
                continue

            data['pages'].append(dict(
                slug=None,
                image=self.extract_image_url(img_element),
                index=len(data['pages']) + 1,
            ))

        return data

    def get_manga_chapter_page_image(self, manga_slug, manga_name, chapter_slug, page):
        """
        Returns chapter page scan (image) content
        """
        r = self.session_get(
            page['image'],
            headers={
                'Referer': self.chapter_url.format(manga_slug, chapter_slug),
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

    def get_latest_updates(self):
        """
        Returns list of latest updates manga
        """
        return self.get_manga_list(orderby='latest')

    def get_most_populars(self):
        """
        Returns list of most viewed manga
        """
        return self.get_manga_list(orderby='populars')

    def get_manga_list(self, term=None, orderby=None, page=0):
        data = {
            'action': 'madara_load_more',
            'page': page,
            'template': 'madara-core/content/content-archive' if orderby else 'madara-core/content/content-search',
            'vars[orderby]': 'meta_value_num' if orderby else '',
            'vars[paged]': 1,
            'vars[template]': 'archive' if orderby else 'search',
            'vars[post_type]': 'wp-manga',
            'vars[post_status]': 'publish',
            'vars[manga_archives_item_layout]': 'default',
        }

        if self.medium:
            data['vars[meta_query][0][0][key]'] = '_wp_manga_chapter_type'
            data['vars[meta_query][0][0][value]'] = self.medium  # allows to ignore novels
            data['vars[meta_query][0][relation]'] = 'AND'
            data['vars[meta_query][relation]'] = 'AND'

        if orderby:
            data['vars[order]'] = 'desc'
            data['vars[posts_per_page]'] = 20
            if orderby == 'populars':
                data['vars[meta_key]'] = '_wp_manga_views'
            elif orderby == 'latest':
                data['vars[meta_key]'] = '_latest_update'
        else:
            data['vars[s]'] = term

        r = self.session_post(
            self.api_url,
            data=data,
            headers={
                'X-Requested-With': 'XMLHttpRequest',
                'Referer': self.base_url
            }
        )
        if r.status_code != 200:
            return None

        soup = BeautifulSoup(r.text, 'lxml')

        results = []
        for element in soup.select(self.popular_selector if orderby else self.results_selector):
            a_element = element.select_one(self.result_name_slug_selector)
            if a_element is None:
                continue

            slug = a_element.get('href').rstrip('/').split('/')[-1]
            name = a_element.text.strip()
            if not name or not slug:
                continue

            results.append(dict(
                slug=slug,
                name=name,
                cover=self.extract_image_url(element.select_one(self.result_cover_selector) or element.img),
            ))

        return results

    def search(self, term):
        return self.get_manga_list(term=term)
