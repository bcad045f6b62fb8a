# SPDX-FileCopyrightText: 2019-2025 Valéry Febvre
# SPDX-License-Identifier: GPL-3.0-or-later
# Author: Valéry Febvre <vfebvre@easter-eggs.com>

import datetime
import importlib
import inspect
import logging
from operator import itemgetter
from pkgutil import iter_modules

from bs4 import NavigableString
import dateparser
import emoji

logger = logging.getLogger(__name__)

ALT_NAMES_PLACEHOLDERS = ('', 'N/A', 'Updating', 'Updating.')


def convert_date_string(date_string, format=None, languages=None):
    """
    Convert a date string into a date object

    :param date_string: A string representing date in a recognizably valid format
    :type date_string: str

    :param format: A format string using directives as given `here <https://docs.python.org/3/library/datetime.html#strftime-and-strptime-behavior>`_
    :type format: str

    :param languages: A list of language codes, e.g. ['en', 'es', 'pt_BR']
    :type languages: list

    :return: A date object representing parsed date string if successful, `None` otherwise
    :rtype: datetime.date
    """

    # Check if languages are supported by dateparser
    # And detect whether a language code should be treated as a locale code
    if languages:
        language_locale = dateparser.data.language_locale_dict
        supported_languages = set()
        supported_locales = set()

        for code in languages:
            if '_' in code:
                lang, country = code.split('_')
            else:
                lang, country = code, None

            if lang not in language_locale:
                # Not supported
                continue

            if country and f'{lang}-{country}' in language_locale[lang]:
                # Code is a locale code
                supported_locales.add(f'{lang}-{country}')

            supported_languages.add(lang)

        languages = list(supported_languages)
        locales = list(supported_locales)
    else:
        locales = None

    if format is not None:
        try:
            d = datetime.datetime.strptime(date_string, format)
        except Exception:
            d = dateparser.parse(date_string, languages=languages, locales=locales)
    else:
        d = dateparser.parse(date_string, languages=languages, locales=locales)

    return d.date() if d else None


def get_allowed_servers_list(languages=None, nsfw=False, nsfw_only=False):
    """
    Returns the list of servers matching languages and NSFW preferences

    :param languages: A list of languages codes, all languages if empty
    :type languages: list

    :param nsfw: Include servers with NSFW content
    :type nsfw: bool

    :param nsfw_only: Include servers with NSFW content only
    :type nsfw_only: bool

    :rtype: list of dict
    """
    servers = []
    for server_data in get_servers_list():
        if languages and server_data['lang'] and server_data['lang'] not in languages:
            continue

        if nsfw is False and server_data['is_nsfw']:
            continue
        if nsfw_only is False and server_data['is_nsfw_only']:
            continue

        servers.append(server_data)

    return servers


def get_server_by_id(id):
    """
    Returns an instance of the server identified by `id`, None if it doesn't exist
    """
    module_name = get_server_module_name_by_id(id)
    try:
        module = importlib.import_module(f'multisrc.servers.{module_name}')
    except ModuleNotFoundError:
        logger.warning('Unknown server: %s', id)
        return None

    server_class = getattr(module, get_server_class_name_by_id(id), None)
    if server_class is None:
        logger.warning('Unknown server: %s', id)
        return None

    return server_class()


def get_server_class_name_by_id(id):
    """
    Returns a server class name from its ID

    `id` must respect the following format: `name[_lang][_whatever][:module_name]`

    + `name` is the name of the server.
    + `lang` is the language of the server (optional).
        Only useful when server belongs to a multi-languages server.
    + `whatever` is any string (optional).
        Only useful when a server must be backed up because it's dead.
    + `module_name` is the name of the module in which the server is defined (optional).
        Only useful if `module_name` is different from `name`.

    :param id: A server ID
    :type id: str

    :return: The server class name corresponding to ID
    :rtype: str
    """
    return id.split(':')[0].capitalize()


def get_server_dir_name_by_id(id):
    name = id.split(':')[0]
    # Remove _whatever
    name = '_'.join(filter(None, name.split('_')[:2]))

    return name


def get_server_main_id_by_id(id):
    return id.split(':')[0].split('_')[0]


def get_server_module_name_by_id(id):
    return id.split(':')[-1].split('_')[0]


def get_servers_list(include_disabled=False, order_by=('lang', 'name')):
    servers = []
    for module in get_servers_modules():
        for _name, obj in dict(inspect.getmembers(module)).items():
            if not inspect.isclass(obj):
                continue
            if not hasattr(obj, 'id') or not hasattr(obj, 'name') or not hasattr(obj, 'lang'):
                continue
            if inspect.isabstract(obj):
                continue

            if not include_disabled and obj.status == 'disabled':
                continue

            servers.append(dict(
                id=obj.id,
                name=obj.name,
                lang=obj.lang,
                is_nsfw=obj.is_nsfw,
                is_nsfw_only=obj.is_nsfw_only,
                logo_url=obj.logo_url,
                version=obj.version,
                module=module,
                class_name=get_server_class_name_by_id(obj.id),
            ))

    return sorted(servers, key=itemgetter(*order_by))


def get_servers_modules(reload=False):
    def import_modules(namespace, modules):
        count = 0
        for _finder, module_name, ispkg in iter_modules(namespace.__path__, namespace.__name__ + '.'):
            if not ispkg or module_name.endswith('.multi'):
                continue

            module = importlib.import_module(module_name)
            if reload:
                module = importlib.reload(module)
            modules.append(module)
            count += 1

        return count

    import multisrc.servers

    modules = []
    if reload:
        # Multi-servers must be imported first
        import multisrc.servers.multi
        import_modules(multisrc.servers.multi, [])

    count = import_modules(multisrc.servers, modules)
    logger.debug('Import {0} servers modules'.format(count))

    return modules


def get_soup_element_inner_text(tag, text=None, recursive=True):
    """
    Returns inner text of a tag

    :param tag: A Tag
    :type tag: bs4.element.Tag

    :param text: A optional list of text strings to prepend
    :type text: list of str

    :param recursive: Recursively walk in children or not
    :type recursive: bool

    :return: The inner text of tag
    :rtype: str
    """
    if text is None:
        text = []

    for el in tag:
        if isinstance(el, NavigableString):
            text.append(el.strip())
        elif recursive:
            get_soup_element_inner_text(el, text)

    return ' '.join(text).strip()


def remove_emoji_from_string(text):
    """
    Removes Emojis from text (use emoji package)

    :param text: A text string
    :type text: str

    :return: The text string freed from Emojis
    :rtype: str
    """
    return emoji.replace_emoji(text, replace='').strip()
