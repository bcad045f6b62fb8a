# SPDX-FileCopyrightText: 2019-2025 Valéry Febvre
# SPDX-License-Identifier: GPL-3.0-or-later
# Author: Valéry Febvre <vfebvre@easter-eggs.com>

import datetime

import pytest
import requests

from multisrc.servers.exceptions import ApiError
from multisrc.servers.utils import convert_date_string
from multisrc.servers.utils import get_allowed_servers_list
from multisrc.servers.utils import get_server_by_id
from multisrc.servers.utils import get_server_class_name_by_id
from multisrc.servers.utils import get_server_dir_name_by_id
from multisrc.servers.utils import get_server_main_id_by_id
from multisrc.servers.utils import get_server_module_name_by_id
from multisrc.servers.utils import get_servers_list
from multisrc.utils import log_error_traceback
from multisrc.utils import remove_number_leading_zero


@pytest.mark.parametrize('id, class_name, dir_name, main_id, module_name', [
    ('ravensscans', 'Ravensscans', 'ravensscans', 'ravensscans', 'ravensscans'),
    ('ravensscans_es', 'Ravensscans_es', 'ravensscans_es', 'ravensscans', 'ravensscans'),
    ('fenixscanlator__old', 'Fenixscanlator__old', 'fenixscanlator', 'fenixscanlator', 'fenixscanlator'),
    ('xkcd_fr:whatever', 'Xkcd_fr', 'xkcd_fr', 'xkcd', 'whatever'),
])
def test_server_id_helpers(id, class_name, dir_name, main_id, module_name):
    assert get_server_class_name_by_id(id) == class_name
    assert get_server_dir_name_by_id(id) == dir_name
    assert get_server_main_id_by_id(id) == main_id
    assert get_server_module_name_by_id(id) == module_name


def test_get_servers_list():
    servers = get_servers_list()

    assert [server['id'] for server in servers] == ['ravensscans', 'ravensscans_es', 'fenixscanlator', 'momonohanascan']

    fenix = servers[2]
    assert fenix['name'] == 'Fênix Scanlator'
    assert fenix['lang'] == 'pt_BR'
    assert fenix['version'] == 2
    assert fenix['class_name'] == 'Fenixscanlator'


def test_get_allowed_servers_list():
    servers = get_allowed_servers_list(languages=['pt_BR'])

    assert sorted(server['id'] for server in servers) == ['fenixscanlator', 'momonohanascan']


def test_get_server_by_id():
    server = get_server_by_id('ravensscans_es')
    assert server.lang == 'es'
    assert server.manga_url == 'https://ravens-scans.com/work/es/{0}'

    assert get_server_by_id('unknown') is None
    assert get_server_by_id('ravensscans_fr') is None


def test_get_manga_initial_data_from_url():
    from multisrc.servers.ravensscans import Ravensscans

    assert Ravensscans.get_manga_initial_data_from_url('https://ravens-scans.com/work/en/tales-of-demons?ref=1') == dict(slug='tales-of-demons')


def test_convert_date_string():
    assert convert_date_string('01/02/2021', format='%d/%m/%Y') == datetime.date(2021, 2, 1)
    assert convert_date_string('2020-05-01', format='%Y-%m-%d') == datetime.date(2020, 5, 1)
    assert convert_date_string('', format='%d/%m/%Y') is None


def test_remove_number_leading_zero():
    assert remove_number_leading_zero('0012') == '12'
    assert remove_number_leading_zero('3.50') == '3.5'


def test_log_error_traceback():
    assert log_error_traceback(ApiError('Boom')) == 'Error: Boom'
    assert log_error_traceback(requests.exceptions.ConnectionError()) == 'No Internet connection, timeout or server down'
    assert log_error_traceback(KeyError('name')) is None
