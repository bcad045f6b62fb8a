# SPDX-FileCopyrightText: 2019-2025 Valéry Febvre
# SPDX-License-Identifier: GPL-3.0-or-later
# Author: Valéry Febvre <vfebvre@easter-eggs.com>

from multisrc.servers.multi.manga_stream import MangaStream


class Fenixscanlator(MangaStream):
    id = 'fenixscanlator'
    name = 'Fênix Scanlator'
    lang = 'pt_BR'
    version = 2  # Engine changed from Madara to MangaStream

    rate_limit = (1, 2)  # 1 request every 2 seconds

    base_url = 'https://fenixscanlator.xyz'
    date_format = '%B %d, %Y'

    alt_name = 'Nome alternativo: '
    authors_selector = '.tsinfo .imptdt:-soup-contains("Autor") i, .tsinfo .imptdt:-soup-contains("Artista") i'
    status_selector = '.tsinfo .imptdt:-soup-contains("Status") i'
