# SPDX-FileCopyrightText: 2019-2025 Valéry Febvre
# SPDX-License-Identifier: GPL-3.0-or-later
# Author: Valéry Febvre <vfebvre@easter-eggs.com>

from multisrc.servers.multi.madara import Madara


class Momonohanascan(Madara):
    id = 'momonohanascan'
    name = 'Momo no Hana Scan'
    lang = 'pt_BR'

    rate_limit = (1, 2)  # 1 request every 2 seconds

    base_url = 'https://momonohanascan.com'
    date_format = '%d/%m/%Y'
    use_new_chapter_endpoint = True

    alt_name = 'Nome alternativo: '
    popular_selector = 'div.page-item-detail.manga'
