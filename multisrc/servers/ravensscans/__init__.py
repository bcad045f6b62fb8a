# SPDX-FileCopyrightText: 2019-2025 Valéry Febvre
# SPDX-License-Identifier: GPL-3.0-or-later
# Author: Valéry Febvre <vfebvre@easter-eggs.com>

from multisrc.servers.multi.readerfront import ReaderFront


class Ravensscans(ReaderFront):
    id = 'ravensscans'
    name = 'Ravens Scans'
    lang = 'en'

    base_url = 'https://ravens-scans.com'

    def get_image_cdn(self, path, width=350):
        # Images are served by Jetpack Photon CDN, spread over 3 hosts (i0, i1, i2)
        host = self.base_url.split('://')[-1]
        return 'https://i{0}.wp.com/{1}/{2}?strip=all&quality=100&w={3}'.format(sum(path.encode()) % 3, host, path, width)


class Ravensscans_es(Ravensscans):
    id = 'ravensscans_es'
    lang = 'es'
