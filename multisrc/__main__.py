# SPDX-FileCopyrightText: 2019-2025 Valéry Febvre
# SPDX-License-Identifier: GPL-3.0-or-later

from multisrc.cli import cli

if __name__ == '__main__':
    cli()
