# SPDX-FileCopyrightText: 2025-present DouglasMacKrell <d.mackrell@gmail.com>
#
# SPDX-License-Identifier: MIT

"""RatingMatrix - Episode rating reconciliation for TV series."""

from ratingmatrix.__about__ import __version__

__all__ = ["__version__"]
