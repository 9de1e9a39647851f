# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

# Keyboard event stages
# device level:
# stage 0: OS-specific; deliver one raw keyboard record per input notification
# stage 1: reassemble prefixed scan code sequences and disambiguate virtual keys
# stage 2: pack the normalized event into a 32-bit word for storage

# display level:
# stage 3: unpack and cross-reference against the key tables
