# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Binary cursor, table directory, CFF machinery and shared value types."""
