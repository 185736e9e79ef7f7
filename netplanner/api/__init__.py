"""
Network Design Planner - HTTP API
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later
"""
