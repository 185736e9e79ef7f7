"""
Network Design Planner
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later
"""
