# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
dealscope Reporting Module

JSON export of calculation results and a tabular metric view.
"""

from .export import FRAME_COLUMNS, export_result_json, result_to_frame

__all__ = [
    "export_result_json",
    "result_to_frame",
    "FRAME_COLUMNS",
]
