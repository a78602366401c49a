#!/usr/bin/env python3

"""
Hardware Package for the XY Table
=================================

This package provides the link between the software and the table:
- table_controller: motion, status and program operations
- rcx_commands: RCX driver command lines
- position_reply: WHERE reply parsing
- serial_transport / mock_transport: real and simulated serial links
"""

__version__ = "1.0.0"
