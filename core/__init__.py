"""
Core modules for the XY Table Controller
========================================

This package contains the building blocks shared by the hardware layer:
- logger: centralized category logger
- exceptions: error kinds reported by the controller
- settings: settings.json loading and serial connection settings
- program_bundle: prog.txt / pars.txt loading for program upload
"""
