"""
moddetective - Bad Mod Detective

Inspects installed mods for known packaging and metadata defects and
reports all of them at once.
"""

__version__ = "0.1.0"
__author__ = "moddetective contributors"

from moddetective.detect import BadModReport, BadModsFound, collect, initialize
