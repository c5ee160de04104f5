"""
Parsers package — WIT text to typed syntax tree.

    parse_wit(contents, path)    → one WitDocument (or a positioned WitSyntaxError)
    resolve_world(documents)     → WitWorldModel for the root world
"""

from witdart.core.services.parsers.wit_parser import parse_wit
from witdart.core.services.parsers.wit_resolve import WitWorldModel, resolve_world

__all__ = ["WitWorldModel", "parse_wit", "resolve_world"]
