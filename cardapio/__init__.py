"""
                Cardapio Digital

Local persistence and domain rules for a digital restaurant menu:
clients browse restaurants and dishes, administrators manage them.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
