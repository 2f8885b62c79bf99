"""
Larder pantry engine.

The package matches recipe ingredients against household stock, tracks which
stock planned meals have reserved or claimed, and replans meals after schedule
disruptions.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
