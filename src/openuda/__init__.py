"""OpenUda: Yagi-Uda antenna design around an external NEC-2 solver."""

__version__ = "0.1.0"
